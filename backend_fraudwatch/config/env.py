"""
Environment variable loading for FraudWatch.

- Loads .env from project root when available.
- Small typed readers used by settings.py; every value is stripped and empty
  strings fall back to the default.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable

from dotenv import load_dotenv

from backend_fraudwatch.fraudwatch_logging import get_logger

logger = get_logger(__name__)

# Project root: config is backend_fraudwatch/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

_TRUE_VALUES = ("1", "true", "yes", "on")


def load_fraudwatch_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides real env."""
    load_dotenv(_ENV_PATH, override=False)


def env_str(*names: str, default: str = "") -> str:
    """
    Return the first non-empty value among names.
    Order matters: the preferred name first, legacy aliases after.
    """
    for name in names:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return default


def _env_number(name: str, default: Any, cast: Callable[[str], Any]) -> Any:
    raw = env_str(name)
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("config_value_invalid", variable=name, value=raw, default=default)
        return default


def env_int(name: str, default: int) -> int:
    """Integer value; malformed values are logged and replaced by the default."""
    return _env_number(name, default, int)


def env_float(name: str, default: float) -> float:
    return _env_number(name, default, float)


def env_bool(name: str, default: bool) -> bool:
    raw = env_str(name).lower()
    if not raw:
        return default
    return raw in _TRUE_VALUES


def env_list(name: str, default: list[str]) -> list[str]:
    """Comma-separated list; blanks dropped."""
    raw = env_str(name)
    if not raw:
        return list(default)
    return [part.strip() for part in raw.split(",") if part.strip()]
