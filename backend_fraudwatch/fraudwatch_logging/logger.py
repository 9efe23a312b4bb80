"""
Structured logging for ingestion, scoring, and alert events.

Output is one record per event with an ISO timestamp, the level, the emitting
module under `logger`, and the snake_case event name under `event_type`.
Level and renderer come from Settings (LOG_LEVEL, LOG_FORMAT) via
configure_logging(), which create_app() calls once settings are loaded. Until
then a JSON/INFO default is active so import-time and script logging work.

Module loggers returned by get_logger() are lazy: they resolve the active
configuration on every call, so reconfiguring after import takes effect.

No backend_fraudwatch imports here; config imports this module.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "json"
LOG_FORMATS = ("json", "console")


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _rename_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog's `event` key becomes `event_type`."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "logger_name" in event_dict:
        event_dict["logger"] = event_dict.pop("logger_name")
    return event_dict


def level_value(level: str) -> int:
    """Map a level name (any case) to its logging constant; unknown names mean INFO."""
    value = logging.getLevelName((level or "").strip().upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: str = DEFAULT_LOG_LEVEL, fmt: str = DEFAULT_LOG_FORMAT) -> None:
    """
    (Re)configure structlog.

    level: DEBUG/INFO/WARNING/ERROR/CRITICAL; events below it are dropped.
    fmt: "json" for one JSON object per line, "console" for the dev renderer.
    """
    fmt = (fmt or DEFAULT_LOG_FORMAT).strip().lower()
    renderer: Any
    if fmt == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _add_timestamp,
            _rename_event,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_value(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> Any:
    """
    Return a lazy structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("fraud_detected", transaction_id=tid, same_ip=4)

    Output (JSON): {"event_type": "fraud_detected", "transaction_id": "...", "same_ip": 4,
    "timestamp": "...", "level": "info", "logger": "module.name"}
    """
    return structlog.get_logger(logger_name=name)


def bind_transaction(transaction_id: str) -> Any:
    """Logger with transaction_id bound to all subsequent log calls."""
    return get_logger("backend_fraudwatch.transaction").bind(transaction_id=transaction_id)
