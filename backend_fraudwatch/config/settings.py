"""
Application settings and environment configuration.

Responsibilities:
- Load configuration from environment variables and the project .env file.
- Provide defaults for optional settings (API bind, CORS, SMTP transport, retry).
- Detect missing notification identity at startup. Missing sender or recipient
  is a warning, never fatal: fraud detection keeps running, alerts are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from backend_fraudwatch.config.env import (
    env_bool,
    env_float,
    env_int,
    env_list,
    env_str,
    load_fraudwatch_env,
)
from backend_fraudwatch.core.exceptions import ConfigurationMissing
from backend_fraudwatch.fraudwatch_logging import get_logger

logger = get_logger(__name__)

DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8000
DEFAULT_SMTP_HOST = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 587
DEFAULT_SMTP_TIMEOUT_SEC = 10.0
DEFAULT_NOTIFY_MAX_ATTEMPTS = 3
DEFAULT_NOTIFY_RETRY_BACKOFF_SEC = 1.0
DEFAULT_NOTIFY_WORKERS = 2


@dataclass
class Settings:
    """Typed service settings. Build with get_settings(); construct directly in tests."""

    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT
    log_level: str = "INFO"
    log_format: str = "json"
    """"json" or "console"; applied to structlog by configure_logging()."""
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    smtp_host: str = DEFAULT_SMTP_HOST
    smtp_port: int = DEFAULT_SMTP_PORT
    smtp_use_tls: bool = True
    smtp_timeout_sec: float = DEFAULT_SMTP_TIMEOUT_SEC
    alert_sender: str = ""
    """Sender identity (From address and SMTP login user)."""
    alert_password: str = ""
    alert_recipient: str = ""

    notify_max_attempts: int = DEFAULT_NOTIFY_MAX_ATTEMPTS
    notify_retry_backoff_sec: float = DEFAULT_NOTIFY_RETRY_BACKOFF_SEC
    notify_workers: int = DEFAULT_NOTIFY_WORKERS

    def __post_init__(self) -> None:
        self.notify_max_attempts = max(1, int(self.notify_max_attempts))
        self.notify_workers = max(1, int(self.notify_workers))
        self.smtp_timeout_sec = max(0.1, float(self.smtp_timeout_sec))

    def missing_notification_config(self) -> list[str]:
        """Names of required notification settings that are empty."""
        missing = []
        if not self.alert_sender:
            missing.append("ALERT_EMAIL_FROM")
        if not self.alert_recipient:
            missing.append("ALERT_EMAIL_TO")
        return missing

    @property
    def notifications_enabled(self) -> bool:
        return not self.missing_notification_config()


def get_settings() -> Settings:
    """
    Return settings read from the environment (and .env).

    Not cached: each call re-reads the environment, so tests can monkeypatch
    variables and build a fresh app.
    """
    load_fraudwatch_env()
    return Settings(
        api_host=env_str("API_HOST", default=DEFAULT_API_HOST),
        api_port=env_int("API_PORT", DEFAULT_API_PORT),
        log_level=env_str("LOG_LEVEL", default="INFO").upper(),
        log_format=env_str("LOG_FORMAT", default="json").lower(),
        cors_origins=env_list("CORS_ORIGINS", ["*"]),
        smtp_host=env_str("SMTP_HOST", "SMTP_SERVER", default=DEFAULT_SMTP_HOST),
        smtp_port=env_int("SMTP_PORT", DEFAULT_SMTP_PORT),
        smtp_use_tls=env_bool("SMTP_USE_TLS", True),
        smtp_timeout_sec=env_float("SMTP_TIMEOUT_SEC", DEFAULT_SMTP_TIMEOUT_SEC),
        alert_sender=env_str("ALERT_EMAIL_FROM", "EMAIL_USER"),
        alert_password=env_str("ALERT_EMAIL_PASSWORD", "EMAIL_PASS"),
        alert_recipient=env_str("ALERT_EMAIL_TO", "REPORT_EMAIL"),
        notify_max_attempts=env_int("NOTIFY_MAX_ATTEMPTS", DEFAULT_NOTIFY_MAX_ATTEMPTS),
        notify_retry_backoff_sec=env_float("NOTIFY_RETRY_BACKOFF_SEC", DEFAULT_NOTIFY_RETRY_BACKOFF_SEC),
        notify_workers=env_int("NOTIFY_WORKERS", DEFAULT_NOTIFY_WORKERS),
    )


def check_notification_config(settings: Settings) -> bool:
    """
    Startup check for sender/recipient identity.
    Logs a configuration_missing warning and returns False when incomplete.
    """
    missing = settings.missing_notification_config()
    if not missing:
        return True
    err = ConfigurationMissing(missing)
    logger.warning(
        "notification_config_missing",
        error_code=err.code,
        missing=missing,
        detail="Fraud detection continues; email alerts are disabled",
    )
    return False
