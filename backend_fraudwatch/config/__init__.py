"""
Configuration management for the FraudWatch backend.

Loads settings from environment variables and the optional .env file.
Exposes a single source of truth for service configuration.
"""

from backend_fraudwatch.config.settings import (  # noqa: F401
    Settings,
    check_notification_config,
    get_settings,
)

__all__ = ["Settings", "check_notification_config", "get_settings"]
