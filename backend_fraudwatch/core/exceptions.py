"""
Application-level exceptions.

Each error carries a stable code so the API and the notification worker can
report it consistently. None of these abort the process: InvalidInput is
surfaced to the caller, the rest are logged where they are caught.
"""

from __future__ import annotations

from typing import Any


class FraudWatchError(Exception):
    """Base class for FraudWatch domain errors."""

    code = "fraudwatch_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class InvalidInput(FraudWatchError):
    """Missing or malformed transaction fields; nothing was recorded."""

    code = "invalid_input"

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []
        """Field-level details (loc, msg) from validation."""

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["errors"] = self.errors
        return out


class TransactionNotFound(FraudWatchError):
    code = "transaction_not_found"


class NotificationDeliveryFailure(FraudWatchError):
    """Outbound alert could not be delivered. Logged and recovered."""

    code = "notification_delivery_failure"


class ConfigurationMissing(FraudWatchError):
    """Sender or recipient identity absent; notification degrades to a no-op."""

    code = "configuration_missing"

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing notification configuration: {', '.join(missing)}")
        self.missing = missing
