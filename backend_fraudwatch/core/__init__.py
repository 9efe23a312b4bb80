"""
Core utilities — domain exceptions shared by ingestion, alerts, and the API.
"""

from backend_fraudwatch.core.exceptions import (
    ConfigurationMissing,
    FraudWatchError,
    InvalidInput,
    NotificationDeliveryFailure,
    TransactionNotFound,
)

__all__ = [
    "ConfigurationMissing",
    "FraudWatchError",
    "InvalidInput",
    "NotificationDeliveryFailure",
    "TransactionNotFound",
]
