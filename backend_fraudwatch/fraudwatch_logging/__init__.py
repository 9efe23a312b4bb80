"""
Structured logging for the FraudWatch backend.

JSON logs with timestamp, event_type, and transaction/fraud fields.
Use get_logger() in all modules; configure_logging() applies Settings.
"""

from backend_fraudwatch.fraudwatch_logging.logger import (
    bind_transaction,
    configure_logging,
    get_logger,
)

__all__ = ["bind_transaction", "configure_logging", "get_logger"]
