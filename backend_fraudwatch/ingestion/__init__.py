"""
Ingestion — validate and record incoming transactions, score them, and hand
fraud reports to the alert dispatcher.
"""

from backend_fraudwatch.ingestion.orchestrator import (
    IngestionOrchestrator,
    SubmitResult,
    TransactionInput,
    validate_transaction_input,
)

__all__ = [
    "IngestionOrchestrator",
    "SubmitResult",
    "TransactionInput",
    "validate_transaction_input",
]
