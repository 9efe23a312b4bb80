"""
Storage layer — transaction ledger, fraud report store, and their owning context.

In-memory for the process lifetime; the classes keep storage behind small
append/read contracts so a durable backend can replace them.
"""

from backend_fraudwatch.database.context import FraudContext
from backend_fraudwatch.database.ledger import Ledger
from backend_fraudwatch.database.models import FraudEvidence, FraudReport, Transaction
from backend_fraudwatch.database.report_store import FraudReportStore

__all__ = [
    "FraudContext",
    "FraudEvidence",
    "FraudReport",
    "FraudReportStore",
    "Ledger",
    "Transaction",
]
