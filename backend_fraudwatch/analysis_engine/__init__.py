"""
Analysis engine — fee split and history-based fraud scoring.

Consumes recorded transactions and the ledger; produces fee breakdowns and
optional fraud verdicts. Rule-based and deterministic.
"""

from backend_fraudwatch.analysis_engine.fees import FeeBreakdown, compute_fees
from backend_fraudwatch.analysis_engine.scorer import (
    FRAUD_TYPE_SUSPICIOUS_PATTERN,
    FraudScorer,
    FraudVerdict,
    evaluate_transaction,
)

__all__ = [
    "FeeBreakdown",
    "compute_fees",
    "FRAUD_TYPE_SUSPICIOUS_PATTERN",
    "FraudScorer",
    "FraudVerdict",
    "evaluate_transaction",
]
