"""
Rule-based fraud scoring against ledger history.

Three velocity/repeat signals, evaluated after the candidate has been appended
to the ledger (so every count includes the candidate itself when it matches):

- same_ip: entries in the recent window sharing the candidate's IP.
- same_device: entries in the recent window sharing the candidate's device.
- payer_claims: entries in the whole ledger for the same payer already claimed.

The window size and limits are fixed constants, not tunables. Evaluation is
deterministic: no randomness and no clock reads, timestamps are metadata only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from backend_fraudwatch.database.ledger import Ledger
from backend_fraudwatch.database.models import FraudEvidence, FraudReport, Transaction
from backend_fraudwatch.fraudwatch_logging import get_logger

logger = get_logger(__name__)

FRAUD_TYPE_SUSPICIOUS_PATTERN = "Suspicious Pattern Detected"

RECENT_WINDOW_SIZE = 20
# Verdict fires when a count is strictly above its limit.
SAME_IP_LIMIT = 3
SAME_DEVICE_LIMIT = 3
PAYER_CLAIM_LIMIT = 2

RULE_SAME_IP = "same_ip"
RULE_SAME_DEVICE = "same_device"
RULE_PAYER_CLAIMS = "payer_claims"


@dataclass(frozen=True)
class FraudVerdict:
    """
    Positive scorer output for one transaction.

    `triggered_rules` names which limits were exceeded; it is explanatory only,
    the verdict itself is the OR of all three rules.
    """

    fraud_type: str
    evidence: FraudEvidence
    triggered_rules: tuple[str, ...]

    def to_report(self, transaction: Transaction, created_at: datetime) -> FraudReport:
        return FraudReport(
            fraud_type=self.fraud_type,
            evidence=self.evidence,
            transaction=transaction.snapshot(),
            timestamp=created_at,
            triggered_rules=self.triggered_rules,
        )


class FraudScorer:
    """Evaluates a just-appended transaction against the ledger."""

    def evaluate(self, candidate: Transaction, ledger: Ledger) -> FraudVerdict | None:
        window = ledger.recent_window(RECENT_WINDOW_SIZE)
        same_ip = sum(1 for tx in window if tx.ip == candidate.ip)
        same_device = sum(1 for tx in window if tx.device_id == candidate.device_id)
        claim_count = sum(
            1 for tx in ledger.all() if tx.payer_id == candidate.payer_id and tx.claimed
        )

        triggered = []
        if same_ip > SAME_IP_LIMIT:
            triggered.append(RULE_SAME_IP)
        if same_device > SAME_DEVICE_LIMIT:
            triggered.append(RULE_SAME_DEVICE)
        if claim_count > PAYER_CLAIM_LIMIT:
            triggered.append(RULE_PAYER_CLAIMS)
        if not triggered:
            return None

        logger.debug(
            "fraud_rules_triggered",
            transaction_id=candidate.transaction_id,
            rules=triggered,
            same_ip=same_ip,
            same_device=same_device,
            claim_count=claim_count,
            window_size=len(window),
        )
        return FraudVerdict(
            fraud_type=FRAUD_TYPE_SUSPICIOUS_PATTERN,
            evidence=FraudEvidence(
                ip=candidate.ip,
                device_id=candidate.device_id,
                same_ip=same_ip,
                same_device=same_device,
                claim_count=claim_count,
            ),
            triggered_rules=tuple(triggered),
        )


_default_scorer = FraudScorer()


def evaluate_transaction(candidate: Transaction, ledger: Ledger) -> FraudVerdict | None:
    """Evaluate with the default scorer."""
    return _default_scorer.evaluate(candidate, ledger)
