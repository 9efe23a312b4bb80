"""
Domain models for ledger entries and fraud reports.

Plain dataclasses with no storage coupling, so the in-memory ledger can later
be swapped for a durable backend. Wire representations use the camelCase keys
the HTTP API exposes.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def _iso(ts: datetime | None) -> str | None:
    return ts.isoformat() if ts is not None else None


@dataclass
class Transaction:
    """
    Single recorded payment transaction.

    Immutable once appended to the ledger except for `claimed`, which only the
    claims process sets. `timestamp` and `transaction_id` are assigned by the
    ledger at append time.
    """

    amount: float
    ip: str
    device_id: str
    payer_id: str
    insurance_fee: float
    platform_fee: float
    seller_share: float
    claimed: bool = False
    timestamp: datetime | None = None
    transaction_id: str | None = None

    def snapshot(self) -> Transaction:
        """Detached value copy; later claim updates do not reach it."""
        return dataclasses.replace(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "transactionId": self.transaction_id,
            "amount": self.amount,
            "ip": self.ip,
            "deviceId": self.device_id,
            "payerId": self.payer_id,
            "insuranceFee": self.insurance_fee,
            "platformFee": self.platform_fee,
            "sellerShare": self.seller_share,
            "claimed": self.claimed,
            "timestamp": _iso(self.timestamp),
        }


@dataclass(frozen=True)
class FraudEvidence:
    """Signal values that triggered a verdict."""

    ip: str
    device_id: str
    same_ip: int
    same_device: int
    claim_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "ip": self.ip,
            "deviceId": self.device_id,
            "sameIP": self.same_ip,
            "sameDevice": self.same_device,
            "claimCount": self.claim_count,
        }


@dataclass(frozen=True)
class FraudReport:
    """
    Fraud verdict for one transaction, kept in the report store.

    Holds a value copy of the triggering transaction, not a live link.
    """

    fraud_type: str
    evidence: FraudEvidence
    transaction: Transaction
    timestamp: datetime
    """When the report was created; may trail the transaction timestamp slightly."""
    triggered_rules: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        out = self.transaction.to_dict()
        out["transactionTimestamp"] = out.pop("timestamp")
        out.update(
            {
                "fraudType": self.fraud_type,
                "evidence": self.evidence.to_dict(),
                "triggeredRules": list(self.triggered_rules),
                "timestamp": _iso(self.timestamp),
            }
        )
        return out
