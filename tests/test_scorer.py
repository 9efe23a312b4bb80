"""
Tests for the rule-based fraud scorer (analysis_engine.scorer).

Ledgers are built directly; the candidate is always appended before evaluation,
as in the ingestion pipeline.
"""

from __future__ import annotations

from datetime import datetime, timezone

from backend_fraudwatch.analysis_engine.fees import compute_fees
from backend_fraudwatch.analysis_engine.scorer import (
    FRAUD_TYPE_SUSPICIOUS_PATTERN,
    RECENT_WINDOW_SIZE,
    FraudScorer,
    evaluate_transaction,
)
from backend_fraudwatch.database import Ledger, Transaction

_seq = iter(range(1_000_000))


def _tx(ip: str | None = None, device_id: str | None = None, payer_id: str | None = None) -> Transaction:
    """Transaction with unique ip/device/payer unless given."""
    n = next(_seq)
    fees = compute_fees(50.0)
    return Transaction(
        amount=50.0,
        ip=ip or f"ip-{n}",
        device_id=device_id or f"dev-{n}",
        payer_id=payer_id or f"payer-{n}",
        insurance_fee=fees.insurance_fee,
        platform_fee=fees.platform_fee,
        seller_share=fees.seller_share,
    )


def _append_and_score(ledger: Ledger, tx: Transaction):
    recorded = ledger.append(tx)
    return FraudScorer().evaluate(recorded, ledger)


def test_single_transaction_never_fires():
    ledger = Ledger()
    assert _append_and_score(ledger, _tx(ip="1.1.1.1", device_id="d1", payer_id="p1")) is None


def test_three_same_ip_does_not_fire():
    """Count 3 is at the limit, not above it."""
    ledger = Ledger()
    verdicts = [_append_and_score(ledger, _tx(ip="9.9.9.9")) for _ in range(3)]
    assert verdicts == [None, None, None]


def test_fourth_same_ip_fires_counting_candidate():
    """Three earlier + the candidate itself = 4 > 3."""
    ledger = Ledger()
    for _ in range(3):
        _append_and_score(ledger, _tx(ip="9.9.9.9"))
    verdict = _append_and_score(ledger, _tx(ip="9.9.9.9"))
    assert verdict is not None
    assert verdict.fraud_type == FRAUD_TYPE_SUSPICIOUS_PATTERN
    assert verdict.evidence.same_ip == 4
    assert verdict.evidence.same_device == 1
    assert verdict.evidence.claim_count == 0
    assert verdict.evidence.ip == "9.9.9.9"
    assert verdict.triggered_rules == ("same_ip",)


def test_fourth_same_device_fires():
    ledger = Ledger()
    for _ in range(3):
        _append_and_score(ledger, _tx(device_id="shared-dev"))
    verdict = _append_and_score(ledger, _tx(device_id="shared-dev"))
    assert verdict is not None
    assert verdict.evidence.same_device == 4
    assert verdict.evidence.device_id == "shared-dev"
    assert verdict.triggered_rules == ("same_device",)


def test_multiple_rules_listed():
    ledger = Ledger()
    for _ in range(4):
        verdict = _append_and_score(ledger, _tx(ip="7.7.7.7", device_id="d7"))
    assert verdict.triggered_rules == ("same_ip", "same_device")


def test_window_excludes_oldest_entry():
    """
    21 entries: oldest three share ip A, then 17 unrelated, then candidate with ip A.
    The window (last 20) drops entry 1, so sameIP = 3 and nothing fires.
    """
    ledger = Ledger()
    for _ in range(3):
        ledger.append(_tx(ip="A"))
    for _ in range(17):
        ledger.append(_tx())
    assert len(ledger) == 20
    verdict = _append_and_score(ledger, _tx(ip="A"))
    assert len(ledger) == 21
    assert verdict is None
    window = ledger.recent_window(RECENT_WINDOW_SIZE)
    assert len(window) == 20
    assert window[0] is ledger.all()[1]


def test_window_counts_entries_inside_window():
    """Same layout shifted by one: all four A entries are within the last 20 -> fires with sameIP 4."""
    ledger = Ledger()
    ledger.append(_tx())
    for _ in range(3):
        ledger.append(_tx(ip="A"))
    for _ in range(16):
        ledger.append(_tx())
    verdict = _append_and_score(ledger, _tx(ip="A"))
    assert verdict is not None
    assert verdict.evidence.same_ip == 4


def test_twenty_unrelated_then_candidate():
    """With 20 prior unrelated entries the 21st sees only itself."""
    ledger = Ledger()
    for _ in range(20):
        ledger.append(_tx())
    candidate = _tx(ip="B", device_id="dB")
    assert _append_and_score(ledger, candidate) is None
    window = ledger.recent_window(RECENT_WINDOW_SIZE)
    assert sum(1 for t in window if t.ip == "B") == 1


def test_payer_claims_fire_on_fourth():
    ledger = Ledger()
    prior = [ledger.append(_tx(payer_id="pX")) for _ in range(3)]
    for tx in prior:
        ledger.mark_claimed(tx.transaction_id)
    verdict = _append_and_score(ledger, _tx(payer_id="pX"))
    assert verdict is not None
    assert verdict.evidence.claim_count == 3
    assert verdict.triggered_rules == ("payer_claims",)


def test_payer_without_claims_does_not_fire():
    ledger = Ledger()
    for _ in range(3):
        ledger.append(_tx(payer_id="pX"))
    assert _append_and_score(ledger, _tx(payer_id="pX")) is None


def test_two_claims_do_not_fire():
    ledger = Ledger()
    prior = [ledger.append(_tx(payer_id="pY")) for _ in range(2)]
    for tx in prior:
        ledger.mark_claimed(tx.transaction_id)
    assert _append_and_score(ledger, _tx(payer_id="pY")) is None


def test_payer_claims_use_full_history():
    """Claimed entries older than the recent window still count."""
    ledger = Ledger()
    prior = [ledger.append(_tx(payer_id="pZ")) for _ in range(3)]
    for tx in prior:
        ledger.mark_claimed(tx.transaction_id)
    for _ in range(30):
        ledger.append(_tx())
    verdict = _append_and_score(ledger, _tx(payer_id="pZ"))
    assert verdict is not None
    assert verdict.evidence.claim_count == 3
    assert verdict.evidence.same_ip == 1


def test_evaluate_is_deterministic():
    ledger = Ledger()
    for _ in range(5):
        candidate = ledger.append(_tx(ip="5.5.5.5"))
    first = evaluate_transaction(candidate, ledger)
    second = evaluate_transaction(candidate, ledger)
    assert first is not None
    assert first == second
    assert first.evidence.same_ip == 5


def test_verdict_to_report_copies_transaction():
    ledger = Ledger()
    for _ in range(4):
        candidate = ledger.append(_tx(ip="6.6.6.6"))
    verdict = evaluate_transaction(candidate, ledger)
    created = datetime(2026, 1, 1, tzinfo=timezone.utc)
    report = verdict.to_report(candidate, created)
    assert report.timestamp == created
    assert report.transaction == candidate
    assert report.transaction is not candidate
    assert report.evidence.to_dict()["sameIP"] == 4
