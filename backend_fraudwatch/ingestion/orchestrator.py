"""
Ingestion pipeline: validate -> fees -> ledger append -> score -> report -> notify.

One lock serializes "append + evaluate + record report" so that a candidate is
always scored against a ledger that contains it and nothing appended after it.
Fee computation runs before the lock (pure, transaction-local) and alert
delivery is dispatched after it (slow, may fail). Validation failures return
before any state is touched; notification problems never change the result.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from backend_fraudwatch.analysis_engine.fees import compute_fees
from backend_fraudwatch.analysis_engine.scorer import FraudScorer
from backend_fraudwatch.core.exceptions import InvalidInput
from backend_fraudwatch.database.context import FraudContext
from backend_fraudwatch.database.models import FraudReport, Transaction
from backend_fraudwatch.fraudwatch_logging import bind_transaction, get_logger

logger = get_logger(__name__)

MESSAGE_RECORDED = "Transaction recorded"
MESSAGE_FLAGGED = "Transaction recorded and flagged for review"


class TransactionInput(BaseModel):
    """
    Inbound transaction payload.

    Strict: amount must be a real JSON number (no numeric strings, no booleans),
    finite and positive; identifiers must be non-empty strings.
    """

    model_config = ConfigDict(
        strict=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    amount: float = Field(..., gt=0, allow_inf_nan=False)
    ip: str = Field(..., min_length=1)
    device_id: str = Field(..., min_length=1, alias="deviceId")
    payer_id: str = Field(..., min_length=1, alias="payerId")


def _format_errors(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]) or "body",
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors(include_url=False)
    ]


def validate_transaction_input(raw: Any) -> TransactionInput:
    """Parse raw payload; raises InvalidInput with field-level details."""
    try:
        return TransactionInput.model_validate(raw)
    except ValidationError as e:
        errors = _format_errors(e)
        summary = "; ".join(f"{err['field']}: {err['message']}" for err in errors)
        raise InvalidInput(f"Invalid transaction: {summary}", errors=errors) from e


@dataclass
class SubmitResult:
    accepted: bool
    fraud_detected: bool
    error: InvalidInput | None = None
    transaction: Transaction | None = None
    report: FraudReport | None = None

    def to_response(self) -> dict[str, Any]:
        """Transport body: {status, message, fraud} or {status, code, message, errors}."""
        if not self.accepted:
            error = self.error or InvalidInput("Invalid transaction")
            return {"status": "error", **error.to_dict()}
        return {
            "status": "success",
            "message": MESSAGE_FLAGGED if self.fraud_detected else MESSAGE_RECORDED,
            "fraud": self.fraud_detected,
        }


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IngestionOrchestrator:
    """
    Owns the submission pipeline over an injected FraudContext.

    dispatcher: object with dispatch(report), typically NotificationDispatcher; None disables alerts.
    """

    def __init__(
        self,
        context: FraudContext,
        scorer: FraudScorer | None = None,
        dispatcher: Any | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.context = context
        self.scorer = scorer or FraudScorer()
        self.dispatcher = dispatcher
        self._clock = clock
        self._lock = threading.Lock()

    def submit(self, raw: Any) -> SubmitResult:
        try:
            payload = validate_transaction_input(raw)
        except InvalidInput as e:
            logger.info("transaction_rejected", error_code=e.code, errors=e.errors)
            return SubmitResult(accepted=False, fraud_detected=False, error=e)

        fees = compute_fees(payload.amount)
        transaction = Transaction(
            amount=payload.amount,
            ip=payload.ip,
            device_id=payload.device_id,
            payer_id=payload.payer_id,
            insurance_fee=fees.insurance_fee,
            platform_fee=fees.platform_fee,
            seller_share=fees.seller_share,
            claimed=False,
        )

        report: FraudReport | None = None
        with self._lock:
            recorded = self.context.ledger.append(transaction)
            verdict = self.scorer.evaluate(recorded, self.context.ledger)
            if verdict is not None:
                report = verdict.to_report(recorded, self._clock())
                self.context.reports.append(report)

        log = bind_transaction(recorded.transaction_id)
        log.info(
            "transaction_recorded",
            amount=recorded.amount,
            insurance_fee=recorded.insurance_fee,
            payer_id=recorded.payer_id,
        )
        if report is not None:
            ev = report.evidence
            log.warning(
                "fraud_detected",
                fraud_type=report.fraud_type,
                rules=list(report.triggered_rules),
                ip=ev.ip,
                device_id=ev.device_id,
                same_ip=ev.same_ip,
                same_device=ev.same_device,
                claim_count=ev.claim_count,
            )
            self._notify(report)

        return SubmitResult(
            accepted=True,
            fraud_detected=report is not None,
            transaction=recorded,
            report=report,
        )

    def _notify(self, report: FraudReport) -> None:
        if self.dispatcher is None:
            return
        try:
            self.dispatcher.dispatch(report)
        except Exception as e:
            logger.error(
                "fraud_alert_dispatch_error",
                transaction_id=report.transaction.transaction_id,
                error=str(e),
            )

    def claim(self, transaction_id: str) -> Transaction:
        """
        Claims hook: mark a recorded transaction as claimed.
        Serialized with submissions so an evaluation never sees a half-applied claim.
        Raises TransactionNotFound.
        """
        with self._lock:
            return self.context.ledger.mark_claimed(transaction_id)
