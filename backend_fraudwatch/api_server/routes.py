"""
API route definitions — REST endpoints.

- POST /api/transactions: record and score a transaction.
- GET /api/transactions, GET /api/fraud-reports: full listings, no paging.
- POST /api/transactions/{transaction_id}/claim: claims hook.
- GET /health: liveness with counts.
State is read from request.app.state (set by create_app).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from backend_fraudwatch.core.exceptions import TransactionNotFound
from backend_fraudwatch.database import FraudContext
from backend_fraudwatch.ingestion import IngestionOrchestrator

router = APIRouter()


def get_orchestrator(request: Request) -> IngestionOrchestrator:
    """Dependency: the app-owned orchestrator."""
    return request.app.state.orchestrator


def get_context(request: Request) -> FraudContext:
    return request.app.state.orchestrator.context


@router.post("/api/transactions", tags=["Transactions"])
def submit_transaction(
    payload: Any = Body(None),
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """
    Record and score a transaction.
    200 {status: success, message, fraud} or 400 {status: error, code, message, errors}.
    """
    result = orchestrator.submit(payload)
    return JSONResponse(
        status_code=200 if result.accepted else 400,
        content=result.to_response(),
    )


@router.get("/api/transactions", tags=["Transactions"])
def list_transactions(context: FraudContext = Depends(get_context)) -> list[dict[str, Any]]:
    """Full ledger in arrival order."""
    return [tx.to_dict() for tx in context.ledger.all()]


@router.get("/api/fraud-reports", tags=["Fraud Reports"])
def list_fraud_reports(context: FraudContext = Depends(get_context)) -> list[dict[str, Any]]:
    """Full fraud report store in creation order."""
    return [report.to_dict() for report in context.reports.all()]


@router.post("/api/transactions/{transaction_id}/claim", tags=["Transactions"])
def claim_transaction(
    transaction_id: str,
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """Mark a recorded transaction as claimed; 404 if unknown."""
    try:
        transaction = orchestrator.claim(transaction_id.strip())
    except TransactionNotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
    return transaction.to_dict()


@router.get("/health")
def health(context: FraudContext = Depends(get_context)) -> dict[str, Any]:
    """Liveness probe: API is up."""
    return {
        "status": "ok",
        "transactions": len(context.ledger),
        "fraud_reports": len(context.reports),
    }
