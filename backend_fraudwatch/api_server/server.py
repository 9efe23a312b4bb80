"""
FastAPI server — app factory and lifecycle.

create_app() wires settings, one FraudContext (ledger + report store), the
alert dispatcher, and the ingestion orchestrator into app.state, then mounts
the routes. Nothing is held in module globals, so each app (and each test)
has isolated state.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from backend_fraudwatch import __version__
from backend_fraudwatch.alerts import NotificationDispatcher, build_notifier
from backend_fraudwatch.api_server.middleware import install_middleware
from backend_fraudwatch.api_server.routes import router
from backend_fraudwatch.config.settings import Settings, get_settings
from backend_fraudwatch.database import FraudContext
from backend_fraudwatch.fraudwatch_logging import configure_logging, get_logger
from backend_fraudwatch.ingestion import IngestionOrchestrator

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Lifespan: log startup, drain alert dispatcher on shutdown
# -----------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info(
        "api_startup",
        version=__version__,
        notifications_enabled=settings.notifications_enabled,
        cors_origins=settings.cors_origins,
    )

    yield

    app.state.dispatcher.shutdown(wait=True)
    logger.info("api_shutdown")


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies (e.g. invalid JSON) get the API's 400 error shape instead of 422."""
    logger.info("http_request_invalid", path=request.url.path, error_count=len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={"status": "error", "message": "Malformed request body"},
    )


def create_app(
    settings: Settings | None = None,
    context: FraudContext | None = None,
    notifier: Any | None = None,
    dispatcher: Any | None = None,
) -> FastAPI:
    """
    Build the app with its own state.

    Args:
        settings: Defaults to get_settings().
        context: Defaults to a fresh FraudContext.
        notifier: Object with send(report); defaults to EmailNotifier when
            sender and recipient are configured, otherwise alerts are skipped.
        dispatcher: Replaces the NotificationDispatcher entirely.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)
    context = context or FraudContext.create()
    if dispatcher is None:
        if notifier is None:
            notifier = build_notifier(settings)
        dispatcher = NotificationDispatcher(
            notifier,
            max_attempts=settings.notify_max_attempts,
            retry_backoff_sec=settings.notify_retry_backoff_sec,
            max_workers=settings.notify_workers,
        )

    app = FastAPI(
        title="FraudWatch API",
        description="Transaction intake with history-based fraud flagging.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.dispatcher = dispatcher
    app.state.orchestrator = IngestionOrchestrator(context, dispatcher=dispatcher)

    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    install_middleware(app, settings)
    app.include_router(router)
    return app
