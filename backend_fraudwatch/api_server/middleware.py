"""
HTTP middleware — CORS and request logging.

- CORS origins come from settings (CORS_ORIGINS, default "*").
- Every request is logged with method, path, status and duration.
"""

from __future__ import annotations

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from backend_fraudwatch.config.settings import Settings
from backend_fraudwatch.fraudwatch_logging import get_logger

logger = get_logger(__name__)


async def log_requests(request: Request, call_next):
    t0 = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "http_request",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - t0) * 1000, 2),
    )
    return response


def install_middleware(app: FastAPI, settings: Settings) -> None:
    origins = settings.cors_origins or ["*"]
    wildcard = origins == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentials with a wildcard origin.
        allow_credentials=not wildcard,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)
