"""
Pytest fixtures for FraudWatch tests. Each test gets a fresh FraudContext and
a dispatcher backed by an in-memory notifier (no SMTP).
"""

from __future__ import annotations

import pytest

from backend_fraudwatch.alerts import NotificationDispatcher
from backend_fraudwatch.config import Settings
from backend_fraudwatch.core.exceptions import NotificationDeliveryFailure
from backend_fraudwatch.database import FraudContext
from backend_fraudwatch.ingestion import IngestionOrchestrator


class RecordingNotifier:
    """Collects delivered reports; fails the first `fail_times` sends (all when fail_times < 0)."""

    def __init__(self, fail_times: int = 0) -> None:
        self.fail_times = fail_times
        self.attempts = 0
        self.sent = []

    def send(self, report) -> None:
        self.attempts += 1
        if self.fail_times < 0 or self.attempts <= self.fail_times:
            raise NotificationDeliveryFailure("simulated unreachable mail server")
        self.sent.append(report)


@pytest.fixture
def context():
    return FraudContext.create()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def failing_notifier():
    return RecordingNotifier(fail_times=-1)


def _dispatcher(notifier) -> NotificationDispatcher:
    return NotificationDispatcher(notifier, max_attempts=2, retry_backoff_sec=0.0, sleep=lambda _s: None)


@pytest.fixture
def dispatcher(notifier):
    d = _dispatcher(notifier)
    yield d
    d.shutdown(wait=True)


@pytest.fixture
def failing_dispatcher(failing_notifier):
    d = _dispatcher(failing_notifier)
    yield d
    d.shutdown(wait=True)


@pytest.fixture
def orchestrator(context, dispatcher):
    return IngestionOrchestrator(context, dispatcher=dispatcher)


@pytest.fixture
def settings():
    """Settings with email alerts unconfigured (no SMTP in tests)."""
    return Settings(alert_sender="", alert_recipient="", cors_origins=["*"])


@pytest.fixture
def client(settings, context, dispatcher):
    """FastAPI TestClient over a per-test app and context."""
    from fastapi.testclient import TestClient

    from backend_fraudwatch.api_server.server import create_app

    app = create_app(settings=settings, context=context, dispatcher=dispatcher)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_notifier():
    """RecordingNotifier class, for tests that need several or custom failure counts."""
    return RecordingNotifier
