"""
Tests for fraud alert rendering, SMTP delivery, and background dispatch.

smtplib.SMTP is mocked; no network.
"""

from __future__ import annotations

import smtplib
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from backend_fraudwatch.alerts import (
    EmailNotifier,
    NotificationDispatcher,
    build_notifier,
    render_fraud_alert,
)
from backend_fraudwatch.config import Settings
from backend_fraudwatch.core.exceptions import NotificationDeliveryFailure
from backend_fraudwatch.database import FraudEvidence, FraudReport, Transaction

FIXED_TS = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _report() -> FraudReport:
    tx = Transaction(
        amount=100.0,
        ip="9.9.9.9",
        device_id="d4",
        payer_id="p4",
        insurance_fee=2.0,
        platform_fee=0.5,
        seller_share=1.5,
        timestamp=FIXED_TS,
        transaction_id="tx-42",
    )
    return FraudReport(
        fraud_type="Suspicious Pattern Detected",
        evidence=FraudEvidence(ip="9.9.9.9", device_id="d4", same_ip=4, same_device=1, claim_count=0),
        transaction=tx,
        timestamp=FIXED_TS,
        triggered_rules=("same_ip",),
    )


def _email_settings(**overrides) -> Settings:
    values = dict(
        smtp_host="smtp.example.com",
        smtp_port=2525,
        smtp_timeout_sec=5.0,
        alert_sender="alerts@example.com",
        alert_password="secret",
        alert_recipient="reviewer@example.com",
    )
    values.update(overrides)
    return Settings(**values)


# --- Rendering ---


def test_render_fraud_alert():
    subject, body = render_fraud_alert(_report())
    assert subject == "Fraud Alert: Suspicious Pattern Detected"
    assert "tx-42" in body
    assert "9.9.9.9" in body
    assert '"sameIP": 4' in body
    assert "same_ip" in body


def test_build_message_headers():
    message = EmailNotifier(_email_settings()).build_message(_report())
    assert message["From"] == "alerts@example.com"
    assert message["To"] == "reviewer@example.com"
    assert message["Subject"].startswith("Fraud Alert")


# --- SMTP delivery ---


def test_send_uses_starttls_login_and_timeout():
    with patch("backend_fraudwatch.alerts.notifier.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value
        EmailNotifier(_email_settings()).send(_report())
    smtp_cls.assert_called_once_with("smtp.example.com", 2525, timeout=5.0)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("alerts@example.com", "secret")
    server.send_message.assert_called_once()


def test_send_without_tls_or_password():
    settings = _email_settings(smtp_use_tls=False, alert_password="")
    with patch("backend_fraudwatch.alerts.notifier.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value
        EmailNotifier(settings).send(_report())
    server.starttls.assert_not_called()
    server.login.assert_not_called()
    server.send_message.assert_called_once()


@pytest.mark.parametrize(
    "error",
    [ConnectionRefusedError("refused"), TimeoutError("timed out"), smtplib.SMTPAuthenticationError(535, b"bad")],
)
def test_send_failure_raises_delivery_failure(error):
    with patch("backend_fraudwatch.alerts.notifier.smtplib.SMTP", side_effect=error):
        with pytest.raises(NotificationDeliveryFailure):
            EmailNotifier(_email_settings()).send(_report())


def test_build_notifier_missing_config():
    assert build_notifier(Settings(alert_sender="", alert_recipient="")) is None
    assert build_notifier(Settings(alert_sender="a@example.com", alert_recipient="")) is None


def test_build_notifier_configured():
    assert isinstance(build_notifier(_email_settings()), EmailNotifier)


# --- Dispatcher ---


def test_dispatch_delivers_in_background(make_notifier):
    notifier = make_notifier()
    dispatcher = NotificationDispatcher(notifier, sleep=lambda _s: None)
    future = dispatcher.dispatch(_report())
    assert future.result(timeout=5) is True
    dispatcher.shutdown()
    assert len(notifier.sent) == 1


def test_dispatch_retries_then_succeeds(make_notifier):
    notifier = make_notifier(fail_times=2)
    sleep = MagicMock()
    dispatcher = NotificationDispatcher(notifier, max_attempts=3, retry_backoff_sec=0.5, sleep=sleep)
    assert dispatcher.dispatch(_report()).result(timeout=5) is True
    dispatcher.shutdown()
    assert notifier.attempts == 3
    assert [c.args[0] for c in sleep.call_args_list] == [0.5, 1.0]


def test_dispatch_gives_up_after_max_attempts(make_notifier):
    notifier = make_notifier(fail_times=-1)
    dispatcher = NotificationDispatcher(notifier, max_attempts=3, retry_backoff_sec=0.0, sleep=lambda _s: None)
    assert dispatcher.dispatch(_report()).result(timeout=5) is False
    dispatcher.shutdown()
    assert notifier.attempts == 3
    assert notifier.sent == []


def test_dispatch_skipped_without_notifier():
    dispatcher = NotificationDispatcher(None)
    assert dispatcher.dispatch(_report()) is None
    dispatcher.shutdown()


def test_dispatch_after_shutdown_returns_none(make_notifier):
    notifier = make_notifier()
    dispatcher = NotificationDispatcher(notifier)
    dispatcher.shutdown()
    assert dispatcher.dispatch(_report()) is None
    assert notifier.attempts == 0


def test_dispatch_with_unreachable_smtp():
    """EmailNotifier against an unreachable server: delivery fails, nothing raised."""
    dispatcher = NotificationDispatcher(
        EmailNotifier(_email_settings()), max_attempts=2, retry_backoff_sec=0.0, sleep=lambda _s: None
    )
    with patch("backend_fraudwatch.alerts.notifier.smtplib.SMTP", side_effect=OSError("unreachable")):
        future = dispatcher.dispatch(_report())
        assert future.result(timeout=5) is False
    dispatcher.shutdown()
