"""
Email notifier for fraud reports.

Renders a FraudReport into a subject and a plain-text body (short summary plus
the JSON report) and delivers it over SMTP with a bounded socket timeout.
Any transport error surfaces as NotificationDeliveryFailure; retry and
logging belong to the dispatcher.
"""

from __future__ import annotations

import json
import smtplib
from email.message import EmailMessage

from backend_fraudwatch.config.settings import Settings, check_notification_config
from backend_fraudwatch.core.exceptions import NotificationDeliveryFailure
from backend_fraudwatch.database.models import FraudReport
from backend_fraudwatch.fraudwatch_logging import get_logger

logger = get_logger(__name__)

SUBJECT_PREFIX = "Fraud Alert"


def render_fraud_alert(report: FraudReport) -> tuple[str, str]:
    """Return (subject, body) for a report."""
    subject = f"{SUBJECT_PREFIX}: {report.fraud_type}"
    ev = report.evidence
    tx = report.transaction
    lines = [
        "A transaction was flagged for review.",
        "",
        f"Fraud type:   {report.fraud_type}",
        f"Transaction:  {tx.transaction_id}",
        f"Amount:       {tx.amount}",
        f"Payer:        {tx.payer_id}",
        f"IP:           {ev.ip} (seen {ev.same_ip}x in recent window)",
        f"Device:       {ev.device_id} (seen {ev.same_device}x in recent window)",
        f"Payer claims: {ev.claim_count}",
        f"Rules:        {', '.join(report.triggered_rules) or '-'}",
        "",
        "Full report:",
        json.dumps(report.to_dict(), indent=2),
    ]
    return subject, "\n".join(lines)


class EmailNotifier:
    """Sends fraud alerts from the configured sender to the configured recipient."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def build_message(self, report: FraudReport) -> EmailMessage:
        subject, body = render_fraud_alert(report)
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.settings.alert_sender
        message["To"] = self.settings.alert_recipient
        message.set_content(body)
        return message

    def send(self, report: FraudReport) -> None:
        s = self.settings
        message = self.build_message(report)
        try:
            with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=s.smtp_timeout_sec) as server:
                if s.smtp_use_tls:
                    server.starttls()
                if s.alert_password:
                    server.login(s.alert_sender, s.alert_password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationDeliveryFailure(
                f"SMTP delivery to {s.alert_recipient} failed: {e}"
            ) from e
        logger.info(
            "fraud_alert_email_sent",
            recipient=s.alert_recipient,
            transaction_id=report.transaction.transaction_id,
        )


def build_notifier(settings: Settings) -> EmailNotifier | None:
    """EmailNotifier when sender and recipient are configured; None (alerts skipped) otherwise."""
    if not check_notification_config(settings):
        return None
    return EmailNotifier(settings)
