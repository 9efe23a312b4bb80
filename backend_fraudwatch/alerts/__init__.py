"""
Alerts — notify a human reviewer when a fraud report is recorded.

Email rendering and SMTP delivery (notifier) plus background, retrying,
failure-isolated dispatch (dispatcher).
"""

from backend_fraudwatch.alerts.dispatcher import NotificationDispatcher
from backend_fraudwatch.alerts.notifier import (
    EmailNotifier,
    build_notifier,
    render_fraud_alert,
)

__all__ = [
    "EmailNotifier",
    "NotificationDispatcher",
    "build_notifier",
    "render_fraud_alert",
]
