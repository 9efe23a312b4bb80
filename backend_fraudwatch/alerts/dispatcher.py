"""
Fire-and-forget delivery of fraud alerts.

Reports are handed to a small thread pool after the ingestion critical section,
so a slow or unreachable mail server never delays the HTTP response or the
next submission. Each delivery gets a bounded number of attempts with linear
backoff; failures are logged and never propagated.
"""

from __future__ import annotations

import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

from backend_fraudwatch.database.models import FraudReport
from backend_fraudwatch.fraudwatch_logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_BACKOFF_SEC = 1.0
DEFAULT_MAX_WORKERS = 2


class NotificationDispatcher:
    """
    Delivers reports through `notifier.send(report)` on background threads.

    notifier: object with send(report); None disables delivery (configuration missing).
    sleep: injectable for tests.
    """

    def __init__(
        self,
        notifier: Any | None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_backoff_sec: float = DEFAULT_RETRY_BACKOFF_SEC,
        max_workers: int = DEFAULT_MAX_WORKERS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.notifier = notifier
        self.max_attempts = max(1, int(max_attempts))
        self.retry_backoff_sec = max(0.0, float(retry_backoff_sec))
        self._sleep = sleep
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, int(max_workers)),
            thread_name_prefix="fraud-alert",
        )

    def dispatch(self, report: FraudReport) -> Future | None:
        """
        Queue delivery and return immediately.
        Returns the Future (result: True if delivered) or None when delivery is skipped.
        """
        transaction_id = report.transaction.transaction_id
        if self.notifier is None:
            logger.info("fraud_alert_skipped", transaction_id=transaction_id, reason="notification_not_configured")
            return None
        try:
            return self._executor.submit(self._deliver, report)
        except RuntimeError as e:
            # Executor already shut down (process stopping).
            logger.warning("fraud_alert_dispatch_failed", transaction_id=transaction_id, error=str(e))
            return None

    def _deliver(self, report: FraudReport) -> bool:
        transaction_id = report.transaction.transaction_id
        for attempt in range(1, self.max_attempts + 1):
            try:
                self.notifier.send(report)
                logger.info("fraud_alert_sent", transaction_id=transaction_id, attempt=attempt)
                return True
            except Exception as e:
                logger.warning(
                    "fraud_alert_attempt_failed",
                    transaction_id=transaction_id,
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                    error=str(e),
                )
                if attempt < self.max_attempts:
                    self._sleep(self.retry_backoff_sec * attempt)
        logger.error(
            "fraud_alert_failed",
            transaction_id=transaction_id,
            attempts=self.max_attempts,
        )
        return False

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
        logger.info("fraud_alert_dispatcher_stopped", waited=wait)
