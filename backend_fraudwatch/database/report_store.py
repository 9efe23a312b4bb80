"""
Fraud report store: append-only ordered sequence of fraud verdicts.
"""

from __future__ import annotations

import threading

from backend_fraudwatch.database.models import FraudReport


class FraudReportStore:
    """Ordered bookkeeping of FraudReport values; same ownership rules as the ledger."""

    def __init__(self) -> None:
        self._reports: list[FraudReport] = []
        self._lock = threading.Lock()

    def append(self, report: FraudReport) -> None:
        if not isinstance(report, FraudReport):
            raise TypeError(f"expected FraudReport, got {type(report).__name__}")
        with self._lock:
            self._reports.append(report)

    def all(self) -> list[FraudReport]:
        with self._lock:
            return list(self._reports)

    def __len__(self) -> int:
        with self._lock:
            return len(self._reports)
