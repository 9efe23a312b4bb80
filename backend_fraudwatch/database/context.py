"""
Owning context for process-lifetime state.

One FraudContext holds the ledger and the report store. It is created once by
the app factory (or per test) and injected into the orchestrator; nothing
reaches the state through module globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from backend_fraudwatch.database.ledger import Ledger
from backend_fraudwatch.database.report_store import FraudReportStore


@dataclass
class FraudContext:
    ledger: Ledger = field(default_factory=Ledger)
    reports: FraudReportStore = field(default_factory=FraudReportStore)

    @classmethod
    def create(cls) -> FraudContext:
        """Fresh, empty ledger and report store."""
        return cls()
