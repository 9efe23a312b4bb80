"""
In-memory ledger: append-only ordered history of recorded transactions.

Single source of truth for the history-based fraud checks. Insertion order is
arrival order; entries are never reordered or removed. The only mutation after
append is the claims process setting `claimed` on an entry by identity.
"""

from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import Callable

from backend_fraudwatch.core.exceptions import TransactionNotFound
from backend_fraudwatch.database.models import Transaction
from backend_fraudwatch.fraudwatch_logging import get_logger

logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_transaction_id() -> str:
    return uuid.uuid4().hex


class Ledger:
    """
    Ordered, append-only transaction store for the process lifetime.

    Reads return fresh lists so callers can never mutate the history.
    `clock` and `id_factory` are injectable for deterministic tests.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_transaction_id,
    ) -> None:
        self._entries: list[Transaction] = []
        self._by_id: dict[str, Transaction] = {}
        self._lock = threading.RLock()
        self._clock = clock
        self._id_factory = id_factory

    def append(self, transaction: Transaction) -> Transaction:
        """Stamp timestamp and id, then append. Returns the recorded entry."""
        with self._lock:
            transaction.timestamp = self._clock()
            transaction.transaction_id = self._id_factory()
            self._entries.append(transaction)
            self._by_id[transaction.transaction_id] = transaction
            size = len(self._entries)
        logger.debug(
            "ledger_append",
            transaction_id=transaction.transaction_id,
            ledger_size=size,
        )
        return transaction

    def recent_window(self, n: int) -> list[Transaction]:
        """Last n entries in ledger order; fewer if history is shorter, empty for n <= 0."""
        if n <= 0:
            return []
        with self._lock:
            return self._entries[-n:]

    def all(self) -> list[Transaction]:
        with self._lock:
            return list(self._entries)

    def get(self, transaction_id: str) -> Transaction:
        with self._lock:
            entry = self._by_id.get(transaction_id)
        if entry is None:
            raise TransactionNotFound(f"No transaction with id {transaction_id}")
        return entry

    def mark_claimed(self, transaction_id: str) -> Transaction:
        """
        Claims hook: set `claimed` on an existing entry.
        Raises TransactionNotFound for unknown ids.
        """
        with self._lock:
            entry = self._by_id.get(transaction_id)
            if entry is None:
                raise TransactionNotFound(f"No transaction with id {transaction_id}")
            entry.claimed = True
        logger.info(
            "transaction_claimed",
            transaction_id=transaction_id,
            payer_id=entry.payer_id,
        )
        return entry

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
