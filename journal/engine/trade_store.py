"""In-memory trade collection for the running session.

The store is a set keyed by trade id that remembers insertion order. It is
the only state the dashboard reads; every committed mutation bumps
``version`` and notifies subscribers synchronously.
"""

import logging
from typing import Callable, Iterable

from journal.schemas.trade import Trade

logger = logging.getLogger(__name__)

StoreListener = Callable[["TradeStore"], None]


class DuplicateIdError(ValueError):
    """Raised when a trade id is already present in the store."""

    def __init__(self, trade_id: str):
        super().__init__(f"Trade id already exists: {trade_id}")
        self.trade_id = trade_id


class TradeStore:
    def __init__(self, trades: Iterable[Trade] = ()):
        self._trades: dict[str, Trade] = {}
        self._listeners: list[StoreListener] = []
        self.version = 0
        for trade in trades:
            self._insert(self._trades, trade)

    @staticmethod
    def _insert(target: dict[str, Trade], trade: Trade):
        if trade.id in target:
            raise DuplicateIdError(trade.id)
        target[trade.id] = trade

    def subscribe(self, listener: StoreListener):
        self._listeners.append(listener)

    def _commit(self):
        self.version += 1
        for listener in self._listeners:
            listener(self)

    def replace_all(self, trades: Iterable[Trade]):
        """Swap in a full collection. Duplicate ids leave the store untouched."""
        staged: dict[str, Trade] = {}
        for trade in trades:
            self._insert(staged, trade)
        self._trades = staged
        self._commit()
        logger.debug(f"Store replaced with {len(staged)} trades (v{self.version})")

    def add(self, trade: Trade):
        self._insert(self._trades, trade)
        self._commit()

    def remove(self, trade_id: str) -> bool:
        if trade_id not in self._trades:
            return False
        del self._trades[trade_id]
        self._commit()
        return True

    def get(self, trade_id: str) -> Trade | None:
        return self._trades.get(trade_id)

    def all(self) -> tuple[Trade, ...]:
        return tuple(self._trades.values())

    def ids(self) -> set[str]:
        return set(self._trades)

    def __contains__(self, trade_id: object) -> bool:
        return trade_id in self._trades

    def __len__(self) -> int:
        return len(self._trades)
