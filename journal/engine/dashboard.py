"""Eagerly recomputed dashboard aggregates.

Subscribes to the TradeStore and rebuilds every aggregate right after each
committed mutation, so a reader never sees figures older than the store.
"""

import logging
from datetime import date
from typing import Callable

from journal.engine.trade_store import TradeStore
from journal.schemas.dashboard import DashboardSnapshot
from journal.services import analytics

logger = logging.getLogger(__name__)


class DashboardCache:
    def __init__(self, store: TradeStore, today: Callable[[], date]):
        self.store = store
        self.today = today
        self._snapshot: DashboardSnapshot | None = None
        store.subscribe(self._on_change)

    def _on_change(self, store: TradeStore):
        self._snapshot = self._compute()

    def _compute(self) -> DashboardSnapshot:
        trades = self.store.all()
        today = self.today()
        snapshot = DashboardSnapshot(
            as_of=today,
            version=self.store.version,
            summary=analytics.summary(trades, today),
            equity=analytics.equity_series(trades, today),
            win_loss=analytics.win_loss_counts(trades),
            strategies=analytics.by_strategy(trades),
        )
        logger.debug(f"Dashboard recomputed at store v{self.store.version}")
        return snapshot

    def snapshot(self) -> DashboardSnapshot:
        """Current aggregates; rebuilt if the store moved on or the day rolled over."""
        current = self._snapshot
        if (
            current is None
            or current.version != self.store.version
            or current.as_of != self.today()
        ):
            current = self._snapshot = self._compute()
        return current
