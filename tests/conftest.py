"""Shared fixtures: a throwaway SQLite local store per test."""

from datetime import date

import pytest

from journal.database import create_db_and_tables, make_engine
from journal.engine.trade_store import TradeStore
from journal.schemas.trade import Trade
from journal.services.fallback_store import FallbackPersistence


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'journal.db'}")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def persistence(engine):
    return FallbackPersistence(engine, key="trades")


@pytest.fixture
def store():
    return TradeStore()


def make_trade(
    trade_id: str = "1",
    entry_price: float = 1000.0,
    exit_price: float = 1200.0,
    lot: int = 1,
    strategy: str = "Breakout",
    day: date = date(2024, 3, 4),
    **overrides,
) -> Trade:
    fields = dict(
        id=trade_id,
        entry_date=day,
        exit_date=day,
        stock_code="BBCA",
        entry_price=entry_price,
        exit_price=exit_price,
        lot=lot,
        fee=0.004026,
        strategy=strategy,
        notes="",
    )
    fields.update(overrides)
    return Trade(**fields)
