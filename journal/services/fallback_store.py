"""Local durable trade store — the offline source of truth.

The whole collection is kept as one JSON array under a single key of the
``local_record`` table, mirroring the browser store the journal started
with. Loading never raises: missing or corrupt content reads as empty.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Iterable

from pydantic import ValidationError
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from journal.models.local_record import LocalRecord
from journal.schemas.trade import Trade

logger = logging.getLogger(__name__)


class FallbackPersistenceError(RuntimeError):
    """The local store could not be written."""


class FallbackPersistence:
    def __init__(self, engine: Engine, key: str = "trades"):
        self.engine = engine
        self.key = key

    def save(self, trades: Iterable[Trade]):
        """Overwrite the stored collection."""
        payload = json.dumps([t.to_record() for t in trades])
        try:
            with Session(self.engine) as session:
                record = session.get(LocalRecord, self.key)
                if record is None:
                    record = LocalRecord(key=self.key, value=payload)
                else:
                    record.value = payload
                    record.updated_at = datetime.now(timezone.utc)
                session.add(record)
                session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to write local store '{self.key}': {e}")
            raise FallbackPersistenceError(f"Local store write failed: {e}") from e

    def load(self) -> list[Trade]:
        try:
            with Session(self.engine) as session:
                record = session.get(LocalRecord, self.key)
                raw = record.value if record else None
        except SQLAlchemyError as e:
            logger.warning(f"Local store unreadable, starting empty: {e}")
            return []

        if not raw:
            return []

        try:
            items = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Local store '{self.key}' is corrupt, ignoring it: {e}")
            return []
        if not isinstance(items, list):
            logger.warning(f"Local store '{self.key}' is not a list, ignoring it")
            return []

        return parse_trades(items, source="local store")

    def clear(self):
        try:
            with Session(self.engine) as session:
                record = session.get(LocalRecord, self.key)
                if record is not None:
                    session.delete(record)
                    session.commit()
        except SQLAlchemyError as e:
            raise FallbackPersistenceError(f"Local store clear failed: {e}") from e


def parse_trades(items: list, source: str) -> list[Trade]:
    """Validate raw records, skipping malformed ones and repeated ids."""
    trades: list[Trade] = []
    seen: set[str] = set()
    for item in items:
        try:
            trade = Trade.model_validate(item)
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed trade from {source}: {e}")
            continue
        if trade.id in seen:
            logger.warning(f"Skipping repeated trade id {trade.id} from {source}")
            continue
        seen.add(trade.id)
        trades.append(trade)
    return trades
