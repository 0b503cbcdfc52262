"""Pydantic schemas for sync outcomes returned by the API."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from journal.schemas.trade import Trade
from journal.services.remote_sync import SyncResult

MESSAGES = {
    ("create", "remote"): "Trade saved to the journal sheet",
    ("create", "local"): "Trade saved locally (offline)",
    ("delete", "remote"): "Trade deleted from the journal sheet",
    ("delete", "local"): "Trade deleted locally (offline)",
    ("read", "remote"): "Trades refreshed from the journal sheet",
    ("read", "local"): "Sheet unreachable; showing locally saved trades",
}


class SyncResultRead(BaseModel):
    operation: str
    source: str
    strategy: str
    trade_id: str | None = None
    trade: Trade | None = None
    count: int | None = None
    stale: bool = False
    message: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_result(cls, result: SyncResult) -> "SyncResultRead":
        return cls(
            operation=result.operation,
            source=result.source,
            strategy=result.strategy,
            trade_id=result.trade_id,
            trade=result.trade,
            count=result.count,
            stale=result.stale,
            message=MESSAGES.get((result.operation, result.source), result.message or ""),
        )
