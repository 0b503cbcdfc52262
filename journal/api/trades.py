"""Trade journal API — list, record and delete trades."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from journal.api.deps import get_context
from journal.context import AppContext
from journal.engine.commands import CreateTrade, DeleteTrade
from journal.schemas.dashboard import TradeRow
from journal.schemas.sync import SyncResultRead
from journal.schemas.trade import Trade, TradeInput
from journal.services import analytics
from journal.services.fallback_store import FallbackPersistenceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trades", tags=["trades"])


@router.get("", response_model=list[TradeRow])
def list_trades(
    strategy: str | None = None,
    limit: int = 100,
    offset: int = 0,
    context: AppContext = Depends(get_context),
):
    """Newest first, with per-trade P/L class and percentage."""
    trades = context.store.all()
    if strategy is not None:
        trades = [t for t in trades if t.strategy == strategy]
    rows = analytics.trade_rows(trades)
    return rows[offset:offset + limit]


@router.get("/{trade_id}", response_model=Trade)
def get_trade(trade_id: str, context: AppContext = Depends(get_context)):
    trade = context.store.get(trade_id)
    if not trade:
        raise HTTPException(status_code=404, detail="Trade not found")
    return trade


@router.post("", response_model=SyncResultRead, status_code=201)
async def create_trade(data: TradeInput, context: AppContext = Depends(get_context)):
    try:
        result = await context.execute(CreateTrade(data))
    except FallbackPersistenceError as e:
        logger.error(f"Trade could not be saved anywhere: {e}")
        raise HTTPException(status_code=500, detail="Trade could not be saved locally")
    return SyncResultRead.from_result(result)


@router.delete("/{trade_id}", response_model=SyncResultRead)
async def delete_trade(trade_id: str, context: AppContext = Depends(get_context)):
    """Idempotent: deleting an unknown id is not an error."""
    try:
        result = await context.execute(DeleteTrade(trade_id))
    except FallbackPersistenceError as e:
        logger.error(f"Trade {trade_id} could not be deleted: {e}")
        raise HTTPException(status_code=500, detail="Trade could not be deleted locally")
    return SyncResultRead.from_result(result)
