"""System API — health check, sync status, manual refresh, scheduler status."""

from fastapi import APIRouter, Depends

from journal.api.deps import get_context
from journal.context import AppContext
from journal.engine.commands import RefreshTrades
from journal.schemas.sync import SyncResultRead

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/health")
def health_check():
    return {"status": "ok"}


@router.get("/sync")
def sync_status(context: AppContext = Depends(get_context)):
    """Where the current trade set came from and how the last sync went."""
    return context.sync.status()


@router.post("/refresh", response_model=SyncResultRead)
async def refresh(context: AppContext = Depends(get_context)):
    """Reload trades now; falls back to the local store when the sheet is unreachable."""
    result = await context.execute(RefreshTrades(reason="manual"))
    return SyncResultRead.from_result(result)


@router.get("/scheduler")
def scheduler_status(context: AppContext = Depends(get_context)):
    return context.scheduler.status()
