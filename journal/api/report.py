"""Daily report API."""

from datetime import date

from fastapi import APIRouter, Depends

from journal.api.deps import get_context
from journal.context import AppContext
from journal.schemas.dashboard import DailyReport
from journal.services import analytics

router = APIRouter(prefix="/api/report", tags=["report"])


@router.get("/daily", response_model=DailyReport)
def daily_report(day: date | None = None, context: AppContext = Depends(get_context)):
    """Trades entered on ``day`` (default: today in the journal's timezone)."""
    return analytics.daily_report(context.store.all(), day or context.today())
