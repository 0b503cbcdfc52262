"""Dashboard API — summary stats, equity curve, win/loss and strategy breakdown."""

from fastapi import APIRouter, Depends

from journal.api.deps import get_context
from journal.context import AppContext
from journal.schemas.dashboard import (
    DashboardSnapshot,
    EquityPoint,
    StrategyStats,
    Summary,
    WinLossCounts,
)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardSnapshot)
def dashboard(context: AppContext = Depends(get_context)):
    """Every home-screen aggregate in one payload."""
    return context.dashboard.snapshot()


@router.get("/summary", response_model=Summary)
def dashboard_summary(context: AppContext = Depends(get_context)):
    return context.dashboard.snapshot().summary


@router.get("/equity", response_model=list[EquityPoint])
def equity_curve(context: AppContext = Depends(get_context)):
    """Cumulative net P/L, oldest trade first."""
    return context.dashboard.snapshot().equity


@router.get("/win-loss", response_model=WinLossCounts)
def win_loss(context: AppContext = Depends(get_context)):
    return context.dashboard.snapshot().win_loss


@router.get("/strategies", response_model=dict[str, StrategyStats])
def strategy_performance(context: AppContext = Depends(get_context)):
    return context.dashboard.snapshot().strategies
