"""Pydantic schemas for dashboard and report aggregates."""

from datetime import date
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from journal.schemas.trade import Trade


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Summary(WireModel):
    total_count: int
    win_rate: float
    daily_pl: float = Field(alias="dailyPL")
    total_pl: float = Field(alias="totalPL")


class EquityPoint(WireModel):
    date: date
    cumulative_pl: float = Field(alias="cumulativePL")


class WinLossCounts(WireModel):
    wins: int
    losses: int


class StrategyStats(WireModel):
    count: int
    wins: int
    win_rate: float


class ReportRow(WireModel):
    trade: Trade
    pl_class: str  # "positive", "negative", "zero"


class DailyReport(WireModel):
    date: date
    win_rate: float
    daily_pl: float = Field(alias="dailyPL")
    rows: list[ReportRow]


class TradeRow(WireModel):
    trade: Trade
    pl_class: str
    pl_percentage: float


class DashboardSnapshot(WireModel):
    as_of: date
    version: int
    summary: Summary
    equity: list[EquityPoint]
    win_loss: WinLossCounts
    strategies: dict[str, StrategyStats]
