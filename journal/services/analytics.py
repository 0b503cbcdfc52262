"""Dashboard aggregates derived from a trade snapshot.

Every function is pure and recomputes from the trades it is given; nothing
is cached here. Callers pass ``today`` explicitly so the journal's local
trading day decides what counts as "today's trades".
"""

from collections.abc import Sequence
from datetime import date

from journal.schemas.dashboard import (
    DailyReport,
    EquityPoint,
    ReportRow,
    StrategyStats,
    Summary,
    TradeRow,
    WinLossCounts,
)
from journal.schemas.trade import Trade
from journal.services.pl_calculator import pl_percentage

PL_POSITIVE = "positive"
PL_NEGATIVE = "negative"
PL_ZERO = "zero"


def pl_class(amount: float) -> str:
    if amount > 0:
        return PL_POSITIVE
    if amount < 0:
        return PL_NEGATIVE
    return PL_ZERO


def win_rate(trades: Sequence[Trade]) -> float:
    """Percentage of winning trades; 0 for an empty set."""
    if not trades:
        return 0.0
    wins = sum(1 for t in trades if t.is_win)
    return wins / len(trades) * 100


def trades_on(trades: Sequence[Trade], day: date) -> list[Trade]:
    return [t for t in trades if t.trade_date == day]


def summary(trades: Sequence[Trade], today: date) -> Summary:
    return Summary(
        total_count=len(trades),
        win_rate=win_rate(trades),
        daily_pl=sum(t.net_pl for t in trades_on(trades, today)),
        total_pl=sum(t.net_pl for t in trades),
    )


def equity_series(trades: Sequence[Trade], today: date) -> list[EquityPoint]:
    """Running net P/L, oldest trade first. Ties keep insertion order."""
    if not trades:
        return [EquityPoint(date=today, cumulative_pl=0.0)]

    points = []
    cumulative = 0.0
    for trade in sorted(trades, key=lambda t: t.trade_date):
        cumulative += trade.net_pl
        points.append(EquityPoint(date=trade.trade_date, cumulative_pl=cumulative))
    return points


def win_loss_counts(trades: Sequence[Trade]) -> WinLossCounts:
    wins = sum(1 for t in trades if t.is_win)
    return WinLossCounts(wins=wins, losses=len(trades) - wins)


def by_strategy(trades: Sequence[Trade]) -> dict[str, StrategyStats]:
    """Per-strategy counts keyed by the label exactly as stored."""
    counts: dict[str, list[int]] = {}
    for trade in trades:
        bucket = counts.setdefault(trade.strategy, [0, 0])
        bucket[0] += 1
        if trade.is_win:
            bucket[1] += 1

    return {
        strategy: StrategyStats(count=count, wins=wins, win_rate=wins / count * 100)
        for strategy, (count, wins) in counts.items()
    }


def daily_report(trades: Sequence[Trade], today: date) -> DailyReport:
    todays = trades_on(trades, today)
    return DailyReport(
        date=today,
        win_rate=win_rate(todays),
        daily_pl=sum(t.net_pl for t in todays),
        rows=[ReportRow(trade=t, pl_class=pl_class(t.net_pl)) for t in todays],
    )


def trade_rows(trades: Sequence[Trade]) -> list[TradeRow]:
    """Trade list view: newest entry date first."""
    ordered = sorted(trades, key=lambda t: t.trade_date, reverse=True)
    return [
        TradeRow(
            trade=t,
            pl_class=pl_class(t.net_pl),
            pl_percentage=pl_percentage(t.net_pl, t.entry_price, t.lot),
        )
        for t in ordered
    ]
