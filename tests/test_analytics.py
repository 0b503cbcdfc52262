"""Tests for dashboard and report aggregates."""

from datetime import date

import pytest

from journal.services import analytics

from conftest import make_trade

TODAY = date(2024, 3, 6)


def _journal():
    return [
        make_trade("1", 1000, 1200, strategy="Breakout", day=date(2024, 3, 5)),
        make_trade("2", 500, 450, strategy="Pullback", day=TODAY),
        make_trade("3", 2000, 2100, lot=2, strategy="Breakout", day=date(2024, 3, 1)),
        make_trade("4", 800, 800, strategy="Scalp", day=TODAY, fee=0.0),
        make_trade("5", 300, 330, lot=5, strategy="breakout", day=TODAY),
    ]


# ---------------------------------------------------------------------------
# 1. Summary
# ---------------------------------------------------------------------------

def test_summary_empty():
    s = analytics.summary([], TODAY)
    assert (s.total_count, s.win_rate, s.daily_pl, s.total_pl) == (0, 0, 0, 0)


def test_summary_counts_and_totals():
    trades = _journal()
    s = analytics.summary(trades, TODAY)

    assert s.total_count == 5
    # wins: 1, 3, 5; trade 4 breaks even exactly
    assert s.win_rate == pytest.approx(60.0)
    assert s.total_pl == pytest.approx(sum(t.net_pl for t in trades))
    todays = [t for t in trades if t.trade_date == TODAY]
    assert s.daily_pl == pytest.approx(sum(t.net_pl for t in todays))


# ---------------------------------------------------------------------------
# 2. Equity curve
# ---------------------------------------------------------------------------

def test_equity_empty_is_single_zero_point():
    points = analytics.equity_series([], TODAY)
    assert len(points) == 1
    assert points[0].date == TODAY
    assert points[0].cumulative_pl == 0


def test_equity_sorted_ascending_and_cumulative():
    trades = _journal()
    points = analytics.equity_series(trades, TODAY)

    assert [p.date for p in points] == sorted(p.date for p in points)
    assert points[0].cumulative_pl == pytest.approx(trades[2].net_pl)
    assert points[1].cumulative_pl == pytest.approx(trades[2].net_pl + trades[0].net_pl)


def test_equity_reconciles_with_total_pl():
    trades = _journal()
    points = analytics.equity_series(trades, TODAY)
    assert points[-1].cumulative_pl == pytest.approx(analytics.summary(trades, TODAY).total_pl)


def test_equity_ties_keep_insertion_order():
    a = make_trade("a", 100, 110, day=TODAY)
    b = make_trade("b", 100, 90, day=TODAY)
    points = analytics.equity_series([a, b], TODAY)
    assert points[0].cumulative_pl == pytest.approx(a.net_pl)


# ---------------------------------------------------------------------------
# 3. Win/loss and strategies
# ---------------------------------------------------------------------------

def test_win_loss_counts_break_even_as_loss():
    counts = analytics.win_loss_counts(_journal())
    assert (counts.wins, counts.losses) == (3, 2)


def test_by_strategy_groups_verbatim_in_first_seen_order():
    stats = analytics.by_strategy(_journal())

    assert list(stats) == ["Breakout", "Pullback", "Scalp", "breakout"]
    assert stats["Breakout"].count == 2
    assert stats["Breakout"].win_rate == pytest.approx(100.0)
    assert stats["Pullback"].win_rate == 0
    assert sum(s.count for s in stats.values()) == 5
    assert all(0 <= s.win_rate <= 100 for s in stats.values())


def test_by_strategy_empty():
    assert analytics.by_strategy([]) == {}


# ---------------------------------------------------------------------------
# 4. Daily report and trade list
# ---------------------------------------------------------------------------

def test_daily_report_rows_in_original_order_with_classes():
    report = analytics.daily_report(_journal(), TODAY)

    assert report.date == TODAY
    assert [r.trade.id for r in report.rows] == ["2", "4", "5"]
    assert [r.pl_class for r in report.rows] == ["negative", "zero", "positive"]
    assert report.win_rate == pytest.approx(100 / 3)
    assert report.daily_pl == pytest.approx(sum(r.trade.net_pl for r in report.rows))


def test_daily_report_without_trades():
    report = analytics.daily_report(_journal(), date(2023, 1, 1))
    assert report.rows == []
    assert report.win_rate == 0
    assert report.daily_pl == 0


def test_trade_rows_newest_first():
    rows = analytics.trade_rows(_journal())
    dates = [r.trade.trade_date for r in rows]
    assert dates == sorted(dates, reverse=True)
    first = next(r for r in rows if r.trade.id == "1")
    assert first.pl_percentage == pytest.approx(19.11428)
    assert first.pl_class == "positive"
