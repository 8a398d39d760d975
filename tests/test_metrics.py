"""Tests for the trading performance metrics engine."""

import json
import math
import random
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from tradejournal.services.metrics import (
    breakdown_by_instrument,
    breakdown_by_strategy,
    breakdown_by_weekday,
    build_equity_curve,
    compute_metrics,
    order_by_open_time,
    pnl_distribution,
    read_pnl,
    strategy_performance,
    target_progress,
    trader_level,
    win_streak,
)
from tradejournal.schemas.metrics import MetricsSummary

D1 = datetime(2026, 10, 12, 9, 0, tzinfo=timezone.utc)  # Monday


def _trade(pnl=None, opened=D1, closed=None, **extra):
    return SimpleNamespace(profit_loss_currency=pnl, opened_at=opened, closed_at=closed, **extra)


def _day(n: int, hour: int = 9) -> datetime:
    return D1 + timedelta(days=n, hours=hour - 9)


# ---------------------------------------------------------------------------
# 1. Summary statistics
# ---------------------------------------------------------------------------

class TestComputeMetrics:
    def test_reference_scenario(self):
        trades = [_trade(100, _day(0)), _trade(-40, _day(1)), _trade(0, _day(2))]
        m = compute_metrics(trades)

        assert m.total_trades == 3
        assert m.profitable_trades == 1
        assert m.losing_trades == 1
        assert m.break_even_trades == 1
        assert m.decisive_trades == 2
        assert m.win_rate == 50
        assert m.net_pnl == 60
        assert m.profit_factor == 2.5
        assert m.avg_win == 100
        assert m.avg_loss == 40
        assert m.expected_value == 20

    def test_empty_list_is_all_zero(self):
        m = compute_metrics([])
        assert m == MetricsSummary()
        assert m.win_rate == 0
        assert m.profit_factor == 0
        assert build_equity_curve([]) == []

    def test_all_winners_give_infinite_profit_factor(self):
        m = compute_metrics([_trade(10), _trade(25.5)])
        assert math.isinf(m.profit_factor)
        assert m.avg_loss == 0
        assert m.win_rate == 100

    def test_only_break_even_trades(self):
        m = compute_metrics([_trade(0), _trade(0)])
        assert m.break_even_trades == 2
        assert m.decisive_trades == 0
        assert m.win_rate == 0
        assert m.profit_factor == 0

    def test_null_pnl_counted_in_total_only(self):
        m = compute_metrics([_trade(None), _trade(50), _trade(-50)])
        assert m.total_trades == 3
        assert m.no_pnl_trades == 1
        assert m.decisive_trades == 2
        assert m.win_rate == 50
        # Expectancy divides by every trade, open ones included
        assert m.expected_value == 0

    def test_open_trades_counted(self):
        m = compute_metrics([_trade(None), _trade(10, closed=_day(0, 10))])
        assert m.open_trades == 1

    def test_best_and_worst_trade(self):
        m = compute_metrics([_trade(5), _trade(-12), _trade(30), _trade(None)])
        assert m.best_trade == 30
        assert m.worst_trade == -12

    def test_avg_risk_reward(self):
        m = compute_metrics([_trade(90), _trade(-30)])
        assert m.avg_risk_reward == 3

    def test_max_drawdown_follows_input_order(self):
        trades = [_trade(100), _trade(-30), _trade(-50), _trade(40)]
        assert compute_metrics(trades).max_drawdown == 80

    def test_idempotent(self):
        trades = [_trade(12.5, _day(0)), _trade(-3.25, _day(1)), _trade(None, _day(2))]
        first = compute_metrics(trades)
        second = compute_metrics(trades)
        assert first == second
        assert first.model_dump_json() == second.model_dump_json()

    def test_accepts_dict_records(self):
        trades = [
            {"profit_loss_currency": 100, "opened_at": "2026-10-12T09:00:00Z"},
            {"profit_loss_currency": -40, "opened_at": "2026-10-13T09:00:00Z"},
        ]
        m = compute_metrics(trades)
        assert m.net_pnl == 60
        assert m.trading_days == 2


class TestInvariants:
    MIXED = [
        _trade(100),
        _trade(-40),
        _trade(0),
        _trade(None),
        _trade("12.5"),
        _trade("not a number"),
        _trade(float("nan")),
        _trade(float("inf")),
        _trade(True),
        _trade(-0.75),
    ]

    def test_classification_covers_every_trade(self):
        m = compute_metrics(self.MIXED)
        assert (
            m.profitable_trades + m.losing_trades + m.break_even_trades + m.no_pnl_trades
            == m.total_trades
        )
        assert m.total_trades == len(self.MIXED)

    def test_malformed_pnl_is_treated_as_null(self):
        m = compute_metrics(self.MIXED)
        # None, "not a number", nan, inf and True
        assert m.no_pnl_trades == 5
        assert m.profitable_trades == 2

    @pytest.mark.parametrize("trades", [
        MIXED,
        [_trade(1)],
        [_trade(-1)],
        [_trade(0)],
        [_trade(None)],
        [],
    ])
    def test_win_rate_bounded(self, trades):
        assert 0 <= compute_metrics(trades).win_rate <= 100

    def test_net_pnl_is_profit_minus_loss(self):
        m = compute_metrics(self.MIXED)
        assert m.net_pnl == m.total_profit - m.total_loss_abs

    def test_equity_curve_ends_at_net_pnl(self):
        trades = [_trade(100, _day(0)), _trade(-40, _day(1)), _trade(None, _day(2)), _trade(25, _day(3))]
        curve = build_equity_curve(order_by_open_time(trades))
        assert curve[-1].cumulative_pnl == compute_metrics(trades).net_pnl


class TestReadPnl:
    @pytest.mark.parametrize("value, expected", [
        (10, 10.0),
        (-2.5, -2.5),
        ("7.25", 7.25),
        (" -3 ", -3.0),
        (None, None),
        ("", None),
        ("abc", None),
        (False, None),
        (float("nan"), None),
        (float("-inf"), None),
        ([1], None),
        (10**400, None),
    ])
    def test_read_pnl(self, value, expected):
        assert read_pnl(_trade(value)) == expected

    def test_oversized_integer_does_not_break_metrics(self):
        trades = [{"profit_loss_currency": 10**400, "opened_at": D1}, {"profit_loss_currency": 5, "opened_at": D1}]
        summary = compute_metrics(trades)
        assert summary.no_pnl_trades == 1
        assert summary.net_pnl == 5
        assert build_equity_curve(trades)[-1].cumulative_pnl == 5


# ---------------------------------------------------------------------------
# 2. Holding time and trading days
# ---------------------------------------------------------------------------

class TestHoldingTime:
    def test_average_over_closed_trades(self):
        trades = [
            _trade(10, _day(0, 10), _day(0, 10) + timedelta(minutes=30)),
            _trade(-5, _day(1, 11), _day(1, 13)),
            _trade(None, _day(2)),  # still open
        ]
        assert compute_metrics(trades).avg_holding_minutes == 75

    def test_closed_before_opened_is_ignored(self):
        trades = [
            _trade(10, _day(1), _day(0)),
            _trade(10, _day(0, 9), _day(0, 10)),
        ]
        assert compute_metrics(trades).avg_holding_minutes == 60

    def test_unparseable_opened_at_skips_time_stats_only(self):
        trades = [_trade(50, "garbage", _day(0)), _trade(-10, None)]
        m = compute_metrics(trades)
        assert m.avg_holding_minutes == 0
        assert m.trading_days == 0
        assert m.net_daily_pnl == 0
        assert m.total_trades == 2
        assert m.net_pnl == 40

    def test_net_daily_pnl(self):
        trades = [_trade(30, _day(0, 9)), _trade(30, _day(0, 15)), _trade(-10, _day(1))]
        m = compute_metrics(trades)
        assert m.trading_days == 2
        assert m.net_daily_pnl == 25

    def test_trading_days_follow_timezone(self):
        # 23:00 and 01:00 UTC fall on the same day five hours behind UTC
        late = datetime(2026, 10, 12, 23, 0, tzinfo=timezone.utc)
        early = datetime(2026, 10, 13, 1, 0, tzinfo=timezone.utc)
        trades = [_trade(1, late), _trade(1, early)]
        assert compute_metrics(trades).trading_days == 2
        assert compute_metrics(trades, tz=timezone(timedelta(hours=-5))).trading_days == 1


# ---------------------------------------------------------------------------
# 3. Equity curve
# ---------------------------------------------------------------------------

class TestEquityCurve:
    def test_reference_scenario(self):
        trades = [_trade(100, _day(0)), _trade(-40, _day(1)), _trade(0, _day(2))]
        curve = build_equity_curve(trades)
        assert [p.cumulative_pnl for p in curve] == [100, 60, 60]
        assert [p.index for p in curve] == [0, 1, 2]
        assert curve[1].drawdown == 40

    def test_starting_balance(self):
        curve = build_equity_curve([_trade(100), _trade(None)], starting_balance=10000)
        assert [p.balance for p in curve] == [10100, 10100]
        assert curve[1].pnl == 0

    def test_order_by_open_time_puts_unparseable_last(self):
        a, b, c = _trade(1, _day(2)), _trade(2, None), _trade(3, _day(0))
        assert order_by_open_time([a, b, c]) == [c, a, b]

    def test_order_by_open_time_mixes_naive_and_aware(self):
        naive = _trade(1, datetime(2026, 10, 13, 9, 0))
        aware = _trade(2, _day(0))
        assert order_by_open_time([naive, aware]) == [aware, naive]


# ---------------------------------------------------------------------------
# 4. Breakdowns and distribution
# ---------------------------------------------------------------------------

class TestBreakdowns:
    TRADES = [
        _trade(50, _day(0), instrument="EURUSD", strategy_id=1, strategy_name="Breakout"),
        _trade(-20, _day(1), instrument="EURUSD", strategy_id=1, strategy_name="Breakout"),
        _trade(80, _day(0), instrument="NQ", strategy_id=2, strategy_name="Reversal"),
        _trade(None, _day(3), instrument="", strategy_id=None, strategy_name=None),
    ]

    def test_by_strategy_sorted_by_pnl(self):
        rows = breakdown_by_strategy(self.TRADES)
        assert [(r.label, r.pnl, r.trades) for r in rows] == [
            ("Reversal", 80, 1),
            ("Breakout", 30, 2),
            ("No Strategy", 0, 1),
        ]

    def test_by_strategy_keeps_same_named_strategies_apart(self):
        trades = [
            _trade(10, strategy_id=1, strategy_name="Breakout"),
            _trade(-4, strategy_id=2, strategy_name="Breakout"),
        ]
        rows = breakdown_by_strategy(trades)
        assert [(r.label, r.pnl, r.trades) for r in rows] == [
            ("Breakout", 10, 1),
            ("Breakout", -4, 1),
        ]
        assert len(strategy_performance(trades)) == len(rows)

    def test_by_instrument_labels_missing_symbol(self):
        rows = breakdown_by_instrument(self.TRADES)
        assert [r.label for r in rows] == ["NQ", "EURUSD", "Unknown"]

    def test_limit(self):
        trades = [_trade(i, instrument=f"SYM{i}") for i in range(12)]
        rows = breakdown_by_instrument(trades)
        assert len(rows) == 8
        assert rows[0].label == "SYM11"

    def test_by_weekday_calendar_order(self):
        rows = breakdown_by_weekday(self.TRADES)
        assert [(r.label, r.pnl, r.trades) for r in rows] == [
            ("Mon", 130, 2),
            ("Tue", -20, 1),
            ("Thu", 0, 1),
        ]

    def test_distribution_bins(self):
        trades = [_trade(v) for v in (-100, -90, 0, 50, 200)]
        bins = pnl_distribution(trades)
        assert sum(b.count for b in bins) == 5
        assert bins[0].start == -100
        assert bins[-1].end == pytest.approx(200)
        # the maximum lands in the last bin, not past it
        assert bins[-1].count == 1

    def test_distribution_keeps_the_maximum_with_fractional_values(self):
        bins = pnl_distribution([_trade(802.8549152229671), _trade(-938.8200339328929)])
        assert sum(b.count for b in bins) == 2
        assert bins[-1].end == 802.8549152229671

    def test_distribution_counts_every_valid_pnl(self):
        rng = random.Random(7)
        for _ in range(500):
            values = [rng.uniform(-1000, 1000) for _ in range(rng.randint(1, 12))]
            trades = [_trade(v) for v in values] + [_trade(None), _trade("bad")]
            bins = pnl_distribution(trades)
            assert sum(b.count for b in bins) == len(values)
            assert bins[0].start == min(values)
            assert bins[-1].end >= max(values)

    def test_distribution_single_value(self):
        bins = pnl_distribution([_trade(5), _trade(5)])
        assert len(bins) == 1
        assert bins[0].count == 2

    def test_distribution_empty(self):
        assert pnl_distribution([_trade(None)]) == []


class TestStrategyPerformance:
    def test_uses_canonical_formulas(self):
        trades = [
            _trade(100, strategy_id=1, strategy_name="Breakout"),
            _trade(-50, strategy_id=1, strategy_name="Breakout"),
            _trade(0, strategy_id=1, strategy_name="Breakout"),
            _trade(20, strategy_id=None, strategy_name=None),
        ]
        rows = strategy_performance(trades)

        assert [r.strategy_name for r in rows] == ["Breakout", "No Strategy"]
        breakout = rows[0]
        assert breakout.total_trades == 3
        # break-even trade is not in the win-rate denominator
        assert breakout.win_rate == 50
        assert breakout.profit_factor == 2
        assert breakout.net_pnl == 50
        assert math.isinf(rows[1].profit_factor)

    def test_infinite_profit_factor_serializes_as_sentinel(self):
        row = strategy_performance([_trade(5, strategy_id=3, strategy_name="Scalp")])[0]
        assert json.loads(row.model_dump_json())["profit_factor"] == "∞"
        assert math.isinf(row.model_dump()["profit_factor"])


class TestSerialization:
    def test_infinite_profit_factor_in_json(self):
        payload = json.loads(compute_metrics([_trade(5)]).model_dump_json())
        assert payload["profit_factor"] == "∞"

    def test_finite_profit_factor_in_json(self):
        payload = json.loads(compute_metrics([_trade(5), _trade(-2)]).model_dump_json())
        assert payload["profit_factor"] == 2.5


# ---------------------------------------------------------------------------
# 5. Streak, level and targets
# ---------------------------------------------------------------------------

class TestWinStreak:
    def test_counts_back_from_most_recent(self):
        trades = [_trade(-5, _day(0)), _trade(10, _day(1)), _trade(20, _day(2)), _trade(5, _day(3))]
        assert win_streak(trades) == 3

    def test_most_recent_loss_resets(self):
        trades = [_trade(10, _day(0)), _trade(-1, _day(1))]
        assert win_streak(trades) == 0

    def test_open_trades_are_skipped(self):
        trades = [_trade(10, _day(0)), _trade(10, _day(1)), _trade(None, _day(2))]
        assert win_streak(trades) == 2

    def test_break_even_ends_streak(self):
        trades = [_trade(10, _day(0)), _trade(0, _day(1)), _trade(10, _day(2))]
        assert win_streak(trades) == 1

    def test_empty(self):
        assert win_streak([]) == 0


class TestTraderLevel:
    def test_beginner_with_no_trades(self):
        result = trader_level(compute_metrics([]))
        assert result.current.name == "Beginner"
        assert result.next.name == "Novice"
        # Novice has no profit-factor or profit requirement
        assert result.progress == 50

    def test_reaches_intermediate(self):
        summary = MetricsSummary(total_trades=60, win_rate=51, profit_factor=1.1, net_pnl=-10)
        result = trader_level(summary)
        assert result.current.level == 4
        # Advanced requires profit
        assert result.next.name == "Advanced"

    def test_profit_required_for_advanced(self):
        summary = MetricsSummary(total_trades=150, win_rate=53, profit_factor=1.3, net_pnl=500)
        assert trader_level(summary).current.name == "Advanced"

    def test_top_tier(self):
        summary = MetricsSummary(total_trades=1500, win_rate=70, profit_factor=math.inf, net_pnl=1)
        result = trader_level(summary)
        assert result.current.name == "Elite"
        assert result.next is None
        assert result.progress == 100


class TestTargetProgress:
    def test_progress(self):
        t = target_progress("Monthly P&L", 250, 1000)
        assert t.progress == 25
        assert not t.is_complete

    def test_complete(self):
        assert target_progress("Trades/Month", 30, 20).is_complete

    def test_zero_target(self):
        assert target_progress("Win Rate", 55, 0).progress == 0

    def test_negative_current_clamped(self):
        assert target_progress("Monthly P&L", -300, 1000).progress == 0
