"""Trading performance metrics.

Pure functions over trade-shaped records: ORM ``Trade`` rows, dicts, or
anything else exposing ``profit_loss_currency``, ``opened_at`` and
``closed_at`` (plus ``instrument``, ``strategy_id`` and ``strategy_name``
for the breakdowns). Nothing here touches the database, and every view in
the API (dashboard, analytics, journal header, per-strategy table) goes
through these functions.

A single corrupt record never raises: an unreadable P&L is treated as
null, an unreadable timestamp drops the trade from time-based figures only.
"""

import logging
import math
from collections import defaultdict
from datetime import datetime, timezone, tzinfo

import numpy as np

from tradejournal.schemas.metrics import (
    CategoryPnL,
    DistributionBin,
    EquityPoint,
    MetricsSummary,
    StrategyPerformance,
    TargetProgress,
    TraderLevel,
    TraderLevelProgress,
)
from tradejournal.utils.constants import (
    BREAKDOWN_LIMIT,
    DISTRIBUTION_BINS,
    NO_STRATEGY_LABEL,
    TRADER_LEVELS,
    UNKNOWN_INSTRUMENT_LABEL,
    WEEKDAY_LABELS,
)
from tradejournal.utils.records import get_field
from tradejournal.utils.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)
_LATEST = datetime.max.replace(tzinfo=timezone.utc)


def read_pnl(trade) -> float | None:
    """Return the trade's realized P&L as a finite float, or None."""
    value = get_field(trade, "profit_loss_currency")
    if value is None:
        return None
    if isinstance(value, bool):
        logger.debug(f"Ignoring boolean P&L on trade {get_field(trade, 'id')}")
        return None
    try:
        pnl = float(value)
    except (TypeError, ValueError, OverflowError):
        logger.debug(f"Ignoring malformed P&L {value!r} on trade {get_field(trade, 'id')}")
        return None
    if not math.isfinite(pnl):
        logger.debug(f"Ignoring non-finite P&L on trade {get_field(trade, 'id')}")
        return None
    return pnl


def _opened(trade) -> datetime | None:
    return parse_timestamp(get_field(trade, "opened_at"))


def order_by_open_time(trades) -> list:
    """Sort ascending by `opened_at`. Stable; unparseable timestamps go last."""
    return sorted(trades, key=lambda t: _opened(t) or _LATEST)


def compute_metrics(trades, tz: tzinfo | None = None) -> MetricsSummary:
    """
    Compute the performance summary for a set of trades.

    `tz` only affects how trading days are counted (calendar dates of
    `opened_at`); it defaults to UTC. Max drawdown follows the input order,
    so pass trades sorted by open time.
    """
    trades = list(trades)
    if not trades:
        return MetricsSummary()

    profitable = losing = break_even = no_pnl = open_trades = 0
    total_profit = 0.0
    total_loss = 0.0
    best: float | None = None
    worst: float | None = None
    holding_minutes = 0.0
    holding_count = 0
    trading_days: set = set()
    cumulative = peak = max_drawdown = 0.0

    for trade in trades:
        opened = _opened(trade)
        closed = parse_timestamp(get_field(trade, "closed_at"))
        if get_field(trade, "closed_at") is None:
            open_trades += 1
        if opened is not None:
            trading_days.add(opened.astimezone(tz or timezone.utc).date())
            if closed is not None and closed >= opened:
                holding_minutes += (closed - opened).total_seconds() / 60
                holding_count += 1

        pnl = read_pnl(trade)
        if pnl is None:
            no_pnl += 1
            continue

        if pnl > 0:
            profitable += 1
            total_profit += pnl
        elif pnl < 0:
            losing += 1
            total_loss += pnl
        else:
            break_even += 1

        best = pnl if best is None else max(best, pnl)
        worst = pnl if worst is None else min(worst, pnl)

        cumulative += pnl
        peak = max(peak, cumulative)
        max_drawdown = max(max_drawdown, peak - cumulative)

    total = len(trades)
    total_loss_abs = abs(total_loss)
    net_pnl = total_profit - total_loss_abs
    decisive = profitable + losing

    if total_loss_abs > 0:
        profit_factor = total_profit / total_loss_abs
    else:
        profit_factor = math.inf if total_profit > 0 else 0.0

    avg_win = total_profit / profitable if profitable else 0.0
    avg_loss = total_loss_abs / losing if losing else 0.0

    return MetricsSummary(
        total_trades=total,
        profitable_trades=profitable,
        losing_trades=losing,
        break_even_trades=break_even,
        no_pnl_trades=no_pnl,
        open_trades=open_trades,
        decisive_trades=decisive,
        win_rate=profitable / decisive * 100 if decisive else 0.0,
        total_profit=total_profit,
        total_loss_abs=total_loss_abs,
        net_pnl=net_pnl,
        profit_factor=profit_factor,
        avg_win=avg_win,
        avg_loss=avg_loss,
        expected_value=net_pnl / total,
        avg_risk_reward=avg_win / avg_loss if avg_loss > 0 else 0.0,
        best_trade=best if best is not None else 0.0,
        worst_trade=worst if worst is not None else 0.0,
        avg_holding_minutes=holding_minutes / holding_count if holding_count else 0.0,
        trading_days=len(trading_days),
        net_daily_pnl=net_pnl / len(trading_days) if trading_days else 0.0,
        max_drawdown=max_drawdown,
    )


def build_equity_curve(trades, starting_balance: float = 0.0) -> list[EquityPoint]:
    """Running sum of P&L in input order (null P&L counts as 0).

    The caller is responsible for ordering; see `order_by_open_time`.
    An empty input gives an empty curve.
    """
    points: list[EquityPoint] = []
    cumulative = 0.0
    peak = 0.0
    for index, trade in enumerate(trades):
        pnl = read_pnl(trade) or 0.0
        cumulative += pnl
        peak = max(peak, cumulative)
        points.append(
            EquityPoint(
                index=index,
                opened_at=_opened(trade),
                pnl=pnl,
                cumulative_pnl=cumulative,
                balance=starting_balance + cumulative,
                drawdown=peak - cumulative,
            )
        )
    return points


def _sum_by_label(trades, label_of, key_of=None) -> dict:
    """Group P&L under `key_of(trade)` (the label itself by default)."""
    groups: dict = {}
    for trade in trades:
        label = label_of(trade)
        if label is None:
            continue
        key = key_of(trade) if key_of else label
        group = groups.setdefault(key, CategoryPnL(label=label, pnl=0.0, trades=0))
        group.pnl += read_pnl(trade) or 0.0
        group.trades += 1
    return groups


def _ranked(groups: dict, limit: int | None) -> list[CategoryPnL]:
    ranked = sorted(groups.values(), key=lambda g: g.pnl, reverse=True)
    return ranked[:limit] if limit else ranked


def breakdown_by_strategy(trades, limit: int | None = BREAKDOWN_LIMIT) -> list[CategoryPnL]:
    """P&L per strategy. Grouped by `strategy_id` so same-named strategies stay apart."""
    groups = _sum_by_label(
        trades,
        lambda t: get_field(t, "strategy_name") or NO_STRATEGY_LABEL,
        key_of=lambda t: (get_field(t, "strategy_id"), get_field(t, "strategy_name")),
    )
    return _ranked(groups, limit)


def breakdown_by_instrument(trades, limit: int | None = BREAKDOWN_LIMIT) -> list[CategoryPnL]:
    groups = _sum_by_label(trades, lambda t: get_field(t, "instrument") or UNKNOWN_INSTRUMENT_LABEL)
    return _ranked(groups, limit)


def breakdown_by_weekday(trades, tz: tzinfo | None = None) -> list[CategoryPnL]:
    """P&L per weekday of `opened_at`, Monday first, weekdays without trades omitted."""

    def weekday_of(trade):
        opened = _opened(trade)
        if opened is None:
            return None
        return WEEKDAY_LABELS[opened.astimezone(tz or timezone.utc).weekday()]

    groups = _sum_by_label(trades, weekday_of)
    return [groups[label] for label in WEEKDAY_LABELS if label in groups]


def pnl_distribution(trades, bins: int = DISTRIBUTION_BINS) -> list[DistributionBin]:
    """Histogram of P&L values over equal-width bins; empty bins are dropped."""
    values = np.array([pnl for pnl in map(read_pnl, trades) if pnl is not None], dtype=float)
    if values.size == 0:
        return []

    low, high = float(values.min()), float(values.max())
    if high == low:
        high = low + 1.0
    counts, edges = np.histogram(values, bins=bins, range=(low, high))

    result = []
    for i, count in enumerate(counts):
        if not count:
            continue
        start, end = float(edges[i]), float(edges[i + 1])
        result.append(DistributionBin(start=start, end=end, mid=(start + end) / 2, count=int(count)))
    return result


def strategy_performance(trades) -> list[StrategyPerformance]:
    """Per-strategy summary using the same formulas as `compute_metrics`."""
    grouped: dict[int | None, list] = defaultdict(list)
    for trade in trades:
        grouped[get_field(trade, "strategy_id")].append(trade)

    rows = []
    for strategy_id, group in grouped.items():
        name = get_field(group[0], "strategy_name") or NO_STRATEGY_LABEL
        summary = compute_metrics(group)
        rows.append(
            StrategyPerformance(
                strategy_id=strategy_id,
                strategy_name=name,
                total_trades=summary.total_trades,
                win_rate=summary.win_rate,
                profit_factor=summary.profit_factor,
                net_pnl=summary.net_pnl,
            )
        )
    return sorted(rows, key=lambda r: r.net_pnl, reverse=True)


def win_streak(trades) -> int:
    """Consecutive winners counting back from the most recent trade.

    Trades without a P&L (still open) are skipped; the first break-even or
    losing trade ends the streak.
    """
    streak = 0
    for trade in sorted(trades, key=lambda t: _opened(t) or _EARLIEST, reverse=True):
        pnl = read_pnl(trade)
        if pnl is None:
            continue
        if pnl <= 0:
            break
        streak += 1
    return streak


def _level(row: tuple) -> TraderLevel:
    level, name, min_trades, min_win_rate, min_profit_factor, requires_profit = row
    return TraderLevel(
        level=level,
        name=name,
        min_trades=min_trades,
        min_win_rate=min_win_rate,
        min_profit_factor=min_profit_factor,
        requires_profit=requires_profit,
    )


def _capped_pct(current: float, required: float) -> float:
    if required <= 0:
        return 100.0
    return min(100.0, current / required * 100)


def trader_level(summary: MetricsSummary) -> TraderLevelProgress:
    """Highest tier whose requirements the summary meets, plus progress to the next."""
    levels = [_level(row) for row in TRADER_LEVELS]

    current_index = 0
    for i in range(len(levels) - 1, -1, -1):
        level = levels[i]
        if (
            summary.total_trades >= level.min_trades
            and summary.win_rate >= level.min_win_rate
            and summary.profit_factor >= level.min_profit_factor
            and (not level.requires_profit or summary.net_pnl > 0)
        ):
            current_index = i
            break

    current = levels[current_index]
    nxt = levels[current_index + 1] if current_index + 1 < len(levels) else None
    if nxt is None:
        return TraderLevelProgress(current=current, next=None, progress=100.0)

    profit_pct = 100.0 if not nxt.requires_profit or summary.net_pnl > 0 else 0.0
    progress = (
        _capped_pct(summary.total_trades, nxt.min_trades)
        + _capped_pct(summary.win_rate, nxt.min_win_rate)
        + _capped_pct(summary.profit_factor, nxt.min_profit_factor)
        + profit_pct
    ) / 4
    return TraderLevelProgress(current=current, next=nxt, progress=progress)


def target_progress(label: str, current: float, target: float) -> TargetProgress:
    progress = max(0.0, current / target * 100) if target > 0 else 0.0
    return TargetProgress(
        label=label,
        current=current,
        target=target,
        progress=progress,
        is_complete=progress >= 100,
    )
