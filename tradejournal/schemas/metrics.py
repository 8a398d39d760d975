"""Pydantic schemas for metrics engine output."""

import math
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, PlainSerializer

from tradejournal.utils.constants import INFINITY_SENTINEL


def _serialize_profit_factor(value: float) -> float | str:
    if math.isinf(value):
        return INFINITY_SENTINEL
    return value


# Infinite values are written as "∞" in JSON; Python dumps keep the float.
ProfitFactor = Annotated[float, PlainSerializer(_serialize_profit_factor, when_used="json")]


class MetricsSummary(BaseModel):
    """
    Performance summary over one set of trades.

    Trades with a null (or unreadable) P&L count towards `total_trades` and
    `no_pnl_trades` only, so
    profitable + losing + break_even + no_pnl == total always holds.
    """

    total_trades: int = 0
    profitable_trades: int = 0
    losing_trades: int = 0
    break_even_trades: int = 0
    no_pnl_trades: int = 0
    open_trades: int = 0
    decisive_trades: int = 0

    win_rate: float = 0.0  # percent, 0..100
    total_profit: float = 0.0
    total_loss_abs: float = 0.0
    net_pnl: float = 0.0
    profit_factor: ProfitFactor = 0.0

    avg_win: float = 0.0
    avg_loss: float = 0.0
    expected_value: float = 0.0
    avg_risk_reward: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0

    avg_holding_minutes: float = 0.0
    trading_days: int = 0
    net_daily_pnl: float = 0.0
    max_drawdown: float = 0.0


class EquityPoint(BaseModel):
    index: int
    opened_at: datetime | None
    pnl: float
    cumulative_pnl: float
    balance: float
    drawdown: float  # distance below the running peak, >= 0


class CategoryPnL(BaseModel):
    label: str
    pnl: float
    trades: int


class Breakdown(BaseModel):
    by_strategy: list[CategoryPnL]
    by_instrument: list[CategoryPnL]
    by_weekday: list[CategoryPnL]


class DistributionBin(BaseModel):
    start: float
    end: float
    mid: float
    count: int


class StrategyPerformance(BaseModel):
    strategy_id: int | None
    strategy_name: str
    total_trades: int
    win_rate: float
    profit_factor: ProfitFactor
    net_pnl: float


class TraderLevel(BaseModel):
    level: int
    name: str
    min_trades: int
    min_win_rate: float
    min_profit_factor: float
    requires_profit: bool


class TraderLevelProgress(BaseModel):
    current: TraderLevel
    next: TraderLevel | None
    progress: float  # percent towards `next`, 100 at the top tier


class TargetProgress(BaseModel):
    label: str
    current: float
    target: float
    progress: float
    is_complete: bool
