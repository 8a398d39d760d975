"""Pydantic schemas for the dashboard API."""

from pydantic import BaseModel, Field

from tradejournal.schemas.metrics import MetricsSummary, TargetProgress, TraderLevelProgress
from tradejournal.schemas.trade import TradeRead


class DashboardSummary(BaseModel):
    metrics: MetricsSummary
    win_streak: int
    monthly_pnl: float
    monthly_trades: int
    level: TraderLevelProgress
    targets: list[TargetProgress]
    recent_trades: list[TradeRead]


class TargetsUpdate(BaseModel):
    monthly_pnl_goal: float | None = Field(default=None, ge=0)
    win_rate_goal: float | None = Field(default=None, ge=0, le=100)
    monthly_trades_goal: int | None = Field(default=None, ge=0)
