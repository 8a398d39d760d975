"""Dashboard API: all-time summary, streak, level and monthly targets."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlmodel import Session

from tradejournal.config import settings
from tradejournal.database import get_session
from tradejournal.models.user import User
from tradejournal.schemas.dashboard import DashboardSummary, TargetsUpdate
from tradejournal.schemas.metrics import TargetProgress
from tradejournal.schemas.trade import TradeRead
from tradejournal.services import metrics
from tradejournal.services.journal import fetch_user_trades
from tradejournal.services.periods import Period, filter_trades_by_period, resolve_timezone
from tradejournal.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def _targets(user: User, monthly_pnl: float, win_rate: float, monthly_trades: int) -> list[TargetProgress]:
    return [
        metrics.target_progress("Monthly P&L", monthly_pnl, user.monthly_pnl_goal),
        metrics.target_progress("Win Rate", win_rate, user.win_rate_goal),
        metrics.target_progress("Trades/Month", monthly_trades, user.monthly_trades_goal),
    ]


@router.get("/summary", response_model=DashboardSummary)
def dashboard_summary(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Aggregated stats across the user's whole journal."""
    tz = resolve_timezone(user.timezone)
    trades = metrics.order_by_open_time(fetch_user_trades(session, user.id))
    summary = metrics.compute_metrics(trades, tz=tz)

    month = filter_trades_by_period(trades, Period.MONTH, datetime.now(tz))
    monthly = metrics.compute_metrics(month, tz=tz)

    recent = trades[-settings.recent_trades_limit:][::-1] if settings.recent_trades_limit > 0 else []

    return DashboardSummary(
        metrics=summary,
        win_streak=metrics.win_streak(trades),
        monthly_pnl=monthly.net_pnl,
        monthly_trades=monthly.total_trades,
        level=metrics.trader_level(summary),
        targets=_targets(user, monthly.net_pnl, summary.win_rate, monthly.total_trades),
        recent_trades=[TradeRead.model_validate(t) for t in recent],
    )


@router.put("/targets", response_model=list[TargetProgress])
def update_targets(
    data: TargetsUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Set monthly targets; returns progress against the new values."""
    for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(user, key, value)
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info(f"User {user.id} updated monthly targets")

    tz = resolve_timezone(user.timezone)
    trades = fetch_user_trades(session, user.id)
    month = filter_trades_by_period(trades, Period.MONTH, datetime.now(tz))
    monthly = metrics.compute_metrics(month, tz=tz)
    win_rate = metrics.compute_metrics(trades, tz=tz).win_rate
    return _targets(user, monthly.net_pnl, win_rate, monthly.total_trades)
