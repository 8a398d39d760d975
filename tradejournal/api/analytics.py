"""Analytics API: period-filtered metrics, equity curve and breakdowns."""

from datetime import datetime

from fastapi import APIRouter, Depends
from sqlmodel import Session

from tradejournal.config import settings
from tradejournal.database import get_session
from tradejournal.models.user import User
from tradejournal.schemas.metrics import (
    Breakdown,
    DistributionBin,
    EquityPoint,
    MetricsSummary,
    StrategyPerformance,
)
from tradejournal.services import metrics
from tradejournal.services.journal import fetch_user_trades
from tradejournal.services.periods import Period, filter_trades_by_period, resolve_timezone
from tradejournal.api.deps import get_current_user

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


def _trades_for_period(session: Session, user: User, period: Period) -> list[dict]:
    """The user's trades inside `period`, oldest first."""
    now = datetime.now(resolve_timezone(user.timezone))
    trades = fetch_user_trades(session, user.id)
    return metrics.order_by_open_time(filter_trades_by_period(trades, period, now))


@router.get("/summary", response_model=MetricsSummary)
def analytics_summary(
    period: Period = Period.ALL,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    trades = _trades_for_period(session, user, period)
    return metrics.compute_metrics(trades, tz=resolve_timezone(user.timezone))


@router.get("/equity", response_model=list[EquityPoint])
def equity_curve(
    period: Period = Period.ALL,
    starting_balance: float | None = None,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Cumulative P&L per trade, oldest first."""
    trades = _trades_for_period(session, user, period)
    if starting_balance is None:
        starting_balance = settings.starting_balance
    return metrics.build_equity_curve(trades, starting_balance=starting_balance)


@router.get("/breakdown", response_model=Breakdown)
def pnl_breakdown(
    period: Period = Period.ALL,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    trades = _trades_for_period(session, user, period)
    return Breakdown(
        by_strategy=metrics.breakdown_by_strategy(trades),
        by_instrument=metrics.breakdown_by_instrument(trades),
        by_weekday=metrics.breakdown_by_weekday(trades, tz=resolve_timezone(user.timezone)),
    )


@router.get("/distribution", response_model=list[DistributionBin])
def pnl_distribution(
    period: Period = Period.ALL,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return metrics.pnl_distribution(_trades_for_period(session, user, period))


@router.get("/strategies", response_model=list[StrategyPerformance])
def strategy_breakdown(
    period: Period = Period.ALL,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return metrics.strategy_performance(_trades_for_period(session, user, period))
