"""Trade journal API."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlmodel import Session, col, or_, select

from tradejournal.database import get_session
from tradejournal.models.trade import Trade
from tradejournal.models.user import User
from tradejournal.schemas.trade import JournalStats, TradeCreate, TradeRead, TradeUpdate
from tradejournal.services.journal import fetch_user_trades, get_owned_strategy
from tradejournal.services.metrics import compute_metrics
from tradejournal.utils.constants import TRADE_STATUS_FILTERS
from tradejournal.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trades", tags=["trades"])


def _get_owned_trade(session: Session, trade_id: int, user: User) -> Trade:
    trade = session.get(Trade, trade_id)
    if not trade or trade.user_id != user.id:
        raise HTTPException(status_code=404, detail="Trade not found")
    return trade


def _check_strategy(session: Session, strategy_id: int | None, user: User):
    if strategy_id is not None and get_owned_strategy(session, strategy_id, user.id) is None:
        raise HTTPException(status_code=422, detail="Unknown strategy")


@router.get("", response_model=list[TradeRead])
def list_trades(
    status: str = "all",
    q: str | None = None,
    strategy_id: int | None = None,
    limit: int = 50,
    offset: int = 0,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    stmt = select(Trade).where(Trade.user_id == user.id).order_by(col(Trade.opened_at).desc())
    if status == "open":
        stmt = stmt.where(col(Trade.closed_at).is_(None))
    elif status == "closed":
        stmt = stmt.where(col(Trade.closed_at).is_not(None))
    elif status not in TRADE_STATUS_FILTERS:
        allowed = ", ".join(TRADE_STATUS_FILTERS)
        raise HTTPException(status_code=422, detail=f"status must be one of: {allowed}")
    if q:
        pattern = f"%{q.strip()}%"
        stmt = stmt.where(or_(col(Trade.instrument).ilike(pattern), col(Trade.setup_type).ilike(pattern)))
    if strategy_id is not None:
        stmt = stmt.where(Trade.strategy_id == strategy_id)
    stmt = stmt.offset(offset).limit(limit)
    return session.exec(stmt).all()


@router.post("", response_model=TradeRead, status_code=201)
def create_trade(
    data: TradeCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    _check_strategy(session, data.strategy_id, user)
    trade = Trade(**data.model_dump(), user_id=user.id)
    session.add(trade)
    session.commit()
    session.refresh(trade)
    logger.info(f"User {user.id} logged trade {trade.id} ({trade.instrument} {trade.direction})")
    return trade


@router.get("/stats", response_model=JournalStats)
def journal_stats(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Header figures for the journal page, all time."""
    summary = compute_metrics(fetch_user_trades(session, user.id))
    return JournalStats(
        total=summary.total_trades,
        net_pnl=summary.net_pnl,
        win_rate=summary.win_rate,
        open_positions=summary.open_trades,
    )


@router.get("/{trade_id}", response_model=TradeRead)
def get_trade(
    trade_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return _get_owned_trade(session, trade_id, user)


@router.put("/{trade_id}", response_model=TradeRead)
def update_trade(
    trade_id: int,
    data: TradeUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    trade = _get_owned_trade(session, trade_id, user)
    update_data = data.model_dump(exclude_unset=True)

    # Validate full merged record so partial updates cannot break closed_at >= opened_at.
    merged = {**trade.model_dump(), **update_data}
    try:
        TradeCreate.model_validate(merged)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False, include_input=False),
        )
    _check_strategy(session, update_data.get("strategy_id"), user)

    for key, value in update_data.items():
        setattr(trade, key, value)
    trade.updated_at = datetime.now(timezone.utc)

    session.add(trade)
    session.commit()
    session.refresh(trade)
    return trade


@router.delete("/{trade_id}", status_code=204)
def delete_trade(
    trade_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    trade = _get_owned_trade(session, trade_id, user)
    session.delete(trade)
    session.commit()
    logger.info(f"User {user.id} deleted trade {trade_id}")
