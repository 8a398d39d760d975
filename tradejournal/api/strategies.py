"""Strategy playbook API."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlmodel import Session, select

from tradejournal.database import get_session
from tradejournal.models.strategy import Strategy
from tradejournal.models.trade import Trade
from tradejournal.models.user import User
from tradejournal.schemas.strategy import PlaybookStats, StrategyCreate, StrategyRead, StrategyUpdate
from tradejournal.services.journal import get_owned_strategy
from tradejournal.api.deps import get_current_user

router = APIRouter(prefix="/api/strategies", tags=["strategies"])


def _get_owned(session: Session, strategy_id: int, user: User) -> Strategy:
    strategy = get_owned_strategy(session, strategy_id, user.id)
    if strategy is None:
        raise HTTPException(status_code=404, detail="Strategy not found")
    return strategy


@router.get("", response_model=list[StrategyRead])
def list_strategies(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    stmt = select(Strategy).where(Strategy.user_id == user.id).order_by(Strategy.name)
    return session.exec(stmt).all()


@router.post("", response_model=StrategyRead, status_code=201)
def create_strategy(
    data: StrategyCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    strategy = Strategy(**data.model_dump(), user_id=user.id)
    session.add(strategy)
    session.commit()
    session.refresh(strategy)
    return strategy


@router.get("/stats", response_model=PlaybookStats)
def playbook_stats(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    strategies = session.exec(select(Strategy).where(Strategy.user_id == user.id)).all()
    return PlaybookStats(
        total_strategies=len(strategies),
        total_rule_groups=sum(len(s.checklist) for s in strategies),
        total_rules=sum(len(rules) for s in strategies for rules in s.checklist.values()),
    )


@router.get("/{strategy_id}", response_model=StrategyRead)
def get_strategy(
    strategy_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return _get_owned(session, strategy_id, user)


@router.put("/{strategy_id}", response_model=StrategyRead)
def update_strategy(
    strategy_id: int,
    data: StrategyUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    strategy = _get_owned(session, strategy_id, user)
    update_data = data.model_dump(exclude_unset=True)

    # Validate the merged record so an explicit null cannot blank a required field.
    try:
        StrategyCreate.model_validate({**strategy.model_dump(), **update_data})
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False, include_input=False),
        )

    for key, value in update_data.items():
        setattr(strategy, key, value)
    strategy.updated_at = datetime.now(timezone.utc)

    session.add(strategy)
    session.commit()
    session.refresh(strategy)
    return strategy


@router.delete("/{strategy_id}", status_code=204)
def delete_strategy(
    strategy_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    strategy = _get_owned(session, strategy_id, user)

    # Trades outlive the playbook entry; they fall back to "No Strategy"
    trades = session.exec(select(Trade).where(Trade.strategy_id == strategy_id)).all()
    for trade in trades:
        trade.strategy_id = None
        session.add(trade)

    session.delete(strategy)
    session.commit()
