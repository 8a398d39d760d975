"""Loading a user's journal rows as metrics-engine input."""

from sqlmodel import Session, select

from tradejournal.models.strategy import Strategy
from tradejournal.models.trade import Trade


def fetch_user_trades(session: Session, user_id: int) -> list[dict]:
    """All trades of one user, oldest first, with `strategy_name` resolved."""
    trades = session.exec(
        select(Trade)
        .where(Trade.user_id == user_id)
        .order_by(Trade.opened_at, Trade.id)
    ).all()
    names = dict(
        session.exec(select(Strategy.id, Strategy.name).where(Strategy.user_id == user_id)).all()
    )
    return [{**t.model_dump(), "strategy_name": names.get(t.strategy_id)} for t in trades]


def get_owned_strategy(session: Session, strategy_id: int, user_id: int) -> Strategy | None:
    strategy = session.get(Strategy, strategy_id)
    if strategy is None or strategy.user_id != user_id:
        return None
    return strategy
