"""Trade model: one journal entry per position, open or closed."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class Trade(SQLModel, table=True):
    __tablename__ = "trade"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    strategy_id: int | None = Field(default=None, foreign_key="strategy.id", index=True)

    instrument: str = Field(index=True)
    direction: str  # "LONG" or "SHORT"
    entry_price: float
    exit_price: float | None = None
    position_size: float | None = None
    stop_loss: float | None = None
    take_profit: float | None = None

    # Realized result; null while the position is open
    profit_loss_currency: float | None = None
    profit_loss_r: float | None = None

    opened_at: datetime = Field(index=True)
    closed_at: datetime | None = None

    # Review fields
    setup_type: str | None = None
    session: str | None = None  # "London", "New York", ...
    market_condition: str | None = None
    notes: str | None = None
    execution_rating: int | None = None  # 1..5
    follow_plan: bool | None = None
    source: str = "MANUAL"  # "MANUAL" or "IMPORT"

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
