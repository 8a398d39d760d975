"""User model: account owner of every journal record."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    email: str = ""
    display_name: str = ""
    base_currency: str = "USD"
    timezone: str = "UTC"  # IANA name, anchors period filters

    # Monthly targets shown on the dashboard
    monthly_pnl_goal: float = 0.0
    win_rate_goal: float = 0.0
    monthly_trades_goal: int = 0

    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
