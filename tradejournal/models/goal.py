"""Goal model: trading and personal goals with a coarse status."""

from datetime import date, datetime, timezone
from sqlmodel import SQLModel, Field


class Goal(SQLModel, table=True):
    __tablename__ = "goal"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    title: str
    description: str | None = None
    category: str = "TRADING"  # TRADING, HEALTH, PERSONAL, OTHER
    status: str = "NOT_STARTED"  # NOT_STARTED, IN_PROGRESS, COMPLETED
    target_metric: str | None = None
    due_date: date | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
