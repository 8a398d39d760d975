"""Strategy model: a playbook entry with its rule checklist."""

from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Strategy(SQLModel, table=True):
    __tablename__ = "strategy"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    name: str = Field(index=True)
    description: str | None = None
    markets: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    timeframes: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    # Rule group name -> rules, e.g. {"Entry": ["Break of structure"], "Risk": [...]}
    checklist: dict[str, list[str]] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
