"""Pydantic schemas for Goal API."""

from datetime import date, datetime

from pydantic import BaseModel, Field, computed_field, field_validator

from tradejournal.utils.constants import GOAL_CATEGORIES, GOAL_PROGRESS, GOAL_STATUSES


def _choice(value: str, choices: list[str]) -> str:
    text = value.strip().upper()
    if text not in choices:
        allowed = ", ".join(choices)
        raise ValueError(f"must be one of: {allowed}")
    return text


class GoalCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    category: str = "TRADING"
    status: str = "NOT_STARTED"
    target_metric: str | None = Field(default=None, max_length=200)
    due_date: date | None = None

    @field_validator("title")
    @classmethod
    def _trim_title(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text

    @field_validator("category")
    @classmethod
    def _validate_category(cls, value: str) -> str:
        return _choice(value, GOAL_CATEGORIES)

    @field_validator("status")
    @classmethod
    def _validate_status(cls, value: str) -> str:
        return _choice(value, GOAL_STATUSES)


class GoalUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    category: str | None = None
    status: str | None = None
    target_metric: str | None = Field(default=None, max_length=200)
    due_date: date | None = None

    @field_validator("category")
    @classmethod
    def _validate_optional_category(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _choice(value, GOAL_CATEGORIES)

    @field_validator("status")
    @classmethod
    def _validate_optional_status(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _choice(value, GOAL_STATUSES)


class GoalStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def _validate_status(cls, value: str) -> str:
        return _choice(value, GOAL_STATUSES)


class GoalRead(BaseModel):
    id: int
    title: str
    description: str | None
    category: str
    status: str
    target_metric: str | None
    due_date: date | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def progress(self) -> int:
        return GOAL_PROGRESS.get(self.status, 0)


class GoalStats(BaseModel):
    total: int
    completed: int
    in_progress: int
    completion_rate: float
