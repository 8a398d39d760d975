"""Pydantic schemas for Habit API."""

import datetime as dt

from pydantic import BaseModel, Field, field_validator


class HabitCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def _trim_name(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text


class HabitRead(BaseModel):
    id: int
    name: str
    description: str | None
    created_at: dt.datetime

    model_config = {"from_attributes": True}


class HabitLogUpsert(BaseModel):
    date: dt.date
    completed: bool = True


class HabitLogRead(BaseModel):
    id: int
    habit_id: int
    date: dt.date
    completed: bool

    model_config = {"from_attributes": True}


class HabitStats(BaseModel):
    date: dt.date
    total_habits: int
    completed: int
    completion_rate: float
