"""Pydantic schemas for the strategy playbook API."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


def _clean_list(values: list[str]) -> list[str]:
    cleaned = []
    for value in values:
        text = value.strip()
        if text and text not in cleaned:
            cleaned.append(text)
    return cleaned


def _clean_checklist(groups: dict[str, list[str]]) -> dict[str, list[str]]:
    cleaned = {}
    for name, rules in groups.items():
        group = name.strip()
        if not group:
            raise ValueError("rule group names must not be empty")
        cleaned[group] = [rule.strip() for rule in rules if rule.strip()]
    return cleaned


class StrategyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str | None = None
    markets: list[str] = []
    timeframes: list[str] = []
    checklist: dict[str, list[str]] = {}

    @field_validator("name")
    @classmethod
    def _trim_name(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text

    @field_validator("markets", "timeframes")
    @classmethod
    def _clean_tags(cls, value: list[str]) -> list[str]:
        return _clean_list(value)

    @field_validator("checklist")
    @classmethod
    def _validate_checklist(cls, value: dict[str, list[str]]) -> dict[str, list[str]]:
        return _clean_checklist(value)


class StrategyUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = None
    markets: list[str] | None = None
    timeframes: list[str] | None = None
    checklist: dict[str, list[str]] | None = None

    @field_validator("name")
    @classmethod
    def _trim_optional_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text

    @field_validator("markets", "timeframes")
    @classmethod
    def _clean_optional_tags(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return _clean_list(value)

    @field_validator("checklist")
    @classmethod
    def _validate_optional_checklist(cls, value: dict[str, list[str]] | None) -> dict[str, list[str]] | None:
        if value is None:
            return None
        return _clean_checklist(value)


class StrategyRead(BaseModel):
    id: int
    name: str
    description: str | None
    markets: list[str]
    timeframes: list[str]
    checklist: dict[str, list[str]]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PlaybookStats(BaseModel):
    total_strategies: int
    total_rule_groups: int
    total_rules: int
