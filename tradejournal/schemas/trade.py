"""Pydantic schemas for Trade API."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from tradejournal.utils.constants import TRADE_DIRECTIONS, TRADE_SOURCES
from tradejournal.utils.timestamps import as_utc


def _check_choice(value: str, choices: list[str]) -> str:
    text = value.strip().upper()
    if text not in choices:
        allowed = ", ".join(choices)
        raise ValueError(f"must be one of: {allowed}")
    return text


class TradeCreate(BaseModel):
    instrument: str = Field(min_length=1, max_length=32)
    direction: str
    entry_price: float = Field(gt=0)
    exit_price: float | None = Field(default=None, gt=0)
    position_size: float | None = Field(default=None, gt=0)
    stop_loss: float | None = Field(default=None, gt=0)
    take_profit: float | None = Field(default=None, gt=0)
    profit_loss_currency: float | None = None
    profit_loss_r: float | None = None
    opened_at: datetime
    closed_at: datetime | None = None
    strategy_id: int | None = None
    setup_type: str | None = Field(default=None, max_length=120)
    session: str | None = Field(default=None, max_length=64)
    market_condition: str | None = Field(default=None, max_length=120)
    notes: str | None = None
    execution_rating: int | None = Field(default=None, ge=1, le=5)
    follow_plan: bool | None = None
    source: str = "MANUAL"

    @field_validator("instrument")
    @classmethod
    def _normalize_instrument(cls, value: str) -> str:
        text = value.strip().upper()
        if not text:
            raise ValueError("must not be empty")
        return text

    @field_validator("direction")
    @classmethod
    def _validate_direction(cls, value: str) -> str:
        return _check_choice(value, TRADE_DIRECTIONS)

    @field_validator("source")
    @classmethod
    def _validate_source(cls, value: str) -> str:
        return _check_choice(value, TRADE_SOURCES)

    @model_validator(mode="after")
    def _validate_timestamps(self):
        if self.closed_at is not None and as_utc(self.closed_at) < as_utc(self.opened_at):
            raise ValueError("closed_at must not be before opened_at")
        return self


class TradeUpdate(BaseModel):
    instrument: str | None = Field(default=None, min_length=1, max_length=32)
    direction: str | None = None
    entry_price: float | None = Field(default=None, gt=0)
    exit_price: float | None = Field(default=None, gt=0)
    position_size: float | None = Field(default=None, gt=0)
    stop_loss: float | None = Field(default=None, gt=0)
    take_profit: float | None = Field(default=None, gt=0)
    profit_loss_currency: float | None = None
    profit_loss_r: float | None = None
    opened_at: datetime | None = None
    closed_at: datetime | None = None
    strategy_id: int | None = None
    setup_type: str | None = Field(default=None, max_length=120)
    session: str | None = Field(default=None, max_length=64)
    market_condition: str | None = Field(default=None, max_length=120)
    notes: str | None = None
    execution_rating: int | None = Field(default=None, ge=1, le=5)
    follow_plan: bool | None = None

    @field_validator("instrument")
    @classmethod
    def _normalize_optional_instrument(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip().upper()
        if not text:
            raise ValueError("must not be empty")
        return text

    @field_validator("direction")
    @classmethod
    def _validate_optional_direction(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _check_choice(value, TRADE_DIRECTIONS)


class TradeRead(BaseModel):
    id: int
    strategy_id: int | None
    instrument: str
    direction: str
    entry_price: float
    exit_price: float | None
    position_size: float | None
    stop_loss: float | None
    take_profit: float | None
    profit_loss_currency: float | None
    profit_loss_r: float | None
    opened_at: datetime
    closed_at: datetime | None
    setup_type: str | None
    session: str | None
    market_condition: str | None
    notes: str | None
    execution_rating: int | None
    follow_plan: bool | None
    source: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class JournalStats(BaseModel):
    total: int
    net_pnl: float
    win_rate: float
    open_positions: int

