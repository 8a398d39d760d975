"""Database models."""

from tradejournal.models.user import User
from tradejournal.models.strategy import Strategy
from tradejournal.models.trade import Trade
from tradejournal.models.goal import Goal
from tradejournal.models.habit import Habit, HabitLog

__all__ = [
    "User",
    "Strategy",
    "Trade",
    "Goal",
    "Habit",
    "HabitLog",
]
