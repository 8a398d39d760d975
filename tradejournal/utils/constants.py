"""Shared constants and defaults."""

TRADE_DIRECTIONS = ["LONG", "SHORT"]
TRADE_SOURCES = ["MANUAL", "IMPORT"]
TRADE_STATUS_FILTERS = ["all", "open", "closed"]

GOAL_CATEGORIES = ["TRADING", "HEALTH", "PERSONAL", "OTHER"]
GOAL_STATUSES = ["NOT_STARTED", "IN_PROGRESS", "COMPLETED"]

# Goal status to progress percentage
GOAL_PROGRESS: dict[str, int] = {
    "NOT_STARTED": 0,
    "IN_PROGRESS": 50,
    "COMPLETED": 100,
}

# Labels used when a trade has no strategy / instrument
NO_STRATEGY_LABEL = "No Strategy"
UNKNOWN_INSTRUMENT_LABEL = "Unknown"

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

BREAKDOWN_LIMIT = 8
DISTRIBUTION_BINS = 15

# JSON stand-in for an infinite profit factor
INFINITY_SENTINEL = "∞"

# Trader levels, lowest first: (level, name, min_trades, min_win_rate, min_profit_factor, requires_profit)
TRADER_LEVELS: list[tuple[int, str, int, float, float, bool]] = [
    (1, "Beginner", 0, 0.0, 0.0, False),
    (2, "Novice", 10, 40.0, 0.0, False),
    (3, "Apprentice", 25, 45.0, 0.8, False),
    (4, "Intermediate", 50, 50.0, 1.0, False),
    (5, "Advanced", 100, 52.0, 1.2, True),
    (6, "Expert", 200, 55.0, 1.5, True),
    (7, "Master", 500, 58.0, 1.8, True),
    (8, "Elite", 1000, 60.0, 2.0, True),
]
