"""Calendar period windows for analytics filters.

Windows are anchored to "now" in the user's timezone: ISO week (Monday
start), calendar month, quarter (Jan/Apr/Jul/Oct) and calendar year.
"""

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tradejournal.utils.records import get_field
from tradejournal.utils.timestamps import as_utc, parse_timestamp

logger = logging.getLogger(__name__)


class Period(str, Enum):
    ALL = "all"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


def resolve_timezone(name: str | None) -> tzinfo:
    """Look up an IANA timezone, falling back to UTC for unknown names."""
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {name!r}; using UTC")
        return timezone.utc


def _add_months(value: datetime, months: int) -> datetime:
    # Only called on first-of-month values, so the day never overflows
    index = value.month - 1 + months
    return value.replace(year=value.year + index // 12, month=index % 12 + 1)


def period_window(period: Period | str, now: datetime) -> tuple[datetime, datetime] | None:
    """Return the inclusive [start, end] window containing `now`, or None for "all"."""
    period = Period(period)
    if period is Period.ALL:
        return None

    if now.tzinfo is None:
        now = as_utc(now)
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if period is Period.WEEK:
        start = day_start - timedelta(days=day_start.weekday())
        end = start + timedelta(days=7)
    elif period is Period.MONTH:
        start = day_start.replace(day=1)
        end = _add_months(start, 1)
    elif period is Period.QUARTER:
        first_month = 3 * ((day_start.month - 1) // 3) + 1
        start = day_start.replace(month=first_month, day=1)
        end = _add_months(start, 3)
    else:
        start = day_start.replace(month=1, day=1)
        end = start.replace(year=start.year + 1)

    return start, end - timedelta(microseconds=1)


def filter_trades_by_period(trades, period: Period | str, now: datetime | None = None) -> list:
    """Keep trades whose `opened_at` falls inside the period window.

    "all" returns every trade untouched. For any other period, trades
    without a parseable `opened_at` are dropped.
    """
    window = period_window(period, now or datetime.now(timezone.utc))
    if window is None:
        return list(trades)

    start, end = window
    kept = []
    for trade in trades:
        opened = parse_timestamp(get_field(trade, "opened_at"))
        if opened is None:
            continue
        if start <= opened <= end:
            kept.append(trade)
    return kept
