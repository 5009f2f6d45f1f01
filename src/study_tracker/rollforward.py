"""Weekly recurring dates: roll elapsed dates forward, count days to a weekday."""
from datetime import datetime, timedelta
from typing import Optional

from study_tracker.datemath import (
    DATE_ONLY_RE, format_for_storage, js_weekday, normalize_to_midnight, parse_flexible,
)

WEEK = timedelta(days=7)


def roll_forward(date: datetime, today: datetime) -> datetime:
    """Advance date by whole weeks until it is strictly after today."""
    candidate = normalize_to_midnight(date)
    limit = normalize_to_midnight(today)
    while candidate <= limit:
        candidate += WEEK
    return candidate


def next_weekday(target_weekday: int, today: datetime) -> int:
    """Days until the next target weekday (0=Sunday), in the range 1..7.

    A target equal to today's weekday means next week, never zero.
    """
    if not 0 <= target_weekday <= 6:
        raise ValueError(f"target_weekday must be 0..6, got {target_weekday}")
    days_until = (target_weekday - js_weekday(today) + 7) % 7
    return days_until or 7


def ensure_future_date(existing: Optional[str], target_weekday: int, today: datetime) -> str:
    """Keep a stored date-only value that is still ahead, else derive one from the schedule."""
    if existing and DATE_ONLY_RE.match(existing):
        parsed = parse_flexible(existing)
        if parsed is not None and normalize_to_midnight(parsed) > normalize_to_midnight(today):
            return existing
    base = normalize_to_midnight(today) + timedelta(days=next_weekday(target_weekday, today))
    return format_for_storage(base)
