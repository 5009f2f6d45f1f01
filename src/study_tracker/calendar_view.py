"""Month grid and the aggregation of every due date for the calendar view."""
import calendar
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Optional

from study_tracker.datemath import format_for_storage, normalize_to_midnight, parse_flexible
from study_tracker.models import TaskGroup


def month_grid(year: int, month: int) -> list[Optional[int]]:
    """Day numbers of a month, padded with None so the first week starts on Sunday."""
    first_weekday, days_in_month = calendar.monthrange(year, month)
    padding = (first_weekday + 1) % 7
    return [None] * padding + list(range(1, days_in_month + 1))


def due_dates_by_day(groups: list[TaskGroup], today: Optional[datetime] = None) -> dict[str, list[str]]:
    """Map "YYYY-MM-DD" to labels of everything due that day."""
    today = normalize_to_midnight(today or datetime.now())
    by_day = defaultdict(list)
    for group in groups:
        for task in group.tasks:
            if task.days_remaining is not None:
                due = today + timedelta(days=task.days_remaining)
            else:
                due = parse_flexible(task.due_date)
            if due is None:
                continue
            by_day[format_for_storage(due)].append(f"{task.text} ({group.title})")
    return dict(sorted(by_day.items()))


def month_due_dates(groups: list[TaskGroup], year: int, month: int,
                    today: Optional[datetime] = None) -> dict[int, list[str]]:
    """Due labels for one month keyed by day number."""
    prefix = f"{year:04d}-{month:02d}-"
    return {
        int(day[len(prefix):]): labels
        for day, labels in due_dates_by_day(groups, today).items()
        if day.startswith(prefix)
    }
