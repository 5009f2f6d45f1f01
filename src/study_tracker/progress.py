"""Conversions between days remaining and numerator/denominator progress."""
import dataclasses
from datetime import datetime
from typing import Optional

from study_tracker.datemath import days_between, days_remaining, parse_flexible
from study_tracker.models import ImportantTask, ProgressFraction


def percentage(numerator: int, denominator: int) -> float:
    return ProgressFraction(numerator, denominator).percentage


def derive_progress(days_left: int, prior_denominator: int = 1) -> ProgressFraction:
    """Progress for a countdown with days_left to go.

    The denominator grows to fit a countdown longer than any previously
    recorded capacity, so the numerator never goes below zero.
    """
    days_left = max(days_left, 0)
    denominator = max(prior_denominator, days_left, 1)
    numerator = min(max(denominator - days_left, 0), denominator)
    return ProgressFraction(numerator, denominator)


def infer_days_remaining(numerator: int, denominator: int) -> int:
    return max(denominator - numerator, 0)


def current_days_remaining(task: ImportantTask) -> int:
    if task.days_remaining is not None:
        return max(task.days_remaining, 0)
    return infer_days_remaining(task.numerator, task.denominator)


def _stamp(now: datetime) -> str:
    return now.isoformat(timespec="seconds")


def apply_daily_decay(task: ImportantTask, now: Optional[datetime] = None) -> Optional[ImportantTask]:
    """Count days_remaining down by the calendar days since the last update.

    Returns the updated task, or None when the task was already updated
    today (or carries no usable timestamp).
    """
    now = now or datetime.now()
    last_update = parse_flexible(task.updated_at)
    if last_update is None:
        return None
    elapsed = days_between(last_update, now)
    if elapsed <= 0:
        return None
    new_days = max(current_days_remaining(task) - elapsed, 0)
    fraction = derive_progress(new_days, task.denominator)
    return dataclasses.replace(
        task,
        days_remaining=new_days,
        numerator=fraction.numerator,
        denominator=fraction.denominator,
        updated_at=_stamp(now),
    )


def refresh_from_due_date(task: ImportantTask, now: Optional[datetime] = None) -> Optional[ImportantTask]:
    """Recompute days_remaining from the stored due date. None if unchanged."""
    now = now or datetime.now()
    due = parse_flexible(task.due_date)
    if due is None:
        return None
    new_days = days_remaining(due, now)
    fraction = derive_progress(new_days, task.denominator)
    if (new_days, fraction.numerator, fraction.denominator) == (
        task.days_remaining, task.numerator, task.denominator,
    ):
        return None
    return dataclasses.replace(
        task,
        days_remaining=new_days,
        numerator=fraction.numerator,
        denominator=fraction.denominator,
        updated_at=_stamp(now),
    )


def resync_task(task: ImportantTask, now: Optional[datetime] = None) -> Optional[ImportantTask]:
    """Due-date recompute when the task has one, daily decay otherwise."""
    if parse_flexible(task.due_date) is not None:
        return refresh_from_due_date(task, now)
    return apply_daily_decay(task, now)
