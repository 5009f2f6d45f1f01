"""Read-time re-sync of subjects and tasks, and the edits made from the tracker.

Every mutation updates the in-memory TaskGroup first and then writes through
to the store. A failed write is logged and the in-memory value is kept; the
next successful sync reconciles.
"""
import dataclasses
import logging
import sqlite3
import time
from datetime import datetime, timedelta
from typing import Callable, Optional

from study_tracker import fallback, store
from study_tracker.datemath import (
    days_between, format_for_storage, normalize_to_midnight, parse_flexible,
    prepare_date_for_saving,
)
from study_tracker.models import (
    IMPORTANT, PRACTICE, SESSION_TYPES, THEORY, ImportantTask, Progress,
    ProgressFraction, Subject, Task, TaskGroup,
)
from study_tracker.names import CANONICAL_NAMES, canonicalize
from study_tracker.progress import (
    current_days_remaining, derive_progress, infer_days_remaining, resync_task,
)
from study_tracker.rollforward import ensure_future_date, next_weekday, roll_forward
from study_tracker.schedule import target_weekday

logger = logging.getLogger(__name__)


def _persist(action: Callable, *args, **kwargs):
    """Run a store call, logging instead of raising on database errors."""
    try:
        return action(*args, **kwargs)
    except sqlite3.Error as e:
        logger.warning("Could not save %s: %s", getattr(action, "__name__", action), e)
        return None


class SyncTimer:
    """Decides when the periodic re-sync pass is due."""

    def __init__(self, interval: float, clock: Callable[[], float] = time.monotonic):
        self.interval = interval
        self.clock = clock
        self.last_run: Optional[float] = None

    def due(self) -> bool:
        if self.last_run is None:
            return True
        return self.clock() - self.last_run >= self.interval

    def mark(self) -> None:
        self.last_run = self.clock()


# Subjects

def resolve_subject_date(name: str, stored: Optional[str], session_type: str, today: datetime) -> Optional[str]:
    """Next class date in storage form: the stored date rolled forward, or the schedule default."""
    parsed = parse_flexible(stored)
    if parsed is not None:
        return format_for_storage(roll_forward(parsed, today))
    weekday = target_weekday(name, session_type)
    if weekday is None:
        return stored
    return ensure_future_date(None, weekday, today)


def subject_days_remaining(name: str, stored: Optional[str], session_type: str, today: datetime) -> int:
    parsed = parse_flexible(stored)
    if parsed is not None:
        return days_between(today, roll_forward(parsed, today))
    weekday = target_weekday(name, session_type)
    if weekday is None:
        return 0
    return next_weekday(weekday, today)


def sync_subjects(db_path: str, today: Optional[datetime] = None) -> list[Subject]:
    """Load subjects, rolling elapsed dates forward and filling schedule defaults."""
    today = today or datetime.now()
    synced = []
    for subject in store.get_subjects(db_path):
        theory = resolve_subject_date(subject.name, subject.theory_date, THEORY, today)
        practice = resolve_subject_date(subject.name, subject.practice_date, PRACTICE, today)
        if (theory, practice) != (subject.theory_date, subject.practice_date):
            logger.debug("Rolling %s dates to %s / %s", subject.name, theory, practice)
            subject = dataclasses.replace(subject, theory_date=theory, practice_date=practice)
            _persist(
                store.update_subject, db_path, subject.name,
                theory_date=theory, practice_date=practice, now=today,
            )
        synced.append(subject)
    return synced


def _subject_order(subject: Subject) -> tuple:
    if subject.name in CANONICAL_NAMES:
        return (0, CANONICAL_NAMES.index(subject.name), "")
    return (1, 0, subject.name)


def build_subject_groups(
    subjects: list[Subject], progress_rows: list[Progress], today: datetime
) -> list[TaskGroup]:
    by_key = {(canonicalize(p.subject_name), p.table_type): p for p in progress_rows}
    groups = []
    for session_type in SESSION_TYPES:
        group = TaskGroup(session_type)
        for subject in sorted(subjects, key=_subject_order):
            row = by_key.get((subject.name, session_type))
            total = row.total_pdfs if row and row.total_pdfs else subject.pdf_count
            denominator = max(total or 0, 1)
            numerator = min(max(row.current_progress if row else 0, 0), denominator)
            stored = subject.date_for(session_type)
            group.tasks.append(Task(
                id=f"{subject.name}:{session_type}",
                text=subject.name,
                fraction=ProgressFraction(numerator, denominator),
                session_type=session_type,
                due_date=stored,
                days_remaining=subject_days_remaining(subject.name, stored, session_type, today),
            ))
        groups.append(group)
    return groups


# Important tasks

def sync_important_tasks(
    db_path: str, local_path: Optional[str] = None, now: Optional[datetime] = None
) -> list[ImportantTask]:
    """Load important tasks and bring their countdowns up to date.

    When the database has no tasks, the local file is read instead and its
    tasks are refreshed in memory only.
    """
    now = now or datetime.now()
    tasks = store.get_important_tasks(db_path)
    if not tasks and local_path:
        local = fallback.read_tasks(local_path)
        return [resync_task(t, now) or t for t in local]

    synced = []
    for task in tasks:
        updated = resync_task(task, now)
        if updated is None:
            synced.append(task)
            continue
        saved = _persist(
            store.update_important_task, db_path, task.id, now=now,
            days_remaining=updated.days_remaining,
            numerator=updated.numerator,
            denominator=updated.denominator,
        )
        synced.append(saved or updated)
    return synced


def task_from_important(task: ImportantTask) -> Task:
    return Task(
        id=f"task:{task.id}",
        text=task.text,
        fraction=task.fraction,
        session_type=IMPORTANT,
        due_date=task.due_date,
        days_remaining=current_days_remaining(task),
        subtopics=list(task.subtopics),
        url=task.url,
    )


def build_important_group(tasks: list[ImportantTask]) -> TaskGroup:
    return TaskGroup(IMPORTANT, [task_from_important(t) for t in tasks])


def resync(db_path: str, local_path: Optional[str] = None, now: Optional[datetime] = None) -> list[TaskGroup]:
    """Full pass: roll subject dates, decay task countdowns, rebuild the groups."""
    now = now or datetime.now()
    subjects = sync_subjects(db_path, now)
    groups = build_subject_groups(subjects, store.get_progress(db_path), now)
    groups.append(build_important_group(sync_important_tasks(db_path, local_path, now)))
    return groups


def find_group(groups: list[TaskGroup], session_type: str) -> Optional[TaskGroup]:
    for group in groups:
        if group.session_type == session_type:
            return group
    return None


def _replace_task(group: TaskGroup, task_id: str, **changes) -> Optional[Task]:
    for i, task in enumerate(group.tasks):
        if task.id == task_id:
            group.tasks[i] = dataclasses.replace(task, **changes)
            return group.tasks[i]
    return None


def _important_id(task: Task) -> int:
    return int(task.id.split(":", 1)[1])


def _primary_has_tasks(db_path: str) -> bool:
    try:
        return bool(store.get_important_tasks(db_path))
    except sqlite3.Error:
        return False


def _rewrite_local(db_path: str, local_path: Optional[str], task_id: int, changes: Optional[dict]) -> None:
    """Update (or remove, when `changes` is None) a task kept in the local file."""
    if not local_path:
        return
    tasks = []
    for task in fallback.read_tasks(local_path):
        if task.id != task_id:
            tasks.append(task)
        elif changes is not None:
            tasks.append(dataclasses.replace(task, **changes))
    fallback.write_tasks(local_path, tasks, primary_has_data=_primary_has_tasks(db_path))


def _save_important(
    db_path: str, local_path: Optional[str], task: Task, now: Optional[datetime], **fields
) -> None:
    """Write an edit of an important task to wherever the task lives."""
    task_id = _important_id(task)
    if task_id < 0:
        now = now or datetime.now()
        fields["updated_at"] = now.isoformat(timespec="seconds")
        _rewrite_local(db_path, local_path, task_id, fields)
        return
    _persist(store.update_important_task, db_path, task_id, now=now, **fields)


# Edits

def set_progress(
    db_path: str,
    group: TaskGroup,
    task_id: str,
    numerator: int,
    denominator: Optional[int] = None,
    now: Optional[datetime] = None,
    local_path: Optional[str] = None,
) -> Optional[Task]:
    """Set a task's completed/total units, clamped to a valid fraction."""
    now = now or datetime.now()
    task = group.find(task_id)
    if task is None:
        return None
    denominator = max(denominator if denominator is not None else task.fraction.denominator, 1)
    numerator = min(max(numerator, 0), denominator)
    fraction = ProgressFraction(numerator, denominator)

    if group.session_type == IMPORTANT:
        days = infer_days_remaining(numerator, denominator)
        due = None
        if task.due_date:
            due = format_for_storage(normalize_to_midnight(now) + timedelta(days=days))
        updated = _replace_task(group, task_id, fraction=fraction, days_remaining=days, due_date=due)
        _save_important(
            db_path, local_path, task, now,
            numerator=numerator, denominator=denominator, days_remaining=days, due_date=due,
        )
        return updated

    updated = _replace_task(group, task_id, fraction=fraction)
    _persist(store.update_progress, db_path, task.text, group.session_type, numerator, denominator, now=now)
    return updated


def set_days_remaining(
    db_path: str,
    group: TaskGroup,
    task_id: str,
    days: int,
    now: Optional[datetime] = None,
    local_path: Optional[str] = None,
) -> Optional[Task]:
    """Move a task's due date to `days` from today.

    Subject sessions always point at a future class, so 0 or less means a week.
    """
    now = now or datetime.now()
    task = group.find(task_id)
    if task is None:
        return None

    if group.session_type == IMPORTANT:
        days = max(days, 0)
        due = format_for_storage(normalize_to_midnight(now) + timedelta(days=days))
        fraction = derive_progress(days, task.fraction.denominator)
        updated = _replace_task(group, task_id, days_remaining=days, due_date=due, fraction=fraction)
        _save_important(
            db_path, local_path, task, now,
            days_remaining=days, due_date=due,
            numerator=fraction.numerator, denominator=fraction.denominator,
        )
        return updated

    days = 7 if days <= 0 else days
    due = format_for_storage(normalize_to_midnight(now) + timedelta(days=days))
    updated = _replace_task(group, task_id, days_remaining=days, due_date=due)
    _persist(store.update_subject, db_path, task.text, now=now, **{f"{group.session_type}_date": due})
    return updated


def set_subject_date(
    db_path: str, subject_name: str, session_type: str, value: str, now: Optional[datetime] = None
) -> Optional[str]:
    """Store a calendar pick ("YYYY-MM-DD", ISO datetime or "Nd"). None if unparseable."""
    stored = prepare_date_for_saving(value, now=now)
    if stored is None or parse_flexible(stored) is None:
        logger.info("Ignoring unparseable date %r for %s", value, subject_name)
        return None
    _persist(store.update_subject, db_path, subject_name, now=now, **{f"{session_type}_date": stored})
    return stored


def set_pdf_count(db_path: str, subject_name: str, count: int, now: Optional[datetime] = None) -> None:
    """Change a subject's PDF total, keeping what was read up to the new total."""
    count = max(count, 0)
    name = canonicalize(subject_name)
    _persist(store.update_subject, db_path, name, pdf_count=count, now=now)
    read = {p.table_type: p.current_progress for p in _persist(store.get_progress, db_path) or []
            if p.subject_name == name}
    for session_type in SESSION_TYPES:
        current = min(read.get(session_type, 0), count)
        _persist(store.update_progress, db_path, name, session_type, current, count, now=now)


def add_subject(
    db_path: str, groups: list[TaskGroup], name: str, pdf_count: int, now: Optional[datetime] = None
) -> list[Task]:
    now = now or datetime.now()
    name = canonicalize(name.strip())
    added = []
    for session_type in SESSION_TYPES:
        group = find_group(groups, session_type)
        if group is None or group.find(f"{name}:{session_type}"):
            continue
        task = Task(
            id=f"{name}:{session_type}",
            text=name,
            fraction=ProgressFraction(0, max(pdf_count, 1)),
            session_type=session_type,
            days_remaining=subject_days_remaining(name, None, session_type, now),
        )
        group.tasks.append(task)
        added.append(task)
    _persist(store.create_subject, db_path, name, pdf_count=pdf_count, now=now)
    return added


def reset_subjects(db_path: str, now: Optional[datetime] = None) -> None:
    """Zero the PDF counts and progress of the fixed subjects. Dates are kept."""
    for name in CANONICAL_NAMES:
        _persist(store.update_subject, db_path, name, pdf_count=0, now=now)
        for session_type in SESSION_TYPES:
            _persist(store.update_progress, db_path, name, session_type, 0, 0, now=now)


def add_important_task(
    db_path: str,
    group: TaskGroup,
    text: str,
    due: Optional[str] = None,
    days: Optional[int] = None,
    url: Optional[str] = None,
    subtopics: Optional[list[str]] = None,
    local_path: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Task:
    """Create an important task due on `due` (any flexible date) or in `days` days."""
    now = now or datetime.now()
    due_dt = parse_flexible(due, now=now)
    if due_dt is not None:
        days = max(days_between(now, due_dt), 0)
    days = max(days or 0, 0)
    due_date = format_for_storage(due_dt) if due_dt is not None else None
    fraction = derive_progress(days, 1)

    fields = dict(
        text=text,
        numerator=fraction.numerator,
        denominator=fraction.denominator,
        days_remaining=days,
        due_date=due_date,
        url=url,
        subtopics=subtopics or [],
    )
    created = _persist(store.create_important_task, db_path, now=now, **fields)
    if created is None:
        created = _save_locally(db_path, local_path, fields, now)
    task = task_from_important(created)
    group.tasks.append(task)
    return task


def _save_locally(db_path: str, local_path: Optional[str], fields: dict, now: datetime) -> ImportantTask:
    local = fallback.read_tasks(local_path) if local_path else []
    task = ImportantTask(
        id=min([t.id for t in local] + [0]) - 1,
        created_at=now.isoformat(timespec="seconds"),
        updated_at=now.isoformat(timespec="seconds"),
        **fields,
    )
    if local_path:
        fallback.write_tasks(local_path, local + [task], primary_has_data=_primary_has_tasks(db_path))
    return task


def rename_important_task(
    db_path: str,
    group: TaskGroup,
    task_id: str,
    text: str,
    now: Optional[datetime] = None,
    local_path: Optional[str] = None,
) -> Optional[Task]:
    task = group.find(task_id)
    if task is None:
        return None
    updated = _replace_task(group, task_id, text=text)
    _save_important(db_path, local_path, task, now, text=text)
    return updated


def delete_important_task(
    db_path: str, group: TaskGroup, task_id: str, local_path: Optional[str] = None
) -> bool:
    task = group.find(task_id)
    if task is None:
        return False
    group.tasks.remove(task)
    if _important_id(task) < 0:
        _rewrite_local(db_path, local_path, _important_id(task), None)
    else:
        _persist(store.delete_important_task, db_path, _important_id(task))
    return True
