"""CRUD access to subjects, progress rows and important tasks.

Subject names are canonicalized on write. update_* functions return the
updated record, or None when the target does not exist.
"""
import json
from datetime import datetime
from typing import Optional

from study_tracker.db import get_connection
from study_tracker.models import ImportantTask, Progress, SESSION_TYPES, Subject
from study_tracker.names import canonicalize

TASK_FIELDS = ("text", "numerator", "denominator", "days_remaining", "due_date", "url", "subtopics")


def _stamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).isoformat(timespec="seconds")


# Subjects

def get_subjects(db_path: str) -> list[Subject]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM subjects ORDER BY name").fetchall()
    conn.close()
    return [Subject.from_row(r) for r in rows]


def get_subject(db_path: str, name: str) -> Optional[Subject]:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM subjects WHERE name = ?", (canonicalize(name),)).fetchone()
    conn.close()
    return Subject.from_row(row) if row else None


def update_subject(
    db_path: str,
    name: str,
    pdf_count: Optional[int] = None,
    theory_date: Optional[str] = None,
    practice_date: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Subject:
    """Insert or update a subject, keeping any field passed as None."""
    canonical = canonicalize(name)
    stamp = _stamp(now)
    conn = get_connection(db_path)
    conn.execute(
        """INSERT INTO subjects (name, pdf_count, theory_date, practice_date, created_at, updated_at)
        VALUES (?, COALESCE(?, 0), ?, ?, ?, ?)
        ON CONFLICT(name) DO UPDATE SET
            pdf_count = COALESCE(?, subjects.pdf_count),
            theory_date = COALESCE(excluded.theory_date, subjects.theory_date),
            practice_date = COALESCE(excluded.practice_date, subjects.practice_date),
            updated_at = excluded.updated_at""",
        (canonical, pdf_count, theory_date, practice_date, stamp, stamp, pdf_count),
    )
    conn.commit()
    row = conn.execute("SELECT * FROM subjects WHERE name = ?", (canonical,)).fetchone()
    conn.close()
    return Subject.from_row(row)


def create_subject(db_path: str, name: str, pdf_count: int = 1, now: Optional[datetime] = None) -> Subject:
    """Add a subject together with its theory and practice progress rows."""
    subject = update_subject(db_path, name, pdf_count=pdf_count, now=now)
    for table_type in SESSION_TYPES:
        update_progress(db_path, subject.name, table_type, 0, pdf_count, now=now)
    return subject


# Progress

def get_progress(db_path: str) -> list[Progress]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM progress ORDER BY subject_name, table_type").fetchall()
    conn.close()
    return [Progress.from_row(r) for r in rows]


def update_progress(
    db_path: str,
    subject_name: str,
    table_type: str,
    current_progress: int,
    total_pdfs: int,
    now: Optional[datetime] = None,
) -> Progress:
    canonical = canonicalize(subject_name)
    # the subject row must exist for the foreign key
    update_subject(db_path, canonical, now=now)
    stamp = _stamp(now)
    conn = get_connection(db_path)
    conn.execute(
        """INSERT INTO progress (subject_name, table_type, current_progress, total_pdfs, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?)
        ON CONFLICT(subject_name, table_type) DO UPDATE SET
            current_progress = excluded.current_progress,
            total_pdfs = excluded.total_pdfs,
            updated_at = excluded.updated_at""",
        (canonical, table_type, current_progress, total_pdfs, stamp, stamp),
    )
    conn.commit()
    row = conn.execute(
        "SELECT * FROM progress WHERE subject_name = ? AND table_type = ?",
        (canonical, table_type),
    ).fetchone()
    conn.close()
    return Progress.from_row(row)


# Important tasks

def get_important_tasks(db_path: str) -> list[ImportantTask]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM important_tasks ORDER BY id").fetchall()
    conn.close()
    return [ImportantTask.from_row(r) for r in rows]


def get_important_task(db_path: str, task_id: int) -> Optional[ImportantTask]:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM important_tasks WHERE id = ?", (task_id,)).fetchone()
    conn.close()
    return ImportantTask.from_row(row) if row else None


def create_important_task(
    db_path: str,
    text: str,
    numerator: int = 0,
    denominator: int = 1,
    days_remaining: Optional[int] = None,
    due_date: Optional[str] = None,
    url: Optional[str] = None,
    subtopics: Optional[list[str]] = None,
    now: Optional[datetime] = None,
) -> ImportantTask:
    stamp = _stamp(now)
    conn = get_connection(db_path)
    cursor = conn.execute(
        """INSERT INTO important_tasks
        (text, numerator, denominator, days_remaining, due_date, url, subtopics, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (text, numerator, denominator, days_remaining, due_date, url,
         json.dumps(subtopics or []), stamp, stamp),
    )
    conn.commit()
    row = conn.execute("SELECT * FROM important_tasks WHERE id = ?", (cursor.lastrowid,)).fetchone()
    conn.close()
    return ImportantTask.from_row(row)


def update_important_task(
    db_path: str, task_id: int, now: Optional[datetime] = None, **fields
) -> Optional[ImportantTask]:
    """Update the given columns. Returns None if nothing was given or the task is missing."""
    unknown = set(fields) - set(TASK_FIELDS)
    if unknown:
        raise ValueError(f"Unknown task fields: {sorted(unknown)}")
    if not fields:
        return None
    if "subtopics" in fields:
        fields["subtopics"] = json.dumps(fields["subtopics"] or [])
    columns = list(fields)
    assignments = ", ".join(f"{col} = ?" for col in columns)
    values = [fields[col] for col in columns] + [_stamp(now), task_id]
    conn = get_connection(db_path)
    cursor = conn.execute(
        f"UPDATE important_tasks SET {assignments}, updated_at = ? WHERE id = ?",
        values,
    )
    conn.commit()
    if cursor.rowcount == 0:
        conn.close()
        return None
    row = conn.execute("SELECT * FROM important_tasks WHERE id = ?", (task_id,)).fetchone()
    conn.close()
    return ImportantTask.from_row(row)


def delete_important_task(db_path: str, task_id: int) -> None:
    conn = get_connection(db_path)
    conn.execute("DELETE FROM important_tasks WHERE id = ?", (task_id,))
    conn.commit()
    conn.close()
