"""Database initialization and connection management."""
import sqlite3
from pathlib import Path

from study_tracker.config import DEFAULT_DB_PATH

SCHEMA = """
CREATE TABLE IF NOT EXISTS subjects (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    pdf_count INTEGER DEFAULT 0,
    theory_date TEXT,
    practice_date TEXT,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS progress (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    subject_name TEXT NOT NULL REFERENCES subjects(name) ON DELETE CASCADE,
    table_type TEXT NOT NULL CHECK (table_type IN ('theory', 'practice')),
    current_progress INTEGER DEFAULT 0,
    total_pdfs INTEGER DEFAULT 0,
    created_at TEXT,
    updated_at TEXT,
    UNIQUE(subject_name, table_type)
);

CREATE TABLE IF NOT EXISTS important_tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    text TEXT NOT NULL,
    numerator INTEGER DEFAULT 0,
    denominator INTEGER DEFAULT 1,
    days_remaining INTEGER,
    due_date TEXT,
    url TEXT,
    subtopics TEXT DEFAULT '[]',
    created_at TEXT,
    updated_at TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> str:
    """Initialize the database, creating all tables if they don't exist.

    Returns the path, which is the handle every store call takes.
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()
    return db_path
