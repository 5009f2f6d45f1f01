"""Seed the database with the fixed subjects and their progress rows."""
from study_tracker.db import get_connection
from study_tracker.models import SESSION_TYPES
from study_tracker.schedule import scheduled_subjects


def is_seeded(db_path: str) -> bool:
    """Check whether the fixed subjects are already present."""
    conn = get_connection(db_path)
    count = conn.execute("SELECT COUNT(*) FROM subjects").fetchone()[0]
    conn.close()
    return count > 0


def seed_subjects(db_path: str) -> None:
    """Insert Álgebra, Cálculo and Poo with no PDFs and no dates."""
    conn = get_connection(db_path)
    for name in scheduled_subjects():
        conn.execute(
            "INSERT OR IGNORE INTO subjects (name, pdf_count) VALUES (?, 0)",
            (name,),
        )
    conn.commit()
    conn.close()


def seed_progress(db_path: str) -> None:
    """Create missing theory/practice progress rows for every subject."""
    conn = get_connection(db_path)
    for table_type in SESSION_TYPES:
        conn.execute(
            """INSERT INTO progress (subject_name, table_type, current_progress, total_pdfs)
            SELECT s.name, ?, 0, 0 FROM subjects s
            WHERE NOT EXISTS (
                SELECT 1 FROM progress p WHERE p.subject_name = s.name AND p.table_type = ?
            )""",
            (table_type, table_type),
        )
    conn.commit()
    conn.close()


def seed_all(db_path: str) -> None:
    """Run all seed functions. Safe to call on every start."""
    seed_subjects(db_path)
    seed_progress(db_path)
