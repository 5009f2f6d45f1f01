from study_tracker.db import init_db, get_connection
from study_tracker.seed import is_seeded, seed_all, seed_progress, seed_subjects


def test_seed_subjects(tmp_db):
    init_db(tmp_db)
    seed_subjects(tmp_db)
    conn = get_connection(tmp_db)
    names = {r["name"] for r in conn.execute("SELECT name FROM subjects").fetchall()}
    conn.close()
    assert names == {"Álgebra", "Cálculo", "Poo"}


def test_seed_progress_rows(tmp_db):
    init_db(tmp_db)
    seed_subjects(tmp_db)
    seed_progress(tmp_db)
    conn = get_connection(tmp_db)
    rows = conn.execute("SELECT * FROM progress").fetchall()
    conn.close()
    assert len(rows) == 6
    assert {r["table_type"] for r in rows} == {"theory", "practice"}


def test_is_seeded(tmp_db):
    init_db(tmp_db)
    assert not is_seeded(tmp_db)
    seed_subjects(tmp_db)
    assert is_seeded(tmp_db)


def test_seed_all_idempotent(tmp_db):
    init_db(tmp_db)
    seed_all(tmp_db)
    seed_all(tmp_db)
    conn = get_connection(tmp_db)
    assert conn.execute("SELECT COUNT(*) FROM subjects").fetchone()[0] == 3
    assert conn.execute("SELECT COUNT(*) FROM progress").fetchone()[0] == 6
    conn.close()
