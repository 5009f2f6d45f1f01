import pytest

from study_tracker.db import init_db
from study_tracker.seed import seed_all


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_tracker.db")
    return db_path


@pytest.fixture
def seeded_db(tmp_db):
    """An initialized database holding the three fixed subjects."""
    init_db(tmp_db)
    seed_all(tmp_db)
    return tmp_db
