"""Runtime settings read from the environment."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DATA_DIR = Path.home() / ".study_tracker"
DEFAULT_DB_PATH = str(DATA_DIR / "tracker.db")
DEFAULT_LOCAL_CACHE = str(DATA_DIR / "local_tasks.json")
DEFAULT_SYNC_INTERVAL = 60


@dataclass
class Settings:
    db_path: str = DEFAULT_DB_PATH
    local_cache_path: str = DEFAULT_LOCAL_CACHE
    sync_interval: int = DEFAULT_SYNC_INTERVAL
    log_level: str = "INFO"
    log_file: Optional[str] = None


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def load_settings() -> Settings:
    """Build settings from STUDY_TRACKER_* variables, falling back to defaults."""
    return Settings(
        db_path=os.getenv("STUDY_TRACKER_DB", DEFAULT_DB_PATH),
        local_cache_path=os.getenv("STUDY_TRACKER_LOCAL_CACHE", DEFAULT_LOCAL_CACHE),
        sync_interval=_int_env("STUDY_TRACKER_SYNC_INTERVAL", DEFAULT_SYNC_INTERVAL),
        log_level=os.getenv("STUDY_TRACKER_LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("STUDY_TRACKER_LOG_FILE") or None,
    )
