"""Local JSON copy of important tasks, used while the database has none."""
import json
import logging
from dataclasses import asdict
from pathlib import Path

from study_tracker.models import ImportantTask

logger = logging.getLogger(__name__)


def read_tasks(path: str) -> list[ImportantTask]:
    """Load tasks from the local file. Missing or corrupt files give an empty list."""
    file = Path(path)
    if not file.exists():
        return []
    try:
        data = json.loads(file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable local task file %s: %s", path, e)
        return []
    tasks = []
    for item in data.get("tasks", []) if isinstance(data, dict) else []:
        try:
            tasks.append(ImportantTask(**item))
        except TypeError:
            logger.warning("Skipping malformed local task entry: %r", item)
    return tasks


def write_tasks(path: str, tasks: list[ImportantTask], primary_has_data: bool) -> bool:
    """Save tasks locally unless the primary store already holds records."""
    if primary_has_data:
        return False
    file = Path(path)
    file.parent.mkdir(parents=True, exist_ok=True)
    file.write_text(
        json.dumps({"tasks": [asdict(t) for t in tasks]}, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return True
