"""Fixed weekly class schedule."""
from typing import Optional

from study_tracker.models import PRACTICE, THEORY, ScheduleEntry
from study_tracker.names import ALGEBRA, CALCULO, POO, canonicalize

SCHEDULE = (
    ScheduleEntry(ALGEBRA, THEORY, 4),    # Jueves
    ScheduleEntry(ALGEBRA, PRACTICE, 1),  # Lunes
    ScheduleEntry(CALCULO, THEORY, 4),    # Jueves
    ScheduleEntry(CALCULO, PRACTICE, 1),  # Lunes
    ScheduleEntry(POO, THEORY, 2),        # Martes
    ScheduleEntry(POO, PRACTICE, 5),      # Viernes
)


def get_entry(subject: str, session_type: str) -> Optional[ScheduleEntry]:
    name = canonicalize(subject)
    for entry in SCHEDULE:
        if entry.subject == name and entry.session_type == session_type:
            return entry
    return None


def target_weekday(subject: str, session_type: str) -> Optional[int]:
    """Weekday (0=Sunday) of the next class, or None for subjects off the schedule."""
    entry = get_entry(subject, session_type)
    return entry.target_weekday if entry else None


def scheduled_subjects() -> list[str]:
    seen = []
    for entry in SCHEDULE:
        if entry.subject not in seen:
            seen.append(entry.subject)
    return seen
