"""Data classes for the tracker domain model."""
import json
from dataclasses import dataclass, field
from typing import Optional

THEORY = "theory"
PRACTICE = "practice"
IMPORTANT = "important"

SESSION_TYPES = (THEORY, PRACTICE)

GROUP_TITLES = {
    THEORY: "Teoría",
    PRACTICE: "Práctica",
    IMPORTANT: "Importante",
}


@dataclass(frozen=True)
class ScheduleEntry:
    subject: str
    session_type: str
    target_weekday: int  # 0=Sunday


@dataclass(frozen=True)
class ProgressFraction:
    numerator: int
    denominator: int

    @property
    def percentage(self) -> float:
        if self.denominator <= 0:
            return 0.0
        return min(self.numerator / self.denominator * 100, 100.0)


@dataclass
class Subject:
    id: Optional[int]
    name: str
    pdf_count: int = 0
    theory_date: Optional[str] = None
    practice_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def date_for(self, session_type: str) -> Optional[str]:
        return self.theory_date if session_type == THEORY else self.practice_date

    @classmethod
    def from_row(cls, row) -> "Subject":
        return cls(**dict(row))


@dataclass
class Progress:
    id: Optional[int]
    subject_name: str
    table_type: str
    current_progress: int = 0
    total_pdfs: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "Progress":
        return cls(**dict(row))


@dataclass
class ImportantTask:
    id: Optional[int]
    text: str
    numerator: int = 0
    denominator: int = 1
    days_remaining: Optional[int] = None
    due_date: Optional[str] = None
    url: Optional[str] = None
    subtopics: list[str] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def fraction(self) -> ProgressFraction:
        return ProgressFraction(self.numerator, self.denominator)

    @classmethod
    def from_row(cls, row) -> "ImportantTask":
        data = dict(row)
        data["subtopics"] = json.loads(data.get("subtopics") or "[]")
        return cls(**data)


@dataclass
class Task:
    """One row of a tracker table: a subject session or an important task."""
    id: str
    text: str
    fraction: ProgressFraction
    session_type: str
    due_date: Optional[str] = None
    days_remaining: Optional[int] = None
    subtopics: list[str] = field(default_factory=list)
    url: Optional[str] = None


@dataclass
class TaskGroup:
    session_type: str
    tasks: list[Task] = field(default_factory=list)

    @property
    def title(self) -> str:
        return GROUP_TITLES.get(self.session_type, self.session_type)

    def find(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None
