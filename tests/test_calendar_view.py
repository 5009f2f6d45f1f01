from datetime import datetime

from study_tracker.calendar_view import due_dates_by_day, month_due_dates, month_grid
from study_tracker.models import IMPORTANT, THEORY, ProgressFraction, Task, TaskGroup

MONDAY = datetime(2024, 1, 1, 9, 0)


def make_groups():
    theory = TaskGroup(THEORY, [
        Task(id="Álgebra:theory", text="Álgebra", fraction=ProgressFraction(0, 1),
             session_type=THEORY, due_date="2024-01-04", days_remaining=3),
        Task(id="Cálculo:theory", text="Cálculo", fraction=ProgressFraction(0, 1),
             session_type=THEORY, due_date="2024-01-04", days_remaining=3),
    ])
    important = TaskGroup(IMPORTANT, [
        Task(id="task:1", text="Entrega", fraction=ProgressFraction(0, 40),
             session_type=IMPORTANT, days_remaining=40),
        Task(id="task:2", text="Sin fecha", fraction=ProgressFraction(0, 1),
             session_type=IMPORTANT, due_date="2024-01-09"),
    ])
    return [theory, important]


def test_month_grid_starts_on_sunday():
    january = month_grid(2024, 1)  # starts on a Monday
    assert january[:2] == [None, 1]
    assert january[-1] == 31
    september = month_grid(2024, 9)  # starts on a Sunday
    assert september[0] == 1


def test_due_dates_by_day():
    by_day = due_dates_by_day(make_groups(), today=MONDAY)
    assert by_day["2024-01-04"] == ["Álgebra (Teoría)", "Cálculo (Teoría)"]
    assert by_day["2024-02-10"] == ["Entrega (Importante)"]
    assert by_day["2024-01-09"] == ["Sin fecha (Importante)"]
    assert list(by_day) == sorted(by_day)


def test_month_due_dates_filters_month():
    january = month_due_dates(make_groups(), 2024, 1, today=MONDAY)
    assert set(january) == {4, 9}
