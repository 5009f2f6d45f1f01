"""Countdown urgency and per-group summaries for the tracker tables."""
from study_tracker.catchup import group_average, rounded_average, units_needed
from study_tracker.models import TaskGroup


def get_urgency_label(days_remaining: int) -> str:
    if days_remaining == 1:
        return "MAÑANA"
    elif days_remaining >= 3:
        return "CON TIEMPO"
    return "PRONTO"


def get_urgency_color(days_remaining: int) -> str:
    if days_remaining == 1:
        return "red"
    elif days_remaining >= 3:
        return "green"
    return "yellow"


def get_group_rows(group: TaskGroup) -> list[dict]:
    """One display row per task, with the units it is short of the group average."""
    fractions = [t.fraction for t in group.tasks]
    average = group_average(fractions)
    rows = []
    for i, task in enumerate(group.tasks):
        days = task.days_remaining or 0
        pct = task.fraction.percentage
        rows.append({
            "id": task.id,
            "text": task.text,
            "numerator": task.fraction.numerator,
            "denominator": task.fraction.denominator,
            "percentage": round(pct, 1),
            "days_remaining": days,
            "urgency": get_urgency_label(days),
            "color": get_urgency_color(days),
            "below_average": pct < average,
            "units_needed": units_needed(fractions, i),
        })
    return rows


def get_group_summary(group: TaskGroup) -> dict:
    fractions = [t.fraction for t in group.tasks]
    return {
        "title": group.title,
        "tasks": len(group.tasks),
        "average": rounded_average(fractions),
        "completed": sum(1 for f in fractions if f.percentage >= 100),
    }
