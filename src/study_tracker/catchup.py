"""How far below the group average a task is, in whole units."""
from typing import Sequence

from study_tracker.models import ProgressFraction


def group_average(fractions: Sequence[ProgressFraction]) -> float:
    if not fractions:
        return 0.0
    return sum(f.percentage for f in fractions) / len(fractions)


def units_needed(fractions: Sequence[ProgressFraction], index: int) -> int:
    """Smallest numerator increment that lifts fractions[index] to the group average.

    Every trial increment is fed back into the average, since the task is
    itself a member of the group. Capped at the task's denominator, read
    as 1 when it is zero.
    """
    task = fractions[index]
    if task.percentage >= group_average(fractions):
        return 0

    others = [f for i, f in enumerate(fractions) if i != index]
    denominator = max(task.denominator, 1)
    needed = 0
    while needed < denominator:
        trial = ProgressFraction(task.numerator + needed, denominator)
        if trial.percentage >= group_average(others + [trial]):
            break
        needed += 1
    return needed


def rounded_average(fractions: Sequence[ProgressFraction]) -> int:
    """Average rounded for display, half up."""
    return int(group_average(fractions) + 0.5)
