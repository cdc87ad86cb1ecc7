"""Summary counts over the full task collection."""

from collections import Counter
from datetime import datetime
from typing import Iterable, Optional

from ..models import Task
from ..schemas.task import TaskStats
from ..utils.time import to_naive_utc, utc_now


def _label(value) -> str:
    return getattr(value, "value", value)


def is_overdue(task: Task, now: datetime) -> bool:
    """Incomplete, has a deadline, and the deadline is strictly before ``now``."""
    if task.completed or task.deadline is None:
        return False
    return to_naive_utc(task.deadline) < now


def compute_task_stats(tasks: Iterable[Task], now: Optional[datetime] = None) -> TaskStats:
    """
    Count tasks in a single pass.

    ``pending`` is derived as ``total - completed`` so the two always
    partition the set. Categories and priorities with no tasks are left out
    of the mappings. ``overdue`` depends on ``now`` (default: the current
    UTC instant), so repeated calls over unchanged data may differ.
    """
    now = to_naive_utc(now) if now is not None else utc_now()

    total = 0
    completed = 0
    overdue = 0
    by_category = Counter()
    by_priority = Counter()

    for task in tasks:
        total += 1
        if task.completed:
            completed += 1
        if is_overdue(task, now):
            overdue += 1
        by_category[_label(task.category)] += 1
        by_priority[_label(task.priority)] += 1

    return TaskStats(
        total=total,
        completed=completed,
        pending=total - completed,
        overdue=overdue,
        by_category=dict(by_category),
        by_priority=dict(by_priority),
    )
