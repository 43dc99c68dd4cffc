"""
Derived views over the demo collection.

Every function here is pure: it takes a sequence of demos plus filter/sort
parameters and returns a fresh projection. Nothing is cached; collections are
small and views are recomputed on every read.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from demotracker.core.utils import parse_iso
from demotracker.domain.models import Demo, Task, TaskPriority

ALL = "all"
LIST_SORTS = ("priority", "name", "createdAt")
COMPLETION_FILTERS = (ALL, "active", "completed")
GROUP_BY_OPTIONS = ("status", "category")
STATUS_COLUMNS = (
    ("active", "Active"),
    ("pending", "Pending"),
    ("completed", "Completed"),
    ("archived", "Archived"),
)
PRIORITY_RANK = {TaskPriority.HIGH: 0, TaskPriority.MID: 1, TaskPriority.LOW: 2}


@dataclass(frozen=True)
class TaskRow:
    """A task flattened out of its demo, with a back-reference to the parent."""

    task: Task
    demo_id: str
    demo_name: str

    def to_dict(self) -> dict:
        data = self.task.to_dict()
        data["demoId"] = self.demo_id
        data["demoName"] = self.demo_name
        return data


@dataclass(frozen=True)
class TaskStats:
    total: int
    completed: int
    active: int


@dataclass(frozen=True)
class KanbanColumn:
    key: str
    title: str
    demos: Tuple[Demo, ...]


@dataclass(frozen=True)
class Progress:
    completed: int
    total: int

    @property
    def percent(self) -> float:
        return self.completed * 100.0 / self.total


@dataclass(frozen=True)
class FilterOptions:
    categories: Tuple[str, ...]
    statuses: Tuple[str, ...]


# ------------------------------------------------------------------ list view
def list_projection(
    demos: Sequence[Demo],
    category: str = ALL,
    status: str = ALL,
    sort_by: str = "priority",
) -> List[Demo]:
    """Filter by exact category/status ("all" disables a filter), then sort (stable)."""
    if sort_by not in LIST_SORTS:
        raise ValueError(f"Unknown sort: {sort_by!r}")
    result = list(demos)
    if category != ALL:
        result = [d for d in result if d.category == category]
    if status != ALL:
        result = [d for d in result if d.status == status]

    if sort_by == "priority":
        result.sort(key=lambda d: d.priority)
    elif sort_by == "name":
        result.sort(key=lambda d: (d.name.casefold(), d.name))
    else:
        result.sort(key=lambda d: parse_iso(d.created_at), reverse=True)
    return result


def _distinct(values) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(values))


def filter_options(demos: Sequence[Demo]) -> FilterOptions:
    """Values offered by the list filters, "all" first then first-seen order."""
    return FilterOptions(
        categories=(ALL,) + _distinct(d.category for d in demos),
        statuses=(ALL,) + _distinct(d.status for d in demos),
    )


# ------------------------------------------------------------------ task view
def _task_sort_key(row: TaskRow):
    return (PRIORITY_RANK.get(row.task.priority, 1), -parse_iso(row.task.created_at).timestamp())


def task_projection(
    demos: Sequence[Demo],
    completion: str = ALL,
    priority: str = ALL,
    status: str = ALL,
) -> List[TaskRow]:
    """
    Flatten every task of every demo.

    Ordered High -> Mid -> Low, newest first within a priority. The three
    filters compose by conjunction.
    """
    if completion not in COMPLETION_FILTERS:
        raise ValueError(f"Unknown completion filter: {completion!r}")
    rows = [TaskRow(task=t, demo_id=d.id, demo_name=d.name) for d in demos for t in d.comments]
    rows.sort(key=_task_sort_key)

    if completion == "active":
        rows = [r for r in rows if not r.task.completed]
    elif completion == "completed":
        rows = [r for r in rows if r.task.completed]
    if priority != ALL:
        rows = [r for r in rows if r.task.priority.value == priority]
    if status != ALL:
        rows = [r for r in rows if r.task.status.value == status]
    return rows


def task_stats(demos: Sequence[Demo]) -> TaskStats:
    total = sum(len(d.comments) for d in demos)
    completed = sum(1 for d in demos for t in d.comments if t.completed)
    return TaskStats(total=total, completed=completed, active=total - completed)


# ---------------------------------------------------------------- kanban view
def kanban_columns(demos: Sequence[Demo], group_by: str = "status") -> List[Tuple[str, str]]:
    """Return (key, title) pairs for the board."""
    if group_by == "status":
        return list(STATUS_COLUMNS)
    if group_by == "category":
        return [(c, c) for c in _distinct(d.category for d in demos if d.category)]
    raise ValueError(f"Unknown kanban grouping: {group_by!r}")


def kanban_projection(demos: Sequence[Demo], group_by: str = "status") -> List[KanbanColumn]:
    """
    Group demos into board columns, each sorted by priority.

    Status columns are fixed and matched case-insensitively; category columns
    are the distinct non-empty categories. A demo whose key matches no column
    is left off the board.
    """
    columns = kanban_columns(demos, group_by)
    grouped: Dict[str, List[Demo]] = {key: [] for key, _title in columns}
    for demo in demos:
        key = demo.status.lower() if group_by == "status" else demo.category
        if key in grouped:
            grouped[key].append(demo)
    return [
        KanbanColumn(key=key, title=title, demos=tuple(sorted(grouped[key], key=lambda d: d.priority)))
        for key, title in columns
    ]


def task_progress(demo: Demo) -> Optional[Progress]:
    """Completed/total for the progress bar; None when the demo has no tasks."""
    total = len(demo.comments)
    if not total:
        return None
    return Progress(completed=sum(1 for c in demo.comments if c.completed), total=total)
