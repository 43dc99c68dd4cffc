"""Kanban board workflows."""

from __future__ import annotations

from demotracker.domain.views import GROUP_BY_OPTIONS
from demotracker.repositories.base import DemoStore


def move_demo(store: DemoStore, demo_id: str, column_key: str, group_by: str = "status") -> None:
    """
    Drop a demo on a column.

    Same as updating the demo's status (status board) or category (category
    board) to the column key. Unknown demo ids are ignored by the store.
    """
    if group_by not in GROUP_BY_OPTIONS:
        raise ValueError(f"Unknown kanban grouping: {group_by!r}")
    if group_by == "status":
        store.update_demo(demo_id, status=column_key)
    else:
        store.update_demo(demo_id, category=column_key)
