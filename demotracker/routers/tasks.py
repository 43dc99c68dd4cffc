from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends

from demotracker.domain.views import task_projection, task_stats
from demotracker.repositories.base import DemoStore
from demotracker.routers.deps import get_store

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("")
def list_tasks(
    completion: Literal["all", "active", "completed"] = "all",
    priority: Literal["all", "Low", "Mid", "High"] = "all",
    status: Literal["all", "Pending", "In Progress", "Review", "Approved"] = "all",
    store: DemoStore = Depends(get_store),
):
    demos = store.demos
    stats = task_stats(demos)
    return {
        "tasks": [row.to_dict() for row in task_projection(demos, completion, priority, status)],
        "stats": {"total": stats.total, "completed": stats.completed, "active": stats.active},
    }
