from __future__ import annotations

from fastapi import Request

from demotracker.domain.models import Demo
from demotracker.domain.views import task_progress
from demotracker.repositories.base import DemoStore


def get_store(request: Request) -> DemoStore:
    store = getattr(getattr(request.app, "state", None), "store", None)
    if store is None:
        raise RuntimeError("DemoStore is not configured")
    return store


def demo_payload(demo: Demo) -> dict:
    data = demo.to_dict()
    progress = task_progress(demo)
    data["progress"] = (
        {"completed": progress.completed, "total": progress.total, "percent": progress.percent}
        if progress
        else None
    )
    return data
