from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from demotracker.domain.views import kanban_projection
from demotracker.repositories.base import DemoStore
from demotracker.routers.deps import demo_payload, get_store
from demotracker.services.kanban_service import move_demo

router = APIRouter(prefix="/api/kanban", tags=["kanban"])

GroupBy = Literal["status", "category"]


class MoveIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    demo_id: str = Field(alias="demoId", min_length=1)
    column: str = Field(min_length=1)
    group_by: GroupBy = Field("status", alias="groupBy")


@router.get("")
def board(group_by: GroupBy = "status", store: DemoStore = Depends(get_store)):
    demos = store.demos
    return {
        "group_by": group_by,
        "total": len(demos),
        "columns": [
            {"key": col.key, "title": col.title, "demos": [demo_payload(d) for d in col.demos]}
            for col in kanban_projection(demos, group_by)
        ],
    }


@router.post("/move")
def move(payload: MoveIn, store: DemoStore = Depends(get_store)):
    move_demo(store, payload.demo_id, payload.column, payload.group_by)
    return {"ok": True}
