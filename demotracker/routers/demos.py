from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from demotracker.domain.models import DemoFields, TaskPriority, TaskStatus
from demotracker.domain.views import filter_options, list_projection
from demotracker.repositories.base import DemoStore
from demotracker.routers.deps import demo_payload, get_store

router = APIRouter(prefix="/api/demos", tags=["demos"])


class DemoIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    client: str = ""
    demo_url: str = Field(alias="demoUrl", min_length=1)
    thumbnail_url: str = Field("", alias="thumbnailUrl")
    category: str = ""
    priority: int = Field(3, ge=1, le=5)
    status: str = "active"


class DemoPatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, min_length=1)
    client: Optional[str] = None
    demo_url: Optional[str] = Field(None, alias="demoUrl", min_length=1)
    thumbnail_url: Optional[str] = Field(None, alias="thumbnailUrl")
    category: Optional[str] = None
    priority: Optional[int] = Field(None, ge=1, le=5)
    status: Optional[str] = None


class CommentIn(BaseModel):
    text: str = Field(min_length=1)


class PriorityIn(BaseModel):
    priority: TaskPriority


class StatusIn(BaseModel):
    status: TaskStatus


@router.get("")
def list_demos(
    category: str = "all",
    status: str = "all",
    sort: Literal["priority", "name", "createdAt"] = "priority",
    store: DemoStore = Depends(get_store),
):
    demos = store.demos
    options = filter_options(demos)
    return {
        "demos": [demo_payload(d) for d in list_projection(demos, category, status, sort)],
        "total": len(demos),
        "loading": store.loading,
        "error": store.error,
        "categories": list(options.categories),
        "statuses": list(options.statuses),
    }


@router.get("/{demo_id}")
def get_demo(demo_id: str, store: DemoStore = Depends(get_store)):
    demo = store.get_demo(demo_id)
    if not demo:
        raise HTTPException(404, "Demo not found")
    return demo_payload(demo)


@router.post("", status_code=201)
def create_demo(payload: DemoIn, store: DemoStore = Depends(get_store)):
    demo = store.add_demo(DemoFields(**payload.model_dump()))
    if demo is None:
        return JSONResponse({"ok": False, "error": store.error or "Failed to add demo"}, status_code=502)
    return demo_payload(demo)


@router.patch("/{demo_id}")
def update_demo(demo_id: str, payload: DemoPatch, store: DemoStore = Depends(get_store)):
    store.update_demo(demo_id, **payload.model_dump(exclude_unset=True, exclude_none=True))
    return {"ok": True}


@router.delete("/{demo_id}")
def delete_demo(demo_id: str, store: DemoStore = Depends(get_store)):
    store.delete_demo(demo_id)
    return {"ok": True}


@router.post("/{demo_id}/comments")
def add_comment(demo_id: str, payload: CommentIn, store: DemoStore = Depends(get_store)):
    store.add_comment(demo_id, payload.text)
    return {"ok": True}


@router.delete("/{demo_id}/comments/{comment_id}")
def delete_comment(demo_id: str, comment_id: str, store: DemoStore = Depends(get_store)):
    store.delete_comment(demo_id, comment_id)
    return {"ok": True}


@router.post("/{demo_id}/comments/{comment_id}/toggle")
def toggle_comment(demo_id: str, comment_id: str, store: DemoStore = Depends(get_store)):
    store.toggle_comment_complete(demo_id, comment_id)
    return {"ok": True}


@router.put("/{demo_id}/comments/{comment_id}/priority")
def set_comment_priority(demo_id: str, comment_id: str, payload: PriorityIn, store: DemoStore = Depends(get_store)):
    store.update_comment_priority(demo_id, comment_id, payload.priority)
    return {"ok": True}


@router.put("/{demo_id}/comments/{comment_id}/status")
def set_comment_status(demo_id: str, comment_id: str, payload: StatusIn, store: DemoStore = Depends(get_store)):
    store.update_comment_status(demo_id, comment_id, payload.status)
    return {"ok": True}
