"""
Demo and task entities.

Both are frozen dataclasses: stores build new instances with
`dataclasses.replace` on every change, so a snapshot handed to a caller never
changes underneath it.

The dict shape produced by `to_dict()` (camelCase keys, ISO-8601 timestamps) is
the one written to the local JSON store and to export documents.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from demotracker.core.utils import to_iso, utc_now

KNOWN_DEMO_STATUSES = ("active", "pending", "completed", "archived")
DEMO_UPDATABLE_FIELDS = frozenset(
    {"name", "client", "demo_url", "thumbnail_url", "category", "priority", "status"}
)


class TaskPriority(str, Enum):
    LOW = "Low"
    MID = "Mid"
    HIGH = "High"

    @classmethod
    def from_str(cls, value: Any) -> "TaskPriority":
        try:
            return cls(value)
        except ValueError:
            return cls.MID


class TaskStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    REVIEW = "Review"
    APPROVED = "Approved"

    @classmethod
    def from_str(cls, value: Any) -> "TaskStatus":
        try:
            return cls(value)
        except ValueError:
            return cls.PENDING


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Task:
    """A unit of work (a "comment") owned by exactly one demo."""

    id: str
    text: str
    created_at: str
    completed: bool = False
    priority: TaskPriority = TaskPriority.MID
    status: TaskStatus = TaskStatus.PENDING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "createdAt": self.created_at,
            "completed": self.completed,
            "priority": self.priority.value,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(
            id=str(data.get("id") or new_id()),
            text=str(data.get("text") or ""),
            created_at=to_iso(data.get("createdAt")) or to_iso(utc_now()),
            completed=bool(data.get("completed", False)),
            priority=TaskPriority.from_str(data.get("priority")),
            status=TaskStatus.from_str(data.get("status")),
        )


@dataclass(frozen=True)
class DemoFields:
    """Fields a caller provides when creating a demo."""

    name: str
    client: str
    demo_url: str
    thumbnail_url: str = ""
    category: str = ""
    priority: int = 3
    status: str = "active"


@dataclass(frozen=True)
class Demo:
    """A tracked demo with its ordered task list."""

    id: str
    name: str
    client: str
    demo_url: str
    thumbnail_url: str
    category: str
    priority: int
    status: str
    created_at: str
    comments: Tuple[Task, ...] = field(default_factory=tuple)

    def fields(self) -> DemoFields:
        return DemoFields(
            name=self.name,
            client=self.client,
            demo_url=self.demo_url,
            thumbnail_url=self.thumbnail_url,
            category=self.category,
            priority=self.priority,
            status=self.status,
        )

    def find_comment(self, comment_id: str) -> Optional[Task]:
        for comment in self.comments:
            if comment.id == comment_id:
                return comment
        return None

    def with_comments(self, comments: Iterable[Task]) -> "Demo":
        return replace(self, comments=tuple(comments))

    def with_comment(self, comment_id: str, **changes: Any) -> "Demo":
        """Return a copy with one comment replaced; unknown ids leave it unchanged."""
        return self.with_comments(
            replace(c, **changes) if c.id == comment_id else c for c in self.comments
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "client": self.client,
            "demoUrl": self.demo_url,
            "thumbnailUrl": self.thumbnail_url,
            "category": self.category,
            "priority": self.priority,
            "status": self.status,
            "comments": [c.to_dict() for c in self.comments],
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Demo":
        comments = data.get("comments") or []
        try:
            priority = int(data.get("priority", 3))
        except (TypeError, ValueError):
            priority = 3
        return cls(
            id=str(data.get("id") or new_id()),
            name=str(data.get("name") or ""),
            client=str(data.get("client") or ""),
            demo_url=str(data.get("demoUrl") or ""),
            thumbnail_url=str(data.get("thumbnailUrl") or ""),
            category=str(data.get("category") or ""),
            priority=priority,
            status=str(data.get("status") or ""),
            created_at=to_iso(data.get("createdAt")) or to_iso(utc_now()),
            comments=tuple(Task.from_dict(c) for c in comments if isinstance(c, dict)),
        )


def new_demo(data: DemoFields) -> Demo:
    """Build a fresh demo: new id, creation timestamp, no comments."""
    return Demo(
        id=new_id(),
        name=data.name,
        client=data.client,
        demo_url=data.demo_url,
        thumbnail_url=data.thumbnail_url or "",
        category=data.category,
        priority=data.priority,
        status=data.status,
        created_at=to_iso(utc_now()),
        comments=(),
    )


def new_task(text: str) -> Task:
    return Task(id=new_id(), text=text, created_at=to_iso(utc_now()))


def check_demo_changes(changes: Dict[str, Any]) -> None:
    """Reject keys `update_demo` is not allowed to touch (id, created_at, comments...)."""
    unknown = set(changes) - DEMO_UPDATABLE_FIELDS
    if unknown:
        raise TypeError(f"Cannot update demo field(s): {', '.join(sorted(unknown))}")
