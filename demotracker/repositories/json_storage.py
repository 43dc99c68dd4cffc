"""
JSON-file persistence adapter (the "local storage" backend).

The whole collection lives under a single namespace key of a JSON document:

    {"demo-tracker-demos": [ {...demo...}, ... ]}

Every mutation rewrites the full document. Loading never writes.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import timedelta
from pathlib import Path
from typing import Any, List, Optional, Sequence

from demotracker.core.utils import to_iso, utc_now
from demotracker.domain.models import (
    Demo,
    DemoFields,
    Task,
    TaskPriority,
    TaskStatus,
    check_demo_changes,
    new_demo,
    new_id,
    new_task,
)
from demotracker.repositories.base import DemoStore, locked

logger = logging.getLogger(__name__)

STORAGE_KEY = "demo-tracker-demos"


def load(path: Path) -> dict:
    """Read the raw document; missing file -> empty namespace."""
    if path.exists():
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    return {STORAGE_KEY: []}


def save(path: Path, db: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(db, ensure_ascii=False, indent=2), encoding="utf-8")


class JSONDemoStore(DemoStore):
    """Demo store persisted to a local JSON file."""

    def __init__(self, path: Path | str) -> None:
        super().__init__()
        self.path = Path(path)
        self._doc: dict = {}
        self._demos = tuple(self._load())

    # ------------------------------------------------------------ io
    def _load(self) -> List[Demo]:
        try:
            doc = load(self.path)
            if not isinstance(doc, dict):
                raise ValueError("document root must be an object")
            items = doc.get(STORAGE_KEY) or []
            if not isinstance(items, list):
                raise ValueError(f"{STORAGE_KEY!r} must hold a list")
            demos = [Demo.from_dict(item) for item in items]
        except (OSError, ValueError, TypeError, AttributeError):
            logger.exception("Error loading demos from %s", self.path)
            self._doc = {}
            return []
        # Other keys in the file belong to someone else; keep them on write.
        self._doc = {k: v for k, v in doc.items() if k != STORAGE_KEY}
        return demos

    def _commit(self, demos) -> None:
        """Publish the new collection and write it through to disk."""
        self._publish(demos)
        doc = dict(self._doc)
        doc[STORAGE_KEY] = [d.to_dict() for d in self._demos]
        try:
            save(self.path, doc)
        except OSError:
            logger.exception("Error saving demos to %s", self.path)

    # ----------------------------------------------------- contract
    @locked
    def refresh(self) -> List[Demo]:
        self._publish(self._load())
        return self.list_demos()

    @locked
    def add_demo(self, fields: DemoFields) -> Optional[Demo]:
        demo = new_demo(fields)
        self._commit(self._demos + (demo,))
        return demo

    @locked
    def update_demo(self, demo_id: str, **changes: Any) -> None:
        check_demo_changes(changes)
        demo = self.get_demo(demo_id)
        if not demo:
            return
        self._commit(self._replaced(replace(demo, **changes)))

    @locked
    def delete_demo(self, demo_id: str) -> None:
        if not self.get_demo(demo_id):
            return
        self._commit(self._without(demo_id))

    @locked
    def add_comment(self, demo_id: str, text: str) -> None:
        demo = self.get_demo(demo_id)
        if not demo:
            return
        self._commit(self._replaced(demo.with_comments(demo.comments + (new_task(text),))))

    @locked
    def delete_comment(self, demo_id: str, comment_id: str) -> None:
        demo = self.get_demo(demo_id)
        if not demo or not demo.find_comment(comment_id):
            return
        self._commit(self._replaced(demo.with_comments(c for c in demo.comments if c.id != comment_id)))

    @locked
    def toggle_comment_complete(self, demo_id: str, comment_id: str) -> None:
        demo = self.get_demo(demo_id)
        comment = demo.find_comment(comment_id) if demo else None
        if not comment:
            return
        self._commit(self._replaced(demo.with_comment(comment_id, completed=not comment.completed)))

    @locked
    def update_comment_priority(self, demo_id: str, comment_id: str, priority: TaskPriority | str) -> None:
        value = TaskPriority(priority)
        demo = self.get_demo(demo_id)
        if not demo or not demo.find_comment(comment_id):
            return
        self._commit(self._replaced(demo.with_comment(comment_id, priority=value)))

    @locked
    def update_comment_status(self, demo_id: str, comment_id: str, status: TaskStatus | str) -> None:
        value = TaskStatus(status)
        demo = self.get_demo(demo_id)
        if not demo or not demo.find_comment(comment_id):
            return
        self._commit(self._replaced(demo.with_comment(comment_id, status=value)))

    @locked
    def import_comments(self, demo_id: str, tasks: Sequence[Task]) -> bool:
        demo = self.get_demo(demo_id)
        if not demo:
            return False
        if not tasks:
            return True
        stamp = utc_now()
        # Spread timestamps so creation order survives newest-first sorting.
        imported = tuple(
            replace(task, id=new_id(), created_at=to_iso(stamp + timedelta(microseconds=i)))
            for i, task in enumerate(tasks)
        )
        self._commit(self._replaced(demo.with_comments(demo.comments + imported)))
        return True
