"""
SQL persistence adapter (the "remote" backend) built on SQLAlchemy.

Each mutation is a single session/commit against the `demos`/`comments`
tables. The in-memory collection is only updated after the commit succeeds;
on failure the error message is kept in `store.error` and the previous
snapshot stays in place. Nothing is retried.

Comments are joined to their demos in memory; no server-side join is issued.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence

from sqlalchemy import select, update, delete
from sqlalchemy.exc import SQLAlchemyError

from demotracker.core.utils import to_iso, utc_now
from demotracker.db.models import CommentRow, DemoRow
from demotracker.db.session import get_session
from demotracker.domain.models import (
    Demo,
    DemoFields,
    Task,
    TaskPriority,
    TaskStatus,
    check_demo_changes,
)
from demotracker.repositories.base import DemoStore, locked

logger = logging.getLogger(__name__)


def _row_to_task(row: CommentRow) -> Task:
    return Task(
        id=row.id,
        text=row.text,
        created_at=to_iso(row.created_at),
        completed=bool(row.completed),
        priority=TaskPriority.from_str(row.priority),
        status=TaskStatus.from_str(row.status),
    )


def _row_to_demo(row: DemoRow, comments: Sequence[Task] = ()) -> Demo:
    return Demo(
        id=row.id,
        name=row.name,
        client=row.client or "",
        demo_url=row.demo_url,
        thumbnail_url=row.thumbnail_url or "",
        category=row.category or "",
        priority=int(row.priority),
        status=row.status or "",
        created_at=to_iso(row.created_at),
        comments=tuple(comments),
    )


def _column_values(changes: Dict[str, Any]) -> Dict[str, Any]:
    values = dict(changes)
    if "thumbnail_url" in values:
        values["thumbnail_url"] = values["thumbnail_url"] or None
    return values


class SQLDemoStore(DemoStore):
    """Demo store backed by the `demos`/`comments` tables."""

    def __init__(self, session_factory: Callable = get_session, *, autoload: bool = True) -> None:
        super().__init__()
        self._session_factory = session_factory
        if autoload:
            self.refresh()

    def _fail(self, action: str, exc: Exception) -> None:
        logger.exception("Error trying to %s", action)
        self.error = str(exc) or f"Failed to {action}"
        self._notify()

    # ----------------------------------------------------- contract
    @locked
    def refresh(self) -> List[Demo]:
        """Fetch demos (newest first) and comments (oldest first), then join by demo_id."""
        self.loading = True
        self.error = None
        self._notify()
        try:
            with self._session_factory() as session:
                demo_rows = session.execute(select(DemoRow).order_by(DemoRow.created_at.desc())).scalars().all()
                comment_rows = session.execute(
                    select(CommentRow).order_by(CommentRow.created_at.asc())
                ).scalars().all()
                by_demo: Dict[str, List[Task]] = {}
                for row in comment_rows:
                    by_demo.setdefault(row.demo_id, []).append(_row_to_task(row))
                demos = [_row_to_demo(row, by_demo.get(row.id, ())) for row in demo_rows]
        except SQLAlchemyError as exc:
            self.loading = False
            self._fail("fetch demos", exc)
            return self.list_demos()
        self.loading = False
        self._publish(demos)
        return self.list_demos()

    @locked
    def add_demo(self, fields: DemoFields) -> Optional[Demo]:
        row = DemoRow(
            name=fields.name,
            client=fields.client,
            demo_url=fields.demo_url,
            thumbnail_url=fields.thumbnail_url or None,
            category=fields.category,
            priority=fields.priority,
            status=fields.status,
        )
        try:
            with self._session_factory() as session:
                session.add(row)
                session.commit()
                session.refresh(row)
                demo = _row_to_demo(row)
        except SQLAlchemyError as exc:
            self._fail("add demo", exc)
            return None
        self._publish((demo,) + self._demos)
        return demo

    @locked
    def update_demo(self, demo_id: str, **changes: Any) -> None:
        check_demo_changes(changes)
        demo = self.get_demo(demo_id)
        if not demo or not changes:
            return
        try:
            with self._session_factory() as session:
                stmt = update(DemoRow).where(DemoRow.id == demo_id).values(**_column_values(changes))
                session.execute(stmt)
                session.commit()
        except SQLAlchemyError as exc:
            self._fail("update demo", exc)
            return
        self._publish(self._replaced(replace(demo, **changes)))

    @locked
    def delete_demo(self, demo_id: str) -> None:
        if not self.get_demo(demo_id):
            return
        try:
            with self._session_factory() as session:
                # Comments go first; the cascade must not depend on FK enforcement.
                session.execute(delete(CommentRow).where(CommentRow.demo_id == demo_id))
                session.execute(delete(DemoRow).where(DemoRow.id == demo_id))
                session.commit()
        except SQLAlchemyError as exc:
            self._fail("delete demo", exc)
            return
        self._publish(self._without(demo_id))

    @locked
    def add_comment(self, demo_id: str, text: str) -> None:
        demo = self.get_demo(demo_id)
        if not demo:
            return
        row = CommentRow(
            demo_id=demo_id,
            text=text,
            completed=False,
            priority=TaskPriority.MID.value,
            status=TaskStatus.PENDING.value,
        )
        try:
            with self._session_factory() as session:
                session.add(row)
                session.commit()
                session.refresh(row)
                task = _row_to_task(row)
        except SQLAlchemyError as exc:
            self._fail("add comment", exc)
            return
        self._publish(self._replaced(demo.with_comments(demo.comments + (task,))))

    def _update_comment(self, comment_id: str, action: str, **values: Any) -> bool:
        try:
            with self._session_factory() as session:
                session.execute(update(CommentRow).where(CommentRow.id == comment_id).values(**values))
                session.commit()
        except SQLAlchemyError as exc:
            self._fail(action, exc)
            return False
        return True

    @locked
    def delete_comment(self, demo_id: str, comment_id: str) -> None:
        demo = self.get_demo(demo_id)
        if not demo or not demo.find_comment(comment_id):
            return
        try:
            with self._session_factory() as session:
                session.execute(delete(CommentRow).where(CommentRow.id == comment_id))
                session.commit()
        except SQLAlchemyError as exc:
            self._fail("delete comment", exc)
            return
        self._publish(self._replaced(demo.with_comments(c for c in demo.comments if c.id != comment_id)))

    @locked
    def toggle_comment_complete(self, demo_id: str, comment_id: str) -> None:
        demo = self.get_demo(demo_id)
        comment = demo.find_comment(comment_id) if demo else None
        if not comment:
            return
        completed = not comment.completed
        if self._update_comment(comment_id, "toggle comment", completed=completed):
            self._publish(self._replaced(demo.with_comment(comment_id, completed=completed)))

    @locked
    def update_comment_priority(self, demo_id: str, comment_id: str, priority: TaskPriority | str) -> None:
        value = TaskPriority(priority)
        demo = self.get_demo(demo_id)
        if not demo or not demo.find_comment(comment_id):
            return
        if self._update_comment(comment_id, "update priority", priority=value.value):
            self._publish(self._replaced(demo.with_comment(comment_id, priority=value)))

    @locked
    def update_comment_status(self, demo_id: str, comment_id: str, status: TaskStatus | str) -> None:
        value = TaskStatus(status)
        demo = self.get_demo(demo_id)
        if not demo or not demo.find_comment(comment_id):
            return
        if self._update_comment(comment_id, "update status", status=value.value):
            self._publish(self._replaced(demo.with_comment(comment_id, status=value)))

    @locked
    def import_comments(self, demo_id: str, tasks: Sequence[Task]) -> bool:
        demo = self.get_demo(demo_id)
        if not demo:
            return False
        if not tasks:
            return True
        stamp = utc_now()
        rows = [
            CommentRow(
                demo_id=demo_id,
                text=task.text,
                completed=bool(task.completed),
                priority=TaskPriority(task.priority).value,
                status=TaskStatus(task.status).value,
                created_at=stamp + timedelta(microseconds=i),
            )
            for i, task in enumerate(tasks)
        ]
        try:
            with self._session_factory() as session:
                session.add_all(rows)
                session.flush()
                imported = tuple(_row_to_task(row) for row in rows)
                session.commit()
        except SQLAlchemyError as exc:
            self._fail("import comments", exc)
            return False
        self._publish(self._replaced(demo.with_comments(demo.comments + imported)))
        return True
