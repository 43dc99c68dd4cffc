"""
The `DemoStore` contract shared by the JSON and SQL backends.

A store owns the canonical demo collection. Readers get immutable snapshots
(`store.demos` is a tuple of frozen dataclasses and is replaced wholesale on
every write); writers go through the mutation methods below. Consumers that
need to react to changes register a callback with `subscribe()`.

Mutations that reference a demo/comment id that is not in the collection are
silent no-ops: callers may race with a delete made elsewhere and rely on that.
"""
from __future__ import annotations

import functools
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from demotracker.domain.models import Demo, DemoFields, Task, TaskPriority, TaskStatus

Listener = Callable[["DemoStore"], None]


def locked(method):
    """Serialize a store method on the store's lock."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class DemoStore(ABC):
    """Observable demo collection backed by some durable store."""

    def __init__(self) -> None:
        self._demos: Tuple[Demo, ...] = ()
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()
        self.loading: bool = False
        self.error: Optional[str] = None

    # ----------------------------------------------------------- reads
    @property
    def demos(self) -> Tuple[Demo, ...]:
        return self._demos

    def list_demos(self) -> List[Demo]:
        return list(self._demos)

    def get_demo(self, demo_id: str) -> Optional[Demo]:
        for demo in self._demos:
            if demo.id == demo_id:
                return demo
        return None

    # ------------------------------------------------------ observers
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener(store)`; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _publish(self, demos: Iterable[Demo]) -> None:
        self._demos = tuple(demos)
        self._notify()

    # -------------------------------------------- snapshot helpers
    def _replaced(self, demo: Demo) -> Tuple[Demo, ...]:
        return tuple(demo if d.id == demo.id else d for d in self._demos)

    def _without(self, demo_id: str) -> Tuple[Demo, ...]:
        return tuple(d for d in self._demos if d.id != demo_id)

    # ------------------------------------------------------ mutations
    @abstractmethod
    def refresh(self) -> List[Demo]:
        """Reload the whole collection from the backing store."""

    @abstractmethod
    def add_demo(self, fields: DemoFields) -> Optional[Demo]:
        """Create a demo (new id, created_at, no comments); None on failure."""

    @abstractmethod
    def update_demo(self, demo_id: str, **changes: Any) -> None:
        """Replace only the given fields of a demo."""

    @abstractmethod
    def delete_demo(self, demo_id: str) -> None:
        """Remove a demo together with all of its comments."""

    @abstractmethod
    def add_comment(self, demo_id: str, text: str) -> None:
        """Append a Mid/Pending/not-completed comment to a demo."""

    @abstractmethod
    def delete_comment(self, demo_id: str, comment_id: str) -> None:
        ...

    @abstractmethod
    def toggle_comment_complete(self, demo_id: str, comment_id: str) -> None:
        ...

    @abstractmethod
    def update_comment_priority(self, demo_id: str, comment_id: str, priority: TaskPriority | str) -> None:
        ...

    @abstractmethod
    def update_comment_status(self, demo_id: str, comment_id: str, status: TaskStatus | str) -> None:
        ...

    @abstractmethod
    def import_comments(self, demo_id: str, tasks: Sequence[Task]) -> bool:
        """
        Batch-insert tasks for a demo, keeping text/completed/priority/status.

        New ids and timestamps are assigned. Returns False when the demo is
        unknown or the backing store rejected the batch.
        """
