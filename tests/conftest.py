from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the demotracker package importable for local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from demotracker.core import config as core_config  # noqa: E402
from demotracker.db import models  # noqa: E402
from demotracker.db import session as db_session  # noqa: E402
from demotracker.domain.models import Demo, DemoFields, Task, TaskPriority, TaskStatus  # noqa: E402
from demotracker.repositories.json_storage import JSONDemoStore  # noqa: E402


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Point DATABASE_URL at a temporary SQLite file and reset settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    core_config.get_settings.cache_clear()
    db_session.reset_engine()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield engine

    try:
        models.Base.metadata.drop_all(bind=engine)
    except Exception:
        pass
    db_session.reset_engine()
    core_config.get_settings.cache_clear()


@pytest.fixture()
def data_file(tmp_path):
    return tmp_path / "data" / "demos.json"


@pytest.fixture()
def json_store(data_file):
    return JSONDemoStore(data_file)


@pytest.fixture()
def foo_fields():
    return DemoFields(
        name="Foo",
        client="Acme",
        demo_url="https://x",
        thumbnail_url="",
        category="Config",
        priority=2,
        status="active",
    )


def make_task(task_id: str, created_at: str, priority: str = "Mid", status: str = "Pending", completed: bool = False, text: str = "") -> Task:
    return Task(
        id=task_id,
        text=text or f"task {task_id}",
        created_at=created_at,
        completed=completed,
        priority=TaskPriority(priority),
        status=TaskStatus(status),
    )


def make_demo(demo_id: str, name: str = "", *, category: str = "", status: str = "active", priority: int = 3, created_at: str = "2024-01-01T00:00:00+00:00", comments=()) -> Demo:
    return Demo(
        id=demo_id,
        name=name or demo_id,
        client="Acme",
        demo_url=f"https://example.test/{demo_id}",
        thumbnail_url="",
        category=category,
        priority=priority,
        status=status,
        created_at=created_at,
        comments=tuple(comments),
    )
