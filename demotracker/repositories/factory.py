"""Pick the configured backend."""
from __future__ import annotations

from demotracker.core.config import Settings, get_settings
from demotracker.repositories.base import DemoStore


def build_store(settings: Settings | None = None) -> DemoStore:
    settings = settings or get_settings()
    backend = settings.storage_backend
    if backend == "local":
        from demotracker.repositories.json_storage import JSONDemoStore

        return JSONDemoStore(settings.data_file)
    if backend == "sql":
        from demotracker.repositories.sql_repository import SQLDemoStore

        return SQLDemoStore()
    raise RuntimeError(f"Unknown DEMO_STORAGE backend: {backend!r} (expected 'local' or 'sql')")
