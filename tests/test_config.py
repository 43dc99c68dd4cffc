from __future__ import annotations

import pytest

from demotracker.core import config as core_config
from demotracker.repositories.factory import build_store
from demotracker.repositories.json_storage import JSONDemoStore
from demotracker.repositories.sql_repository import SQLDemoStore
from demotracker.services.kanban_service import move_demo


@pytest.fixture()
def env(monkeypatch):
    def _set(**values):
        for key, value in values.items():
            monkeypatch.setenv(key, value)
        core_config.get_settings.cache_clear()
        return core_config.get_settings()

    yield _set
    core_config.get_settings.cache_clear()


def test_defaults(env, monkeypatch):
    for key in ("APP_ENV", "DEMO_STORAGE", "DEMO_DATA_FILE", "LOG_LEVEL", "CORS_ORIGINS"):
        monkeypatch.delenv(key, raising=False)
    settings = env()
    assert settings.app_env == "dev"
    assert settings.storage_backend == "local"
    assert settings.data_file == core_config.DEFAULT_DATA_FILE
    assert "http://localhost:5173" in settings.cors_origins


def test_prod_only_allows_configured_origins(env):
    settings = env(APP_ENV="prod", CORS_ORIGINS="https://demos.example.com/, https://b.example.com")
    assert settings.cors_origins == ("https://b.example.com", "https://demos.example.com")


def test_build_local_store(env, tmp_path):
    settings = env(DEMO_STORAGE="local", DEMO_DATA_FILE=str(tmp_path / "x.json"))
    store = build_store(settings)
    assert isinstance(store, JSONDemoStore)
    assert store.path == tmp_path / "x.json"


def test_build_sql_store(temp_db, env):
    store = build_store(env(DEMO_STORAGE="SQL"))
    assert isinstance(store, SQLDemoStore)
    assert store.error is None


def test_unknown_backend(env):
    with pytest.raises(RuntimeError):
        build_store(env(DEMO_STORAGE="redis"))


def test_move_demo_updates_the_grouped_field(json_store, foo_fields):
    demo = json_store.add_demo(foo_fields)
    move_demo(json_store, demo.id, "archived")
    assert json_store.get_demo(demo.id).status == "archived"
    move_demo(json_store, demo.id, "Viewer", group_by="category")
    assert json_store.get_demo(demo.id).category == "Viewer"
    move_demo(json_store, "missing", "pending")
    with pytest.raises(ValueError):
        move_demo(json_store, demo.id, "x", group_by="client")
