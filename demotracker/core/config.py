"""
Configuration helpers for the demo tracker.

Routers, repositories and scripts read settings through `get_settings()` instead
of fetching os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_FILE = Path(__file__).resolve().parents[2] / "data" / "demos.json"
DEV_CORS_ORIGINS = (
    "http://localhost:8000",
    "http://127.0.0.1:8000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    storage_backend: str
    data_file: Path
    database_url: str
    log_level: str
    cors_origins: tuple[str, ...]


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _csv(value: str | None) -> tuple[str, ...]:
        if not value:
            return ()
        return tuple(item.strip().rstrip("/") for item in value.split(",") if item.strip())

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    cors = set(_csv(os.getenv("CORS_ORIGINS")))
    if app_env != "prod":
        cors.update(DEV_CORS_ORIGINS)

    data_file = (os.getenv("DEMO_DATA_FILE") or "").strip()
    return Settings(
        app_env=app_env,
        storage_backend=(os.getenv("DEMO_STORAGE") or "local").strip().lower(),
        data_file=Path(data_file) if data_file else DEFAULT_DATA_FILE,
        database_url=os.getenv("DATABASE_URL", ""),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        cors_origins=tuple(sorted(cors)),
    )
