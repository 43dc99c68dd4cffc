"""FastAPI application exposing the demo tracker views and mutations."""
from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from demotracker.core.config import get_settings
from demotracker.core.log import configure_logging
from demotracker.repositories.base import DemoStore
from demotracker.repositories.factory import build_store
from demotracker.routers import demos as demos_router
from demotracker.routers import kanban as kanban_router
from demotracker.routers import tasks as tasks_router
from demotracker.routers import transfer as transfer_router


def create_app(store: DemoStore | None = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (`--factory`)."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Demo Tracker API")
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.cors_origins),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.state.store = store if store is not None else build_store(settings)

    app.include_router(demos_router.router)
    app.include_router(tasks_router.router)
    app.include_router(kanban_router.router)
    app.include_router(transfer_router.router)

    @app.get("/api/state")
    def state():
        current = app.state.store
        return {"loading": current.loading, "error": current.error, "total": len(current.demos)}

    return app
