"""
FastAPI routers grouped by view (demos, tasks, kanban, import/export).

Each module exposes an APIRouter included by `demotracker.app`. Routers read
the store from `app.state.store` and never touch the backing store directly.
"""
