"""
High-level use cases for the demo tracker.

Each service module orchestrates a `DemoStore` to implement a workflow
(kanban moves, import/export). Routers call these services instead of
reaching into the backing store.
"""
