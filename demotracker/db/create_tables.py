"""
Create the `demos`/`comments` schema on DATABASE_URL.

    python -m demotracker.db.create_tables [--reset]
"""
from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata


def create_all(*, reset: bool = False) -> None:
    engine = get_engine()
    if reset:
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def main() -> None:
    ap = argparse.ArgumentParser(description="Create the demo tracker tables")
    ap.add_argument("--reset", action="store_true", help="Drop existing demo/comment tables first")
    args = ap.parse_args()
    try:
        create_all(reset=args.reset)
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
    print("Tables demos/comments ready.")


if __name__ == "__main__":
    main()
