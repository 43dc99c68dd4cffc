#!/usr/bin/env python3
"""
Add a demo to the configured store (DEMO_STORAGE=local|sql).

Usage:
  python scripts/add_demo.py --name "Foo" --url https://x [--client Acme] [--category Config] [--priority 2] [--status active]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make the package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from demotracker.core.config import get_settings
from demotracker.core.log import configure_logging
from demotracker.domain.models import DemoFields
from demotracker.repositories.factory import build_store


def main() -> None:
    ap = argparse.ArgumentParser(description="Add a demo to the tracker")
    ap.add_argument("--name", required=True, help="Display name")
    ap.add_argument("--url", required=True, help="Demo URL")
    ap.add_argument("--client", default="", help="Client name")
    ap.add_argument("--thumbnail", default="", help="Thumbnail URL (optional)")
    ap.add_argument("--category", default="", help="Free-text category")
    ap.add_argument("--priority", type=int, default=3, help="1 (most urgent) .. 5")
    ap.add_argument("--status", default="active", help="active|pending|completed|archived")
    ap.add_argument("--comment", action="append", default=[], help="Task text (repeatable)")
    args = ap.parse_args()

    name = (args.name or "").strip()
    url = (args.url or "").strip()
    if not name or not url:
        raise SystemExit("name and url are required")
    if not 1 <= args.priority <= 5:
        raise SystemExit("priority must be between 1 and 5")

    settings = get_settings()
    configure_logging(settings.log_level)
    store = build_store(settings)
    demo = store.add_demo(
        DemoFields(
            name=name,
            client=args.client,
            demo_url=url,
            thumbnail_url=args.thumbnail,
            category=args.category,
            priority=args.priority,
            status=args.status,
        )
    )
    if demo is None:
        raise SystemExit(f"Failed to add demo: {store.error}")
    for text in args.comment:
        if text.strip():
            store.add_comment(demo.id, text.strip())
    print("OK: demo added")
    print(f"  ID: {demo.id}")
    print(f"  Backend: {settings.storage_backend}")
    if args.comment:
        print(f"  Tasks: {len(args.comment)}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
