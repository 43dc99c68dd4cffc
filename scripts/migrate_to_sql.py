"""One-off migration script: local JSON store -> SQL database (DATABASE_URL)."""
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
from demotracker.core.utils import parse_iso
from demotracker.db.create_tables import create_all
from demotracker.repositories.json_storage import JSONDemoStore
from demotracker.repositories.sql_repository import SQLDemoStore
from demotracker.services.transfer_service import import_demos


def migrate(data_file: Path) -> None:
    if not data_file.exists():
        raise SystemExit(f"File not found: {data_file}")
    source = JSONDemoStore(data_file)
    create_all()
    target = SQLDemoStore()
    if target.error:
        raise SystemExit(f"Cannot reach database: {target.error}")
    # Oldest first, so created_at order in SQL matches the original order.
    demos = sorted(source.demos, key=lambda d: parse_iso(d.created_at))
    result = import_demos(target, demos)
    print(f"Migrated {result.imported} demo(s) to SQL ({result.skipped} skipped).")


if __name__ == "__main__":
    settings = get_settings()
    configure_logging(settings.log_level)
    ap = argparse.ArgumentParser(description="Copy the local JSON store into the SQL database")
    ap.add_argument("--data-file", type=Path, default=settings.data_file)
    migrate(ap.parse_args().data_file)
