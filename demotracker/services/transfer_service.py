"""
Import/export of the full demo collection.

The export document is a pretty-printed JSON array of demos in the same shape
the local store keeps on disk (camelCase keys, nested comments, ISO-8601
timestamps). Importing always creates new records: ids and timestamps are
reassigned by the store.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence

from demotracker.core.utils import utc_now
from demotracker.domain.models import Demo
from demotracker.repositories.base import DemoStore

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "demo-tracker-backup"


class TransferError(Exception):
    """Base exception for import/export workflow."""


class ImportDocumentError(TransferError):
    """Raised when an import document cannot be parsed; nothing was written."""


@dataclass
class ImportResult:
    imported: int
    skipped: int


def export_document(demos: Sequence[Demo]) -> str:
    return json.dumps([d.to_dict() for d in demos], ensure_ascii=False, indent=2)


def export_filename(now: datetime | None = None) -> str:
    """`demo-tracker-backup-2024-05-01T12:30:00.123Z.json`"""
    now = (now or utc_now()).astimezone(timezone.utc)
    stamp = now.strftime("%Y-%m-%dT%H:%M:%S") + f".{now.microsecond // 1000:03d}Z"
    return f"{EXPORT_PREFIX}-{stamp}.json"


def parse_import_document(text: str | bytes) -> list[Demo]:
    """Validate the whole document up front so a bad file never causes partial writes."""
    try:
        raw = json.loads(text)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ImportDocumentError("Import file is not valid JSON") from exc
    if not isinstance(raw, list):
        raise ImportDocumentError("Import file must contain a list of demos")
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ImportDocumentError(f"Entry {index} is not an object")
        if not entry.get("name") or not entry.get("demoUrl"):
            raise ImportDocumentError(f"Entry {index} is missing name/demoUrl")
        priority = entry.get("priority", 3)
        if isinstance(priority, bool) or not isinstance(priority, int) or not 1 <= priority <= 5:
            raise ImportDocumentError(f"Entry {index} has priority {priority!r}; expected an integer 1-5")
        comments = entry.get("comments") or []
        if not isinstance(comments, list):
            raise ImportDocumentError(f"Entry {index} has invalid comments")
        for position, comment in enumerate(comments):
            if not isinstance(comment, dict):
                raise ImportDocumentError(f"Entry {index}, comment {position} is not an object")
            text = comment.get("text")
            if not isinstance(text, str) or not text.strip():
                raise ImportDocumentError(f"Entry {index}, comment {position} has no text")
    try:
        return [Demo.from_dict(entry) for entry in raw]
    except (TypeError, ValueError, AttributeError) as exc:
        raise ImportDocumentError(f"Import file has invalid values: {exc}") from exc


def import_demos(store: DemoStore, demos: Sequence[Demo]) -> ImportResult:
    """
    Best-effort import: add each demo, then its comments in one batch.

    A demo the store refuses is logged and skipped; the loop carries on. The
    collection is re-fetched at the end so it reflects what was persisted.
    """
    imported = skipped = 0
    for demo in demos:
        created = store.add_demo(demo.fields())
        if created is None:
            logger.warning("Error importing demo %r: %s", demo.name, store.error)
            skipped += 1
            continue
        imported += 1
        if demo.comments and not store.import_comments(created.id, demo.comments):
            logger.warning("Error importing comments for demo %r: %s", demo.name, store.error)
    store.refresh()
    logger.info("Imported %d demo(s), skipped %d", imported, skipped)
    return ImportResult(imported=imported, skipped=skipped)
