from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

import pytest

from demotracker.domain.models import DemoFields
from demotracker.repositories.json_storage import JSONDemoStore
from demotracker.repositories.sql_repository import SQLDemoStore
from demotracker.services.transfer_service import (
    ImportDocumentError,
    export_document,
    export_filename,
    import_demos,
    parse_import_document,
)


def _seed(store, foo_fields):
    foo = store.add_demo(foo_fields)
    store.add_comment(foo.id, "check colors")
    store.add_comment(foo.id, "fix footer")
    first = store.get_demo(foo.id).comments[0]
    store.toggle_comment_complete(foo.id, first.id)
    store.update_comment_priority(foo.id, first.id, "High")
    store.add_demo(DemoFields(name="Bar", client="Initech", demo_url="https://bar", category="Viewer", priority=4, status="pending"))


def _comparable(demos):
    return sorted(
        (
            d.name, d.client, d.demo_url, d.thumbnail_url, d.category, d.priority, d.status,
            tuple((c.text, c.completed, c.priority, c.status) for c in d.comments),
        )
        for d in demos
    )


def test_export_is_pretty_json_in_memory_shape(json_store, foo_fields):
    _seed(json_store, foo_fields)
    text = export_document(json_store.demos)
    assert text.startswith("[\n  {")
    data = json.loads(text)
    assert [d["name"] for d in data] == ["Foo", "Bar"]
    assert data[0]["comments"][0]["priority"] == "High"
    assert "demoUrl" in data[0] and "createdAt" in data[0]


def test_export_filename_embeds_timestamp():
    name = export_filename(datetime(2024, 5, 1, 12, 30, 0, 123456, tzinfo=timezone.utc))
    assert name == "demo-tracker-backup-2024-05-01T12:30:00.123Z.json"
    assert export_filename().startswith("demo-tracker-backup-")


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        json.dumps({"name": "x"}),
        json.dumps(["x"]),
        json.dumps([{"name": "x"}]),
        json.dumps([{"name": "x", "demoUrl": "https://x", "comments": "nope"}]),
        json.dumps([{"name": "x", "demoUrl": "https://x", "priority": 42}]),
        json.dumps([{"name": "x", "demoUrl": "https://x", "priority": "2"}]),
        json.dumps([{"name": "x", "demoUrl": "https://x", "priority": True}]),
        json.dumps([{"name": "x", "demoUrl": "https://x", "comments": [{"priority": "High"}]}]),
        json.dumps([{"name": "x", "demoUrl": "https://x", "comments": [{"text": "   "}]}]),
        json.dumps([{"name": "x", "demoUrl": "https://x", "comments": [{"text": "t", "createdAt": 1700000000000}]}]),
    ],
)
def test_malformed_documents_are_rejected(payload):
    with pytest.raises(ImportDocumentError):
        parse_import_document(payload)


def test_round_trip_between_json_stores(json_store, foo_fields, tmp_path):
    _seed(json_store, foo_fields)
    demos = parse_import_document(export_document(json_store.demos).encode("utf-8"))

    target = JSONDemoStore(tmp_path / "other.json")
    result = import_demos(target, demos)
    assert (result.imported, result.skipped) == (2, 0)
    assert _comparable(target.demos) == _comparable(json_store.demos)
    # import always creates new records
    assert {d.id for d in target.demos}.isdisjoint({d.id for d in json_store.demos})
    assert JSONDemoStore(tmp_path / "other.json").demos == target.demos


def test_round_trip_into_sql(temp_db, json_store, foo_fields):
    _seed(json_store, foo_fields)
    demos = parse_import_document(export_document(json_store.demos))
    target = SQLDemoStore()
    result = import_demos(target, demos)
    assert result.imported == 2
    assert _comparable(target.demos) == _comparable(json_store.demos)
    foo = next(d for d in target.demos if d.name == "Foo")
    assert [c.text for c in foo.comments] == ["check colors", "fix footer"]


class _FlakyStore(JSONDemoStore):
    """Refuses demos named "Broken", like a backend rejecting one insert."""

    def __init__(self, path):
        super().__init__(path)
        self.refreshed = 0

    def add_demo(self, fields):
        if fields.name == "Broken":
            self.error = "insert rejected"
            return None
        return super().add_demo(fields)

    def refresh(self):
        self.refreshed += 1
        return super().refresh()


def test_import_skips_failed_entries_and_refreshes(tmp_path, caplog):
    document = json.dumps([
        {"name": "Ok", "demoUrl": "https://ok", "comments": [{"text": "t", "priority": "Low"}]},
        {"name": "Broken", "demoUrl": "https://broken", "comments": [{"text": "lost"}]},
        {"name": "Also ok", "demoUrl": "https://ok2"},
    ])
    store = _FlakyStore(tmp_path / "flaky.json")
    with caplog.at_level(logging.WARNING):
        result = import_demos(store, parse_import_document(document))
    assert (result.imported, result.skipped) == (2, 1)
    assert [d.name for d in store.demos] == ["Ok", "Also ok"]
    assert store.demos[0].comments[0].priority.value == "Low"
    assert store.refreshed == 1
    assert any("Broken" in r.getMessage() for r in caplog.records)
