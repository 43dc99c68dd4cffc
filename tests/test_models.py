from __future__ import annotations

import pytest

from demotracker.core.utils import to_iso
from demotracker.domain.models import (
    Demo,
    Task,
    TaskPriority,
    TaskStatus,
    check_demo_changes,
    new_demo,
    new_task,
)


def test_new_demo_assigns_identity_and_empty_comments(foo_fields):
    demo = new_demo(foo_fields)
    assert demo.id
    assert demo.created_at
    assert demo.comments == ()
    assert demo.fields() == foo_fields
    assert new_demo(foo_fields).id != demo.id


def test_new_task_defaults():
    task = new_task("check colors")
    assert task.text == "check colors"
    assert task.completed is False
    assert task.priority is TaskPriority.MID
    assert task.status is TaskStatus.PENDING


def test_to_dict_uses_camel_case(foo_fields):
    demo = new_demo(foo_fields)
    demo = demo.with_comments([new_task("a")])
    data = demo.to_dict()
    assert set(data) == {
        "id", "name", "client", "demoUrl", "thumbnailUrl", "category",
        "priority", "status", "comments", "createdAt",
    }
    assert data["demoUrl"] == "https://x"
    assert data["comments"][0]["priority"] == "Mid"
    assert data["comments"][0]["status"] == "Pending"
    assert Demo.from_dict(data) == demo


def test_from_dict_tolerates_missing_and_unknown_values():
    task = Task.from_dict({"id": "t1", "text": "x", "priority": "Urgent", "status": "Done"})
    assert task.priority is TaskPriority.MID
    assert task.status is TaskStatus.PENDING
    assert task.created_at

    demo = Demo.from_dict({"name": "Bar", "demoUrl": "https://bar", "priority": "oops"})
    assert demo.id
    assert demo.priority == 3
    assert demo.thumbnail_url == ""
    assert demo.comments == ()


def test_with_comment_replaces_only_target(foo_fields):
    a, b = new_task("a"), new_task("b")
    demo = new_demo(foo_fields).with_comments([a, b])
    changed = demo.with_comment(a.id, completed=True)
    assert changed.find_comment(a.id).completed is True
    assert changed.find_comment(b.id) == b
    # the original snapshot is untouched
    assert demo.find_comment(a.id).completed is False
    assert demo.with_comment("missing", completed=True) == demo


def test_check_demo_changes_rejects_identity_fields():
    check_demo_changes({"name": "x", "priority": 1})
    with pytest.raises(TypeError):
        check_demo_changes({"id": "other"})
    with pytest.raises(TypeError):
        check_demo_changes({"comments": []})


def test_to_iso_rejects_non_timestamp_values():
    assert to_iso(None) == ""
    assert to_iso("2024-05-01T12:00:00Z") == "2024-05-01T12:00:00Z"
    with pytest.raises(TypeError):
        to_iso(1700000000000)
