"""Tests for snapshot load/save and path resolution."""

import json
from pathlib import Path

import pytest

from config import PROJECT_ROOT
from repositories import (
    Collection,
    DocumentStore,
    MalformedSnapshotError,
    SnapshotFile,
    UnknownCollectionError,
    default_schema,
    resolve_database_path,
)


def test_missing_file_loads_defaults(tmp_path):
    snapshot = SnapshotFile(tmp_path / "nope.json").load()
    assert snapshot == default_schema()
    assert len(snapshot) == 9
    assert all(records == [] for records in snapshot.values())


def test_default_schema_is_fresh_each_call():
    a = default_schema()
    a["users"].append({"id": "usr_1"})
    assert default_schema()["users"] == []


def test_partial_snapshot_is_filled_from_defaults(tmp_path):
    path = tmp_path / "legacy.json"
    path.write_text(json.dumps({"users": [{"id": "usr_1", "email": "a@example.com"}]}), encoding="utf-8")

    snapshot = SnapshotFile(path).load()
    assert snapshot["users"] == [{"id": "usr_1", "email": "a@example.com"}]
    assert snapshot["knowledgeBase"] == []
    assert set(snapshot) == {c.value for c in Collection}


def test_unknown_top_level_keys_are_hidden_but_kept(tmp_path):
    """Keys from a newer snapshot format stay out of the collections and survive a write."""
    path = tmp_path / "extra.json"
    path.write_text(json.dumps({"users": [], "organizations": [{"id": "org_1"}]}), encoding="utf-8")

    db = DocumentStore(path)
    with pytest.raises(UnknownCollectionError):
        db.list("organizations")
    db.upsert(Collection.USERS, {"email": "a@example.com"})

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["organizations"] == [{"id": "org_1"}]
    assert len(data["users"]) == 1
    assert set(data) == {c.value for c in Collection} | {"organizations"}

    snapshot_file = SnapshotFile(path)
    assert "organizations" not in snapshot_file.load()
    assert snapshot_file.extras == {"organizations": [{"id": "org_1"}]}


@pytest.mark.parametrize("content", ["{not json", "", '{"users": [1, 2'])
def test_unparseable_content_raises(tmp_path, content):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(MalformedSnapshotError) as exc:
        SnapshotFile(path).load()
    assert exc.value.code == "snapshot_malformed"
    assert exc.value.path == path


@pytest.mark.parametrize("content", ["[]", '{"users": {}}', '{"messages": ["hi"]}'])
def test_wrong_shape_raises(tmp_path, content):
    path = tmp_path / "shape.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(MalformedSnapshotError):
        SnapshotFile(path).load()


def test_malformed_snapshot_propagates_from_store(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("truncated {", encoding="utf-8")
    with pytest.raises(MalformedSnapshotError):
        DocumentStore(path)


def test_save_creates_parent_directories(tmp_path):
    path = tmp_path / "a" / "b" / "db.json"
    SnapshotFile(path).save(default_schema())
    assert json.loads(path.read_text(encoding="utf-8")) == default_schema()


def test_save_load_round_trip_is_byte_identical(tmp_path):
    path = tmp_path / "db.json"
    db = DocumentStore(path)
    db.upsert(Collection.USERS, {"email": "zoë@example.com", "name": "Zoë"})
    db.append(Collection.MESSAGES, {"threadId": "t1", "role": "user", "content": "héllo"})
    before = path.read_bytes()

    snapshot_file = SnapshotFile(path)
    snapshot_file.save(snapshot_file.load())
    assert path.read_bytes() == before


def test_nonexistent_location_then_one_upsert_creates_file(tmp_path):
    path = tmp_path / "fresh" / "database.json"
    db = DocumentStore(path)
    for collection in Collection:
        assert db.list(collection) == []
    assert not path.exists()

    user = db.upsert(Collection.USERS, {"email": "a@example.com", "name": "Ada"})

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["users"] == [user]
    assert sum(len(v) for v in data.values()) == 1


def test_resolve_absolute_path_verbatim(tmp_path):
    target = tmp_path / "x.json"
    assert resolve_database_path(str(target)) == target


def test_resolve_relative_path_against_project_root():
    assert resolve_database_path("data/database.json") == PROJECT_ROOT / "data" / "database.json"
    assert resolve_database_path("db.json", root=Path("/srv/app")) == Path("/srv/app/db.json")
