"""Tests for the record store backends — in-memory and SQLite share a contract."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from planstore.core.record_store import (
    InMemoryRecordStore,
    RecordExistsError,
    RecordNotFoundError,
    RecordStore,
    RecordStoreError,
    RecordTooLargeError,
)
from planstore.core.sqlite_store import SqliteRecordStore
from planstore.models.records import OwnerReference, Record


def _record(name: str, namespace: str = "ns", **labels: str) -> Record:
    return Record(
        name=name,
        namespace=namespace,
        labels=labels,
        annotations={"note": name},
        data={"tfplan": b"\x00\x01binary\xff"},
        owner_references=[OwnerReference(name="owner", uid="uid-1")],
    )


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> RecordStore:
    if request.param == "memory":
        return InMemoryRecordStore(max_record_size=64)
    return SqliteRecordStore(tmp_path / "records.db", max_record_size=64)


class TestRecordStoreContract:
    def test_implements_protocol(self, store: RecordStore):
        assert isinstance(store, RecordStore)

    def test_create_and_get(self, store: RecordStore):
        record = _record("a", app="x")
        store.create(record)
        fetched = store.get("ns", "a")
        assert fetched == record
        assert fetched.data["tfplan"] == b"\x00\x01binary\xff"

    def test_get_missing(self, store: RecordStore):
        with pytest.raises(RecordNotFoundError):
            store.get("ns", "missing")

    def test_create_duplicate(self, store: RecordStore):
        store.create(_record("a"))
        with pytest.raises(RecordExistsError):
            store.create(_record("a"))

    def test_same_name_other_namespace(self, store: RecordStore):
        store.create(_record("a", namespace="one"))
        store.create(_record("a", namespace="two"))
        assert store.get("two", "a").namespace == "two"

    def test_delete(self, store: RecordStore):
        store.create(_record("a"))
        store.delete("ns", "a")
        with pytest.raises(RecordNotFoundError):
            store.get("ns", "a")

    def test_delete_missing(self, store: RecordStore):
        with pytest.raises(RecordNotFoundError):
            store.delete("ns", "missing")

    def test_size_ceiling(self, store: RecordStore):
        big = Record(name="big", namespace="ns", data={"tfplan": b"x" * 65})
        with pytest.raises(RecordTooLargeError):
            store.create(big)

    def test_list_requires_all_labels(self, store: RecordStore):
        store.create(_record("a", plan="p", ws="default"))
        store.create(_record("b", plan="p", ws="other"))
        store.create(_record("c", plan="q", ws="default"))
        store.create(_record("d", namespace="elsewhere", plan="p", ws="default"))

        names = [r.name for r in store.list_by_labels("ns", {"plan": "p", "ws": "default"})]
        assert names == ["a"]
        assert [r.name for r in store.list_by_labels("ns", {"plan": "p"})] == ["a", "b"]

    def test_list_no_labels_returns_namespace(self, store: RecordStore):
        store.create(_record("a"))
        store.create(_record("b", namespace="other"))
        assert [r.name for r in store.list_by_labels("ns", {})] == ["a"]

    def test_delete_removes_from_listing(self, store: RecordStore):
        store.create(_record("a", plan="p"))
        store.delete("ns", "a")
        assert store.list_by_labels("ns", {"plan": "p"}) == []


class TestSqlitePersistence:
    def test_records_survive_reopen(self, tmp_path: Path):
        db = tmp_path / "records.db"
        SqliteRecordStore(db).create(_record("a", plan="p"))

        reopened = SqliteRecordStore(db)
        assert [r.name for r in reopened.list_by_labels("ns", {"plan": "p"})] == ["a"]

    def test_recreate_after_delete_reuses_labels(self, tmp_path: Path):
        store = SqliteRecordStore(tmp_path / "records.db")
        store.create(_record("a", plan="p"))
        store.delete("ns", "a")
        store.create(_record("a", plan="p"))
        assert len(store.list_by_labels("ns", {"plan": "p"})) == 1

    def test_corrupt_row_is_a_store_error(self, tmp_path: Path):
        db = tmp_path / "records.db"
        store = SqliteRecordStore(db)
        store.create(_record("good", app="x"))
        with sqlite3.connect(str(db)) as conn:
            conn.execute("UPDATE records SET body = ? WHERE name = ?", ('{"name": 1}', "good"))
            conn.commit()

        with pytest.raises(RecordStoreError, match="corrupt record"):
            store.get("ns", "good")
        with pytest.raises(RecordStoreError, match="corrupt record"):
            store.list_by_labels("ns", {"app": "x"})
