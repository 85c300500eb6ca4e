"""SQLite-backed record store.

Records are stored as JSON bodies (payload bytes base64-encoded) with
their labels denormalised into a side table so that list-by-labels is a
single indexed query.

Design:
- One connection per operation; WAL journal mode for concurrent readers.
- (namespace, name) is the primary key, so a second create collides.
- The per-record ceiling is enforced on create, like the real store.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from pydantic import ValidationError

from planstore.core.record_store import (
    RecordExistsError,
    RecordNotFoundError,
    RecordStoreError,
    check_record_size,
)
from planstore.models.records import MAX_RECORD_SIZE_BYTES, Record

logger = logging.getLogger(__name__)


def _load_record(body: str) -> Record:
    try:
        return Record.model_validate_json(body)
    except ValidationError as exc:
        raise RecordStoreError(f"corrupt record body: {exc}") from exc


# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

_CREATE_RECORDS = """
CREATE TABLE IF NOT EXISTS records (
    namespace   TEXT NOT NULL,
    name        TEXT NOT NULL,
    body        TEXT NOT NULL,
    PRIMARY KEY (namespace, name)
);
"""

_CREATE_LABELS = """
CREATE TABLE IF NOT EXISTS record_labels (
    namespace   TEXT NOT NULL,
    name        TEXT NOT NULL,
    key         TEXT NOT NULL,
    value       TEXT NOT NULL,
    PRIMARY KEY (namespace, name, key),
    FOREIGN KEY (namespace, name) REFERENCES records(namespace, name)
        ON DELETE CASCADE
);
"""

_CREATE_IDX_LABELS = """
CREATE INDEX IF NOT EXISTS idx_labels ON record_labels(namespace, key, value);
"""


class SqliteRecordStore:
    """Record store persisted in a single SQLite database file.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file. Created if it does not exist.
    max_record_size:
        Hard per-record payload ceiling in bytes.
    """

    def __init__(
        self,
        db_path: Path,
        *,
        max_record_size: int = MAX_RECORD_SIZE_BYTES,
    ) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._max_record_size = max_record_size
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(_CREATE_RECORDS)
            conn.execute(_CREATE_LABELS)
            conn.execute(_CREATE_IDX_LABELS)
            conn.commit()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_by_labels(self, namespace: str, labels: dict[str, str]) -> list[Record]:
        if not labels:
            query = "SELECT body FROM records WHERE namespace = ? ORDER BY name"
            params: list[object] = [namespace]
        else:
            clauses = " OR ".join("(l.key = ? AND l.value = ?)" for _ in labels)
            query = (
                "SELECT r.body FROM records r "
                "JOIN record_labels l ON l.namespace = r.namespace AND l.name = r.name "
                f"WHERE r.namespace = ? AND ({clauses}) "
                "GROUP BY r.namespace, r.name "
                "HAVING COUNT(*) = ? "
                "ORDER BY r.name"
            )
            params = [namespace]
            for key, value in labels.items():
                params.extend([key, value])
            params.append(len(labels))

        try:
            with self._connect() as conn:
                rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as exc:
            raise RecordStoreError(
                f"failed to list records in {namespace}: {exc}"
            ) from exc
        return [_load_record(row[0]) for row in rows]

    def get(self, namespace: str, name: str) -> Record:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT body FROM records WHERE namespace = ? AND name = ?",
                    (namespace, name),
                ).fetchone()
        except sqlite3.Error as exc:
            raise RecordStoreError(
                f"failed to get record {namespace}/{name}: {exc}"
            ) from exc
        if row is None:
            raise RecordNotFoundError(f"record {namespace}/{name} not found")
        return _load_record(row[0])

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, record: Record) -> None:
        check_record_size(record, self._max_record_size)
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO records (namespace, name, body) VALUES (?, ?, ?)",
                    (record.namespace, record.name, record.model_dump_json()),
                )
                conn.executemany(
                    "INSERT INTO record_labels (namespace, name, key, value) "
                    "VALUES (?, ?, ?, ?)",
                    [
                        (record.namespace, record.name, key, value)
                        for key, value in record.labels.items()
                    ],
                )
                conn.commit()
        except sqlite3.IntegrityError as exc:
            raise RecordExistsError(
                f"record {record.namespace}/{record.name} already exists"
            ) from exc
        except sqlite3.Error as exc:
            raise RecordStoreError(
                f"failed to create record {record.namespace}/{record.name}: {exc}"
            ) from exc
        logger.debug("SqliteRecordStore: created %s/%s", record.namespace, record.name)

    def delete(self, namespace: str, name: str) -> None:
        try:
            with self._connect() as conn:
                cur = conn.execute(
                    "DELETE FROM records WHERE namespace = ? AND name = ?",
                    (namespace, name),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise RecordStoreError(
                f"failed to delete record {namespace}/{name}: {exc}"
            ) from exc
        if cur.rowcount == 0:
            raise RecordNotFoundError(f"record {namespace}/{name} not found")
        logger.debug("SqliteRecordStore: deleted %s/%s", namespace, name)
