"""Record store protocol and in-memory implementation.

The size-limited metadata store is modelled as a repository with four
operations: list by labels, get by name, create, and delete.  "Not found"
and "already exists" are distinguishable error kinds so callers can tell
a missing plan from a broken store.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from planstore.models.records import MAX_RECORD_SIZE_BYTES, Record

logger = logging.getLogger(__name__)


class RecordStoreError(RuntimeError):
    """Raised when a record store operation fails."""


class RecordNotFoundError(RecordStoreError):
    """Raised when no record exists under the requested name."""


class RecordExistsError(RecordStoreError):
    """Raised when creating a record whose name is already taken."""


class RecordTooLargeError(RecordStoreError):
    """Raised when a record's payload exceeds the store's hard ceiling."""


@runtime_checkable
class RecordStore(Protocol):
    """Protocol every metadata-store backend implements.

    All operations are scoped to a namespace.
    """

    def list_by_labels(self, namespace: str, labels: dict[str, str]) -> list[Record]:
        """Return every record in *namespace* carrying all of *labels*."""
        ...

    def get(self, namespace: str, name: str) -> Record:
        """Return the named record or raise ``RecordNotFoundError``."""
        ...

    def create(self, record: Record) -> None:
        """Persist a new record; raise ``RecordExistsError`` on name clash."""
        ...

    def delete(self, namespace: str, name: str) -> None:
        """Remove the named record or raise ``RecordNotFoundError``."""
        ...


def check_record_size(record: Record, max_size: int) -> None:
    """Enforce the per-record ceiling shared by every backend."""
    if record.size_bytes > max_size:
        raise RecordTooLargeError(
            f"record {record.namespace}/{record.name} is {record.size_bytes} bytes, "
            f"exceeds limit of {max_size} bytes"
        )


class InMemoryRecordStore:
    """Dict-backed record store, for tests and single-process use.

    Parameters
    ----------
    max_record_size:
        Hard per-record payload ceiling in bytes.
    """

    def __init__(self, max_record_size: int = MAX_RECORD_SIZE_BYTES) -> None:
        self._max_record_size = max_record_size
        self._records: dict[tuple[str, str], Record] = {}

    def list_by_labels(self, namespace: str, labels: dict[str, str]) -> list[Record]:
        return sorted(
            (
                r
                for (ns, _), r in self._records.items()
                if ns == namespace and r.matches_labels(labels)
            ),
            key=lambda r: r.name,
        )

    def get(self, namespace: str, name: str) -> Record:
        try:
            return self._records[(namespace, name)]
        except KeyError:
            raise RecordNotFoundError(f"record {namespace}/{name} not found") from None

    def create(self, record: Record) -> None:
        key = (record.namespace, record.name)
        if key in self._records:
            raise RecordExistsError(
                f"record {record.namespace}/{record.name} already exists"
            )
        check_record_size(record, self._max_record_size)
        self._records[key] = record
        logger.debug("InMemoryRecordStore: created %s/%s", *key)

    def delete(self, namespace: str, name: str) -> None:
        try:
            del self._records[(namespace, name)]
        except KeyError:
            raise RecordNotFoundError(f"record {namespace}/{name} not found") from None
        logger.debug("InMemoryRecordStore: deleted %s/%s", namespace, name)

    def __len__(self) -> int:
        return len(self._records)
