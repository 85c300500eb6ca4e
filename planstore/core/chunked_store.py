"""Size-limited store writer/reader — plans as one or more chunk records.

A write is a single purge-then-create cycle: every record labelled with
the plan's identity is removed (best effort), then each freshly encoded
chunk is created.  A failed create aborts the write; nothing is retried.
"""

from __future__ import annotations

import logging

from planstore.core.chunk_codec import ChunkCodec
from planstore.core.errors import PlanNotFoundError, StoreReadError, StoreWriteError
from planstore.core.record_store import RecordNotFoundError, RecordStore, RecordStoreError
from planstore.models.owner import PlanOwner
from planstore.models.records import Record, identity_labels

logger = logging.getLogger(__name__)


class ChunkedPlanStore:
    """Reads and writes plans as chunk records in the size-limited store.

    Parameters
    ----------
    store:
        The metadata store holding the records.
    codec:
        The chunk codec that splits and joins plan bytes.
    """

    def __init__(self, store: RecordStore, codec: ChunkCodec | None = None) -> None:
        self._store = store
        self._codec = codec or ChunkCodec()

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def write(self, owner: PlanOwner, plan_id: str, data: bytes) -> list[Record]:
        """Replace the owner's chunk records with a fresh encoding of *data*."""
        records = self._codec.encode(
            owner.name,
            owner.namespace,
            owner.workspace,
            owner.uid,
            plan_id,
            data,
        )

        self.purge_chunks(owner)

        for record in records:
            try:
                self._store.create(record)
            except RecordStoreError as exc:
                raise StoreWriteError(
                    f"failed to create plan record {record.name}: {exc}"
                ) from exc
            logger.debug("ChunkedPlanStore: created chunk %s", record.name)

        logger.info(
            "wrote plan %s for %s/%s as %d chunk record(s) (%d bytes)",
            plan_id,
            owner.namespace,
            owner.name,
            len(records),
            len(data),
        )
        return records

    def purge_chunks(self, owner: PlanOwner) -> int:
        """Delete every chunk record of the owner's plan, best effort.

        Stale records left over from an earlier write must not block a new
        one, so list and delete failures are logged and skipped.  Returns
        the number of records removed.
        """
        try:
            stale = self._store.list_by_labels(
                owner.namespace, identity_labels(owner.name, owner.workspace)
            )
        except RecordStoreError as exc:
            logger.error(
                "unable to list existing plan records for %s/%s: %s",
                owner.namespace,
                owner.name,
                exc,
            )
            return 0

        removed = 0
        for record in stale:
            try:
                self._store.delete(record.namespace, record.name)
                removed += 1
            except RecordNotFoundError:
                continue
            except RecordStoreError as exc:
                logger.error("unable to delete old plan record %s: %s", record.name, exc)
        return removed

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_chunks(self, owner: PlanOwner) -> list[Record]:
        """Return the owner's chunk records, possibly empty."""
        try:
            return self._store.list_by_labels(
                owner.namespace, identity_labels(owner.name, owner.workspace)
            )
        except RecordStoreError as exc:
            raise StoreReadError(
                f"failed to list plan records for {owner.namespace}/{owner.name}: {exc}"
            ) from exc

    def reconstruct(self, owner: PlanOwner, records: list[Record]) -> bytes:
        """Decode *records* back into the original plan bytes."""
        return self._codec.decode(owner.name, owner.namespace, owner.uid, records)

    def read(self, owner: PlanOwner) -> bytes:
        records = self.list_chunks(owner)
        if not records:
            raise PlanNotFoundError(
                f"no plan records for {owner.namespace}/{owner.name}"
            )
        return self.reconstruct(owner, records)
