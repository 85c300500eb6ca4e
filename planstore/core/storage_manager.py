"""Hybrid storage manager — the single entry point for plan persistence.

Per write, the manager resolves the owner's storage configuration, picks
a storage method for the plan's size, and writes either:

- chunk records to the size-limited store, or
- a compressed file to the spill store plus a locator record.

Reads go through the ``ReadDispatcher``, which understands every format
ever written (chunked, locator, legacy inline).

Concurrent writers for the same owner are not coordinated here.  Callers
must serialize writes per owner; a race can leave stale records behind.
"""

from __future__ import annotations

import logging

from planstore.core.chunk_codec import ChunkCodec
from planstore.core.chunked_store import ChunkedPlanStore
from planstore.core.dispatcher import ReadDispatcher
from planstore.core.errors import PlanStorageError
from planstore.core.locator import LocatorRecordManager, is_locator
from planstore.core.record_store import RecordNotFoundError, RecordStore, RecordStoreError
from planstore.core.spill_store import LocalVolumeSpillStore, SpillStore
from planstore.core.strategy import resolve_storage_config, select_storage_method
from planstore.models.formats import StoredPlan
from planstore.models.owner import PlanOwner
from planstore.models.records import Record
from planstore.models.storage import StorageConfig, StorageMethod

logger = logging.getLogger(__name__)


class HybridStorageManager:
    """Stores one owner's plans across the size-limited and spill stores.

    Parameters
    ----------
    store:
        The size-limited metadata store.
    owner:
        The object owning the plan.  Never mutated.
    codec:
        Chunk codec for the size-limited path.
    spill_store:
        Spill store for oversized plans.  Defaults to a local volume rooted
        at the owner's configured mount path.
    """

    def __init__(
        self,
        store: RecordStore,
        owner: PlanOwner,
        *,
        codec: ChunkCodec | None = None,
        spill_store: SpillStore | None = None,
    ) -> None:
        self._store = store
        self._owner = owner
        self._config = resolve_storage_config(owner.storage_config)
        self._spill = spill_store or LocalVolumeSpillStore(self._config.volume_mount_path)
        self._chunked = ChunkedPlanStore(store, codec)
        self._locators = LocatorRecordManager(store)
        self._dispatcher = ReadDispatcher(store, self._chunked, self._locators, self._spill)

    @property
    def owner(self) -> PlanOwner:
        return self._owner

    @property
    def storage_config(self) -> StorageConfig:
        """The effective configuration after defaults are applied."""
        return self._config

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def write_plan(self, plan_id: str, data: bytes, suffix: str = "") -> StorageMethod:
        """Persist *data* as the owner's current plan.

        Returns the storage method that was used.
        """
        method = select_storage_method(self._config, len(data))
        logger.info(
            "writing terraform plan: owner=%s/%s plan_id=%s size=%d method=%s",
            self._owner.namespace,
            self._owner.name,
            plan_id,
            len(data),
            method.value,
        )

        if method is StorageMethod.SPILL:
            self._write_spilled(plan_id, data, suffix)
        else:
            self._chunked.write(self._owner, plan_id, data)
            # Chunk records win on read, so the new plan is already current.
            self._discard_legacy(suffix)
        return method

    def _write_spilled(self, plan_id: str, data: bytes, suffix: str) -> None:
        previous_path = self._previous_spill_path(suffix)

        path = self._spill.write(self._owner, plan_id, suffix, data)
        self._locators.publish(self._owner, plan_id, suffix, path)

        # Old chunk records shadow the locator until they are gone.
        self._chunked.purge_chunks(self._owner)

        if previous_path and previous_path != path:
            self._remove_spill_file(previous_path)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def read_plan(self, suffix: str = "") -> bytes:
        """Return the owner's current plan bytes, whatever format holds them."""
        return self._dispatcher.read(self._owner, suffix)

    def describe_plan(self, suffix: str = "") -> StoredPlan:
        """Return the stored format of the owner's plan without decoding it."""
        return self._dispatcher.fetch(self._owner, suffix)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_plan(self, suffix: str = "") -> None:
        """Remove the owner's plan in every format, best effort."""
        removed = self._chunked.purge_chunks(self._owner)
        self._discard_legacy(suffix)
        logger.info(
            "deleted plan for %s/%s (%d chunk record(s))",
            self._owner.namespace,
            self._owner.name,
            removed,
        )

    # ------------------------------------------------------------------
    # Best-effort cleanup of the legacy-named record
    # ------------------------------------------------------------------

    def _get_legacy(self, suffix: str) -> Record | None:
        name = self._locators.record_name(self._owner, suffix)
        try:
            return self._store.get(self._owner.namespace, name)
        except RecordNotFoundError:
            return None
        except RecordStoreError as exc:
            logger.warning(
                "unable to read plan record %s/%s: %s", self._owner.namespace, name, exc
            )
            return None

    def _previous_spill_path(self, suffix: str) -> str | None:
        legacy = self._get_legacy(suffix)
        if legacy is None or not is_locator(legacy):
            return None
        try:
            return self._locators.resolve_path(legacy)
        except PlanStorageError as exc:
            logger.warning("ignoring malformed plan reference %s: %s", legacy.name, exc)
            return None

    def _discard_legacy(self, suffix: str) -> None:
        """Remove a legacy or locator record (and its spill file), best effort."""
        legacy = self._get_legacy(suffix)
        if legacy is None:
            return

        path: str | None = None
        if is_locator(legacy):
            try:
                path = self._locators.resolve_path(legacy)
            except PlanStorageError as exc:
                logger.warning("ignoring malformed plan reference %s: %s", legacy.name, exc)

        try:
            self._store.delete(legacy.namespace, legacy.name)
        except RecordNotFoundError:
            pass
        except RecordStoreError as exc:
            logger.error("unable to delete old plan record %s: %s", legacy.name, exc)

        if path:
            self._remove_spill_file(path)

    def _remove_spill_file(self, path: str) -> None:
        try:
            self._spill.remove(path)
        except PlanStorageError as exc:
            logger.error("unable to remove old plan file %s: %s", path, exc)
