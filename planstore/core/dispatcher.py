"""Read dispatcher — resolves a plan identity to exactly one stored format.

Resolution order (linear, no retries):

1. Chunk records found by identity labels -> ``ChunkedPlan``.  This wins
   over any legacy record, since chunking is the current format.
2. Otherwise the legacy-named record.  Missing -> ``PlanNotFoundError``.
3. Legacy record marked ``storage-type=spill`` -> ``LocatorPlan``.
4. Anything else -> ``InlinePlan`` (payload under ``tfplan``, gzip if
   annotated ``encoding=gzip``).

Fetching and classifying are separate from loading, so callers can
inspect a plan's format without decoding it.
"""

from __future__ import annotations

import logging

from planstore.core.chunked_store import ChunkedPlanStore
from planstore.core.compression import gzip_decode
from planstore.core.errors import PlanDataMissingError, PlanNotFoundError, StoreReadError
from planstore.core.locator import LocatorRecordManager, is_locator
from planstore.core.record_store import RecordNotFoundError, RecordStore, RecordStoreError
from planstore.core.spill_store import SpillStore
from planstore.models.formats import ChunkedPlan, InlinePlan, LocatorPlan, StoredPlan
from planstore.models.owner import PlanOwner
from planstore.models.records import (
    ENCODING_ANNOTATION,
    ENCODING_GZIP,
    PLAN_DATA_KEY,
    Record,
)

logger = logging.getLogger(__name__)


def classify(chunks: list[Record], legacy: Record | None) -> StoredPlan:
    """Discriminate the stored format from the records fetched for a plan."""
    if chunks:
        return ChunkedPlan(records=chunks)
    if legacy is None:
        raise PlanNotFoundError("no plan records found under any known format")
    if is_locator(legacy):
        return LocatorPlan(record=legacy)
    return InlinePlan(record=legacy)


class ReadDispatcher:
    """Fetches, classifies and loads stored plans.

    Parameters
    ----------
    store:
        The metadata store.
    chunked:
        Reader for chunk records.
    locators:
        Resolver for locator records.
    spill_store:
        Where locator records point.
    """

    def __init__(
        self,
        store: RecordStore,
        chunked: ChunkedPlanStore,
        locators: LocatorRecordManager,
        spill_store: SpillStore,
    ) -> None:
        self._store = store
        self._chunked = chunked
        self._locators = locators
        self._spill = spill_store

    def fetch(self, owner: PlanOwner, suffix: str = "") -> StoredPlan:
        chunks = self._chunked.list_chunks(owner)
        if chunks:
            return classify(chunks, None)

        name = self._locators.record_name(owner, suffix)
        try:
            legacy: Record | None = self._store.get(owner.namespace, name)
        except RecordNotFoundError:
            legacy = None
        except RecordStoreError as exc:
            raise StoreReadError(
                f"failed to get plan record {owner.namespace}/{name}: {exc}"
            ) from exc

        try:
            return classify(chunks, legacy)
        except PlanNotFoundError:
            raise PlanNotFoundError(
                f"no plan found for {owner.namespace}/{owner.name} "
                f"(workspace {owner.workspace}, record {name})"
            ) from None

    def load(self, owner: PlanOwner, stored: StoredPlan) -> bytes:
        if isinstance(stored, ChunkedPlan):
            logger.debug(
                "reading plan for %s/%s from %d chunk record(s)",
                owner.namespace,
                owner.name,
                len(stored.records),
            )
            return self._chunked.reconstruct(owner, stored.records)

        if isinstance(stored, LocatorPlan):
            path = self._locators.resolve_path(stored.record)
            logger.debug("reading plan for %s/%s from %s", owner.namespace, owner.name, path)
            return self._spill.read(path)

        if isinstance(stored, InlinePlan):
            return self._load_inline(stored.record)

        raise TypeError(f"unsupported stored plan format: {type(stored).__name__}")

    def read(self, owner: PlanOwner, suffix: str = "") -> bytes:
        return self.load(owner, self.fetch(owner, suffix))

    @staticmethod
    def _load_inline(record: Record) -> bytes:
        payload = record.data.get(PLAN_DATA_KEY)
        if payload is None:
            raise PlanDataMissingError(
                f"plan data not found in secret {record.namespace}/{record.name}"
            )
        if record.annotations.get(ENCODING_ANNOTATION) == ENCODING_GZIP:
            return gzip_decode(payload)
        return payload
