"""Locator records — small records that point at a spilled plan file.

A locator lives under the same deterministic name as the legacy
single-record plan, so lookup-by-name keeps resolving the plan even when
its bytes live in the spill store.  Its payload is a JSON object under
the ``reference`` key::

    {"file-path": "...", "plan-id": "...", "storage-type": "spill"}
"""

from __future__ import annotations

import json
import logging

from planstore.core.errors import (
    LocatorJSONError,
    LocatorPathMissingError,
    LocatorReferenceMissingError,
    StoreReadError,
    StoreWriteError,
)
from planstore.core.record_store import RecordNotFoundError, RecordStore, RecordStoreError
from planstore.models.owner import PlanOwner
from planstore.models.records import (
    LOCATOR_STORAGE_TYPE,
    LOCATOR_STORAGE_TYPES,
    REFERENCE_DATA_KEY,
    SAVED_PLAN_ANNOTATION,
    STORAGE_TYPE_ANNOTATION,
    Record,
    plan_record_name,
)

logger = logging.getLogger(__name__)

FILE_PATH_KEY = "file-path"
PLAN_ID_KEY = "plan-id"
STORAGE_TYPE_KEY = "storage-type"


def is_locator(record: Record) -> bool:
    """Whether *record* is marked as a locator rather than a plan payload."""
    return record.annotations.get(STORAGE_TYPE_ANNOTATION) in LOCATOR_STORAGE_TYPES


class LocatorRecordManager:
    """Publishes and resolves locator records.

    Parameters
    ----------
    store:
        The metadata store holding the locator records.
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    @staticmethod
    def record_name(owner: PlanOwner, suffix: str = "") -> str:
        return plan_record_name(owner.workspace, owner.name, suffix)

    def build(self, owner: PlanOwner, plan_id: str, suffix: str, file_path: str) -> Record:
        """Build (but do not persist) the locator record for a spill file."""
        reference = {
            STORAGE_TYPE_KEY: LOCATOR_STORAGE_TYPE,
            FILE_PATH_KEY: file_path,
            PLAN_ID_KEY: plan_id,
        }
        return Record(
            name=self.record_name(owner, suffix),
            namespace=owner.namespace,
            annotations={
                STORAGE_TYPE_ANNOTATION: LOCATOR_STORAGE_TYPE,
                SAVED_PLAN_ANNOTATION: plan_id,
            },
            data={
                REFERENCE_DATA_KEY: json.dumps(
                    reference, sort_keys=True, separators=(",", ":")
                ).encode("utf-8"),
            },
            owner_references=[owner.owner_reference()],
        )

    def publish(self, owner: PlanOwner, plan_id: str, suffix: str, file_path: str) -> Record:
        """Replace any record under the locator name with a fresh locator.

        Unlike chunk cleanup, the delete of an existing record here must
        succeed: the create that follows would otherwise collide with it.
        """
        name = self.record_name(owner, suffix)
        try:
            self._store.get(owner.namespace, name)
        except RecordNotFoundError:
            pass
        except RecordStoreError as exc:
            raise StoreReadError(
                f"error reading existing plan reference {owner.namespace}/{name}: {exc}"
            ) from exc
        else:
            try:
                self._store.delete(owner.namespace, name)
            except RecordNotFoundError:
                pass
            except RecordStoreError as exc:
                raise StoreWriteError(
                    f"error deleting existing plan reference {owner.namespace}/{name}: {exc}"
                ) from exc

        record = self.build(owner, plan_id, suffix, file_path)
        try:
            self._store.create(record)
        except RecordStoreError as exc:
            raise StoreWriteError(
                f"error creating plan reference {owner.namespace}/{name}: {exc}"
            ) from exc

        logger.info(
            "published plan reference %s/%s -> %s", owner.namespace, name, file_path
        )
        return record

    @staticmethod
    def resolve_path(record: Record) -> str:
        """Extract the spill file path from a locator record."""
        raw = record.data.get(REFERENCE_DATA_KEY)
        if raw is None:
            raise LocatorReferenceMissingError(
                f"volume reference data not found in {record.namespace}/{record.name}"
            )
        try:
            reference = json.loads(raw)
        except (UnicodeDecodeError, ValueError) as exc:
            raise LocatorJSONError(
                f"failed to unmarshal volume reference in "
                f"{record.namespace}/{record.name}: {exc}"
            ) from exc
        if not isinstance(reference, dict):
            raise LocatorJSONError(
                f"volume reference in {record.namespace}/{record.name} is not an object"
            )
        path = reference.get(FILE_PATH_KEY)
        if not path:
            raise LocatorPathMissingError(
                f"file path not found in volume reference "
                f"{record.namespace}/{record.name}"
            )
        return str(path)
