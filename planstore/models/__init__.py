"""planstore data models — all Pydantic v2, all frozen (immutable)."""

from planstore.models.formats import ChunkedPlan, InlinePlan, LocatorPlan, StoredPlan
from planstore.models.owner import PlanOwner
from planstore.models.records import (
    MAX_RECORD_SIZE_BYTES,
    OwnerReference,
    Record,
    identity_labels,
    plan_record_name,
)
from planstore.models.storage import (
    DEFAULT_MAX_SECRET_SIZE,
    DEFAULT_VOLUME_MOUNT_PATH,
    StorageConfig,
    StorageMethod,
    StorageType,
)

__all__ = [
    # records
    "MAX_RECORD_SIZE_BYTES",
    "OwnerReference",
    "Record",
    "identity_labels",
    "plan_record_name",
    # storage
    "DEFAULT_MAX_SECRET_SIZE",
    "DEFAULT_VOLUME_MOUNT_PATH",
    "StorageConfig",
    "StorageMethod",
    "StorageType",
    # owner
    "PlanOwner",
    # formats
    "ChunkedPlan",
    "InlinePlan",
    "LocatorPlan",
    "StoredPlan",
]
