"""Storage configuration models — where a plan is allowed to live."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MAX_SECRET_SIZE = 900_000  # bytes, leaves headroom under the 1 MiB ceiling
DEFAULT_VOLUME_MOUNT_PATH = "/tmp/tf-storage"


class StorageType(str, Enum):
    """Storage types an owner may request."""

    SIZE_LIMITED = "size-limited"
    SPILL = "spill"
    AUTO = "auto"


class StorageMethod(str, Enum):
    """Where a single write actually goes."""

    SIZE_LIMITED = "size-limited"
    SPILL = "spill"


class StorageConfig(BaseModel):
    """Per-owner storage configuration.

    ``storage_type`` is a plain string so that configurations written by
    newer or older clients with unknown types still load; the strategy
    selector treats unknown values as size-limited.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    storage_type: str = Field(default=StorageType.SIZE_LIMITED.value, alias="type")
    max_secret_size: int | None = Field(default=None, ge=0)
    auto_fallback: bool = False
    volume_mount_path: str = DEFAULT_VOLUME_MOUNT_PATH
