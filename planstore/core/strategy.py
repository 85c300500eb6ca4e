"""Storage config resolution and storage method selection.

Both functions are pure and total: they never raise and never touch a store.
"""

from __future__ import annotations

from planstore.models.storage import (
    DEFAULT_MAX_SECRET_SIZE,
    DEFAULT_VOLUME_MOUNT_PATH,
    StorageConfig,
    StorageMethod,
    StorageType,
)


def resolve_storage_config(config: StorageConfig | None) -> StorageConfig:
    """Return the effective storage configuration for an owner.

    An absent configuration means size-limited storage only.  A supplied
    configuration is returned as-is.
    """
    if config is None:
        return StorageConfig(
            storage_type=StorageType.SIZE_LIMITED.value,
            max_secret_size=DEFAULT_MAX_SECRET_SIZE,
            auto_fallback=False,
            volume_mount_path=DEFAULT_VOLUME_MOUNT_PATH,
        )
    return config


def select_storage_method(config: StorageConfig, data_size: int) -> StorageMethod:
    """Pick where a plan of *data_size* bytes is written.

    - ``spill``: always the spill store.
    - ``size-limited`` without auto fallback: always the size-limited store.
    - ``size-limited`` with auto fallback: spill only when the plan is
      strictly larger than the max size.
    - anything else (``auto`` included): the size-limited store.
    """
    if config.storage_type == StorageType.SPILL:
        return StorageMethod.SPILL
    if config.storage_type == StorageType.SIZE_LIMITED and config.auto_fallback:
        max_size = (
            config.max_secret_size
            if config.max_secret_size is not None
            else DEFAULT_MAX_SECRET_SIZE
        )
        if data_size > max_size:
            return StorageMethod.SPILL
    return StorageMethod.SIZE_LIMITED
