"""Spill store — compressed plan files for plans too big for the record store.

Layout: {mount_path}/plans/{namespace}/{owner_name}/tfplan-{workspace}-{plan_id}{suffix}.gz

The local volume implementation ties a plan's lifetime to the host that
wrote it.  Treat it as an ephemeral cache, never as the only copy of a
plan that cannot be regenerated.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol, runtime_checkable

from planstore.core.compression import gzip_decode, gzip_encode
from planstore.core.errors import SpillStoreError
from planstore.models.owner import PlanOwner
from planstore.models.storage import DEFAULT_VOLUME_MOUNT_PATH

logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = 0o644
DEFAULT_DIR_MODE = 0o755


def spill_file_name(workspace: str, plan_id: str, suffix: str = "") -> str:
    return f"tfplan-{workspace}-{plan_id}{suffix}.gz"


def _check_component(kind: str, value: str) -> None:
    if not value or value in (".", "..") or "/" in value or os.sep in value or "\x00" in value:
        raise SpillStoreError(f"{kind} {value!r} is not a valid path component")


@runtime_checkable
class SpillStore(Protocol):
    """Capability for storing plans outside the size-limited store.

    Implementations own compression; callers hand over raw plan bytes and
    get raw plan bytes back.
    """

    def write(self, owner: PlanOwner, plan_id: str, suffix: str, data: bytes) -> str:
        """Store *data* and return the path a locator record should point at."""
        ...

    def read(self, path: str) -> bytes:
        """Return the raw plan bytes stored at *path*."""
        ...

    def remove(self, path: str) -> None:
        """Remove the plan stored at *path*; a missing file is not an error."""
        ...


class LocalVolumeSpillStore:
    """Writes gzip-compressed plan files under a local mount point.

    Parameters
    ----------
    mount_path:
        Root directory of the spill volume.  Defaults to ``/tmp/tf-storage``.
    """

    def __init__(self, mount_path: Path | str | None = None) -> None:
        self._mount = Path(mount_path) if mount_path else Path(DEFAULT_VOLUME_MOUNT_PATH)

    @property
    def mount_path(self) -> Path:
        return self._mount

    def plan_dir(self, owner: PlanOwner) -> Path:
        _check_component("namespace", owner.namespace)
        _check_component("owner name", owner.name)
        return self._mount / "plans" / owner.namespace / owner.name

    def plan_path(self, owner: PlanOwner, plan_id: str, suffix: str = "") -> Path:
        """Return the plan file path, which must stay inside the mount."""
        file_name = spill_file_name(owner.workspace, plan_id, suffix)
        _check_component("plan file name", file_name)
        target = self.plan_dir(owner) / file_name
        if not target.resolve().is_relative_to(self._mount.resolve()):
            raise SpillStoreError(f"plan file {target} is outside the mount {self._mount}")
        return target

    def write(self, owner: PlanOwner, plan_id: str, suffix: str, data: bytes) -> str:
        target = self.plan_path(owner, plan_id, suffix)
        compressed = gzip_encode(data)

        plan_dir = target.parent
        try:
            plan_dir.mkdir(mode=DEFAULT_DIR_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            raise SpillStoreError(
                f"failed to create plan directory {plan_dir}: {exc}"
            ) from exc

        try:
            target.write_bytes(compressed)
            os.chmod(target, DEFAULT_FILE_MODE)
        except OSError as exc:
            raise SpillStoreError(f"failed to write plan file {target}: {exc}") from exc

        logger.info(
            "wrote plan to spill volume: path=%s size=%d compressed=%d",
            target,
            len(data),
            len(compressed),
        )
        return str(target)

    def read(self, path: str) -> bytes:
        try:
            compressed = Path(path).read_bytes()
        except OSError as exc:
            raise SpillStoreError(
                f"failed to read plan file from volume {path}: {exc}"
            ) from exc
        return gzip_decode(compressed)

    def remove(self, path: str) -> None:
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as exc:
            raise SpillStoreError(f"failed to remove plan file {path}: {exc}") from exc
        logger.debug("LocalVolumeSpillStore: removed %s", path)
