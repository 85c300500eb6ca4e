"""Shared helpers for CLI commands — build a manager from command options."""

from __future__ import annotations

from pathlib import Path

import typer

from planstore.config import settings
from planstore.core.chunk_codec import ChunkCodec
from planstore.core.spill_store import LocalVolumeSpillStore
from planstore.core.sqlite_store import SqliteRecordStore
from planstore.core.storage_manager import HybridStorageManager
from planstore.models.owner import PlanOwner
from planstore.models.storage import StorageConfig, StorageType


def build_manager(
    name: str,
    *,
    namespace: str,
    workspace: str,
    uid: str,
    db_path: Path | None,
    mount_path: Path | None,
    storage_type: str | None = None,
    max_size: int | None = None,
    auto_fallback: bool = False,
) -> HybridStorageManager:
    """Wire a ``HybridStorageManager`` over the SQLite record store.

    Storage options left unset mean "no storage config on the owner", which
    selects size-limited storage only.
    """
    mount = mount_path or settings.default_mount_path
    config: StorageConfig | None = None
    if storage_type is not None or max_size is not None or auto_fallback:
        config = StorageConfig(
            storage_type=storage_type or StorageType.SIZE_LIMITED.value,
            max_secret_size=max_size,
            auto_fallback=auto_fallback,
            volume_mount_path=str(mount),
        )

    owner = PlanOwner(
        name=name,
        namespace=namespace,
        workspace=workspace,
        uid=uid,
        storage_config=config,
    )
    store = SqliteRecordStore(
        db_path or settings.record_db_path,
        max_record_size=settings.max_record_size,
    )
    return HybridStorageManager(
        store,
        owner,
        codec=ChunkCodec(settings.chunk_size),
        spill_store=LocalVolumeSpillStore(mount),
    )


# ---------------------------------------------------------------------------
# Options shared by every command
# ---------------------------------------------------------------------------

NAMESPACE_OPTION = typer.Option("default", "--namespace", "-n", help="Owner namespace.")
WORKSPACE_OPTION = typer.Option("default", "--workspace", "-w", help="Terraform workspace.")
UID_OPTION = typer.Option("", "--uid", help="Unique identity token of the owner.")
SUFFIX_OPTION = typer.Option("", "--suffix", help="Suffix of the plan record name.")
DB_OPTION = typer.Option(
    None, "--db", help="Path to the record store database (default from settings)."
)
MOUNT_OPTION = typer.Option(
    None, "--mount-path", help="Spill volume mount path (default from settings)."
)
