"""Shared test fixtures for planstore."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from planstore.core.chunk_codec import ChunkCodec
from planstore.core.record_store import InMemoryRecordStore
from planstore.core.spill_store import LocalVolumeSpillStore
from planstore.core.sqlite_store import SqliteRecordStore
from planstore.core.storage_manager import HybridStorageManager
from planstore.models.owner import PlanOwner
from planstore.models.storage import StorageConfig

# Small ceiling so multi-chunk plans stay cheap to build in tests
SMALL_RECORD_SIZE = 1024


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def mount_path(tmp_dir: Path) -> Path:
    """Provide a spill volume mount point inside the temp directory."""
    return tmp_dir / "tf-storage"


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    """Provide a fresh in-memory record store with the real 1 MiB ceiling."""
    return InMemoryRecordStore()


@pytest.fixture
def small_store() -> InMemoryRecordStore:
    """Provide an in-memory record store with a 1 KiB ceiling."""
    return InMemoryRecordStore(max_record_size=SMALL_RECORD_SIZE)


@pytest.fixture
def small_codec() -> ChunkCodec:
    """Provide a chunk codec matching ``small_store``'s ceiling."""
    return ChunkCodec(chunk_size=SMALL_RECORD_SIZE)


@pytest.fixture
def sqlite_store(tmp_dir: Path) -> SqliteRecordStore:
    """Provide a SQLite record store backed by a temp database."""
    return SqliteRecordStore(tmp_dir / "records.db")


@pytest.fixture
def spill_store(mount_path: Path) -> LocalVolumeSpillStore:
    """Provide a local volume spill store rooted in the temp directory."""
    return LocalVolumeSpillStore(mount_path)


@pytest.fixture
def make_owner() -> Callable[..., PlanOwner]:
    """Factory fixture: build a PlanOwner with sensible defaults."""

    def _factory(
        name: str = "my-stack",
        namespace: str = "flux-system",
        **overrides: Any,
    ) -> PlanOwner:
        defaults: dict[str, Any] = {
            "name": name,
            "namespace": namespace,
            "workspace": "default",
            "uid": "0b6a4c1e-8d52-4d1e-9f0e-1f2a3b4c5d6e",
        }
        defaults.update(overrides)
        return PlanOwner(**defaults)

    return _factory


@pytest.fixture
def owner(make_owner: Callable[..., PlanOwner]) -> PlanOwner:
    """Convenience: an owner with no storage config (size-limited only)."""
    return make_owner()


@pytest.fixture
def make_manager(
    record_store: InMemoryRecordStore,
    make_owner: Callable[..., PlanOwner],
    spill_store: LocalVolumeSpillStore,
) -> Callable[..., HybridStorageManager]:
    """Factory fixture: build a manager over the shared in-memory store."""

    def _factory(
        config: StorageConfig | None = None,
        *,
        store: Any = None,
        codec: ChunkCodec | None = None,
        **owner_overrides: Any,
    ) -> HybridStorageManager:
        return HybridStorageManager(
            store if store is not None else record_store,
            make_owner(storage_config=config, **owner_overrides),
            codec=codec,
            spill_store=spill_store,
        )

    return _factory
