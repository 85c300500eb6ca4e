"""Tests for LocalVolumeSpillStore — layout, compression, failure kinds."""

from __future__ import annotations

import gzip
import os
import stat
from pathlib import Path

import pytest

from planstore.core.errors import CompressionError, SpillStoreError
from planstore.core.spill_store import LocalVolumeSpillStore, SpillStore
from planstore.models.owner import PlanOwner


class TestLocalVolumeSpillStore:
    def test_implements_protocol(self, spill_store: LocalVolumeSpillStore):
        assert isinstance(spill_store, SpillStore)

    def test_layout(self, spill_store: LocalVolumeSpillStore, owner: PlanOwner, mount_path: Path):
        path = spill_store.write(owner, "plan-1", "-apply", b"data")
        expected = (
            mount_path / "plans" / "flux-system" / "my-stack" / "tfplan-default-plan-1-apply.gz"
        )
        assert Path(path) == expected
        assert expected.exists()

    def test_file_is_gzip(self, spill_store: LocalVolumeSpillStore, owner: PlanOwner):
        path = spill_store.write(owner, "plan-1", "", b"compress me")
        assert gzip.decompress(Path(path).read_bytes()) == b"compress me"

    def test_file_mode(self, spill_store: LocalVolumeSpillStore, owner: PlanOwner):
        path = spill_store.write(owner, "plan-1", "", b"x")
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o644

    def test_round_trip(self, spill_store: LocalVolumeSpillStore, owner: PlanOwner):
        data = os.urandom(3 * 1024 * 1024)
        path = spill_store.write(owner, "plan-1", "", data)
        assert spill_store.read(path) == data

    def test_overwrite(self, spill_store: LocalVolumeSpillStore, owner: PlanOwner):
        spill_store.write(owner, "plan-1", "", b"first")
        path = spill_store.write(owner, "plan-1", "", b"second")
        assert spill_store.read(path) == b"second"

    def test_existing_directory_is_fine(
        self, spill_store: LocalVolumeSpillStore, owner: PlanOwner
    ):
        spill_store.plan_dir(owner).mkdir(parents=True)
        spill_store.write(owner, "plan-1", "", b"x")

    def test_read_missing_file(self, spill_store: LocalVolumeSpillStore, tmp_dir: Path):
        with pytest.raises(SpillStoreError):
            spill_store.read(str(tmp_dir / "nope.gz"))

    def test_read_corrupt_file(self, spill_store: LocalVolumeSpillStore, tmp_dir: Path):
        bad = tmp_dir / "bad.gz"
        bad.write_bytes(b"not gzip at all")
        with pytest.raises(CompressionError):
            spill_store.read(str(bad))

    def test_mkdir_failure(self, tmp_dir: Path, owner: PlanOwner):
        blocker = tmp_dir / "blocker"
        blocker.write_bytes(b"a file where the mount should be")
        with pytest.raises(SpillStoreError, match="plan directory"):
            LocalVolumeSpillStore(blocker).write(owner, "plan-1", "", b"x")

    def test_remove(self, spill_store: LocalVolumeSpillStore, owner: PlanOwner):
        path = spill_store.write(owner, "plan-1", "", b"x")
        spill_store.remove(path)
        assert not Path(path).exists()
        spill_store.remove(path)  # already gone

    def test_default_mount(self):
        assert LocalVolumeSpillStore().mount_path == Path("/tmp/tf-storage")

    @pytest.mark.parametrize(
        ("overrides", "plan_id"),
        [
            ({"name": "../../escaped", "namespace": ".."}, "plan-1"),
            ({"namespace": "."}, "plan-1"),
            ({"name": ""}, "plan-1"),
            ({"workspace": "../.."}, "plan-1"),
            ({}, "../../../plan-1"),
        ],
    )
    def test_rejects_paths_outside_mount(
        self,
        spill_store: LocalVolumeSpillStore,
        make_owner,
        tmp_dir: Path,
        overrides: dict,
        plan_id: str,
    ):
        with pytest.raises(SpillStoreError, match="path component"):
            spill_store.write(make_owner(**overrides), plan_id, "", b"x")
        assert list(tmp_dir.rglob("*.gz")) == []
