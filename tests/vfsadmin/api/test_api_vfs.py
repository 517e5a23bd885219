"""Tests for the VFS admin API helpers and factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest

from vfsadmin.api import vfs as vfs_api
from vfsadmin.drivers.vfs import VFSAdminService
from vfsadmin.kernel.config import ConcurrencyConfig, StorageConfig, VFSAdminConfig
from vfsadmin.kernel.exceptions import DirectoryNotEmptyError, NotFoundError
from vfsadmin.stdlib.adapters.database import SQLiteNodeStore
from vfsadmin.stdlib.adapters.local import LocalContentStore
from vfsadmin.stdlib.adapters.memory import InMemoryContentStore, InMemoryNodeStore


def _sqlite_config(tmp_path: Path) -> VFSAdminConfig:
    return VFSAdminConfig(
        storage=StorageConfig(
            backend="sqlite",
            db_path=str(tmp_path / "vfs.db"),
            content_dir=str(tmp_path / "blobs"),
        )
    )


@pytest.fixture
async def vfs() -> AsyncIterator[VFSAdminService]:
    service = vfs_api.create_vfs_admin()
    yield service
    await service.aclose()


class TestCreateVfsAdmin:
    def test_memory_backend_by_default(self) -> None:
        service = vfs_api.create_vfs_admin()
        assert isinstance(service._nodes, InMemoryNodeStore)
        assert isinstance(service._contents, InMemoryContentStore)

    def test_sqlite_backend(self, tmp_path: Path) -> None:
        service = vfs_api.create_vfs_admin(_sqlite_config(tmp_path))
        assert isinstance(service._nodes, SQLiteNodeStore)
        assert isinstance(service._contents, LocalContentStore)

    def test_lock_timeout_from_config(self) -> None:
        config = VFSAdminConfig(concurrency=ConcurrencyConfig(lock_timeout=1.5))
        assert vfs_api.create_vfs_admin(config)._locks.timeout == 1.5

    @pytest.mark.asyncio()
    async def test_sqlite_backend_persists_across_services(self, tmp_path: Path) -> None:
        config = _sqlite_config(tmp_path)
        async with vfs_api.create_vfs_admin(config) as first:
            await first.acreate_directory("docs")
            await first.awrite_file("docs/readme.md", "hello")

        async with vfs_api.create_vfs_admin(config) as second:
            assert await second.aread_file("docs/readme.md") == b"hello"
            assert (await second.aget_attributes("docs/readme.md")).size == 5
            with pytest.raises(DirectoryNotEmptyError):
                await second.adelete("docs")
            await second.adelete("docs", recursive=True)
            assert not await second.afile_exists("docs/readme.md")
            assert not [p for p in (tmp_path / "blobs").rglob("*") if p.is_file()]


class TestHelpers:
    @pytest.mark.asyncio()
    async def test_write_and_read(self, vfs: VFSAdminService) -> None:
        assert await vfs_api.write_path(vfs, "a.txt", "hi") == {
            "success": True,
            "path": "a.txt",
            "action": "written",
        }
        assert await vfs_api.read_path(vfs, "a.txt") == {"path": "a.txt", "content": "hi"}

    @pytest.mark.asyncio()
    async def test_read_replaces_invalid_utf8(self, vfs: VFSAdminService) -> None:
        await vfs.awrite_file("bin", b"ok\xff")
        assert (await vfs_api.read_path(vfs, "bin"))["content"] == "ok\ufffd"

    @pytest.mark.asyncio()
    async def test_exists(self, vfs: VFSAdminService) -> None:
        assert await vfs_api.exists_path(vfs, "x") == {"path": "x", "exists": False}

    @pytest.mark.asyncio()
    async def test_stat(self, vfs: VFSAdminService) -> None:
        await vfs_api.make_directory(vfs, "d")
        result = await vfs_api.stat_path(vfs, "d")
        assert result["path"] == "d"
        assert result["attributes"]["kind"] == "directory"
        assert result["attributes"]["size"] == 0

    @pytest.mark.asyncio()
    async def test_make_directory(self, vfs: VFSAdminService) -> None:
        assert await vfs_api.make_directory(vfs, "d") == {
            "success": True,
            "path": "d",
            "action": "directory_created",
        }

    @pytest.mark.asyncio()
    async def test_list(self, vfs: VFSAdminService) -> None:
        await vfs_api.make_directory(vfs, "d")
        await vfs_api.write_path(vfs, "d/f", "x")
        assert await vfs_api.list_path(vfs, "d") == {
            "path": "d",
            "entries": [{"name": "f", "kind": "file", "path": "d/f"}],
        }
        assert (await vfs_api.list_path(vfs))["path"] == ""

    @pytest.mark.asyncio()
    async def test_delete(self, vfs: VFSAdminService) -> None:
        await vfs_api.write_path(vfs, "f", "x")
        assert await vfs_api.delete_path(vfs, "f") == {
            "success": True,
            "path": "f",
            "action": "deleted",
        }
        with pytest.raises(NotFoundError):
            await vfs_api.delete_path(vfs, "f")
