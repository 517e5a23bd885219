"""VFS admin API — service construction and dict-shaped helpers.

The HTTP routes and the CLI both consume these functions, so the response
shapes live in one place.

Server usage::

    from vfsadmin.api import vfs

    service = vfs.create_vfs_admin(config)

    @router.get("/admin/{file_path:path}")
    async def read(file_path: str) -> dict[str, Any]:
        return await vfs.read_path(service, file_path)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from vfsadmin.drivers.vfs import VFSAdminService
from vfsadmin.kernel.config import VFSAdminConfig, get_default_config
from vfsadmin.kernel.logging import get_logger
from vfsadmin.stdlib.adapters.database import SQLiteNodeStore
from vfsadmin.stdlib.adapters.local import LocalContentStore
from vfsadmin.stdlib.adapters.memory import InMemoryContentStore, InMemoryNodeStore

if TYPE_CHECKING:
    from vfsadmin.kernel.ports.content_store import ContentStore
    from vfsadmin.kernel.ports.node_store import NodeStore
    from vfsadmin.kernel.ports.vfs import VFSAdmin

logger = get_logger(__name__)


def create_vfs_admin(config: VFSAdminConfig | None = None) -> VFSAdminService:
    """Create a VFS admin service with the stores named by ``config``.

    Parameters
    ----------
    config : VFSAdminConfig | None
        Full configuration. Defaults to :func:`get_default_config`.

    Returns
    -------
    VFSAdminService
        A service that owns its stores; call ``aclose()`` when done.
    """
    config = config or get_default_config()
    storage = config.storage

    nodes: NodeStore
    contents: ContentStore
    if storage.backend == "sqlite":
        nodes = SQLiteNodeStore(db_path=storage.db_path)
        contents = LocalContentStore(storage.content_dir)
    else:
        nodes = InMemoryNodeStore()
        contents = InMemoryContentStore()

    logger.info(
        "Created VFS admin service with {backend} storage", backend=storage.backend
    )
    return VFSAdminService(nodes, contents, lock_timeout=config.concurrency.lock_timeout)


async def exists_path(vfs: VFSAdmin, path: str) -> dict[str, Any]:
    """Return ``{"path", "exists"}`` for ``path``."""
    return {"path": path, "exists": await vfs.afile_exists(path)}


async def stat_path(vfs: VFSAdmin, path: str) -> dict[str, Any]:
    """Get metadata about a node.

    Args
    ----
        vfs: VFS admin instance.
        path: Path of a file or directory (e.g. ``docs/readme.md``).

    Returns
    -------
        ``{"path", "attributes"}`` where attributes is the JSON-ready node.
    """
    node = await vfs.aget_attributes(path)
    return {"path": path, "attributes": node.model_dump(mode="json")}


async def read_path(vfs: VFSAdmin, path: str) -> dict[str, Any]:
    """Read a file as text.

    Invalid UTF-8 sequences are replaced rather than rejected, so binary
    files are still readable through text-only surfaces.

    Args
    ----
        vfs: VFS admin instance.
        path: Path of a file.

    Returns
    -------
        ``{"path", "content"}``.
    """
    data = await vfs.aread_file(path)
    return {"path": path, "content": data.decode("utf-8", errors="replace")}


async def list_path(vfs: VFSAdmin, path: str | None = None) -> dict[str, Any]:
    """List the direct children of a directory (``None`` for the root)."""
    entries = await vfs.alist_directory(path)
    return {"path": path or "", "entries": [e.model_dump(mode="json") for e in entries]}


async def write_path(vfs: VFSAdmin, path: str, content: bytes | str) -> dict[str, Any]:
    """Create or overwrite a file."""
    await vfs.awrite_file(path, content)
    return {"success": True, "path": path, "action": "written"}


async def make_directory(vfs: VFSAdmin, path: str) -> dict[str, Any]:
    """Create a directory; succeeds if it already exists."""
    await vfs.acreate_directory(path)
    return {"success": True, "path": path, "action": "directory_created"}


async def delete_path(vfs: VFSAdmin, path: str, *, recursive: bool = False) -> dict[str, Any]:
    """Delete a file or directory."""
    await vfs.adelete(path, recursive=recursive)
    return {"success": True, "path": path, "action": "deleted"}


__all__ = [
    "create_vfs_admin",
    "delete_path",
    "exists_path",
    "list_path",
    "make_directory",
    "read_path",
    "stat_path",
    "write_path",
]
