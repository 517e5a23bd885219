"""In-process VFS admin driver.

Composes a :class:`~vfsadmin.kernel.ports.node_store.NodeStore`, a
:class:`~vfsadmin.kernel.ports.content_store.ContentStore` and a
:class:`~vfsadmin.drivers.vfs.locks.PathLockManager` into the
:class:`~vfsadmin.kernel.ports.vfs.VFSAdmin` contract.

Consistency rules
-----------------
- A file's content is written before its node is published, and its node is
  removed before its content is deleted. A reader never sees a file node
  whose content is missing.
- Mutations hold the locks of the target path and its parent. Creating a
  child therefore excludes deleting its parent, and the other way round.
- Reads take no locks; content replacement is atomic in every content store.
- Once a mutation starts touching the stores it runs to completion even if
  the calling task is cancelled. If a store call fails, the steps already
  applied are undone before the error propagates.
- Concurrent ``awrite_file`` calls on one path are last-committed-wins. When
  ``awrite_file`` and ``acreate_directory`` race on a new path, whichever
  acquires the path lock first creates the node and the other one fails with
  :class:`~vfsadmin.kernel.exceptions.WrongKindError`.

Example
-------
.. code-block:: python

    vfs = VFSAdminService(InMemoryNodeStore(), InMemoryContentStore())
    await vfs.acreate_directory("docs")
    await vfs.awrite_file("docs/readme.md", "hello")
    await vfs.aread_file("docs/readme.md")  # b"hello"
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager, suppress
from typing import TYPE_CHECKING, TypeVar

from vfsadmin.drivers.vfs.locks import PathLockManager
from vfsadmin.kernel.domain.vfs import DirEntry, Node, NodeKind
from vfsadmin.kernel.exceptions import (
    DirectoryNotEmptyError,
    NotFoundError,
    ParentMissingError,
    VFSError,
    WrongKindError,
)
from vfsadmin.kernel.logging import get_logger
from vfsadmin.kernel.paths import depth_of, name_of, parent_of, resolve

if TYPE_CHECKING:
    from vfsadmin.kernel.ports.content_store import ContentStore
    from vfsadmin.kernel.ports.node_store import NodeStore

logger = get_logger(__name__)

T = TypeVar("T")

Undo = Callable[[], Awaitable[None]]


class _UndoLog:
    """Undo actions for the store calls a mutation has applied so far."""

    def __init__(self) -> None:
        self._actions: list[Undo] = []

    def push(self, action: Undo) -> None:
        self._actions.append(action)

    async def rollback(self) -> None:
        for action in reversed(self._actions):
            try:
                await action()
            except VFSError:
                logger.opt(exception=True).error("Rollback step failed")
        self._actions.clear()


async def _run_to_completion(work: Awaitable[T]) -> T:
    """Await ``work`` so that cancelling the caller cannot interrupt it halfway.

    The cancellation is re-raised once ``work`` has finished.
    """
    task = asyncio.ensure_future(work)
    try:
        return await asyncio.shield(task)
    except asyncio.CancelledError:
        while not task.done():
            with suppress(asyncio.CancelledError):
                await asyncio.wait({task})
        raise


class VFSAdminService:
    """VFS admin service over pluggable node and content stores.

    Parameters
    ----------
    nodes : NodeStore
        Metadata store. Owned by the service once passed in.
    contents : ContentStore
        Content store. Owned by the service once passed in.
    lock_timeout : float | None, default=30.0
        Maximum seconds a mutation waits for concurrent mutations of the
        same paths before failing with ``StorageFailureError``.
    """

    def __init__(
        self,
        nodes: NodeStore,
        contents: ContentStore,
        *,
        lock_timeout: float | None = 30.0,
    ) -> None:
        self._nodes = nodes
        self._contents = contents
        self._locks = PathLockManager(timeout=lock_timeout)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def afile_exists(self, path: str) -> bool:
        """True iff a file or directory exists at ``path``."""
        return await self._nodes.aexists(resolve(path))

    async def aget_attributes(self, path: str) -> Node:
        """Metadata of the node at ``path``."""
        return await self._nodes.aget(resolve(path))

    async def aread_file(self, path: str) -> bytes:
        """Full content of the file at ``path``."""
        canonical = resolve(path)
        node = await self._nodes.aget(canonical)
        if not node.is_file:
            raise WrongKindError(canonical, "is a directory")
        return await self._contents.aread(canonical)

    async def alist_directory(self, path: str | None = None) -> list[DirEntry]:
        """Direct children of the directory at ``path`` (None for the root)."""
        canonical = None if path is None else resolve(path)
        if canonical is not None:
            node = await self._nodes.aget(canonical)
            if not node.is_directory:
                raise WrongKindError(canonical, "not a directory")
        children = await self._nodes.alist_children(canonical)
        return [DirEntry(name=name_of(c.path), kind=c.kind, path=c.path) for c in children]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def awrite_file(self, path: str, content: bytes | str) -> Node:
        """Create or overwrite the file at ``path`` and return its new metadata."""
        canonical = resolve(path)
        data = _to_bytes(content)
        parent = parent_of(canonical)

        async with self._locks.hold(parent, canonical):
            parent_node = await self._require_parent(canonical, parent)
            existing = await self._get_or_none(canonical)
            if existing is not None and not existing.is_file:
                raise WrongKindError(canonical, "is a directory")
            node = await _run_to_completion(
                self._commit_write(canonical, data, existing, parent_node)
            )

        logger.info(
            "{action} file {path} ({size} bytes)",
            action="Overwrote" if existing else "Created",
            path=canonical,
            size=node.size,
        )
        return node

    async def acreate_directory(self, path: str) -> Node:
        """Create a directory at ``path``; return the existing one if already present."""
        canonical = resolve(path)
        parent = parent_of(canonical)

        async with self._locks.hold(parent, canonical):
            parent_node = await self._require_parent(canonical, parent)
            existing = await self._get_or_none(canonical)
            if existing is not None:
                if existing.is_directory:
                    logger.debug("Directory {path} already exists", path=canonical)
                    return existing
                raise WrongKindError(canonical, "a file already exists at this path")
            node = await _run_to_completion(self._commit_mkdir(canonical, parent_node))

        logger.info("Created directory {path}", path=canonical)
        return node

    async def adelete(self, path: str, *, recursive: bool = False) -> None:
        """Remove the node at ``path``; directories with children need ``recursive``."""
        canonical = resolve(path)
        parent = parent_of(canonical)

        if not recursive:
            async with self._locks.hold(parent, canonical):
                node = await self._nodes.aget(canonical)
                if node.is_directory and await self._nodes.alist_descendants(canonical):
                    raise DirectoryNotEmptyError(
                        canonical, "directory has children; pass recursive=True to remove them"
                    )
                await _run_to_completion(self._commit_delete(canonical, [node], parent))
            logger.info("Deleted {kind} {path}", kind=node.kind.value, path=canonical)
            return

        async with self._lock_subtree(canonical, parent) as descendants:
            node = await self._nodes.aget(canonical)
            doomed = [await self._nodes.aget(p) for p in descendants]
            doomed.sort(key=lambda n: depth_of(n.path), reverse=True)
            doomed.append(node)
            await _run_to_completion(self._commit_delete(canonical, doomed, parent))
        logger.info(
            "Deleted {kind} {path} recursively ({count} nodes)",
            kind=node.kind.value,
            path=canonical,
            count=len(doomed),
        )

    async def aclose(self) -> None:
        """Close both backing stores."""
        try:
            await self._nodes.aclose()
        finally:
            await self._contents.aclose()

    async def __aenter__(self) -> VFSAdminService:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Commit steps (run under locks, shielded from cancellation)
    # ------------------------------------------------------------------

    async def _commit_write(
        self, path: str, data: bytes, existing: Node | None, parent_node: Node | None
    ) -> Node:
        undo = _UndoLog()
        now = time.time()
        try:
            previous = await self._read_or_none(path) if existing is not None else None
            if previous is not None:
                await self._contents.awrite(path, data)
                undo.push(lambda: self._contents.awrite(path, previous))
            else:
                await self._contents.awrite(path, data)
                undo.push(lambda: self._contents.adelete(path))

            if existing is not None:
                node = existing.touched(size=len(data), at=now)
                await self._nodes.aput(node)
                undo.push(lambda: self._nodes.aput(existing))
            else:
                node = Node(
                    path=path, kind=NodeKind.FILE, size=len(data), created_at=now, modified_at=now
                )
                await self._nodes.aput(node)
                undo.push(lambda: self._nodes.aremove(path))
                await self._touch_parent(parent_node, now, undo)
        except BaseException:
            await undo.rollback()
            raise
        return node

    async def _commit_mkdir(self, path: str, parent_node: Node | None) -> Node:
        undo = _UndoLog()
        now = time.time()
        node = Node(path=path, kind=NodeKind.DIRECTORY, created_at=now, modified_at=now)
        try:
            await self._nodes.aput(node)
            undo.push(lambda: self._nodes.aremove(path))
            await self._touch_parent(parent_node, now, undo)
        except BaseException:
            await undo.rollback()
            raise
        return node

    async def _commit_delete(self, path: str, doomed: list[Node], parent: str | None) -> None:
        """Remove ``doomed`` nodes (children before parents), then their content."""
        undo = _UndoLog()
        try:
            for node in doomed:
                await self._nodes.aremove(node.path)
                undo.push(_restore(self._nodes, node))
            parent_node = None if parent is None else await self._nodes.aget(parent)
            await self._touch_parent(parent_node, time.time(), undo)
        except BaseException:
            await undo.rollback()
            raise

        # Metadata is gone, so the content is unreachable; a cleanup failure
        # leaves an invisible blob that the next write to the path replaces.
        for node in doomed:
            if not node.is_file:
                continue
            try:
                await self._contents.adelete(node.path)
            except NotFoundError:
                logger.warning("No content to delete for file {path}", path=node.path)
            except VFSError:
                logger.opt(exception=True).error(
                    "Content cleanup failed for deleted file {path}", path=node.path
                )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get_or_none(self, path: str) -> Node | None:
        try:
            return await self._nodes.aget(path)
        except NotFoundError:
            return None

    async def _read_or_none(self, path: str) -> bytes | None:
        try:
            return await self._contents.aread(path)
        except NotFoundError:
            logger.warning("File {path} has no stored content", path=path)
            return None

    async def _require_parent(self, path: str, parent: str | None) -> Node | None:
        """Return the parent directory node (None for top-level paths)."""
        if parent is None:
            return None
        parent_node = await self._get_or_none(parent)
        if parent_node is None:
            raise ParentMissingError(path, f"parent directory '{parent}' does not exist")
        if not parent_node.is_directory:
            raise ParentMissingError(path, f"parent '{parent}' is a file, not a directory")
        return parent_node

    async def _touch_parent(self, parent_node: Node | None, now: float, undo: _UndoLog) -> None:
        if parent_node is None:
            return
        await self._nodes.aput(parent_node.touched(at=now))
        undo.push(_restore(self._nodes, parent_node))

    @asynccontextmanager
    async def _lock_subtree(self, path: str, parent: str | None) -> AsyncIterator[list[str]]:
        """Lock ``path``, its parent and every descendant; yield the descendants.

        Descendants created between listing and locking are caught by a
        re-scan under the locks, in which case the wider set is locked anew.
        """
        known = await self._nodes.alist_descendants(path)
        while True:
            async with self._locks.hold(parent, path, *known):
                current = await self._nodes.alist_descendants(path)
                if set(current) <= set(known):
                    yield current
                    return
            logger.debug("Subtree of {path} changed while locking, retrying", path=path)
            known = current


def _restore(nodes: NodeStore, node: Node) -> Undo:
    async def action() -> None:
        await nodes.aput(node)

    return action


def _to_bytes(content: bytes | str) -> bytes:
    if isinstance(content, str):
        return content.encode("utf-8")
    if isinstance(content, (bytes, bytearray, memoryview)):
        return bytes(content)
    raise TypeError(f"content must be bytes or str, got {type(content).__name__}")


__all__ = ["VFSAdminService"]
