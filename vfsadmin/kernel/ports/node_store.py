"""Node store port — metadata for the VFS namespace.

The node store is the sole owner of :class:`~vfsadmin.kernel.domain.vfs.Node`
records. It knows nothing about content bytes and does not enforce
hierarchy invariants; the admin service checks parent/kind preconditions
before calling :meth:`NodeStore.aput`.

Drivers
-------
- ``InMemoryNodeStore`` — dict keyed by canonical path.
- ``SQLiteNodeStore`` — ``aiosqlite`` table with the path as primary key.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from vfsadmin.kernel.domain.vfs import Node


@runtime_checkable
class NodeStore(Protocol):
    """Path-keyed metadata store."""

    @abstractmethod
    async def aexists(self, path: str) -> bool:
        """True iff a node with that canonical path is present, regardless of kind."""
        ...

    @abstractmethod
    async def aget(self, path: str) -> Node:
        """Fetch a node.

        Raises
        ------
        NotFoundError
            If no node exists at ``path``.
        """
        ...

    @abstractmethod
    async def aput(self, node: Node) -> None:
        """Insert or overwrite a node's metadata."""
        ...

    @abstractmethod
    async def aremove(self, path: str) -> None:
        """Remove a node.

        Raises
        ------
        NotFoundError
            If no node exists at ``path``.
        """
        ...

    @abstractmethod
    async def alist_descendants(self, path: str) -> list[str]:
        """All paths for which ``path`` is a proper prefix, sorted.

        Args
        ----
            path: Canonical directory path.

        Returns
        -------
            Canonical paths of every node below ``path``, recursively.
        """
        ...

    @abstractmethod
    async def alist_children(self, path: str | None) -> list[Node]:
        """Direct children of ``path`` (None for the root), sorted by path."""
        ...

    @abstractmethod
    async def aclose(self) -> None:
        """Release backing resources."""
        ...


__all__ = ["NodeStore"]
