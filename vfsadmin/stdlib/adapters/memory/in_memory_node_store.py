"""In-memory implementation of the NodeStore port."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vfsadmin.kernel.exceptions import NotFoundError
from vfsadmin.kernel.paths import is_descendant, parent_of
from vfsadmin.kernel.ports.node_store import NodeStore

if TYPE_CHECKING:
    from vfsadmin.kernel.domain.vfs import Node

__all__ = ["InMemoryNodeStore"]


class InMemoryNodeStore(NodeStore):
    """Node metadata held in a dict keyed by canonical path.

    Nodes are immutable, so stored instances are handed out without copying.
    Point lookups are O(1); descendant and child listings scan the key set.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}

    async def aexists(self, path: str) -> bool:
        return path in self._nodes

    async def aget(self, path: str) -> Node:
        try:
            return self._nodes[path]
        except KeyError:
            raise NotFoundError(path, "no such file or directory") from None

    async def aput(self, node: Node) -> None:
        self._nodes[node.path] = node

    async def aremove(self, path: str) -> None:
        if self._nodes.pop(path, None) is None:
            raise NotFoundError(path, "no such file or directory")

    async def alist_descendants(self, path: str) -> list[str]:
        return sorted(key for key in self._nodes if is_descendant(key, path))

    async def alist_children(self, path: str | None) -> list[Node]:
        return [self._nodes[key] for key in sorted(self._nodes) if parent_of(key) == path]

    async def aclose(self) -> None:
        """Nothing to release."""

    def __len__(self) -> int:
        return len(self._nodes)
