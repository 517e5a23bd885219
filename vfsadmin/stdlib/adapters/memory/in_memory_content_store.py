"""In-memory implementation of the ContentStore port."""

from __future__ import annotations

from vfsadmin.kernel.exceptions import NotFoundError
from vfsadmin.kernel.ports.content_store import ContentStore

__all__ = ["InMemoryContentStore"]


class InMemoryContentStore(ContentStore):
    """Blob storage in a dict of immutable ``bytes``.

    A write rebinds the dict slot to a new ``bytes`` object, so a reader holding
    the old value keeps seeing it in full.
    """

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}

    async def aread(self, path: str) -> bytes:
        try:
            return self._blobs[path]
        except KeyError:
            raise NotFoundError(path, "no content stored") from None

    async def awrite(self, path: str, data: bytes) -> None:
        self._blobs[path] = bytes(data)

    async def adelete(self, path: str) -> None:
        if self._blobs.pop(path, None) is None:
            raise NotFoundError(path, "no content stored")

    async def aexists(self, path: str) -> bool:
        return path in self._blobs

    async def aclose(self) -> None:
        """Nothing to release."""

    def stored_paths(self) -> list[str]:
        """Sorted list of every path that has content, for diagnostics."""
        return sorted(self._blobs)
