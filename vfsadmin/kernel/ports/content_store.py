"""Content store port — byte content of file nodes.

Keys are canonical paths of File nodes. Content is stored and returned
byte-exact; text encoding is the caller's concern.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol, runtime_checkable


@runtime_checkable
class ContentStore(Protocol):
    """Path-keyed blob store with atomic replace."""

    @abstractmethod
    async def aread(self, path: str) -> bytes:
        """Read the full content stored for ``path``.

        Raises
        ------
        NotFoundError
            If nothing is stored for ``path``.
        """
        ...

    @abstractmethod
    async def awrite(self, path: str, data: bytes) -> None:
        """Replace the content for ``path`` atomically.

        Concurrent readers observe either the previous content or ``data``
        in full, never a mix.
        """
        ...

    @abstractmethod
    async def adelete(self, path: str) -> None:
        """Drop the content for ``path``.

        Raises
        ------
        NotFoundError
            If nothing is stored for ``path``.
        """
        ...

    @abstractmethod
    async def aexists(self, path: str) -> bool:
        """True iff content is stored for ``path``."""
        ...

    @abstractmethod
    async def aclose(self) -> None:
        """Release backing resources."""
        ...


__all__ = ["ContentStore"]
