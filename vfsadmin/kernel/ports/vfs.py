"""VFS admin port — path-addressed CRUD over files and directories.

This is the public contract the HTTP boundary and the CLI consume. Each
method is the semantic equivalent of one admin API request:

.. code-block:: text

    GET    /{path}?exists=true      afile_exists
    GET    /{path}?attributes=true  aget_attributes
    GET    /{path}?list=true        alist_directory
    GET    /{path}                  aread_file
    POST   /{path}  {content}       awrite_file
    POST   /{path}  {is_directory}  acreate_directory
    DELETE /{path}[?recursive=true] adelete

Paths are raw caller input; implementations resolve them to canonical form
and raise :class:`~vfsadmin.kernel.exceptions.InvalidPathError` on failure.

Drivers
-------
- ``VFSAdminService`` — composes a node store, a content store and per-path
  locks in-process.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from vfsadmin.kernel.domain.vfs import DirEntry, Node


@runtime_checkable
class VFSAdmin(Protocol):
    """Virtual filesystem admin port."""

    @abstractmethod
    async def afile_exists(self, path: str) -> bool:
        """True iff a file or directory exists at ``path``."""
        ...

    @abstractmethod
    async def aget_attributes(self, path: str) -> Node:
        """Metadata of the node at ``path``.

        Raises
        ------
        NotFoundError, InvalidPathError
        """
        ...

    @abstractmethod
    async def aread_file(self, path: str) -> bytes:
        """Full content of the file at ``path``.

        Raises
        ------
        NotFoundError, WrongKindError, InvalidPathError
        """
        ...

    @abstractmethod
    async def awrite_file(self, path: str, content: bytes | str) -> Node:
        """Create or overwrite the file at ``path``.

        ``str`` content is encoded as UTF-8.

        Raises
        ------
        ParentMissingError, WrongKindError, InvalidPathError
        """
        ...

    @abstractmethod
    async def acreate_directory(self, path: str) -> Node:
        """Create a directory at ``path``; a no-op if one already exists.

        Raises
        ------
        ParentMissingError, WrongKindError, InvalidPathError
        """
        ...

    @abstractmethod
    async def adelete(self, path: str, *, recursive: bool = False) -> None:
        """Remove the node at ``path`` (and its content if it is a file).

        Raises
        ------
        NotFoundError, DirectoryNotEmptyError, InvalidPathError
        """
        ...

    @abstractmethod
    async def alist_directory(self, path: str | None = None) -> list[DirEntry]:
        """Direct children of the directory at ``path`` (None for the root).

        Raises
        ------
        NotFoundError, WrongKindError, InvalidPathError
        """
        ...

    @abstractmethod
    async def aclose(self) -> None:
        """Release the backing stores."""
        ...


__all__ = ["VFSAdmin"]
