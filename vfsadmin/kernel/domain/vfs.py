"""Domain models for the Virtual Filesystem (VFS).

These models represent the metadata records held by a node store and the
values returned by VFS introspection operations. Content bytes are never part
of a model; they live in the content store.
"""

from __future__ import annotations

import time
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class NodeKind(StrEnum):
    """Type of a VFS node."""

    FILE = "file"
    DIRECTORY = "directory"


class Node(BaseModel):
    """Metadata record for one entry in the namespace.

    Attributes
    ----------
    path : str
        Canonical path, unique across the store.
    kind : NodeKind
        Whether this is a file or directory.
    size : int
        Byte length of the content for files; always 0 for directories.
    created_at : float
        UNIX timestamp of creation.
    modified_at : float
        UNIX timestamp of the last mutation.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    kind: NodeKind
    size: int = Field(default=0, ge=0)
    created_at: float = Field(default_factory=time.time)
    modified_at: float = Field(default_factory=time.time)

    @property
    def is_file(self) -> bool:
        return self.kind == NodeKind.FILE

    @property
    def is_directory(self) -> bool:
        return self.kind == NodeKind.DIRECTORY

    def touched(self, *, size: int | None = None, at: float | None = None) -> Node:
        """Return a copy with ``modified_at`` bumped (and ``size`` replaced if given)."""
        update: dict[str, object] = {"modified_at": time.time() if at is None else at}
        if size is not None:
            update["size"] = size
        return self.model_copy(update=update)


class DirEntry(BaseModel):
    """A single entry in a VFS directory listing."""

    name: str
    kind: NodeKind
    path: str


__all__ = ["DirEntry", "Node", "NodeKind"]
