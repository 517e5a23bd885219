"""Kernel domain models."""

from vfsadmin.kernel.domain.vfs import DirEntry, Node, NodeKind

__all__ = ["DirEntry", "Node", "NodeKind"]
