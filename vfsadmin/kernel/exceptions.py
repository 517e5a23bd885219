"""Core exception hierarchy for vfsadmin.

Every failure the VFS surfaces carries a typed :class:`ErrorKind`, the
offending path and a human-readable reason. Boundaries (HTTP, CLI) classify
errors by ``kind`` instead of matching message substrings.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

# ============================================================================
# Base Exception
# ============================================================================


class VFSAdminError(Exception):
    """Base exception for all vfsadmin errors.

    Catch this to handle every error raised by the package.
    """

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(VFSAdminError):
    """Raised when configuration is invalid or missing.

    Examples
    --------
    Example usage::

        raise ConfigurationError("storage.backend", "unknown backend 'redis'")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Name of the setting with invalid configuration
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


# ============================================================================
# VFS Errors
# ============================================================================


class ErrorKind(StrEnum):
    """Classification of a VFS failure."""

    INVALID_PATH = "invalid_path"
    NOT_FOUND = "not_found"
    PARENT_MISSING = "parent_missing"
    WRONG_KIND = "wrong_kind"
    DIRECTORY_NOT_EMPTY = "directory_not_empty"
    STORAGE_FAILURE = "storage_failure"


class VFSError(VFSAdminError):
    """Raised when a VFS operation fails.

    Subclasses pin :attr:`kind`; the base class is never raised directly.

    Examples
    --------
    Example usage::

        raise NotFoundError("docs/readme.md", "no such file or directory")
    """

    kind: ErrorKind = ErrorKind.STORAGE_FAILURE

    def __init__(self, path: str, reason: str) -> None:
        """Initialize VFS error.

        Args
        ----
            path: The VFS path that caused the error
            reason: Explanation of what went wrong
        """
        super().__init__(f"VFS error at '{path}': {reason}")
        self.path = path
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for a boundary response."""
        return {"kind": self.kind.value, "path": self.path, "details": self.reason}


class InvalidPathError(VFSError):
    """The raw path cannot be turned into a canonical path."""

    kind = ErrorKind.INVALID_PATH


class NotFoundError(VFSError):
    """No node exists at the path."""

    kind = ErrorKind.NOT_FOUND


class ParentMissingError(VFSError):
    """The parent of the path does not exist as a directory."""

    kind = ErrorKind.PARENT_MISSING


class WrongKindError(VFSError):
    """The node at the path is a file where a directory is required, or vice versa."""

    kind = ErrorKind.WRONG_KIND


class DirectoryNotEmptyError(VFSError):
    """A non-recursive delete targeted a directory with descendants."""

    kind = ErrorKind.DIRECTORY_NOT_EMPTY


class StorageFailureError(VFSError):
    """The backing store failed (I/O, database, lock timeout)."""

    kind = ErrorKind.STORAGE_FAILURE


__all__ = [
    # Base
    "VFSAdminError",
    # Configuration
    "ConfigurationError",
    # VFS
    "ErrorKind",
    "VFSError",
    "InvalidPathError",
    "NotFoundError",
    "ParentMissingError",
    "WrongKindError",
    "DirectoryNotEmptyError",
    "StorageFailureError",
]
