"""vfsadmin kernel — domain types, ports, errors and path rules.

User-space code (``vfsadmin.api``, ``vfsadmin.server``, ``vfsadmin.cli``)
should import from ``vfsadmin.kernel`` rather than from its submodules.
"""

# ============================================================================
# Domain types
# ============================================================================
from vfsadmin.kernel.domain.vfs import DirEntry, Node, NodeKind

# ============================================================================
# Exceptions
# ============================================================================
from vfsadmin.kernel.exceptions import (
    ConfigurationError,
    DirectoryNotEmptyError,
    ErrorKind,
    InvalidPathError,
    NotFoundError,
    ParentMissingError,
    StorageFailureError,
    VFSAdminError,
    VFSError,
    WrongKindError,
)

# ============================================================================
# Logging
# ============================================================================
from vfsadmin.kernel.logging import configure_logging, get_logger

# ============================================================================
# Paths
# ============================================================================
from vfsadmin.kernel.paths import parent_of, resolve

# ============================================================================
# Ports
# ============================================================================
from vfsadmin.kernel.ports import ContentStore, NodeStore, VFSAdmin

__all__ = [
    # Domain
    "DirEntry",
    "Node",
    "NodeKind",
    # Exceptions
    "ConfigurationError",
    "DirectoryNotEmptyError",
    "ErrorKind",
    "InvalidPathError",
    "NotFoundError",
    "ParentMissingError",
    "StorageFailureError",
    "VFSAdminError",
    "VFSError",
    "WrongKindError",
    # Logging
    "configure_logging",
    "get_logger",
    # Paths
    "parent_of",
    "resolve",
    # Ports
    "ContentStore",
    "NodeStore",
    "VFSAdmin",
]
