"""vfsadmin — a virtual file system admin layer.

Path-addressed CRUD over files and directories with typed errors and
per-path concurrency control, plus an HTTP admin API and a CLI on top.
"""

try:
    from importlib.metadata import version

    __version__ = version("vfsadmin")
except Exception:
    __version__ = "0.0.0.dev0"  # Fallback for development installs

from vfsadmin.api.vfs import create_vfs_admin
from vfsadmin.drivers.vfs import VFSAdminService
from vfsadmin.kernel import (
    DirEntry,
    ErrorKind,
    Node,
    NodeKind,
    VFSAdmin,
    VFSError,
)

__all__ = [
    "DirEntry",
    "ErrorKind",
    "Node",
    "NodeKind",
    "VFSAdmin",
    "VFSAdminService",
    "VFSError",
    "__version__",
    "create_vfs_admin",
]
