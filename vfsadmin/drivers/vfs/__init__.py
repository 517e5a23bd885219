"""VFS drivers."""

from vfsadmin.drivers.vfs.admin import VFSAdminService
from vfsadmin.drivers.vfs.locks import PathLockManager

__all__ = ["PathLockManager", "VFSAdminService"]
