"""Port protocols (storage and service interfaces)."""

from vfsadmin.kernel.ports.content_store import ContentStore
from vfsadmin.kernel.ports.node_store import NodeStore
from vfsadmin.kernel.ports.vfs import VFSAdmin

__all__ = ["ContentStore", "NodeStore", "VFSAdmin"]
