"""In-memory store adapters."""

from vfsadmin.stdlib.adapters.memory.in_memory_content_store import InMemoryContentStore
from vfsadmin.stdlib.adapters.memory.in_memory_node_store import InMemoryNodeStore

__all__ = ["InMemoryContentStore", "InMemoryNodeStore"]
