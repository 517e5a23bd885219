"""SQLite store adapters."""

from vfsadmin.stdlib.adapters.database.sqlite.sqlite_node_store import SQLiteNodeStore

__all__ = ["SQLiteNodeStore"]
