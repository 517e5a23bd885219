"""Database-backed store adapters."""

from vfsadmin.stdlib.adapters.database.sqlite import SQLiteNodeStore

__all__ = ["SQLiteNodeStore"]
