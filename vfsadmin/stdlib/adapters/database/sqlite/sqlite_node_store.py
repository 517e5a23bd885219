"""SQLite implementation of the NodeStore port with async support."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Literal

import aiosqlite

from vfsadmin.kernel.domain.vfs import Node, NodeKind
from vfsadmin.kernel.exceptions import NotFoundError, StorageFailureError
from vfsadmin.kernel.logging import get_logger
from vfsadmin.kernel.paths import SEPARATOR
from vfsadmin.kernel.ports.node_store import NodeStore

logger = get_logger(__name__)

SQLiteJournalMode = Literal["WAL", "DELETE", "TRUNCATE", "PERSIST", "MEMORY", "OFF"]

# '0' is the character right after '/', so [prefix + '/', prefix + '0')
# covers exactly the keys below prefix and the primary key index serves it.
_SEPARATOR_SUCCESSOR = chr(ord(SEPARATOR) + 1)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS nodes (
    path        TEXT PRIMARY KEY,
    parent      TEXT,
    kind        TEXT NOT NULL CHECK (kind IN ('file', 'directory')),
    size        INTEGER NOT NULL DEFAULT 0,
    created_at  REAL NOT NULL,
    modified_at REAL NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_nodes_parent ON nodes (parent);
"""

_COLUMNS = "path, kind, size, created_at, modified_at"


class SQLiteNodeStore(NodeStore):
    """Async SQLite node store.

    The connection runs in autocommit mode: every mutation is a single
    statement committed on its own, so a crash leaves the table either before
    or after the change, and concurrent tasks sharing the connection cannot
    commit or roll back each other's work.

    Parameters
    ----------
    db_path : str | Path
        Path to the database file, or ``":memory:"``.
    timeout : float
        SQLite busy timeout in seconds.
    journal_mode : SQLiteJournalMode
        Journal mode applied on connect. Default: ``"WAL"``.
    """

    def __init__(
        self,
        db_path: str | Path = ":memory:",
        timeout: float = 5.0,
        journal_mode: SQLiteJournalMode = "WAL",
    ) -> None:
        self.db_path = Path(db_path) if str(db_path) != ":memory:" else ":memory:"
        self.timeout = timeout
        self.journal_mode = journal_mode
        self.connection: aiosqlite.Connection | None = None
        self._connect_lock = asyncio.Lock()

    async def _ensure_database(self) -> aiosqlite.Connection:
        """Ensure the connection exists and the schema is in place."""
        async with self._connect_lock:
            if self.connection is None:
                self.connection = await self._connect()
        return self.connection

    async def _connect(self) -> aiosqlite.Connection:
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            connection = await aiosqlite.connect(
                str(self.db_path), timeout=self.timeout, isolation_level=None
            )
            connection.row_factory = aiosqlite.Row
            await connection.execute(f"PRAGMA journal_mode = {self.journal_mode}")
            await connection.executescript(_SCHEMA)
        except (aiosqlite.Error, OSError) as e:
            raise StorageFailureError(
                str(self.db_path), f"cannot open node database: {e}"
            ) from e

        logger.debug("Opened node database at {}", self.db_path)
        return connection

    @asynccontextmanager
    async def _get_cursor(self, path: str) -> AsyncIterator[Any]:
        """Cursor whose database errors surface as ``StorageFailureError`` for ``path``."""
        connection = await self._ensure_database()
        try:
            async with connection.cursor() as cursor:
                yield cursor
        except aiosqlite.Error as e:
            logger.error("Node database error at {path}: {error}", path=path, error=e)
            raise StorageFailureError(path, f"node database error: {e}") from e

    async def aexists(self, path: str) -> bool:
        async with self._get_cursor(path) as cursor:
            await cursor.execute("SELECT 1 FROM nodes WHERE path = ?", (path,))
            return await cursor.fetchone() is not None

    async def aget(self, path: str) -> Node:
        async with self._get_cursor(path) as cursor:
            await cursor.execute(
                f"SELECT {_COLUMNS} FROM nodes WHERE path = ?",  # nosec B608
                (path,),
            )
            row = await cursor.fetchone()
        if row is None:
            raise NotFoundError(path, "no such file or directory")
        return _row_to_node(row)

    async def aput(self, node: Node) -> None:
        parent, sep, _ = node.path.rpartition(SEPARATOR)
        async with self._get_cursor(node.path) as cursor:
            await cursor.execute(
                """
                INSERT INTO nodes (path, parent, kind, size, created_at, modified_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT (path) DO UPDATE SET
                    kind = excluded.kind,
                    size = excluded.size,
                    created_at = excluded.created_at,
                    modified_at = excluded.modified_at
                """,
                (
                    node.path,
                    parent if sep else None,
                    node.kind.value,
                    node.size,
                    node.created_at,
                    node.modified_at,
                ),
            )

    async def aremove(self, path: str) -> None:
        async with self._get_cursor(path) as cursor:
            await cursor.execute("DELETE FROM nodes WHERE path = ?", (path,))
            removed = cursor.rowcount
        if removed == 0:
            raise NotFoundError(path, "no such file or directory")

    async def alist_descendants(self, path: str) -> list[str]:
        async with self._get_cursor(path) as cursor:
            await cursor.execute(
                "SELECT path FROM nodes WHERE path >= ? AND path < ? ORDER BY path",
                (path + SEPARATOR, path + _SEPARATOR_SUCCESSOR),
            )
            rows = await cursor.fetchall()
        return [row["path"] for row in rows]

    async def alist_children(self, path: str | None) -> list[Node]:
        async with self._get_cursor(path or SEPARATOR) as cursor:
            if path is None:
                await cursor.execute(
                    f"SELECT {_COLUMNS} FROM nodes WHERE parent IS NULL ORDER BY path"  # nosec B608
                )
            else:
                await cursor.execute(
                    f"SELECT {_COLUMNS} FROM nodes WHERE parent = ? ORDER BY path",  # nosec B608
                    (path,),
                )
            rows = await cursor.fetchall()
        return [_row_to_node(row) for row in rows]

    async def aclose(self) -> None:
        """Close the database connection."""
        if self.connection is not None:
            await self.connection.close()
            self.connection = None

    async def __aenter__(self) -> SQLiteNodeStore:
        await self._ensure_database()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def _row_to_node(row: aiosqlite.Row) -> Node:
    return Node(
        path=row["path"],
        kind=NodeKind(row["kind"]),
        size=row["size"],
        created_at=row["created_at"],
        modified_at=row["modified_at"],
    )


__all__ = ["SQLiteNodeStore"]
