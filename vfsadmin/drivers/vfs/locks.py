"""Per-path async locks.

Every mutating VFS operation holds the lock of each path it touches. Locks
for a single operation are acquired in sorted order, which is a global total
order, so two operations can never wait on each other in a cycle.

Entries are reference counted and dropped as soon as no task holds or waits
on them, so the table only ever contains paths with in-flight mutations.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from vfsadmin.kernel.exceptions import StorageFailureError
from vfsadmin.kernel.logging import get_logger

logger = get_logger(__name__)

__all__ = ["PathLockManager"]


@dataclass(slots=True)
class _LockEntry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    refs: int = 0


class PathLockManager:
    """Table of per-path :class:`asyncio.Lock` objects.

    Parameters
    ----------
    timeout : float | None, default=30.0
        Maximum seconds to wait for the full set of locks. ``None`` waits
        forever.
    """

    def __init__(self, timeout: float | None = 30.0) -> None:
        self.timeout = timeout
        self._entries: dict[str, _LockEntry] = {}

    def _checkout(self, path: str) -> _LockEntry:
        entry = self._entries.get(path)
        if entry is None:
            entry = self._entries[path] = _LockEntry()
        entry.refs += 1
        return entry

    def _checkin(self, path: str) -> None:
        entry = self._entries[path]
        entry.refs -= 1
        if entry.refs == 0:
            del self._entries[path]

    @asynccontextmanager
    async def hold(self, *paths: str | None) -> AsyncIterator[None]:
        """Hold the locks of every given path for the duration of the block.

        ``None`` entries (the implicit root) and duplicates are ignored.

        Raises
        ------
        StorageFailureError
            If the locks could not all be acquired within :attr:`timeout`.
        """
        ordered = sorted({path for path in paths if path is not None})
        checked_out: list[str] = []
        locked: list[asyncio.Lock] = []
        try:
            try:
                async with asyncio.timeout(self.timeout):
                    for path in ordered:
                        if self.is_locked(path):
                            logger.debug("Waiting for lock on {path}", path=path)
                        entry = self._checkout(path)
                        checked_out.append(path)
                        await entry.lock.acquire()
                        locked.append(entry.lock)
            except TimeoutError as e:
                blocked = ordered[len(locked)]
                logger.warning("Timed out waiting for lock on {path}", path=blocked)
                raise StorageFailureError(
                    blocked, f"timed out after {self.timeout}s waiting for a concurrent operation"
                ) from e
            yield
        finally:
            for lock in reversed(locked):
                lock.release()
            for path in checked_out:
                self._checkin(path)

    def is_locked(self, path: str) -> bool:
        """True while some operation holds the lock of ``path``."""
        entry = self._entries.get(path)
        return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        return len(self._entries)
