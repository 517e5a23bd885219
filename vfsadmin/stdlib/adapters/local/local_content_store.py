"""Directory-backed implementation of the ContentStore port.

Each canonical path maps to one blob file named by the SHA-256 of the path,
fanned out over 256 subdirectories::

    <base_path>/3f/3fa2...e1

Writes go to a temporary file in the same directory, are fsynced, and then
renamed over the blob with :func:`os.replace`, which is atomic on POSIX and
Windows. A reader therefore sees either the old blob or the new one in full.
Blocking I/O runs in a worker thread so the event loop is never stalled.
"""

from __future__ import annotations

import asyncio
import hashlib
import os
import tempfile
from pathlib import Path

from vfsadmin.kernel.exceptions import NotFoundError, StorageFailureError
from vfsadmin.kernel.logging import get_logger
from vfsadmin.kernel.ports.content_store import ContentStore

logger = get_logger(__name__)

__all__ = ["LocalContentStore"]

_TEMP_SUFFIX = ".partial"


class LocalContentStore(ContentStore):
    """Content blobs stored as files under ``base_path``.

    Parameters
    ----------
    base_path : str | Path
        Root directory for blobs. Created if missing.
    fsync : bool, default=True
        Flush each blob to stable storage before publishing it. Disable only
        for throwaway stores (tests, caches).
    """

    def __init__(self, base_path: str | Path, fsync: bool = True) -> None:
        self.base_path = Path(base_path)
        self.fsync = fsync
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageFailureError(str(self.base_path), f"cannot create content dir: {e}") from e
        self._sweep_partials()
        logger.debug("Initialized content store at '{}'", self.base_path)

    def _blob_path(self, path: str) -> Path:
        digest = hashlib.sha256(path.encode("utf-8")).hexdigest()
        return self.base_path / digest[:2] / digest

    def _sweep_partials(self) -> None:
        """Delete temp files left behind by an interrupted write."""
        for leftover in self.base_path.glob(f"*/*{_TEMP_SUFFIX}"):
            logger.warning("Removing interrupted write {}", leftover)
            leftover.unlink(missing_ok=True)

    def _read_sync(self, path: str) -> bytes:
        try:
            return self._blob_path(path).read_bytes()
        except FileNotFoundError:
            raise NotFoundError(path, "no content stored") from None
        except OSError as e:
            raise StorageFailureError(path, f"read failed: {e}") from e

    def _write_sync(self, path: str, data: bytes) -> None:
        blob = self._blob_path(path)
        try:
            blob.parent.mkdir(exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=blob.parent, suffix=_TEMP_SUFFIX)
        except OSError as e:
            raise StorageFailureError(path, f"write failed: {e}") from e
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                if self.fsync:
                    f.flush()
                    os.fsync(f.fileno())
            os.replace(tmp_name, blob)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageFailureError(path, f"write failed: {e}") from e

    def _delete_sync(self, path: str) -> None:
        try:
            self._blob_path(path).unlink()
        except FileNotFoundError:
            raise NotFoundError(path, "no content stored") from None
        except OSError as e:
            raise StorageFailureError(path, f"delete failed: {e}") from e

    async def aread(self, path: str) -> bytes:
        return await asyncio.to_thread(self._read_sync, path)

    async def awrite(self, path: str, data: bytes) -> None:
        await asyncio.to_thread(self._write_sync, path, bytes(data))

    async def adelete(self, path: str) -> None:
        await asyncio.to_thread(self._delete_sync, path)

    async def aexists(self, path: str) -> bool:
        return await asyncio.to_thread(self._blob_path(path).is_file)

    async def aclose(self) -> None:
        """Nothing to release; blobs are closed after every operation."""
