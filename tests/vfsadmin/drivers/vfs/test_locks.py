"""Tests for the per-path lock table."""

from __future__ import annotations

import asyncio
from collections.abc import Generator

import pytest
from loguru import logger

from vfsadmin.drivers.vfs.locks import PathLockManager
from vfsadmin.kernel.exceptions import StorageFailureError


class TestHold:
    @pytest.mark.asyncio()
    async def test_same_path_is_serialized(self) -> None:
        locks = PathLockManager()
        events: list[str] = []

        async def worker(name: str) -> None:
            async with locks.hold("a"):
                events.append(f"{name}-in")
                await asyncio.sleep(0.01)
                events.append(f"{name}-out")

        await asyncio.gather(worker("w1"), worker("w2"))
        assert events == ["w1-in", "w1-out", "w2-in", "w2-out"]

    @pytest.mark.asyncio()
    async def test_unrelated_paths_do_not_contend(self) -> None:
        locks = PathLockManager()
        inside = asyncio.Event()
        release = asyncio.Event()

        async def holder() -> None:
            async with locks.hold("a"):
                inside.set()
                await release.wait()

        task = asyncio.create_task(holder())
        await inside.wait()
        async with asyncio.timeout(1):
            async with locks.hold("b"):
                assert locks.is_locked("a")
                assert locks.is_locked("b")
        release.set()
        await task

    @pytest.mark.asyncio()
    async def test_opposite_argument_order_does_not_deadlock(self) -> None:
        locks = PathLockManager(timeout=2.0)

        async def worker(*paths: str) -> None:
            for _ in range(20):
                async with locks.hold(*paths):
                    await asyncio.sleep(0)

        await asyncio.gather(worker("a", "b"), worker("b", "a"), worker("b", "c", "a"))
        assert len(locks) == 0

    @pytest.mark.asyncio()
    async def test_none_and_duplicates_are_ignored(self) -> None:
        locks = PathLockManager()
        async with locks.hold(None, "a", "a"):
            assert locks.is_locked("a")
            assert len(locks) == 1
        assert not locks.is_locked("a")

    @pytest.mark.asyncio()
    async def test_entries_dropped_after_release(self) -> None:
        locks = PathLockManager()
        async with locks.hold("a", "b"):
            assert len(locks) == 2
        assert len(locks) == 0

    @pytest.mark.asyncio()
    async def test_released_when_block_raises(self) -> None:
        locks = PathLockManager()
        with pytest.raises(RuntimeError):
            async with locks.hold("a"):
                raise RuntimeError("boom")
        assert len(locks) == 0


class TestTimeout:
    @pytest.mark.asyncio()
    async def test_timeout_raises_storage_failure(self) -> None:
        locks = PathLockManager(timeout=0.05)
        release = asyncio.Event()
        inside = asyncio.Event()

        async def holder() -> None:
            async with locks.hold("a"):
                inside.set()
                await release.wait()

        task = asyncio.create_task(holder())
        await inside.wait()
        with pytest.raises(StorageFailureError, match="timed out") as exc_info:
            async with locks.hold("a", "b"):
                pass
        assert exc_info.value.path == "a"
        assert not locks.is_locked("b")
        assert len(locks) == 1

        release.set()
        await task
        assert len(locks) == 0

    @pytest.mark.asyncio()
    async def test_cancelled_waiter_checks_entries_back_in(self) -> None:
        locks = PathLockManager(timeout=None)
        release = asyncio.Event()
        inside = asyncio.Event()

        async def holder() -> None:
            async with locks.hold("a"):
                inside.set()
                await release.wait()

        async def waiter() -> None:
            async with locks.hold("a"):
                pass

        held = asyncio.create_task(holder())
        await inside.wait()
        waiting = asyncio.create_task(waiter())
        await asyncio.sleep(0.01)
        waiting.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiting

        release.set()
        await held
        assert len(locks) == 0


@pytest.fixture
def records() -> Generator[list[dict], None, None]:
    captured: list[dict] = []
    handler_id = logger.add(lambda message: captured.append(message.record), level="DEBUG")
    yield captured
    logger.remove(handler_id)


class TestContention:
    @pytest.mark.asyncio()
    async def test_waiting_on_held_path_is_logged(self, records: list[dict]) -> None:
        locks = PathLockManager()
        inside = asyncio.Event()
        release = asyncio.Event()

        async def holder() -> None:
            async with locks.hold("a"):
                inside.set()
                await release.wait()

        task = asyncio.create_task(holder())
        await inside.wait()
        assert locks.is_locked("a")
        assert not locks.is_locked("b")

        waiter = asyncio.create_task(_hold_once(locks, "a", "b"))
        await asyncio.sleep(0)
        release.set()
        await asyncio.gather(task, waiter)

        waits = [r for r in records if r["message"].startswith("Waiting for lock")]
        assert [r["message"] for r in waits] == ["Waiting for lock on a"]
        assert not locks.is_locked("a")

    @pytest.mark.asyncio()
    async def test_free_path_is_not_logged(self, records: list[dict]) -> None:
        locks = PathLockManager()
        async with locks.hold("a"):
            pass
        assert not any(r["message"].startswith("Waiting for lock") for r in records)


async def _hold_once(locks: PathLockManager, *paths: str) -> None:
    async with locks.hold(*paths):
        await asyncio.sleep(0)
