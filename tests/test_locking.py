"""Tests for catalog write locks."""

import asyncio
import os
import time

import pytest

from translation_stats.pipeline import CatalogLocks, LockTimeout


def foreign_owner() -> str:
    """Owner string of another live registry in this process."""
    return f"{os.getpid()} someone-else"


class TestCatalogLocks:
    """Test in-process and lock-file exclusion."""

    @pytest.mark.asyncio
    async def test_lock_file_exists_while_held(self, tmp_path):
        locks = CatalogLocks()

        async with locks.hold(tmp_path, "pt_PT") as path:
            assert path == tmp_path / ".pt_PT.lock"
            assert path.read_text() == locks.owner
            assert locks.owner.startswith(f"{os.getpid()} ")
            assert locks.is_locked(tmp_path, "pt_PT")

        assert not path.exists()
        assert not locks.is_locked(tmp_path, "pt_PT")

    @pytest.mark.asyncio
    async def test_serializes_same_key(self, tmp_path):
        locks = CatalogLocks()
        events = []

        async def worker(name):
            async with locks.hold(tmp_path, "pt_PT"):
                events.append(f"{name}-start")
                await asyncio.sleep(0.01)
                events.append(f"{name}-end")

        await asyncio.gather(worker("a"), worker("b"))

        assert events == ["a-start", "a-end", "b-start", "b-end"]

    @pytest.mark.asyncio
    async def test_different_locales_do_not_block(self, tmp_path):
        locks = CatalogLocks()

        async with locks.hold(tmp_path, "pt_PT"):
            async with locks.hold(tmp_path, "de_DE"):
                assert (tmp_path / ".pt_PT.lock").exists()
                assert (tmp_path / ".de_DE.lock").exists()

    @pytest.mark.asyncio
    async def test_foreign_lock_file_times_out(self, tmp_path):
        (tmp_path / ".pt_PT.lock").write_text(foreign_owner())
        locks = CatalogLocks(wait_timeout=0.05, poll_interval=0.01)

        with pytest.raises(LockTimeout):
            async with locks.hold(tmp_path, "pt_PT"):
                pass

        assert (tmp_path / ".pt_PT.lock").read_text() == foreign_owner()

    @pytest.mark.asyncio
    async def test_timeout_argument_caps_the_wait(self, tmp_path):
        (tmp_path / ".pt_PT.lock").write_text(foreign_owner())
        locks = CatalogLocks(wait_timeout=60, poll_interval=0.01)

        started = time.monotonic()
        with pytest.raises(LockTimeout):
            async with locks.hold(tmp_path, "pt_PT", timeout=0.05):
                pass

        assert time.monotonic() - started < 1

    @pytest.mark.asyncio
    async def test_timeout_argument_caps_in_process_wait(self, tmp_path):
        locks = CatalogLocks(wait_timeout=60)

        async with locks.hold(tmp_path, "pt_PT"):
            with pytest.raises(LockTimeout):
                async with locks.hold(tmp_path, "pt_PT", timeout=0.05):
                    pass

    @pytest.mark.asyncio
    async def test_abandoned_lock_file_is_removed(self, tmp_path):
        lock_file = tmp_path / ".pt_PT.lock"
        lock_file.write_text(foreign_owner())
        old = time.time() - 3600
        os.utime(lock_file, (old, old))
        locks = CatalogLocks(wait_timeout=0.05, stale_after=60)

        async with locks.hold(tmp_path, "pt_PT") as path:
            assert path.read_text() == locks.owner

    @pytest.mark.asyncio
    async def test_lock_of_dead_process_is_removed(self, tmp_path, monkeypatch):
        monkeypatch.setattr("translation_stats.pipeline.locking._pid_alive", lambda pid: False)
        (tmp_path / ".pt_PT.lock").write_text("999999 gone")
        locks = CatalogLocks(wait_timeout=0.05)

        async with locks.hold(tmp_path, "pt_PT") as path:
            assert path.read_text() == locks.owner

    @pytest.mark.asyncio
    async def test_released_on_error(self, tmp_path):
        locks = CatalogLocks()

        with pytest.raises(RuntimeError):
            async with locks.hold(tmp_path, "pt_PT"):
                raise RuntimeError("boom")

        assert not (tmp_path / ".pt_PT.lock").exists()


class TestSeparateRegistries:
    """Two registries stand in for two processes sharing a destination."""

    @pytest.mark.asyncio
    async def test_live_holder_is_not_taken_over(self, tmp_path):
        first = CatalogLocks(stale_after=0.05, poll_interval=0.01)
        second = CatalogLocks(stale_after=0.05, poll_interval=0.01)
        holders: list[str] = []
        overlaps: list[list[str]] = []

        async def worker(locks, name, delay, hold_for):
            await asyncio.sleep(delay)
            async with locks.hold(tmp_path, "pt_PT"):
                holders.append(name)
                if len(holders) > 1:
                    overlaps.append(list(holders))
                await asyncio.sleep(hold_for)
                holders.remove(name)

        await asyncio.gather(
            worker(first, "A", 0, 0.3),
            worker(second, "B", 0.02, 0),
        )

        assert overlaps == []
        assert not (tmp_path / ".pt_PT.lock").exists()

    @pytest.mark.asyncio
    async def test_release_keeps_lock_file_of_new_owner(self, tmp_path):
        first = CatalogLocks()
        second = CatalogLocks()

        async with first.hold(tmp_path, "pt_PT") as path:
            path.write_text(second.owner)

        assert path.read_text() == second.owner

    @pytest.mark.asyncio
    async def test_heartbeat_refreshes_mtime(self, tmp_path):
        locks = CatalogLocks(stale_after=0.06)

        async with locks.hold(tmp_path, "pt_PT") as path:
            old = time.time() - 3600
            os.utime(path, (old, old))
            await asyncio.sleep(0.1)
            assert time.time() - path.stat().st_mtime < 60
