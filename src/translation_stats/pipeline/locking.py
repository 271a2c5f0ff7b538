"""Mutual exclusion for catalog writes.

Two updates writing the same ``(destination, locale)`` files must not
interleave. Inside one process an :class:`asyncio.Lock` per key serializes
them; across processes an advisory lock file created with ``O_EXCL`` does.

The lock file holds ``{pid} {instance_id}``. Its holder refreshes the
file's mtime while working, so a lock is only taken over when its process
is gone or the refresh has stopped for ``stale_after`` seconds. A registry
only ever deletes a lock file that carries its own instance id.
"""

import asyncio
import os
import time
from contextlib import asynccontextmanager, suppress
from pathlib import Path
from typing import AsyncIterator, Optional
from uuid import uuid4

from ..utils.logging import get_logger
from ..utils.paths import lock_file_path

logger = get_logger(__name__)


class LockTimeout(TimeoutError):
    """The lock stayed taken for longer than the wait timeout."""


def _pid_alive(pid: int) -> bool:
    if os.name != "posix":
        # No cheap liveness check; rely on the mtime refresh
        return True
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


class CatalogLocks:
    """Registry of per-(destination, locale) locks."""

    def __init__(
        self,
        wait_timeout: float = 60.0,
        poll_interval: float = 0.1,
        stale_after: float = 600.0,
        instance_id: Optional[str] = None,
    ):
        """Initialize the registry.

        Args:
            wait_timeout: Seconds to wait for a lock held elsewhere
            poll_interval: Seconds between attempts to take the lock file
            stale_after: Seconds without a refresh after which a lock file
                is considered abandoned
            instance_id: Owner id written to lock files. Auto-generated if
                not provided.
        """
        self.wait_timeout = wait_timeout
        self.poll_interval = poll_interval
        self.stale_after = stale_after
        self.instance_id = instance_id or uuid4().hex
        self._locks: dict[tuple[str, str], asyncio.Lock] = {}

    @property
    def owner(self) -> str:
        """Contents of the lock files this registry creates."""
        return f"{os.getpid()} {self.instance_id}"

    def _key(self, destination: str | Path, wp_locale: str) -> tuple[str, str]:
        return (str(Path(destination).resolve()), wp_locale)

    def is_locked(self, destination: str | Path, wp_locale: str) -> bool:
        lock = self._locks.get(self._key(destination, wp_locale))
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(
        self,
        destination: str | Path,
        wp_locale: str,
        timeout: Optional[float] = None,
    ) -> AsyncIterator[Path]:
        """Hold the lock for a destination and locale.

        Args:
            destination: Directory holding the catalog files
            wp_locale: WordPress locale code
            timeout: Seconds to wait at most, capped by ``wait_timeout``

        Raises:
            LockTimeout: If the lock stays taken for the whole wait
            OSError: If the lock file cannot be created
        """
        wait = self.wait_timeout if timeout is None else max(min(timeout, self.wait_timeout), 0)
        deadline = time.monotonic() + wait

        lock = self._locks.setdefault(self._key(destination, wp_locale), asyncio.Lock())
        try:
            await asyncio.wait_for(lock.acquire(), timeout=wait)
        except asyncio.TimeoutError:
            raise LockTimeout(
                f"Timed out waiting for the {wp_locale} lock in {destination}"
            ) from None

        try:
            path = lock_file_path(destination, wp_locale)
            await self._acquire_file(path, deadline)
            heartbeat = asyncio.create_task(self._heartbeat(path))
            try:
                yield path
            finally:
                heartbeat.cancel()
                with suppress(asyncio.CancelledError):
                    await heartbeat
                self._release_file(path)
        finally:
            lock.release()

    async def _acquire_file(self, path: Path, deadline: float) -> None:
        while True:
            try:
                fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
            except FileExistsError:
                owner = self._read_owner(path)
                if owner is not None and self._is_stale(path, owner):
                    logger.warning(f"Removing stale lock file {path} (held by {owner!r})")
                    self._unlink_if_owned(path, owner)
                    continue
                if time.monotonic() >= deadline:
                    raise LockTimeout(f"Timed out waiting for lock file {path}")
                await asyncio.sleep(self.poll_interval)
                continue
            with os.fdopen(fd, "w") as f:
                f.write(self.owner)
            logger.debug(f"Acquired lock file {path}")
            return

    async def _heartbeat(self, path: Path) -> None:
        interval = max(self.stale_after / 3, 0.01)
        while True:
            await asyncio.sleep(interval)
            if self._read_owner(path) != self.owner:
                logger.warning(f"Lock file {path} no longer belongs to this process")
                return
            with suppress(FileNotFoundError):
                os.utime(path)

    @staticmethod
    def _read_owner(path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None

    def _is_stale(self, path: Path, owner: str) -> bool:
        pid, _, _ = owner.partition(" ")
        if pid.isdigit() and not _pid_alive(int(pid)):
            return True
        try:
            return time.time() - path.stat().st_mtime > self.stale_after
        except FileNotFoundError:
            return False

    def _unlink_if_owned(self, path: Path, owner: str) -> bool:
        if self._read_owner(path) != owner:
            return False
        path.unlink(missing_ok=True)
        return True

    def _release_file(self, path: Path) -> None:
        if self._unlink_if_owned(path, self.owner):
            logger.debug(f"Released lock file {path}")
        else:
            logger.warning(f"Lock file {path} was taken over; leaving it in place")
