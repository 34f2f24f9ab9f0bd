import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class RecordLockManager:
    """
    🔐 Per-record mutual exclusion for multi-step mutations 🔐

    Create, update and delete are each several store calls (deindex,
    write, reindex) with no backend transaction around them. Holding the
    lock for a primary key makes those sequences run one at a time for
    that record within this process. Other processes sharing the store
    are not covered.

    Locks are created on first use and dropped once nobody holds or
    waits for them.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}
        self.acquisitions = 0
        self.contended = 0

    @asynccontextmanager
    async def hold(self, primary_key: str) -> AsyncIterator[None]:
        """Hold the lock for one primary key for the duration of the block."""
        lock = self._locks.get(primary_key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[primary_key] = lock

        if lock.locked():
            self.contended += 1

        self._waiters[primary_key] = self._waiters.get(primary_key, 0) + 1
        try:
            async with lock:
                self.acquisitions += 1
                yield
        finally:
            remaining = self._waiters[primary_key] - 1
            if remaining:
                self._waiters[primary_key] = remaining
            else:
                del self._waiters[primary_key]
                del self._locks[primary_key]

    def is_locked(self, primary_key: str) -> bool:
        lock = self._locks.get(primary_key)
        return lock is not None and lock.locked()

    def active_keys(self) -> list[str]:
        """Primary keys with a holder or waiter."""
        return list(self._locks.keys())

    def get_statistics(self) -> dict:
        return {
            "acquisitions": self.acquisitions,
            "contended": self.contended,
            "active_locks": len(self._locks),
        }
