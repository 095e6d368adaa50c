"""Per-property mutual exclusion for ledger mutations."""

import asyncio
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager


class PropertyLockRegistry:
    """Hands out one ``asyncio.Lock`` per property id.

    Entries are reference counted and dropped once no task holds or waits on
    them, so the registry does not grow with the number of properties ever
    touched. Different keys never contend.
    """

    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._users: dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """Serialise the enclosed block against other holders of ``key``."""
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)

    def is_locked(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()


# Process-wide registry shared by every AvailabilityService instance.
property_locks = PropertyLockRegistry()
