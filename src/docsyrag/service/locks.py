"""Keyed locks that serialize work on the same document."""

import asyncio
import threading
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class DocumentLocks:
    """One lock per key, created on demand and dropped when unused.

    The locks are ``threading.Lock`` objects acquired in a worker thread, so
    they hold across event loops. Flask routes run each request in a fresh
    loop and still exclude one another.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _checkout(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._users[key] = self._users.get(key, 0) + 1
            return lock

    def _checkin(self, key: str) -> None:
        with self._guard:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """Hold the lock for key for the duration of the block.

        Usage:
            async with locks.hold(document_id):
                ...
        """
        lock = self._checkout(key)
        acquiring = asyncio.ensure_future(asyncio.to_thread(lock.acquire))
        try:
            await asyncio.shield(acquiring)
        except asyncio.CancelledError:
            # The worker thread still takes the lock; hand it back once it does
            acquiring.add_done_callback(lambda _: self._release(key, lock))
            raise

        try:
            yield
        finally:
            self._release(key, lock)

    def _release(self, key: str, lock: threading.Lock) -> None:
        lock.release()
        self._checkin(key)
