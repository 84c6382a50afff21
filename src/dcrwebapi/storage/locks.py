"""
Reader/writer lock for asyncio.

Readers share the lock; a writer holds it exclusively. Writers are preferred:
once a writer is waiting, new readers queue behind it so a steady stream of
HTTP reads cannot starve the refresh loop.

Releasing never awaits: counters are updated and waiters woken in the same
step, so a task cancelled on its way out cannot leave the lock held.
"""

import asyncio
from collections import deque
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager


class ReadWriteLock:
    """Writer-preferring reader/writer lock.

    Usage:
        lock = ReadWriteLock()
        async with lock.read():
            ...
        async with lock.write():
            ...
    """

    def __init__(self) -> None:
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0
        self._waiters: deque[asyncio.Future] = deque()

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def writer_active(self) -> bool:
        return self._writer

    def _wake_all(self) -> None:
        # Every waiter re-checks its own condition after waking.
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)

    async def _wait_until(self, predicate: Callable[[], bool]) -> None:
        loop = asyncio.get_running_loop()
        while not predicate():
            waiter = loop.create_future()
            self._waiters.append(waiter)
            await waiter

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        await self._wait_until(
            lambda: not self._writer and self._waiting_writers == 0
        )
        self._readers += 1
        try:
            yield
        finally:
            self._readers -= 1
            if self._readers == 0:
                self._wake_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        self._waiting_writers += 1
        try:
            await self._wait_until(lambda: not self._writer and self._readers == 0)
        except BaseException:
            # A cancelled writer must release readers queued behind it.
            self._waiting_writers -= 1
            self._wake_all()
            raise
        self._waiting_writers -= 1
        self._writer = True
        try:
            yield
        finally:
            self._writer = False
            self._wake_all()
