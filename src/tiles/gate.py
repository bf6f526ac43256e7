"""Bounded-concurrency gate for cache lookups.

A full bounding box at high zoom can mean tens of thousands of tiles; issuing
one filesystem check per tile all at once risks exhausting file descriptors.
The gate admits up to ``limit`` lookups at a time and parks the rest in a
FIFO queue. When a lookup finishes its slot is handed to the oldest waiter.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import TYPE_CHECKING, Generic, TypeVar

from shared.constants import MAX_PARALLEL_FS_OPERATIONS

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ConcurrencyGate(Generic[T]):
    def __init__(
        self,
        operation: Callable[[str], Awaitable[T]],
        *,
        limit: int = MAX_PARALLEL_FS_OPERATIONS,
    ) -> None:
        if limit < 1:
            msg = f'Gate limit must be at least 1, got {limit}'
            raise ValueError(msg)
        self._operation = operation
        self.limit = limit
        self._in_flight = 0
        self._waiting: deque[asyncio.Future[None]] = deque()
        self.peak_in_flight = 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def queued(self) -> int:
        return len(self._waiting)

    async def submit(self, key: str) -> T:
        """Run the gated operation for ``key``, waiting for a free slot if needed."""
        if self._in_flight < self.limit:
            self._in_flight += 1
        else:
            slot: asyncio.Future[None] = asyncio.get_running_loop().create_future()
            self._waiting.append(slot)
            # _release hands the slot over without touching the counter
            try:
                await slot
            except asyncio.CancelledError:
                if slot.done() and not slot.cancelled():
                    self._release()
                raise
        self.peak_in_flight = max(self.peak_in_flight, self._in_flight)
        try:
            return await self._operation(key)
        finally:
            self._release()

    def _release(self) -> None:
        while self._waiting:
            slot = self._waiting.popleft()
            if not slot.done():
                slot.set_result(None)
                return
        self._in_flight -= 1
