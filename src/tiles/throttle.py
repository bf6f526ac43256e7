"""Global request throttle shared by all in-flight tile fetches.

Only one network fetch runs at a time. Before each fetch the throttle waits
until at least ``interval`` seconds have passed since the previous fetch
finished. ``asyncio.Lock`` wakes waiters in acquisition order, so fetches
start in the order they were scheduled.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, TypeVar

from shared.constants import REQUEST_MIN_INTERVAL_S

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RequestThrottle:
    def __init__(
        self,
        interval: float = REQUEST_MIN_INTERVAL_S,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval < 0:
            msg = f'Throttle interval must not be negative, got {interval}'
            raise ValueError(msg)
        self.interval = interval
        self._clock = clock
        self._lock = asyncio.Lock()
        self.last_request_at = float('-inf')
        self.scheduled = 0

    def delay_needed(self) -> float:
        """Seconds to wait before the next fetch may start."""
        elapsed = self._clock() - self.last_request_at
        if elapsed > self.interval:
            return 0.0
        return self.interval - elapsed

    async def schedule(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Run ``fn`` once every earlier scheduled call is done and spacing allows."""
        self.scheduled += 1
        async with self._lock:
            delay = self.delay_needed()
            if delay > 0:
                await asyncio.sleep(delay)
            try:
                return await fn()
            finally:
                self.last_request_at = self._clock()
