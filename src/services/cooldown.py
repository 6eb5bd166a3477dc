"""
Cooldown - minimum spacing between /do actions

Callers arriving inside the interval are delayed, not rejected.
"""

import asyncio
import time
from typing import Callable


class Cooldown:

    def __init__(self, interval_s: float, clock: Callable[[], float] = time.monotonic):
        self.interval_s = interval_s
        self._clock = clock
        self._next_slot = 0.0

    def reserve(self) -> float:
        """Claim the next slot and return how long the caller must wait for it."""
        now = self._clock()
        slot = max(now, self._next_slot)
        self._next_slot = slot + self.interval_s
        return slot - now

    async def wait(self) -> None:
        if self.interval_s <= 0:
            return
        delay = self.reserve()
        if delay > 0:
            await asyncio.sleep(delay)
