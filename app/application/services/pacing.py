"""Send pacing for the campaign dispatcher."""

import asyncio
import time
from collections.abc import Awaitable, Callable


class FixedIntervalPacer:
    """Guarantees at least interval_seconds between consecutive wait() returns.

    The first wait() returns immediately. Clock and sleep are injectable so
    tests can drive time without real delays.
    """

    def __init__(
        self,
        interval_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0")
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._sleep = sleep
        self._last_tick: float | None = None

    async def wait(self) -> None:
        if self._last_tick is not None:
            remaining = self._last_tick + self.interval_seconds - self._clock()
            if remaining > 0:
                await self._sleep(remaining)
        self._last_tick = self._clock()

    @classmethod
    def from_milliseconds(cls, interval_ms: int) -> "FixedIntervalPacer":
        return cls(interval_ms / 1000.0)
