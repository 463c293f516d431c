"""Timer backends a game loop can be driven by.

A backend reads a monotonic millisecond clock and schedules single-shot
callbacks that can be cancelled. sim.core.clock.SimClock implements the same
interface over virtual time.
"""

import asyncio
from typing import Any, Callable, Optional, Protocol


class TimerBackend(Protocol):

    def now_ms(self) -> float:
        ...

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> Any:
        ...

    def cancel(self, handle: Any) -> None:
        ...


class AsyncioTimerBackend:
    """Wake-ups through an asyncio event loop's call_later."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """The explicit loop, or the running one (RuntimeError if none)."""
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def now_ms(self) -> float:
        return self.loop.time() * 1000.0

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay_ms / 1000.0, callback)

    def cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()
