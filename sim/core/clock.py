"""Deterministic millisecond simulation clock.

Stands in for the host's wall clock and timer so a game loop can be driven
through virtual time. Time only moves when advance() or elapse() is called.
"""

import heapq
from dataclasses import dataclass, field
from typing import Callable


@dataclass(order=True)
class ScheduledEvent:
    due_ms: float
    seq: int = field(compare=True)  # tie-breaker for FIFO ordering
    callback: Callable = field(compare=False)
    args: tuple = field(default=(), compare=False)


class SimClock:
    """Virtual clock with timer scheduling. Usable as a GameLoop timer backend."""

    def __init__(self, start_ms: float = 0.0):
        self._now = float(start_ms)
        self._seq = 0
        self._events: list[ScheduledEvent] = []
        self._live: set[int] = set()
        self.fired = 0

    def now_ms(self) -> float:
        return self._now

    def advance(self, ms: float):
        """Advance clock by ms, firing any events that fall due."""
        if ms < 0:
            raise ValueError(f"Cannot advance by a negative amount, got {ms}")
        target = self._now + ms
        self._fire_until(target)
        self._now = max(self._now, target)

    def elapse(self, ms: float):
        """Move time forward without firing events, as blocking work would."""
        if ms < 0:
            raise ValueError(f"Cannot elapse a negative amount, got {ms}")
        self._now += ms

    def schedule(self, delay_ms: float, callback: Callable, *args) -> int:
        """Schedule an event to fire after `delay_ms` milliseconds.

        Returns event sequence number, which is also the cancel handle.
        """
        if delay_ms < 0:
            raise ValueError(f"Delay must be non-negative, got {delay_ms}")
        event = ScheduledEvent(
            due_ms=self._now + delay_ms,
            seq=self._seq,
            callback=callback,
            args=args,
        )
        self._seq += 1
        heapq.heappush(self._events, event)
        self._live.add(event.seq)
        return event.seq

    def schedule_at(self, time_ms: float, callback: Callable, *args) -> int:
        """Schedule an event at an absolute time."""
        if time_ms < self._now:
            raise ValueError(f"Cannot schedule in the past: {time_ms} < {self._now}")
        return self.schedule(time_ms - self._now, callback, *args)

    def cancel(self, seq: int) -> bool:
        """Cancel a pending event. Returns False if it already fired or was cancelled."""
        if seq not in self._live:
            return False
        self._live.discard(seq)
        return True

    def _fire_until(self, target: float):
        """Fire all live events due at or before target.

        An event that fell due while a callback was consuming time fires at
        the current time rather than its due time.
        """
        while self._events and self._events[0].due_ms <= target:
            event = heapq.heappop(self._events)
            if event.seq not in self._live:
                continue
            self._live.discard(event.seq)
            self._now = max(self._now, event.due_ms)
            self.fired += 1
            event.callback(*event.args)

    def _drop_cancelled_head(self):
        while self._events and self._events[0].seq not in self._live:
            heapq.heappop(self._events)

    @property
    def pending_events(self) -> int:
        return len(self._live)

    def run_until_idle(self, max_ms: float = 10_000.0) -> float:
        """Advance until no more events, or max_ms of virtual time has passed.

        Returns milliseconds advanced.
        """
        start = self._now
        while True:
            self._drop_cancelled_head()
            if not self._events:
                break
            next_due = max(self._events[0].due_ms, self._now)
            if next_due - start > max_ms:
                break
            self._fire_until(next_due)
        return self._now - start
