"""Per-cycle sampling of a running game loop."""

from dataclasses import dataclass

from fixedstep.game_loop import GameLoop


@dataclass
class CycleSample:
    time_ms: float
    alpha: float
    # Step calls since the previous sample. A cycle whose step function raised
    # emits no update, so its completed steps land in the next sample.
    steps: int


@dataclass
class DropRecord:
    time_ms: float
    overflow_ms: float


class LoopMonitor:
    """Records update alphas and step drops emitted by a GameLoop."""

    def __init__(self, loop: GameLoop):
        self.loop = loop
        self.samples: list[CycleSample] = []
        self.drops: list[DropRecord] = []
        self._last_step_count = loop.step_count
        self._subscriptions = [
            loop.on_update(self._on_update),
            loop.on_game_step_dropped(self._on_drop),
        ]

    def _on_update(self, alpha: float):
        count = self.loop.step_count
        # step_count resets on start(); the first sample after it counts from zero
        steps = count - self._last_step_count if count >= self._last_step_count else count
        self._last_step_count = count
        self.samples.append(CycleSample(
            time_ms=self.loop.timer.now_ms(), alpha=alpha, steps=steps,
        ))

    def _on_drop(self, overflow_ms: float):
        self.drops.append(DropRecord(
            time_ms=self.loop.timer.now_ms(), overflow_ms=overflow_ms,
        ))

    def detach(self):
        """Stop recording. Collected data is kept."""
        for sub in self._subscriptions:
            sub.dispose()

    @property
    def attached(self) -> bool:
        return any(sub.active for sub in self._subscriptions)

    @property
    def cycle_count(self) -> int:
        return len(self.samples)

    @property
    def drop_count(self) -> int:
        return len(self.drops)

    @property
    def total_steps(self) -> int:
        return sum(s.steps for s in self.samples)

    @property
    def total_dropped_ms(self) -> float:
        return sum(d.overflow_ms for d in self.drops)

    def get_series(self) -> dict:
        """Get per-cycle series.

        Returns: {'time_ms': [...], 'alpha': [...], 'steps': [...]}
        """
        return {
            'time_ms': [s.time_ms for s in self.samples],
            'alpha': [s.alpha for s in self.samples],
            'steps': [s.steps for s in self.samples],
        }

    def clear(self):
        self.samples.clear()
        self.drops.clear()
