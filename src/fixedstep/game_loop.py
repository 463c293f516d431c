"""Fixed-timestep game loop.

Runs (game/physics) logic at a constant rate on any hardware. Host timers
never fire exactly on time, so each wake-up measures the elapsed time, adds it
to a residual delay and drains that residual one whole step interval at a
time. The simulation therefore advances in fixed increments no matter how
irregular the wake-ups are, and catches up after a late one. The residual is
clamped so a long stall (a slow step, a suspended process) drops the excess
instead of replaying it all at once.
"""

import decimal
import functools
import math
import numbers
from typing import Callable, Optional

from fixedstep.config import GameLoopOptions
from fixedstep.events import EventHub, Subscription
from fixedstep.log import logger
from fixedstep.timers import AsyncioTimerBackend, TimerBackend

UPDATE = "update"
GAME_STEP_DROPPED = "game_step_dropped"


class GameLoop:
    """Executes a step function at a constant rate using a fixed time step."""

    def __init__(self, step_fn: Callable[[], None], step_rate_hz: float,
                 options=None, timer: Optional[TimerBackend] = None):
        """Create a game loop. The loop is stopped by default.

        step_fn advances the state of the game by one game step.
        step_rate_hz is how often a game step occurs, in hertz.
        options is a GameLoopOptions or a mapping of its fields.
        timer defaults to the running asyncio event loop.
        """
        if not callable(step_fn):
            raise TypeError(f"step_fn must be callable, got {step_fn!r}")
        if isinstance(step_rate_hz, bool) or not isinstance(step_rate_hz, (numbers.Real, decimal.Decimal)):
            raise ValueError(f"step_rate_hz must be an int, float, Fraction or Decimal, got {step_rate_hz!r}")
        if not (math.isfinite(step_rate_hz) and step_rate_hz > 0):
            raise ValueError(f"step_rate_hz must be positive and finite, got {step_rate_hz}")

        self._options = GameLoopOptions.resolve(options)
        self._step_fn = step_fn
        self._step_rate_hz = float(step_rate_hz)
        self._timer = timer if timer is not None else AsyncioTimerBackend()

        self._events = EventHub((UPDATE, GAME_STEP_DROPPED))

        self._running = False
        self._generation = 0
        self._pending_wake = None
        self._previous_step_time_ms = 0.0
        self._residual_delay_ms = 0.0
        self._step_count = 0

    # -- events ---------------------------------------------------------

    def on_update(self, handler: Callable[[float], None]) -> Subscription:
        """Add a listener called when the loop has finished an iteration.

        The handler receives residual_delay_alpha for that iteration.
        """
        return self._events.subscribe(UPDATE, handler)

    def on_game_step_dropped(self, handler: Callable[[float], None]) -> Subscription:
        """Add a listener called when game steps are dropped for taking too long.

        The handler receives the milliseconds of simulation time discarded.
        """
        return self._events.subscribe(GAME_STEP_DROPPED, handler)

    # -- state ------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def residual_delay_alpha(self) -> float:
        """How far the loop is between the last step and the next one, in [0, 1).

        Useful as a blending factor when interpolating game states for
        rendering.
        """
        return self._residual_delay_ms / self.step_interval_ms

    @property
    def residual_delay_ms(self) -> float:
        return self._residual_delay_ms

    @property
    def step_rate_hz(self) -> float:
        return self._step_rate_hz

    @property
    def step_interval_ms(self) -> float:
        return 1000.0 / self._step_rate_hz

    @property
    def delay_clamp_ms(self) -> float:
        return self._options.delay_clamp_ms

    @property
    def options(self) -> GameLoopOptions:
        return self._options

    @property
    def step_count(self) -> int:
        """Step function calls completed since the last start()."""
        return self._step_count

    @property
    def timer(self) -> TimerBackend:
        return self._timer

    # -- control ------------------------------------------------------------

    def start(self) -> "GameLoop":
        """Start the loop, restarting it if it is already running.

        Runs the first iteration immediately. Returns this loop.
        """
        restarting = self._running
        self.stop()

        self._generation += 1
        self._residual_delay_ms = 0.0
        self._step_count = 0
        self._previous_step_time_ms = self._timer.now_ms()
        self._running = True
        logger.debug("{} game loop at {:g} Hz (clamp {:g} ms)",
                     "Restarting" if restarting else "Starting",
                     self._step_rate_hz, self.delay_clamp_ms)

        self._update(self._generation)
        return self

    def stop(self):
        """Stop the loop. Does nothing if it is not running."""
        was_running = self._running
        self._running = False
        if self._pending_wake is not None:
            self._timer.cancel(self._pending_wake)
            self._pending_wake = None
        if was_running:
            logger.debug("Game loop stopped after {} steps", self._step_count)

    # -- iteration -------------------------------------------------------------

    def _is_current(self, generation: int) -> bool:
        return self._running and generation == self._generation

    def _update(self, generation: int):
        if not self._is_current(generation):
            # This update was queued before stop() or a restart.
            return

        self._queue_next_iteration(generation)

        now = self._timer.now_ms()
        self._residual_delay_ms += now - self._previous_step_time_ms
        self._previous_step_time_ms = now

        self._clamp_residual_delay()

        interval = self.step_interval_ms
        try:
            while self._is_current(generation) and self._residual_delay_ms >= interval:
                self._step_fn()
                if generation != self._generation:
                    # The step function restarted the loop.
                    break
                self._step_count += 1
                self._residual_delay_ms -= interval
        except Exception:
            logger.exception("Step function failed; skipping the rest of this iteration")
            raise

        if self._is_current(generation):
            self._events.emit(UPDATE, self.residual_delay_alpha)

    def _clamp_residual_delay(self):
        clamp = self.delay_clamp_ms
        if self._residual_delay_ms > clamp:
            residual = self._residual_delay_ms
            overflow = residual - clamp
            # Handlers see the clamped residual.
            self._residual_delay_ms = clamp
            logger.warning("Dropped {:.3f} ms of game steps (residual delay {:.3f} ms > clamp {:g} ms)",
                           overflow, residual, clamp)
            self._events.emit(GAME_STEP_DROPPED, overflow)

    def _queue_next_iteration(self, generation: int):
        self._pending_wake = self._timer.schedule(
            self.step_interval_ms, functools.partial(self._update, generation))
