"""
Tick schedulers - periodic timers that drive game sessions.

Sessions never sleep or spawn timers themselves. They arm a TickScheduler
with an interval and a callback; the host decides how time advances:

- ClockScheduler: polled from a host loop, fires against a monotonic clock
- ManualScheduler: fired explicitly (tests, headless simulations)
"""

import time
from abc import ABC, abstractmethod
from typing import Callable, Optional, List, Tuple


TickCallback = Callable[[], object]


class TickScheduler(ABC):
    """
    Abstract periodic timer.

    At most one callback is armed at a time. Re-arming changes the period
    without dropping the armed callback.
    """

    def __init__(self):
        self._callback: Optional[TickCallback] = None
        self._interval_ms: int = 0
        self._paused: Optional[Tuple[TickCallback, float]] = None

    @property
    def armed(self) -> bool:
        """Whether a callback is currently scheduled."""
        return self._callback is not None

    @property
    def interval_ms(self) -> int:
        """Current period in milliseconds."""
        return self._interval_ms

    def arm(self, interval_ms: int, callback: TickCallback) -> None:
        """
        Start firing callback every interval_ms milliseconds.

        Args:
            interval_ms: Period between ticks
            callback: Function called on every tick
        """
        if interval_ms <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval_ms}")
        self._callback = callback
        self._interval_ms = int(interval_ms)
        self._paused = None
        self._on_arm()

    def rearm(self, interval_ms: int) -> None:
        """Change the period of an armed scheduler, keeping tick alignment."""
        if interval_ms <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval_ms}")
        self._interval_ms = int(interval_ms)

    def disarm(self) -> None:
        """Stop firing entirely."""
        self._callback = None
        self._paused = None

    def pause(self) -> None:
        """
        Stop firing but remember the callback and how far into the current
        interval the scheduler was, so resume() continues the same interval.
        """
        if not self.armed:
            return
        paused = (self._callback, self._elapsed_ms())
        self.disarm()
        self._paused = paused

    def resume(self) -> bool:
        """
        Continue a paused schedule.

        Returns:
            False if nothing was paused (the caller should arm instead)
        """
        if self._paused is None:
            return False
        callback, elapsed_ms = self._paused
        self._paused = None
        self._callback = callback
        self._on_resume(min(elapsed_ms, self._interval_ms))
        return True

    def _fire(self) -> None:
        callback = self._callback
        if callback is not None:
            callback()

    def _on_arm(self) -> None:
        pass

    def _elapsed_ms(self) -> float:
        return 0.0

    def _on_resume(self, elapsed_ms: float) -> None:
        pass

    @abstractmethod
    def poll(self) -> int:
        """
        Give the scheduler a chance to fire.

        Returns:
            Number of ticks fired (0 or 1)
        """
        pass


class ClockScheduler(TickScheduler):
    """
    Scheduler driven by a monotonic clock and polled from a host loop.

    Each fire advances the target time by exactly one interval so coarse
    polling does not accumulate drift. Polls arriving earlier than the target
    (minus a small tolerance) are skipped. When the host falls more than one
    full interval behind, the schedule resynchronises to the current time
    instead of firing a burst of catch-up ticks.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        early_tolerance_ms: float = 1.0,
    ):
        """
        Initialize the scheduler.

        Args:
            clock: Monotonic time source returning seconds
            early_tolerance_ms: How early a poll may arrive and still fire
        """
        super().__init__()
        self.clock = clock
        self.early_tolerance_ms = early_tolerance_ms
        self._last_fire: float = 0.0

    def _on_arm(self) -> None:
        self._last_fire = self.clock()

    def _elapsed_ms(self) -> float:
        return (self.clock() - self._last_fire) * 1000.0

    def _on_resume(self, elapsed_ms: float) -> None:
        self._last_fire = self.clock() - elapsed_ms / 1000.0

    @property
    def next_due(self) -> float:
        """Clock time at which the next tick is due."""
        return self._last_fire + self._interval_ms / 1000.0

    def poll(self) -> int:
        if not self.armed:
            return 0

        now = self.clock()
        elapsed_ms = (now - self._last_fire) * 1000.0

        if elapsed_ms < self._interval_ms - self.early_tolerance_ms:
            return 0

        if elapsed_ms >= 2 * self._interval_ms:
            self._last_fire = now
        else:
            self._last_fire += self._interval_ms / 1000.0

        self._fire()
        return 1


class ManualScheduler(TickScheduler):
    """
    Scheduler that only fires when told to.

    Records every interval it was armed or re-armed with, which lets tests
    assert on speed changes.
    """

    def __init__(self):
        super().__init__()
        self.intervals: List[int] = []
        self.fired: int = 0

    def _on_arm(self) -> None:
        self.intervals.append(self._interval_ms)

    def rearm(self, interval_ms: int) -> None:
        super().rearm(interval_ms)
        self.intervals.append(self._interval_ms)

    def poll(self) -> int:
        return 0

    def fire(self, times: int = 1) -> int:
        """
        Fire the armed callback up to `times` times.

        Stops early if the callback disarms the scheduler.

        Returns:
            Number of ticks actually fired
        """
        count = 0
        for _ in range(times):
            if not self.armed:
                break
            self._fire()
            self.fired += 1
            count += 1
        return count
