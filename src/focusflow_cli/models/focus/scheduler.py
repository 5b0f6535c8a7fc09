"""Cooperative one-second scheduling source for the focus timer."""

import time
from collections.abc import Callable


class TickScheduler:
    """Invokes a callback once per elapsed second while armed.

    The scheduler never runs on its own thread: the owner of the event loop
    calls ``poll()`` regularly and the scheduler fires the callback for every
    whole second that has passed since it was armed. ``cancel()`` takes
    effect immediately, including from inside the callback.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, interval: float = 1.0):
        self._clock = clock
        self._interval = interval
        self._callback: Callable[[], object] | None = None
        self._anchor: float | None = None

    @property
    def is_active(self) -> bool:
        return self._callback is not None

    def start(self, callback: Callable[[], object]) -> None:
        """Arm the scheduler. Re-arming replaces the previous callback."""
        self._callback = callback
        self._anchor = self._clock()

    def cancel(self) -> None:
        """Disarm the scheduler. No callback fires after this returns."""
        self._callback = None
        self._anchor = None

    def seconds_until_next(self) -> float | None:
        """Time left until the next tick, or None when disarmed."""
        if self._anchor is None:
            return None
        elapsed = self._clock() - self._anchor
        return max(0.0, self._interval - elapsed)

    def poll(self) -> int:
        """Fire the callback for each interval elapsed since the last tick.

        Returns the number of ticks fired.
        """
        fired = 0
        while self._callback is not None and self._anchor is not None:
            if self._clock() - self._anchor < self._interval:
                break
            self._anchor += self._interval
            callback = self._callback
            callback()
            fired += 1
        return fired
