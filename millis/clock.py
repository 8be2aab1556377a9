"""Injectable time sources.

A clock is any zero-argument callable returning the current time as epoch
milliseconds. ``Instant.now`` and ``Interval.since_now`` read the system
clock unless a clock is passed in, so tests can pin "now" with ``fixed``.
"""

from collections.abc import Callable
from time import time_ns
from typing import TypeAlias

Clock: TypeAlias = Callable[[], int]


def system_clock() -> int:
    """Return the wall-clock time in epoch milliseconds."""
    return time_ns() // 1_000_000


def fixed(millis: int) -> Clock:
    """Return a clock that always reports ``millis``.

    Example:
        >>> from millis import Instant
        >>> from millis.clock import fixed
        >>> Instant.now(clock=fixed(1704067200000)).iso()
        '2024-01-01T00:00:00.000Z'
    """

    def clock() -> int:
        return millis

    return clock


def read(clock: Clock | None = None) -> int:
    """Read ``clock`` once, falling back to the system clock."""
    return (clock or system_clock)()


__all__ = ["Clock", "system_clock", "fixed", "read"]
