from dataclasses import dataclass

from typing_extensions import override

from millis.clock import Clock
from millis.duration import Duration
from millis.errors import InvalidInput
from millis.instant import Instant, InstantLike
from millis.util import Unit


@dataclass(frozen=True, kw_only=True)
class Interval:
    """A directed span from ``start`` to ``end``.

    ``end`` may precede ``start``: a past-pointing interval has a negative
    duration and enumerates its days backwards. Derived values are
    recomputed on every call.
    """

    start: Instant
    end: Instant

    def __post_init__(self) -> None:
        for edge in ("start", "end"):
            value = getattr(self, edge)
            if not isinstance(value, Instant):
                raise InvalidInput(
                    f"Interval {edge} must be an Instant, "
                    f"got {type(value).__name__!r}\n"
                    f"Hint: use Interval.between(start, end) to convert other values"
                )

    @classmethod
    def between(cls, start: InstantLike, end: InstantLike) -> "Interval":
        """Interval between two instant-like values, kept in the given order."""
        return cls(start=Instant.of(start), end=Instant.of(end))

    @classmethod
    def since_now(cls, days: int, *, clock: Clock | None = None) -> "Interval":
        """Interval from now to ``days`` days from now (negative for the past).

        Example:
            >>> last_week = Interval.since_now(-7)
            >>> len(last_week.days())
            7
        """
        now = Instant.now(clock)
        return cls(start=now, end=now.plus(days=days))

    @property
    def millis(self) -> int:
        return self.end.millis - self.start.millis

    def duration(self) -> Duration:
        return Duration.between(self.start, self.end)

    def contains(self, value: InstantLike) -> bool:
        """True if ``value`` lies strictly inside, exclusive of both ends."""
        instant = Instant.of(value)
        return self.start.is_before(instant) and self.end.is_after(instant)

    def days(self) -> list[Instant]:
        """One instant per day spanned, stepping a day at a time from start.

        An interval ending exactly at midnight does not include that day.

        Example:
            >>> len(Interval.between("2024-01-01", "2024-01-02").days())
            1
            >>> len(Interval.between("2024-01-01", "2024-01-02T23:59:59.999Z").days())
            2
        """
        sign = self._sign
        end = self._adjusted_end("day")
        count = int(Duration.between(self.start, end).abs().days(round="down")) + 1
        return [self.start.plus(days=sign * step) for step in range(count)]

    def years(self) -> list[Instant]:
        """One instant per calendar year spanned, stepping a year at a time.

        Counts by calendar year number rather than elapsed time, since year
        lengths vary. An interval ending exactly at New Year does not
        include that year.
        """
        sign = self._sign
        end = self._adjusted_end("year")
        count = abs(end.year - self.start.year) + 1
        return [self.start.plus(years=sign * step) for step in range(count)]

    def iso(self) -> str:
        return f"{self.start.iso()}/{self.end.iso()}"

    @property
    def _sign(self) -> int:
        return -1 if self.end.is_before(self.start) else 1

    def _adjusted_end(self, unit: Unit) -> Instant:
        """End moved 1ms back towards start when it sits on a ``unit`` boundary."""
        if self.end != self.start and self.end.is_start_of(unit):
            return self.end.minus(millis=self._sign)
        return self.end

    def __contains__(self, value: InstantLike) -> bool:
        return self.contains(value)

    @override
    def __str__(self) -> str:
        return self.iso()


__all__ = ["Interval"]
