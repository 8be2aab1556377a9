"""Fixed-length durations.

A Duration is a signed number of milliseconds. Months and years are not
fixed-length, so they are not durations; see ``millis.arithmetic`` for
calendar-relative deltas.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Literal, TypeAlias

from typing_extensions import override

from millis.errors import InvalidInput
from millis.util import DAY, HOUR, MINUTE, SECOND

if TYPE_CHECKING:
    from millis.instant import InstantLike

Rounding: TypeAlias = bool | Literal["up", "down"] | None

# Absolute units and their length in milliseconds
SCALES: dict[str, int] = {
    "millis": 1,
    "seconds": SECOND,
    "minutes": MINUTE,
    "hours": HOUR,
    "days": DAY,
}

DurationLike: TypeAlias = "Duration | timedelta | Mapping[str, float]"


@dataclass(frozen=True, order=True)
class Duration:
    millis: int

    def __post_init__(self) -> None:
        if isinstance(self.millis, bool) or not isinstance(self.millis, int):
            raise InvalidInput(
                f"Duration millis must be an int, got {self.millis!r}\n"
                f"Hint: use Duration.of(seconds=1.5) for fractional units"
            )

    @classmethod
    def of(cls, bag: "DurationLike | None" = None, /, **fields: float) -> "Duration":
        """Create a duration by summing absolute units.

        Args:
            bag: Mapping of unit name to amount, a Duration, or a timedelta
            **fields: Unit amounts (millis, seconds, minutes, hours, days)

        Example:
            >>> Duration.of(hours=2, minutes=30).minutes()
            150.0
            >>> Duration.of({"days": 1}).iso()
            'P1D'
        """
        if isinstance(bag, Duration):
            return cls(bag.millis + cls.of(**fields).millis)
        if isinstance(bag, timedelta):
            base = bag // timedelta(milliseconds=1)
            return cls(base + cls.of(**fields).millis)
        if bag is not None and not isinstance(bag, Mapping):
            raise InvalidInput(
                f"Cannot build a duration from {type(bag).__name__!r}: {bag!r}\n"
                f"Example: Duration.of(hours=1) or Duration.of({{'hours': 1}})"
            )
        # Units given both in the bag and as keywords are summed
        return cls(total_millis(bag or {}, fields))

    @classmethod
    def between(cls, start: "InstantLike", end: "InstantLike") -> "Duration":
        """Signed duration from ``start`` to ``end`` (negative if end is earlier)."""
        # Import at runtime to avoid circular dependency
        from millis.instant import Instant

        return cls(Instant.of(end).millis - Instant.of(start).millis)

    @classmethod
    def from_days(cls, days: float) -> "Duration":
        return cls.of(days=days)

    @classmethod
    def from_hours(cls, hours: float) -> "Duration":
        return cls.of(hours=hours)

    @classmethod
    def from_minutes(cls, minutes: float) -> "Duration":
        return cls.of(minutes=minutes)

    @classmethod
    def from_seconds(cls, seconds: float) -> "Duration":
        return cls.of(seconds=seconds)

    @classmethod
    def from_millis(cls, millis: float) -> "Duration":
        return cls.of(millis=millis)

    def as_millis(self, *, round: Rounding = None) -> float:
        return _rounded(self.millis, round)

    def seconds(self, *, round: Rounding = None) -> float:
        return _rounded(self.millis / SECOND, round)

    def minutes(self, *, round: Rounding = None) -> float:
        return _rounded(self.millis / MINUTE, round)

    def hours(self, *, round: Rounding = None) -> float:
        return _rounded(self.millis / HOUR, round)

    def days(self, *, round: Rounding = None) -> float:
        """Length in days.

        Args:
            round: None for the exact value, True for the nearest integer
                (halves round up), "up" for the ceiling, "down" for the floor

        Example:
            >>> d = Duration.from_hours(25)
            >>> d.days(round="up"), d.days(round="down"), d.days(round=True)
            (2, 1, 1)
        """
        return _rounded(self.millis / DAY, round)

    def plus(
        self, other: "DurationLike | None" = None, /, **fields: float
    ) -> "Duration":
        return Duration(self.millis + Duration.of(other, **fields).millis)

    def minus(
        self, other: "DurationLike | None" = None, /, **fields: float
    ) -> "Duration":
        return Duration(self.millis - Duration.of(other, **fields).millis)

    def abs(self) -> "Duration":
        return Duration(abs(self.millis))

    def iso(self) -> str:
        """ISO-8601 duration, e.g. ``P2DT4H12M30S``.

        Zero components are omitted and sub-second remainders are dropped.
        Negative durations serialize their magnitude with a leading ``-``.
        """
        magnitude = abs(self.millis)
        days, rest = divmod(magnitude, DAY)
        hours, rest = divmod(rest, HOUR)
        minutes, rest = divmod(rest, MINUTE)
        seconds = rest // SECOND

        iso = "P"
        if days:
            iso += f"{days}D"
        if hours or minutes or seconds:
            iso += "T"
            if hours:
                iso += f"{hours}H"
            if minutes:
                iso += f"{minutes}M"
            if seconds:
                iso += f"{seconds}S"

        if iso == "P":
            return "PT0S"
        return f"-{iso}" if self.millis < 0 else iso

    def to_timedelta(self) -> timedelta:
        return timedelta(milliseconds=self.millis)

    def __add__(self, other: "Duration") -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self.millis + other.millis)

    def __sub__(self, other: "Duration") -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self.millis - other.millis)

    def __neg__(self) -> "Duration":
        return Duration(-self.millis)

    def __abs__(self) -> "Duration":
        return self.abs()

    def __int__(self) -> int:
        return self.millis

    @override
    def __str__(self) -> str:
        return self.iso()


def total_millis(*bags: Mapping[str, Any]) -> int:
    """Sum mappings of absolute units into whole milliseconds.

    A fractional total is rounded to the nearest millisecond with halves
    rounded up, the same rule as ``round=True``.
    """
    unknown = {unit for bag in bags for unit in bag} - set(SCALES)
    if unknown:
        relative = unknown & {"months", "years"}
        hint = (
            "Months and years are not fixed-length; "
            "use Instant.plus(months=...) instead"
            if relative
            else f"Valid units: {', '.join(SCALES)}"
        )
        raise InvalidInput(
            f"Unknown duration units: {', '.join(sorted(map(str, unknown)))}\n{hint}"
        )

    total: float = 0
    for bag in bags:
        for unit, amount in bag.items():
            if amount is None:
                continue
            if isinstance(amount, bool) or not isinstance(amount, (int, float)):
                raise InvalidInput(
                    f"Duration {unit} must be a number, got {amount!r}"
                )
            if not math.isfinite(amount):
                raise InvalidInput(f"Duration {unit} must be finite, got {amount!r}")
            total += amount * SCALES[unit]
    return total if isinstance(total, int) else _rounded(total, True)


def _rounded(value: float, policy: Rounding) -> float:
    if policy is None or policy is False:
        return value
    if policy is True:
        # Halves round towards positive infinity: 2.5 -> 3, -2.5 -> -2
        return math.floor(value + 0.5)
    if policy == "up":
        return math.ceil(value)
    if policy == "down":
        return math.floor(value)
    raise InvalidInput(
        f"Invalid rounding policy: {policy!r}\n"
        f"Use round=True, round='up' or round='down'"
    )


__all__ = ["Duration", "DurationLike", "Rounding", "SCALES", "total_millis"]
