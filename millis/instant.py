from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import TypeAlias, overload

from typing_extensions import override

from millis import civil, formatting, parse
from millis.arithmetic import CalendarDelta, DeltaLike, shift
from millis.clock import Clock, read as read_clock
from millis.duration import Duration
from millis.errors import InvalidInput
from millis.util import (
    DAY,
    FIXED_UNITS,
    HOUR,
    MAX_MILLIS,
    MINUTE,
    SECOND,
    UNITS,
    Unit,
)

InstantLike: TypeAlias = (
    "Instant | int | float | str | datetime | date | Mapping[str, int]"
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True, order=True)
class Instant:
    """A UTC point in time, stored as signed epoch milliseconds.

    Instants are immutable; every operation returns a new instance.

    Example:
        >>> jan31 = Instant.of("2024-01-31T00:00:00.000Z")
        >>> jan31.plus(months=1).iso()
        '2024-02-29T00:00:00.000Z'
    """

    millis: int

    def __post_init__(self) -> None:
        if isinstance(self.millis, bool) or not isinstance(self.millis, int):
            raise InvalidInput(
                f"Instant millis must be an int, got {self.millis!r}\n"
                f"Hint: use Instant.of(value) to convert other values"
            )
        if abs(self.millis) > MAX_MILLIS:
            raise InvalidInput(
                f"Instant millis out of range: {self.millis}\n"
                f"Instants must lie within {MAX_MILLIS} ms of the epoch "
                f"(-271821-04-20T00:00:00.000Z to +275760-09-13T00:00:00.000Z)"
            )

    @classmethod
    def now(cls, clock: Clock | None = None) -> "Instant":
        """Current instant, read once from ``clock`` (system clock by default)."""
        return cls(cls.current_millis(clock))

    @staticmethod
    def current_millis(clock: Clock | None = None) -> int:
        return _read_clock(clock)

    @classmethod
    def of(cls, value: InstantLike) -> "Instant":
        """Build an instant from any supported value.

        Accepts epoch milliseconds, ISO-8601 strings (timestamp, ``YYYY``,
        ``YYYY-MM-DD``, ``YYYY-DDD``), ``datetime``/``date`` objects, other
        instants, objects with a ``millis()`` or ``timestamp()`` method, and
        component mappings such as ``{"year": 2024, "day_of_year": 60}``.

        Raises:
            InvalidInput: If the value's shape is unrecognized or it does
                not describe a real date
        """
        if isinstance(value, Instant):
            return value if type(value) is cls else cls(value.millis)
        return cls(parse.to_millis(value))

    # Calendar fields

    @property
    def timestamp(self) -> int:
        """Whole seconds since the epoch (floored)."""
        return self.millis // SECOND

    @property
    def year(self) -> int:
        return self._fields.year

    @property
    def month(self) -> int:
        return self._fields.month

    @property
    def day_of_month(self) -> int:
        return self._fields.day

    @property
    def day_of_year(self) -> int:
        fields = self._fields
        return self._day_number - civil.days_from_civil(fields.year, 1, 1) + 1

    @property
    def day_of_week(self) -> int:
        """ISO weekday: 1 is Monday, 7 is Sunday."""
        # 1970-01-01 was a Thursday
        return (self._day_number + 3) % 7 + 1

    @property
    def hour(self) -> int:
        return self._fields.hour

    @property
    def minute(self) -> int:
        return self._fields.minute

    @property
    def second(self) -> int:
        return self._fields.second

    @property
    def millisecond(self) -> int:
        return self.millis % SECOND

    @property
    def _fields(self) -> civil.Fields:
        return civil.split(self.millis)

    @property
    def _day_number(self) -> int:
        return self.millis // DAY

    # Epoch conversions

    def seconds(self) -> float:
        return self.millis / SECOND

    def minutes(self) -> float:
        return self.millis / MINUTE

    def hours(self) -> float:
        return self.millis / HOUR

    def days(self) -> float:
        return self.millis / DAY

    # Rendering

    def iso(self) -> str:
        return formatting.iso(self.millis)

    def format(self, spec: "formatting.Pattern | formatting.Formatter") -> str:
        """Format with a built-in pattern or a formatter capability.

        Built-in patterns: ``YYYY``, ``YYYY-DDD``, ``YYYY-MM-DD``, ``HH:mm:ss``.
        Any other object with a ``format(datetime)`` method receives
        ``to_datetime()``.

        Raises:
            UnsupportedFormat: For any other spec
        """
        return formatting.render(self.millis, spec, self.to_datetime)

    def to_datetime(self) -> datetime:
        """The instant as an aware ``datetime`` in UTC."""
        try:
            return _EPOCH + timedelta(milliseconds=self.millis)
        except OverflowError as exc:
            raise InvalidInput(
                f"{self.iso()} is outside the range of datetime "
                f"(years 1 to 9999)"
            ) from exc

    # Arithmetic

    def plus(
        self, delta: "DeltaLike | None" = None, /, **units: float
    ) -> "Instant":
        """Shift forwards by a calendar delta.

        Relative units (years, months) clamp to the end of shorter months;
        absolute units (days, hours, minutes, seconds, millis) are added on top.

        Example:
            >>> Instant.of("2024-01-31").plus(months=1, days=1).iso()
            '2024-03-01T00:00:00.000Z'
        """
        return Instant(shift(self.millis, CalendarDelta.coerce(delta, **units), 1))

    def minus(
        self, delta: "DeltaLike | None" = None, /, **units: float
    ) -> "Instant":
        """Shift backwards by a calendar delta; mirror of ``plus``."""
        return Instant(shift(self.millis, CalendarDelta.coerce(delta, **units), -1))

    def __add__(self, other: Duration | timedelta) -> "Instant":
        if not isinstance(other, (Duration, timedelta)):
            return NotImplemented
        return self.plus(other)

    @overload
    def __sub__(self, other: "Instant") -> Duration: ...

    @overload
    def __sub__(self, other: Duration | timedelta) -> "Instant": ...

    def __sub__(self, other: "Instant | Duration | timedelta") -> "Instant | Duration":
        if isinstance(other, Instant):
            return Duration.between(other, self)
        if isinstance(other, (Duration, timedelta)):
            return self.minus(other)
        return NotImplemented

    # Comparison

    def is_before(self, other: InstantLike) -> bool:
        return self.millis < Instant.of(other).millis

    def is_after(self, other: InstantLike) -> bool:
        return self.millis > Instant.of(other).millis

    def is_between(self, start: InstantLike, end: InstantLike) -> bool:
        """True if strictly after ``start`` and strictly before ``end``."""
        return self.is_after(start) and self.is_before(end)

    def equals(self, other: InstantLike) -> bool:
        return self.millis == Instant.of(other).millis

    def compare(self, other: InstantLike) -> int:
        """Signed millisecond difference; negative if self is earlier.

        Usable as a sort comparator via ``functools.cmp_to_key``.
        """
        return self.millis - Instant.of(other).millis

    # Unit boundaries

    def start_of(self, unit: Unit) -> "Instant":
        """Zero out every field smaller than ``unit``."""
        _check_unit(unit)
        if unit in FIXED_UNITS:
            size = FIXED_UNITS[unit]
            return Instant(self.millis // size * size)
        fields = self._fields
        month = fields.month if unit == "month" else 1
        return Instant(civil.join(fields.year, month, 1))

    def end_of(self, unit: Unit) -> "Instant":
        """Last millisecond of the ``unit`` containing this instant."""
        _check_unit(unit)
        if unit in FIXED_UNITS:
            size = FIXED_UNITS[unit]
            return Instant(self.millis // size * size + size - 1)
        fields = self._fields
        if unit == "month":
            # Day 1 of month 13 is January of the next year
            return Instant(civil.join(fields.year, fields.month + 1, 1) - 1)
        return Instant(civil.join(fields.year + 1, 1, 1) - 1)

    def is_start_of(self, unit: Unit) -> bool:
        return self == self.start_of(unit)

    def is_end_of(self, unit: Unit) -> bool:
        return self == self.end_of(unit)

    def is_same(self, unit: Unit, other: InstantLike) -> bool:
        """True if both instants fall in the same ``unit``."""
        return self.start_of(unit) == Instant.of(other).start_of(unit)

    def __int__(self) -> int:
        return self.millis

    @override
    def __str__(self) -> str:
        return self.iso()


def instant(value: "InstantLike | None" = None) -> Instant:
    """Convenience constructor: ``instant()`` is now, otherwise ``Instant.of``.

    Example:
        >>> from millis import instant
        >>> instant("2024-060").format("YYYY-MM-DD")
        '2024-02-29'
    """
    if value is None:
        return Instant.now()
    return Instant.of(value)


def _read_clock(source: Clock | None) -> int:
    millis = read_clock(source)
    if isinstance(millis, bool) or not isinstance(millis, int):
        raise InvalidInput(f"Clock must return int epoch millis, got {millis!r}")
    return millis


def _check_unit(unit: str) -> None:
    if unit not in UNITS:
        raise InvalidInput(
            f"Invalid unit: {unit!r}\n" f"Valid units: {', '.join(UNITS)}"
        )


__all__ = ["Instant", "InstantLike", "instant"]
