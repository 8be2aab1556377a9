"""Calendar-aware arithmetic on epoch milliseconds.

A calendar delta mixes relative units (years, months), whose length depends
on where they are applied, with absolute units (days down to milliseconds).
Relative units are resolved first, against the calendar position of the
original instant, and clamp the day-of-month instead of rolling over:

    2024-01-31 + 1 month  -> 2024-02-29
    2025-01-31 + 1 month  -> 2025-02-28
    2024-02-29 + 1 month  -> 2024-03-29

Absolute units are then added as plain milliseconds, so
``{"months": 1, "days": 1}`` from Jan 31 lands on Mar 1 in a leap year.

Years and months given together are applied as one combined shift, not as
two sequential clamped shifts: 2024-02-29 minus 1 year and 12 months is
2022-02-28.
"""

import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from datetime import timedelta
from typing import Any, Literal, TypeAlias

from dateutil.relativedelta import relativedelta

from millis import civil
from millis.duration import Duration, total_millis
from millis.errors import InvalidInput
from millis.util import DAY

logger = logging.getLogger(__name__)

DeltaLike: TypeAlias = (
    "CalendarDelta | Duration | timedelta | relativedelta | Mapping[str, float]"
)

# relativedelta attributes that set absolute fields rather than shift them
_ABSOLUTE_RELATIVEDELTA_FIELDS = (
    "year",
    "month",
    "day",
    "weekday",
    "hour",
    "minute",
    "second",
    "microsecond",
)


@dataclass(frozen=True, kw_only=True)
class CalendarDelta:
    """A mixed calendar delta: relative years/months plus absolute units."""

    years: int = 0
    months: int = 0
    days: float = 0
    hours: float = 0
    minutes: float = 0
    seconds: float = 0
    millis: float = 0

    def __post_init__(self) -> None:
        for name in ("years", "months"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInput(
                    f"Calendar delta {name} must be an int, got {value!r}\n"
                    f"Hint: fractional months are not well-defined; "
                    f"use days or hours instead"
                )
        # Validates the absolute units eagerly
        self.absolute()

    @classmethod
    def coerce(
        cls, value: "DeltaLike | None" = None, /, **extra: float
    ) -> "CalendarDelta":
        """Build a delta from any accepted delta shape plus keyword units.

        Accepts a CalendarDelta, a Duration, a timedelta, a dateutil
        relativedelta (relative fields only), or a mapping of unit names.
        """
        if value is None:
            bag: dict[str, Any] = {}
        elif isinstance(value, CalendarDelta):
            bag = asdict(value)
        elif isinstance(value, Duration):
            bag = {"millis": value.millis}
        elif isinstance(value, timedelta):
            bag = {"millis": value // timedelta(milliseconds=1)}
        elif isinstance(value, relativedelta):
            bag = _from_relativedelta(value)
        elif isinstance(value, Mapping):
            bag = dict(value)
        else:
            raise InvalidInput(
                f"Cannot use {type(value).__name__!r} as a calendar delta: {value!r}\n"
                f"Examples:\n"
                f"  instant.plus(months=1, days=2)\n"
                f"  instant.plus({{'years': 1}})\n"
                f"  instant.plus(Duration.from_hours(3))"
            )

        for key, amount in extra.items():
            bag[key] = bag.get(key, 0) + amount

        valid = {field.name for field in fields(cls)}
        unknown = sorted(map(str, set(bag) - valid))
        if unknown:
            raise InvalidInput(
                f"Unknown calendar delta units: {', '.join(unknown)}\n"
                f"Valid units: {', '.join(field.name for field in fields(cls))}"
            )
        return cls(**{key: amount for key, amount in bag.items() if amount is not None})

    @property
    def is_relative(self) -> bool:
        return bool(self.years or self.months)

    def absolute(self) -> Duration:
        """The fixed-length part of the delta."""
        return Duration(
            total_millis(
                {
                    "days": self.days,
                    "hours": self.hours,
                    "minutes": self.minutes,
                    "seconds": self.seconds,
                    "millis": self.millis,
                }
            )
        )


def relative_offset(millis: int, *, years: int = 0, months: int = 0) -> int:
    """Signed milliseconds that shift ``millis`` by years and months.

    The day-of-month is clamped to the length of the target month and the
    time of day is kept.
    """
    if not years and not months:
        return 0

    day_number, time_of_day = divmod(millis, DAY)
    year, month, day = civil.civil_from_days(day_number)

    # Work from the first of the month so a short target month can't roll over
    total_months = (year + years) * 12 + (month - 1) + months
    target_year, target_month = divmod(total_months, 12)
    target_month += 1

    last_day = civil.days_in_month(target_year, target_month)
    if day > last_day:
        logger.debug(
            "clamping day %d to %d for %d-%02d",
            day,
            last_day,
            target_year,
            target_month,
        )
    target_day = min(day, last_day)

    target = (
        civil.days_from_civil(target_year, target_month, target_day) * DAY
        + time_of_day
    )
    return target - millis


def shift(millis: int, delta: CalendarDelta, sign: Literal[1, -1] = 1) -> int:
    """Apply ``delta`` to ``millis`` forwards (sign=1) or backwards (sign=-1).

    The relative part is resolved against the original instant, then the
    absolute part is added on top.
    """
    offset = relative_offset(
        millis, years=sign * delta.years, months=sign * delta.months
    )
    return millis + offset + sign * delta.absolute().millis


def _from_relativedelta(value: relativedelta) -> dict[str, Any]:
    absolute = [
        name
        for name in _ABSOLUTE_RELATIVEDELTA_FIELDS
        if getattr(value, name, None) is not None
    ]
    if absolute or value.leapdays:
        raise InvalidInput(
            f"relativedelta with absolute fields cannot be used as a delta: {value!r}\n"
            f"Only relative fields (years, months, weeks, days, hours, minutes, "
            f"seconds, microseconds) are supported"
        )
    return {
        "years": value.years,
        "months": value.months,
        "days": value.days,
        "hours": value.hours,
        "minutes": value.minutes,
        "seconds": value.seconds,
        "millis": value.microseconds / 1000,
    }


__all__ = ["CalendarDelta", "DeltaLike", "relative_offset", "shift"]
