"""Coercion of the values accepted wherever an instant is expected.

``to_millis`` discriminates the input union in a fixed order: numbers,
then strings, then native date handles, then objects exposing an epoch
accessor, then component mappings. The order matters because a value may
satisfy more than one shape (a ``bool`` is an ``int``, a ``datetime`` has a
``timestamp()`` method).
"""

import logging
import math
import re
from collections.abc import Mapping
from datetime import date, datetime, timedelta, timezone
from typing import Any

from millis import civil
from millis.errors import InvalidInput
from millis.util import DAY, MINUTE

logger = logging.getLogger(__name__)

_YEAR = r"(?P<year>[+-]\d{6}|\d{4})"

_TIMESTAMP = re.compile(
    _YEAR
    + r"-(?P<month>\d{2})-(?P<day>\d{2})"
    r"[T ](?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:\.(?P<fraction>\d{1,9}))?)?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})?"
)
_CALENDAR_DATE = re.compile(_YEAR + r"-(?P<month>\d{2})-(?P<day>\d{2})")
_ORDINAL_DATE = re.compile(_YEAR + r"-(?P<day_of_year>\d{3})")
_YEAR_ONLY = re.compile(_YEAR)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_TIME_KEYS = ("hour", "minute", "second", "millisecond")
_COMPONENT_KEYS = frozenset(
    ("year", "month", "day_of_month", "day_of_year", *_TIME_KEYS)
)

_ACCEPTED = (
    "Accepted values:\n"
    "  1704067200000                      # int epoch milliseconds\n"
    "  '2024-01-01T00:00:00.000Z'         # ISO timestamp\n"
    "  '2024', '2024-02-29', '2024-060'   # ISO year, date, ordinal date\n"
    "  datetime(2024, 1, 1, tzinfo=timezone.utc) or date(2024, 1, 1)\n"
    "  {'year': 2024, 'month': 2, 'day_of_month': 29}\n"
    "  {'year': 2024, 'day_of_year': 60}\n"
    "  another Instant"
)


def to_millis(value: Any) -> int:
    """Convert any accepted instant-like value to epoch milliseconds.

    Raises:
        InvalidInput: If the shape is not recognized or the value is invalid
    """
    if isinstance(value, bool) or value is None:
        return _reject(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return from_number(value)
    if isinstance(value, str):
        return from_iso(value)
    if isinstance(value, (datetime, date)):
        return from_native(value)
    accessor = _epoch_accessor(value)
    if accessor is not None:
        return accessor
    if isinstance(value, Mapping):
        return from_components(value)
    return _reject(value)


def from_number(value: float) -> int:
    if not math.isfinite(value):
        logger.debug("rejecting non-finite timestamp %r", value)
        raise InvalidInput(
            f"Cannot build an instant from a non-finite number: {value!r}"
        )
    return int(value)


def from_iso(text: str) -> int:
    """Parse one of the supported ISO-8601 shapes.

    Naive timestamps are read as UTC. Basic-format strings such as
    ``20240229`` are rejected rather than guessed at.
    """
    stripped = text.strip()

    match = _TIMESTAMP.fullmatch(stripped)
    if match:
        logger.debug("parsing %r as an ISO timestamp", text)
        fraction = (match["fraction"] or "").ljust(3, "0")[:3]
        millis = _validated(
            text,
            _year(match["year"]),
            int(match["month"]),
            int(match["day"]),
            int(match["hour"]),
            int(match["minute"]),
            int(match["second"] or 0),
            int(fraction),
        )
        return millis - _offset_millis(text, match["offset"])

    match = _CALENDAR_DATE.fullmatch(stripped)
    if match:
        logger.debug("parsing %r as an ISO calendar date", text)
        return _validated(
            text, _year(match["year"]), int(match["month"]), int(match["day"])
        )

    match = _ORDINAL_DATE.fullmatch(stripped)
    if match:
        logger.debug("parsing %r as an ISO ordinal date", text)
        return _ordinal(_year(match["year"]), int(match["day_of_year"]))

    match = _YEAR_ONLY.fullmatch(stripped)
    if match:
        logger.debug("parsing %r as an ISO year", text)
        return civil.join(_year(match["year"]), 1, 1)

    logger.debug("no ISO shape matches %r", text)
    raise InvalidInput(
        f"Invalid date string: {text!r}\n"
        f"Supported shapes: YYYY-MM-DDTHH:mm:ss.sssZ, YYYY, YYYY-MM-DD, YYYY-DDD"
    )


def from_native(value: date) -> int:
    """Convert a ``datetime`` (naive means UTC) or ``date`` to milliseconds."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return (value - _EPOCH) // timedelta(milliseconds=1)
    return civil.join(value.year, value.month, value.day)


def from_components(bag: Mapping[str, Any]) -> int:
    """Build milliseconds from a calendar or ordinal component mapping.

    Calendar bags (``year``, ``month``, ``day_of_month``) must round-trip:
    February 30 is an error, not March 1.
    """
    unknown = set(bag) - _COMPONENT_KEYS
    if unknown:
        raise InvalidInput(
            f"Unknown date components: {', '.join(sorted(map(str, unknown)))}\n"
            f"Valid components: {', '.join(sorted(_COMPONENT_KEYS))}"
        )
    for key, component in bag.items():
        if isinstance(component, bool) or not isinstance(component, int):
            raise InvalidInput(
                f"Date component {key!r} must be an int, got {component!r}"
            )
    if "year" not in bag:
        return _reject(bag)

    year = bag["year"]
    time = [bag.get(key, 0) for key in _TIME_KEYS]

    if "day_of_year" in bag:
        if "month" in bag or "day_of_month" in bag:
            raise InvalidInput(
                "Date components must use either month/day_of_month or "
                f"day_of_year, not both: {dict(bag)!r}"
            )
        start = _ordinal(year, bag["day_of_year"])
        hour, minute, second, millisecond = time
        fields = civil.split(start)
        return _validated(
            bag, year, fields.month, fields.day, hour, minute, second, millisecond
        )

    if "month" in bag and "day_of_month" in bag:
        return _validated(bag, year, bag["month"], bag["day_of_month"], *time)

    return _reject(bag)


def _epoch_accessor(value: Any) -> int | None:
    """Read epoch milliseconds from an object exposing an epoch accessor.

    Objects with a zero-argument ``millis()`` method returning an int are
    read directly; objects with a ``timestamp()`` method returning epoch
    seconds (pandas, arrow) are scaled. A plain ``millis`` attribute is not
    an accessor: durations and intervals carry one that is a length.
    """
    millis = getattr(value, "millis", None)
    if callable(millis):
        millis = millis()
        if isinstance(millis, int) and not isinstance(millis, bool):
            return millis

    timestamp = getattr(value, "timestamp", None)
    if callable(timestamp):
        seconds = timestamp()
        if isinstance(seconds, (int, float)) and not isinstance(seconds, bool):
            return from_number(seconds * 1000)
    return None


def _ordinal(year: int, day_of_year: int) -> int:
    if not 1 <= day_of_year <= civil.days_in_year(year):
        logger.debug("day %d is outside year %d", day_of_year, year)
        raise InvalidInput(f"Invalid day of year: {day_of_year} for year {year}")
    return (civil.days_from_civil(year, 1, 1) + day_of_year - 1) * DAY


def _validated(
    source: Any,
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    millisecond: int = 0,
) -> int:
    """Join fields into milliseconds, rejecting combinations that roll over."""
    expected = civil.Fields(year, month, day, hour, minute, second, millisecond)
    if 1 <= month <= 12:
        millis = civil.join(*expected)
        if civil.split(millis) == expected:
            return millis
    logger.debug("components %r do not round-trip", expected)
    raise InvalidInput(
        f"Invalid date components: {source!r}\n"
        f"Hint: check for out-of-range values such as February 30 or hour 24"
    )


def _year(text: str) -> int:
    year = int(text)
    if text == "-000000":
        raise InvalidInput("Invalid extended year: -000000")
    return year


def _offset_millis(text: str, offset: str | None) -> int:
    if offset is None or offset == "Z":
        return 0
    sign = -1 if offset[0] == "-" else 1
    hours, minutes = int(offset[1:3]), int(offset[4:6])
    if hours > 23 or minutes > 59:
        raise InvalidInput(f"Invalid UTC offset {offset!r} in {text!r}")
    return sign * (hours * 60 + minutes) * MINUTE


def _reject(value: Any) -> int:
    logger.debug("unrecognized instant shape: %r", value)
    raise InvalidInput(
        f"Cannot build an instant from {type(value).__name__!r}: {value!r}\n"
        f"{_ACCEPTED}"
    )


__all__ = ["to_millis", "from_number", "from_iso", "from_native", "from_components"]
