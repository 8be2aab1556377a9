"""String rendering of instants.

A small closed set of literal patterns is built in. Anything richer, such as
locale-aware output, is delegated to a formatter: any object with a
``format(datetime) -> str`` method (e.g. a Babel or strftime wrapper).
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any, Literal, Protocol, TypeAlias, runtime_checkable

from millis import civil
from millis.errors import UnsupportedFormat

Pattern: TypeAlias = Literal["YYYY", "YYYY-DDD", "YYYY-MM-DD", "HH:mm:ss"]


@runtime_checkable
class Formatter(Protocol):
    def format(self, value: datetime, /) -> str: ...


def _year(fields: civil.Fields) -> str:
    if 0 <= fields.year <= 9999:
        return f"{fields.year:04d}"
    return f"{fields.year:+07d}"


def _ordinal_date(fields: civil.Fields) -> str:
    start = civil.days_from_civil(fields.year, 1, 1)
    day = civil.days_from_civil(fields.year, fields.month, fields.day)
    day_of_year = day - start + 1
    return f"{_year(fields)}-{day_of_year:03d}"


def _calendar_date(fields: civil.Fields) -> str:
    return f"{_year(fields)}-{fields.month:02d}-{fields.day:02d}"


def _clock_time(fields: civil.Fields) -> str:
    return f"{fields.hour:02d}:{fields.minute:02d}:{fields.second:02d}"


PATTERNS: dict[str, Callable[[civil.Fields], str]] = {
    "YYYY": _year,
    "YYYY-DDD": _ordinal_date,
    "YYYY-MM-DD": _calendar_date,
    "HH:mm:ss": _clock_time,
}


def iso(millis: int) -> str:
    """Render ``YYYY-MM-DDTHH:mm:ss.sssZ`` (extended ``±YYYYYY`` years)."""
    fields = civil.split(millis)
    return (
        f"{_calendar_date(fields)}T{_clock_time(fields)}"
        f".{fields.millisecond:03d}Z"
    )


def render(millis: int, spec: Any, native: Callable[[], datetime]) -> str:
    """Format ``millis`` with a built-in pattern or a formatter capability.

    ``native`` builds the datetime handed to formatters; it is only called
    when a formatter is used.

    Raises:
        UnsupportedFormat: If spec is neither a known pattern nor a formatter
    """
    if isinstance(spec, str):
        pattern = PATTERNS.get(spec)
        if pattern is None:
            raise UnsupportedFormat(
                f"Unsupported format: {spec}\n"
                f"Built-in patterns: {', '.join(PATTERNS)}\n"
                f"For anything else pass a formatter with a format(datetime) method"
            )
        return pattern(civil.split(millis))
    # Protocol checks only see that the attribute exists
    if isinstance(spec, Formatter) and callable(spec.format):
        return spec.format(native())
    raise UnsupportedFormat(
        f"Unsupported format: {spec!r}\n"
        f"Expected one of {', '.join(PATTERNS)} or an object with a "
        f"format(datetime) method"
    )


__all__ = ["Formatter", "Pattern", "PATTERNS", "iso", "render"]
