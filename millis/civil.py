"""Proleptic Gregorian calendar arithmetic on day numbers.

Day numbers count days since 1970-01-01 (day 0) and may be negative.
The conversions work for any year, including years before 1 and after 9999,
which is why they don't go through ``datetime.date``.
"""

from typing import NamedTuple

from millis.util import DAY, HOUR, MINUTE, SECOND

# Days in a 400-year cycle and offset of 0000-03-01 from the epoch
_DAYS_PER_ERA = 146_097
_EPOCH_SHIFT = 719_468

_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


class Fields(NamedTuple):
    """Calendar fields of a UTC millisecond timestamp."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    millisecond: int


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def days_in_month(year: int, month: int) -> int:
    if month == 2 and is_leap_year(year):
        return 29
    return _MONTH_DAYS[month - 1]


def days_from_civil(year: int, month: int, day: int) -> int:
    """Return the day number of a (year, month, day) triple.

    Month must be 1-13, 13 being January of the following year. Day is not
    range checked, so day 0 or day 32 land on the neighbouring month.
    """
    year -= month <= 2
    era = year // 400
    year_of_era = year - era * 400
    # March-based month index: Mar=0 ... Feb=11
    shifted_month = (month + 9) % 12
    day_of_year = (153 * shifted_month + 2) // 5 + day - 1
    day_of_era = (
        year_of_era * 365 + year_of_era // 4 - year_of_era // 100 + day_of_year
    )
    return era * _DAYS_PER_ERA + day_of_era - _EPOCH_SHIFT


def civil_from_days(days: int) -> tuple[int, int, int]:
    """Return the (year, month, day) triple of a day number."""
    days += _EPOCH_SHIFT
    era = days // _DAYS_PER_ERA
    day_of_era = days - era * _DAYS_PER_ERA
    year_of_era = (
        day_of_era
        - day_of_era // 1460
        + day_of_era // 36524
        - day_of_era // 146096
    ) // 365
    day_of_year = day_of_era - (
        365 * year_of_era + year_of_era // 4 - year_of_era // 100
    )
    shifted_month = (5 * day_of_year + 2) // 153
    day = day_of_year - (153 * shifted_month + 2) // 5 + 1
    month = shifted_month + 3 if shifted_month < 10 else shifted_month - 9
    year = year_of_era + era * 400 + (month <= 2)
    return year, month, day


def split(millis: int) -> Fields:
    """Decompose epoch milliseconds into UTC calendar fields."""
    days, rest = divmod(millis, DAY)
    year, month, day = civil_from_days(days)
    hour, rest = divmod(rest, HOUR)
    minute, rest = divmod(rest, MINUTE)
    second, millisecond = divmod(rest, SECOND)
    return Fields(year, month, day, hour, minute, second, millisecond)


def join(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    millisecond: int = 0,
) -> int:
    """Compose UTC calendar fields into epoch milliseconds.

    Out-of-range time fields roll over into the next unit; callers that
    need strict validation compare ``split(join(...))`` with their input.
    """
    return (
        days_from_civil(year, month, day) * DAY
        + hour * HOUR
        + minute * MINUTE
        + second * SECOND
        + millisecond
    )
