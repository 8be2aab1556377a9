"""Tests for proleptic Gregorian day-number conversions."""

from datetime import date

from millis import civil
from millis.util import DAY


def test_epoch_is_day_zero():
    """Test that 1970-01-01 is day 0 in both directions."""
    assert civil.days_from_civil(1970, 1, 1) == 0
    assert civil.civil_from_days(0) == (1970, 1, 1)


def test_day_before_epoch():
    """Test that negative day numbers land before 1970."""
    assert civil.civil_from_days(-1) == (1969, 12, 31)
    assert civil.days_from_civil(1969, 12, 31) == -1


def test_known_day_numbers():
    """Test day numbers around a leap February."""
    assert civil.days_from_civil(2000, 1, 1) == 10957
    # Jan (31) + Feb (29) in 2000
    assert civil.days_from_civil(2000, 3, 1) == 10957 + 60


def test_matches_stdlib_across_datetime_range():
    """Test agreement with datetime.date for years 1-9999."""
    epoch_ordinal = date(1970, 1, 1).toordinal()
    first = date(1, 1, 1).toordinal() - epoch_ordinal
    last = date(9999, 12, 31).toordinal() - epoch_ordinal

    for days in range(first, last + 1, 373):
        expected = date.fromordinal(epoch_ordinal + days)
        assert civil.civil_from_days(days) == (
            expected.year,
            expected.month,
            expected.day,
        )
        assert (
            civil.days_from_civil(expected.year, expected.month, expected.day)
            == days
        )


def test_round_trip_outside_datetime_range():
    """Test that years before 1 and after 9999 round-trip."""
    for year, month, day in [(0, 2, 29), (-1, 12, 31), (-4713, 11, 24), (12345, 6, 7)]:
        days = civil.days_from_civil(year, month, day)
        assert civil.civil_from_days(days) == (year, month, day)


def test_leap_years():
    """Test the Gregorian leap year rule."""
    assert civil.is_leap_year(2024)
    assert civil.is_leap_year(2000)
    assert civil.is_leap_year(0)
    assert not civil.is_leap_year(2023)
    assert not civil.is_leap_year(1900)
    assert not civil.is_leap_year(2100)


def test_month_and_year_lengths():
    """Test days_in_month and days_in_year."""
    assert civil.days_in_month(2024, 2) == 29
    assert civil.days_in_month(2025, 2) == 28
    assert civil.days_in_month(2024, 4) == 30
    assert civil.days_in_month(2024, 12) == 31
    assert civil.days_in_year(2024) == 366
    assert civil.days_in_year(2025) == 365


def test_split_and_join():
    """Test decomposing and recomposing millisecond timestamps."""
    assert civil.split(-1) == civil.Fields(1969, 12, 31, 23, 59, 59, 999)
    assert civil.join(1969, 12, 31, 23, 59, 59, 999) == -1

    millis = civil.join(2024, 3, 15, 12, 34, 56, 789)
    assert civil.split(millis) == (2024, 3, 15, 12, 34, 56, 789)


def test_join_rolls_over_out_of_range_fields():
    """Test that join rolls over out-of-range fields instead of validating."""
    assert civil.join(2024, 2, 30) == civil.join(2024, 3, 1)
    assert civil.join(2024, 1, 1, 24) == civil.join(2024, 1, 2)
    assert civil.join(2024, 13, 1) == civil.join(2025, 1, 1)
    assert civil.join(2024, 1, 2) - civil.join(2024, 1, 1) == DAY
