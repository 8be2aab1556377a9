"""Tests for calendar-aware shifting of instants."""

import logging
from datetime import timedelta

import pytest
from dateutil.relativedelta import relativedelta

from millis import CalendarDelta, Duration, Instant, InvalidInput
from millis.arithmetic import relative_offset, shift
from millis.util import DAY


def at(text: str) -> Instant:
    return Instant.of(text)


def test_month_end_clamps():
    """Test that adding months clamps to the end of shorter months."""
    assert at("2024-01-31").plus(months=1).iso() == "2024-02-29T00:00:00.000Z"
    assert at("2025-01-31").plus(months=1).iso() == "2025-02-28T00:00:00.000Z"
    assert at("2024-02-29").plus(months=1).iso() == "2024-03-29T00:00:00.000Z"
    assert at("2024-03-31").minus(months=1).iso() == "2024-02-29T00:00:00.000Z"
    assert at("2024-05-31").plus(months=1).iso() == "2024-06-30T00:00:00.000Z"


def test_leap_day_plus_year():
    """Test that Feb 29 plus a year lands on Feb 28."""
    assert at("2024-02-29").plus(years=1).iso() == "2025-02-28T00:00:00.000Z"
    assert at("2024-02-29").plus(years=4).iso() == "2028-02-29T00:00:00.000Z"


def test_time_of_day_is_kept():
    """Test that relative shifts keep hours, minutes and milliseconds."""
    value = at("2024-01-31T10:30:15.250Z")

    assert value.plus(months=1).iso() == "2024-02-29T10:30:15.250Z"
    assert value.minus(years=1).iso() == "2023-01-31T10:30:15.250Z"


def test_relative_then_absolute():
    """Test that absolute units are added after the clamped relative shift."""
    assert at("2024-01-31").plus(months=1, days=1).iso() == (
        "2024-03-01T00:00:00.000Z"
    )
    assert at("2025-01-31").plus(months=1, days=1).iso() == (
        "2025-03-01T00:00:00.000Z"
    )
    assert at("2024-01-31").plus({"months": 1, "days": 1, "hours": 2}).iso() == (
        "2024-03-01T02:00:00.000Z"
    )
    assert at("2024-02-29").plus({"months": 1, "days": 2, "hours": 12}).iso() == (
        "2024-03-31T12:00:00.000Z"
    )


def test_minus_mirrors_plus():
    """Test backwards shifts with mixed units."""
    assert at("2024-03-31").minus({"months": 1, "days": 2, "hours": 12}).iso() == (
        "2024-02-26T12:00:00.000Z"
    )
    assert at("2024-02-29").minus({"months": 1, "days": 1, "hours": 2}).iso() == (
        "2024-01-27T22:00:00.000Z"
    )


def test_years_and_months_combine():
    """Test that years and months are applied as one shift."""
    assert at("2024-02-29").minus(years=1, months=12).iso() == (
        "2022-02-28T00:00:00.000Z"
    )
    assert at("2024-02-29").minus({"months": 13, "years": 1}).iso() == (
        "2022-01-29T00:00:00.000Z"
    )
    assert at("2024-03-31").plus(years=1, months=-1).iso() == (
        "2025-02-28T00:00:00.000Z"
    )


def test_month_shifts_do_not_invert():
    """Test that clamping loses information on the way back."""
    there_and_back = at("2024-01-31").plus(months=1).minus(months=1)
    assert there_and_back.iso() == "2024-01-29T00:00:00.000Z"


def test_absolute_shifts_invert():
    """Test that fixed-length shifts round-trip exactly."""
    instants = [at("2024-01-31"), Instant.of(-1), at("2024-12-31T23:59:59.999Z")]
    deltas = [
        Duration.from_hours(25),
        Duration.of(days=400, millis=7),
        Duration.from_minutes(-90),
    ]
    for value in instants:
        for delta in deltas:
            assert value.plus(delta).minus(delta) == value


def test_shifts_before_epoch():
    """Test month arithmetic on negative millis."""
    assert at("1969-12-31").plus(months=2).iso() == "1970-02-28T00:00:00.000Z"
    assert at("1970-03-31T06:00:00.000Z").minus(months=1).iso() == (
        "1970-02-28T06:00:00.000Z"
    )


def test_native_deltas():
    """Test Duration, timedelta and relativedelta deltas."""
    start = at("2024-01-31")

    assert start.plus(Duration.from_hours(1)).hour == 1
    assert start.plus(timedelta(hours=1)).hour == 1
    assert start.plus(relativedelta(months=1)).iso() == "2024-02-29T00:00:00.000Z"
    assert start.plus(relativedelta(weeks=1)).iso() == "2024-02-07T00:00:00.000Z"
    assert start.plus(relativedelta(years=1, months=13)) == start.plus(
        years=1, months=13
    )


def test_rejects_absolute_relativedelta():
    """Test that relativedelta fields that set values are rejected."""
    with pytest.raises(InvalidInput, match="absolute fields"):
        at("2024-01-31").plus(relativedelta(day=1))

    with pytest.raises(InvalidInput, match="absolute fields"):
        at("2024-01-31").plus(relativedelta(leapdays=1))


def test_rejects_bad_deltas():
    """Test unknown units, fractional months and unsupported shapes."""
    with pytest.raises(InvalidInput, match="Unknown calendar delta units: weeks"):
        at("2024-01-31").plus(weeks=1)

    with pytest.raises(InvalidInput, match="months must be an int"):
        at("2024-01-31").plus(months=1.5)

    with pytest.raises(InvalidInput, match="Cannot use 'str' as a calendar delta"):
        at("2024-01-31").plus("P1D")

    with pytest.raises(InvalidInput, match="must be finite"):
        at("2024-01-31").plus(days=float("inf"))


def test_calendar_delta_coerce():
    """Test building deltas from mixed inputs."""
    delta = CalendarDelta.coerce(Duration.from_hours(1), minutes=30)
    assert delta.absolute().millis == 5_400_000
    assert not delta.is_relative

    merged = CalendarDelta.coerce({"days": 1, "months": 2}, days=2)
    assert merged.days == 3
    assert merged.months == 2
    assert merged.is_relative

    assert CalendarDelta.coerce(merged) == merged
    assert CalendarDelta.coerce() == CalendarDelta()


def test_relative_offset():
    """Test the relative part in isolation."""
    jan31 = at("2024-01-31").millis

    assert relative_offset(jan31, months=1) == 29 * DAY
    assert relative_offset(jan31) == 0
    assert relative_offset(jan31, years=-1) == -365 * DAY


def test_shift_signs():
    """Test shift forwards and backwards by the same delta."""
    mar31 = at("2024-03-31").millis
    delta = CalendarDelta(months=1, days=1)

    assert shift(mar31, delta) == at("2024-05-01").millis
    assert shift(mar31, delta, -1) == at("2024-02-28").millis


def test_clamping_is_logged(caplog):
    """Test that clamped month ends are logged at debug level."""
    with caplog.at_level(logging.DEBUG, logger="millis.arithmetic"):
        at("2024-01-31").plus(months=1)

    assert "clamping day 31 to 29 for 2024-02" in caplog.text
