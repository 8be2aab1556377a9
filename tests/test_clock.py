"""Tests for injectable clocks."""

import time

import pytest

from millis import Instant, Interval, InvalidInput, fixed, system_clock
from millis.clock import read


def test_fixed_clock():
    """Test that a fixed clock always reports the same time."""
    clock = fixed(1704067200000)

    assert clock() == 1704067200000
    assert clock() == 1704067200000
    assert Instant.now(clock).iso() == "2024-01-01T00:00:00.000Z"


def test_system_clock():
    """Test that the system clock reports epoch milliseconds."""
    before = int(time.time() * 1000)
    now = system_clock()
    after = int(time.time() * 1000)

    assert isinstance(now, int)
    # time.time() and time_ns() may disagree in the last millisecond
    assert before - 1 <= now <= after + 1


def test_read_defaults_to_system_clock():
    """Test reading with and without an explicit clock."""
    assert read(fixed(5)) == 5
    assert abs(read() - system_clock()) < 1000


def test_clock_is_read_once():
    """Test that since_now reads the clock a single time."""
    calls = []

    def counting() -> int:
        calls.append(1)
        return 1704067200000 + 1000 * len(calls)

    interval = Interval.since_now(1, clock=counting)

    assert len(calls) == 1
    assert interval.duration().days() == 1


def test_clock_must_return_int():
    """Test that clocks returning floats are rejected."""
    with pytest.raises(InvalidInput, match="Clock must return int epoch millis"):
        Instant.now(lambda: 1.5)
