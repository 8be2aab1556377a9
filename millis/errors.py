"""Exception hierarchy for millis.

All millis-specific exceptions inherit from MillisError. Both concrete
errors are also ValueErrors, so callers catching ValueError keep working.
"""


class MillisError(Exception):
    """Base exception for all millis errors."""


class InvalidInput(MillisError, ValueError):
    """A value could not be turned into an instant, duration or delta.

    Examples:
        - A string that is not one of the accepted ISO-8601 shapes
        - A non-finite number
        - Day 367 of a leap year, or February 30
        - A delta with an unknown unit name
    """


class UnsupportedFormat(MillisError, ValueError):
    """A format spec that is neither a built-in pattern nor a formatter."""


__all__ = ["MillisError", "InvalidInput", "UnsupportedFormat"]
