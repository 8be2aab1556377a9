from .arithmetic import CalendarDelta
from .clock import Clock, fixed, system_clock
from .duration import Duration
from .errors import InvalidInput, MillisError, UnsupportedFormat
from .formatting import Formatter
from .instant import Instant, instant
from .interval import Interval
from .util import DAY, HOUR, MILLISECOND, MINUTE, SECOND, WEEK

__all__ = [
    "Instant",
    "Duration",
    "Interval",
    "CalendarDelta",
    "instant",
    "Clock",
    "fixed",
    "system_clock",
    "Formatter",
    "MillisError",
    "InvalidInput",
    "UnsupportedFormat",
    "MILLISECOND",
    "SECOND",
    "MINUTE",
    "HOUR",
    "DAY",
    "WEEK",
]
