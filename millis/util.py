"""Time unit constants and unit names for millis.

Constants are lengths in milliseconds, the resolution of every Instant
and Duration. Months and years have no constant because their length
depends on where they are applied.
"""

from typing import Literal, TypeAlias, get_args

# Time unit constants (all values in milliseconds)
MILLISECOND = 1
SECOND = 1_000
MINUTE = 60_000
HOUR = 3_600_000
DAY = 86_400_000
WEEK = 604_800_000

# Instants are limited to 100 million days either side of the epoch,
# -271821-04-20 through +275760-09-13, so years fit the six-digit ISO form
MAX_MILLIS = 100_000_000 * DAY

Unit: TypeAlias = Literal["second", "minute", "hour", "day", "month", "year"]

UNITS: tuple[Unit, ...] = get_args(Unit)

# Fixed-length units, smallest first
FIXED_UNITS: dict[str, int] = {
    "second": SECOND,
    "minute": MINUTE,
    "hour": HOUR,
    "day": DAY,
}
