# zonetime/core/arithmetic.py
# -----------------------------------------------------------------------------
# Offset-aware arithmetic on zoned values.
#
#   • advance(): instant + seconds, read back in the source zone.
#   • diff(): a − b as (seconds, microseconds, direction).
#   • All days are 86 400 s; leap seconds are NOT counted. A second-60 value
#     counts as the following minute's :00.
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from zonetime.core.civil import USEC_PER_SEC
from zonetime.core.periods import PeriodTable
from zonetime.core.results import ErrorKind, Failure, RangeOverflowError, Valid
from zonetime.core.shift import from_utc_seconds
from zonetime.core.zoned import ZonedDateTime

__all__ = [
    "Direction",
    "Difference",
    "advance",
    "diff",
    "is_before",
    "is_after",
    "is_same_time",
]


class Direction(str, Enum):
    AFTER = "after"
    BEFORE = "before"
    SAME_TIME = "same_time"


@dataclass(frozen=True)
class Difference:
    """
    seconds carries the sign of the whole difference; microseconds is always
    in 0..999_999 and extends it away from zero: (-9, 999998) is -9.999998 s.
    """

    seconds: int
    microseconds: int
    direction: Direction

    @property
    def total_microseconds(self) -> int:
        sign = -1 if self.direction is Direction.BEFORE else 1
        return sign * (abs(self.seconds) * USEC_PER_SEC + self.microseconds)

    def as_tuple(self):
        return self.seconds, self.microseconds, self.direction.value


def advance(
    zdt: ZonedDateTime,
    seconds: int,
    *,
    table: Optional[PeriodTable] = None,
) -> Union[Valid, Failure]:
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise TypeError(f"seconds must be an int, got {type(seconds).__name__}")
    try:
        moved = from_utc_seconds(zdt.utc_gregorian_seconds() + seconds, zdt.zone,
                                 zdt.microsecond, table=table)
    except RangeOverflowError as e:
        return Failure(ErrorKind.RANGE_OVERFLOW, str(e))
    return Valid(moved)


def diff(a: ZonedDateTime, b: ZonedDateTime) -> Difference:
    """Elapsed time from b to a (positive when a is later)."""
    a_sec, a_usec = a.instant()
    b_sec, b_usec = b.instant()
    total = (a_sec - b_sec) * USEC_PER_SEC + (a_usec - b_usec)
    if total == 0:
        return Difference(0, 0, Direction.SAME_TIME)
    # Split the magnitude so the sub-second part never goes negative, then
    # put the sign back on the whole seconds. This is the carry/borrow step.
    whole, fraction = divmod(abs(total), USEC_PER_SEC)
    if total > 0:
        return Difference(whole, fraction, Direction.AFTER)
    return Difference(-whole, fraction, Direction.BEFORE)


def is_before(a: ZonedDateTime, b: ZonedDateTime) -> bool:
    return diff(a, b).direction is Direction.BEFORE


def is_after(a: ZonedDateTime, b: ZonedDateTime) -> bool:
    return diff(a, b).direction is Direction.AFTER


def is_same_time(a: ZonedDateTime, b: ZonedDateTime) -> bool:
    return diff(a, b).direction is Direction.SAME_TIME
