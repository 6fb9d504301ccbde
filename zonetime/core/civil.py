# zonetime/core/civil.py
# -----------------------------------------------------------------------------
# Proleptic Gregorian helpers shared by the resolver, shifter and arithmetic.
#
#   • "Gregorian seconds" count from 0000-01-01T00:00:00 (year 0 is a leap
#     year).
#   • Every day is 86 400 seconds; leap seconds are not counted.
#   • Supported years: 1..9999 (stdlib date range).
# -----------------------------------------------------------------------------

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from zonetime.core.results import InvalidCivilValueError, RangeOverflowError

__all__ = [
    "MIN_YEAR",
    "MAX_YEAR",
    "SECONDS_PER_DAY",
    "USEC_PER_SEC",
    "UNIX_EPOCH_GREGORIAN_SECONDS",
    "NaiveDateTime",
    "valid_date",
    "valid_clock",
    "valid_microsecond",
    "gregorian_seconds",
    "from_gregorian_seconds",
]

MIN_YEAR = 1
MAX_YEAR = 9999
SECONDS_PER_DAY = 86_400
USEC_PER_SEC = 1_000_000

# date(1, 1, 1).toordinal() == 1, but 0001-01-01 is gregorian day 366.
_ORDINAL_SHIFT = 365
_MIN_ORDINAL = date.min.toordinal()
_MAX_ORDINAL = date.max.toordinal()

UNIX_EPOCH_GREGORIAN_SECONDS = (date(1970, 1, 1).toordinal() + _ORDINAL_SHIFT) * SECONDS_PER_DAY

DateTuple = Tuple[int, int, int]
TimeTuple = Tuple[int, int, int]
CivilTuple = Tuple[DateTuple, TimeTuple]


# ───────────────────────────── Validation ─────────────────────────────

def valid_date(year: int, month: int, day: int) -> bool:
    if not (MIN_YEAR <= year <= MAX_YEAR and 1 <= month <= 12):
        return False
    return 1 <= day <= calendar.monthrange(year, month)[1]


def valid_clock(hour: int, minute: int, second: int) -> bool:
    """Range check only; whether a second of 60 is a real leap second is decided by the resolver."""
    return 0 <= hour <= 23 and 0 <= minute <= 59 and 0 <= second <= 60


def valid_microsecond(microsecond: Optional[int]) -> bool:
    return microsecond is None or 0 <= microsecond < USEC_PER_SEC


# ───────────────────────────── Linear seconds ─────────────────────────────

def gregorian_seconds(year: int, month: int, day: int, hour: int, minute: int, second: int) -> int:
    """Seconds since 0000-01-01T00:00:00. A second of 60 lands on the next minute's :00."""
    days = date(year, month, day).toordinal() + _ORDINAL_SHIFT
    return days * SECONDS_PER_DAY + hour * 3600 + minute * 60 + second


def from_gregorian_seconds(seconds: int) -> CivilTuple:
    """
    Inverse of gregorian_seconds().
    Raises RangeOverflowError when the result falls outside years 1..9999.
    """
    days, rem = divmod(seconds, SECONDS_PER_DAY)
    ordinal = days - _ORDINAL_SHIFT
    if not (_MIN_ORDINAL <= ordinal <= _MAX_ORDINAL):
        raise RangeOverflowError(f"gregorian seconds {seconds} outside years {MIN_YEAR}..{MAX_YEAR}")
    d = date.fromordinal(ordinal)
    hour, rem = divmod(rem, 3600)
    minute, second = divmod(rem, 60)
    return (d.year, d.month, d.day), (hour, minute, second)


# ───────────────────────────── Naive civil time ─────────────────────────────

@dataclass(frozen=True)
class NaiveDateTime:
    """Wall-clock reading without a zone."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    microsecond: Optional[int] = None

    @classmethod
    def from_tuple(cls, civil: CivilTuple, microsecond: Optional[int] = None) -> "NaiveDateTime":
        (year, month, day), (hour, minute, second) = civil
        if not (valid_date(year, month, day) and valid_clock(hour, minute, second)
                and valid_microsecond(microsecond)):
            raise InvalidCivilValueError(f"invalid civil value {civil!r}")
        return cls(year, month, day, hour, minute, second, microsecond)

    def to_tuple(self) -> CivilTuple:
        return (self.year, self.month, self.day), (self.hour, self.minute, self.second)

    def to_micro_tuple(self) -> Tuple[DateTuple, Tuple[int, int, int, int]]:
        return (
            (self.year, self.month, self.day),
            (self.hour, self.minute, self.second, self.microsecond or 0),
        )

    def gregorian_seconds(self) -> int:
        return gregorian_seconds(self.year, self.month, self.day, self.hour, self.minute, self.second)
