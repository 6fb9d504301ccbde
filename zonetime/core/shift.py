# zonetime/core/shift.py

"""
Zone shifter: the same instant, read on another zone's wall clock.

The source value is turned into its instant with its own offsets (never
re-resolved), then the target zone is looked up in UTC mode, which always
yields exactly one period. Second 60 is shifted through its :59 and put
back afterwards, so the linear second count never has to hold a 61st second.
"""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Optional, Union

from zonetime.core.civil import (
    UNIX_EPOCH_GREGORIAN_SECONDS,
    USEC_PER_SEC,
    from_gregorian_seconds,
)
from zonetime.core.periods import UTC_ZONE, Mode, PeriodTable, default_table
from zonetime.core.results import (
    ErrorKind,
    Failure,
    PeriodTableInvariantError,
    RangeOverflowError,
    Valid,
)
from zonetime.core.zoned import ZonedDateTime

__all__ = [
    "shift",
    "shift_zone",
    "to_utc",
    "from_utc_seconds",
    "now",
    "from_unix",
    "to_unix",
]


def from_utc_seconds(
    seconds: int,
    zone: str,
    microsecond: Optional[int] = None,
    *,
    table: Optional[PeriodTable] = None,
) -> ZonedDateTime:
    """
    Instant (gregorian seconds, UTC) → civil time in `zone`.
    Raises RangeOverflowError if the wall time leaves years 1..9999.
    """
    table = table or default_table()
    periods = table.periods_for_time(zone, seconds, Mode.UTC)
    if len(periods) != 1:
        raise PeriodTableInvariantError(
            f"{len(periods)} periods cover UTC second {seconds} in {zone}; expected exactly one"
        )
    period = periods[0]
    (year, month, day), (hour, minute, second) = from_gregorian_seconds(seconds + period.total_offset)
    return ZonedDateTime(
        year=year, month=month, day=day, hour=hour, minute=minute, second=second,
        zone=zone, abbr=period.abbr, utc_offset=period.utc_offset, std_offset=period.std_offset,
        microsecond=microsecond,
    )


def shift(zdt: ZonedDateTime, zone: str, *, table: Optional[PeriodTable] = None) -> ZonedDateTime:
    """
    Unchecked shift: the caller has already established that `zone` exists
    (see shift_zone for the checked variant).
    """
    if zdt.second == 60:
        pivot = shift(zdt.with_second(59), zone, table=table)
        return replace(pivot, second=60)
    return from_utc_seconds(zdt.utc_gregorian_seconds(), zone, zdt.microsecond, table=table)


def shift_zone(
    zdt: ZonedDateTime,
    zone: str,
    *,
    table: Optional[PeriodTable] = None,
) -> Union[Valid, Failure]:
    table = table or default_table()
    if not table.zone_exists(zone):
        return Failure(ErrorKind.UNKNOWN_ZONE, f"Unknown time zone '{zone}'")
    try:
        return Valid(shift(zdt, zone, table=table))
    except RangeOverflowError as e:
        return Failure(ErrorKind.RANGE_OVERFLOW, str(e))


def to_utc(zdt: ZonedDateTime, *, table: Optional[PeriodTable] = None) -> ZonedDateTime:
    return shift(zdt, UTC_ZONE, table=table)


# ───────────────────────────── Clock / Unix interop ─────────────────────────────

def now(zone: str = UTC_ZONE, *, table: Optional[PeriodTable] = None) -> Union[Valid, Failure]:
    """Current wall time in `zone`."""
    return from_unix(time.time_ns() // 1_000, zone, unit="microseconds", table=table)


def from_unix(
    timestamp: int,
    zone: str = UTC_ZONE,
    *,
    unit: str = "seconds",
    table: Optional[PeriodTable] = None,
) -> Union[Valid, Failure]:
    """Unix timestamp (integer seconds or microseconds) → civil time in `zone`."""
    table = table or default_table()
    if not table.zone_exists(zone):
        return Failure(ErrorKind.UNKNOWN_ZONE, f"Unknown time zone '{zone}'")
    if unit == "seconds":
        seconds, microsecond = int(timestamp), None
    elif unit == "microseconds":
        seconds, microsecond = divmod(int(timestamp), USEC_PER_SEC)
    else:
        raise ValueError(f"unit must be 'seconds' or 'microseconds', got {unit!r}")
    try:
        return Valid(from_utc_seconds(UNIX_EPOCH_GREGORIAN_SECONDS + seconds, zone, microsecond, table=table))
    except RangeOverflowError as e:
        return Failure(ErrorKind.RANGE_OVERFLOW, str(e))


def to_unix(zdt: ZonedDateTime) -> int:
    """Whole Unix seconds (floor). Leap seconds are not counted, as in POSIX time."""
    return zdt.utc_gregorian_seconds() - UNIX_EPOCH_GREGORIAN_SECONDS
