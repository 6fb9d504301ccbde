# zonetime/core/resolver.py
# -----------------------------------------------------------------------------
# Civil time resolver: wall-clock reading + zone name -> zoned value(s).
#
#   zone unknown                        → Failure(UNKNOWN_ZONE)
#   fields not calendar-legal           → Failure(INVALID_CIVIL_VALUE)
#   second 60 that is no leap second    → Failure(INVALID_CIVIL_VALUE)
#   0 wall periods (spring-forward gap) → Failure(GAP)
#   1 wall period                       → Valid(ZonedDateTime)
#   2 wall periods (fall-back fold)     → Ambiguous, sorted by abbreviation
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Optional, Tuple

from zonetime.core.civil import (
    CivilTuple,
    DateTuple,
    NaiveDateTime,
    gregorian_seconds,
    valid_clock,
    valid_date,
    valid_microsecond,
)
from zonetime.core.disambiguate import disambiguate
from zonetime.core.leapseconds import LeapSecondTable, leap_second_table
from zonetime.core.periods import Mode, PeriodTable, default_table
from zonetime.core.results import Ambiguous, ErrorKind, Failure, Resolved, Valid
from zonetime.core.shift import to_utc
from zonetime.core.zoned import ZonedDateTime

__all__ = [
    "resolve",
    "from_tuple",
    "from_micro_tuple",
    "from_naive",
    "resolve_total_offset",
]

log = logging.getLogger(__name__)


def resolve(
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int,
    second: int,
    zone: str,
    microsecond: Optional[int] = None,
    *,
    table: Optional[PeriodTable] = None,
    leaps: Optional[LeapSecondTable] = None,
) -> Resolved:
    table = table or default_table()

    if not table.zone_exists(zone):
        return Failure(ErrorKind.UNKNOWN_ZONE, f"Unknown time zone '{zone}'")

    if not (valid_date(year, month, day) and valid_clock(hour, minute, second)
            and valid_microsecond(microsecond)):
        return Failure(
            ErrorKind.INVALID_CIVIL_VALUE,
            f"invalid civil value {(year, month, day)} {(hour, minute, second)} us={microsecond}",
        )

    if second == 60:
        if not _is_legal_leap_second((year, month, day), hour, minute, zone, table,
                                     leaps or leap_second_table()):
            return Failure(
                ErrorKind.INVALID_CIVIL_VALUE,
                f"{year:04d}-{month:02d}-{day:02d} {hour:02d}:{minute:02d}:60 is not a leap second in {zone}",
            )

    # A leap second extends its :59; look it up there.
    wall = gregorian_seconds(year, month, day, hour, minute, min(second, 59))
    periods = table.periods_for_time(zone, wall, Mode.WALL)

    if not periods:
        log.debug("Gap: %s %s has no wall period", zone, (year, month, day, hour, minute, second))
        return Failure(
            ErrorKind.GAP,
            f"{year:04d}-{month:02d}-{day:02d} {hour:02d}:{minute:02d}:{second:02d} does not exist in {zone}",
        )

    candidates = tuple(
        ZonedDateTime(
            year=year, month=month, day=day, hour=hour, minute=minute, second=second,
            zone=zone, abbr=p.abbr, utc_offset=p.utc_offset, std_offset=p.std_offset,
            microsecond=microsecond,
        )
        for p in periods
    )
    if len(candidates) == 1:
        return Valid(candidates[0])

    log.debug("Fold: %s %s matches %s", zone, (year, month, day, hour, minute, second),
              [c.abbr for c in candidates])
    first, second_candidate = sorted(candidates, key=lambda c: c.abbr)
    return Ambiguous((first, second_candidate))


def _is_legal_leap_second(
    day: DateTuple,
    hour: int,
    minute: int,
    zone: str,
    table: PeriodTable,
    leaps: LeapSecondTable,
) -> bool:
    if table.is_utc(zone):
        return leaps.is_leap_second((day, (hour, minute, 60)))

    # One level through UTC: the :59 must resolve cleanly here, and the UTC
    # second after it must be a registered leap second.
    before = resolve(day[0], day[1], day[2], hour, minute, 59, zone, table=table, leaps=leaps)
    if not isinstance(before, Valid):
        return False
    utc_day, (utc_h, utc_m, utc_s) = to_utc(before.value, table=table).to_tuple()
    return leaps.is_leap_second((utc_day, (utc_h, utc_m, utc_s + 1)))


# ───────────────────────────── Tuple / naive interop ─────────────────────────────

def from_tuple(civil: CivilTuple, zone: str, microsecond: Optional[int] = None, **kwargs) -> Resolved:
    """((year, month, day), (hour, minute, second)) + zone."""
    (year, month, day), (hour, minute, second) = civil
    return resolve(year, month, day, hour, minute, second, zone, microsecond, **kwargs)


def from_micro_tuple(civil: Tuple[DateTuple, Tuple[int, int, int, int]], zone: str, **kwargs) -> Resolved:
    """((year, month, day), (hour, minute, second, microsecond)) + zone."""
    (year, month, day), (hour, minute, second, microsecond) = civil
    return resolve(year, month, day, hour, minute, second, zone, microsecond, **kwargs)


def from_naive(naive: NaiveDateTime, zone: str, **kwargs) -> Resolved:
    return resolve(naive.year, naive.month, naive.day, naive.hour, naive.minute, naive.second,
                   zone, naive.microsecond, **kwargs)


def resolve_total_offset(civil: CivilTuple, zone: str, total_offset: int,
                         microsecond: Optional[int] = None, **kwargs) -> Resolved:
    """
    Like from_tuple(), but a fold is settled with the caller's total offset
    (utc_offset + std_offset). Unambiguous results are returned unchanged.
    """
    result = from_tuple(civil, zone, microsecond, **kwargs)
    if isinstance(result, Ambiguous):
        return disambiguate(result, total_offset)
    return result
