# zonetime/core/periods.py
# -----------------------------------------------------------------------------
# Period table: for a zone name, the ordered spans during which its UTC
# offset, DST offset and abbreviation are constant.
#
#   • Source: the compiled IANA data bundled with pytz (DstTzInfo transition
#     lists; StaticTzInfo / UTC for fixed zones).
#   • pytz expands transitions only through 2037. After the last one, the
#     POSIX TZ footer of the zone's TZif file is expanded up to year 9999.
#   • pytz rounds offsets to whole minutes, so sub-minute LMT and early
#     20th-century offsets are approximate (Africa/Monrovia -00:44:30 reads
#     as -00:44 before 1972).
#   • Aliases ("links") come from the tzdata.zi file pytz ships.
#   • Each zone's periods are built on first use and never mutated after.
#   • UTC-mode lookups return exactly one period; wall-mode lookups return
#     0 (gap), 1, or 2 (fold). More than two is a data fault.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import threading
from bisect import bisect_right
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from functools import lru_cache
from typing import Dict, FrozenSet, List, Optional, Tuple

import pytz
from pytz.tzinfo import DstTzInfo

from zonetime.core.civil import MAX_YEAR, from_gregorian_seconds, gregorian_seconds
from zonetime.core.posixtz import PosixTz, parse_posix_tz, read_footer
from zonetime.core.results import PeriodTableInvariantError, UnknownZoneError

__all__ = [
    "UTC_ZONE",
    "Mode",
    "Period",
    "PeriodTable",
    "default_table",
    "periods_for_time",
    "zone_exists",
    "canonical_zone",
]

log = logging.getLogger(__name__)

UTC_ZONE = "Etc/UTC"

# Any wall reading lies within this many seconds of its UTC instant
# (LMT offsets reach ±15h56m; current offsets ±14h).
_OFFSET_REACH = 26 * 3600


class Mode(str, Enum):
    UTC = "utc"
    WALL = "wall"


@dataclass(frozen=True)
class Period:
    utc_offset: int
    std_offset: int
    abbr: str
    from_utc: Optional[int] = None    # inclusive; None = since forever
    until_utc: Optional[int] = None   # exclusive; None = open-ended

    @property
    def total_offset(self) -> int:
        return self.utc_offset + self.std_offset

    def contains(self, seconds: int, mode: Mode) -> bool:
        shift = self.total_offset if mode is Mode.WALL else 0
        if self.from_utc is not None and seconds < self.from_utc + shift:
            return False
        if self.until_utc is not None and seconds >= self.until_utc + shift:
            return False
        return True


@dataclass(frozen=True)
class _ZonePeriods:
    periods: Tuple[Period, ...]
    starts: Tuple[float, ...]   # from_utc per period, -inf for the first


# ───────────────────────────── pytz → periods ─────────────────────────────

def _seconds(delta: timedelta) -> int:
    return int(delta.total_seconds())


def _greg(dt: datetime) -> int:
    return gregorian_seconds(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second)


def _build_periods(tz) -> Tuple[Period, ...]:
    if not isinstance(tz, DstTzInfo):
        return (Period(utc_offset=_seconds(tz.utcoffset(None)), std_offset=0, abbr=tz.tzname(None)),)

    times = tz._utc_transition_times
    infos = tz._transition_info
    out: List[Period] = []
    for i, (utcoffset, dst, abbr) in enumerate(infos):
        from_utc = None if i == 0 else _greg(times[i])
        until_utc = None if i + 1 == len(times) else _greg(times[i + 1])
        if from_utc is not None and until_utc is not None and from_utc >= until_utc:
            continue
        std = _seconds(dst)
        out.append(Period(
            utc_offset=_seconds(utcoffset) - std,
            std_offset=std,
            abbr=abbr,
            from_utc=from_utc,
            until_utc=until_utc,
        ))
    return tuple(out)


def _footer_rule(source: str) -> Optional[PosixTz]:
    try:
        footer = read_footer(source)
        return parse_posix_tz(footer) if footer else None
    except (OSError, ValueError) as e:
        log.warning("No usable POSIX TZ footer for %s (%s); last period stays open-ended", source, e)
        return None


def _extend_with_rule(periods: Tuple[Period, ...], rule: Optional[PosixTz]) -> Tuple[Period, ...]:
    """Continue the footer rule from the last expanded transition to MAX_YEAR."""
    if rule is None or not rule.has_dst or not periods or periods[-1].from_utc is None:
        return periods

    std = Period(utc_offset=rule.std_offset, std_offset=0, abbr=rule.std_abbr)
    dst = Period(utc_offset=rule.std_offset, std_offset=rule.dst_offset - rule.std_offset,
                 abbr=rule.dst_abbr)
    out = list(periods)
    first_year = from_gregorian_seconds(out[-1].from_utc)[0][0]
    for at, is_dst in rule.transitions(first_year, MAX_YEAR):
        prev = out[-1]
        nxt = dst if is_dst else std
        if at <= prev.from_utc:
            continue
        if (prev.utc_offset, prev.std_offset, prev.abbr) == (nxt.utc_offset, nxt.std_offset, nxt.abbr):
            continue
        out[-1] = replace(prev, until_utc=at)
        out.append(replace(nxt, from_utc=at))
    return tuple(out)


def _load_links() -> Dict[str, str]:
    """alias -> canonical, from the 'L <target> <alias>' lines of tzdata.zi."""
    try:
        with pytz.open_resource("tzdata.zi") as fh:
            text = fh.read().decode("utf-8")
    except OSError as e:
        log.warning("tzdata.zi not readable from pytz (%s); zone aliases resolve to themselves", e)
        return {}

    links: Dict[str, str] = {}
    for line in text.splitlines():
        parts = line.split()
        if len(parts) == 3 and parts[0] == "L":
            links[parts[2]] = parts[1]
    return links


# ───────────────────────────── Table ─────────────────────────────

class PeriodTable:
    """Read-mostly mapping of zone name -> periods. Safe to share between threads."""

    def __init__(self, links: Optional[Dict[str, str]] = None):
        self._links: Dict[str, str] = _load_links() if links is None else dict(links)
        # all_timezones_set fills lazily on first query; copying it raw yields
        # an empty set, iterating the lazy list fills it.
        self._names: FrozenSet[str] = frozenset(pytz.all_timezones) | frozenset(self._links)
        self._zones: Dict[str, _ZonePeriods] = {}
        self._lock = threading.Lock()

    # zone names
    def zone_exists(self, name: str) -> bool:
        return name in self._names

    def canonical_zone(self, name: str) -> str:
        if not self.zone_exists(name):
            raise UnknownZoneError(f"Unknown time zone '{name}'")
        seen = {name}
        while name in self._links:
            name = self._links[name]
            if name in seen:
                break
            seen.add(name)
        return name

    def is_alias(self, name: str) -> bool:
        return self.zone_exists(name) and self.canonical_zone(name) != name

    def is_utc(self, name: str) -> bool:
        return self.zone_exists(name) and self.canonical_zone(name) == UTC_ZONE

    # periods
    def periods(self, name: str) -> Tuple[Period, ...]:
        return self._zone(name).periods

    def periods_for_time(self, name: str, seconds: int, mode: Mode) -> List[Period]:
        zone = self._zone(name)
        if mode is Mode.UTC:
            lo = hi = seconds
        else:
            lo, hi = seconds - _OFFSET_REACH, seconds + _OFFSET_REACH
        first = max(bisect_right(zone.starts, lo) - 1, 0)
        last = bisect_right(zone.starts, hi)
        matches = [p for p in zone.periods[first:last] if p.contains(seconds, mode)]
        if len(matches) > 2:
            raise PeriodTableInvariantError(
                f"{len(matches)} periods match {mode.value} second {seconds} in {name}"
            )
        return matches

    def warm(self, names) -> None:
        for name in names:
            self._zone(name)

    def _zone(self, name: str) -> _ZonePeriods:
        canonical = self.canonical_zone(name)
        zone = self._zones.get(canonical)
        if zone is not None:
            return zone
        with self._lock:
            zone = self._zones.get(canonical)
            if zone is None:
                source = canonical if canonical in pytz.all_timezones_set else name
                tz = pytz.timezone(source)
                periods = _build_periods(tz)
                if isinstance(tz, DstTzInfo):
                    periods = _extend_with_rule(periods, _footer_rule(source))
                starts = tuple(float("-inf") if p.from_utc is None else p.from_utc for p in periods)
                zone = _ZonePeriods(periods=periods, starts=starts)
                self._zones[canonical] = zone
                log.debug("Built %d periods for %s", len(periods), canonical)
        return zone


@lru_cache(maxsize=None)
def default_table() -> PeriodTable:
    table = PeriodTable()
    log.info("Period table ready: %d zone names, %d aliases", len(table._names), len(table._links))
    return table


# ───────────────────────────── Provider interface ─────────────────────────────

def periods_for_time(zone: str, seconds: int, mode: Mode) -> List[Period]:
    return default_table().periods_for_time(zone, seconds, mode)


def zone_exists(zone: str) -> bool:
    return default_table().zone_exists(zone)


def canonical_zone(zone: str) -> str:
    return default_table().canonical_zone(zone)
