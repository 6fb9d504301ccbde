# zonetime/core/posixtz.py
"""
POSIX TZ rules, as found in the footer of a TZif (v2+) file.

pytz expands a zone's transitions only through 2037; the footer carries the
rule that applies after the last expanded transition:

    EST5EDT,M3.2.0,M11.1.0
    <+1030>-10:30<+11>-11,M10.1.0,M4.1.0
    IST-1GMT0,M10.5.0,M3.5.0/1

POSIX offsets count positive WEST of Greenwich; everything this module
returns counts positive east, like the rest of the package.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Tuple

import pytz

from zonetime.core.civil import gregorian_seconds

__all__ = ["DateRule", "PosixTz", "parse_posix_tz", "read_footer"]

_NAME = r"(?:<[+\-0-9A-Za-z]+>|[A-Za-z]{3,})"
_OFFSET = r"[+-]?\d{1,3}(?::\d{1,2}){0,2}"
_TZ_RE = re.compile(
    rf"^(?P<std>{_NAME})(?P<std_off>{_OFFSET})"
    rf"(?:(?P<dst>{_NAME})(?P<dst_off>{_OFFSET})?,(?P<start>[^,]+),(?P<end>[^,]+))?$"
)
_DATE_RE = re.compile(
    r"^(?:J(?P<julian>\d{1,3})|(?P<zero>\d{1,3})|M(?P<month>\d{1,2})\.(?P<week>[1-5])\.(?P<weekday>[0-6]))$"
)

_DEFAULT_SWITCH_TIME = 2 * 3600


def _hms(text: str) -> int:
    """'[+-]hh[:mm[:ss]]' -> signed seconds. Hours may exceed 24 (RFC 8536)."""
    sign = -1 if text.startswith("-") else 1
    parts = [int(p) for p in text.lstrip("+-").split(":")]
    parts += [0] * (3 - len(parts))
    hours, minutes, seconds = parts
    return sign * (hours * 3600 + minutes * 60 + seconds)


def _name(text: str) -> str:
    return text[1:-1] if text.startswith("<") else text


@dataclass(frozen=True)
class DateRule:
    """
    One switch date with its local time of day.

      J<n>        day 1..365, February 29 never counted
      <n>         day 0..365, February 29 counted
      M<m>.<w>.<d>  weekday d (0 = Sunday) of week w (5 = last) of month m
    """

    kind: str
    month_or_day: int
    week: int = 0
    weekday: int = 0
    time: int = _DEFAULT_SWITCH_TIME   # may be negative or past 24h

    @classmethod
    def parse(cls, text: str) -> "DateRule":
        day_part, _, time_part = text.partition("/")
        m = _DATE_RE.match(day_part)
        if not m:
            raise ValueError(f"bad POSIX TZ date rule {text!r}")
        time = _hms(time_part) if time_part else _DEFAULT_SWITCH_TIME
        if m.group("julian"):
            n = int(m.group("julian"))
            if not 1 <= n <= 365:
                raise ValueError(f"bad Julian day in POSIX TZ date rule {text!r}")
            return cls("J", n, time=time)
        if m.group("zero"):
            n = int(m.group("zero"))
            if n > 365:
                raise ValueError(f"bad day in POSIX TZ date rule {text!r}")
            return cls("N", n, time=time)
        month = int(m.group("month"))
        if not 1 <= month <= 12:
            raise ValueError(f"bad month in POSIX TZ date rule {text!r}")
        return cls("M", month, int(m.group("week")), int(m.group("weekday")), time=time)

    def day(self, year: int) -> date:
        jan1 = date(year, 1, 1).toordinal()
        if self.kind == "J":
            n = self.month_or_day
            if calendar.isleap(year) and n >= 60:
                n += 1
            return date.fromordinal(jan1 + n - 1)
        if self.kind == "N":
            return date.fromordinal(jan1 + self.month_or_day)

        month = self.month_or_day
        first = date(year, month, 1)
        # date.weekday() has Monday = 0; POSIX has Sunday = 0
        day = 1 + (self.weekday - (first.weekday() + 1)) % 7 + (self.week - 1) * 7
        last = calendar.monthrange(year, month)[1]
        while day > last:
            day -= 7
        return date(year, month, day)

    def wall_seconds(self, year: int) -> int:
        d = self.day(year)
        return gregorian_seconds(d.year, d.month, d.day, 0, 0, 0) + self.time


@dataclass(frozen=True)
class PosixTz:
    std_abbr: str
    std_offset: int                     # seconds east of UTC
    dst_abbr: Optional[str] = None
    dst_offset: Optional[int] = None
    start: Optional[DateRule] = None    # switch to DST, in standard wall time
    end: Optional[DateRule] = None      # switch back, in DST wall time

    @property
    def has_dst(self) -> bool:
        return self.start is not None

    def transitions(self, first_year: int, last_year: int) -> List[Tuple[int, bool]]:
        """
        (utc gregorian seconds, DST in effect afterwards) for every switch in
        the year range, ascending. Switches that coincide collapse into the
        later one, so all-year DST ("0/0,J365/25") yields no standard time.
        """
        if not self.has_dst:
            return []
        at: Dict[int, bool] = {}
        for year in range(first_year, last_year + 1):
            on = self.start.wall_seconds(year) - self.std_offset
            off = self.end.wall_seconds(year) - self.dst_offset
            for seconds, is_dst in sorted(((off, False), (on, True))):
                at[seconds] = is_dst if seconds not in at else (at[seconds] or is_dst)
        return sorted(at.items())


def parse_posix_tz(text: str) -> PosixTz:
    m = _TZ_RE.match(text.strip())
    if not m:
        raise ValueError(f"unsupported POSIX TZ string {text!r}")
    std_offset = -_hms(m.group("std_off"))
    if not m.group("dst"):
        return PosixTz(_name(m.group("std")), std_offset)
    dst_offset = -_hms(m.group("dst_off")) if m.group("dst_off") else std_offset + 3600
    return PosixTz(
        std_abbr=_name(m.group("std")),
        std_offset=std_offset,
        dst_abbr=_name(m.group("dst")),
        dst_offset=dst_offset,
        start=DateRule.parse(m.group("start")),
        end=DateRule.parse(m.group("end")),
    )


def read_footer(zone: str) -> Optional[str]:
    """The POSIX TZ footer of pytz's compiled file for `zone`; None for v1 files or an empty footer."""
    with pytz.open_resource(zone) as fh:
        data = fh.read()
    if data[:4] != b"TZif" or data[4:5] == b"\0" or not data.endswith(b"\n"):
        return None
    footer = data[:-1].rsplit(b"\n", 1)[-1].decode("ascii")
    return footer or None
