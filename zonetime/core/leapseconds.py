# zonetime/core/leapseconds.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from typing import FrozenSet, List, Optional, Tuple
import json, logging, os, warnings

import erfa  # PyERFA: has dat() for TAI-UTC

log = logging.getLogger(__name__)

DateTuple = Tuple[int, int, int]

# ---- Built-in table (matches ERFA through 2017-01-01) ----
# Format: (MJD, ΔAT seconds) effective from MJD at 00:00 UTC onward.
# The first row is the 1972 baseline, not a leap second.
_BUILTIN_STEPS: List[Tuple[float, float]] = [
    (41317.0, 10.0), (41499.0, 11.0), (41683.0, 12.0), (42048.0, 13.0),
    (42413.0, 14.0), (42778.0, 15.0), (43144.0, 16.0), (43509.0, 17.0),
    (43874.0, 18.0), (44239.0, 19.0), (44786.0, 20.0), (45151.0, 21.0),
    (45516.0, 22.0), (46247.0, 23.0), (47161.0, 24.0), (47892.0, 25.0),
    (48257.0, 26.0), (48804.0, 27.0), (49169.0, 28.0), (49534.0, 29.0),
    (50083.0, 30.0), (50630.0, 31.0), (51179.0, 32.0), (53736.0, 33.0),
    (54832.0, 34.0), (56109.0, 35.0), (57204.0, 36.0), (57754.0, 37.0),  # 2017-01-01
]

# First year with integral leap seconds (before 1972 UTC used rubber seconds).
_FIRST_LEAP_YEAR = 1972


@dataclass(frozen=True)
class LeapSecondTable:
    dates: FrozenSet[DateTuple]   # UTC dates whose last minute has a 23:59:60
    source: str                   # "erfa", "override"
    notes: Optional[str] = None

    def is_leap_second(self, civil) -> bool:
        """civil: ((y, m, d), (h, mi, s)) in UTC."""
        day, clock = civil
        return tuple(clock) == (23, 59, 60) and tuple(day) in self.dates

    def __contains__(self, civil) -> bool:
        return self.is_leap_second(civil)

    def __len__(self) -> int:
        return len(self.dates)

    def as_tuples(self) -> List[Tuple[DateTuple, Tuple[int, int, int]]]:
        return [(d, (23, 59, 60)) for d in sorted(self.dates)]


# Optional ops override via env/JSON:
#   ZONETIME_LEAPSECONDS_JSON=/app/data/leapseconds.json   # [{"mjd":57754.0,"delta_at":37.0}, ...]
def _load_override_table(path: str) -> List[Tuple[float, float]]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    steps: List[Tuple[float, float]] = []
    for row in data:
        steps.append((float(row["mjd"]), float(row["delta_at"])))
    steps.sort(key=lambda t: t[0])
    return steps


def _mjd_to_date(mjd: float) -> DateTuple:
    iy, im, iday, _fd = erfa.jd2cal(2400000.5, mjd)
    return int(iy), int(im), int(iday)


def _dates_from_steps(steps: List[Tuple[float, float]]) -> FrozenSet[DateTuple]:
    """A +1 s ΔAT step at MJD n means the UTC day n-1 ended with 23:59:60."""
    out = set()
    for (_, prev), (mjd, value) in zip(steps, steps[1:]):
        if value - prev == 1.0:
            out.add(_mjd_to_date(mjd - 1.0))
    return frozenset(out)


def _dates_from_erfa(last_year: int) -> FrozenSet[DateTuple]:
    """Scan every June 30 / December 31 and compare ERFA's ΔAT across midnight."""
    out = set()
    with warnings.catch_warnings():
        # future years are "dubious" to ERFA but still answered from its table
        warnings.simplefilter("ignore", erfa.ErfaWarning)
        for year in range(_FIRST_LEAP_YEAR, last_year + 1):
            for (m, d), nxt in (((6, 30), (year, 7, 1)), ((12, 31), (year + 1, 1, 1))):
                before = float(erfa.dat(year, m, d, 0.0))
                after = float(erfa.dat(nxt[0], nxt[1], nxt[2], 0.0))
                if after - before == 1.0:
                    out.add((year, m, d))
    return frozenset(out)


def build_leap_second_table(override_path: Optional[str] = None,
                            last_year: Optional[int] = None) -> LeapSecondTable:
    """
    Resolve the leap-second set with a two-source strategy:
      1) Ops override JSON (ZONETIME_LEAPSECONDS_JSON) → source="override"
      2) ERFA dat() scan, unioned with the built-in ΔAT steps → source="erfa"
    """
    path = (override_path if override_path is not None
            else os.getenv("ZONETIME_LEAPSECONDS_JSON", "")).strip()
    if path:
        steps = _load_override_table(path)
        table = LeapSecondTable(dates=_dates_from_steps(steps), source="override",
                                notes=f"override JSON table {path}")
        log.info("Leap-second table: %d entries from %s", len(table), path)
        return table

    if last_year is None:
        last_year = date.today().year
    builtin = _dates_from_steps(_BUILTIN_STEPS)
    from_erfa = _dates_from_erfa(last_year)
    missing = builtin - from_erfa
    notes = None
    if missing:
        notes = f"builtin steps not in ERFA: {sorted(missing)}"
        log.warning("Leap-second table: %s", notes)
    table = LeapSecondTable(dates=builtin | from_erfa, source="erfa", notes=notes)
    log.info("Leap-second table: %d entries (ERFA through %d)", len(table), last_year)
    return table


@lru_cache(maxsize=None)
def leap_second_table() -> LeapSecondTable:
    """Process-wide table, built on first use."""
    return build_leap_second_table()


def is_leap_second(civil) -> bool:
    return leap_second_table().is_leap_second(civil)
