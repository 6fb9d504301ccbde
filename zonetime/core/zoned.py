# zonetime/core/zoned.py
from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from zonetime.core.civil import (
    CivilTuple,
    DateTuple,
    NaiveDateTime,
    gregorian_seconds,
)
from zonetime.core.results import InvalidCivilValueError

__all__ = ["ZonedDateTime"]


@dataclass(frozen=True)
class ZonedDateTime:
    """
    A wall-clock reading in a named zone, together with the offsets of the one
    period it was resolved against. Only the resolver, the shifter and the
    arithmetic engine build these.

    `zone` keeps the name the caller used (an alias stays an alias).
    `microsecond` is None when no sub-second part was given.
    """

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    zone: str
    abbr: str
    utc_offset: int
    std_offset: int
    microsecond: Optional[int] = None

    @property
    def total_offset(self) -> int:
        return self.utc_offset + self.std_offset

    # linear counts
    def wall_gregorian_seconds(self) -> int:
        return gregorian_seconds(self.year, self.month, self.day, self.hour, self.minute, self.second)

    def utc_gregorian_seconds(self) -> int:
        """The instant, from this value's own offsets (no period lookup)."""
        return self.wall_gregorian_seconds() - self.total_offset

    def instant(self) -> Tuple[int, int]:
        return self.utc_gregorian_seconds(), self.microsecond or 0

    # tuple interop
    def to_tuple(self) -> CivilTuple:
        return (self.year, self.month, self.day), (self.hour, self.minute, self.second)

    def to_micro_tuple(self) -> Tuple[DateTuple, Tuple[int, int, int, int]]:
        return (
            (self.year, self.month, self.day),
            (self.hour, self.minute, self.second, self.microsecond or 0),
        )

    def to_naive(self) -> NaiveDateTime:
        return NaiveDateTime(self.year, self.month, self.day,
                             self.hour, self.minute, self.second, self.microsecond)

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def to_datetime(self) -> datetime:
        """Aware stdlib datetime with a fixed offset. datetime cannot hold second 60."""
        if self.second == 60:
            raise InvalidCivilValueError("datetime cannot represent a leap second (second=60)")
        return datetime(
            self.year, self.month, self.day, self.hour, self.minute, self.second,
            self.microsecond or 0,
            tzinfo=timezone(timedelta(seconds=self.total_offset), self.abbr),
        )

    def with_second(self, second: int) -> "ZonedDateTime":
        return replace(self, second=second)

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["total_offset"] = self.total_offset
        return out
