# zonetime/core/interval.py
from __future__ import annotations

from dataclasses import dataclass

from zonetime.core.arithmetic import Difference, Direction, diff
from zonetime.core.zoned import ZonedDateTime

__all__ = ["Interval"]


@dataclass(frozen=True)
class Interval:
    """Closed span between two instants; the ends may be in different zones."""

    start: ZonedDateTime
    end: ZonedDateTime

    def __post_init__(self):
        if diff(self.end, self.start).direction is Direction.BEFORE:
            raise ValueError("interval end precedes its start")

    def includes(self, zdt: ZonedDateTime) -> bool:
        return (diff(zdt, self.start).direction is not Direction.BEFORE
                and diff(zdt, self.end).direction is not Direction.AFTER)

    def duration(self) -> Difference:
        return diff(self.end, self.start)
