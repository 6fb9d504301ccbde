# zonetime/core/results.py
"""
Tagged results and the error taxonomy for the resolution engine.

Core operations never raise for the expected failure modes; they return one of

  Valid(value)                 one answer
  Ambiguous((first, second))   two candidates for the same wall-clock reading
  Failure(kind, detail)        a specific, recoverable failure

Callers that prefer exceptions call .unwrap(), which raises the matching
CivilTimeError subclass. PeriodTableInvariantError is the only fault the
provider raises directly: more than two periods matched one query.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Tuple, Type, TypeVar, Union

__all__ = [
    "ErrorKind",
    "CivilTimeError",
    "InvalidCivilValueError",
    "UnknownZoneError",
    "GapError",
    "AmbiguousTimeError",
    "DisambiguationMismatchError",
    "RangeOverflowError",
    "PeriodTableInvariantError",
    "Valid",
    "Ambiguous",
    "Failure",
    "Resolved",
]

T = TypeVar("T")


class ErrorKind(str, Enum):
    INVALID_CIVIL_VALUE = "invalid_datetime"
    UNKNOWN_ZONE = "timezone_not_found"
    GAP = "invalid_datetime_for_timezone"
    DISAMBIGUATION_MISMATCH = "no_matching_offset"
    RANGE_OVERFLOW = "range_overflow"


# ───────────────────────────── Exceptions ─────────────────────────────

class CivilTimeError(ValueError):
    kind: ErrorKind


class InvalidCivilValueError(CivilTimeError):
    kind = ErrorKind.INVALID_CIVIL_VALUE


class UnknownZoneError(CivilTimeError):
    kind = ErrorKind.UNKNOWN_ZONE


class GapError(CivilTimeError):
    kind = ErrorKind.GAP


class DisambiguationMismatchError(CivilTimeError):
    kind = ErrorKind.DISAMBIGUATION_MISMATCH


class RangeOverflowError(CivilTimeError):
    kind = ErrorKind.RANGE_OVERFLOW


class AmbiguousTimeError(CivilTimeError):
    def __init__(self, message: str, candidates: Tuple[Any, Any]):
        super().__init__(message)
        self.candidates = candidates


class PeriodTableInvariantError(RuntimeError):
    """More than two periods matched a single lookup; the zone data is inconsistent."""


_ERRORS: Dict[ErrorKind, Type[CivilTimeError]] = {
    ErrorKind.INVALID_CIVIL_VALUE: InvalidCivilValueError,
    ErrorKind.UNKNOWN_ZONE: UnknownZoneError,
    ErrorKind.GAP: GapError,
    ErrorKind.DISAMBIGUATION_MISMATCH: DisambiguationMismatchError,
    ErrorKind.RANGE_OVERFLOW: RangeOverflowError,
}


# ───────────────────────────── Result variants ─────────────────────────────

@dataclass(frozen=True)
class Valid(Generic[T]):
    value: T

    ok = True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Ambiguous:
    """Two candidates, sorted ascending by abbreviation."""

    candidates: Tuple[Any, Any]

    ok = False

    def unwrap(self):
        first, second = self.candidates
        raise AmbiguousTimeError(
            f"ambiguous wall time: {first.abbr} or {second.abbr} in {first.zone}",
            self.candidates,
        )

    def earliest(self):
        """The candidate that occurs first in absolute time."""
        return min(self.candidates, key=lambda c: c.utc_gregorian_seconds())

    def latest(self):
        return max(self.candidates, key=lambda c: c.utc_gregorian_seconds())


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    detail: str = ""

    ok = False

    def unwrap(self):
        raise _ERRORS[self.kind](self.detail or self.kind.value)


Resolved = Union[Valid, Ambiguous, Failure]
