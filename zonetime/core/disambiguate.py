# zonetime/core/disambiguate.py
from __future__ import annotations

from typing import Union

from zonetime.core.results import Ambiguous, ErrorKind, Failure, Valid

__all__ = ["disambiguate"]


def disambiguate(ambiguous: Ambiguous, total_offset: int) -> Union[Valid, Failure]:
    """
    Pick the fold candidate whose utc_offset + std_offset equals `total_offset`,
    e.g. an offset stored next to a serialized wall time.
    """
    matches = [c for c in ambiguous.candidates if c.total_offset == total_offset]
    if len(matches) == 1:
        return Valid(matches[0])
    offered = ", ".join(f"{c.abbr}={c.total_offset}" for c in ambiguous.candidates)
    if not matches:
        detail = f"total offset {total_offset} matches none of {offered}"
    else:
        detail = f"total offset {total_offset} matches both of {offered}"
    return Failure(ErrorKind.DISAMBIGUATION_MISMATCH, detail)
