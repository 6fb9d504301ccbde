# zonetime/api/routes.py
"""
zonetime: API routes
- Resolve a wall-clock reading in a zone
- Shift / advance / diff zoned values
- Zone and leap-second lookups

Notes:
- Civil values travel as integer fields {year, month, day, hour, minute, second,
  zone, microsecond?}; nothing is parsed from date strings.
- A fold is settled by `total_offset` when the caller sends one, otherwise by
  the configured ambiguous_policy (error → 409, earliest, latest).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadRequest

from zonetime.core.arithmetic import advance, diff
from zonetime.core.disambiguate import disambiguate
from zonetime.core.leapseconds import leap_second_table
from zonetime.core.periods import default_table
from zonetime.core.resolver import resolve
from zonetime.core.results import Ambiguous, AmbiguousTimeError, CivilTimeError
from zonetime.core.shift import shift_zone
from zonetime.core.zoned import ZonedDateTime
from zonetime.utils.metrics import MET_AMBIGUOUS, MET_FAILURES
from zonetime.version import VERSION

log = logging.getLogger(__name__)
api = Blueprint("api", __name__)

_CIVIL_FIELDS = ("year", "month", "day", "hour", "minute", "second")


# ───────────────────────── helpers ─────────────────────────
def _body_json() -> Dict[str, Any]:
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        raise BadRequest("JSON body must be an object")
    return data


def _int_field(data: Dict[str, Any], key: str, required: bool = True) -> Optional[int]:
    value = data.get(key)
    if value is None:
        if required:
            raise BadRequest(f"'{key}' is required")
        return None
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise BadRequest(f"'{key}' must be an integer")
    return value


def _zone_field(data: Dict[str, Any], key: str = "zone") -> str:
    zone = data.get(key)
    if not isinstance(zone, str) or not zone:
        raise BadRequest(f"'{key}' must be a zone name string")
    return zone


def _ambiguous_policy() -> str:
    cfg = getattr(current_app, "cfg", None) or {}
    return cfg.get("ambiguous_policy", "error")


def _settle(result, total_offset: Optional[int]):
    """Valid → value. Ambiguous → total_offset, then policy. Failure → raise."""
    if isinstance(result, Ambiguous):
        if total_offset is not None:
            return disambiguate(result, total_offset).unwrap()
        policy = _ambiguous_policy()
        MET_AMBIGUOUS.labels(policy=policy).inc()
        if policy == "earliest":
            return result.earliest()
        if policy == "latest":
            return result.latest()
    return result.unwrap()


def _civil_value(data: Any, where: str = "") -> ZonedDateTime:
    if not isinstance(data, dict):
        raise BadRequest(f"'{where}' must be an object")
    fields = [_int_field(data, k) for k in _CIVIL_FIELDS]
    result = resolve(*fields, _zone_field(data), _int_field(data, "microsecond", required=False))
    return _settle(result, _int_field(data, "total_offset", required=False))


def _ok(value: ZonedDateTime, **extra):
    return jsonify({"ok": True, "result": value.to_dict(), **extra}), 200


# ───────────────────────── errors ─────────────────────────
@api.errorhandler(AmbiguousTimeError)
def _ambiguous(e: AmbiguousTimeError):
    MET_FAILURES.labels(kind="ambiguous").inc()
    return jsonify({
        "ok": False,
        "error": "ambiguous",
        "detail": str(e),
        "candidates": [c.to_dict() for c in e.candidates],
    }), 409


@api.errorhandler(CivilTimeError)
def _civil_failure(e: CivilTimeError):
    MET_FAILURES.labels(kind=e.kind.value).inc()
    log.debug("Failure %s at %s: %s", e.kind.value, request.path, e)
    return jsonify({"ok": False, "error": e.kind.value, "detail": str(e)}), 422


# ───────────────────────── health / ops ─────────────────────────
@api.get("/api/health")
def health():
    return jsonify({"ok": True, "status": "up", "version": VERSION}), 200


@api.get("/api/config")
def config_info():
    cfg = getattr(current_app, "cfg", None) or {}
    return jsonify({
        "ok": True,
        "ambiguous_policy": cfg.get("ambiguous_policy", "error"),
        "preload_zones": list(cfg.get("preload_zones", [])),
        "version": VERSION,
    }), 200


# ───────────────────────── resolution ─────────────────────────
@api.post("/api/resolve")
def resolve_endpoint():
    """
    Unlike the other endpoints, a fold without total_offset is reported as
    {ok: true, ambiguous: true, candidates: [...]} rather than settled by policy.
    """
    body = _body_json()
    fields = [_int_field(body, k) for k in _CIVIL_FIELDS]
    result = resolve(*fields, _zone_field(body), _int_field(body, "microsecond", required=False))
    total_offset = _int_field(body, "total_offset", required=False)
    if isinstance(result, Ambiguous) and total_offset is None:
        return jsonify({
            "ok": True,
            "ambiguous": True,
            "candidates": [c.to_dict() for c in result.candidates],
        }), 200
    return _ok(_settle(result, total_offset), ambiguous=False)


@api.post("/api/shift")
def shift_endpoint():
    body = _body_json()
    value = _civil_value(body)
    shifted = shift_zone(value, _zone_field(body, "to_zone")).unwrap()
    return _ok(shifted, source=value.to_dict())


@api.post("/api/advance")
def advance_endpoint():
    body = _body_json()
    value = _civil_value(body)
    moved = advance(value, _int_field(body, "seconds")).unwrap()
    return _ok(moved, source=value.to_dict())


@api.post("/api/diff")
def diff_endpoint():
    body = _body_json()
    first = _civil_value(body.get("first"), "first")
    second = _civil_value(body.get("second"), "second")
    d = diff(first, second)
    return jsonify({
        "ok": True,
        "seconds": d.seconds,
        "microseconds": d.microseconds,
        "direction": d.direction.value,
        "total_microseconds": d.total_microseconds,
    }), 200


# ───────────────────────── lookups ─────────────────────────
@api.get("/api/zones/<path:name>")
def zone_info(name: str):
    table = default_table()
    if not table.zone_exists(name):
        return jsonify({"ok": True, "zone": name, "exists": False}), 200
    return jsonify({
        "ok": True,
        "zone": name,
        "exists": True,
        "canonical": table.canonical_zone(name),
        "alias": table.is_alias(name),
    }), 200


@api.get("/api/leap-seconds")
def leap_seconds():
    table = leap_second_table()
    entries = [
        {"date": f"{y:04d}-{m:02d}-{d:02d}", "time": f"{h:02d}:{mi:02d}:{s:02d}"}
        for (y, m, d), (h, mi, s) in table.as_tuples()
    ]
    return jsonify({
        "ok": True,
        "source": table.source,
        "count": len(entries),
        "notes": table.notes,
        "leap_seconds": entries,
    }), 200
