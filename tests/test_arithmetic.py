# tests/test_arithmetic.py
from __future__ import annotations

from dataclasses import replace

import pytest
from hypothesis import assume, given, strategies as st

from zonetime.core.arithmetic import (
    Difference,
    Direction,
    advance,
    diff,
    is_after,
    is_before,
    is_same_time,
)
from zonetime.core.resolver import resolve
from zonetime.core.results import ErrorKind, Failure, Valid


def _at(*fields, zone="Etc/UTC", us=None, **kw):
    return resolve(*fields, zone, us, **kw).unwrap()


# ─────────────────────────────────────────────────────────────────────────────
# advance
# ─────────────────────────────────────────────────────────────────────────────

def test_advance_across_spring_forward():
    start = _at(2015, 3, 8, 1, 59, 59, zone="America/New_York")
    v = advance(start, 10).unwrap()
    assert v.to_tuple() == ((2015, 3, 8), (3, 0, 9))
    assert v.abbr == "EDT"


def test_advance_backwards_over_midnight():
    start = _at(2014, 10, 2, 0, 0, 0, zone="America/New_York")
    v = advance(start, -62).unwrap()
    assert v.to_tuple() == ((2014, 10, 1), (23, 58, 58))


def test_advance_through_fold_changes_period():
    first = resolve(2014, 11, 2, 1, 30, 0, "America/New_York").earliest()
    assert first.abbr == "EDT"
    v = advance(first, 3600).unwrap()
    assert v.to_tuple() == ((2014, 11, 2), (1, 30, 0))
    assert v.abbr == "EST"


def test_advance_keeps_microsecond():
    v = advance(_at(2014, 1, 1, 0, 0, 0, us=7), 1).unwrap()
    assert v.microsecond == 7
    assert advance(_at(2014, 1, 1, 0, 0, 0), 1).unwrap().microsecond is None


def test_advance_range_overflow():
    r = advance(_at(2014, 10, 2, 0, 0, 0, zone="America/New_York"), -999999999999)
    assert isinstance(r, Failure) and r.kind is ErrorKind.RANGE_OVERFLOW


@pytest.mark.parametrize("bad", [1.5, "10", None, True])
def test_advance_requires_int(bad):
    with pytest.raises(TypeError):
        advance(_at(2014, 1, 1, 0, 0, 0), bad)


# ─────────────────────────────────────────────────────────────────────────────
# diff
# ─────────────────────────────────────────────────────────────────────────────

def test_diff_across_dst_change():
    later = _at(2014, 3, 30, 4, 0, 0, zone="Europe/Stockholm")
    earlier = _at(2014, 3, 30, 1, 0, 0, zone="Europe/Stockholm")
    assert diff(later, earlier) == Difference(7200, 0, Direction.AFTER)
    assert diff(earlier, later) == Difference(-7200, 0, Direction.BEFORE)


def test_diff_same_instant_different_zones():
    a = _at(2014, 9, 26, 17, 10, 20)
    b = _at(2014, 9, 26, 19, 10, 20, zone="Europe/Berlin")
    assert diff(a, b).as_tuple() == (0, 0, "same_time")
    assert is_same_time(a, b)


@pytest.mark.parametrize("a,b,expected", [
    ((10, 0), (0, 2), (9, 999998, Direction.AFTER)),
    ((0, 2), (10, 0), (-9, 999998, Direction.BEFORE)),
    ((0, 0), (10, 2), (-10, 2, Direction.BEFORE)),
    ((1, 0), (0, 100), (0, 999900, Direction.AFTER)),
    ((0, 0), (0, 2), (0, 2, Direction.BEFORE)),
])
def test_diff_subsecond_carry(a, b, expected):
    (sa, ua), (sb, ub) = a, b
    x = _at(2014, 1, 1, 0, 0, sa, us=ua)
    y = _at(2014, 1, 1, 0, 0, sb, us=ub)
    d = diff(x, y)
    assert (d.seconds, d.microseconds, d.direction) == expected


def test_diff_total_microseconds():
    x = _at(2014, 1, 1, 0, 0, 0, us=0)
    y = _at(2014, 1, 1, 0, 0, 0, us=2)
    assert diff(x, y).total_microseconds == -2
    assert diff(y, x).total_microseconds == 2


def test_diff_leap_second_counts_as_next_minute(leaps):
    a = _at(2015, 1, 1, 1, 1, 1)
    b = _at(2015, 6, 30, 23, 59, 60, leaps=leaps)
    assert diff(a, b) == Difference(-15634739, 0, Direction.BEFORE)
    assert diff(b, _at(2015, 7, 1, 0, 0, 0)).direction is Direction.SAME_TIME


def test_ordering_helpers():
    a = _at(2014, 1, 1, 0, 0, 0)
    b = _at(2014, 1, 1, 0, 0, 1)
    assert is_before(a, b) and not is_after(a, b)
    assert is_after(b, a) and not is_before(b, a)
    assert not is_same_time(a, b)


# ─────────────────────────────────────────────────────────────────────────────
# Properties
# ─────────────────────────────────────────────────────────────────────────────

@given(
    st.tuples(st.integers(1970, 2030), st.integers(1, 12), st.integers(1, 28),
              st.integers(0, 23), st.integers(0, 59), st.integers(0, 59)),
    st.sampled_from(["Etc/UTC", "America/New_York", "Europe/Copenhagen", "Australia/Lord_Howe"]),
    st.integers(-10 * 365 * 86400, 10 * 365 * 86400),
    st.one_of(st.none(), st.integers(0, 999_999)),
)
def test_diff_of_advance_is_the_step(fields, zone, seconds, us):
    r = resolve(*fields, zone, us)
    assume(isinstance(r, Valid))
    moved = advance(r.value, seconds).unwrap()
    d = diff(moved, r.value)
    assert (d.seconds, d.microseconds) == (seconds, 0)
    if seconds > 0:
        assert d.direction is Direction.AFTER
    elif seconds < 0:
        assert d.direction is Direction.BEFORE
    else:
        assert d.direction is Direction.SAME_TIME


@given(st.integers(-10**12, 10**12), st.integers(-10**12, 10**12))
def test_diff_split_reassembles(ua, ub):
    # operands are x + ua µs and x + ub µs
    x = _at(2014, 9, 26, 17, 10, 20)
    sa, ra = divmod(ua, 1_000_000)
    sb, rb = divmod(ub, 1_000_000)
    a = advance(replace(x, microsecond=ra), sa).unwrap()
    b = advance(replace(x, microsecond=rb), sb).unwrap()
    d = diff(a, b)
    assert d.total_microseconds == ua - ub
    assert 0 <= d.microseconds < 1_000_000
