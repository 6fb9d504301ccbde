# tests/test_civil.py
from __future__ import annotations

from datetime import datetime

import pytest
from hypothesis import given, strategies as st

from zonetime.core.civil import (
    UNIX_EPOCH_GREGORIAN_SECONDS,
    NaiveDateTime,
    from_gregorian_seconds,
    gregorian_seconds,
    valid_clock,
    valid_date,
)
from zonetime.core.results import InvalidCivilValueError, RangeOverflowError


def test_known_gregorian_seconds():
    assert gregorian_seconds(2014, 9, 26, 17, 10, 20) == 63578970620
    assert from_gregorian_seconds(63578970620) == ((2014, 9, 26), (17, 10, 20))


def test_unix_epoch_offset():
    # 719_528 days from 0000-01-01 to 1970-01-01
    assert UNIX_EPOCH_GREGORIAN_SECONDS == 62167219200


def test_second_60_lands_on_next_minute():
    assert gregorian_seconds(2015, 6, 30, 23, 59, 60) == gregorian_seconds(2015, 7, 1, 0, 0, 0)


@pytest.mark.parametrize("ymd,ok", [
    ((2016, 2, 29), True),
    ((2015, 2, 29), False),
    ((2000, 2, 29), True),
    ((1900, 2, 29), False),
    ((2015, 4, 31), False),
    ((2015, 13, 1), False),
    ((0, 1, 1), False),
    ((10000, 1, 1), False),
])
def test_valid_date(ymd, ok):
    assert valid_date(*ymd) is ok


@pytest.mark.parametrize("hms,ok", [
    ((0, 0, 0), True),
    ((23, 59, 60), True),
    ((24, 0, 0), False),
    ((12, 60, 0), False),
    ((12, 0, 61), False),
    ((-1, 0, 0), False),
])
def test_valid_clock(hms, ok):
    assert valid_clock(*hms) is ok


def test_from_gregorian_seconds_out_of_range():
    with pytest.raises(RangeOverflowError):
        from_gregorian_seconds(-1)
    with pytest.raises(RangeOverflowError):
        from_gregorian_seconds(gregorian_seconds(9999, 12, 31, 23, 59, 59) + 1)


@given(st.datetimes(min_value=datetime(1, 1, 1)))
def test_gregorian_seconds_inverse(dt):
    secs = gregorian_seconds(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second)
    assert from_gregorian_seconds(secs) == ((dt.year, dt.month, dt.day), (dt.hour, dt.minute, dt.second))


def test_naive_from_tuple():
    n = NaiveDateTime.from_tuple(((2014, 9, 26), (17, 10, 20)), 5)
    assert n.to_tuple() == ((2014, 9, 26), (17, 10, 20))
    assert n.to_micro_tuple() == ((2014, 9, 26), (17, 10, 20, 5))
    assert n.gregorian_seconds() == 63578970620


def test_naive_from_tuple_rejects_nonsense():
    with pytest.raises(InvalidCivilValueError):
        NaiveDateTime.from_tuple(((2014, 2, 30), (0, 0, 0)))
    with pytest.raises(InvalidCivilValueError):
        NaiveDateTime.from_tuple(((2014, 2, 1), (0, 0, 0)), 1_000_000)
