# tests/test_posixtz.py
from __future__ import annotations

from datetime import date

import pytest

from zonetime.core.civil import gregorian_seconds
from zonetime.core.posixtz import DateRule, parse_posix_tz, read_footer


@pytest.mark.parametrize("text,std,dst", [
    ("EST5EDT,M3.2.0,M11.1.0", ("EST", -18000), ("EDT", -14400)),
    ("<+1030>-10:30<+11>-11,M10.1.0,M4.1.0", ("+1030", 37800), ("+11", 39600)),
    ("<+1245>-12:45<+1345>,M9.5.0/2:45,M4.1.0/3:45", ("+1245", 45900), ("+1345", 49500)),
    ("IST-1GMT0,M10.5.0,M3.5.0/1", ("IST", 3600), ("GMT", 0)),  # negative DST
])
def test_parse_with_dst(text, std, dst):
    tz = parse_posix_tz(text)
    assert tz.has_dst
    assert (tz.std_abbr, tz.std_offset) == std
    assert (tz.dst_abbr, tz.dst_offset) == dst


def test_parse_fixed_offset():
    tz = parse_posix_tz("<+0545>-5:45")
    assert not tz.has_dst
    assert (tz.std_abbr, tz.std_offset) == ("+0545", 20700)
    assert tz.transitions(2040, 2050) == []


@pytest.mark.parametrize("text,time", [
    ("M3.2.0", 7200),
    ("M3.5.0/-2", -7200),
    ("M9.1.6/24", 86400),
    ("J365/25", 90000),
    ("M9.5.0/2:45", 9900),
])
def test_switch_times(text, time):
    assert DateRule.parse(text).time == time


@pytest.mark.parametrize("text", ["5EST", "EST5EDT", "EST5EDT,M13.1.0,M11.1.0", "EST5EDT,M3.2.0"])
def test_parse_rejects(text):
    with pytest.raises(ValueError):
        parse_posix_tz(text)


@pytest.mark.parametrize("rule,year,expected", [
    ("M3.2.0", 2040, date(2040, 3, 11)),    # second Sunday
    ("M10.5.0", 2040, date(2040, 10, 28)),  # last Sunday
    ("M4.1.0", 2045, date(2045, 4, 2)),
    ("J60", 2040, date(2040, 3, 1)),        # Feb 29 skipped
    ("J60", 2041, date(2041, 3, 1)),
    ("59", 2040, date(2040, 2, 29)),        # zero-based, Feb 29 counted
])
def test_rule_day(rule, year, expected):
    assert DateRule.parse(rule).day(year) == expected


def test_transitions_in_utc():
    tz = parse_posix_tz("EST5EDT,M3.2.0,M11.1.0")
    assert tz.transitions(2040, 2040) == [
        (gregorian_seconds(2040, 3, 11, 7, 0, 0), True),
        (gregorian_seconds(2040, 11, 4, 6, 0, 0), False),
    ]


def test_all_year_dst_has_no_standard_time():
    tz = parse_posix_tz("EST5EDT4,0/0,J365/25")
    flags = [is_dst for _, is_dst in tz.transitions(2040, 2042)]
    assert flags == [True, True, True, False]


def test_read_footer_from_pytz():
    assert read_footer("America/New_York") == "EST5EDT,M3.2.0,M11.1.0"
