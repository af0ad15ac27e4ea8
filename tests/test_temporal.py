from datetime import date, datetime

import pytest

from skola24.errors import MalformedTimeString
from skola24.temporal import (
    parse_time,
    resolve_instant,
    resolve_span,
    week_start,
    weeks_in_year,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("00:00:00", 0),
        ("08:15:00", 8 * 3600 + 15 * 60),
        ("13:05:30", 13 * 3600 + 5 * 60 + 30),
        ("8:05:00", 8 * 3600 + 5 * 60),
        ("24:00:00", 24 * 3600),
    ],
)
def test_parse_time(value, expected):
    assert parse_time(value) == expected


@pytest.mark.parametrize(
    "value", ["08:00", "8", "", "ab:cd:ef", "08:60:00", "08:00:61", "25:00:00", "24:00:01"]
)
def test_parse_time_rejects_malformed(value):
    with pytest.raises(MalformedTimeString) as excinfo:
        parse_time(value)
    assert excinfo.value.value == value


def test_week_start_is_iso_monday():
    # 2026-01-01 is a Thursday, so ISO week 1 starts in December 2025
    assert week_start(1, 2026) == datetime(2025, 12, 29)
    assert week_start(42, 2026) == datetime(2026, 10, 12)
    assert week_start(42, 2026).isocalendar()[:2] == (2026, 42)


def test_week_53_rolls_into_next_year_when_year_has_52_weeks():
    assert weeks_in_year(2021) == 52
    assert week_start(53, 2021) == week_start(1, 2022)
    assert week_start(53, 2021) == datetime(2022, 1, 3)


def test_week_53_stays_in_year_when_year_has_53_weeks():
    assert weeks_in_year(2020) == 53
    assert week_start(53, 2020) == datetime(2020, 12, 28)
    assert week_start(53, 2020) != week_start(1, 2021)


def test_week_zero_is_last_week_of_previous_year():
    assert week_start(0, 2022) == week_start(52, 2021)


def test_resolve_instant():
    assert resolve_instant(42, 2026, 1, "08:15:00") == datetime(2026, 10, 12, 8, 15)
    assert resolve_instant(42, 2026, 5, "15:30:00") == datetime(2026, 10, 16, 15, 30)
    assert resolve_instant(42, 2026, 7, "23:59:59") == datetime(2026, 10, 18, 23, 59, 59)


def test_resolve_instant_is_deterministic():
    first = resolve_instant(10, 2025, 3, "10:00:00")
    second = resolve_instant(10, 2025, 3, "10:00:00")
    assert first == second
    assert first.date() == date.fromisocalendar(2025, 10, 3)


def test_resolve_instant_has_no_timezone():
    assert resolve_instant(1, 2025, 1, "08:00:00").tzinfo is None


def test_resolve_instant_rejects_bad_weekday():
    with pytest.raises(ValueError):
        resolve_instant(1, 2025, 0, "08:00:00")
    with pytest.raises(ValueError):
        resolve_instant(1, 2025, 8, "08:00:00")


def test_resolve_span():
    start, end = resolve_span(42, 2026, 2, "08:00:00", "09:30:00")
    assert start == datetime(2026, 10, 13, 8, 0)
    assert end == datetime(2026, 10, 13, 9, 30)
