from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from recurrence_engine.domain.calendar_math import (
    CalendarConfig,
    add_units,
    days_in_month,
    is_after,
    last_day_of_month,
    start_of_day,
    week_of_year_delta,
    weekday_index,
    with_day,
)
from recurrence_engine.domain.enums import TimeUnit

MONDAY_FIRST = CalendarConfig(first_weekday=0)
SUNDAY_FIRST = CalendarConfig(first_weekday=6)


@pytest.mark.parametrize(
    ("unit", "count", "expected"),
    [
        (TimeUnit.DAY, 1, date(2024, 2, 1)),
        (TimeUnit.WEEK, 2, date(2024, 2, 14)),
        (TimeUnit.MONTH, 1, date(2024, 2, 29)),
        (TimeUnit.MONTH, 13, date(2025, 2, 28)),
        (TimeUnit.YEAR, 1, date(2025, 1, 31)),
    ],
)
def test_add_units_clamps_month_end(unit: TimeUnit, count: int, expected: date) -> None:
    assert add_units(date(2024, 1, 31), unit, count) == expected


def test_add_units_keeps_time_of_day() -> None:
    assert add_units(datetime(2024, 1, 31, 8, 30), "month", 1) == datetime(2024, 2, 29, 8, 30)


def test_add_units_keeps_wall_clock_across_dst() -> None:
    zone = ZoneInfo("America/New_York")
    calendar = CalendarConfig(time_zone=zone)
    base = datetime(2025, 3, 8, 9, 0, tzinfo=zone)

    result = add_units(base, TimeUnit.DAY, 1, calendar)

    assert result.hour == 9
    assert result.utcoffset() == timedelta(hours=-4)


def test_start_of_day() -> None:
    assert start_of_day(datetime(2024, 5, 3, 17, 45, 12)) == datetime(2024, 5, 3)
    assert start_of_day(date(2024, 5, 3)) == date(2024, 5, 3)


def test_days_in_month() -> None:
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2023, 2) == 28
    assert days_in_month(2024, 12) == 31
    assert days_in_month(2024, 4) == 30


def test_last_day_of_month() -> None:
    assert last_day_of_month(date(2025, 4, 3)) == date(2025, 4, 30)
    assert last_day_of_month(datetime(2024, 2, 1, 7)) == datetime(2024, 2, 29, 7)


def test_with_day_refuses_missing_day() -> None:
    assert with_day(date(2025, 4, 10), 31) is None
    assert with_day(date(2025, 4, 10), 30) == date(2025, 4, 30)


def test_weekday_index_follows_first_weekday() -> None:
    sunday = date(2024, 1, 7)
    monday = date(2024, 1, 8)

    assert weekday_index(monday, MONDAY_FIRST) == 0
    assert weekday_index(sunday, MONDAY_FIRST) == 6
    assert weekday_index(sunday, SUNDAY_FIRST) == 0
    assert weekday_index(monday, SUNDAY_FIRST) == 1


def test_week_of_year_delta() -> None:
    monday = date(2024, 1, 1)

    assert week_of_year_delta(monday, date(2024, 1, 7), MONDAY_FIRST) == 0
    assert week_of_year_delta(monday, date(2024, 1, 8), MONDAY_FIRST) == 1
    assert week_of_year_delta(monday, date(2024, 1, 15), MONDAY_FIRST) == 2
    # Sunday starts a new week when weeks begin on Sunday.
    assert week_of_year_delta(monday, date(2024, 1, 7), SUNDAY_FIRST) == 1


def test_is_after_mixes_dates_and_datetimes() -> None:
    assert not is_after(datetime(2025, 3, 1, 23, 0), date(2025, 3, 1))
    assert is_after(datetime(2025, 3, 2, 0, 0), date(2025, 3, 1))
    assert not is_after(date(2025, 3, 1), date(2025, 3, 1))


def test_is_after_compares_aware_and_naive_in_calendar_zone() -> None:
    berlin = CalendarConfig(time_zone=ZoneInfo("Europe/Berlin"))
    bound = datetime(2025, 3, 1, 8, 0, tzinfo=ZoneInfo("UTC"))

    assert not is_after(datetime(2025, 3, 1, 9, 0), bound, berlin)
    assert is_after(datetime(2025, 3, 1, 9, 30), bound, berlin)
    assert is_after(bound, datetime(2025, 3, 1, 8, 59), berlin)
    assert not is_after(date(2025, 3, 1), bound, berlin)
    assert is_after(datetime(2025, 3, 1, 9, 0, tzinfo=ZoneInfo("Europe/Berlin")), date(2025, 2, 28))


def test_calendar_config_rejects_bad_first_weekday() -> None:
    with pytest.raises(ValueError):
        CalendarConfig(first_weekday=7)
