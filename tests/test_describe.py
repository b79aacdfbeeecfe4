from __future__ import annotations

from datetime import date

from recurrence_engine.domain.calendar_math import CalendarConfig
from recurrence_engine.domain.describe import describe, weekday_name
from recurrence_engine.domain.entities import CustomRecurrence
from recurrence_engine.domain.enums import MonthlyOption, RecurrenceRule, TimeUnit


def test_describe_builtin_and_missing() -> None:
    assert describe(None) == "Does not repeat"
    assert describe(RecurrenceRule.WEEKDAYS) == "Weekdays"


def test_describe_weekly_with_days_until_date() -> None:
    custom = CustomRecurrence(interval=2, unit=TimeUnit.WEEK, selected_days={2, 0}, end_date=date(2025, 3, 1))

    text = describe(custom, CalendarConfig(first_weekday=0))

    assert text == "Repeats every 2 weeks on Monday, Wednesday, until Mar 01, 2025"


def test_describe_last_day_forever() -> None:
    custom = CustomRecurrence(interval=1, unit=TimeUnit.MONTH, monthly_option=MonthlyOption.LAST_DAY)

    assert describe(custom) == "Repeats every month on the last day, forever"


def test_describe_occurrence_count() -> None:
    custom = CustomRecurrence(interval=1, unit=TimeUnit.DAY, occurrence_count=10)

    assert describe(custom) == "Repeats every day, 10 times"


def test_weekday_name_respects_first_weekday() -> None:
    assert weekday_name(0, CalendarConfig(first_weekday=6)) == "Sunday"
    assert weekday_name(0, CalendarConfig(first_weekday=0)) == "Monday"
