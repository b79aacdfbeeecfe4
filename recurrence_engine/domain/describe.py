from __future__ import annotations

import calendar as std_calendar
from datetime import date

from .calendar_math import DEFAULT_CALENDAR, CalendarConfig
from .entities import CustomRecurrence, Recurrence
from .enums import MonthlyOption, TimeUnit


def weekday_name(index: int, calendar: CalendarConfig = DEFAULT_CALENDAR) -> str:
    """Name of the weekday at ``index`` counted from the calendar's first weekday."""
    return std_calendar.day_name[(index + calendar.first_weekday) % 7]


def describe(recurrence: Recurrence | None, calendar: CalendarConfig | None = None) -> str:
    if recurrence is None:
        return "Does not repeat"
    if not isinstance(recurrence, CustomRecurrence):
        return recurrence.display_name
    return _describe_custom(recurrence, calendar or DEFAULT_CALENDAR)


def _describe_custom(custom: CustomRecurrence, calendar: CalendarConfig) -> str:
    if custom.interval == 1:
        text = f"Repeats every {custom.unit.value}"
    else:
        text = f"Repeats every {custom.interval} {custom.unit.plural}"

    if custom.weekdays:
        names = [weekday_name(day, calendar) for day in sorted(custom.weekdays)]
        text += f" on {', '.join(names)}"

    if custom.unit is TimeUnit.MONTH:
        if custom.monthly_option is MonthlyOption.LAST_DAY:
            text += " on the last day"
        elif custom.day_of_month is not None:
            text += f" on day {custom.day_of_month}"

    if custom.end_date is not None:
        text += f", until {_format_date(custom.end_date)}"
    elif custom.occurrence_count is not None:
        text += f", {custom.occurrence_count} times"
    else:
        text += ", forever"
    return text


def _format_date(value: date) -> str:
    return value.strftime("%b %d, %Y")
