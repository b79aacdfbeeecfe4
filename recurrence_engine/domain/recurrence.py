"""Next-occurrence calculation for built-in and custom recurrence rules.

A ``None`` result means the chain ends here: the rule terminated, the rule is
misconfigured, or the calendar could not build the date. Only contract
violations (a custom rule without its payload) raise.
"""
from __future__ import annotations

import logging

from .calendar_math import (
    DEFAULT_CALENDAR,
    CalendarConfig,
    Instant,
    add_units,
    is_after,
    last_day_of_month,
    local_weekday,
    week_of_year_delta,
    weekday_index,
    with_day,
)
from .entities import CustomRecurrence, Recurrence
from .enums import MonthlyOption, RecurrenceRule, TimeUnit

logger = logging.getLogger(__name__)

_BUILTIN_STEPS = {
    RecurrenceRule.DAILY: (TimeUnit.DAY, 1),
    RecurrenceRule.WEEKLY: (TimeUnit.WEEK, 1),
    RecurrenceRule.BIWEEKLY: (TimeUnit.WEEK, 2),
    RecurrenceRule.MONTHLY: (TimeUnit.MONTH, 1),
    RecurrenceRule.YEARLY: (TimeUnit.YEAR, 1),
}

# Python weekday numbers, independent of the configured first weekday.
_WORKDAYS = frozenset({0, 1, 2, 3, 4})
_WEEKEND = frozenset({5, 6})


def next_occurrence(
    base: Instant,
    rule: RecurrenceRule | str,
    custom: CustomRecurrence | None = None,
    calendar: CalendarConfig | None = None,
) -> Instant | None:
    calendar = calendar or DEFAULT_CALENDAR
    rule = RecurrenceRule(rule)

    if rule is RecurrenceRule.CUSTOM:
        if custom is None:
            raise ValueError("RecurrenceRule.CUSTOM requires a CustomRecurrence")
        return _next_custom(base, custom, calendar)
    if custom is not None:
        raise ValueError(f"CustomRecurrence given with built-in rule {rule.value!r}")
    return _next_builtin(base, rule, calendar)


def next_occurrence_for(
    base: Instant,
    recurrence: Recurrence,
    calendar: CalendarConfig | None = None,
) -> Instant | None:
    if isinstance(recurrence, CustomRecurrence):
        return next_occurrence(base, RecurrenceRule.CUSTOM, recurrence, calendar)
    return next_occurrence(base, recurrence, None, calendar)


def upcoming_occurrences(
    base: Instant,
    recurrence: Recurrence,
    limit: int,
    calendar: CalendarConfig | None = None,
    occurrences_so_far: int = 1,
) -> list[Instant]:
    """Dates the chain would produce after ``base``, at most ``limit`` of them.

    ``occurrences_so_far`` counts the chain members that already exist, ``base``
    included, so an occurrence-count limit can be honored.
    """
    if isinstance(recurrence, CustomRecurrence) and recurrence.occurrence_count is not None:
        limit = min(limit, recurrence.occurrence_count - occurrences_so_far)

    dates: list[Instant] = []
    current = base
    while len(dates) < limit:
        current = next_occurrence_for(current, recurrence, calendar)
        if current is None:
            break
        dates.append(current)
    return dates


def _next_builtin(base: Instant, rule: RecurrenceRule, calendar: CalendarConfig) -> Instant | None:
    try:
        if rule is RecurrenceRule.WEEKDAYS:
            return _next_matching_day(base, _WORKDAYS, calendar)
        if rule is RecurrenceRule.WEEKENDS:
            return _next_matching_day(base, _WEEKEND, calendar)
        unit, count = _BUILTIN_STEPS[rule]
        return add_units(base, unit, count, calendar)
    except (ValueError, OverflowError):
        logger.debug("Calendar rejected next %s occurrence after %s", rule.value, base)
        return None


def _next_matching_day(base: Instant, weekdays: frozenset[int], calendar: CalendarConfig) -> Instant | None:
    for step in range(1, 8):
        candidate = add_units(base, TimeUnit.DAY, step, calendar)
        if local_weekday(candidate, calendar) in weekdays:
            return candidate
    return None


def _next_custom(base: Instant, custom: CustomRecurrence, calendar: CalendarConfig) -> Instant | None:
    if not custom.is_valid:
        logger.debug("Ignoring invalid custom recurrence %r", custom)
        return None

    try:
        if custom.unit is TimeUnit.WEEK and custom.weekdays:
            candidate = _next_selected_weekday(base, custom, calendar)
        elif custom.unit is TimeUnit.MONTH:
            candidate = _next_month_day(base, custom, calendar)
        else:
            candidate = add_units(base, custom.unit, custom.interval, calendar)
    except (ValueError, OverflowError):
        logger.debug("Calendar rejected next occurrence of %r after %s", custom, base)
        return None

    if candidate is None:
        return None
    if custom.end_date is not None and is_after(candidate, custom.end_date, calendar):
        logger.debug("Next occurrence %s is past end date %s", candidate, custom.end_date)
        return None
    return candidate


def _next_selected_weekday(base: Instant, custom: CustomRecurrence, calendar: CalendarConfig) -> Instant | None:
    # Days left in the base week are part of the current cycle; after that only
    # weeks a whole interval away qualify.
    max_steps = custom.interval * 7 + 7
    for step in range(1, max_steps + 1):
        candidate = add_units(base, TimeUnit.DAY, step, calendar)
        if weekday_index(candidate, calendar) not in custom.weekdays:
            continue
        weeks = week_of_year_delta(base, candidate, calendar)
        if weeks == 0 or weeks >= custom.interval:
            return candidate

    logger.debug("No selected weekday found within %d days of %s", max_steps, base)
    return None


def _next_month_day(base: Instant, custom: CustomRecurrence, calendar: CalendarConfig) -> Instant | None:
    next_month = add_units(base, TimeUnit.MONTH, custom.interval, calendar)
    if custom.monthly_option is MonthlyOption.LAST_DAY:
        return last_day_of_month(next_month, calendar)
    if custom.monthly_option is None:
        # add_units already kept base's day, clamped to the month's end.
        return next_month

    target = with_day(next_month, custom.day_of_month, calendar)
    if target is None:
        return last_day_of_month(next_month, calendar)
    return target

