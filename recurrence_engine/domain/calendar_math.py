"""Calendar arithmetic used by the recurrence calculator.

All helpers take the calendar configuration explicitly. Aware datetimes are
moved into the configured zone before any wall-clock math and re-localized
afterwards, naive datetimes and plain dates are treated as local wall time.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import TypeVar
from zoneinfo import ZoneInfo

from recurrence_engine.config import SETTINGS, Settings

from .enums import TimeUnit

Instant = TypeVar("Instant", date, datetime)


@dataclass(frozen=True)
class CalendarConfig:
    time_zone: tzinfo | None = None
    # Python weekday numbering: 0 is Monday, 6 is Sunday.
    first_weekday: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.first_weekday <= 6:
            raise ValueError(f"first_weekday must be in 0..6, got {self.first_weekday}")

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> CalendarConfig:
        settings = settings or SETTINGS
        zone = ZoneInfo(settings.time_zone) if settings.time_zone else None
        return cls(time_zone=zone, first_weekday=settings.first_weekday)


DEFAULT_CALENDAR = CalendarConfig()


def _to_local(value: Instant, calendar: CalendarConfig) -> tuple[Instant, tzinfo | None]:
    if isinstance(value, datetime) and value.tzinfo is not None:
        zone = calendar.time_zone or value.tzinfo
        return value.astimezone(zone).replace(tzinfo=None), zone
    return value, None


def _from_local(value: Instant, zone: tzinfo | None) -> Instant:
    if zone is None:
        return value
    return value.replace(tzinfo=zone)


def _is_aware(value: date) -> bool:
    return isinstance(value, datetime) and value.tzinfo is not None


def _calendar_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def days_in_month(year: int, month: int) -> int:
    if month == 12:
        next_month = date(year + 1, 1, 1)
    else:
        next_month = date(year, month + 1, 1)
    return (next_month - timedelta(days=1)).day


def _add_months(base: Instant, months: int) -> Instant:
    total = base.year * 12 + base.month - 1 + months
    year, month = divmod(total, 12)
    month += 1
    day = min(base.day, days_in_month(year, month))
    return base.replace(year=year, month=month, day=day)


def add_units(value: Instant, unit: TimeUnit | str, count: int, calendar: CalendarConfig = DEFAULT_CALENDAR) -> Instant:
    """Add ``count`` units to ``value``.

    Month and year steps keep the day of month, clamped to the last day of the
    target month (Jan 31 + 1 month is Feb 28/29).
    """
    unit = TimeUnit(unit)
    local, zone = _to_local(value, calendar)
    if unit is TimeUnit.DAY:
        result = local + timedelta(days=count)
    elif unit is TimeUnit.WEEK:
        result = local + timedelta(weeks=count)
    elif unit is TimeUnit.MONTH:
        result = _add_months(local, count)
    else:
        result = _add_months(local, count * 12)
    return _from_local(result, zone)


def start_of_day(value: Instant, calendar: CalendarConfig = DEFAULT_CALENDAR) -> Instant:
    if not isinstance(value, datetime):
        return value
    local, zone = _to_local(value, calendar)
    return _from_local(local.replace(hour=0, minute=0, second=0, microsecond=0), zone)


def last_day_of_month(value: Instant, calendar: CalendarConfig = DEFAULT_CALENDAR) -> Instant:
    local, zone = _to_local(value, calendar)
    return _from_local(local.replace(day=days_in_month(local.year, local.month)), zone)


def with_day(value: Instant, day: int, calendar: CalendarConfig = DEFAULT_CALENDAR) -> Instant | None:
    """Move ``value`` to ``day`` of its month, or None if that day does not exist."""
    local, zone = _to_local(value, calendar)
    if not 1 <= day <= days_in_month(local.year, local.month):
        return None
    return _from_local(local.replace(day=day), zone)


def local_weekday(value: date, calendar: CalendarConfig = DEFAULT_CALENDAR) -> int:
    """Python weekday (0 is Monday) of ``value`` in the calendar's zone."""
    local, _ = _to_local(value, calendar)
    return local.weekday()


def weekday_index(value: date, calendar: CalendarConfig = DEFAULT_CALENDAR) -> int:
    return (local_weekday(value, calendar) - calendar.first_weekday) % 7


def week_start(value: date, calendar: CalendarConfig = DEFAULT_CALENDAR) -> date:
    local, _ = _to_local(value, calendar)
    day = _calendar_date(local)
    return day - timedelta(days=weekday_index(day, calendar))


def week_of_year_delta(start: date, end: date, calendar: CalendarConfig = DEFAULT_CALENDAR) -> int:
    """Number of calendar weeks between the weeks containing ``start`` and ``end``."""
    return (week_start(end, calendar) - week_start(start, calendar)).days // 7


def is_after(candidate: date, bound: date, calendar: CalendarConfig = DEFAULT_CALENDAR) -> bool:
    """Strict ``candidate > bound`` in the calendar's wall time.

    A plain date on either side compares calendar days. Aware and naive
    datetimes may be mixed.
    """
    if _is_aware(candidate) and _is_aware(bound):
        return candidate > bound
    candidate, _ = _to_local(candidate, calendar)
    bound, _ = _to_local(bound, calendar)
    if isinstance(candidate, datetime) != isinstance(bound, datetime):
        return _calendar_date(candidate) > _calendar_date(bound)
    return candidate > bound
