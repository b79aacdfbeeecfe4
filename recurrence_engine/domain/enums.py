from __future__ import annotations

from enum import IntEnum, StrEnum


class RecurrenceRule(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"

    @property
    def display_name(self) -> str:
        return _RULE_NAMES[self]


_RULE_NAMES = {
    RecurrenceRule.DAILY: "Daily",
    RecurrenceRule.WEEKLY: "Weekly",
    RecurrenceRule.BIWEEKLY: "Biweekly",
    RecurrenceRule.WEEKDAYS: "Weekdays",
    RecurrenceRule.WEEKENDS: "Weekends",
    RecurrenceRule.MONTHLY: "Monthly",
    RecurrenceRule.YEARLY: "Yearly",
    RecurrenceRule.CUSTOM: "Custom",
}


class TimeUnit(StrEnum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def plural(self) -> str:
        return f"{self.value}s"


class MonthlyOption(StrEnum):
    SAME_DAY = "same_day"
    LAST_DAY = "last_day"


class Priority(IntEnum):
    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    ASAP = 4
