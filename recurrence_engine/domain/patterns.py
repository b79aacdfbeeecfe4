"""Suggest recurrence rules from the completion history of one-off tasks.

Completed tasks are grouped by similar titles; groups with at least three
completions are classified by the mean and spread of the gaps between them.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from statistics import mean, pstdev

from .calendar_math import DEFAULT_CALENDAR, CalendarConfig, local_weekday
from .entities import TaskEntity
from .enums import RecurrenceRule

MIN_OCCURRENCES = 3
SIMILARITY_THRESHOLD = 0.7
SECONDS_PER_DAY = 86400

_FILLER_WORDS = frozenset({"the", "a", "an", "on", "at", "in", "for", "with", "and", "or"})
_DIGITS = re.compile(r"\d+")


class PatternConfidence(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def description(self) -> str:
        return f"{self.name.capitalize()} confidence"


@dataclass(frozen=True)
class PatternMatch:
    task_title: str
    occurrences: tuple[datetime, ...]
    suggested_rule: RecurrenceRule
    confidence: PatternConfidence
    reason: str

    @property
    def average_interval_days(self) -> float | None:
        if len(self.occurrences) < 2:
            return None
        ordered = sorted(self.occurrences)
        gaps = [(b - a).total_seconds() for a, b in zip(ordered, ordered[1:])]
        return mean(gaps) / SECONDS_PER_DAY


def detect_patterns(tasks: list[TaskEntity], calendar: CalendarConfig | None = None) -> list[PatternMatch]:
    calendar = calendar or DEFAULT_CALENDAR
    completed = [t for t in tasks if t.is_completed and t.completion_date is not None]

    patterns = []
    for group in _group_by_title(completed):
        match = _analyze_group(group, calendar)
        if match is not None:
            patterns.append(match)

    patterns.sort(key=lambda m: m.confidence, reverse=True)
    return patterns


def normalize_title(title: str) -> str:
    stripped = _DIGITS.sub("", title.lower()).strip()
    return " ".join(word for word in stripped.split() if word not in _FILLER_WORDS)


def levenshtein_distance(a: str, b: str) -> int:
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(min(previous[j], current[j - 1], previous[j - 1]) + 1)
        previous = current
    return previous[-1]


def titles_similar(a: str, b: str) -> bool:
    longest = max(len(a), len(b))
    if longest == 0:
        return True
    return 1.0 - levenshtein_distance(a, b) / longest > SIMILARITY_THRESHOLD


def _group_by_title(tasks: list[TaskEntity]) -> list[list[TaskEntity]]:
    groups: dict[str, list[TaskEntity]] = {}
    for task in tasks:
        normalized = normalize_title(task.title)
        key = next((k for k in groups if titles_similar(normalized, k)), normalized)
        groups.setdefault(key, []).append(task)
    return [group for group in groups.values() if len(group) >= MIN_OCCURRENCES]


def _analyze_group(group: list[TaskEntity], calendar: CalendarConfig) -> PatternMatch | None:
    if len(group) < MIN_OCCURRENCES:
        return None

    ordered = sorted(group, key=lambda t: t.completion_date)
    dates = tuple(t.completion_date for t in ordered)
    gaps = [(b - a).total_seconds() for a, b in zip(dates, dates[1:])]

    rule, confidence, reason = _classify(mean(gaps), pstdev(gaps), dates, calendar)
    return PatternMatch(
        task_title=ordered[0].title,
        occurrences=dates,
        suggested_rule=rule,
        confidence=confidence,
        reason=reason,
    )


def _classify(
    average: float,
    deviation: float,
    dates: tuple[datetime, ...],
    calendar: CalendarConfig,
) -> tuple[RecurrenceRule, PatternConfidence, str]:
    interval_days = average / SECONDS_PER_DAY
    deviation_days = deviation / SECONDS_PER_DAY

    variation = deviation / average if average > 0 else float("inf")
    if variation < 0.2:
        confidence = PatternConfidence.HIGH
    elif variation < 0.4:
        confidence = PatternConfidence.MEDIUM
    else:
        confidence = PatternConfidence.LOW

    if interval_days < 1.5 and deviation_days < 0.5:
        return RecurrenceRule.DAILY, confidence, "Task completed approximately daily"
    if abs(interval_days - 7) < 1.5 and deviation_days < 2:
        weekdays = {local_weekday(d, calendar) for d in dates}
        if weekdays <= {0, 1, 2, 3, 4}:
            return RecurrenceRule.WEEKDAYS, confidence, "Task completed on specific weekdays"
        if weekdays <= {5, 6}:
            return RecurrenceRule.WEEKENDS, confidence, "Task completed on specific weekdays"
        return RecurrenceRule.WEEKLY, confidence, "Task completed approximately weekly"
    if abs(interval_days - 14) < 2 and deviation_days < 3:
        return RecurrenceRule.BIWEEKLY, confidence, "Task completed approximately every two weeks"
    if abs(interval_days - 30) < 5 and deviation_days < 7:
        return RecurrenceRule.MONTHLY, confidence, "Task completed approximately monthly"
    if abs(interval_days - 365) < 30:
        return RecurrenceRule.YEARLY, confidence, "Task completed approximately yearly"
    return RecurrenceRule.CUSTOM, PatternConfidence.LOW, "No clear pattern detected"
