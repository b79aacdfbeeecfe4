from __future__ import annotations

from datetime import datetime

from recurrence_engine.domain.entities import TaskEntity
from recurrence_engine.domain.enums import RecurrenceRule
from recurrence_engine.domain.patterns import (
    PatternConfidence,
    detect_patterns,
    levenshtein_distance,
    normalize_title,
    titles_similar,
)


def _done(title: str, when: datetime) -> TaskEntity:
    return TaskEntity(title=title, is_completed=True, completion_date=when)


def test_normalize_title_drops_digits_and_filler_words() -> None:
    assert normalize_title("Water the plants 3") == "water plants"


def test_levenshtein_distance() -> None:
    assert levenshtein_distance("kitten", "sitting") == 3
    assert levenshtein_distance("", "abc") == 3
    assert levenshtein_distance("same", "same") == 0


def test_titles_similar() -> None:
    assert titles_similar("water plants", "water plant")
    assert not titles_similar("water plants", "file taxes")


def test_daily_pattern_with_high_confidence() -> None:
    tasks = [_done("Water plants", datetime(2024, 1, day, 9, 0)) for day in (1, 2, 3, 4)]

    patterns = detect_patterns(tasks)

    assert len(patterns) == 1
    assert patterns[0].suggested_rule is RecurrenceRule.DAILY
    assert patterns[0].confidence is PatternConfidence.HIGH
    assert patterns[0].average_interval_days == 1.0


def test_weekend_pattern() -> None:
    tasks = [_done("Mow lawn", datetime(2024, 1, day, 10, 0)) for day in (6, 13, 20)]

    assert detect_patterns(tasks)[0].suggested_rule is RecurrenceRule.WEEKENDS


def test_monthly_pattern() -> None:
    dates = [datetime(2024, 1, 1), datetime(2024, 1, 31), datetime(2024, 3, 1)]
    tasks = [_done("Pay rent", when) for when in dates]

    assert detect_patterns(tasks)[0].suggested_rule is RecurrenceRule.MONTHLY


def test_groups_need_three_completions_and_ignore_open_tasks() -> None:
    tasks = [
        _done("Dentist", datetime(2024, 1, 1)),
        _done("Dentist", datetime(2024, 7, 1)),
        TaskEntity(title="Dentist"),
    ]

    assert detect_patterns(tasks) == []


def test_patterns_sorted_by_confidence() -> None:
    steady = [_done("Water plants", datetime(2024, 1, day, 9, 0)) for day in (1, 2, 3)]
    erratic = [_done("Clean garage", when) for when in (datetime(2024, 1, 1), datetime(2024, 1, 3), datetime(2024, 3, 1))]

    patterns = detect_patterns(erratic + steady)

    assert [p.task_title for p in patterns] == ["Water plants", "Clean garage"]
    assert patterns[1].suggested_rule is RecurrenceRule.CUSTOM
