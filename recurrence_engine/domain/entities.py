from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional, Union

from .enums import MonthlyOption, Priority, RecurrenceRule, TimeUnit


@dataclass(frozen=True)
class CustomRecurrence:
    interval: int
    unit: TimeUnit
    selected_days: frozenset[int] | None = None
    monthly_option: MonthlyOption | None = None
    day_of_month: int | None = None
    end_date: Optional[date] = None
    occurrence_count: int | None = None

    def __post_init__(self) -> None:
        # Accepts the plain strings and lists of a decoded payload.
        object.__setattr__(self, "unit", TimeUnit(self.unit))
        if self.monthly_option is not None:
            object.__setattr__(self, "monthly_option", MonthlyOption(self.monthly_option))
        if self.selected_days is not None:
            object.__setattr__(self, "selected_days", frozenset(int(d) for d in self.selected_days))

    @property
    def is_valid(self) -> bool:
        if self.interval < 1:
            return False
        if self.occurrence_count is not None and self.occurrence_count < 1:
            return False
        if self.unit is TimeUnit.WEEK and self.selected_days:
            if any(not 0 <= day <= 6 for day in self.selected_days):
                return False
        if self.unit is TimeUnit.MONTH and self.monthly_option is MonthlyOption.SAME_DAY:
            if self.day_of_month is None or not 1 <= self.day_of_month <= 31:
                return False
        return True

    @property
    def weekdays(self) -> frozenset[int]:
        """Selected weekdays, only when they apply to the active unit."""
        if self.unit is not TimeUnit.WEEK or not self.selected_days:
            return frozenset()
        return self.selected_days

    def to_dict(self) -> dict[str, Any]:
        return {
            "interval": self.interval,
            "unit": self.unit.value,
            "selected_days": sorted(self.selected_days) if self.selected_days is not None else None,
            "monthly_option": self.monthly_option.value if self.monthly_option else None,
            "day_of_month": self.day_of_month,
            "end_date": _encode_instant(self.end_date),
            "occurrence_count": self.occurrence_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CustomRecurrence:
        return cls(
            interval=int(data.get("interval", 1)),
            unit=TimeUnit(data.get("unit", TimeUnit.DAY.value)),
            selected_days=data.get("selected_days"),
            monthly_option=data.get("monthly_option"),
            day_of_month=data.get("day_of_month"),
            end_date=_decode_instant(data.get("end_date")),
            occurrence_count=data.get("occurrence_count"),
        )


Recurrence = Union[RecurrenceRule, CustomRecurrence]


def _encode_instant(value: Optional[date]) -> str | None:
    return value.isoformat() if value is not None else None


def _decode_instant(raw: str | None) -> Optional[date]:
    if not raw:
        return None
    if "T" in raw:
        return datetime.fromisoformat(raw)
    return date.fromisoformat(raw)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class TaskEntity:
    title: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    notes: str = ""
    tags: tuple[str, ...] = ()
    scheduled_date: Optional[date] = None
    due_date: Optional[date] = None
    recurrence: Recurrence | None = None
    parent_task_id: uuid.UUID | None = None
    spawned_from_id: uuid.UUID | None = None
    is_completed: bool = False
    completion_date: Optional[datetime] = None
    project_id: uuid.UUID | None = None
    area_id: uuid.UUID | None = None
    priority: Priority = Priority.NONE
    estimated_duration: Optional[timedelta] = None
    reminder_time: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if isinstance(self.recurrence, str) and not isinstance(self.recurrence, RecurrenceRule):
            object.__setattr__(self, "recurrence", RecurrenceRule(self.recurrence))
        if self.recurrence is RecurrenceRule.CUSTOM:
            raise ValueError("custom recurrence must carry a CustomRecurrence, not the bare CUSTOM rule")
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "priority", Priority(self.priority))

    @property
    def recurrence_rule(self) -> RecurrenceRule | None:
        if isinstance(self.recurrence, CustomRecurrence):
            return RecurrenceRule.CUSTOM
        return self.recurrence

    @property
    def custom_recurrence(self) -> CustomRecurrence | None:
        if isinstance(self.recurrence, CustomRecurrence):
            return self.recurrence
        return None

    @property
    def root_id(self) -> uuid.UUID:
        return self.parent_task_id or self.id
