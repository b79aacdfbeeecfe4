from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable

from recurrence_engine.domain.calendar_math import CalendarConfig
from recurrence_engine.domain.entities import CustomRecurrence, TaskEntity, utcnow
from recurrence_engine.domain.recurrence import next_occurrence_for

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class RecurringTaskSpawner:
    """Builds the successor draft for a just-completed recurring task.

    The spawner never stores anything; the caller inserts the returned draft
    and is responsible for not spawning twice for the same completion.
    """

    def __init__(self, calendar: CalendarConfig | None = None, clock: Clock = datetime.now) -> None:
        self._calendar = calendar
        self._clock = clock

    def spawn(self, task: TaskEntity, occurrences_so_far: int | None = None) -> TaskEntity | None:
        if task.recurrence is None:
            return None

        if self._count_exhausted(task.custom_recurrence, occurrences_so_far):
            logger.info("Recurring task %s reached its occurrence count", task.id)
            return None

        base = task.scheduled_date or task.due_date or self._clock()
        next_date = next_occurrence_for(base, task.recurrence, self._calendar)
        if next_date is None:
            logger.info("Recurrence chain of task %s ends after %s", task.root_id, base)
            return None

        scheduled = next_date if task.scheduled_date is not None else None
        due = next_date if task.due_date is not None else None
        if scheduled is None and due is None:
            scheduled = next_date

        successor = replace(
            task,
            id=uuid.uuid4(),
            scheduled_date=scheduled,
            due_date=due,
            parent_task_id=task.parent_task_id or task.id,
            spawned_from_id=task.id,
            is_completed=False,
            completion_date=None,
            created_at=utcnow(),
        )
        logger.debug("Spawned %s from %s for %s", successor.id, task.id, next_date)
        return successor

    @staticmethod
    def _count_exhausted(custom: CustomRecurrence | None, occurrences_so_far: int | None) -> bool:
        if custom is None or custom.occurrence_count is None or occurrences_so_far is None:
            return False
        return occurrences_so_far >= custom.occurrence_count
