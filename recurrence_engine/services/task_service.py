from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable, Optional, Protocol

from recurrence_engine.config import SETTINGS
from recurrence_engine.domain.calendar_math import CalendarConfig
from recurrence_engine.domain.entities import Recurrence, TaskEntity
from recurrence_engine.domain.patterns import PatternMatch, detect_patterns
from recurrence_engine.domain.recurrence import upcoming_occurrences

from .spawner import RecurringTaskSpawner

logger = logging.getLogger(__name__)


class TaskNotFoundError(LookupError):
    def __init__(self, task_id: uuid.UUID) -> None:
        super().__init__(f"task {task_id} not found")
        self.task_id = task_id


class TaskStore(Protocol):
    def get_task(self, task_id: uuid.UUID) -> Optional[TaskEntity]: ...

    def add_task(self, task: TaskEntity) -> TaskEntity: ...

    def update_task(self, task: TaskEntity) -> Optional[TaskEntity]: ...

    def delete_task(self, task_id: uuid.UUID) -> None: ...

    def list_tasks(self, completed: bool | None = None) -> list[TaskEntity]: ...

    def list_chain(self, root_id: uuid.UUID) -> list[TaskEntity]: ...

    def find_successor(self, task_id: uuid.UUID) -> Optional[TaskEntity]: ...


@dataclass(frozen=True)
class CompletionResult:
    task: TaskEntity
    successor: TaskEntity | None = None


class TaskService:
    def __init__(
        self,
        store: TaskStore,
        calendar: CalendarConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._calendar = calendar or CalendarConfig.from_settings()
        self._clock = clock
        self._spawner = RecurringTaskSpawner(self._calendar, clock)

    def create_task(self, task: TaskEntity) -> TaskEntity:
        return self._store.add_task(task)

    def get_task(self, task_id: uuid.UUID) -> TaskEntity | None:
        return self._store.get_task(task_id)

    def delete_task(self, task_id: uuid.UUID) -> None:
        self._store.delete_task(task_id)

    def list_tasks(self, completed: bool | None = None) -> list[TaskEntity]:
        return self._store.list_tasks(completed)

    def list_chain(self, task_id: uuid.UUID) -> list[TaskEntity]:
        return self._store.list_chain(self._require(task_id).root_id)

    def update_recurrence(self, task_id: uuid.UUID, recurrence: Recurrence | None) -> TaskEntity:
        task = replace(self._require(task_id), recurrence=recurrence)
        self._store.update_task(task)
        return task

    def mark_done(self, task_id: uuid.UUID) -> CompletionResult:
        return self.set_completed(task_id, True)

    def reopen(self, task_id: uuid.UUID) -> CompletionResult:
        return self.set_completed(task_id, False)

    def set_completed(self, task_id: uuid.UUID, completed: bool) -> CompletionResult:
        task = self._require(task_id)
        if task.is_completed == completed:
            return CompletionResult(task)

        if not completed:
            # Successors spawned earlier stay as they are.
            reopened = replace(task, is_completed=False, completion_date=None)
            self._store.update_task(reopened)
            return CompletionResult(reopened)

        done = replace(task, is_completed=True, completion_date=self._clock())
        successor = self._next_successor(done)
        self._store.update_task(done)
        if successor is not None:
            successor = self._store.add_task(successor)
        return CompletionResult(done, successor)

    def preview_occurrences(self, task_id: uuid.UUID, limit: int | None = None) -> list[date]:
        task = self._require(task_id)
        if task.recurrence is None:
            return []
        base = task.scheduled_date or task.due_date or self._clock()
        return upcoming_occurrences(
            base,
            task.recurrence,
            SETTINGS.preview_limit if limit is None else limit,
            self._calendar,
            occurrences_so_far=len(self._store.list_chain(task.root_id)),
        )

    def suggest_recurrences(self) -> list[PatternMatch]:
        completed = [t for t in self._store.list_tasks(completed=True) if t.recurrence is None]
        return detect_patterns(completed, self._calendar)

    def _next_successor(self, task: TaskEntity) -> TaskEntity | None:
        if task.recurrence is None:
            return None
        if self._store.find_successor(task.id) is not None:
            logger.info("Task %s already has a successor, not spawning again", task.id)
            return None

        chain_size = len(self._store.list_chain(task.root_id))
        return self._spawner.spawn(task, occurrences_so_far=chain_size)

    def _require(self, task_id: uuid.UUID) -> TaskEntity:
        task = self._store.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task
