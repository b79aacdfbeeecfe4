from __future__ import annotations

import uuid
from typing import Optional

from recurrence_engine.domain.entities import TaskEntity


class InMemoryTaskStore:
    """Task store keyed by task id; insertion order is creation order."""

    def __init__(self, tasks: list[TaskEntity] | None = None) -> None:
        self._tasks: dict[uuid.UUID, TaskEntity] = {}
        for task in tasks or []:
            self.add_task(task)

    def get_task(self, task_id: uuid.UUID) -> Optional[TaskEntity]:
        return self._tasks.get(task_id)

    def add_task(self, task: TaskEntity) -> TaskEntity:
        if task.id in self._tasks:
            raise ValueError(f"task {task.id} already exists")
        self._tasks[task.id] = task
        return task

    def update_task(self, task: TaskEntity) -> Optional[TaskEntity]:
        if task.id not in self._tasks:
            return None
        self._tasks[task.id] = task
        return task

    def delete_task(self, task_id: uuid.UUID) -> None:
        self._tasks.pop(task_id, None)

    def list_tasks(self, completed: bool | None = None) -> list[TaskEntity]:
        tasks = list(self._tasks.values())
        if completed is None:
            return tasks
        return [t for t in tasks if t.is_completed == completed]

    def list_chain(self, root_id: uuid.UUID) -> list[TaskEntity]:
        return [t for t in self._tasks.values() if t.root_id == root_id]

    def find_successor(self, task_id: uuid.UUID) -> Optional[TaskEntity]:
        return next((t for t in self._tasks.values() if t.spawned_from_id == task_id), None)
