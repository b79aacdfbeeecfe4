from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from sqlalchemy import or_, select

from recurrence_engine.domain.entities import CustomRecurrence, Recurrence, TaskEntity
from recurrence_engine.domain.enums import Priority, RecurrenceRule

from .db import SessionLocal
from .models import TaskModel

logger = logging.getLogger(__name__)


def _stored_instant(value: Optional[date]) -> Optional[datetime]:
    # Columns hold naive wall time; date-only values are midnight plus an all-day flag.
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime.combine(value, datetime.min.time())


def _is_all_day(value: Optional[date]) -> bool:
    return value is not None and not isinstance(value, datetime)


def _loaded_instant(value: Optional[datetime], all_day: bool) -> Optional[date]:
    if value is not None and all_day:
        return value.date()
    return value


def _stored_recurrence(custom: CustomRecurrence) -> dict:
    end_date = custom.end_date
    if isinstance(end_date, datetime):
        end_date = _stored_instant(end_date)
    return replace(custom, end_date=end_date).to_dict()


def _recurrence_from_model(model: TaskModel) -> Recurrence | None:
    if not model.recurrence_rule:
        return None
    try:
        rule = RecurrenceRule(model.recurrence_rule)
        if rule is not RecurrenceRule.CUSTOM:
            return rule
        if not model.custom_recurrence:
            logger.warning("Task %s is marked custom but has no custom recurrence stored", model.id)
            return None
        return CustomRecurrence.from_dict(model.custom_recurrence)
    except (TypeError, ValueError):
        logger.warning("Task %s has an unreadable recurrence, loading it as non-recurring", model.id)
        return None


def _to_entity(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        title=model.title,
        notes=model.notes,
        tags=tuple(model.tags or ()),
        scheduled_date=_loaded_instant(model.scheduled_date, model.scheduled_all_day),
        due_date=_loaded_instant(model.due_date, model.due_all_day),
        recurrence=_recurrence_from_model(model),
        parent_task_id=model.parent_task_id,
        spawned_from_id=model.spawned_from_id,
        is_completed=model.is_completed,
        completion_date=model.completion_date,
        project_id=model.project_id,
        area_id=model.area_id,
        priority=Priority(model.priority),
        estimated_duration=model.estimated_duration,
        reminder_time=model.reminder_time,
        created_at=model.created_at,
    )


def _to_columns(task: TaskEntity) -> dict:
    custom = task.custom_recurrence
    return {
        "title": task.title,
        "notes": task.notes,
        "tags": list(task.tags),
        "scheduled_date": _stored_instant(task.scheduled_date),
        "scheduled_all_day": _is_all_day(task.scheduled_date),
        "due_date": _stored_instant(task.due_date),
        "due_all_day": _is_all_day(task.due_date),
        "recurrence_rule": task.recurrence_rule.value if task.recurrence_rule else None,
        "custom_recurrence": _stored_recurrence(custom) if custom else None,
        "parent_task_id": task.parent_task_id,
        "spawned_from_id": task.spawned_from_id,
        "is_completed": task.is_completed,
        "completion_date": _stored_instant(task.completion_date),
        "project_id": task.project_id,
        "area_id": task.area_id,
        "priority": int(task.priority),
        "estimated_duration": task.estimated_duration,
        "reminder_time": _stored_instant(task.reminder_time),
        "created_at": task.created_at,
    }


class TaskRepository:
    def __init__(self, session_factory=SessionLocal) -> None:
        self._session_factory = session_factory

    def get_task(self, task_id: uuid.UUID) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            return _to_entity(task) if task else None

    def add_task(self, task: TaskEntity) -> TaskEntity:
        with self._session_factory() as session:
            model = TaskModel(id=task.id, **_to_columns(task))
            session.add(model)
            session.commit()
            session.refresh(model)
            return _to_entity(model)

    def update_task(self, task: TaskEntity) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            model = session.get(TaskModel, task.id)
            if not model:
                return None
            for key, value in _to_columns(task).items():
                setattr(model, key, value)
            session.commit()
            session.refresh(model)
            return _to_entity(model)

    def delete_task(self, task_id: uuid.UUID) -> None:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return
            session.delete(task)
            session.commit()

    def list_tasks(self, completed: bool | None = None) -> list[TaskEntity]:
        with self._session_factory() as session:
            stmt = select(TaskModel)
            if completed is not None:
                stmt = stmt.where(TaskModel.is_completed == completed)
            stmt = stmt.order_by(TaskModel.created_at.asc())
            return [_to_entity(task) for task in session.scalars(stmt)]

    def list_chain(self, root_id: uuid.UUID) -> list[TaskEntity]:
        with self._session_factory() as session:
            stmt = (
                select(TaskModel)
                .where(or_(TaskModel.id == root_id, TaskModel.parent_task_id == root_id))
                .order_by(TaskModel.created_at.asc())
            )
            return [_to_entity(task) for task in session.scalars(stmt)]

    def find_successor(self, task_id: uuid.UUID) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            stmt = select(TaskModel).where(TaskModel.spawned_from_id == task_id).limit(1)
            task = session.scalars(stmt).first()
            return _to_entity(task) if task else None
