from __future__ import annotations

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, Interval, String, Text, Uuid

from recurrence_engine.domain.entities import utcnow

from .db import Base


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(Uuid, primary_key=True)
    title = Column(String(200), nullable=False)
    notes = Column(Text, nullable=False, default="")
    tags = Column(JSON, nullable=False, default=list)
    scheduled_date = Column(DateTime, nullable=True)
    scheduled_all_day = Column(Boolean, nullable=False, default=False)
    due_date = Column(DateTime, nullable=True)
    due_all_day = Column(Boolean, nullable=False, default=False)
    recurrence_rule = Column(String(20), nullable=True)
    custom_recurrence = Column(JSON, nullable=True)
    parent_task_id = Column(Uuid, nullable=True, index=True)
    spawned_from_id = Column(Uuid, nullable=True, index=True)
    is_completed = Column(Boolean, nullable=False, default=False)
    completion_date = Column(DateTime, nullable=True)
    project_id = Column(Uuid, nullable=True)
    area_id = Column(Uuid, nullable=True)
    priority = Column(Integer, nullable=False, default=0)
    estimated_duration = Column(Interval, nullable=True)
    reminder_time = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
