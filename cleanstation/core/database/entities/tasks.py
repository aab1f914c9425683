"""
Assembly task entity models.

Tasks are units of shop-floor work on an order. A task may depend on other
tasks and collects free-form notes, including one per status change.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from cleanstation.core.models.domain.enums import TaskPriority, TaskStatus

from ..base import Base, new_id, utc_now


class TaskBase(Base):
    """Base fields for task entity."""

    title: str = Field(max_length=255)
    description: Optional[str] = Field(default=None)
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    estimated_minutes: Optional[int] = Field(default=None, ge=0)


class Task(TaskBase, table=True):
    """Assembly task.

    Table: cs_tasks
    """

    __tablename__ = "cs_tasks"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    order_id: str = Field(foreign_key="cs_orders.id", index=True, max_length=64)
    status: TaskStatus = Field(default=TaskStatus.PENDING, index=True)
    assigned_to_id: Optional[str] = Field(default=None, foreign_key="cs_users.id", index=True, max_length=64)
    actual_minutes: Optional[int] = Field(default=None)
    started_at: Optional[datetime] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Task(id={self.id}, title={self.title}, status={self.status})"


class TaskDependency(Base, table=True):
    """``task_id`` cannot start before ``depends_on_id`` is completed.

    Table: cs_task_dependencies
    """

    __tablename__ = "cs_task_dependencies"
    __table_args__ = (UniqueConstraint("task_id", "depends_on_id", name="uq_cs_task_dependencies_pair"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    task_id: str = Field(foreign_key="cs_tasks.id", index=True, max_length=64)
    depends_on_id: str = Field(foreign_key="cs_tasks.id", max_length=64)


class TaskNote(Base, table=True):
    """Free-form note on a task.

    Table: cs_task_notes
    """

    __tablename__ = "cs_task_notes"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    task_id: str = Field(foreign_key="cs_tasks.id", index=True, max_length=64)
    author_id: Optional[str] = Field(default=None, foreign_key="cs_users.id", max_length=64)
    content: str
    created_at: datetime = Field(default_factory=utc_now)
