"""
Assembly task I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from cleanstation.core.models.domain.enums import TaskPriority, TaskStatus

from .common import ReadModel, RequestModel


class TaskCreate(RequestModel):
    order_id: str
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to_id: Optional[str] = None
    estimated_minutes: Optional[int] = Field(default=None, ge=0)
    dependencies: List[str] = Field(default_factory=list, description="Ids of tasks that must complete first")


class TaskStatusUpdate(RequestModel):
    status: TaskStatus
    notes: Optional[str] = None
    actual_minutes: Optional[int] = Field(default=None, ge=0)


class TaskNoteCreate(RequestModel):
    content: str = Field(min_length=1)


class TaskNoteRead(ReadModel):
    id: str
    task_id: str
    author_id: Optional[str] = None
    content: str
    created_at: datetime


class TaskRead(ReadModel):
    id: str
    order_id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    assigned_to_id: Optional[str] = None
    estimated_minutes: Optional[int] = None
    actual_minutes: Optional[int] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    dependencies: List[str] = Field(default_factory=list)


class TaskDetail(TaskRead):
    notes: List[TaskNoteRead] = Field(default_factory=list)
