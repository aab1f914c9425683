"""
Assembly task repositories.

Provides data access for tasks, their dependency links and notes.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from cleanstation.core.models.domain.enums import TaskStatus

from ..entities.tasks import Task, TaskDependency, TaskNote
from .base import QueryBuilder, SqlRepository


class TaskRepository(SqlRepository[Task]):
    """Repository for assembly tasks with their dependencies and notes."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Task)

    async def search(
        self,
        *,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        order_id: Optional[str] = None,
        assigned_to_id: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Task], int]:
        """List tasks newest first.

        Args:
            status: Filter on task status
            priority: Filter on task priority
            order_id: Only tasks of this order
            assigned_to_id: Only tasks assigned to this user
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (tasks on the page, total matches)
        """
        stmt = select(Task)
        stmt = QueryBuilder.apply_filters(
            stmt,
            Task,
            {"status": status, "priority": priority, "order_id": order_id, "assigned_to_id": assigned_to_id},
        )
        stmt = stmt.order_by(Task.created_at.desc())  # type: ignore[attr-defined]
        return await self._paginate(stmt, page, limit)

    async def get_many(self, task_ids: List[str]) -> List[Task]:
        if not task_ids:
            return []
        stmt = select(Task).where(Task.id.in_(task_ids))  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_dependency(self, task_id: str, depends_on_id: str) -> TaskDependency:
        return await self.add(TaskDependency(task_id=task_id, depends_on_id=depends_on_id))

    async def get_dependency_ids(self, task_id: str) -> List[str]:
        stmt = select(TaskDependency.depends_on_id).where(TaskDependency.task_id == task_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_dependency_map(self, task_ids: List[str]) -> Dict[str, List[str]]:
        """Get the dependency ids of many tasks keyed by task id."""
        deps: Dict[str, List[str]] = {task_id: [] for task_id in task_ids}
        if not task_ids:
            return deps
        stmt = select(TaskDependency).where(TaskDependency.task_id.in_(task_ids))  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        for link in result.scalars().all():
            deps[link.task_id].append(link.depends_on_id)
        return deps

    async def get_incomplete_dependencies(self, task_id: str) -> List[Task]:
        """Get the tasks ``task_id`` depends on that are not completed yet."""
        stmt = (
            select(Task)
            .join(TaskDependency, TaskDependency.depends_on_id == Task.id)
            .where(TaskDependency.task_id == task_id)
            .where(Task.status != TaskStatus.COMPLETED)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_note(self, task_id: str, content: str, author_id: Optional[str] = None) -> TaskNote:
        return await self.add(TaskNote(task_id=task_id, content=content, author_id=author_id))

    async def get_notes(self, task_id: str) -> List[TaskNote]:
        stmt = select(TaskNote).where(TaskNote.task_id == task_id).order_by(TaskNote.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
