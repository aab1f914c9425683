"""
Repository bundle.

Groups every repository bound to one ``AsyncSession`` so request handlers can
take a single dependency and share one transaction across repositories.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .catalog import AssemblyRepository, PartRepository, SqlCatalog
from .notifications import NotificationRepository
from .orders import BomItemRepository, OrderHistoryRepository, OrderRepository, OutsourcedPartRepository
from .qc import QcResultRepository, QcTemplateRepository
from .service_orders import ServiceOrderRepository
from .tasks import TaskRepository
from .users import SessionRepository, UserRepository


@dataclass(frozen=True)
class RepoBundle:
    """All repositories sharing one session."""

    session: AsyncSession
    users: UserRepository
    sessions: SessionRepository
    parts: PartRepository
    assemblies: AssemblyRepository
    catalog: SqlCatalog
    orders: OrderRepository
    history: OrderHistoryRepository
    bom_items: BomItemRepository
    outsourced: OutsourcedPartRepository
    qc_templates: QcTemplateRepository
    qc_results: QcResultRepository
    tasks: TaskRepository
    service_orders: ServiceOrderRepository
    notifications: NotificationRepository

    async def commit(self) -> None:
        await self.session.commit()


def build_repos_from_session(session: AsyncSession) -> RepoBundle:
    """Build a repository bundle bound to ``session``.

    Args:
        session: Async SQLAlchemy session shared by every repository

    Returns:
        RepoBundle instance
    """
    return RepoBundle(
        session=session,
        users=UserRepository(session),
        sessions=SessionRepository(session),
        parts=PartRepository(session),
        assemblies=AssemblyRepository(session),
        catalog=SqlCatalog(session),
        orders=OrderRepository(session),
        history=OrderHistoryRepository(session),
        bom_items=BomItemRepository(session),
        outsourced=OutsourcedPartRepository(session),
        qc_templates=QcTemplateRepository(session),
        qc_results=QcResultRepository(session),
        tasks=TaskRepository(session),
        service_orders=ServiceOrderRepository(session),
        notifications=NotificationRepository(session),
    )
