"""
Repository layer for the centralized database.

Each repository wraps one ``AsyncSession`` and one entity; ``RepoBundle``
groups them per request.
"""

from .base import BaseRepository, QueryBuilder, SqlRepository
from .bundle import RepoBundle, build_repos_from_session
from .catalog import AssemblyRepository, PartRepository, SqlCatalog
from .notifications import NotificationRepository
from .orders import BomItemRepository, OrderHistoryRepository, OrderRepository, OutsourcedPartRepository
from .qc import QcResultRepository, QcTemplateRepository
from .service_orders import ServiceOrderRepository
from .tasks import TaskRepository
from .users import SessionRepository, UserRepository

__all__ = [
    "BaseRepository",
    "QueryBuilder",
    "SqlRepository",
    "RepoBundle",
    "build_repos_from_session",
    "AssemblyRepository",
    "PartRepository",
    "SqlCatalog",
    "NotificationRepository",
    "BomItemRepository",
    "OrderHistoryRepository",
    "OrderRepository",
    "OutsourcedPartRepository",
    "QcResultRepository",
    "QcTemplateRepository",
    "ServiceOrderRepository",
    "TaskRepository",
    "SessionRepository",
    "UserRepository",
]
