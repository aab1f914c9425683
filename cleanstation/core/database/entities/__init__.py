"""
Database entity models.

This package contains all database entity models organized by business domain.
Each module represents a business domain that spans one or more related tables:

- users: Users and login sessions
- catalog: Parts, assemblies and assembly component links
- orders: Orders, history log, persisted BOM lines, outsourced parts
- qc: QC form templates, items and submitted results
- tasks: Assembly tasks, dependencies and notes
- service_orders: Service part requests
- notifications: In-app notifications
"""

from . import (
    catalog,
    notifications,
    orders,
    qc,
    service_orders,
    tasks,
    users,
)

__all__ = [
    "catalog",
    "notifications",
    "orders",
    "qc",
    "service_orders",
    "tasks",
    "users",
]
