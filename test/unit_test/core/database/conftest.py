"""Test configuration for database unit tests.

This module provides fixtures for testing the centralized database layer
against an in-memory SQLite database.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from cleanstation.core.database import create_all, create_sessionmaker
from cleanstation.core.database.entities.orders import Order
from cleanstation.core.database.repositories import RepoBundle, build_repos_from_session


@pytest_asyncio.fixture(scope="function")
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine with every table."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def in_memory_session(in_memory_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with create_sessionmaker(in_memory_engine)() as session:
        yield session


@pytest.fixture
def repos(in_memory_session: AsyncSession) -> RepoBundle:
    return build_repos_from_session(in_memory_session)


@pytest.fixture
def make_order():
    """Factory for unsaved orders; ``age_minutes`` pushes ``created_at`` into the past."""

    def _make(po_number: str, age_minutes: int = 0, **overrides) -> Order:
        fields = {
            "po_number": po_number,
            "customer_name": "Acme Hospital",
            "project_name": "Sterile Processing",
            "sales_person": "Sam Seller",
            "want_date": datetime(2030, 1, 1),
            "build_numbers": ["B-1"],
            "created_at": datetime(2026, 1, 1, 12, 0) - timedelta(minutes=age_minutes),
        }
        fields.update(overrides)
        return Order(**fields)

    return _make
