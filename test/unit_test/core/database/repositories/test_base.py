"""Unit tests for the generic SQL repository.

Tests repository operations with mocked database session to verify which
session calls commit and which only flush.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cleanstation.core.database.repositories import OrderRepository, PartRepository


class TestSqlRepository:
    """Tests for SqlRepository session handling."""

    @pytest.fixture
    def mock_session(self):
        """Mock async database session."""
        session = AsyncMock()
        session.add = MagicMock()
        session.commit = AsyncMock()
        session.flush = AsyncMock()
        session.refresh = AsyncMock()
        session.delete = AsyncMock()
        return session

    @pytest.fixture
    def repository(self, mock_session):
        return OrderRepository(mock_session)

    async def test_create_commits(self, repository, mock_session):
        order = MagicMock()

        result = await repository.create(order)

        mock_session.add.assert_called_once_with(order)
        mock_session.commit.assert_called_once()
        mock_session.refresh.assert_called_once_with(order)
        assert result == order

    async def test_update_commits(self, repository, mock_session):
        order = MagicMock()

        await repository.update(order)

        mock_session.add.assert_called_once_with(order)
        mock_session.commit.assert_called_once()

    async def test_add_only_flushes(self, repository, mock_session):
        order = MagicMock()

        result = await repository.add(order)

        mock_session.add.assert_called_once_with(order)
        mock_session.flush.assert_called_once()
        mock_session.commit.assert_not_called()
        assert result == order

    async def test_remove_only_flushes(self, repository, mock_session):
        order = MagicMock()

        await repository.remove(order)

        mock_session.delete.assert_called_once_with(order)
        mock_session.flush.assert_called_once()
        mock_session.commit.assert_not_called()

    @patch.object(OrderRepository, "get_by_id")
    async def test_delete_success(self, mock_get_by_id, repository, mock_session):
        order = MagicMock()
        mock_get_by_id.return_value = order

        assert await repository.delete("order_123") is True

        mock_get_by_id.assert_called_once_with("order_123")
        mock_session.delete.assert_called_once_with(order)
        mock_session.commit.assert_called_once()

    @patch.object(OrderRepository, "get_by_id")
    async def test_delete_not_found(self, mock_get_by_id, repository, mock_session):
        mock_get_by_id.return_value = None

        assert await repository.delete("nonexistent") is False

        mock_session.delete.assert_not_called()
        mock_session.commit.assert_not_called()

    async def test_get_by_id_uses_primary_key_field(self, mock_session):
        """Repositories keyed by a natural id look up that column."""
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_session.execute = AsyncMock(return_value=result)

        assert await PartRepository(mock_session).get_by_id("T2-DL27-KIT") is None

        stmt = mock_session.execute.call_args[0][0]
        assert "cs_parts.part_id" in str(stmt)
