"""Unit tests for database utilities and query helpers."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from sqlmodel import select

from cleanstation.core.database import create_engine, new_id, utc_now
from cleanstation.core.database.entities.catalog import Part
from cleanstation.core.database.repositories import QueryBuilder
from cleanstation.core.models.domain.enums import PartStatus


class TestCreateEngine:
    """URL normalization for the async drivers."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("postgres://u:p@db/cs", "postgresql+asyncpg://u:p@db/cs"),
            ("postgresql://u:p@db/cs", "postgresql+asyncpg://u:p@db/cs"),
            ("postgresql+psycopg2://u:p@db/cs", "postgresql+asyncpg://u:p@db/cs"),
            ("postgresql+asyncpg://u:p@db/cs", "postgresql+asyncpg://u:p@db/cs"),
            ("sqlite+aiosqlite:///./cleanstation.db", "sqlite+aiosqlite:///./cleanstation.db"),
        ],
    )
    def test_url_normalization(self, url, expected):
        with patch("cleanstation.core.database.utils.create_async_engine") as mock_create:
            create_engine(url)

        mock_create.assert_called_once_with(expected, pool_pre_ping=True)


class TestHelpers:
    def test_utc_now_is_naive(self):
        assert utc_now().tzinfo is None

    def test_new_id_is_unique_hex(self):
        first, second = new_id(), new_id()
        assert first != second
        assert len(first) == 32
        int(first, 16)


@pytest.fixture
async def parts(in_memory_session):
    in_memory_session.add_all(
        [
            Part(part_id="P-100", name="Drain valve"),
            Part(part_id="P-200", name="Water filter", manufacturer_name="Aqua"),
            Part(part_id="P-300", name="Old valve", status=PartStatus.INACTIVE),
        ]
    )
    await in_memory_session.commit()


async def _ids(session, stmt):
    result = await session.execute(stmt.order_by(Part.part_id))
    return [part.part_id for part in result.scalars().all()]


class TestQueryBuilder:
    """Statement helpers shared by the repositories."""

    async def test_apply_search_matches_any_column(self, in_memory_session, parts):
        stmt = QueryBuilder.apply_search(select(Part), [Part.name, Part.manufacturer_name], "AQUA")
        assert await _ids(in_memory_session, stmt) == ["P-200"]

    async def test_apply_search_is_substring(self, in_memory_session, parts):
        stmt = QueryBuilder.apply_search(select(Part), [Part.name], "valve")
        assert await _ids(in_memory_session, stmt) == ["P-100", "P-300"]

    @pytest.mark.parametrize("term", [None, ""])
    async def test_apply_search_without_term(self, in_memory_session, parts, term):
        stmt = QueryBuilder.apply_search(select(Part), [Part.name], term)
        assert len(await _ids(in_memory_session, stmt)) == 3

    async def test_apply_filters_equality(self, in_memory_session, parts):
        stmt = QueryBuilder.apply_filters(select(Part), Part, {"status": PartStatus.INACTIVE})
        assert await _ids(in_memory_session, stmt) == ["P-300"]

    async def test_apply_filters_list_is_in_clause(self, in_memory_session, parts):
        stmt = QueryBuilder.apply_filters(select(Part), Part, {"part_id": ["P-100", "P-300", "P-999"]})
        assert await _ids(in_memory_session, stmt) == ["P-100", "P-300"]

    async def test_apply_filters_ignores_none_and_unknown(self, in_memory_session, parts):
        stmt = QueryBuilder.apply_filters(select(Part), Part, {"status": None, "colour": "red"})
        assert len(await _ids(in_memory_session, stmt)) == 3

    async def test_apply_pagination(self, in_memory_session, parts):
        stmt = QueryBuilder.apply_pagination(select(Part).order_by(Part.part_id), limit=1, offset=1)
        result = await in_memory_session.execute(stmt)
        assert [p.part_id for p in result.scalars().all()] == ["P-200"]
