"""Unit tests for user and session repositories."""

from __future__ import annotations

from datetime import timedelta

import pytest

from cleanstation.core.database import utc_now
from cleanstation.core.database.entities.users import User, UserSession
from cleanstation.core.models.domain.enums import UserRole


def _user(username: str, role: UserRole, is_active: bool = True) -> User:
    return User(
        username=username,
        email=f"{username}@cleanstation.test",
        full_name=username.title(),
        initials=username[:2].upper(),
        role=role,
        is_active=is_active,
        password_hash="hash",
    )


@pytest.fixture
async def seeded_users(repos):
    users = [
        _user("quinn", UserRole.QC_PERSON),
        _user("alex", UserRole.QC_PERSON),
        _user("retired", UserRole.QC_PERSON, is_active=False),
        _user("pat", UserRole.PRODUCTION_COORDINATOR),
        _user("ash", UserRole.ASSEMBLER),
    ]
    for user in users:
        await repos.users.add(user)
    await repos.commit()
    return {user.username: user for user in users}


class TestUserRepository:
    """Tests for UserRepository lookups."""

    async def test_create_and_get_by_id(self, repos):
        user = await repos.users.create(_user("jdoe", UserRole.ADMIN))

        fetched = await repos.users.get_by_id(user.id)
        assert fetched is not None
        assert fetched.username == "jdoe"
        assert fetched.created_at is not None

    async def test_get_by_username(self, repos, seeded_users):
        user = await repos.users.get_by_username("pat")
        assert user.id == seeded_users["pat"].id

    async def test_get_by_username_is_case_sensitive(self, repos, seeded_users):
        assert await repos.users.get_by_username("PAT") is None

    async def test_get_by_email(self, repos, seeded_users):
        user = await repos.users.get_by_email("ash@cleanstation.test")
        assert user.role == UserRole.ASSEMBLER

    async def test_list_active_by_roles_skips_inactive(self, repos, seeded_users):
        users = await repos.users.list_active_by_roles([UserRole.QC_PERSON])
        assert [u.username for u in users] == ["alex", "quinn"]

    async def test_list_active_by_several_roles(self, repos, seeded_users):
        users = await repos.users.list_active_by_roles([UserRole.QC_PERSON, UserRole.ASSEMBLER])
        assert [u.username for u in users] == ["alex", "ash", "quinn"]

    async def test_list_active_by_roles_no_match(self, repos, seeded_users):
        assert await repos.users.list_active_by_roles([UserRole.SERVICE_DEPARTMENT]) == []

    async def test_delete(self, repos, seeded_users):
        assert await repos.users.delete(seeded_users["ash"].id) is True
        assert await repos.users.delete(seeded_users["ash"].id) is False

    async def test_list_with_filters(self, repos, seeded_users):
        users = await repos.users.list(filters={"role": UserRole.QC_PERSON, "unknown_field": "x"})
        assert {u.username for u in users} == {"alex", "quinn", "retired"}


class TestSessionRepository:
    """Tests for login session storage."""

    async def test_get_valid(self, repos, seeded_users):
        await repos.sessions.create(
            UserSession(token="live", user_id=seeded_users["pat"].id, expires_at=utc_now() + timedelta(hours=1))
        )

        session = await repos.sessions.get_valid("live")
        assert session is not None
        assert session.user_id == seeded_users["pat"].id

    async def test_get_valid_expired(self, repos, seeded_users):
        await repos.sessions.create(
            UserSession(token="old", user_id=seeded_users["pat"].id, expires_at=utc_now() - timedelta(minutes=1))
        )

        assert await repos.sessions.get_valid("old") is None
        # Still stored until purged
        assert await repos.sessions.get_by_id("old") is not None

    async def test_purge_expired(self, repos, seeded_users):
        user_id = seeded_users["pat"].id
        now = utc_now()
        await repos.sessions.add(UserSession(token="a", user_id=user_id, expires_at=now - timedelta(hours=2)))
        await repos.sessions.add(UserSession(token="b", user_id=user_id, expires_at=now - timedelta(hours=1)))
        await repos.sessions.add(UserSession(token="c", user_id=user_id, expires_at=now + timedelta(hours=1)))
        await repos.commit()

        assert await repos.sessions.purge_expired(now) == 2
        assert [s.token for s in await repos.sessions.list()] == ["c"]

    def test_is_expired(self):
        now = utc_now()
        session = UserSession(token="t", user_id="u", expires_at=now)
        assert session.is_expired(now) is True
        assert session.is_expired(now - timedelta(seconds=1)) is False
