"""
Authentication and Role Authorization.

Login issues an opaque session token stored in ``cs_user_sessions``. Requests
authenticate with ``Authorization: Bearer <token>`` or the session cookie.
Routes declare the roles they accept through ``require_roles``.
"""

import secrets
from datetime import timedelta
from typing import Annotated, Callable, Optional, Tuple

from fastapi import Depends, Request
from werkzeug.security import check_password_hash, generate_password_hash

from cleanstation.core.database import utc_now
from cleanstation.core.database.entities.users import User, UserSession
from cleanstation.core.database.repositories import RepoBundle
from cleanstation.core.errors import AuthenticationError, PermissionDeniedError
from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.enums import UserRole

from .config import settings
from .database import get_repos

logger = get_logger(__name__)


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


async def authenticate(repos: RepoBundle, username: str, password: str) -> Tuple[User, UserSession]:
    """
    Check credentials and open a login session.

    Args:
        repos: Repository bundle of the request
        username: Login name
        password: Plain text password

    Returns:
        Tuple of (user, new session)

    Raises:
        AuthenticationError: On unknown user, wrong password or inactive account
    """
    user = await repos.users.get_by_username(username)
    if user is None or not verify_password(user.password_hash, password):
        logger.info(f"Failed login attempt for {username}")
        raise AuthenticationError("Invalid username or password")
    if not user.is_active:
        raise AuthenticationError("Account is inactive")

    now = utc_now()
    session = UserSession(
        token=secrets.token_urlsafe(32),
        user_id=user.id,
        created_at=now,
        expires_at=now + timedelta(hours=settings.auth.session_ttl_hours),
    )
    await repos.sessions.create(session)
    logger.info(f"User {user.username} logged in")
    return user, session


def extract_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token.strip()
    return request.cookies.get(settings.auth.session_cookie)


async def get_current_user(request: Request, repos: RepoBundle = Depends(get_repos)) -> User:
    """
    Resolve the authenticated user of a request.

    Raises:
        AuthenticationError: Missing, unknown or expired token, or inactive user
    """
    token = extract_token(request)
    if not token:
        raise AuthenticationError()
    session = await repos.sessions.get_valid(token)
    if session is None:
        raise AuthenticationError("Session expired or invalid")
    user = await repos.users.get_by_id(session.user_id)
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive")
    request.state.user_id = user.id
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def require_roles(*roles: UserRole) -> Callable:
    """
    Build a dependency that only lets users holding one of ``roles`` through.

    Args:
        roles: Accepted roles

    Returns:
        Dependency returning the current user
    """

    async def _checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise PermissionDeniedError(
                f"Role {user.role.value} is not allowed to perform this action",
                details={"required_roles": [role.value for role in roles]},
            )
        return user

    return _checker
