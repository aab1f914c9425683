"""
User Administration Endpoints.

ADMIN-only management of user accounts.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from cleanstation.core.database.entities.users import User
from cleanstation.core.errors import ConflictError, NotFoundError
from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.domain.enums import UserRole
from cleanstation.core.models.io.auth import UserCreate, UserRead, UserUpdate
from cleanstation.server.core.database import ReposDep
from cleanstation.server.core.security import hash_password, require_roles
from cleanstation.server.responses import ApiResponse, ok

logger = get_logger(__name__)

router = APIRouter(dependencies=[Depends(require_roles(UserRole.ADMIN))])


@router.get(
    "",
    response_model=ApiResponse[List[UserRead]],
    summary="List Users",
    description="List user accounts, optionally filtered by role or active flag.",
)
async def list_users(
    request: Request,
    repos: ReposDep,
    role: Optional[UserRole] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
):
    users = await repos.users.list(filters={"role": role, "is_active": is_active})
    users.sort(key=lambda u: u.username)
    return ok(request, [UserRead.model_validate(u) for u in users])


@router.post(
    "",
    response_model=ApiResponse[UserRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    description="Create a user account with a role.",
    responses={409: {"description": "Username or email already in use"}},
)
async def create_user(body: UserCreate, request: Request, repos: ReposDep):
    """
    Create a user.

    - **username**: Unique login name.
    - **email**: Unique e-mail address.
    - **role**: Role gating API access.
    - **password**: Initial password, stored hashed.
    """
    if await repos.users.get_by_username(body.username):
        raise ConflictError(f"Username {body.username} already exists")
    if await repos.users.get_by_email(body.email):
        raise ConflictError(f"Email {body.email} already exists")
    user = User(
        username=body.username,
        email=body.email,
        full_name=body.full_name,
        initials=body.initials,
        role=body.role,
        is_active=body.is_active,
        password_hash=hash_password(body.password),
    )
    user = await repos.users.create(user)
    logger.info(f"Created user {user.username} with role {user.role.value}")
    return ok(request, UserRead.model_validate(user))


@router.patch(
    "/{user_id}",
    response_model=ApiResponse[UserRead],
    summary="Update User",
    description="Change a user's profile, role, password or active flag.",
    responses={404: {"description": "User not found"}},
)
async def update_user(user_id: str, body: UserUpdate, request: Request, repos: ReposDep):
    user = await repos.users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    changes = body.model_dump(exclude_unset=True)
    password = changes.pop("password", None)
    if "email" in changes and changes["email"] != user.email:
        if await repos.users.get_by_email(changes["email"]):
            raise ConflictError(f"Email {changes['email']} already exists")
    for key, value in changes.items():
        setattr(user, key, value)
    if password:
        user.password_hash = hash_password(password)
    user = await repos.users.update(user)
    return ok(request, UserRead.model_validate(user))
