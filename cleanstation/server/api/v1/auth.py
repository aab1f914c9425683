"""
Authentication Endpoints.

Login, logout and the current-user lookup. Login returns the session token
and also sets it as an HTTP-only cookie for browser clients.
"""

from fastapi import APIRouter, Request, Response, status

from cleanstation.core.logging_config import get_logger
from cleanstation.core.models.io.auth import LoginRequest, LoginResponse, UserRead
from cleanstation.server.core.config import settings
from cleanstation.server.core.database import ReposDep
from cleanstation.server.core.security import CurrentUser, authenticate, extract_token
from cleanstation.server.responses import ApiResponse, MessageData, ok

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/login",
    response_model=ApiResponse[LoginResponse],
    summary="Log In",
    description="Exchange a username and password for a session token.",
    responses={
        200: {"description": "Logged in; the session cookie is set"},
        401: {"description": "Invalid credentials or inactive account"},
    },
)
async def login(body: LoginRequest, request: Request, response: Response, repos: ReposDep):
    """
    Log in with username and password.

    - **username**: Login name.
    - **password**: Plain text password.
    """
    user, session = await authenticate(repos, body.username, body.password)
    response.set_cookie(
        key=settings.auth.session_cookie,
        value=session.token,
        max_age=settings.auth.session_ttl_hours * 3600,
        httponly=True,
        samesite="lax",
    )
    return ok(
        request,
        LoginResponse(token=session.token, expires_at=session.expires_at, user=UserRead.model_validate(user)),
    )


@router.post(
    "/logout",
    response_model=ApiResponse[MessageData],
    status_code=status.HTTP_200_OK,
    summary="Log Out",
    description="Delete the caller's session.",
)
async def logout(request: Request, response: Response, user: CurrentUser, repos: ReposDep):
    """Delete the current session and clear the session cookie."""
    token = extract_token(request)
    if token:
        await repos.sessions.delete(token)
    response.delete_cookie(settings.auth.session_cookie)
    logger.info(f"User {user.username} logged out")
    return ok(request, MessageData(message="Logged out"))


@router.get(
    "/me",
    response_model=ApiResponse[UserRead],
    summary="Current User",
    description="Return the authenticated user.",
)
async def me(request: Request, user: CurrentUser):
    return ok(request, UserRead.model_validate(user))
