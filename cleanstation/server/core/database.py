"""
Database dependencies for the HTTP layer.

Routes depend on ``get_repos`` to receive every repository bound to the
request's ``AsyncSession``; tests override ``get_session`` to swap the engine.
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cleanstation.core.database import get_session, init_db
from cleanstation.core.database.repositories import RepoBundle, build_repos_from_session

__all__ = ["get_session", "init_db", "get_repos", "ReposDep"]


async def get_repos(session: AsyncSession = Depends(get_session)) -> AsyncGenerator[RepoBundle, None]:
    """
    Dependency providing the repository bundle for one request.

    Yields:
        RepoBundle: Repositories sharing the request's session.
    """
    yield build_repos_from_session(session)


ReposDep = Annotated[RepoBundle, Depends(get_repos)]
