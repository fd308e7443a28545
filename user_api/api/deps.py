# File: user_api/api/deps.py

from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.core.config import Settings
from user_api.repositories import UserRepository
from user_api.services.seed_service import SeedService
from user_api.services.user_service import UserService


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides an AsyncSession from the app's own
    session factory.

    Usage in route functions:
        session: AsyncSession = Depends(get_session)
    """
    async with request.app.state.session_factory() as session:
        yield session


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_repository(session: AsyncSession = Depends(get_session)) -> UserRepository:
    return UserRepository(session)


def get_user_service(
    repo: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_app_settings),
) -> UserService:
    return UserService(repo, bulk_max_users=settings.bulk_max_users)


def get_seed_service(
    repo: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_app_settings),
) -> SeedService:
    return SeedService(repo, default_count=settings.seed_default_count)
