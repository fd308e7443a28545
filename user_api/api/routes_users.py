# user_api/api/routes_users.py
"""
User record endpoints.

Services raise domain errors from ``user_api.core.errors``; the app turns
them into ``{"message": ...}`` responses.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, status

from user_api.api.deps import get_seed_service, get_user_service
from user_api.schemas.user import (
    BulkCreateResponse,
    MessageResponse,
    SeedRequest,
    SeedResponse,
    UserListResponse,
    UserRead,
)
from user_api.services.seed_service import SAMPLE_SIZE, SeedService
from user_api.services.user_service import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, UserService

router = APIRouter(tags=["users"])


# Keeps (page - 1) * limit inside a signed 64-bit OFFSET
MAX_QUERY_INT = 2**31 - 1


def _positive_int(raw: Optional[str], default: int) -> int:
    """Lenient query parsing: anything that is not a positive integer means default."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if 1 <= value <= MAX_QUERY_INT else default


@router.get("/users", response_model=UserListResponse)
async def list_users(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    service: UserService = Depends(get_user_service),
):
    return await service.list_users(
        page=_positive_int(page, DEFAULT_PAGE),
        limit=_positive_int(limit, DEFAULT_PAGE_SIZE),
    )


@router.post("/users/bulk", response_model=BulkCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_bulk_users(
    payload: Any = Body(None),
    service: UserService = Depends(get_user_service),
):
    """
    Create up to 10,000 users in one request.

    Body is either a JSON array of ``{name, email}`` or ``{"users": [...]}``.
    """
    created = await service.bulk_create(payload)
    return BulkCreateResponse(
        message="Users created successfully",
        count=len(created),
        users=[UserRead.model_validate(u) for u in created],
    )


@router.post("/users/seed", response_model=SeedResponse, status_code=status.HTTP_201_CREATED)
async def seed_users(
    payload: Optional[SeedRequest] = Body(None),
    service: SeedService = Depends(get_seed_service),
):
    """
    Generate synthetic users (5000 unless ``count`` is given).
    """
    created = await service.seed(payload.count if payload else None)
    return SeedResponse(
        message="Users seeded successfully",
        count=len(created),
        sample=[UserRead.model_validate(u) for u in created[:SAMPLE_SIZE]],
    )


@router.get("/users/{user_id}", response_model=UserRead)
async def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    return await service.get_user(user_id)


@router.post("/users", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(payload: Any = Body(None), service: UserService = Depends(get_user_service)):
    return await service.create_user(payload)


@router.put("/users/{user_id}", response_model=UserRead)
async def update_user(
    user_id: str,
    payload: Any = Body(None),
    service: UserService = Depends(get_user_service),
):
    return await service.update_user(user_id, payload)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: str, service: UserService = Depends(get_user_service)):
    await service.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")
