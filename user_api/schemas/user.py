# File: user_api/schemas/user.py

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator


class UserBase(BaseModel):
    name: str
    email: str


class UserRead(UserBase):
    id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True  # Pydantic v2: replaces orm_mode

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands timestamps back without tzinfo
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)


# -----------------------------
# Response envelopes
# -----------------------------

class UserListResponse(BaseModel):
    users: List[UserRead]
    totalPages: int
    currentPage: int
    totalUsers: int


class BulkCreateResponse(BaseModel):
    message: str
    count: int
    users: List[UserRead]


class SeedRequest(BaseModel):
    count: Optional[int] = None


class SeedResponse(BaseModel):
    message: str
    count: int
    sample: List[UserRead]


class MessageResponse(BaseModel):
    message: str
