import logging
from typing import Any, Iterable
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.models.user import User, utcnow

logger = logging.getLogger(__name__)

# Keeps IN (...) lists under driver bind-parameter limits (SQLite: 999 on old builds)
EMAIL_LOOKUP_CHUNK = 500


class UserRepository:
    """
    Store client for user records. Every write commits on its own; there is
    no transaction spanning two calls.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> User | None:
        """Retrieves a User by their primary ID."""
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str, exclude_id: UUID | None = None) -> User | None:
        """Retrieves a User holding ``email``, optionally ignoring one id."""
        stmt = select(User).where(User.email == email)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return (await self.session.scalars(stmt.limit(1))).first()

    async def list_page(self, skip: int, limit: int) -> list[User]:
        stmt = select(User).order_by(User.created_at, User.id).offset(skip).limit(limit)
        return list(await self.session.scalars(stmt))

    async def count(self) -> int:
        return await self.session.scalar(select(func.count()).select_from(User))

    async def find_existing_emails(self, emails: Iterable[str]) -> set[str]:
        """Returns the subset of ``emails`` already held by some record."""
        unique = list(dict.fromkeys(emails))
        found: set[str] = set()
        for start in range(0, len(unique), EMAIL_LOOKUP_CHUNK):
            chunk = unique[start:start + EMAIL_LOOKUP_CHUNK]
            stmt = select(User.email).where(User.email.in_(chunk))
            found.update(await self.session.scalars(stmt))
        return found

    async def all_emails(self) -> set[str]:
        return set(await self.session.scalars(select(User.email)))

    async def create(self, create_data: dict[str, Any]) -> User:
        """Creates a new User record and persists it."""
        user = User(name=create_data["name"], email=create_data["email"])
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise
        return user

    async def insert_many(self, records: list[dict[str, Any]]) -> list[User]:
        """
        Unordered bulk insert: one transaction for the whole batch, falling
        back to one transaction per record when the store rejects the batch.
        Records that fail individually are skipped; the rest are kept.
        """
        if not records:
            return []

        users = [User(name=r["name"], email=r["email"]) for r in records]
        self.session.add_all(users)
        try:
            await self.session.commit()
            return users
        except IntegrityError as exc:
            await self.session.rollback()
            logger.warning("Bulk insert of %d users rejected, retrying one by one: %s", len(users), exc.orig)

        created: list[User] = []
        for index, record in enumerate(records):
            try:
                created.append(await self.create(record))
            except IntegrityError as exc:
                logger.warning("Skipped user at index %d (%s): %s", index, record["email"], exc.orig)
        return created

    async def update(self, user_id: UUID, update_data: dict[str, Any]) -> User | None:
        """Replaces name and email of a user. Returns None if it does not exist."""
        user_to_update = await self.get_by_id(user_id)
        if not user_to_update:
            return None

        user_to_update.name = update_data["name"]
        user_to_update.email = update_data["email"]
        user_to_update.updated_at = utcnow()
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise
        return user_to_update

    async def delete(self, user_id: UUID) -> bool:
        user = await self.get_by_id(user_id)
        if not user:
            return False
        await self.session.delete(user)
        await self.session.commit()
        return True
