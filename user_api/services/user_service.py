# user_api/services/user_service.py
import logging
import math
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from user_api.core.errors import (
    BulkValidationError,
    ConflictError,
    DuplicateEmailsError,
    InputShapeError,
    MalformedIdError,
    NotFoundError,
    ValidationError,
)
from user_api.models.user import User
from user_api.repositories import UserRepository
from user_api.schemas.user import UserListResponse, UserRead
from user_api.services.validation import validate_user

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
DEFAULT_BULK_MAX_USERS = 10_000


def parse_user_id(raw_id: str) -> UUID:
    try:
        return UUID(str(raw_id))
    except ValueError:
        raise MalformedIdError() from None


def _is_blank(value: Any) -> bool:
    # null, false, 0 and "" mean "not given"; an empty list is still a list
    if value is None or value is False or value == "":
        return True
    return isinstance(value, (int, float)) and value == 0


def extract_bulk_payload(payload: Any) -> Any:
    """A bulk body is either the list itself or an object with a ``users`` field."""
    if isinstance(payload, dict) and not _is_blank(payload.get("users")):
        return payload["users"]
    return payload


def _fields(candidate: dict[str, Any]) -> dict[str, Any]:
    return {"name": candidate["name"], "email": candidate["email"]}


class UserService:
    def __init__(self, user_repo: UserRepository, bulk_max_users: int = DEFAULT_BULK_MAX_USERS):
        self._user_repo = user_repo
        self._bulk_max_users = bulk_max_users

    # --- 1. READS ---

    async def list_users(self, page: int = DEFAULT_PAGE, limit: int = DEFAULT_PAGE_SIZE) -> UserListResponse:
        skip = (page - 1) * limit
        users = await self._user_repo.list_page(skip, limit)
        total = await self._user_repo.count()
        return UserListResponse(
            users=[UserRead.model_validate(u) for u in users],
            totalPages=math.ceil(total / limit),
            currentPage=page,
            totalUsers=total,
        )

    async def get_user(self, raw_id: str) -> User:
        user = await self._user_repo.get_by_id(parse_user_id(raw_id))
        if not user:
            raise NotFoundError()
        return user

    # --- 2. SINGLE-RECORD WRITES ---

    async def create_user(self, payload: Any) -> User:
        """
        Validate, reject a known email, then insert.

        The lookup and the insert are separate operations; a concurrent
        insert of the same email is caught by the unique index instead.
        """
        error = validate_user(payload)
        if error:
            raise ValidationError(error)

        if await self._user_repo.get_by_email(payload["email"]):
            raise ConflictError()

        try:
            return await self._user_repo.create(_fields(payload))
        except IntegrityError:
            raise ConflictError() from None

    async def update_user(self, raw_id: str, payload: Any) -> User:
        error = validate_user(payload)
        if error:
            raise ValidationError(error)

        user_id = parse_user_id(raw_id)
        if await self._user_repo.get_by_email(payload["email"], exclude_id=user_id):
            raise ConflictError()

        try:
            user = await self._user_repo.update(user_id, _fields(payload))
        except IntegrityError:
            raise ConflictError() from None
        if not user:
            raise NotFoundError()
        return user

    async def delete_user(self, raw_id: str) -> None:
        if not await self._user_repo.delete(parse_user_id(raw_id)):
            raise NotFoundError()

    # --- 3. BULK INGESTION ---

    async def bulk_create(self, payload: Any) -> list[User]:
        """
        Create many users at once. Each step is a hard gate:

        1. the batch must be a non-empty list of at most ``bulk_max_users``
        2. every record must validate, otherwise all failures are reported
        3. no email may already be stored, otherwise the duplicates are reported
        4. records are inserted unordered; one failing insert does not stop the rest

        Emails repeated inside the batch are not rejected by step 3; the
        unique index keeps only the first copy during step 4.
        """
        users_data = extract_bulk_payload(payload)

        if not isinstance(users_data, list):
            raise InputShapeError("Users data must be an array")
        if not users_data:
            raise InputShapeError("Users array cannot be empty")
        if len(users_data) > self._bulk_max_users:
            raise InputShapeError(f"Maximum {self._bulk_max_users:,} users allowed per request")

        validation_errors = []
        for index, candidate in enumerate(users_data):
            error = validate_user(candidate)
            if error:
                validation_errors.append({"index": index, "error": error})
        if validation_errors:
            raise BulkValidationError(validation_errors)

        emails = [candidate["email"] for candidate in users_data]
        existing = await self._user_repo.find_existing_emails(emails)
        duplicates = [email for email in emails if email in existing]
        if duplicates:
            raise DuplicateEmailsError(duplicates)

        created = await self._user_repo.insert_many([_fields(c) for c in users_data])
        if len(created) < len(users_data):
            logger.warning("Bulk create inserted %d of %d users", len(created), len(users_data))
        else:
            logger.info("Bulk create inserted %d users", len(created))
        return created
