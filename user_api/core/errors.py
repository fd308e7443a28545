"""
Domain errors raised by the service layer.

Each error knows its HTTP status; the application registers a single
handler that renders ``{"message": ..., **extra}``.
"""

from typing import Any, Dict, List


class UserApiError(Exception):
    status_code: int = 400

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def extra(self) -> Dict[str, Any]:
        return {}


class ValidationError(UserApiError):
    """A single field-level validation failure."""


class ConflictError(UserApiError):
    def __init__(self, message: str = "Email already exists"):
        super().__init__(message)


class NotFoundError(UserApiError):
    status_code = 404

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class MalformedIdError(UserApiError):
    def __init__(self, message: str = "Invalid user ID"):
        super().__init__(message)


class InputShapeError(UserApiError):
    """Bulk payload is not a list, is empty, or is too large."""


class BulkValidationError(UserApiError):
    def __init__(self, errors: List[Dict[str, Any]]):
        super().__init__("Validation errors found")
        self.errors = errors

    def extra(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class DuplicateEmailsError(UserApiError):
    def __init__(self, duplicates: List[str]):
        super().__init__("Duplicate emails found")
        self.duplicates = duplicates

    def extra(self) -> Dict[str, Any]:
        return {"duplicates": self.duplicates}
