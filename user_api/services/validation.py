# user_api/services/validation.py
"""
Validation of candidate user records.

Checks ``name`` before ``email`` and reports only the first problem found,
the same message a client sees in a 400 response.
"""

from collections.abc import Mapping
from typing import Any, Optional

from email_validator import EmailNotValidError, validate_email

NAME_MIN_LENGTH = 3


def is_valid_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_user(candidate: Any) -> Optional[str]:
    """
    Return None when ``candidate`` is a valid user record, else the first
    error message. Never touches the store.
    """
    if not isinstance(candidate, Mapping):
        return "User data must be an object"

    name = candidate.get("name")
    if name is None:
        return "Name is required"
    if not isinstance(name, str):
        return "Name must be a string"
    if len(name) < NAME_MIN_LENGTH:
        return f"Name must be at least {NAME_MIN_LENGTH} characters"

    email = candidate.get("email")
    if email is None:
        return "Email is required"
    if not isinstance(email, str):
        return "Email must be a string"
    if not is_valid_email(email):
        return "Invalid email format"

    return None
