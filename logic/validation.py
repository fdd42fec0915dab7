"""
logic/validation.py
Pure logic: validates waitlist submissions before any database work happens.
No database calls. No HTTP. Simple checks that raise ValidationError.
"""

import re
from typing import Any, Dict

from services.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MISSING_FIELDS_MESSAGE = "Missing required fields"
INVALID_EMAIL_MESSAGE = "Invalid email format"


def normalize_email(email: str) -> str:
    return email.lower()


def validate_email(email: str) -> str:
    """
    Validates an email against the basic local@domain.tld shape.

    The pattern is matched against the value as submitted (no strip),
    so surrounding whitespace is rejected.

    Returns:
        the lowercased email.

    Raises:
        ValidationError if the email does not match.
    """
    if not isinstance(email, str) or not EMAIL_PATTERN.match(email):
        raise ValidationError(INVALID_EMAIL_MESSAGE)
    return normalize_email(email)


def validate_submission(email: Any, fullname: Any, position: Any) -> Dict[str, Any]:
    """
    Checks that all three fields are present (truthy) and that the email
    is well formed.

    Returns:
        {"email": <lowercased>, "fullname": ..., "position": ...}

    Raises:
        ValidationError with "Missing required fields" or "Invalid email format".
    """
    if not email or not fullname or not position:
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    return {
        "email": validate_email(email),
        "fullname": fullname,
        "position": position,
    }
