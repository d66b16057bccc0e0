"""
Input validation for messages, phone numbers and family contact data.

Invalid input is rejected with ``ValidationError``; nothing here silently
coerces a bad value into a good one.
"""

import re
from typing import Any, Optional

from scamshield.core.exceptions import ValidationError
from scamshield.core.logging import get_logger

logger = get_logger(__name__)

MAX_MESSAGE_LENGTH = 10000

PHONE_SEPARATORS_RE = re.compile(r"[\s\-().]")
PHONE_RE = re.compile(r"^\+?\d{7,15}$")
INDIAN_MOBILE_RE = re.compile(r"^\+?91[-\s]?[6-9]\d{9}$")
EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")

RELATIONSHIPS = (
    "parent", "spouse", "child", "sibling",
    "grandparent", "grandchild", "friend", "other",
)

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 255


def validate_message(message: Any, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """Accept a non-empty string of at most ``max_length`` characters."""
    if not isinstance(message, str):
        raise ValidationError("Message must be a string", field="message")
    if not message.strip():
        raise ValidationError("Message cannot be empty", field="message")
    if len(message) > max_length:
        raise ValidationError(
            f"Message cannot exceed {max_length:,} characters", field="message"
        )
    return message


def normalize_phone(phone_number: str) -> str:
    """Strip whitespace, dashes, parentheses and dots."""
    return PHONE_SEPARATORS_RE.sub("", phone_number)


def validate_phone(phone_number: Any) -> str:
    """Return the normalized number or raise if it is not a plausible phone number."""
    if not isinstance(phone_number, str) or not phone_number.strip():
        raise ValidationError("Phone number is required", field="phone_number")

    normalized = normalize_phone(phone_number)
    if not PHONE_RE.match(normalized):
        raise ValidationError("Invalid phone number format", field="phone_number")
    return normalized


def validate_name(name: Any, field: str = "name") -> str:
    label = field.replace("_", " ").capitalize()
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"{label} cannot be empty", field=field)
    name = name.strip()
    if len(name) < NAME_MIN_LENGTH:
        raise ValidationError(f"{label} must be at least {NAME_MIN_LENGTH} characters", field=field)
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationError(f"{label} cannot exceed {NAME_MAX_LENGTH} characters", field=field)
    return name


def validate_relationship(relationship: Any) -> str:
    if not isinstance(relationship, str) or relationship.strip().lower() not in RELATIONSHIPS:
        raise ValidationError(
            f"Relationship must be one of: {', '.join(RELATIONSHIPS)}", field="relationship"
        )
    return relationship.strip().lower()


def validate_mobile(phone: Any) -> str:
    """Indian mobile number, returned without separators."""
    if not isinstance(phone, str) or not INDIAN_MOBILE_RE.match(phone.strip()):
        raise ValidationError("Invalid Indian phone number format", field="phone")
    return normalize_phone(phone)


def validate_email(email: Optional[str]) -> Optional[str]:
    """Optional email; empty values become None."""
    if email is None or not email.strip():
        return None
    email = email.strip()
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email format", field="email")
    return email
