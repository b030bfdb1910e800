"""
Validation utilities for input validation and error handling.
"""
import json
import re
from typing import Any

from ..models.application import APPLICATION_STATUSES
from ..models.job import JOB_STATUSES
from ..models.user import ACCOUNT_ROLES
from .error_handlers import ValidationError


def validate_email(email: str) -> str:
    """Validate email format."""
    if not email or not isinstance(email, str):
        raise ValidationError("Email is required")

    email = email.strip().lower()
    if len(email) > 255:
        raise ValidationError("Email too long (max 255 characters)")

    # Basic email regex
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    if not re.match(pattern, email):
        raise ValidationError("Invalid email format")

    return email


def validate_username(username: str) -> str:
    if not username or not isinstance(username, str):
        raise ValidationError("Username is required")

    username = username.strip()
    if not re.match(r'^[A-Za-z0-9._-]{3,100}$', username):
        raise ValidationError(
            "Username must be 3-100 characters of letters, digits, '.', '_' or '-'"
        )
    return username


def validate_password(password: str) -> None:
    """Validate password strength."""
    if not password or not isinstance(password, str):
        raise ValidationError("Password is required")

    if len(password) < 6:
        raise ValidationError("Password must be at least 6 characters")

    if len(password) > 72:
        raise ValidationError("Password too long (max 72 characters)")


def validate_string_field(
    value: Any,
    field_name: str,
    min_length: int = 1,
    max_length: int = 1000,
    required: bool = True,
    pattern: str | None = None,
) -> str | None:
    """Validate a string field with common rules."""
    if value is None:
        if required:
            raise ValidationError(f"{field_name} is required")
        return None

    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")

    value = value.strip()

    if not value:
        if required:
            raise ValidationError(f"{field_name} cannot be empty")
        return None

    if len(value) < min_length:
        raise ValidationError(f"{field_name} must be at least {min_length} characters")

    if len(value) > max_length:
        raise ValidationError(f"{field_name} must not exceed {max_length} characters")

    if pattern and not re.match(pattern, value):
        raise ValidationError(f"{field_name} format is invalid")

    return value


def validate_integer_field(
    value: Any,
    field_name: str,
    min_value: int | None = None,
    max_value: int | None = None,
    required: bool = True,
) -> int | None:
    """Validate an integer field."""
    if value is None:
        if required:
            raise ValidationError(f"{field_name} is required")
        return None

    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a valid integer")

    if not isinstance(value, int):
        try:
            value = int(value)
        except (ValueError, TypeError):
            raise ValidationError(f"{field_name} must be a valid integer")

    if min_value is not None and value < min_value:
        raise ValidationError(f"{field_name} must be at least {min_value}")

    if max_value is not None and value > max_value:
        raise ValidationError(f"{field_name} must not exceed {max_value}")

    return value


def _validate_choice(value: str | None, field_name: str, choices: tuple[str, ...]) -> str:
    if not value or not isinstance(value, str):
        raise ValidationError(f"{field_name} is required")

    value = value.strip().lower()
    if value not in choices:
        raise ValidationError(f"Invalid {field_name.lower()}. Must be one of: {', '.join(choices)}")
    return value


def validate_role(role: str) -> str:
    """Validate a self-registration role (admins are seeded, never registered)."""
    return _validate_choice(role, "Role", ACCOUNT_ROLES)


def validate_job_status(status: str | None) -> str:
    return _validate_choice(status, "Status", JOB_STATUSES)


def validate_application_status(status: str | None) -> str:
    return _validate_choice(status, "Status", APPLICATION_STATUSES)


def normalize_skills(raw: Any) -> list[str]:
    """
    Turn any skills representation into a list of trimmed names.

    Accepts a list, a JSON-encoded list, or a comma separated string. Duplicates
    are dropped case-insensitively, keeping the first spelling and order.
    """
    if raw is None:
        return []

    items: list[Any]
    if isinstance(raw, (list, tuple, set)):
        items = list(raw)
    elif isinstance(raw, str):
        s = raw.strip()
        if not s:
            return []
        try:
            parsed = json.loads(s)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            items = parsed
        elif isinstance(parsed, str):
            return normalize_skills(parsed)
        else:
            items = s.split(",")
    else:
        return []

    seen: set[str] = set()
    cleaned: list[str] = []
    for item in items:
        if item is None or isinstance(item, (dict, list)):
            continue
        name = str(item).strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        cleaned.append(name)
    return cleaned


def sanitize_filename(filename: str) -> str:
    """Sanitize filename to prevent directory traversal and other attacks."""
    if not filename:
        raise ValidationError("Filename is required")

    # Remove any path separators
    filename = filename.replace("/", "_").replace("\\", "_")

    # Remove any null bytes
    filename = filename.replace("\x00", "")

    # Remove directory traversal sequences
    filename = filename.replace("..", "_")

    # Remove leading dots to prevent hidden files
    filename = filename.lstrip(".")

    if len(filename) > 255:
        raise ValidationError("Filename too long")

    if not filename or filename == "_":
        raise ValidationError("Invalid filename")

    return filename
