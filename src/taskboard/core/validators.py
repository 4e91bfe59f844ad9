"""Field validators shared by payload schemas."""

import re
from collections.abc import Iterable
from typing import Final

MAX_NAME_LENGTH: Final[int] = 200
MAX_DESCRIPTION_LENGTH: Final[int] = 2000
MAX_COMMENT_LENGTH: Final[int] = 5000
MAX_ID_LENGTH: Final[int] = 64

AVAILABLE_PERMISSIONS: Final[frozenset[str]] = frozenset(
    {
        "create_project",
        "delete_project",
        "manage_users",
        "manage_company",
        "view_analytics",
    }
)

ID_REGEX: Final[str] = r"^[A-Za-z0-9][A-Za-z0-9_-]*$"
URL_REGEX: Final[str] = r"^https?://[^\s/$.?#][^\s]*$"

_ID_PATTERN: Final[re.Pattern[str]] = re.compile(ID_REGEX)
_URL_PATTERN: Final[re.Pattern[str]] = re.compile(URL_REGEX, re.IGNORECASE)


def validate_identifier(value: str) -> str:
    """Validate an opaque identifier (UUIDs and slug-like ids both pass)."""
    if len(value) > MAX_ID_LENGTH or not _ID_PATTERN.match(value):
        raise ValueError(f"Invalid identifier: {value!r}")
    return value


def validate_identifiers(values: Iterable[str]) -> frozenset[str]:
    return frozenset(validate_identifier(v) for v in values)


def validate_required_text(value: str, field_name: str = "Value") -> str:
    """Strip and reject empty or whitespace-only text."""
    value = value.strip()
    if not value:
        raise ValueError(f"{field_name} cannot be empty or whitespace only")
    return value


def validate_optional_text(value: str | None) -> str | None:
    """Strip optional text, collapsing blank strings to None."""
    if value is not None:
        value = value.strip()
        if not value:
            return None
    return value


def validate_url(value: str) -> str:
    value = value.strip()
    if not _URL_PATTERN.match(value):
        raise ValueError("Must be an http(s) URL")
    return value


def validate_password_strength(password: str, min_length: int) -> str:
    """Enforce the configured minimum password length.

    Args:
        password: Plaintext password supplied for a new account
        min_length: Minimum accepted length (Settings.min_password_length)

    Raises:
        ValueError: If the password is too short or only whitespace
    """
    if not password.strip():
        raise ValueError("Password cannot be blank")
    if len(password) < min_length:
        raise ValueError(f"Password must be at least {min_length} characters")
    return password


def validate_permissions(values: Iterable[str]) -> frozenset[str]:
    """Reject capability strings outside the known set."""
    permissions = frozenset(values)
    unknown = permissions - AVAILABLE_PERMISSIONS
    if unknown:
        raise ValueError(f"Unknown permissions: {', '.join(sorted(unknown))}")
    return permissions
