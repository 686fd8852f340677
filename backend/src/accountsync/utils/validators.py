"""Input validation utilities."""

from __future__ import annotations

import re
from typing import Any
from typing import Optional

from accountsync.exceptions import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def sanitize_string(
    value: Optional[str],
    max_length: int = 1000,
    strip: bool = True,
) -> Optional[str]:
    """Sanitize a string input.

    Args:
        value: The string to sanitize, or None.
        max_length: Maximum allowed length.
        strip: Whether to strip whitespace.

    Returns:
        The sanitized string, or None if input is None or blank.

    Raises:
        ValueError: If the string exceeds max_length.
    """
    if value is None:
        return None
    if strip:
        value = value.strip()
    if len(value) > max_length:
        raise ValueError(f"Value exceeds maximum length of {max_length}")
    return value if value else None


def validate_string_field(
    value: Any,
    field_name: str,
    max_length: int,
    required: bool = False,
    strip: bool = True,
) -> Optional[str]:
    """Validate an optional or required string field.

    Blank strings count as absent. Non-string values are rejected
    rather than coerced.

    Raises:
        ValidationError: If the value is missing, not a string or too long.
    """
    if value is None:
        if required:
            raise ValidationError(f"{field_name} is required", field=field_name)
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string", field=field_name)
    if not value.strip():
        if required:
            raise ValidationError(f"{field_name} is required", field=field_name)
        return None
    try:
        return sanitize_string(value, max_length=max_length, strip=strip)
    except ValueError as exc:
        raise ValidationError(
            f"{field_name} must be at most {max_length} characters",
            field=field_name,
        ) from exc


def validate_email(value: str, field_name: str = "email") -> str:
    """Check that *value* looks like an email address.

    The address is returned unchanged; case is preserved because the
    identity provider is the authority on address equivalence.
    """
    if not EMAIL_RE.match(value):
        raise ValidationError(f"{field_name} must be a valid email address", field=field_name)
    return value
