"""Caller authorization helpers for the account callables."""

from __future__ import annotations

import os
from typing import Any, Mapping, Optional

from accountsync.exceptions import AuthorizationError


def _get_authorizer_context(event: Mapping[str, Any]) -> dict[str, Any]:
    """Extract authorizer context from the event.

    Supports both:
    - Lambda authorizers (context fields directly in authorizer)
    - Cognito User Pool authorizers (claims nested under authorizer.claims)
    """
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}

    # Lambda authorizer puts context fields directly
    if "groups" in authorizer or "userSub" in authorizer:
        return {
            "groups": authorizer.get("groups", ""),
            "sub": authorizer.get("userSub", ""),
            "email": authorizer.get("email", ""),
        }

    # Cognito User Pool authorizer nests under "claims"
    claims = authorizer.get("claims") or {}
    return {
        "groups": claims.get("cognito:groups", ""),
        "sub": claims.get("sub", ""),
        "email": claims.get("email", ""),
    }


def _get_caller_sub(event: Mapping[str, Any]) -> Optional[str]:
    """Return the authenticated caller's Cognito sub, if any."""
    return _get_authorizer_context(event).get("sub") or None


def _get_caller_groups(event: Mapping[str, Any]) -> list[str]:
    groups = _get_authorizer_context(event).get("groups") or ""
    if isinstance(groups, (list, tuple)):
        return [str(group).strip() for group in groups if str(group).strip()]
    # Cognito renders the list as "a,b" or "[a b]" depending on the authorizer
    cleaned = str(groups).strip("[]")
    return [group for group in cleaned.replace(",", " ").split() if group]


def _is_admin(event: Mapping[str, Any]) -> bool:
    """Return True when the caller belongs to the admin group."""
    admin_group = os.getenv("ADMIN_GROUP", "admin")
    return admin_group in _get_caller_groups(event)


def _admin_group_required() -> bool:
    value = os.getenv("REQUIRE_ADMIN_GROUP", "true")
    return value.strip().lower() not in {"0", "false", "no", "off"}


def require_account_admin(event: Mapping[str, Any]) -> str:
    """Ensure the caller may manage accounts.

    The caller must be authenticated. Unless ``REQUIRE_ADMIN_GROUP`` is
    switched off, the caller must also be in the admin group.

    Returns:
        The caller's sub.

    Raises:
        AuthorizationError: If either check fails.
    """
    caller_sub = _get_caller_sub(event)
    if not caller_sub:
        raise AuthorizationError("Only administrators can manage users.")
    if _admin_group_required() and not _is_admin(event):
        raise AuthorizationError("Only administrators can manage users.")
    return caller_sub
