"""Callable handlers for user account management.

Routes handled (POST, callable body ``{"data": {...}}``):
    /v1/accounts/createUser  - Create a Cognito user and its profile
    /v1/accounts/updateUser  - Update email, password and profile fields
    /v1/accounts/deleteUser  - Delete a Cognito user

Each operation also has its own handler for functions deployed one per
operation.
"""

from __future__ import annotations

import os
from typing import Any, Callable, Mapping, Optional

from accountsync.api.account_auth import require_account_admin
from accountsync.api.account_sync import AccountSyncService
from accountsync.api.account_validators import (
    validate_create_request,
    validate_delete_request,
    validate_update_request,
)
from accountsync.api.schemas import AccountResult
from accountsync.exceptions import AppError, ConfigurationError
from accountsync.services.identity_provider import CognitoIdentityProvider
from accountsync.services.profile_store import ProfileStore
from accountsync.utils.logging import (
    configure_logging,
    get_logger,
    request_id_from,
    set_request_context,
)
from accountsync.utils.responses import (
    callable_error,
    callable_result,
    json_response,
    parse_callable_data,
)

configure_logging()
logger = get_logger(__name__)

# One service per execution environment, built on first use
_SERVICE: Optional[AccountSyncService] = None


def get_account_service() -> AccountSyncService:
    """Return the process-wide account service, creating it once."""
    global _SERVICE
    if _SERVICE is None:
        user_pool_id = os.getenv("COGNITO_USER_POOL_ID")
        if not user_pool_id:
            raise ConfigurationError("COGNITO_USER_POOL_ID")
        _SERVICE = AccountSyncService(
            CognitoIdentityProvider(user_pool_id),
            ProfileStore(),
        )
    return _SERVICE


def reset_account_service() -> None:
    """Forget the cached service (useful in tests)."""
    global _SERVICE
    _SERVICE = None


# ---------------------------------------------------------------------------
# Entrypoints
# ---------------------------------------------------------------------------


def create_user_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return _invoke("createUser", event, context, _create_user)


def update_user_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return _invoke("updateUser", event, context, _update_user)


def delete_user_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return _invoke("deleteUser", event, context, _delete_user)


_ROUTES: dict[str, Callable[[Mapping[str, Any], Any], dict[str, Any]]] = {
    "createUser": create_user_handler,
    "updateUser": update_user_handler,
    "deleteUser": delete_user_handler,
}


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Route account requests by the last path segment."""
    method = event.get("httpMethod", "")
    path = event.get("path", "") or ""
    operation = path.rstrip("/").rsplit("/", 1)[-1]

    if method == "OPTIONS":
        return json_response(204, "", event=event)
    if method and method != "POST":
        return json_response(405, {"error": "Method not allowed"}, event=event)

    handler = _ROUTES.get(operation)
    if handler is None:
        return json_response(404, {"error": "Not found"}, event=event)
    return handler(event, context)


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------


def _invoke(
    operation: str,
    event: Mapping[str, Any],
    context: Any,
    action: Callable[[Mapping[str, Any]], AccountResult],
) -> dict[str, Any]:
    """Authorize, run *action* and translate errors for the caller."""
    set_request_context(req_id=request_id_from(event, context), fn_name=operation)
    try:
        require_account_admin(event)
        result = action(parse_callable_data(event))
    except AppError as exc:
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            f"{operation} failed: {exc.message}",
            extra={"operation": operation, "code": exc.code, "detail": exc.detail},
        )
        return callable_error(exc, event=event)
    except Exception:
        logger.exception(f"Unexpected error in {operation}", extra={"operation": operation})
        return callable_error(AppError(f"Unable to complete {operation}"), event=event)
    return callable_result(result, event=event)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def _create_user(data: Any) -> AccountResult:
    payload = validate_create_request(data)
    return get_account_service().create_user(payload)


def _update_user(data: Any) -> AccountResult:
    payload = validate_update_request(data)
    return get_account_service().update_user(payload)


def _delete_user(data: Any) -> AccountResult:
    payload = validate_delete_request(data)
    return get_account_service().delete_user(payload)
