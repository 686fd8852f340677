"""Identity deletion reaction.

Subscribed to the EventBridge rule that matches Cognito user deletions
recorded by CloudTrail (``AdminDeleteUser`` and ``DeleteUser``), so it
runs for every deletion: the deleteUser callable, the console, the
Cognito API used directly. It removes the matching profile record.

A direct invocation with ``{"sub": "..."}`` (or ``{"userSub": "..."}``)
is accepted too, for replays and manual reconciliation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from accountsync.api.accounts import get_account_service
from accountsync.exceptions import AppError
from accountsync.utils.logging import (
    configure_logging,
    get_logger,
    request_id_from,
    set_request_context,
)

configure_logging()
logger = get_logger(__name__)

DELETE_EVENT_NAMES = frozenset({"AdminDeleteUser", "DeleteUser"})

# CloudTrail redacts usernames in some configurations
_REDACTED = "HIDDEN_DUE_TO_SECURITY_REASONS"


@dataclass(frozen=True)
class DeletedIdentity:
    identity_id: Optional[str] = None
    email: Optional[str] = None


def parse_deletion_event(event: Mapping[str, Any]) -> Optional[DeletedIdentity]:
    """Extract the deleted identity from an event.

    Returns:
        The deleted identity, or None when the event is not a deletion
        of a user in the configured pool.

    Raises:
        ValueError: If a deletion event carries no usable identifier.
    """
    detail = event.get("detail")
    if not isinstance(detail, Mapping):
        identity_id = event.get("sub") or event.get("userSub")
        if not identity_id:
            raise ValueError("Deletion event has no identity id")
        return DeletedIdentity(identity_id=str(identity_id))

    event_name = detail.get("eventName")
    if event_name is not None and event_name not in DELETE_EVENT_NAMES:
        return None
    if detail.get("errorCode"):
        # The API call failed, nothing was deleted
        return None

    request_params = detail.get("requestParameters") or {}
    expected_pool = os.getenv("COGNITO_USER_POOL_ID")
    pool_id = request_params.get("userPoolId")
    if expected_pool and pool_id and pool_id != expected_pool:
        return None

    additional = detail.get("additionalEventData") or {}
    identity_id = additional.get("sub") or detail.get("sub") or detail.get("userSub")
    if identity_id:
        return DeletedIdentity(identity_id=str(identity_id))

    username = request_params.get("username")
    if username and username != _REDACTED:
        username = str(username).strip()
        if "@" in username:
            return DeletedIdentity(email=username)
        return DeletedIdentity(identity_id=username)

    raise ValueError("Deletion event has no identity id")


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Remove the profile of a deleted identity.

    Failures are re-raised so the asynchronous invocation is retried;
    the identity itself is already gone either way.
    """
    set_request_context(
        req_id=request_id_from(event, context),
        fn_name="onIdentityDeleted",
    )

    try:
        deleted = parse_deletion_event(event)
    except ValueError as exc:
        logger.error(f"Unusable identity deletion event: {exc}")
        return {"status": "invalid"}

    if deleted is None:
        logger.info(
            "Ignoring non-deletion event",
            extra={"event_name": (event.get("detail") or {}).get("eventName")},
        )
        return {"status": "ignored"}

    try:
        removed = get_account_service().handle_identity_deleted(
            identity_id=deleted.identity_id,
            email=deleted.email,
        )
    except AppError as exc:
        logger.error(
            f"Profile cleanup failed: {exc.message}",
            extra={"operation": "onIdentityDeleted", "identity_id": deleted.identity_id},
        )
        raise

    return {"status": "deleted" if removed else "absent", "removed": removed}
