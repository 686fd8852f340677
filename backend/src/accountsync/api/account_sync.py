"""Account synchronization workflow.

Keeps a Cognito identity and its profile record consistent across the
createUser, updateUser and deleteUser operations, and reacts to
identity deletions that happen anywhere.

The two stores share no transaction. Calls are made one after another
and never retried; a failed call ends the operation. Create undoes its
identity when the profile write fails. Drift that cannot be undone is
logged and stored as a reconciliation record.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from accountsync.api.account_validators import (
    CreateUserPayload,
    DeleteUserPayload,
    UpdateUserPayload,
)
from accountsync.api.schemas import AccountResult
from accountsync.exceptions import AppError, DatabaseError
from accountsync.services.identity_provider import IdentityRecord
from accountsync.utils.logging import get_logger, hash_for_correlation, mask_email

logger = get_logger(__name__)


class IdentityProviderAdapter(Protocol):
    def create_identity(self, email: str, password: str) -> IdentityRecord: ...

    def update_email(self, identity_id: str, email: str) -> None: ...

    def update_password(self, identity_id: str, password: str) -> None: ...

    def delete_identity(self, identity_id: str) -> None: ...

    def identity_exists(self, identity_id: str) -> bool: ...


class ProfileStoreAdapter(Protocol):
    def upsert_profile(self, profile_id: str, fields: Mapping[str, Any]) -> Any: ...

    def update_profile(self, profile_id: str, fields: Mapping[str, Any]) -> bool: ...

    def delete_profile(self, profile_id: str) -> bool: ...

    def profile_ids_by_email(self, email: str) -> list[str]: ...

    def record_reconciliation(self, identity_id: str, operation: str, reason: str) -> None: ...


class AccountSyncService:
    """Orchestrates the identity provider and the profile store."""

    def __init__(
        self,
        identity_provider: IdentityProviderAdapter,
        profile_store: ProfileStoreAdapter,
    ):
        self._identities = identity_provider
        self._profiles = profile_store

    def create_user(self, payload: CreateUserPayload) -> AccountResult:
        """Create the identity, then its profile.

        If the profile cannot be written the identity is deleted again so
        no identity is left without a profile.
        """
        user_ref = hash_for_correlation(payload.email)
        identity = self._identities.create_identity(payload.email, payload.password)

        try:
            self._profiles.upsert_profile(
                identity.id,
                {
                    "name": payload.name,
                    "last_name": payload.last_name,
                    "email": payload.email,
                    "phone": payload.phone,
                    "roles": list(payload.roles),
                },
            )
        except Exception:
            logger.error(
                "Profile write failed after identity creation, rolling back",
                extra={"operation": "createUser", "identity_id": identity.id, "user_ref": user_ref},
            )
            self._compensate_create(identity.id)
            raise

        logger.info(
            "User created",
            extra={
                "operation": "createUser",
                "identity_id": identity.id,
                "user": mask_email(payload.email),
                "user_ref": user_ref,
            },
        )
        return AccountResult(id=identity.id, message="User created successfully")

    def update_user(self, payload: UpdateUserPayload) -> AccountResult:
        """Apply the supplied changes; absent fields are left untouched."""
        identity_id = payload.id
        if not payload.has_changes:
            logger.info(
                "Update with no changes",
                extra={"operation": "updateUser", "identity_id": identity_id},
            )
            return AccountResult(id=identity_id, message="User updated successfully")

        if payload.email:
            self._identities.update_email(identity_id, payload.email)
            try:
                self._update_profile(identity_id, {"email": payload.email})
            except Exception as exc:
                self._record_drift(
                    identity_id,
                    "updateUser",
                    f"identity email updated but profile email write failed: {_describe(exc)}",
                )
                raise

        if payload.password:
            self._identities.update_password(identity_id, payload.password)

        profile_fields = payload.profile_fields()
        if profile_fields:
            self._update_profile(identity_id, profile_fields)

        logger.info(
            "User updated",
            extra={
                "operation": "updateUser",
                "identity_id": identity_id,
                "email_changed": bool(payload.email),
                "password_changed": bool(payload.password),
                "profile_fields": sorted(profile_fields),
            },
        )
        return AccountResult(id=identity_id, message="User updated successfully")

    def delete_user(self, payload: DeleteUserPayload) -> AccountResult:
        """Delete the identity only.

        The profile is removed by the identity deletion reaction, which
        also covers deletions made outside these functions.
        """
        self._identities.delete_identity(payload.uid)
        logger.info(
            "User deleted",
            extra={"operation": "deleteUser", "identity_id": payload.uid},
        )
        return AccountResult(message="User deleted successfully")

    def handle_identity_deleted(
        self,
        identity_id: Optional[str] = None,
        email: Optional[str] = None,
    ) -> int:
        """Remove the profile of a deleted identity.

        Idempotent: a profile that is already gone is not an error.
        Falls back to matching by email when the event carried no id; a
        profile found that way is only removed once its own identity no
        longer exists, since the email may already belong to a new user.

        Returns:
            Number of profile records removed.
        """
        if identity_id:
            removed = 1 if self._profiles.delete_profile(identity_id) else 0
        elif email:
            removed = 0
            for profile_id in self._profiles.profile_ids_by_email(email):
                if self._identities.identity_exists(profile_id):
                    logger.info(
                        "Keeping profile of a live identity",
                        extra={"operation": "onIdentityDeleted", "identity_id": profile_id},
                    )
                    continue
                if self._profiles.delete_profile(profile_id):
                    removed += 1
        else:
            raise ValueError("identity_id or email is required")

        logger.info(
            "Profile removed after identity deletion"
            if removed
            else "No profile to remove after identity deletion",
            extra={
                "operation": "onIdentityDeleted",
                "identity_id": identity_id,
                "user_ref": hash_for_correlation(email) if email else None,
                "removed": removed,
            },
        )
        return removed

    def _update_profile(self, identity_id: str, fields: Mapping[str, Any]) -> None:
        if not self._profiles.update_profile(identity_id, fields):
            logger.warning(
                "Profile missing for update",
                extra={"operation": "updateUser", "identity_id": identity_id},
            )
            raise DatabaseError("Profile not found", detail=identity_id)

    def _compensate_create(self, identity_id: str) -> None:
        try:
            self._identities.delete_identity(identity_id)
        except Exception as exc:
            logger.error(
                "Orphaned identity: compensating delete failed",
                extra={"operation": "createUser", "identity_id": identity_id},
                exc_info=True,
            )
            self._record_drift(
                identity_id,
                "createUser",
                f"profile write failed and identity delete failed: {_describe(exc)}",
            )
            return
        logger.info(
            "Identity rolled back",
            extra={"operation": "createUser", "identity_id": identity_id},
        )

    def _record_drift(self, identity_id: str, operation: str, reason: str) -> None:
        try:
            self._profiles.record_reconciliation(identity_id, operation, reason)
        except Exception:
            logger.error(
                "Unable to persist reconciliation record",
                extra={"operation": operation, "identity_id": identity_id, "reason": reason},
                exc_info=True,
            )


def _describe(exc: Exception) -> str:
    return exc.message if isinstance(exc, AppError) else type(exc).__name__
