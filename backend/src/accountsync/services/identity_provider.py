"""Cognito user pool adapter for account identities.

Identities are addressed by their Cognito ``sub``. The pool is expected
to use email as its username attribute, in which case Cognito accepts
the ``sub`` wherever an admin API asks for a ``Username``.

SECURITY NOTES:
- Passwords are passed straight to Cognito and never logged
- Email addresses are masked in logs
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from typing import Optional

from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError

from accountsync.exceptions import IdentityProviderError
from accountsync.services.aws_clients import get_cognito_idp_client
from accountsync.utils.logging import get_logger
from accountsync.utils.logging import hash_for_correlation
from accountsync.utils.logging import mask_email

logger = get_logger(__name__)


@dataclass(frozen=True)
class IdentityRecord:
    """Canonical fields returned by the provider for a new identity."""

    id: str
    email: str
    username: str


class CognitoIdentityProvider:
    """Create, update and delete Cognito users by ``sub``."""

    def __init__(self, user_pool_id: str, client: Optional[Any] = None):
        self._user_pool_id = user_pool_id
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = get_cognito_idp_client()
        return self._client

    def create_identity(self, email: str, password: str) -> IdentityRecord:
        """Create a confirmed user with a permanent password.

        Raises:
            IdentityProviderError: If Cognito rejects the user or the
                password, or is unavailable.
        """
        user_ref = hash_for_correlation(email)
        try:
            response = self.client.admin_create_user(
                UserPoolId=self._user_pool_id,
                Username=email,
                TemporaryPassword=password,
                MessageAction="SUPPRESS",
                UserAttributes=[
                    {"Name": "email", "Value": email},
                    {"Name": "email_verified", "Value": "true"},
                ],
            )
        except (ClientError, BotoCoreError) as exc:
            raise _wrap(exc, "Unable to create identity", user_ref=user_ref) from exc

        user = response.get("User") or {}
        username = str(user.get("Username") or email)
        attributes = {
            attr["Name"]: attr["Value"] for attr in user.get("Attributes", [])
        }
        identity_id = attributes.get("sub") or username

        try:
            self.client.admin_set_user_password(
                UserPoolId=self._user_pool_id,
                Username=identity_id,
                Password=password,
                Permanent=True,
            )
        except (ClientError, BotoCoreError) as exc:
            self._discard_half_created(identity_id, user_ref)
            raise _wrap(exc, "Unable to set identity password", user_ref=user_ref) from exc

        logger.info(
            "Identity created",
            extra={"identity_id": identity_id, "user": mask_email(email), "user_ref": user_ref},
        )
        return IdentityRecord(
            id=identity_id,
            email=attributes.get("email") or email,
            username=username,
        )

    def update_email(self, identity_id: str, email: str) -> None:
        """Replace the identity's email and mark it verified."""
        try:
            self.client.admin_update_user_attributes(
                UserPoolId=self._user_pool_id,
                Username=identity_id,
                UserAttributes=[
                    {"Name": "email", "Value": email},
                    {"Name": "email_verified", "Value": "true"},
                ],
            )
        except (ClientError, BotoCoreError) as exc:
            raise _wrap(exc, "Unable to update identity email", identity_id=identity_id) from exc
        logger.info("Identity email updated", extra={"identity_id": identity_id})

    def update_password(self, identity_id: str, password: str) -> None:
        """Set a new permanent password."""
        try:
            self.client.admin_set_user_password(
                UserPoolId=self._user_pool_id,
                Username=identity_id,
                Password=password,
                Permanent=True,
            )
        except (ClientError, BotoCoreError) as exc:
            raise _wrap(
                exc, "Unable to update identity password", identity_id=identity_id
            ) from exc
        logger.info("Identity password updated", extra={"identity_id": identity_id})

    def delete_identity(self, identity_id: str) -> None:
        """Delete the identity."""
        try:
            self.client.admin_delete_user(
                UserPoolId=self._user_pool_id,
                Username=identity_id,
            )
        except (ClientError, BotoCoreError) as exc:
            raise _wrap(exc, "Unable to delete identity", identity_id=identity_id) from exc
        logger.info("Identity deleted", extra={"identity_id": identity_id})

    def identity_exists(self, identity_id: str) -> bool:
        """Return True while Cognito still knows the identity."""
        try:
            self.client.admin_get_user(
                UserPoolId=self._user_pool_id,
                Username=identity_id,
            )
        except ClientError as exc:
            if _error_code(exc) == "UserNotFoundException":
                return False
            raise _wrap(exc, "Unable to look up identity", identity_id=identity_id) from exc
        except BotoCoreError as exc:
            raise _wrap(exc, "Unable to look up identity", identity_id=identity_id) from exc
        return True

    def _discard_half_created(self, identity_id: str, user_ref: str) -> None:
        try:
            self.client.admin_delete_user(
                UserPoolId=self._user_pool_id,
                Username=identity_id,
            )
        except (ClientError, BotoCoreError):
            logger.error(
                "Failed to remove identity after password rejection",
                extra={"identity_id": identity_id, "user_ref": user_ref},
                exc_info=True,
            )


def _error_code(exc: Exception) -> str:
    """Cognito error code, or the botocore class name for transport errors."""
    if isinstance(exc, ClientError):
        return str(exc.response.get("Error", {}).get("Code") or "Unknown")
    return type(exc).__name__


def _wrap(exc: Exception, message: str, **context: str) -> IdentityProviderError:
    code = _error_code(exc)
    logger.warning(message, extra={"provider_code": code, **context})
    return IdentityProviderError(message, provider_code=code)
