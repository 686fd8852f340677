"""Profile store adapter over the ``user_profiles`` table.

Every method runs in its own session and commits before returning, so
each call is one independent remote write from the workflow's point of
view.
"""

from __future__ import annotations

from typing import Any
from typing import Mapping
from typing import Optional

from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from accountsync.db.engine import get_engine
from accountsync.db.repositories import ReconciliationRepository
from accountsync.db.repositories import UserProfileRepository
from accountsync.exceptions import DatabaseError
from accountsync.utils.logging import get_logger

logger = get_logger(__name__)

# Engine setup reaches Secrets Manager and RDS before any SQL runs
_STORE_ERRORS = (SQLAlchemyError, BotoCoreError, ClientError)


class ProfileStore:
    """Upsert, update and delete profile records keyed by identity id."""

    def __init__(self, engine: Optional[Engine] = None):
        self._engine = engine

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = get_engine()
        return self._engine

    def upsert_profile(self, profile_id: str, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Create or overwrite the profile for *profile_id*."""
        try:
            with Session(self.engine) as session:
                profile = UserProfileRepository(session).upsert(profile_id, fields)
                stored = profile.to_dict()
                session.commit()
        except _STORE_ERRORS as exc:
            logger.error(
                "Profile upsert failed",
                extra={"profile_id": profile_id},
                exc_info=True,
            )
            raise DatabaseError("Unable to write profile", detail=type(exc).__name__) from exc
        return stored

    def update_profile(self, profile_id: str, fields: Mapping[str, Any]) -> bool:
        """Write only the given fields. Returns False if no profile exists."""
        try:
            with Session(self.engine) as session:
                profile = UserProfileRepository(session).update_fields(profile_id, fields)
                if profile is None:
                    return False
                session.commit()
        except _STORE_ERRORS as exc:
            logger.error(
                "Profile update failed",
                extra={"profile_id": profile_id, "fields": sorted(fields)},
                exc_info=True,
            )
            raise DatabaseError("Unable to update profile", detail=type(exc).__name__) from exc
        return True

    def delete_profile(self, profile_id: str) -> bool:
        """Delete the profile. Deleting a missing profile is not an error."""
        try:
            with Session(self.engine) as session:
                deleted = UserProfileRepository(session).delete_by_id(profile_id)
                session.commit()
        except _STORE_ERRORS as exc:
            logger.error(
                "Profile delete failed",
                extra={"profile_id": profile_id},
                exc_info=True,
            )
            raise DatabaseError("Unable to delete profile", detail=type(exc).__name__) from exc
        return deleted

    def profile_ids_by_email(self, email: str) -> list[str]:
        """Return the ids of profiles stored under *email*."""
        try:
            with Session(self.engine) as session:
                profiles = UserProfileRepository(session).find_by_email(email)
                return [profile.id for profile in profiles]
        except _STORE_ERRORS as exc:
            logger.error("Profile lookup by email failed", exc_info=True)
            raise DatabaseError("Unable to read profile", detail=type(exc).__name__) from exc

    def get_profile(self, profile_id: str) -> Optional[dict[str, Any]]:
        try:
            with Session(self.engine) as session:
                profile = UserProfileRepository(session).get_by_id(profile_id)
                return profile.to_dict() if profile is not None else None
        except _STORE_ERRORS as exc:
            raise DatabaseError("Unable to read profile", detail=type(exc).__name__) from exc

    def record_reconciliation(self, identity_id: str, operation: str, reason: str) -> None:
        """Persist a drift record for out-of-band reconciliation."""
        try:
            with Session(self.engine) as session:
                ReconciliationRepository(session).record(identity_id, operation, reason)
                session.commit()
        except _STORE_ERRORS as exc:
            raise DatabaseError(
                "Unable to record reconciliation", detail=type(exc).__name__
            ) from exc
