"""Repository for UserProfile entities."""

from __future__ import annotations

from typing import Any
from typing import Mapping
from typing import Optional
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from accountsync.db.models import UserProfile
from accountsync.db.repositories.base import BaseRepository

# Columns the application may write; created_at belongs to the database
WRITABLE_FIELDS = frozenset({"name", "last_name", "email", "phone", "roles"})


class UserProfileRepository(BaseRepository[UserProfile]):
    """Repository for UserProfile CRUD operations."""

    def __init__(self, session: Session):
        """Initialize the repository.

        Args:
            session: SQLAlchemy session for database operations.
        """
        super().__init__(session, UserProfile)

    def upsert(self, profile_id: str, fields: Mapping[str, Any]) -> UserProfile:
        """Create the profile, or overwrite the given fields of an existing one.

        ``created_at`` is only ever set by the database default on insert,
        so an upsert over an existing profile keeps its creation time.

        Args:
            profile_id: The Cognito user sub.
            fields: Column values keyed by attribute name.

        Returns:
            The stored profile.
        """
        values = _writable(fields)
        profile = self.get_by_id(profile_id)
        if profile is None:
            return self.save(UserProfile(id=profile_id, **values))
        for key, value in values.items():
            setattr(profile, key, value)
        return self.save(profile)

    def update_fields(
        self,
        profile_id: str,
        fields: Mapping[str, Any],
    ) -> Optional[UserProfile]:
        """Apply a partial update to an existing profile.

        Only the keys present in *fields* are written.

        Returns:
            The updated profile, or None when no profile exists.
        """
        profile = self.get_by_id(profile_id)
        if profile is None:
            return None
        for key, value in _writable(fields).items():
            setattr(profile, key, value)
        return self.save(profile)

    def find_by_email(self, email: str) -> Sequence[UserProfile]:
        """Find profiles stored under an email address."""
        query = select(UserProfile).where(UserProfile.email == email.strip())
        return self._session.execute(query).scalars().all()


def _writable(fields: Mapping[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - WRITABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
    return dict(fields)
