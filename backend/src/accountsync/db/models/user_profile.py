"""User profile model."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Index, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TIMESTAMP

from accountsync.db.base import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class UserProfile(Base):
    """Profile record kept alongside a Cognito identity.

    The primary key is the Cognito ``sub`` of the identity the profile
    belongs to.
    """

    __tablename__ = "user_profiles"
    __table_args__ = (Index("user_profiles_email_idx", "email"),)

    id: Mapped[str] = mapped_column(
        Text(),
        primary_key=True,
        comment="Cognito user sub (subject) identifier",
    )
    name: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)
    roles: Mapped[List[str]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "roles": list(self.roles or []),
            "createdAt": self.created_at,
        }
