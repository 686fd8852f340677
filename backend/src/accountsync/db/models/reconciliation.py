"""Reconciliation record model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import Index, Text, func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TIMESTAMP

from accountsync.db.base import Base


class ReconciliationRecord(Base):
    """Drift between Cognito and the profile store left for an operator.

    Written when an operation changed one store, failed on the other and
    could not undo the first change.
    """

    __tablename__ = "account_reconciliations"
    __table_args__ = (Index("account_reconciliations_identity_idx", "identity_id"),)

    id: Mapped[str] = mapped_column(
        Text(),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    identity_id: Mapped[str] = mapped_column(
        Text(),
        nullable=False,
        comment="Cognito user sub the drift concerns",
    )
    operation: Mapped[str] = mapped_column(
        Text(),
        nullable=False,
        comment="createUser or updateUser",
    )
    reason: Mapped[str] = mapped_column(Text(), nullable=False)
    resolved_at: Mapped[Optional[datetime]] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
