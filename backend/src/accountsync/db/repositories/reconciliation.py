"""Repository for ReconciliationRecord entities."""

from __future__ import annotations

from sqlalchemy.orm import Session

from accountsync.db.models import ReconciliationRecord
from accountsync.db.repositories.base import BaseRepository


class ReconciliationRepository(BaseRepository[ReconciliationRecord]):
    """Repository for drift records awaiting manual reconciliation."""

    def __init__(self, session: Session):
        super().__init__(session, ReconciliationRecord)

    def record(
        self,
        identity_id: str,
        operation: str,
        reason: str,
    ) -> ReconciliationRecord:
        """Store a new unresolved reconciliation record."""
        return self.save(
            ReconciliationRecord(
                identity_id=identity_id,
                operation=operation,
                reason=reason,
            )
        )

