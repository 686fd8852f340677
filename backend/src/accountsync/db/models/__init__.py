"""SQLAlchemy models for account data."""

from accountsync.db.models.reconciliation import ReconciliationRecord
from accountsync.db.models.user_profile import UserProfile

__all__ = [
    "ReconciliationRecord",
    "UserProfile",
]
