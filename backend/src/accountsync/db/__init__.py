"""Profile store database utilities and models."""

from accountsync.db.base import Base
from accountsync.db.models import ReconciliationRecord
from accountsync.db.models import UserProfile

__all__ = [
    "Base",
    "ReconciliationRecord",
    "UserProfile",
]
