"""Repository pattern implementations for database operations.

Repositories provide a clean abstraction over database operations,
making the account workflow independent of the persistence layer.
"""

from accountsync.db.repositories.base import BaseRepository
from accountsync.db.repositories.reconciliation import ReconciliationRepository
from accountsync.db.repositories.user_profile import UserProfileRepository

__all__ = [
    "BaseRepository",
    "ReconciliationRepository",
    "UserProfileRepository",
]
