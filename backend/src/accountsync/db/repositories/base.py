"""Generic repository over a single mapped table keyed by a text id."""

from __future__ import annotations

from typing import Generic
from typing import Optional
from typing import Type
from typing import TypeVar

from sqlalchemy.orm import Session

from accountsync.db.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Lookup, save and delete for one model.

    The repository flushes but never commits; the caller owns the
    session and decides when the unit of work ends.
    """

    def __init__(self, session: Session, model: Type[T]):
        self._session = session
        self._model = model

    def get_by_id(self, entity_id: str) -> Optional[T]:
        return self._session.get(self._model, entity_id)

    def save(self, entity: T) -> T:
        """Flush *entity* and reload server-generated columns.

        Works for new and already persistent entities alike.
        """
        self._session.add(entity)
        self._session.flush()
        self._session.refresh(entity)
        return entity

    def delete(self, entity: T) -> None:
        self._session.delete(entity)
        self._session.flush()

    def delete_by_id(self, entity_id: str) -> bool:
        """Delete by primary key. Returns False when nothing matched."""
        entity = self.get_by_id(entity_id)
        if entity is None:
            return False
        self.delete(entity)
        return True
