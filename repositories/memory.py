"""
In-memory backend - keeps each collection in a list.

Also the base of the JSON backend, which only adds persist/restore.
"""

from typing import Optional

from models import Paper, Review, UserBase
from .base import EntityStore, Repository, T
from .identity import resolve_id


class InMemoryStore(EntityStore[T]):
    """List-backed entity store. Useful for tests or throwaway sessions."""

    def __init__(self, name: str = "memory"):
        super().__init__(name)
        self._items: list[T] = []
        self.last_persist_error: Optional[Exception] = None

    @property
    def is_durable(self) -> bool:
        """False once a persist has failed and not yet succeeded again."""
        return self.last_persist_error is None

    def _index_of(self, id: str) -> int:
        for i, item in enumerate(self._items):
            if resolve_id(item) == id:
                return i
        return -1

    @staticmethod
    def _is_blinded(entity: T) -> bool:
        return getattr(entity, "is_blinded", False)

    def _commit(self) -> None:
        # Mutation already applied; a failed write is recorded, not raised
        self.persist()

    def save(self, entity: T) -> bool:
        id = resolve_id(entity)
        if self._is_blinded(entity):
            return False
        with self._lock:
            if entity in self._items or self._index_of(id) >= 0:
                return False
            self._items.append(entity.model_copy(deep=True))
            self._commit()
            return True

    def find_by_id(self, id: str) -> Optional[T]:
        with self._lock:
            i = self._index_of(id)
            if i < 0:
                return None
            return self._items[i].model_copy(deep=True)

    def find_all(self) -> list[T]:
        with self._lock:
            return [item.model_copy(deep=True) for item in self._items]

    def update(self, entity: T) -> bool:
        id = resolve_id(entity)
        if self._is_blinded(entity):
            return False
        with self._lock:
            i = self._index_of(id)
            if i < 0:
                return False
            self._items[i] = entity.model_copy(deep=True)
            self._commit()
            return True

    def delete_by_id(self, id: str) -> bool:
        with self._lock:
            i = self._index_of(id)
            if i < 0:
                return False
            del self._items[i]
            self._commit()
            return True

    def count(self) -> int:
        with self._lock:
            return len(self._items)

    # Nothing to write or read for memory-only storage

    def persist(self) -> bool:
        return True

    def restore(self) -> None:
        pass


class MemoryRepository(Repository):
    """In-memory backend - nothing survives the process."""

    def __init__(self):
        self._users = InMemoryStore("users")
        self._papers = InMemoryStore("papers")
        self._reviews = InMemoryStore("reviews")

    @property
    def users(self) -> EntityStore[UserBase]:
        return self._users

    @property
    def papers(self) -> EntityStore[Paper]:
        return self._papers

    @property
    def reviews(self) -> EntityStore[Review]:
        return self._reviews
