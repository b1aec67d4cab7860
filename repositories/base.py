"""
Repository base classes - define the interface.
"""

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Generic, Iterator, Optional, TypeVar

from models import Paper, Review, UserBase

T = TypeVar("T")


class EntityStore(ABC, Generic[T]):
    """
    Abstract keyed collection shared by users, papers and reviews.

    Every mutating call (save, update, delete_by_id) persists the whole
    collection. restore() runs once, when the store is built.

    Entities exposing a true `is_blinded` are read-side views with redacted
    identity fields; save and update refuse them.
    """

    def __init__(self, name: str):
        self.name = name
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator["EntityStore[T]"]:
        """Hold the store lock across a read-modify-write sequence."""
        with self._lock:
            yield self

    @abstractmethod
    def save(self, entity: T) -> bool:
        """
        Add entity. Returns False if an equal entity or one with the same ID
        is already stored, or if the entity is a blinded copy.
        """
        pass

    @abstractmethod
    def find_by_id(self, id: str) -> Optional[T]:
        """Get entity by ID."""
        pass

    @abstractmethod
    def find_all(self) -> list[T]:
        """Independent copy of every stored entity."""
        pass

    @abstractmethod
    def update(self, entity: T) -> bool:
        """Replace the stored entity with the same ID. False if none, or if blinded."""
        pass

    @abstractmethod
    def delete_by_id(self, id: str) -> bool:
        """Delete entity by ID. Returns True if deleted."""
        pass

    @abstractmethod
    def persist(self) -> bool:
        """Write the whole collection to durable storage."""
        pass

    @abstractmethod
    def restore(self) -> None:
        """Load the collection from durable storage."""
        pass

    def exists(self, id: str) -> bool:
        """Check if entity exists."""
        return self.find_by_id(id) is not None

    def count(self) -> int:
        return len(self.find_all())


class Repository(ABC):
    """
    Aggregate repository - provides access to all entity stores.

    This is what services use. Backend implementations provide
    concrete versions of each store.
    """

    @property
    @abstractmethod
    def users(self) -> EntityStore[UserBase]:
        """Access user store."""
        pass

    @property
    @abstractmethod
    def papers(self) -> EntityStore[Paper]:
        """Access paper store."""
        pass

    @property
    @abstractmethod
    def reviews(self) -> EntityStore[Review]:
        """Access review store."""
        pass
