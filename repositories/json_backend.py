"""
JSON file backend - stores each entity type as one JSON file.

Directory structure:
    {data_dir}/
        users.json     - {user_id: user}
        papers.json    - {paper_id: paper}
        reviews.json   - {review_id: review}

Each file is rewritten in full after every mutation.
"""

import json
import threading
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import TypeAdapter, ValidationError

from config import DATA_DIR
from models import Paper, Review, User, UserBase
from .base import EntityStore, Repository, T
from .identity import resolve_id
from .memory import InMemoryStore


class WriteQueue:
    """Thread-safe write serialization."""

    def __init__(self):
        self._lock = threading.Lock()

    def write_json(self, path: Path, data: dict) -> None:
        """Atomic JSON write."""
        with self._lock:
            temp = path.with_suffix(".json.tmp")
            with open(temp, "w") as f:
                json.dump(data, f, indent=2, default=str)
            temp.replace(path)


_write_queue = WriteQueue()


class JsonFileStore(InMemoryStore[T]):
    """
    Entity store persisted to a single JSON file.

    A failed write leaves the in-memory change in place and is recorded on
    last_persist_error (and passed to on_persist_error, if given).
    """

    def __init__(
        self,
        path: Path,
        entity_type: Any,
        on_persist_error: Optional[Callable[[str, Exception], None]] = None,
    ):
        super().__init__(name=Path(path).stem)
        self.path = Path(path)
        self._adapter = TypeAdapter(entity_type)
        self._on_persist_error = on_persist_error
        self.restore()

    def persist(self) -> bool:
        with self._lock:
            data = {
                resolve_id(item): self._adapter.dump_python(item, mode="json")
                for item in self._items
            }
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                _write_queue.write_json(self.path, data)
            except (OSError, TypeError, ValueError) as e:
                print(f"[{self.name}] Error saving to {self.path}: {e}")
                self.last_persist_error = e
                if self._on_persist_error:
                    self._on_persist_error(self.name, e)
                return False

            self.last_persist_error = None
            return True

    def restore(self) -> None:
        with self._lock:
            self._items = []
            if not self.path.exists():
                return

            try:
                with open(self.path) as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                print(f"[WARN] Corrupt {self.path.name}: {e}")
                return

            records = data.values() if isinstance(data, dict) else data
            for record in records:
                try:
                    self._items.append(self._adapter.validate_python(record))
                except ValidationError as e:
                    print(f"[WARN] Skipping bad record in {self.path.name}: {e.error_count()} error(s)")


class JsonRepository(Repository):
    """JSON file backend implementation."""

    def __init__(self, base_path: Path = None, on_persist_error=None):
        self._base_path = Path(base_path or DATA_DIR)
        self._users = JsonFileStore(self._base_path / "users.json", User, on_persist_error)
        self._papers = JsonFileStore(self._base_path / "papers.json", Paper, on_persist_error)
        self._reviews = JsonFileStore(self._base_path / "reviews.json", Review, on_persist_error)

    @property
    def users(self) -> EntityStore[UserBase]:
        return self._users

    @property
    def papers(self) -> EntityStore[Paper]:
        return self._papers

    @property
    def reviews(self) -> EntityStore[Review]:
        return self._reviews
