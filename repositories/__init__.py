"""
Repository layer - abstracts persistence.

Usage:
    from repositories import get_repository

    repo = get_repository()  # Returns configured backend
    paper = repo.papers.find_by_id(paper_id)
    repo.papers.update(paper)

Backends are swappable via config.
"""

from pathlib import Path

from .base import EntityStore, Repository
from .identity import resolve_id
from .json_backend import JsonFileStore, JsonRepository
from .memory import InMemoryStore, MemoryRepository

# Default backend - can be changed via config
_backend: str = "json"
_base_path: Path = None
_instance: Repository = None


def get_repository() -> Repository:
    """Get the configured repository instance."""
    global _instance

    if _instance is None:
        if _backend == "json":
            _instance = JsonRepository(base_path=_base_path)
        elif _backend == "memory":
            _instance = MemoryRepository()
        else:
            raise ValueError(f"Unknown backend: {_backend}")

    return _instance


def configure_backend(backend: str, base_path: Path = None) -> None:
    """Configure the repository backend."""
    global _backend, _base_path, _instance
    _backend = backend
    _base_path = base_path
    _instance = None  # Force re-initialization


__all__ = [
    "get_repository",
    "configure_backend",
    "resolve_id",
    "EntityStore",
    "Repository",
    "InMemoryStore",
    "JsonFileStore",
    "JsonRepository",
    "MemoryRepository",
]
