"""
Identity resolution for stored entities.

Users, papers and reviews each name their id field differently; all of
them expose it as entity_id, so the store never branches on entity type.
"""

from typing import Any

from models import Identified


def resolve_id(entity: Any) -> str:
    """Return the storage key of an entity."""
    if isinstance(entity, Identified):
        return entity.entity_id
    raise TypeError(f"{type(entity).__name__} has no entity_id and cannot be stored")
