"""
Base entity classes.
"""

import uuid
from abc import abstractmethod
from datetime import datetime
from typing import Protocol, runtime_checkable
from pydantic import BaseModel, Field, ConfigDict


ANONYMOUS = "ANONYMOUS"


def new_id() -> str:
    """Opaque, process-wide unique identifier."""
    return str(uuid.uuid4())


@runtime_checkable
class Identified(Protocol):
    """Anything the entity store can key on."""

    @property
    def entity_id(self) -> str: ...


class TimestampMixin(BaseModel):
    """Mixin for created/updated timestamps."""
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class BaseEntity(TimestampMixin):
    """
    Base for all persistent entities.

    Subclasses define their own id field (user_id, paper_id, review_id)
    and expose it through entity_id.
    """
    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",  # Ignore unknown fields during migration
    )

    @property
    @abstractmethod
    def entity_id(self) -> str:
        """Stable identifier used as the storage key."""

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now()
