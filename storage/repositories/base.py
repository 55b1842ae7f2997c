"""Base repository interface.

Repositories translate between domain entities and stored rows. They do not
enforce domain rules and do not cache anything between calls.
"""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """Key-based persistence contract shared by document repositories."""

    @abstractmethod
    def get_by_id(self, entity_id: str) -> Optional[T]:
        """Return the entity stored under ``entity_id``, or None."""

    @abstractmethod
    def upsert(self, entity: T) -> str:
        """Insert or replace ``entity``; return the new version token."""

    @abstractmethod
    def delete(self, entity_id: str) -> bool:
        """Remove the entity; True iff a row was removed."""

    @abstractmethod
    def health_check(self) -> bool:
        """Round-trip to the store; never raises."""


__all__ = ["BaseRepository"]
