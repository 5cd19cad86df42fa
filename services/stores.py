# -*- coding: utf-8 -*-
"""
Store contracts consumed by the sync engine.

Local repositories and remote API stores both implement EntityStore, so the
reconcilers, the identity mapper and the duplicate detector only see this
interface. Stores are constructed once by the caller and passed in.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, TypeVar

from services.sync_types import EntityType

R = TypeVar("R")


class EntityStore(ABC, Generic[R]):
    """list / lookup-by-natural-key / insert / update for one entity type."""

    @abstractmethod
    def list(self) -> List[R]:
        """All records, oldest first."""
        pass

    @abstractmethod
    def get_by_natural_key(self, code: str) -> Optional[R]:
        """Record with the given natural key, or None."""
        pass

    @abstractmethod
    def insert(self, record: R) -> Any:
        """Insert a record and return its store-assigned identifier."""
        pass

    @abstractmethod
    def update(self, record_id: Any, record: R) -> None:
        """Replace the fields of an existing record."""
        pass


class MediaStore(ABC):
    """Binary object storage for member attachments."""

    @abstractmethod
    def upload(self, data: bytes, key: str) -> str:
        """Store bytes under key and return a locator for later download."""
        pass

    @abstractmethod
    def download(self, locator: str) -> bytes:
        """Fetch the bytes behind a locator."""
        pass


@dataclass
class StoreSet:
    """The four entity stores of one side (local or remote)."""
    areas: EntityStore
    subareas: EntityStore
    units: EntityStore
    members: EntityStore

    def for_type(self, entity_type: EntityType) -> EntityStore:
        return getattr(self, entity_type.value)
