# -*- coding: utf-8 -*-
"""
Session-scoped identity mapping between local and remote records.

A fresh mapper is created for every sync session. Lookups go to the
opposite store by natural key; the ids of records written during the
session are bound so child tiers can translate their parent references.
"""

from typing import Any, Dict, Optional, Tuple

from services.stores import StoreSet
from services.sync_types import EntityType, SyncDirection
from utils.logger import get_logger

logger = get_logger(__name__)


class IdentityMapper:
    """
    Per-session local id <-> remote id maps.

    UPLOAD maps local id -> remote id; DOWNLOAD maps remote id -> local id.
    """

    def __init__(self, local_stores: StoreSet, remote_stores: StoreSet):
        self.local_stores = local_stores
        self.remote_stores = remote_stores
        self._maps: Dict[Tuple[SyncDirection, EntityType], Dict[Any, Any]] = {}
        self._resolved: Dict[Tuple[SyncDirection, EntityType, str], Any] = {}

    def _target_store(self, entity_type: EntityType, direction: SyncDirection):
        if direction is SyncDirection.UPLOAD:
            return self.remote_stores.for_type(entity_type)
        return self.local_stores.for_type(entity_type)

    def resolve(self, entity_type: EntityType, natural_key: str,
                direction: SyncDirection) -> Optional[Any]:
        """
        Find the record with this natural key in the opposite store.

        Upload resolves against the remote store, download against the
        local store. The answer is memoized for the rest of the session.
        """
        cache_key = (direction, entity_type, natural_key)
        if cache_key in self._resolved:
            return self._resolved[cache_key]

        record = self._target_store(entity_type, direction).get_by_natural_key(natural_key)
        self._resolved[cache_key] = record
        return record

    def bind(self, entity_type: EntityType, source_id: Any, target_id: Any,
             direction: SyncDirection) -> None:
        """Record that source_id (this side) is target_id on the other side."""
        self._maps.setdefault((direction, entity_type), {})[source_id] = target_id
        logger.debug(f"{direction.value} {entity_type.value}: {source_id} -> {target_id}")

    def translate(self, entity_type: EntityType, source_id: Any,
                  direction: SyncDirection) -> Optional[Any]:
        """Id on the other side, or None when the record was not synced this session."""
        if source_id is None:
            return None
        return self._maps.get((direction, entity_type), {}).get(source_id)

    def forget(self, entity_type: EntityType, natural_key: str,
               direction: SyncDirection) -> None:
        """Drop a memoized lookup after the target record was written."""
        self._resolved.pop((direction, entity_type, natural_key), None)

    def mapped_count(self, entity_type: EntityType, direction: SyncDirection) -> int:
        return len(self._maps.get((direction, entity_type), {}))
