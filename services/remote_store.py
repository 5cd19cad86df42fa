# -*- coding: utf-8 -*-
"""
Remote entity stores backed by the registry API.
"""

from typing import List, Optional, Type

from models.remote_records import RemoteArea, RemoteSubarea, RemoteUnit, RemoteMember
from services.api_client import RegistryApiClient
from services.stores import EntityStore, StoreSet
from services.sync_types import EntityType
from utils.logger import get_logger

logger = get_logger(__name__)


class RemoteEntityStore(EntityStore):
    """
    One remote table exposed through the EntityStore contract.

    Records are the strict remote dataclasses; the identifier is the
    server-side UUID carried in `record.id`.
    """

    def __init__(self, client: RegistryApiClient, table: str,
                 record_type: Type):
        self.client = client
        self.table = table
        self.record_type = record_type
        self.natural_key_field = record_type.natural_key_field

    def list(self) -> List:
        """All rows in creation order (oldest first)."""
        rows = self.client.select(self.table, order="created_at.asc")
        return [self.record_type.from_row(row) for row in rows]

    def get_by_natural_key(self, code: str) -> Optional[object]:
        rows = self.client.select(self.table, filters={self.natural_key_field: code}, limit=1)
        if not rows:
            return None
        return self.record_type.from_row(rows[0])

    def insert(self, record) -> str:
        stored = self.client.insert(self.table, record.to_row())
        remote_id = stored.get("id", record.id)
        logger.debug(f"Inserted {self.table} {record.natural_key} -> {remote_id}")
        return remote_id

    def update(self, record_id: str, record) -> None:
        row = record.to_row()
        row["id"] = record_id
        self.client.update(self.table, record_id, row)
        logger.debug(f"Updated {self.table} {record.natural_key} ({record_id})")


def create_remote_stores(client: RegistryApiClient) -> StoreSet:
    """Remote stores for all four tiers sharing one client."""
    return StoreSet(
        areas=RemoteEntityStore(client, EntityType.AREA.value, RemoteArea),
        subareas=RemoteEntityStore(client, EntityType.SUBAREA.value, RemoteSubarea),
        units=RemoteEntityStore(client, EntityType.UNIT.value, RemoteUnit),
        members=RemoteEntityStore(client, EntityType.MEMBER.value, RemoteMember),
    )
