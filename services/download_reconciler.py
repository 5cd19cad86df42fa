# -*- coding: utf-8 -*-
"""
Remote -> local reconciliation.

Remote rows are fetched oldest first per tier and upserted locally by
natural key. A matched local record is fully replaced by the remote
version. Local records missing from the remote side are left alone.
"""

from typing import Any, List, Optional

from models.remote_records import RemoteArea, RemoteSubarea, RemoteUnit, RemoteMember
from services.exceptions import MediaTransferError, ParentNotFoundError
from services.media_syncer import AttachmentKind
from services.reconciler import TierReconciler
from services.record_converters import (
    remote_to_area, remote_to_subarea, remote_to_unit, remote_to_member
)
from services.sync_types import EntityType, SyncDirection, SyncResult
from utils.logger import get_logger

logger = get_logger(__name__)


class DownloadReconciler(TierReconciler):
    """Pulls every remote record into the local store."""

    direction = SyncDirection.DOWNLOAD

    def download(self, progress_callback=None) -> SyncResult:
        return self.run(progress_callback)

    def _source_records(self, entity_type: EntityType) -> List[Any]:
        return self.remote_stores.for_type(entity_type).list()

    def _sync_record(self, entity_type: EntityType, record: Any, result: SyncResult) -> None:
        if entity_type is EntityType.AREA:
            self._download_area(record)
        elif entity_type is EntityType.SUBAREA:
            self._download_subarea(record)
        elif entity_type is EntityType.UNIT:
            self._download_unit(record)
        else:
            self._download_member(record, result)

    # ==================== Helpers ====================

    def _parent_local_id(self, parent_type: EntityType, remote_id: Any) -> int:
        local_id = self.mapper.translate(parent_type, remote_id, self.direction)
        if local_id is None:
            raise ParentNotFoundError(
                f"Parent {parent_type.label.lower()} {remote_id} has no local record in this session"
            )
        return local_id

    def _upsert(self, entity_type: EntityType, remote: Any, natural_key: str,
                local_record: Any, existing: Optional[Any] = None) -> int:
        """Replace the matched local record, or insert a new one. Returns the local id."""
        self._check(local_record.validate())
        store = self.local_stores.for_type(entity_type)
        if existing is None:
            existing = self.mapper.resolve(entity_type, natural_key, self.direction)

        if existing is not None:
            store.update(existing.id, local_record)
            local_id = existing.id
        else:
            local_id = store.insert(local_record)
            self.mapper.forget(entity_type, natural_key, self.direction)

        self.mapper.bind(entity_type, remote.id, local_id, self.direction)
        return local_id

    # ==================== Tiers ====================

    def _download_area(self, remote: RemoteArea) -> None:
        self._upsert(EntityType.AREA, remote, remote.code, remote_to_area(remote))

    def _download_subarea(self, remote: RemoteSubarea) -> None:
        area_id = self._parent_local_id(EntityType.AREA, remote.area_id)
        self._upsert(EntityType.SUBAREA, remote, remote.code, remote_to_subarea(remote, area_id))

    def _download_unit(self, remote: RemoteUnit) -> None:
        subarea_id = self._parent_local_id(EntityType.SUBAREA, remote.subarea_id)
        self._upsert(EntityType.UNIT, remote, remote.code, remote_to_unit(remote, subarea_id))

    def _download_member(self, remote: RemoteMember, result: SyncResult) -> None:
        self._check_ancestry(remote)
        unit_id = self._parent_local_id(EntityType.UNIT, remote.unit_id)
        subarea_id = self._parent_local_id(EntityType.SUBAREA, remote.subarea_id)
        area_id = self._parent_local_id(EntityType.AREA, remote.area_id)

        member = remote_to_member(remote, unit_id, subarea_id, area_id)
        self._check(member.validate())

        existing = self.mapper.resolve(EntityType.MEMBER, remote.member_code, self.direction)
        for kind in AttachmentKind:
            locator = getattr(remote, kind.locator_field)
            if not locator:
                continue
            outcome = self.media_syncer.download_attachment(locator)
            if outcome.ok:
                setattr(member, kind.value, outcome.data)
                continue
            # Keep what the device already holds
            if existing is not None:
                setattr(member, kind.value, getattr(existing, kind.value))
            result.add_warning(MediaTransferError(
                f"{kind.label} download failed: {outcome.error}",
                EntityType.MEMBER.value, remote.member_code
            ))

        self._upsert(EntityType.MEMBER, remote, remote.member_code, member, existing)
