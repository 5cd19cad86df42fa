# -*- coding: utf-8 -*-
"""
Local -> remote reconciliation.

Each local record is upserted into the remote store by natural key: a
match is overwritten with the local values, otherwise a new remote row is
inserted under a fresh UUID. Children are only written once their parent
has a remote id in this session.
"""

import uuid
from datetime import datetime
from typing import Any, List

from models.area import Area
from models.subarea import Subarea
from models.unit import Unit
from models.member import Member
from services.exceptions import (
    ApiException, MediaTransferError, NetworkException,
    ParentNotFoundError
)
from services.identity_mapper import IdentityMapper
from services.media_syncer import AttachmentKind, MediaSyncer
from services.reconciler import TierReconciler
from services.record_converters import (
    area_to_remote, subarea_to_remote, unit_to_remote, member_to_remote
)
from services.stores import StoreSet
from services.sync_types import EntityType, SyncDirection, SyncResult
from utils.datetime_utils import to_wire_timestamp
from utils.logger import get_logger

logger = get_logger(__name__)


def new_remote_id() -> str:
    return str(uuid.uuid4())


class UploadReconciler(TierReconciler):
    """Pushes every local record to the remote store."""

    direction = SyncDirection.UPLOAD

    def __init__(
        self,
        local_stores: StoreSet,
        remote_stores: StoreSet,
        mapper: IdentityMapper,
        media_syncer: MediaSyncer,
        device_id: str
    ):
        super().__init__(local_stores, remote_stores, mapper, media_syncer)
        self.device_id = device_id

    def upload(self, progress_callback=None) -> SyncResult:
        return self.run(progress_callback)

    def _source_records(self, entity_type: EntityType) -> List[Any]:
        return self.local_stores.for_type(entity_type).list()

    def _sync_record(self, entity_type: EntityType, record: Any, result: SyncResult) -> None:
        if entity_type is EntityType.AREA:
            self._upload_area(record)
        elif entity_type is EntityType.SUBAREA:
            self._upload_subarea(record)
        elif entity_type is EntityType.UNIT:
            self._upload_unit(record)
        else:
            self._upload_member(record, result)

    # ==================== Helpers ====================

    def _parent_remote_id(self, parent_type: EntityType, local_id: Any) -> str:
        remote_id = self.mapper.translate(parent_type, local_id, self.direction)
        if remote_id is None:
            raise ParentNotFoundError(
                f"Parent {parent_type.label.lower()} (local id {local_id}) has no remote record in this session"
            )
        return remote_id

    def _upsert(self, entity_type: EntityType, local_record: Any, natural_key: str, build) -> Any:
        """
        Insert or overwrite the remote record for natural_key.

        `build(remote_id, existing)` returns the remote record to write.
        Returns the record as written.
        """
        store = self.remote_stores.for_type(entity_type)
        existing = self.mapper.resolve(entity_type, natural_key, self.direction)

        if existing is not None:
            remote = build(existing.id, existing)
            store.update(existing.id, remote)
            remote_id = existing.id
        else:
            remote = build(new_remote_id(), None)
            remote_id = store.insert(remote)
            remote.id = remote_id
            self.mapper.forget(entity_type, natural_key, self.direction)

        self.mapper.bind(entity_type, local_record.id, remote_id, self.direction)
        return remote

    # ==================== Tiers ====================

    def _upload_area(self, area: Area) -> None:
        self._check(area.validate())
        self._upsert(
            EntityType.AREA, area, area.code,
            lambda remote_id, existing: area_to_remote(area, remote_id)
        )

    def _upload_subarea(self, subarea: Subarea) -> None:
        self._check(subarea.validate())
        area_rid = self._parent_remote_id(EntityType.AREA, subarea.area_id)
        self._upsert(
            EntityType.SUBAREA, subarea, subarea.code,
            lambda remote_id, existing: subarea_to_remote(subarea, area_rid, remote_id)
        )

    def _upload_unit(self, unit: Unit) -> None:
        self._check(unit.validate())
        subarea_rid = self._parent_remote_id(EntityType.SUBAREA, unit.subarea_id)
        self._upsert(
            EntityType.UNIT, unit, unit.code,
            lambda remote_id, existing: unit_to_remote(unit, subarea_rid, remote_id)
        )

    def _upload_member(self, member: Member, result: SyncResult) -> None:
        self._check(member.validate())
        self._check_ancestry(member)

        unit_rid = self._parent_remote_id(EntityType.UNIT, member.unit_id)
        subarea_rid = self._parent_remote_id(EntityType.SUBAREA, member.subarea_id)
        area_rid = self._parent_remote_id(EntityType.AREA, member.area_id)
        synced_at = to_wire_timestamp(datetime.now())

        def build(remote_id, existing):
            # Keep locators already stored remotely until a new upload replaces them
            return member_to_remote(
                member, unit_rid, subarea_rid, area_rid, remote_id,
                device_id=self.device_id,
                synced_at=synced_at,
                photo_url=existing.photo_url if existing else None,
                fingerprint_url=existing.fingerprint_url if existing else None,
            )

        remote = self._upsert(EntityType.MEMBER, member, member.member_code, build)
        self._upload_attachments(member, remote, result)

    def _upload_attachments(self, member: Member, remote, result: SyncResult) -> None:
        """
        Upload attachment bytes and point the remote row at the new objects.

        Core fields are already written; failures here only add warnings.
        Every run stores the bytes under a new timestamped key, so a member
        with attachments gets a new locator on each upload even when the
        bytes are unchanged. All other columns stay identical across runs.
        """
        changed = False
        for kind in AttachmentKind:
            data = getattr(member, kind.value)
            if not data:
                continue
            outcome = self.media_syncer.upload_attachment(data, member.member_code, kind)
            if not outcome.ok:
                result.add_warning(MediaTransferError(
                    f"{kind.label} upload failed: {outcome.error}",
                    EntityType.MEMBER.value, member.member_code
                ))
                continue
            setattr(remote, kind.locator_field, outcome.locator)
            changed = True

        if not changed:
            return

        try:
            self.remote_stores.members.update(remote.id, remote)
        except (ApiException, NetworkException) as e:
            logger.warning(f"Could not store attachment locators for {member.member_code}: {e}")
            result.add_warning(MediaTransferError(
                f"Attachment locator update failed: {e}",
                EntityType.MEMBER.value, member.member_code
            ))
