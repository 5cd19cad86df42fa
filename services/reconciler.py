# -*- coding: utf-8 -*-
"""
Tier loop shared by the upload and download reconcilers.

Tiers are processed strictly in TIER_ORDER and records one at a time.
Every record is its own unit of work: a SyncError raised while handling
it is collected into the SyncResult, and any other exception is wrapped
in UnknownError, so the batch always continues with the next record.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from services.exceptions import SyncError, UnknownError, ValidationError
from services.identity_mapper import IdentityMapper
from services.media_syncer import MediaSyncer
from services.stores import StoreSet
from services.sync_types import (
    EntityType, ProgressCallback, SyncDirection, SyncResult, TIER_ORDER
)
from utils.logger import get_logger

logger = get_logger(__name__)


def tier_progress(tier_index: int, done: int, total: int) -> int:
    """Overall percentage: each tier spans an equal share of 0-100."""
    span = 100 // len(TIER_ORDER)
    base = tier_index * span
    if total <= 0:
        return base + span
    return base + (span * done) // total


class TierReconciler:
    """Base class; subclasses implement `_source_records` and `_sync_record`."""

    direction: SyncDirection = None

    def __init__(
        self,
        local_stores: StoreSet,
        remote_stores: StoreSet,
        mapper: IdentityMapper,
        media_syncer: MediaSyncer
    ):
        self.local_stores = local_stores
        self.remote_stores = remote_stores
        self.mapper = mapper
        self.media_syncer = media_syncer
        # Source-side records seen so far, by source id, for ancestry checks
        self._seen: Dict[EntityType, Dict[Any, Any]] = {}

    def run(self, progress_callback: Optional[ProgressCallback] = None) -> SyncResult:
        result = SyncResult(direction=self.direction)
        logger.info(f"Starting {self.direction.value}")

        for tier_index, entity_type in enumerate(TIER_ORDER):
            try:
                records = self._source_records(entity_type)
            except Exception as e:
                # A tier that cannot be listed is reported and its children
                # will fail their parent lookups.
                logger.error(f"Failed to list {entity_type.value}: {e}", exc_info=True)
                result.add_error(UnknownError(f"Failed to list records: {e}", entity_type.value))
                self._report(progress_callback, tier_progress(tier_index, 0, 0))
                continue

            self._seen[entity_type] = {getattr(r, "id", None): r for r in records}
            total = len(records)
            logger.info(f"{self.direction.value}: {total} {entity_type.value}")

            for done, record in enumerate(records, start=1):
                self._process(entity_type, record, result)
                self._report(progress_callback, tier_progress(tier_index, done, total))

            if total == 0:
                self._report(progress_callback, tier_progress(tier_index, 0, 0))

        result.finished_at = datetime.now()
        self._report(progress_callback, 100)
        logger.info(f"Finished {self.direction.value}: {result.summary()}")
        return result

    def _process(self, entity_type: EntityType, record: Any, result: SyncResult) -> None:
        natural_key = self._natural_key(record)
        try:
            if not natural_key:
                raise ValidationError("Missing natural key")
            self._sync_record(entity_type, record, result)
        except SyncError as e:
            e.entity_type = e.entity_type or entity_type.value
            e.natural_key = e.natural_key or natural_key
            logger.warning(f"Skipped {e.kind}: {e}")
            result.add_error(e)
            return
        except Exception as e:
            logger.error(
                f"Unexpected error syncing {entity_type.value} {natural_key}: {e}",
                exc_info=True
            )
            result.add_error(UnknownError(str(e), entity_type.value, natural_key))
            return

        self._counts(result).increment(entity_type)

    def _counts(self, result: SyncResult):
        if self.direction is SyncDirection.UPLOAD:
            return result.uploaded
        return result.downloaded

    @staticmethod
    def _natural_key(record: Any) -> Optional[str]:
        return (record.natural_key or "").strip() or None

    def _check_ancestry(self, member: Any) -> None:
        """
        The member's unit must belong to its subarea and the subarea to its area.

        Ids are source-side (local ids on upload, remote ids on download) and
        are compared against the parent records listed earlier in this run.
        """
        unit = self._seen.get(EntityType.UNIT, {}).get(member.unit_id)
        if unit is not None and unit.subarea_id != member.subarea_id:
            raise ValidationError(
                f"Unit {unit.code} belongs to subarea {unit.subarea_id}, "
                f"member references subarea {member.subarea_id}"
            )
        subarea = self._seen.get(EntityType.SUBAREA, {}).get(member.subarea_id)
        if subarea is not None and subarea.area_id != member.area_id:
            raise ValidationError(
                f"Subarea {subarea.code} belongs to area {subarea.area_id}, "
                f"member references area {member.area_id}"
            )

    @staticmethod
    def _report(progress_callback: Optional[ProgressCallback], percent: int) -> None:
        if progress_callback is not None:
            progress_callback(min(100, max(0, percent)))

    @staticmethod
    def _check(errors: List[str]) -> None:
        """Raise ValidationError for the messages returned by Model.validate()."""
        if errors:
            raise ValidationError("; ".join(errors))

    def _source_records(self, entity_type: EntityType) -> List[Any]:
        raise NotImplementedError

    def _sync_record(self, entity_type: EntityType, record: Any, result: SyncResult) -> None:
        raise NotImplementedError
