# -*- coding: utf-8 -*-
"""
Shared sync vocabulary: entity tiers, directions and the session result.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from services.exceptions import SyncError


ProgressCallback = Callable[[int], None]


class EntityType(Enum):
    """Hierarchy tiers, in dependency order."""
    AREA = "areas"
    SUBAREA = "subareas"
    UNIT = "units"
    MEMBER = "members"

    @property
    def label(self) -> str:
        return self.name.capitalize()


# Processing order for both directions: parents before children.
TIER_ORDER = (EntityType.AREA, EntityType.SUBAREA, EntityType.UNIT, EntityType.MEMBER)


class SyncDirection(Enum):
    UPLOAD = "upload"
    DOWNLOAD = "download"


@dataclass
class EntityCounts:
    """Per-tier record counters."""
    areas: int = 0
    subareas: int = 0
    units: int = 0
    members: int = 0

    def increment(self, entity_type: EntityType) -> None:
        setattr(self, entity_type.value, getattr(self, entity_type.value) + 1)

    def get(self, entity_type: EntityType) -> int:
        return getattr(self, entity_type.value)

    @property
    def total(self) -> int:
        return self.areas + self.subareas + self.units + self.members

    def to_dict(self) -> Dict[str, int]:
        return {
            "areas": self.areas,
            "subareas": self.subareas,
            "units": self.units,
            "members": self.members,
        }


@dataclass
class SyncResult:
    """
    Outcome of one reconciliation session.

    `errors` hold records that were skipped or failed; `warnings` hold
    attachment problems on records whose core fields did sync.
    """
    direction: SyncDirection
    uploaded: EntityCounts = field(default_factory=EntityCounts)
    downloaded: EntityCounts = field(default_factory=EntityCounts)
    errors: List[SyncError] = field(default_factory=list)
    warnings: List[SyncError] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    @property
    def success(self) -> bool:
        return len(self.errors) == 0

    @property
    def issues(self) -> List[SyncError]:
        return self.errors + self.warnings

    @property
    def counts(self) -> EntityCounts:
        if self.direction is SyncDirection.UPLOAD:
            return self.uploaded
        return self.downloaded

    def add_error(self, error: SyncError) -> None:
        self.errors.append(error)

    def add_warning(self, warning: SyncError) -> None:
        self.warnings.append(warning)

    def summary(self) -> str:
        counts = self.counts
        verb = "Uploaded" if self.direction is SyncDirection.UPLOAD else "Downloaded"
        return (
            f"{verb} {counts.areas} areas, {counts.subareas} subareas, "
            f"{counts.units} units, {counts.members} members "
            f"({len(self.errors)} errors, {len(self.warnings)} warnings)"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "direction": self.direction.value,
            "success": self.success,
            "uploaded": self.uploaded.to_dict(),
            "downloaded": self.downloaded.to_dict(),
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }
