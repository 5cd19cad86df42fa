# -*- coding: utf-8 -*-
"""
Remote store record shapes.

One dataclass per entity mirroring the shared database row. Identifiers
are server-side UUID strings and timestamps stay in their ISO wire form;
`services.record_converters` turns them into local models.
"""

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional


class _RemoteRecord:
    """Row <-> dataclass helpers shared by the remote record types."""

    # Column holding the natural key shared with the local store
    natural_key_field = "code"

    @property
    def natural_key(self) -> str:
        return getattr(self, self.natural_key_field)

    def to_row(self) -> Dict[str, Any]:
        """Payload for insert/update requests."""
        return asdict(self)

    @classmethod
    def from_row(cls, row: Dict[str, Any]):
        """Build from an API row, ignoring columns this client does not know."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in row.items() if k in names})


@dataclass
class RemoteArea(_RemoteRecord):
    id: str
    code: str
    name: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class RemoteSubarea(_RemoteRecord):
    id: str
    area_id: str
    code: str
    name: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class RemoteUnit(_RemoteRecord):
    id: str
    subarea_id: str
    code: str
    head_name: str
    location_text: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class RemoteMember(_RemoteRecord):
    natural_key_field = "member_code"

    id: str
    member_code: str
    unit_id: str
    subarea_id: str
    area_id: str
    first_name: str
    last_name: str
    sex: str
    other_names: Optional[str] = None
    date_of_birth: Optional[str] = None
    age: Optional[int] = None
    phone_number: Optional[str] = None
    occupation: Optional[str] = None
    disability_status: str = "none"
    disability_notes: Optional[str] = None
    photo_url: Optional[str] = None
    fingerprint_url: Optional[str] = None
    consent_given: bool = False
    consent_date: Optional[str] = None
    recorder_name: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    synced_at: Optional[str] = None
    device_id: Optional[str] = None
