# -*- coding: utf-8 -*-
"""
Converters between local models and remote record types.

Local records reference their parents by local integer ids, remote
records by remote UUIDs; callers translate the parent ids through the
IdentityMapper and pass them in. Timestamps travel as UTC ISO strings
and are held locally as naive device-local datetimes.
"""

from datetime import datetime
from typing import Optional

from models.area import Area
from models.subarea import Subarea
from models.unit import Unit
from models.member import Member
from models.remote_records import RemoteArea, RemoteSubarea, RemoteUnit, RemoteMember
from services.exceptions import ValidationError
from utils.datetime_utils import (
    to_isoformat, date_from_isoformat, to_wire_timestamp, from_wire_timestamp
)


def _timestamp(value: Optional[str], field_name: str) -> Optional[datetime]:
    try:
        return from_wire_timestamp(value)
    except ValueError:
        raise ValidationError(f"Malformed {field_name}: {value!r}")


def _record_timestamp(value: Optional[str], field_name: str) -> datetime:
    # An absent value is stamped now; a malformed one is rejected
    return _timestamp(value, field_name) or datetime.now()


# ==================== Area ====================

def area_to_remote(area: Area, remote_id: str) -> RemoteArea:
    # Areas have no local modification time; created_at stands in.
    return RemoteArea(
        id=remote_id,
        code=area.code,
        name=area.name,
        created_at=to_wire_timestamp(area.created_at),
        updated_at=to_wire_timestamp(area.created_at),
    )


def remote_to_area(remote: RemoteArea) -> Area:
    return Area(
        code=remote.code,
        name=remote.name,
        created_at=_record_timestamp(remote.created_at, "created_at"),
    )


# ==================== Subarea ====================

def subarea_to_remote(subarea: Subarea, area_remote_id: str, remote_id: str) -> RemoteSubarea:
    return RemoteSubarea(
        id=remote_id,
        area_id=area_remote_id,
        code=subarea.code,
        name=subarea.name,
        created_at=to_wire_timestamp(subarea.created_at),
        updated_at=to_wire_timestamp(subarea.created_at),
    )


def remote_to_subarea(remote: RemoteSubarea, area_id: int) -> Subarea:
    return Subarea(
        area_id=area_id,
        code=remote.code,
        name=remote.name,
        created_at=_record_timestamp(remote.created_at, "created_at"),
    )


# ==================== Unit ====================

def unit_to_remote(unit: Unit, subarea_remote_id: str, remote_id: str) -> RemoteUnit:
    return RemoteUnit(
        id=remote_id,
        subarea_id=subarea_remote_id,
        code=unit.code,
        head_name=unit.head_name,
        location_text=unit.location_text,
        latitude=unit.latitude,
        longitude=unit.longitude,
        created_at=to_wire_timestamp(unit.created_at),
        updated_at=to_wire_timestamp(unit.updated_at),
    )


def remote_to_unit(remote: RemoteUnit, subarea_id: int) -> Unit:
    return Unit(
        subarea_id=subarea_id,
        code=remote.code,
        head_name=remote.head_name,
        location_text=remote.location_text,
        latitude=remote.latitude,
        longitude=remote.longitude,
        created_at=_record_timestamp(remote.created_at, "created_at"),
        updated_at=_record_timestamp(remote.updated_at, "updated_at"),
    )


# ==================== Member ====================

def member_to_remote(
    member: Member,
    unit_remote_id: str,
    subarea_remote_id: str,
    area_remote_id: str,
    remote_id: str,
    device_id: str,
    synced_at: str,
    photo_url: Optional[str] = None,
    fingerprint_url: Optional[str] = None
) -> RemoteMember:
    """
    Build the remote row for a member.

    Attachment bytes never travel in the row; only locators obtained from
    the media store (or already present remotely) are carried.
    """
    return RemoteMember(
        id=remote_id,
        member_code=member.member_code,
        unit_id=unit_remote_id,
        subarea_id=subarea_remote_id,
        area_id=area_remote_id,
        first_name=member.first_name,
        last_name=member.last_name,
        other_names=member.other_names,
        sex=member.sex,
        date_of_birth=to_isoformat(member.date_of_birth),
        age=member.age,
        phone_number=member.phone_number,
        occupation=member.occupation,
        disability_status=member.disability_status,
        disability_notes=member.disability_notes,
        photo_url=photo_url,
        fingerprint_url=fingerprint_url,
        consent_given=member.consent_given,
        consent_date=to_wire_timestamp(member.consent_date),
        recorder_name=member.recorder_name,
        notes=member.notes,
        created_at=to_wire_timestamp(member.created_at),
        updated_at=to_wire_timestamp(member.updated_at),
        synced_at=synced_at,
        device_id=device_id,
    )


def remote_to_member(remote: RemoteMember, unit_id: int, subarea_id: int, area_id: int) -> Member:
    """Local member without attachments; the caller fills photo/fingerprint."""
    return Member(
        member_code=remote.member_code,
        unit_id=unit_id,
        subarea_id=subarea_id,
        area_id=area_id,
        first_name=remote.first_name,
        last_name=remote.last_name,
        other_names=remote.other_names,
        sex=remote.sex,
        date_of_birth=date_from_isoformat(remote.date_of_birth),
        age=remote.age,
        phone_number=remote.phone_number,
        occupation=remote.occupation,
        disability_status=remote.disability_status or "none",
        disability_notes=remote.disability_notes,
        notes=remote.notes,
        consent_given=bool(remote.consent_given),
        consent_date=_timestamp(remote.consent_date, "consent_date"),
        recorder_name=remote.recorder_name,
        created_at=_record_timestamp(remote.created_at, "created_at"),
        updated_at=_record_timestamp(remote.updated_at, "updated_at"),
    )
