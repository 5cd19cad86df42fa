# -*- coding: utf-8 -*-
"""
Member repository for database operations.
"""

from typing import List, Optional

from models.member import Member
from services.stores import EntityStore
from utils.datetime_utils import to_isoformat, from_isoformat, date_from_isoformat
from .database import Database
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = (
    "member_code", "unit_id", "subarea_id", "area_id",
    "first_name", "last_name", "other_names", "sex", "date_of_birth", "age",
    "phone_number", "occupation", "disability_status", "disability_notes",
    "photo", "fingerprint", "notes",
    "consent_given", "consent_date", "recorder_name",
    "created_at", "updated_at",
)


class MemberRepository(EntityStore[Member]):
    """Repository for Member CRUD operations."""

    def __init__(self, db: Database):
        self.db = db

    def insert(self, member: Member) -> int:
        """Insert a new member record and return its local id."""
        placeholders = ", ".join("?" for _ in _COLUMNS)
        query = f"INSERT INTO members ({', '.join(_COLUMNS)}) VALUES ({placeholders})"
        member.id = self.db.insert(query, self._to_params(member))
        logger.debug(f"Created member: {member.member_code} (id={member.id})")
        return member.id

    def update(self, member_id: int, member: Member) -> None:
        """Replace all fields of an existing member, attachments included."""
        assignments = ", ".join(f"{col} = ?" for col in _COLUMNS)
        query = f"UPDATE members SET {assignments} WHERE id = ?"
        self.db.execute(query, self._to_params(member) + (member_id,))
        member.id = member_id
        logger.debug(f"Updated member: {member.member_code} (id={member_id})")

    def get_by_id(self, member_id: int) -> Optional[Member]:
        row = self.db.fetch_one("SELECT * FROM members WHERE id = ?", (member_id,))
        return self._row_to_member(row) if row else None

    def get_by_natural_key(self, code: str) -> Optional[Member]:
        """Get member by member code."""
        row = self.db.fetch_one("SELECT * FROM members WHERE member_code = ?", (code,))
        return self._row_to_member(row) if row else None

    def get_by_unit(self, unit_id: int) -> List[Member]:
        rows = self.db.fetch_all(
            "SELECT * FROM members WHERE unit_id = ? ORDER BY id", (unit_id,)
        )
        return [self._row_to_member(row) for row in rows]

    def list(self) -> List[Member]:
        rows = self.db.fetch_all("SELECT * FROM members ORDER BY id")
        return [self._row_to_member(row) for row in rows]

    def count(self) -> int:
        result = self.db.fetch_one("SELECT COUNT(*) as count FROM members")
        return result["count"] if result else 0

    def generate_member_code(self, area_code: str, subarea_code: str, padding: int = 6) -> str:
        """
        Next member code for a subarea: AREA-SUBAREA-NNNNNN.

        The sequence starts at the current member count + 1 and is advanced
        past any code already taken.
        """
        sequence = self.count() + 1
        while True:
            code = f"{area_code}-{subarea_code}-{str(sequence).zfill(padding)}"
            if self.get_by_natural_key(code) is None:
                return code
            sequence += 1

    def _to_params(self, member: Member) -> tuple:
        return (
            member.member_code, member.unit_id, member.subarea_id, member.area_id,
            member.first_name, member.last_name, member.other_names, member.sex,
            to_isoformat(member.date_of_birth), member.age,
            member.phone_number, member.occupation,
            member.disability_status, member.disability_notes,
            member.photo, member.fingerprint, member.notes,
            1 if member.consent_given else 0,
            to_isoformat(member.consent_date), member.recorder_name,
            to_isoformat(member.created_at), to_isoformat(member.updated_at),
        )

    def _row_to_member(self, row) -> Member:
        """Convert database row to Member object."""
        data = dict(row)

        data["consent_given"] = bool(data.get("consent_given", 0))
        data["date_of_birth"] = date_from_isoformat(data.get("date_of_birth"))
        for field in ["consent_date", "created_at", "updated_at"]:
            data[field] = from_isoformat(data.get(field))
        for field in ["photo", "fingerprint"]:
            if data.get(field) is not None:
                data[field] = bytes(data[field])

        return Member(**{k: v for k, v in data.items() if k in Member.__dataclass_fields__})
