# -*- coding: utf-8 -*-
"""
Unit repository for database operations.
"""

from typing import List, Optional

from models.unit import Unit
from services.stores import EntityStore
from utils.datetime_utils import to_isoformat, from_isoformat
from .database import Database
from utils.logger import get_logger

logger = get_logger(__name__)


class UnitRepository(EntityStore[Unit]):
    """Repository for Unit records."""

    def __init__(self, db: Database):
        self.db = db

    def insert(self, unit: Unit) -> int:
        """Insert a new unit and return its local id."""
        query = """
            INSERT INTO units (
                subarea_id, code, head_name, location_text,
                latitude, longitude, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """
        params = (
            unit.subarea_id, unit.code, unit.head_name, unit.location_text,
            unit.latitude, unit.longitude,
            to_isoformat(unit.created_at), to_isoformat(unit.updated_at)
        )
        unit.id = self.db.insert(query, params)
        logger.debug(f"Created unit: {unit.code} (id={unit.id})")
        return unit.id

    def update(self, unit_id: int, unit: Unit) -> None:
        """Replace all fields of an existing unit (timestamps are stored as given)."""
        query = """
            UPDATE units SET
                subarea_id = ?, code = ?, head_name = ?, location_text = ?,
                latitude = ?, longitude = ?, created_at = ?, updated_at = ?
            WHERE id = ?
        """
        params = (
            unit.subarea_id, unit.code, unit.head_name, unit.location_text,
            unit.latitude, unit.longitude,
            to_isoformat(unit.created_at), to_isoformat(unit.updated_at),
            unit_id
        )
        self.db.execute(query, params)
        unit.id = unit_id
        logger.debug(f"Updated unit: {unit.code} (id={unit_id})")

    def get_by_id(self, unit_id: int) -> Optional[Unit]:
        row = self.db.fetch_one("SELECT * FROM units WHERE id = ?", (unit_id,))
        return self._row_to_unit(row) if row else None

    def get_by_natural_key(self, code: str) -> Optional[Unit]:
        """Get unit by code."""
        row = self.db.fetch_one("SELECT * FROM units WHERE code = ?", (code,))
        return self._row_to_unit(row) if row else None

    def get_by_subarea(self, subarea_id: int) -> List[Unit]:
        rows = self.db.fetch_all(
            "SELECT * FROM units WHERE subarea_id = ? ORDER BY id", (subarea_id,)
        )
        return [self._row_to_unit(row) for row in rows]

    def list(self) -> List[Unit]:
        rows = self.db.fetch_all("SELECT * FROM units ORDER BY id")
        return [self._row_to_unit(row) for row in rows]

    def count(self) -> int:
        result = self.db.fetch_one("SELECT COUNT(*) as count FROM units")
        return result["count"] if result else 0

    def _row_to_unit(self, row) -> Unit:
        """Convert database row to Unit object."""
        return Unit(
            id=row["id"],
            subarea_id=row["subarea_id"],
            code=row["code"],
            head_name=row["head_name"],
            location_text=row["location_text"],
            latitude=row["latitude"],
            longitude=row["longitude"],
            created_at=from_isoformat(row["created_at"]),
            updated_at=from_isoformat(row["updated_at"]),
        )
