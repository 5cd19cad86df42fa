# -*- coding: utf-8 -*-
"""
Area repository for database operations.
"""

from typing import List, Optional

from models.area import Area
from services.stores import EntityStore
from utils.datetime_utils import to_isoformat, from_isoformat
from .database import Database
from utils.logger import get_logger

logger = get_logger(__name__)


class AreaRepository(EntityStore[Area]):
    """Repository for Area records."""

    def __init__(self, db: Database):
        self.db = db

    def insert(self, area: Area) -> int:
        """Insert a new area and return its local id."""
        query = """
            INSERT INTO areas (code, name, created_at)
            VALUES (?, ?, ?)
        """
        area.id = self.db.insert(query, (area.code, area.name, to_isoformat(area.created_at)))
        logger.debug(f"Created area: {area.code} (id={area.id})")
        return area.id

    def update(self, area_id: int, area: Area) -> None:
        """Replace the fields of an existing area."""
        query = "UPDATE areas SET code = ?, name = ?, created_at = ? WHERE id = ?"
        self.db.execute(query, (area.code, area.name, to_isoformat(area.created_at), area_id))
        area.id = area_id
        logger.debug(f"Updated area: {area.code} (id={area_id})")

    def get_by_id(self, area_id: int) -> Optional[Area]:
        row = self.db.fetch_one("SELECT * FROM areas WHERE id = ?", (area_id,))
        return self._row_to_area(row) if row else None

    def get_by_natural_key(self, code: str) -> Optional[Area]:
        """Get area by code."""
        row = self.db.fetch_one("SELECT * FROM areas WHERE code = ?", (code,))
        return self._row_to_area(row) if row else None

    def list(self) -> List[Area]:
        """All areas in insertion order."""
        rows = self.db.fetch_all("SELECT * FROM areas ORDER BY id")
        return [self._row_to_area(row) for row in rows]

    def count(self) -> int:
        result = self.db.fetch_one("SELECT COUNT(*) as count FROM areas")
        return result["count"] if result else 0

    def _row_to_area(self, row) -> Area:
        """Convert database row to Area object."""
        return Area(
            id=row["id"],
            code=row["code"],
            name=row["name"],
            created_at=from_isoformat(row["created_at"]),
        )
