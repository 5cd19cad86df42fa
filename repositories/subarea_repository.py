# -*- coding: utf-8 -*-
"""
Subarea repository for database operations.
"""

from typing import List, Optional

from models.subarea import Subarea
from services.stores import EntityStore
from utils.datetime_utils import to_isoformat, from_isoformat
from .database import Database
from utils.logger import get_logger

logger = get_logger(__name__)


class SubareaRepository(EntityStore[Subarea]):
    """Repository for Subarea records."""

    def __init__(self, db: Database):
        self.db = db

    def insert(self, subarea: Subarea) -> int:
        query = """
            INSERT INTO subareas (area_id, code, name, created_at)
            VALUES (?, ?, ?, ?)
        """
        params = (subarea.area_id, subarea.code, subarea.name, to_isoformat(subarea.created_at))
        subarea.id = self.db.insert(query, params)
        logger.debug(f"Created subarea: {subarea.code} (id={subarea.id})")
        return subarea.id

    def update(self, subarea_id: int, subarea: Subarea) -> None:
        query = """
            UPDATE subareas SET area_id = ?, code = ?, name = ?, created_at = ?
            WHERE id = ?
        """
        params = (
            subarea.area_id, subarea.code, subarea.name,
            to_isoformat(subarea.created_at), subarea_id
        )
        self.db.execute(query, params)
        subarea.id = subarea_id
        logger.debug(f"Updated subarea: {subarea.code} (id={subarea_id})")

    def get_by_id(self, subarea_id: int) -> Optional[Subarea]:
        row = self.db.fetch_one("SELECT * FROM subareas WHERE id = ?", (subarea_id,))
        return self._row_to_subarea(row) if row else None

    def get_by_natural_key(self, code: str) -> Optional[Subarea]:
        row = self.db.fetch_one("SELECT * FROM subareas WHERE code = ?", (code,))
        return self._row_to_subarea(row) if row else None

    def get_by_area(self, area_id: int) -> List[Subarea]:
        rows = self.db.fetch_all(
            "SELECT * FROM subareas WHERE area_id = ? ORDER BY id", (area_id,)
        )
        return [self._row_to_subarea(row) for row in rows]

    def list(self) -> List[Subarea]:
        rows = self.db.fetch_all("SELECT * FROM subareas ORDER BY id")
        return [self._row_to_subarea(row) for row in rows]

    def count(self) -> int:
        result = self.db.fetch_one("SELECT COUNT(*) as count FROM subareas")
        return result["count"] if result else 0

    def _row_to_subarea(self, row) -> Subarea:
        return Subarea(
            id=row["id"],
            area_id=row["area_id"],
            code=row["code"],
            name=row["name"],
            created_at=from_isoformat(row["created_at"]),
        )
