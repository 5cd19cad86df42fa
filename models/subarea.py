# -*- coding: utf-8 -*-
"""
Subarea entity model.
"""

from dataclasses import dataclass, field
from typing import Optional
from datetime import datetime


@dataclass
class Subarea:
    """Sub-area (locality) belonging to exactly one Area."""

    id: Optional[int] = None
    area_id: Optional[int] = None  # FK to Area (local id)
    code: str = ""
    name: str = ""
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def natural_key(self) -> str:
        return self.code

    def validate(self) -> list:
        """Returns list of error messages (empty if valid)."""
        errors = []
        if not (self.code or "").strip():
            errors.append("Subarea code is required")
        if not (self.name or "").strip():
            errors.append("Subarea name is required")
        if self.area_id is None:
            errors.append("Parent area is required")
        return errors
