# -*- coding: utf-8 -*-
"""
Unit entity model (household-equivalent unit within a subarea).
"""

from dataclasses import dataclass, field
from typing import Optional
from datetime import datetime


@dataclass
class Unit:
    """
    Unit entity linked to a Subarea.

    Location is optional: either free text, coordinates, or both.
    """

    id: Optional[int] = None
    subarea_id: Optional[int] = None  # FK to Subarea (local id)
    code: str = ""
    head_name: str = ""

    # Location (optional)
    location_text: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    # Metadata
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def natural_key(self) -> str:
        return self.code

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def validate(self) -> list:
        """
        Validate unit data.
        Returns list of error messages (empty if valid).
        """
        errors = []

        if not (self.code or "").strip():
            errors.append("Unit code is required")
        if not (self.head_name or "").strip():
            errors.append("Head name is required")
        if self.subarea_id is None:
            errors.append("Parent subarea is required")

        if self.latitude is not None and not -90 <= self.latitude <= 90:
            errors.append(f"Latitude out of range: {self.latitude}")
        if self.longitude is not None and not -180 <= self.longitude <= 180:
            errors.append(f"Longitude out of range: {self.longitude}")

        return errors
