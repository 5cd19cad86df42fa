# -*- coding: utf-8 -*-
"""
Area entity model (top tier of the administrative hierarchy).
"""

from dataclasses import dataclass, field
from typing import Optional
from datetime import datetime


@dataclass
class Area:
    """
    Administrative area captured on the device.

    `id` is assigned by the local store on insert; `code` is the
    human-assigned natural key shared with the remote store.
    """

    id: Optional[int] = None
    code: str = ""
    name: str = ""
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def natural_key(self) -> str:
        return self.code

    def validate(self) -> list:
        """
        Validate area data.
        Returns list of error messages (empty if valid).
        """
        errors = []
        if not (self.code or "").strip():
            errors.append("Area code is required")
        if not (self.name or "").strip():
            errors.append("Area name is required")
        return errors
