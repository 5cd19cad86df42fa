# -*- coding: utf-8 -*-
"""
Member entity model (individual person record).
"""

from dataclasses import dataclass, field
from typing import Optional
from datetime import datetime, date


SEX_VALUES = ("male", "female")

DISABILITY_STATUSES = (
    "none",
    "visual",
    "hearing",
    "physical",
    "intellectual",
    "multiple",
    "other",
)


@dataclass
class Member:
    """
    Member entity representing one registered individual.

    member_code format: AREA-SUBAREA-NNNNNN (e.g. W01-V01-000001).
    The three ancestry references must agree: the unit belongs to the
    subarea and the subarea to the area.
    """

    # Identifiers
    id: Optional[int] = None
    member_code: str = ""

    # Ancestry (local ids)
    unit_id: Optional[int] = None
    subarea_id: Optional[int] = None
    area_id: Optional[int] = None

    # Personal details
    first_name: str = ""
    last_name: str = ""
    other_names: Optional[str] = None
    sex: str = "male"  # male, female
    date_of_birth: Optional[date] = None
    age: Optional[int] = None  # Estimated age when birth date is unknown
    phone_number: Optional[str] = None

    # Classification
    occupation: Optional[str] = None
    disability_status: str = "none"
    disability_notes: Optional[str] = None

    # Attachments (raw bytes)
    photo: Optional[bytes] = None
    fingerprint: Optional[bytes] = None

    notes: Optional[str] = None

    # Consent
    consent_given: bool = False
    consent_date: Optional[datetime] = None
    recorder_name: Optional[str] = None

    # Metadata
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def natural_key(self) -> str:
        return self.member_code

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.other_names, self.last_name]
        return " ".join(p for p in parts if p)

    def validate(self) -> list:
        """
        Validate the fields the remote store requires.
        Returns list of error messages (empty if valid).
        """
        errors = []

        if not (self.member_code or "").strip():
            errors.append("Member code is required")
        if not (self.first_name or "").strip():
            errors.append("First name is required")
        if not (self.last_name or "").strip():
            errors.append("Last name is required")
        if self.sex not in SEX_VALUES:
            errors.append("Sex must be 'male' or 'female'")
        if self.disability_status not in DISABILITY_STATUSES:
            errors.append(f"Invalid disability status: {self.disability_status}")
        if self.unit_id is None or self.subarea_id is None or self.area_id is None:
            errors.append("Unit, subarea and area are required")

        return errors
