# -*- coding: utf-8 -*-
"""
Member data validation for intake and CSV import.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from models.member import SEX_VALUES, DISABILITY_STATUSES


PHONE_PATTERN = re.compile(r"^[\d\s\-+()]{7,15}$")

MIN_AGE = 0
MAX_AGE = 150


@dataclass
class FieldError:
    """One validation failure, optionally tied to an import row (1-based)."""
    field: str
    message: str
    row: Optional[int] = None

    def __str__(self):
        if self.row is not None:
            return f"Row {self.row}: {self.message}"
        return self.message


def validate_member_data(data: Dict[str, Any], row_number: Optional[int] = None) -> List[FieldError]:
    """
    Validate normalized member fields.

    Args:
        data: Member fields keyed by model attribute name
        row_number: Import row, copied into each error

    Returns:
        List of FieldError (empty if valid)
    """
    errors = []

    if not (data.get("first_name") or "").strip():
        errors.append(FieldError("first_name", "First name is required", row_number))
    if not (data.get("last_name") or "").strip():
        errors.append(FieldError("last_name", "Last name is required", row_number))
    if data.get("sex") not in SEX_VALUES:
        errors.append(FieldError("sex", "Sex must be 'male' or 'female'", row_number))

    phone = data.get("phone_number")
    if phone and not PHONE_PATTERN.match(phone):
        errors.append(FieldError("phone_number", "Invalid phone number format", row_number))

    age = data.get("age")
    if age is not None and not MIN_AGE <= age <= MAX_AGE:
        errors.append(FieldError("age", f"Age must be between {MIN_AGE} and {MAX_AGE}", row_number))

    dob = data.get("date_of_birth")
    if isinstance(dob, datetime):
        dob = dob.date()
    if dob is not None and dob > date.today():
        errors.append(FieldError("date_of_birth", "Date of birth cannot be in the future", row_number))

    status = data.get("disability_status")
    if status and status not in DISABILITY_STATUSES:
        errors.append(FieldError("disability_status", "Invalid disability status", row_number))

    return errors
