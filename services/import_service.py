# -*- coding: utf-8 -*-
"""
CSV import of member records.

Rows are normalized (column aliases, sex and disability values), then the
whole batch is validated and screened for duplicates against the members
already stored before any row is inserted. Rows are not compared with
each other.
"""

import csv
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from app.config import Config
from models.member import Member, DISABILITY_STATUSES
from repositories.database import Database
from repositories.area_repository import AreaRepository
from repositories.subarea_repository import SubareaRepository
from repositories.unit_repository import UnitRepository
from repositories.member_repository import MemberRepository
from services.duplicate_service import DuplicateDetector, DuplicateMatch
from services.exceptions import ValidationException
from services.validation_service import FieldError, validate_member_data
from utils.logger import get_logger

logger = get_logger(__name__)


# CSV header (lower-cased, trimmed) -> Member attribute
COLUMN_MAPPINGS = {
    "first name": "first_name",
    "firstname": "first_name",
    "first_name": "first_name",
    "last name": "last_name",
    "lastname": "last_name",
    "last_name": "last_name",
    "other names": "other_names",
    "othernames": "other_names",
    "other_names": "other_names",
    "middle name": "other_names",
    "sex": "sex",
    "gender": "sex",
    "date of birth": "date_of_birth",
    "dateofbirth": "date_of_birth",
    "date_of_birth": "date_of_birth",
    "dob": "date_of_birth",
    "birth date": "date_of_birth",
    "age": "age",
    "phone": "phone_number",
    "phone number": "phone_number",
    "phonenumber": "phone_number",
    "phone_number": "phone_number",
    "mobile": "phone_number",
    "telephone": "phone_number",
    "occupation": "occupation",
    "job": "occupation",
    "work": "occupation",
    "disability": "disability_status",
    "disability status": "disability_status",
    "disability_status": "disability_status",
    "notes": "notes",
    "comments": "notes",
    "remarks": "notes",
}

_TEXT_FIELDS = ("first_name", "last_name", "other_names", "phone_number", "occupation", "notes")

_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%Y/%m/%d", "%d-%m-%Y")


def _parse_date(value: str) -> Optional[date]:
    value = (value or "").strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def normalize_member_row(row: Dict[str, str]) -> Dict[str, Any]:
    """
    Map a raw CSV row onto Member attribute names.

    Unknown columns are dropped, empty text becomes None, "m"/"f" become
    "male"/"female", unparseable ages and dates are left out and an
    unrecognized disability value becomes "none".
    """
    normalized: Dict[str, Any] = {}

    for key, value in row.items():
        if key is None:
            continue
        mapped = COLUMN_MAPPINGS.get(key.lower().strip())
        if mapped is None:
            continue
        value = value if isinstance(value, str) else ""

        if mapped in _TEXT_FIELDS:
            normalized[mapped] = value.strip() or None
        elif mapped == "sex":
            sex = value.lower().strip()
            if sex in ("m", "male"):
                normalized["sex"] = "male"
            elif sex in ("f", "female"):
                normalized["sex"] = "female"
        elif mapped == "age":
            try:
                normalized["age"] = int(value.strip())
            except ValueError:
                pass
        elif mapped == "date_of_birth":
            dob = _parse_date(value)
            if dob is not None:
                normalized["date_of_birth"] = dob
        elif mapped == "disability_status":
            status = value.lower().strip()
            normalized["disability_status"] = status if status in DISABILITY_STATUSES else "none"

    return normalized


@dataclass
class RowDuplicates:
    """Duplicate matches found for one import row."""
    row: int
    matches: List[DuplicateMatch]


@dataclass
class BatchValidation:
    """Outcome of screening a batch; `valid` holds (row number, data) pairs."""
    valid: List[Tuple[int, Dict[str, Any]]] = field(default_factory=list)
    errors: List[FieldError] = field(default_factory=list)
    duplicates: List[RowDuplicates] = field(default_factory=list)

    def duplicate_rows(self) -> set:
        return {d.row for d in self.duplicates}


def validate_import_batch(
    records: List[Dict[str, Any]],
    detector: Optional[DuplicateDetector] = None,
    template: Optional[Member] = None,
    threshold: Optional[float] = None
) -> BatchValidation:
    """
    Validate every row and screen valid rows for duplicates.

    Args:
        records: Normalized rows
        detector: Duplicate detector over stored members; None skips screening
        template: Member carrying the ancestry ids the rows will receive
        threshold: Duplicate threshold; defaults to Config.BATCH_DUPLICATE_THRESHOLD
    """
    if threshold is None:
        threshold = Config.BATCH_DUPLICATE_THRESHOLD

    batch = BatchValidation()
    for index, record in enumerate(records):
        row_number = index + 1

        errors = validate_member_data(record, row_number)
        if errors:
            batch.errors.extend(errors)
            continue

        if detector is not None:
            candidate = _build_member(record, template)
            matches = detector.find_duplicates(candidate, threshold)
            if matches:
                batch.duplicates.append(RowDuplicates(row_number, matches))

        batch.valid.append((row_number, record))

    return batch


def _build_member(data: Dict[str, Any], template: Optional[Member] = None) -> Member:
    member = Member(**{k: v for k, v in data.items() if k in Member.__dataclass_fields__})
    if template is not None:
        member.unit_id = template.unit_id
        member.subarea_id = template.subarea_id
        member.area_id = template.area_id
    return member


@dataclass
class ImportResult:
    """Result of an import operation."""
    total_records: int = 0
    imported: int = 0
    skipped_duplicates: int = 0
    errors: List[FieldError] = field(default_factory=list)
    duplicates: List[RowDuplicates] = field(default_factory=list)
    member_codes: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return len(self.errors) == 0


class ImportService:
    """Imports member rows into one unit."""

    def __init__(self, db: Database):
        self.db = db
        self.area_repo = AreaRepository(db)
        self.subarea_repo = SubareaRepository(db)
        self.unit_repo = UnitRepository(db)
        self.member_repo = MemberRepository(db)
        self.detector = DuplicateDetector(self.member_repo)

    def read_csv(self, file_path: Path) -> List[Dict[str, Any]]:
        """Read and normalize all rows of a CSV file."""
        with open(file_path, newline="", encoding="utf-8-sig") as f:
            return [normalize_member_row(row) for row in csv.DictReader(f)]

    def import_csv(self, file_path: Path, unit_code: str, **kwargs) -> ImportResult:
        records = self.read_csv(Path(file_path))
        logger.info(f"Read {len(records)} rows from {file_path}")
        return self.import_records(records, unit_code, **kwargs)

    def import_records(
        self,
        records: List[Dict[str, Any]],
        unit_code: str,
        skip_duplicate_check: bool = False,
        include_duplicates: bool = False
    ) -> ImportResult:
        """
        Validate, screen and insert normalized rows under one unit.

        Rows flagged as probable duplicates are not inserted unless
        include_duplicates is set.

        Raises:
            ValidationException: the unit (or its ancestry) does not exist
        """
        unit = self.unit_repo.get_by_natural_key(unit_code)
        if unit is None:
            raise ValidationException(f"Unit not found: {unit_code}", field="unit")
        subarea = self.subarea_repo.get_by_id(unit.subarea_id)
        area = self.area_repo.get_by_id(subarea.area_id) if subarea else None
        if subarea is None or area is None:
            raise ValidationException(f"Unit {unit_code} has no complete ancestry", field="unit")

        template = Member(unit_id=unit.id, subarea_id=subarea.id, area_id=area.id)
        batch = validate_import_batch(
            records,
            detector=None if skip_duplicate_check else self.detector,
            template=template,
        )

        result = ImportResult(
            total_records=len(records),
            errors=batch.errors,
            duplicates=batch.duplicates,
        )
        duplicate_rows = batch.duplicate_rows()

        for row_number, data in batch.valid:
            if row_number in duplicate_rows and not include_duplicates:
                result.skipped_duplicates += 1
                continue
            member = _build_member(data, template)
            member.member_code = self.member_repo.generate_member_code(
                area.code, subarea.code, Config.MEMBER_CODE_PADDING
            )
            now = datetime.now()
            member.created_at = now
            member.updated_at = now
            self.member_repo.insert(member)
            result.member_codes.append(member.member_code)
            result.imported += 1

        logger.info(
            f"Import into {unit_code}: {result.imported} imported, "
            f"{result.skipped_duplicates} duplicates skipped, {len(result.errors)} errors"
        )
        return result
