# -*- coding: utf-8 -*-
"""
Tests for member validation and CSV import.
"""
from datetime import date, timedelta

import pytest

from models.member import Member
from services.duplicate_service import DuplicateDetector
from services.exceptions import ValidationException
from services.import_service import (
    ImportService, normalize_member_row, validate_import_batch
)
from services.validation_service import validate_member_data

from fakes import InMemoryEntityStore


class TestNormalizeMemberRow:

    def test_column_aliases(self):
        row = {
            "First Name": " Jane ", "LASTNAME": "Doe", "Gender": "F",
            "DOB": "1990-05-01", "Mobile": "555 1234", "Job": "Farmer",
            "Remarks": "", "favourite colour": "blue",
        }

        data = normalize_member_row(row)

        assert data == {
            "first_name": "Jane", "last_name": "Doe", "sex": "female",
            "date_of_birth": date(1990, 5, 1), "phone_number": "555 1234",
            "occupation": "Farmer", "notes": None,
        }

    def test_unknown_sex_left_out(self):
        assert "sex" not in normalize_member_row({"sex": "unknown"})

    def test_age_and_disability(self):
        data = normalize_member_row({"age": "42", "disability": "Hearing"})
        assert data == {"age": 42, "disability_status": "hearing"}

        data = normalize_member_row({"age": "forty", "disability status": "bad knee"})
        assert data == {"disability_status": "none"}

    def test_day_first_dates(self):
        assert normalize_member_row({"birth date": "03/02/1985"})["date_of_birth"] == date(1985, 2, 3)


class TestValidateMemberData:

    def test_valid(self):
        assert validate_member_data({"first_name": "A", "last_name": "B", "sex": "male"}) == []

    def test_required_fields(self):
        errors = validate_member_data({}, row_number=3)

        assert [e.field for e in errors] == ["first_name", "last_name", "sex"]
        assert str(errors[0]) == "Row 3: First name is required"

    def test_phone_age_birth_date_disability(self):
        errors = validate_member_data({
            "first_name": "A", "last_name": "B", "sex": "female",
            "phone_number": "call me", "age": 151,
            "date_of_birth": date.today() + timedelta(days=1),
            "disability_status": "tired",
        })

        assert [e.field for e in errors] == [
            "phone_number", "age", "date_of_birth", "disability_status"
        ]

    def test_phone_formats(self):
        base = {"first_name": "A", "last_name": "B", "sex": "male"}
        assert validate_member_data(dict(base, phone_number="+675 (555) 12")) == []
        assert validate_member_data(dict(base, phone_number="123456")) != []


class TestValidateImportBatch:

    def test_invalid_rows_reported_and_excluded(self):
        records = [
            {"first_name": "A", "last_name": "B", "sex": "male"},
            {"first_name": "", "last_name": "B", "sex": "male"},
        ]

        batch = validate_import_batch(records)

        assert [row for row, _ in batch.valid] == [1]
        assert [e.row for e in batch.errors] == [2]

    def test_screens_against_stored_members_only(self):
        store = InMemoryEntityStore()
        store.insert(Member(id=1, member_code="C1", first_name="John", last_name="Smith",
                            phone_number="5550001"))
        records = [
            {"first_name": "John", "last_name": "Smith", "sex": "male", "phone_number": "5550001"},
            {"first_name": "Peter", "last_name": "Wena", "sex": "male", "phone_number": "5559999"},
            {"first_name": "Peter", "last_name": "Wena", "sex": "male", "phone_number": "5559999"},
        ]

        batch = validate_import_batch(records, detector=DuplicateDetector(store))

        # Rows 2 and 3 are identical but are not compared with each other
        assert [d.row for d in batch.duplicates] == [1]
        assert len(batch.valid) == 3


@pytest.fixture
def import_service(db, seeded):
    return ImportService(db)


class TestImportService:

    def test_imports_rows_with_generated_codes(self, import_service, local_stores):
        result = import_service.import_records([
            {"first_name": "Tom", "last_name": "Kaua", "sex": "male"},
            {"first_name": "Lisa", "last_name": "Mare", "sex": "female", "age": 30},
        ], "H001")

        assert result.imported == 2
        assert result.member_codes == ["W01-V01-000002", "W01-V01-000003"]
        stored = local_stores.members.get_by_natural_key("W01-V01-000003")
        assert stored.age == 30
        assert stored.unit_id == 1 and stored.subarea_id == 1 and stored.area_id == 1

    def test_duplicate_rows_skipped_by_default(self, import_service, local_stores):
        rows = [{"first_name": "Jane", "last_name": "Doe", "sex": "female", "phone_number": "5551234"}]

        result = import_service.import_records(rows, "H001")

        assert result.imported == 0
        assert result.skipped_duplicates == 1
        assert result.duplicates[0].matches[0].member.member_code == "W01-V01-000001"
        assert local_stores.members.count() == 1

    def test_include_duplicates(self, import_service, local_stores):
        rows = [{"first_name": "Jane", "last_name": "Doe", "sex": "female", "phone_number": "5551234"}]

        result = import_service.import_records(rows, "H001", include_duplicates=True)

        assert result.imported == 1
        assert local_stores.members.count() == 2

    def test_nothing_inserted_for_invalid_rows(self, import_service, local_stores):
        result = import_service.import_records([{"first_name": "No", "sex": "male"}], "H001")

        assert not result.success
        assert result.imported == 0
        assert local_stores.members.count() == 1

    def test_unknown_unit(self, import_service):
        with pytest.raises(ValidationException):
            import_service.import_records([], "H999")

    def test_import_csv_file(self, import_service, tmp_path):
        csv_file = tmp_path / "members.csv"
        csv_file.write_text(
            "First Name,Last Name,Gender,Phone\n"
            "Tom,Kaua,M,555 7788\n"
            "Rita,,F,\n",
            encoding="utf-8",
        )

        result = import_service.import_csv(csv_file, "H001")

        assert result.total_records == 2
        assert result.imported == 1
        assert [e.field for e in result.errors] == ["last_name"]
