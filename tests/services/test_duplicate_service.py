# -*- coding: utf-8 -*-
"""
Tests for fuzzy duplicate detection.
"""
from datetime import date

import pytest

from models.member import Member
from services.duplicate_service import DuplicateDetector, levenshtein_ratio

from fakes import InMemoryEntityStore


def _member(code, first, last, **kwargs):
    return Member(id=code, member_code=code, first_name=first, last_name=last, **kwargs)


@pytest.fixture
def member_store():
    return InMemoryEntityStore()


@pytest.fixture
def detector(member_store):
    return DuplicateDetector(member_store)


class TestLevenshteinRatio:

    def test_identical_ignoring_case_and_spaces(self):
        assert levenshtein_ratio("  Smith ", "smith") == 1.0

    def test_one_missing_letter(self):
        assert levenshtein_ratio("Jon", "John") == pytest.approx(6 / 7)

    def test_empty_strings(self):
        assert levenshtein_ratio("", "John") == 0.0
        assert levenshtein_ratio(None, None) == 0.0

    def test_unrelated(self):
        assert levenshtein_ratio("abc", "xyz") == 0.0


class TestFindDuplicates:

    def test_same_names_and_phone_score_one(self, member_store, detector):
        member_store.insert(_member("C1", "Mary", "Kila", phone_number="555-0001"))

        matches = detector.find_duplicates(
            Member(first_name="mary", last_name="Kila", phone_number="5550001"), 0.6
        )

        assert len(matches) == 1
        assert matches[0].match_score == pytest.approx(1.0)
        assert matches[0].match_reasons == [
            "First name similar (100%)", "Last name similar (100%)", "Same phone number"
        ]

    def test_fuzzy_first_name(self, member_store, detector):
        member_store.insert(_member("C1", "John", "Smith", phone_number="555-0001"))

        matches = detector.find_duplicates(Member(first_name="Jon", last_name="Smith"), 0.6)

        assert len(matches) == 1
        assert matches[0].match_reasons == ["First name similar (86%)", "Last name similar (100%)"]
        assert matches[0].match_score == pytest.approx((6 / 7 + 1.0) / 2)

    @pytest.mark.parametrize("threshold", [0.0, 0.3, 0.6])
    def test_single_weak_signal_never_matches(self, member_store, detector, threshold):
        member_store.insert(_member("C1", "Anna", "Pato", subarea_id=4))

        matches = detector.find_duplicates(
            Member(first_name="Peter", last_name="Wena", subarea_id=4), threshold
        )

        assert matches == []

    def test_location_signals_lower_the_score(self, member_store, detector):
        member_store.insert(_member("C1", "Anna", "Pato", unit_id=9, subarea_id=4))

        candidate = Member(first_name="Anna", last_name="Pato", unit_id=9, subarea_id=4)
        score, reasons = detector.score(candidate, member_store.get_by_natural_key("C1"))

        assert reasons[-2:] == ["Same unit", "Same subarea"]
        assert score == pytest.approx((1.0 + 1.0 + 0.5 + 0.3) / 4)

    def test_below_threshold_not_reported(self, member_store, detector):
        member_store.insert(_member("C1", "Anna", "Pato", unit_id=9, subarea_id=4))

        # Only the two weak signals plus nothing else: 0.4 average
        matches = detector.find_duplicates(
            Member(first_name="Zed", last_name="Quon", unit_id=9, subarea_id=4), 0.6
        )

        assert matches == []

    def test_same_birth_date_counts(self, member_store, detector):
        member_store.insert(_member("C1", "Ruth", "Apa", date_of_birth=date(1985, 2, 3)))

        matches = detector.find_duplicates(
            Member(first_name="Ruth", last_name="Opa", date_of_birth=date(1985, 2, 3)), 0.7
        )

        assert len(matches) == 1
        assert "Same date of birth" in matches[0].match_reasons

    def test_sorted_best_first(self, member_store, detector):
        member_store.insert(_member("C1", "Jon", "Smith"))
        member_store.insert(_member("C2", "John", "Smith", phone_number="555 0001"))

        matches = detector.find_duplicates(
            Member(first_name="John", last_name="Smith", phone_number="5550001"), 0.6
        )

        assert [m.member.member_code for m in matches] == ["C2", "C1"]

    def test_candidate_does_not_match_itself(self, member_store, detector):
        member_store.insert(_member("C1", "John", "Smith", phone_number="5550001"))

        stored = member_store.get_by_natural_key("C1")

        assert detector.find_duplicates(stored, 0.6) == []

    def test_to_dict(self, member_store, detector):
        member_store.insert(_member("C1", "John", "Smith", phone_number="5550001"))

        match = detector.find_duplicates(
            Member(first_name="John", last_name="Smith", phone_number="5550001"), 0.6
        )[0]

        assert match.to_dict() == {
            "member_code": "C1",
            "full_name": "John Smith",
            "match_score": 1.0,
            "match_reasons": [
                "First name similar (100%)", "Last name similar (100%)", "Same phone number"
            ],
        }
