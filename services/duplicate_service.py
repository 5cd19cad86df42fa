# -*- coding: utf-8 -*-
"""
Duplicate member detection.

Fuzzy multi-field matching of a candidate member against the members
already in a store. Used by interactive intake (debounced, see
ui.duplicate_check_bridge) and by batch CSV import screening.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from app.config import Config
from models.member import Member
from services.stores import EntityStore
from utils.logger import get_logger

logger = get_logger(__name__)

# Weights of the weak location signals
SAME_UNIT_WEIGHT = 0.5
SAME_SUBAREA_WEIGHT = 0.3

# A match needs at least this many contributing signals
MIN_SIGNALS = 2


def levenshtein_ratio(s1: Optional[str], s2: Optional[str]) -> float:
    """
    Similarity of two strings in [0, 1].

    Case-insensitive and trimmed. Edit distance uses cost 1 for insertion
    and deletion and cost 2 for substitution, normalized by the summed
    length of both strings ("jon" vs "john" -> 6/7).
    """
    a = (s1 or "").strip().lower()
    b = (s2 or "").strip().lower()

    if a == b:
        return 1.0 if a else 0.0
    if not a or not b:
        return 0.0

    len1, len2 = len(a), len(b)
    previous = list(range(len2 + 1))
    for i in range(1, len1 + 1):
        current = [i] + [0] * len2
        for j in range(1, len2 + 1):
            cost = 0 if a[i-1] == b[j-1] else 2
            current[j] = min(
                previous[j] + 1,         # Deletion
                current[j-1] + 1,        # Insertion
                previous[j-1] + cost     # Substitution
            )
        previous = current

    distance = previous[len2]
    return (len1 + len2 - distance) / (len1 + len2)


def _digits(phone: Optional[str]) -> str:
    return re.sub(r"\D", "", phone or "")


@dataclass
class DuplicateMatch:
    """An existing member that probably is the same person as the candidate."""
    member: Member
    match_score: float
    match_reasons: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "member_code": self.member.member_code,
            "full_name": self.member.full_name,
            "match_score": round(self.match_score, 4),
            "match_reasons": list(self.match_reasons),
        }


class DuplicateDetector:
    """
    Scores a candidate against every stored member.

    Per-field contributions:
        first name / last name: similarity, only when above the cutoff
        phone (digits only) equal: 1.0
        date of birth equal: 1.0
        same unit: 0.5, same subarea: 0.3

    score = sum / count. Reported when score >= threshold and at least two
    signals contributed.
    """

    def __init__(self, member_store: EntityStore,
                 name_cutoff: float = Config.NAME_SIMILARITY_CUTOFF):
        self.member_store = member_store
        self.name_cutoff = name_cutoff

    def score(self, candidate: Member, existing: Member):
        """Return (match_score, reasons) for one pair; score is 0.0 without signals."""
        reasons = []
        contributions = []

        for label, new_value, old_value in (
            ("First name", candidate.first_name, existing.first_name),
            ("Last name", candidate.last_name, existing.last_name),
        ):
            if new_value and old_value:
                similarity = levenshtein_ratio(new_value, old_value)
                if similarity > self.name_cutoff:
                    reasons.append(f"{label} similar ({round(similarity * 100)}%)")
                    contributions.append(similarity)

        new_phone = _digits(candidate.phone_number)
        if new_phone and new_phone == _digits(existing.phone_number):
            reasons.append("Same phone number")
            contributions.append(1.0)

        if candidate.date_of_birth and candidate.date_of_birth == existing.date_of_birth:
            reasons.append("Same date of birth")
            contributions.append(1.0)

        if candidate.unit_id is not None and candidate.unit_id == existing.unit_id:
            reasons.append("Same unit")
            contributions.append(SAME_UNIT_WEIGHT)

        if candidate.subarea_id is not None and candidate.subarea_id == existing.subarea_id:
            reasons.append("Same subarea")
            contributions.append(SAME_SUBAREA_WEIGHT)

        if not contributions:
            return 0.0, reasons
        return sum(contributions) / len(contributions), reasons

    def _is_self(self, candidate: Member, existing: Member) -> bool:
        if candidate.id is not None and candidate.id == existing.id:
            return True
        return bool(candidate.member_code) and candidate.member_code == existing.member_code

    def find_duplicates(self, candidate: Member, threshold: Optional[float] = None) -> List[DuplicateMatch]:
        """
        Probable duplicates of candidate among stored members, best first.

        Args:
            candidate: Member being captured or imported (may be partial)
            threshold: Minimum score; defaults to Config.DUPLICATE_THRESHOLD
        """
        if threshold is None:
            threshold = Config.DUPLICATE_THRESHOLD

        matches = []
        for existing in self.member_store.list():
            if self._is_self(candidate, existing):
                continue
            match_score, reasons = self.score(candidate, existing)
            if len(reasons) >= MIN_SIGNALS and match_score >= threshold:
                matches.append(DuplicateMatch(existing, match_score, reasons))

        matches.sort(key=lambda m: m.match_score, reverse=True)
        if matches:
            logger.debug(
                f"{len(matches)} possible duplicates for {candidate.full_name or '<unnamed>'}"
            )
        return matches
