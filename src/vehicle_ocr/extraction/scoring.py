"""
Candidate scoring.

Scores are pure functions of a candidate's string form. Higher is more
plausible.
"""

from typing import Optional

from ..config import MileageRules, VINRules
from ..core.vin_utils import is_well_formed_vin
from .types import FieldKind


def _in_range(value: int, bounds) -> bool:
    low, high = bounds
    return low <= value <= high


class CandidateScorer:
    """
    Domain heuristics for ranking candidates.

    Mileage score (additive):
        range bonus   10k-200k: +100, else 1k-500k: +50, else 100-999,999: +25
        digit bonus   6 digits: +40, 5: +30, 4 or 7: +15
        penalties     below 100: -50, above 500k: -30

    VIN score is a rank key: the candidate length, plus a bonus when it is
    exactly 17 characters, so exact-length candidates always come first and
    longer near misses beat shorter ones.
    """

    def __init__(
        self,
        mileage_rules: Optional[MileageRules] = None,
        vin_rules: Optional[VINRules] = None,
    ):
        self.mileage_rules = mileage_rules or MileageRules()
        self.vin_rules = vin_rules or VINRules()

    def score(self, candidate: str, kind: FieldKind) -> int:
        """Score a candidate for the given field."""
        if FieldKind.parse(kind) == FieldKind.MILEAGE:
            return self.mileage_score(candidate)
        return self.vin_score(candidate)

    def mileage_score(self, candidate: str) -> int:
        rules = self.mileage_rules
        n = int(candidate)
        score = 0

        if _in_range(n, rules.ideal_range):
            score += rules.ideal_bonus
        elif _in_range(n, rules.common_range):
            score += rules.common_bonus
        elif _in_range(n, rules.plausible_range):
            score += rules.plausible_bonus

        score += rules.digit_bonus.get(len(str(n)), 0)

        if n < rules.small_threshold:
            score -= rules.small_penalty
        if n > rules.large_threshold:
            score -= rules.large_penalty

        return score

    def vin_score(self, candidate: str) -> int:
        score = len(candidate)
        if len(candidate) == self.vin_rules.length:
            score += self.vin_rules.exact_rank_bonus
        return score

    def is_well_formed(self, candidate: str, kind: FieldKind) -> bool:
        """
        Gate used for confidence decisions.

        Mileage: value inside the plausible odometer range.
        VIN: the well-formed check (17 chars, no I/O/Q, >= 5 distinct
        characters, letters and digits mixed).
        """
        if FieldKind.parse(kind) == FieldKind.MILEAGE:
            return _in_range(int(candidate), self.mileage_rules.plausible_range)
        return (
            len(candidate) == self.vin_rules.length
            and is_well_formed_vin(candidate, self.vin_rules.min_distinct_chars)
        )
