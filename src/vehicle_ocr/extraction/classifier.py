"""
Result classification.

Picks the winning candidate and assigns a confidence tier from the shape of
the candidate set.
"""

import logging
from typing import List, Optional, Sequence

from ..config import MileageRules, VINRules
from .scoring import CandidateScorer
from .types import ConfidenceTier, ExtractionResult, FieldKind

logger = logging.getLogger(__name__)


class ResultClassifier:
    """
    Turns a candidate list into an ExtractionResult.

    Never raises: an empty or useless candidate list produces
    ``value=None`` with LOW confidence.
    """

    def __init__(
        self,
        scorer: Optional[CandidateScorer] = None,
        mileage_rules: Optional[MileageRules] = None,
        vin_rules: Optional[VINRules] = None,
    ):
        self.mileage_rules = mileage_rules or (scorer.mileage_rules if scorer else MileageRules())
        self.vin_rules = vin_rules or (scorer.vin_rules if scorer else VINRules())
        self.scorer = scorer or CandidateScorer(self.mileage_rules, self.vin_rules)

    def classify(
        self,
        candidates: Sequence[str],
        kind: FieldKind,
        normalized_text: str = "",
    ) -> ExtractionResult:
        """
        Select a value and confidence tier.

        Args:
            candidates: Candidate tokens in discovery order
            kind: Target field
            normalized_text: Normalized text the candidates came from

        Returns:
            ExtractionResult for this call
        """
        kind = FieldKind.parse(kind)
        candidates = tuple(candidates)

        if not candidates:
            return ExtractionResult.empty(kind, normalized_text)

        if kind == FieldKind.MILEAGE:
            value, confidence = self._classify_mileage(candidates)
        else:
            value, confidence = self._classify_vin(candidates)

        logger.debug(
            f"{kind.value}: value={value!r} confidence={confidence.value} "
            f"from {len(candidates)} candidates"
        )
        return ExtractionResult(
            field=kind,
            value=value,
            confidence=confidence,
            normalized_text=normalized_text,
            candidates=candidates,
        )

    def _classify_mileage(self, candidates: Sequence[str]):
        rules = self.mileage_rules
        low, high = rules.plausible_range

        plausible = [c for c in candidates if low <= int(c) <= high]
        # sorted() is stable, so equal scores keep discovery order
        ranked: List[str] = sorted(
            plausible, key=self.scorer.mileage_score, reverse=True
        )

        if not ranked:
            # Last resort: largest reading that is not absurdly big
            fallback = [int(c) for c in candidates if int(c) <= high]
            if fallback:
                return max(fallback), ConfidenceTier.LOW
            return None, ConfidenceTier.LOW

        best = int(ranked[0])

        if len(ranked) == 1:
            trusted_low, trusted_high = rules.high_confidence_range
            if trusted_low <= best <= trusted_high:
                return best, ConfidenceTier.HIGH
            return best, ConfidenceTier.MEDIUM

        top_score = self.scorer.mileage_score(ranked[0])
        second_score = self.scorer.mileage_score(ranked[1])
        numerator, denominator = rules.dominance_ratio
        if top_score * denominator > second_score * numerator:
            return best, ConfidenceTier.HIGH
        return best, ConfidenceTier.MEDIUM

    def _classify_vin(self, candidates: Sequence[str]):
        length = self.vin_rules.length
        exact = [c for c in candidates if len(c) == length]

        if exact:
            best = exact[0]
            # Several exact matches cannot be told apart
            if len(exact) == 1 and self.scorer.is_well_formed(best, FieldKind.VIN):
                return best, ConfidenceTier.HIGH
            return best, ConfidenceTier.MEDIUM

        # max() keeps the first of equally ranked candidates
        closest = max(candidates, key=self.scorer.vin_score)
        value = closest if len(closest) == length else None
        return value, ConfidenceTier.LOW
