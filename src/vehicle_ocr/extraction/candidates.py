"""
Candidate generation.

Runs each field's ordered pattern set over the whole normalized text and
collects every syntactically plausible token, deduplicated, in the order it
was first found.
"""

import logging
import re
from typing import List, Optional, Tuple

from ..config import MileageRules, VINRules
from ..core.vin_utils import VINConstants, has_invalid_chars
from .types import FieldKind

logger = logging.getLogger(__name__)

_V = VINConstants.CHAR_CLASS

# Pre-compiled patterns, applied in this order
MILEAGE_PATTERNS: Tuple[re.Pattern, ...] = (
    # Comma-grouped: "123,456"
    re.compile(r'\b\d{1,3}(?:,\d{3})+\b'),
    # Dot-grouped: "123.456"
    re.compile(r'\b\d{1,3}(?:\.\d{3})+\b'),
    # 4-8 digit runs, including ones touching the string edges
    re.compile(r'(?<!\d)\d{4,8}(?!\d)'),
    # Word-bounded 4-7 digit runs
    re.compile(r'\b\d{4,7}\b'),
    # Fallback: any digit run
    re.compile(r'\d+'),
)

VIN_PATTERNS: Tuple[re.Pattern, ...] = (
    # Exact 17-character VIN
    re.compile(rf'\b{_V}{{17}}\b'),
    # Split across four OCR tokens: "1HGB H41J XMN1 09186"
    re.compile(rf'\b{_V}{{1,5}}\s+{_V}{{1,5}}\s+{_V}{{1,5}}\s+{_V}{{1,5}}\b'),
    # Split across three OCR tokens: "1HGBH 41JXM N109186"
    re.compile(rf'\b{_V}{{1,7}}\s+{_V}{{1,7}}\s+{_V}{{1,7}}\b'),
    # Near misses from length drift
    re.compile(rf'\b{_V}{{15,19}}\b'),
)

_WHITESPACE = re.compile(r'\s+')


class CandidateGenerator:
    """
    Extracts candidate tokens from normalized text.

    Mileage candidates are canonical decimal strings of positive integers
    ("012,345" -> "12345"). VIN candidates are the matched text with
    whitespace removed, 15-19 characters long, never containing I, O or Q.

    Never raises on malformed input; no matches yields an empty list.
    """

    def __init__(
        self,
        mileage_rules: Optional[MileageRules] = None,
        vin_rules: Optional[VINRules] = None,
    ):
        self.mileage_rules = mileage_rules or MileageRules()
        self.vin_rules = vin_rules or VINRules()

    def generate(self, normalized: str, kind: FieldKind) -> List[str]:
        """
        Generate deduplicated candidates in discovery order.

        Args:
            normalized: Output of TextNormalizer for the same field
            kind: Target field

        Returns:
            List of candidate tokens
        """
        kind = FieldKind.parse(kind)
        if not normalized:
            return []

        if kind == FieldKind.MILEAGE:
            patterns, to_token = MILEAGE_PATTERNS, self._mileage_token
        else:
            patterns, to_token = VIN_PATTERNS, self._vin_token

        candidates: List[str] = []
        seen = set()
        for pattern in patterns:
            for match in pattern.finditer(normalized):
                token = to_token(match.group(0))
                if token is None or token in seen:
                    continue
                seen.add(token)
                candidates.append(token)

        logger.debug(f"{kind.value}: {len(candidates)} candidates from '{normalized}'")
        return candidates

    def _mileage_token(self, raw: str) -> Optional[str]:
        """Strip grouping separators; keep only positive integers that fit u64."""
        digits = raw.replace(',', '').replace('.', '')
        # Leading zeros do not count towards the width limit
        significant = digits.lstrip('0')
        if not significant or len(significant) > self.mileage_rules.max_digits:
            return None
        try:
            value = int(significant)
        except ValueError:
            return None
        if value <= 0 or value > self.mileage_rules.max_value:
            return None
        return str(value)

    def _vin_token(self, raw: str) -> Optional[str]:
        """Remove internal whitespace; reject I/O/Q and out-of-range lengths."""
        token = _WHITESPACE.sub('', raw)
        if has_invalid_chars(token):
            return None
        if not self.vin_rules.min_length <= len(token) <= self.vin_rules.max_length:
            return None
        return token
