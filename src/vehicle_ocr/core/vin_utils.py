"""
VIN Utilities - Single Source of Truth
======================================

VIN facts shared by the extractors, evaluation and CLI: the character set,
the well-formedness gate used for confidence, and check digit validation.
"""

from typing import Optional, Dict, Tuple, FrozenSet
from dataclasses import dataclass

from ..config import VINRules


# =============================================================================
# VIN CONSTANTS
# =============================================================================

class VINConstants:
    """Immutable VIN specification constants per ISO 3779 / NHTSA."""

    LENGTH: int = 17

    # Valid characters (I, O, Q excluded to avoid confusion with 1, 0)
    VALID_CHARS: FrozenSet[str] = frozenset("0123456789ABCDEFGHJKLMNPRSTUVWXYZ")
    INVALID_CHARS: FrozenSet[str] = frozenset("IOQ")

    # Regex character class for the valid alphabet
    CHAR_CLASS: str = "[A-HJ-NPR-Z0-9]"

    CHECK_DIGIT_POSITION: int = 9

    # Checksum weights by position (NHTSA standard)
    CHECKSUM_WEIGHTS: Tuple[int, ...] = (8, 7, 6, 5, 4, 3, 2, 10, 0, 9, 8, 7, 6, 5, 4, 3, 2)

    # Character to value mapping for checksum (ISO 3779)
    CHAR_VALUES: Dict[str, int] = {
        'A': 1, 'B': 2, 'C': 3, 'D': 4, 'E': 5, 'F': 6, 'G': 7, 'H': 8,
        'J': 1, 'K': 2, 'L': 3, 'M': 4, 'N': 5, 'P': 7, 'R': 9,
        'S': 2, 'T': 3, 'U': 4, 'V': 5, 'W': 6, 'X': 7, 'Y': 8, 'Z': 9,
        '0': 0, '1': 1, '2': 2, '3': 3, '4': 4, '5': 5, '6': 6, '7': 7, '8': 8, '9': 9
    }

    # Fewer distinct characters than this reads as a degenerate repeat
    MIN_DISTINCT_CHARS: int = 5


VIN_LENGTH = VINConstants.LENGTH
VIN_VALID_CHARS = VINConstants.VALID_CHARS
VIN_INVALID_CHARS = VINConstants.INVALID_CHARS


def has_invalid_chars(text: str) -> bool:
    """True if text contains any of I, O, Q."""
    return any(c in VIN_INVALID_CHARS for c in text)


def is_well_formed_vin(vin: str, min_distinct_chars: int = VINConstants.MIN_DISTINCT_CHARS) -> bool:
    """
    Check whether an extracted VIN looks like a real one.

    A well-formed VIN:
    - is exactly 17 characters
    - contains no I, O or Q
    - has at least ``min_distinct_chars`` distinct characters
      (rejects repeats like "11111111111111111")
    - mixes letters and digits

    This is a plausibility gate, not a checksum test.

    Examples:
        >>> is_well_formed_vin("1HGBH41JXMN109186")
        True
        >>> is_well_formed_vin("11111111111111111")
        False
    """
    if len(vin) != VIN_LENGTH:
        return False
    if has_invalid_chars(vin):
        return False
    if len(set(vin)) < min_distinct_chars:
        return False

    has_letter = any('A' <= c <= 'Z' for c in vin)
    has_digit = any('0' <= c <= '9' for c in vin)
    return has_letter and has_digit


# =============================================================================
# CHECK DIGIT
# =============================================================================

def calculate_check_digit(vin: str) -> Optional[str]:
    """
    Expected check digit (position 9) of a 17-character VIN.

    Weighted sum of the transliterated characters, mod 11; 10 is written 'X'.
    The check position itself carries weight 0, so its content is ignored.

    Returns:
        '0'-'9' or 'X', or None when the VIN has the wrong length or
        characters outside the VIN alphabet
    """
    vin = vin.upper()
    values = VINConstants.CHAR_VALUES
    if len(vin) != VIN_LENGTH or any(c not in values for c in vin):
        return None

    total = sum(values[c] * weight for c, weight in zip(vin, VINConstants.CHECKSUM_WEIGHTS))
    remainder = total % 11
    return 'X' if remainder == 10 else str(remainder)


# =============================================================================
# VALIDATION REPORT
# =============================================================================

@dataclass(frozen=True)
class VINValidationResult:
    """
    Structural report for one VIN string, as shown by ``vehicle-ocr validate``.

    ``well_formed`` is the same gate the extractors use for confidence.
    The checksum is informational only.
    """
    vin: str
    length_ok: bool
    invalid_chars: Tuple[str, ...]
    well_formed: bool
    expected_check_digit: Optional[str]

    @property
    def chars_ok(self) -> bool:
        return not self.invalid_chars

    @property
    def checksum_ok(self) -> bool:
        position = VINConstants.CHECK_DIGIT_POSITION - 1
        return self.expected_check_digit is not None and self.vin[position] == self.expected_check_digit

    def to_dict(self) -> Dict:
        return {
            'vin': self.vin,
            'length_ok': self.length_ok,
            'chars_ok': self.chars_ok,
            'invalid_chars': list(self.invalid_chars),
            'well_formed': self.well_formed,
            'expected_check_digit': self.expected_check_digit,
            'checksum_ok': self.checksum_ok,
        }


def validate_vin(vin: str, rules: Optional[VINRules] = None) -> VINValidationResult:
    """
    Check a VIN the way the extractors would judge it.

    Whitespace is removed and letters uppercased before checking, so
    "1hgbh 41jxm n109186" is reported as 1HGBH41JXMN109186.

    Args:
        vin: VIN as typed or read
        rules: VIN rule table (length and distinct-character threshold)

    Returns:
        VINValidationResult
    """
    rules = rules or VINRules()
    vin = ''.join(vin.split()).upper()

    invalid = tuple(c for c in vin if c not in VIN_VALID_CHARS)

    return VINValidationResult(
        vin=vin,
        length_ok=len(vin) == rules.length,
        invalid_chars=invalid,
        well_formed=is_well_formed_vin(vin, rules.min_distinct_chars),
        expected_check_digit=calculate_check_digit(vin),
    )


# =============================================================================
# EDIT DISTANCE
# =============================================================================

def levenshtein_distance(a: str, b: str) -> int:
    """
    Number of single-character insertions, deletions or substitutions
    turning ``a`` into ``b``. Used to grade near-miss predictions.

    Examples:
        >>> levenshtein_distance("1HGBH41JXMN109186", "1HGBH41JXMN1O9186")
        1
    """
    if len(a) < len(b):
        a, b = b, a

    row = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        diagonal, row[0] = row[0], i
        for j, cb in enumerate(b, 1):
            above = row[j]
            row[j] = min(above + 1, row[j - 1] + 1, diagonal + (ca != cb))
            diagonal = above

    return row[-1]
