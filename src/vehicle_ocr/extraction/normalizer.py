"""
OCR text normalization.

Reduces raw recognizer output to the alphabet of the target field before any
pattern matching happens.
"""

import re
from typing import Optional

from .types import FieldKind


class TextNormalizer:
    """
    Per-field cleanup of raw OCR text.

    Mileage:
    - Anything but digits, whitespace, '.' and ',' becomes a space
    - Digit runs split by stray whitespace are joined ("1 60648" -> "160648")
    - Whitespace collapsed and trimmed

    VIN:
    - Anything but ASCII letters and digits becomes a space
    - Uppercased, whitespace collapsed and trimmed

    Output is never longer than the input, and normalizing twice is the
    same as normalizing once.

    Thread Safety: This class is thread-safe for concurrent use.
    """

    _MILEAGE_NOISE = re.compile(r'[^0-9\s.,]')
    _SPLIT_DIGITS = re.compile(r'([0-9])\s+([0-9])')
    _VIN_NOISE = re.compile(r'[^A-Za-z0-9]+')

    def normalize(self, raw: Optional[str], kind: FieldKind) -> str:
        """
        Normalize raw OCR text for the given field.

        Args:
            raw: Raw OCR text (None is treated as empty)
            kind: Target field

        Returns:
            Normalized text, '' for empty or whitespace-only input
        """
        kind = FieldKind.parse(kind)
        if not raw or raw.isspace():
            return ''

        if kind == FieldKind.MILEAGE:
            return self._normalize_mileage(raw)
        return self._normalize_vin(raw)

    def _normalize_mileage(self, raw: str) -> str:
        text = self._MILEAGE_NOISE.sub(' ', raw)
        text = self.merge_split_digits(text)
        return _collapse_whitespace(text)

    def _normalize_vin(self, raw: str) -> str:
        # Replace before uppercasing so characters like 'ß' cannot expand
        text = self._VIN_NOISE.sub(' ', raw).upper()
        return _collapse_whitespace(text)

    def merge_split_digits(self, text: str) -> str:
        """Join digit runs separated only by whitespace, repeating until stable."""
        while True:
            merged = self._SPLIT_DIGITS.sub(r'\1\2', text)
            if merged == text:
                return text
            text = merged


def _collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


_default_normalizer = TextNormalizer()


def normalize(raw: Optional[str], kind: FieldKind) -> str:
    """Normalize raw OCR text using the default normalizer."""
    return _default_normalizer.normalize(raw, kind)
