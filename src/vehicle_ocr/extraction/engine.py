"""
Field Extraction Engine
=======================

Turns raw OCR text from one captured frame into a structured value:

    raw text -> TextNormalizer -> CandidateGenerator -> CandidateScorer
             -> ResultClassifier -> ExtractionResult

Usage:
    from vehicle_ocr import extract_mileage, extract_vin

    result = extract_mileage("Odometer: 123,456 mi")
    print(result.value, result.confidence)   # 123456 ConfidenceTier.HIGH

    result = extract_vin("VIN 1HGBH41JXMN109186 REG")
    print(result.value)                      # "1HGBH41JXMN109186"

Every call is independent and deterministic. Nothing is cached or shared
between calls, so extractors can be used from several threads at once.
"""

import logging
from typing import Iterable, Optional, Union

from ..config import MileageRules, VINRules
from .candidates import CandidateGenerator
from .classifier import ResultClassifier
from .normalizer import TextNormalizer
from .scoring import CandidateScorer
from .types import ExtractionResult, FieldKind

logger = logging.getLogger(__name__)


class FieldExtractor:
    """
    Parameterized extractor for mileage and VIN fields.

    The field kind selects the pattern set and scoring table; the rule
    tables can be swapped for tuning or evaluation.

    Example:
        extractor = FieldExtractor()
        result = extractor.extract("ODO 45,210", FieldKind.MILEAGE)
    """

    def __init__(
        self,
        mileage_rules: Optional[MileageRules] = None,
        vin_rules: Optional[VINRules] = None,
        line_separator: str = ' ',
    ):
        self.mileage_rules = mileage_rules or MileageRules()
        self.vin_rules = vin_rules or VINRules()
        self.line_separator = line_separator

        self.normalizer = TextNormalizer()
        self.generator = CandidateGenerator(self.mileage_rules, self.vin_rules)
        self.scorer = CandidateScorer(self.mileage_rules, self.vin_rules)
        self.classifier = ResultClassifier(self.scorer)

    @classmethod
    def from_config(cls, config) -> "FieldExtractor":
        """Build an extractor from an EngineConfig."""
        return cls(
            mileage_rules=config.mileage,
            vin_rules=config.vin,
            line_separator=config.line_separator,
        )

    def extract(self, raw_text: Optional[str], kind: Union[str, FieldKind]) -> ExtractionResult:
        """
        Extract one field from raw OCR text.

        Args:
            raw_text: OCR output for one frame (None is treated as empty)
            kind: FieldKind or its name ('mileage', 'vin')

        Returns:
            ExtractionResult; value is None with LOW confidence when nothing
            usable was found

        Raises:
            TypeError: If raw_text is neither a string nor None
            UnknownFieldError: If kind names no field
        """
        kind = FieldKind.parse(kind)
        if raw_text is not None and not isinstance(raw_text, str):
            raise TypeError(f"raw_text must be str or None, got {type(raw_text).__name__}")

        normalized = self.normalizer.normalize(raw_text, kind)
        if not normalized:
            return ExtractionResult.empty(kind)

        candidates = self.generator.generate(normalized, kind)
        return self.classifier.classify(candidates, kind, normalized)

    def extract_lines(self, lines: Iterable[str], kind: Union[str, FieldKind]) -> ExtractionResult:
        """
        Extract from the text lines an OCR engine returns for one frame.

        Lines are joined with ``line_separator`` before extraction.
        """
        return self.extract(self.line_separator.join(line for line in lines if line), kind)

    def extract_mileage(self, raw_text: Optional[str]) -> ExtractionResult:
        return self.extract(raw_text, FieldKind.MILEAGE)

    def extract_vin(self, raw_text: Optional[str]) -> ExtractionResult:
        return self.extract(raw_text, FieldKind.VIN)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

# Module-level extractor with the default rule tables
_default_extractor = FieldExtractor()


def get_extractor() -> FieldExtractor:
    """Get the default extractor instance."""
    return _default_extractor


def extract_field(raw_text: Optional[str], kind: Union[str, FieldKind]) -> ExtractionResult:
    """Extract the given field from raw OCR text."""
    return _default_extractor.extract(raw_text, kind)


def extract_mileage(raw_text: Optional[str]) -> ExtractionResult:
    """
    Extract a mileage/odometer reading from raw OCR text.

    Args:
        raw_text: OCR output for one frame

    Returns:
        ExtractionResult with an int value, or None
    """
    return _default_extractor.extract(raw_text, FieldKind.MILEAGE)


def extract_vin(raw_text: Optional[str]) -> ExtractionResult:
    """
    Extract a 17-character VIN from raw OCR text.

    Args:
        raw_text: OCR output for one frame

    Returns:
        ExtractionResult with a str value, or None
    """
    return _default_extractor.extract(raw_text, FieldKind.VIN)


def extract_from_lines(lines: Iterable[str], kind: Union[str, FieldKind]) -> ExtractionResult:
    """Extract from the list of text lines an OCR engine returned for one frame."""
    return _default_extractor.extract_lines(lines, kind)


def extract_first_mileage(raw_text: Optional[str]) -> Optional[int]:
    """Shortcut returning only the extracted mileage value."""
    return extract_mileage(raw_text).value


def extract_first_vin(raw_text: Optional[str]) -> Optional[str]:
    """Shortcut returning only the extracted VIN value."""
    return extract_vin(raw_text).value
