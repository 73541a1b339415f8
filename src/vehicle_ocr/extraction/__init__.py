"""
Vehicle OCR Extraction Module
=============================

Turns noisy OCR text into mileage readings and VINs with a confidence tier.
"""

from .types import FieldKind, ConfidenceTier, ExtractionResult
from .normalizer import TextNormalizer, normalize
from .candidates import CandidateGenerator, MILEAGE_PATTERNS, VIN_PATTERNS
from .scoring import CandidateScorer
from .classifier import ResultClassifier
from .engine import (
    FieldExtractor,
    get_extractor,
    extract_field,
    extract_mileage,
    extract_vin,
    extract_from_lines,
    extract_first_mileage,
    extract_first_vin,
)

__all__ = [
    # Types
    "FieldKind",
    "ConfidenceTier",
    "ExtractionResult",
    # Components
    "TextNormalizer",
    "normalize",
    "CandidateGenerator",
    "MILEAGE_PATTERNS",
    "VIN_PATTERNS",
    "CandidateScorer",
    "ResultClassifier",
    # Engine
    "FieldExtractor",
    "get_extractor",
    "extract_field",
    "extract_mileage",
    "extract_vin",
    "extract_from_lines",
    "extract_first_mileage",
    "extract_first_vin",
]
