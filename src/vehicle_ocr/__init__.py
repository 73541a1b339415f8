"""
Vehicle OCR Field Extraction
============================

Turns raw OCR text from photographed odometers, VIN plates and vehicle
documents into validated values with a confidence tier.

Package Structure:
    vehicle_ocr/
    ├── core/           # VIN constants, validation, checksum
    ├── extraction/     # Normalize -> candidates -> score -> classify
    ├── evaluation/     # Accuracy on labelled samples
    ├── config.py       # Rule tables, logging, config files
    └── cli.py          # Command line interface

Quick Start:
    from vehicle_ocr import extract_mileage, extract_vin

    result = extract_mileage("Odometer: 123,456 mi")
    print(result.value, result.confidence.value)   # 123456 high

    result = extract_vin("VIN 1HGBH41JXMN109186 REG")
    print(result.value)                            # 1HGBH41JXMN109186

Version: 1.0.0
"""

__version__ = "1.0.0"

from .core import (
    VINConstants,
    VIN_LENGTH,
    VIN_VALID_CHARS,
    VINValidationResult,
    validate_vin,
    is_well_formed_vin,
    calculate_check_digit,
    levenshtein_distance,
)
from .extraction import (
    FieldKind,
    ConfidenceTier,
    ExtractionResult,
    FieldExtractor,
    extract_field,
    extract_mileage,
    extract_vin,
    extract_from_lines,
    extract_first_mileage,
    extract_first_vin,
)
from .exceptions import (
    VehicleOCRError,
    ConfigurationError,
    UnknownFieldError,
    SampleLoadError,
)

__all__ = [
    "__version__",
    # Core
    "VINConstants",
    "VIN_LENGTH",
    "VIN_VALID_CHARS",
    "VINValidationResult",
    "validate_vin",
    "is_well_formed_vin",
    "calculate_check_digit",
    "levenshtein_distance",
    # Extraction
    "FieldKind",
    "ConfidenceTier",
    "ExtractionResult",
    "FieldExtractor",
    "extract_field",
    "extract_mileage",
    "extract_vin",
    "extract_from_lines",
    "extract_first_mileage",
    "extract_first_vin",
    # Errors
    "VehicleOCRError",
    "ConfigurationError",
    "UnknownFieldError",
    "SampleLoadError",
]


# Lazy import for evaluation (pulls in pandas)
def __getattr__(name: str):
    """Lazy import for evaluation modules."""
    if name == "ExtractionEvaluator":
        from .evaluation import ExtractionEvaluator
        return ExtractionEvaluator
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
