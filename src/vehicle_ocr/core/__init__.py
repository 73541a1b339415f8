"""
Vehicle OCR Core Module
=======================

VIN constants, validation and string metrics.
Single Source of Truth for all VIN-related facts.
"""

from .vin_utils import (
    # Constants
    VINConstants,
    VIN_LENGTH,
    VIN_VALID_CHARS,
    VIN_INVALID_CHARS,
    # Validation
    VINValidationResult,
    validate_vin,
    has_invalid_chars,
    is_well_formed_vin,
    # Checksum
    calculate_check_digit,
    # Similarity
    levenshtein_distance,
)

__all__ = [
    # Constants
    "VINConstants",
    "VIN_LENGTH",
    "VIN_VALID_CHARS",
    "VIN_INVALID_CHARS",
    # Validation
    "VINValidationResult",
    "validate_vin",
    "has_invalid_chars",
    "is_well_formed_vin",
    # Checksum
    "calculate_check_digit",
    # Similarity
    "levenshtein_distance",
]
