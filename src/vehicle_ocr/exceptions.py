"""
Package Exceptions
==================

Structured errors for the configuration, evaluation and CLI layers.

Field extraction itself never raises for text input: garbage in yields an
empty, low-confidence result. These exceptions cover the surrounding tooling.
"""

from typing import Any, Dict, Optional


class VehicleOCRError(Exception):
    """
    Base exception for vehicle OCR errors.

    Provides structured error information with error codes for programmatic handling.
    """

    def __init__(self, message: str, error_code: str = "VEHICLE_OCR_ERROR", context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
        }


class ConfigurationError(VehicleOCRError):
    """Raised when the engine is misconfigured."""

    def __init__(self, message: str, config_key: Optional[str] = None, expected: Optional[str] = None):
        super().__init__(
            message=f"Configuration error: {message}",
            error_code="CONFIG_ERROR",
            context={"config_key": config_key, "expected": expected}
        )
        self.config_key = config_key
        self.expected = expected


class UnknownFieldError(ConfigurationError):
    """Raised when a field kind name is not recognized."""

    def __init__(self, value: Any, valid: Optional[list] = None):
        valid = valid or []
        super().__init__(
            f"Unknown field kind: {value!r}. Valid kinds: {valid}",
            config_key="field",
            expected=", ".join(valid),
        )
        self.error_code = "UNKNOWN_FIELD"
        self.value = value


class SampleLoadError(VehicleOCRError):
    """Raised when labelled evaluation samples cannot be loaded."""

    def __init__(self, path: str, reason: str = "Unknown error"):
        super().__init__(
            message=f"Failed to load samples: {path}. Reason: {reason}",
            error_code="SAMPLE_LOAD_ERROR",
            context={"path": path, "reason": reason}
        )
        self.path = path
        self.reason = reason
