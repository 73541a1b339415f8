"""
Shared types for field extraction.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from ..exceptions import UnknownFieldError


class FieldKind(str, Enum):
    """Which vehicle field an extraction targets."""
    MILEAGE = "mileage"
    VIN = "vin"

    @classmethod
    def parse(cls, value: Union[str, "FieldKind"]) -> "FieldKind":
        """
        Resolve a FieldKind from an enum member or its name/value.

        Raises:
            UnknownFieldError: If the value names no field kind
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for kind in cls:
                if key == kind.value:
                    return kind
            # Odometer readings share the mileage heuristics
            if key == "odometer":
                return cls.MILEAGE
        raise UnknownFieldError(value, valid=[k.value for k in cls])


class ConfidenceTier(str, Enum):
    """Coarse trust level of an extracted value."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ExtractionResult:
    """
    Outcome of one extraction call.

    ``value`` is an ``int`` for mileage, a ``str`` for VINs, or ``None`` when
    nothing usable was found. ``candidates`` holds every candidate token in
    the order it was discovered.
    """
    field: FieldKind
    value: Optional[Union[int, str]]
    confidence: ConfidenceTier
    normalized_text: str
    candidates: Tuple[str, ...] = ()

    @property
    def needs_review(self) -> bool:
        """True when the caller should ask the user to verify or re-capture."""
        return self.value is None or self.confidence == ConfidenceTier.LOW

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'field': self.field.value,
            'value': self.value,
            'confidence': self.confidence.value,
            'normalized_text': self.normalized_text,
            'candidates': list(self.candidates),
            'needs_review': self.needs_review,
        }

    @classmethod
    def empty(cls, kind: FieldKind, normalized_text: str = "", candidates: Tuple[str, ...] = ()) -> "ExtractionResult":
        """Result carrying no value at low confidence."""
        return cls(
            field=kind,
            value=None,
            confidence=ConfidenceTier.LOW,
            normalized_text=normalized_text,
            candidates=tuple(candidates),
        )
