"""
Vehicle OCR Evaluation Module
=============================

Accuracy and confidence calibration of the extractors on labelled samples.
"""

from .metrics import (
    PredictionResult,
    EvaluationMetrics,
    ExtractionEvaluator,
    load_samples,
    normalize_expected,
)

__all__ = [
    "PredictionResult",
    "EvaluationMetrics",
    "ExtractionEvaluator",
    "load_samples",
    "normalize_expected",
]
