"""
Extraction Evaluation
=====================

Measures extractor quality against labelled OCR samples.

Samples are a CSV with two string columns:
    text      raw OCR text for one frame
    expected  the correct value ('' when no value should be extracted)

Metrics:
    - Exact match rate (value equals expected, or both empty)
    - No-value rate
    - Per-confidence-tier counts and accuracy
    - Mean edit distance between prediction and expected value

Usage:
    from vehicle_ocr.evaluation import ExtractionEvaluator, load_samples

    samples = load_samples("odometer_samples.csv")
    evaluator = ExtractionEvaluator("mileage")
    metrics = evaluator.evaluate(samples)
    print(metrics.exact_match_rate)
"""

import logging
import time
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Any, Union

import pandas as pd

from ..core.vin_utils import levenshtein_distance
from ..exceptions import SampleLoadError
from ..extraction import ConfidenceTier, FieldExtractor, FieldKind

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ('text', 'expected')


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class PredictionResult:
    """Single prediction result."""
    text: str
    expected: str
    predicted: str
    confidence: str
    exact_match: bool
    edit_distance: int
    candidate_count: int
    processing_time_ms: float


@dataclass
class EvaluationMetrics:
    """Aggregated evaluation metrics."""
    kind: str
    total_samples: int = 0

    # Primary metrics
    exact_match_count: int = 0
    exact_match_rate: float = 0.0

    # Samples where the extractor returned no value
    no_value_count: int = 0
    no_value_rate: float = 0.0

    mean_edit_distance: float = 0.0

    # Tier name -> count / accuracy
    tier_counts: Dict[str, int] = field(default_factory=dict)
    tier_accuracy: Dict[str, float] = field(default_factory=dict)

    total_processing_time_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


# =============================================================================
# SAMPLE LOADING
# =============================================================================

def load_samples(path: Union[str, Path]) -> pd.DataFrame:
    """
    Load labelled samples from a CSV file.

    Args:
        path: CSV with 'text' and 'expected' columns

    Returns:
        DataFrame with string columns, empty cells as ''

    Raises:
        SampleLoadError: If the file is missing, unreadable or lacks columns
    """
    path = Path(path)
    if not path.exists():
        raise SampleLoadError(str(path), "file not found")

    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise SampleLoadError(str(path), str(e)) from e

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise SampleLoadError(str(path), f"missing columns: {missing}")

    logger.info(f"Loaded {len(df)} samples from {path}")
    return df


def normalize_expected(expected: Any, kind: FieldKind) -> str:
    """Canonical string form of a ground-truth value."""
    text = '' if expected is None else str(expected).strip()
    if kind == FieldKind.MILEAGE:
        digits = ''.join(c for c in text if '0' <= c <= '9')
        return str(int(digits)) if digits else ''
    return ''.join(text.upper().split())


# =============================================================================
# EVALUATOR
# =============================================================================

class ExtractionEvaluator:
    """
    Runs an extractor over labelled samples and aggregates metrics.

    Example:
        evaluator = ExtractionEvaluator(FieldKind.VIN)
        metrics = evaluator.evaluate([("VIN 1HGBH41JXMN109186", "1HGBH41JXMN109186")])
        evaluator.export_csv("vin_results.csv")
    """

    def __init__(self, kind: Union[str, FieldKind], extractor: Optional[FieldExtractor] = None):
        self.kind = FieldKind.parse(kind)
        self.extractor = extractor or FieldExtractor()
        self.results: List[PredictionResult] = []

    def evaluate(self, samples: Union[pd.DataFrame, Iterable[Tuple[str, str]]]) -> EvaluationMetrics:
        """
        Evaluate the extractor on samples.

        Args:
            samples: DataFrame with 'text'/'expected' columns, or an
                iterable of (text, expected) pairs

        Returns:
            EvaluationMetrics for this run
        """
        if isinstance(samples, pd.DataFrame):
            pairs = zip(samples['text'], samples['expected'])
        else:
            pairs = samples

        self.results = [self._predict(text, expected) for text, expected in pairs]
        metrics = self._aggregate()

        logger.info(
            f"Evaluated {metrics.total_samples} {self.kind.value} samples: "
            f"exact match {metrics.exact_match_rate:.2%}"
        )
        return metrics

    def _predict(self, text: Any, expected: Any) -> PredictionResult:
        text = '' if text is None else str(text)
        truth = normalize_expected(expected, self.kind)

        start = time.perf_counter()
        result = self.extractor.extract(text, self.kind)
        elapsed_ms = (time.perf_counter() - start) * 1000

        predicted = '' if result.value is None else str(result.value)

        return PredictionResult(
            text=text,
            expected=truth,
            predicted=predicted,
            confidence=result.confidence.value,
            exact_match=predicted == truth,
            edit_distance=levenshtein_distance(predicted, truth),
            candidate_count=len(result.candidates),
            processing_time_ms=elapsed_ms,
        )

    def _aggregate(self) -> EvaluationMetrics:
        metrics = EvaluationMetrics(kind=self.kind.value)
        df = self.to_dataframe()
        if df.empty:
            return metrics

        metrics.total_samples = len(df)
        metrics.exact_match_count = int(df['exact_match'].sum())
        metrics.exact_match_rate = metrics.exact_match_count / metrics.total_samples
        metrics.no_value_count = int((df['predicted'] == '').sum())
        metrics.no_value_rate = metrics.no_value_count / metrics.total_samples
        metrics.mean_edit_distance = float(df['edit_distance'].mean())
        metrics.total_processing_time_ms = float(df['processing_time_ms'].sum())

        by_tier = df.groupby('confidence')['exact_match']
        counts = by_tier.count()
        accuracy = by_tier.mean()
        for tier in ConfidenceTier:
            if tier.value in counts.index:
                metrics.tier_counts[tier.value] = int(counts[tier.value])
                metrics.tier_accuracy[tier.value] = float(accuracy[tier.value])
            else:
                metrics.tier_counts[tier.value] = 0

        return metrics

    def to_dataframe(self) -> pd.DataFrame:
        """Per-sample results of the last run."""
        columns = list(PredictionResult.__dataclass_fields__)
        return pd.DataFrame([asdict(r) for r in self.results], columns=columns)

    def export_csv(self, path: Union[str, Path]) -> Path:
        """Write per-sample results of the last run to CSV."""
        path = Path(path)
        self.to_dataframe().to_csv(path, index=False)
        logger.info(f"Results saved to: {path}")
        return path
