"""
Shared fixtures for the vehicle OCR test suite.
"""

import pytest

from vehicle_ocr.config import reset_config
from vehicle_ocr.extraction import (
    CandidateGenerator,
    CandidateScorer,
    ResultClassifier,
    TextNormalizer,
)


# Raw OCR strings used by property-style tests
SAMPLE_TEXTS = [
    "",
    "   \n\t ",
    "Odometer: 123,456 mi",
    "1 60648",
    "ODO 87.654 km TRIP",
    "12,500, 98,000",
    "99",
    "VIN 1HGBH41JXMN109186 REG",
    "1HGBH 41JXM N109186",
    "1HGB H41J XMN1 09186",
    "1HGBH41JXMN109186 / 2T1BURHE0JC123456",
    "vin: 1hgbh41jxmn1O9186",
    "!!! ### ***",
    "Straße 12 ß ﬁ",
    "٣٤٥٦٧ 4567",
    "9" * 5000,
    "1 " * 500,
    "MILEAGE 045,210\nVIN WBA3A5C51DF586321\nDATE 2019",
]


@pytest.fixture(autouse=True)
def _clean_config(monkeypatch):
    """Each test starts from an uncached, env-free configuration."""
    for key in ('VEHICLE_OCR_CONFIG', 'VEHICLE_OCR_LOG_LEVEL', 'VEHICLE_OCR_LOG_FILE'):
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def normalizer():
    """Create a default normalizer instance."""
    return TextNormalizer()


@pytest.fixture
def generator():
    """Create a default candidate generator."""
    return CandidateGenerator()


@pytest.fixture
def scorer():
    """Create a default scorer."""
    return CandidateScorer()


@pytest.fixture
def classifier():
    """Create a default result classifier."""
    return ResultClassifier()
