"""Decision policy — maps value measures to a recommendation tier.

Both classifiers are pure lookups over fixed thresholds.  Tiers are checked
strongest first and the first match wins; every threshold is an inclusive
lower bound except the CAUTION tier, which requires strictly positive
value and edge.

Run tests with::

    pytest tests/test_policy.py -v
"""

from __future__ import annotations

from enum import Enum
from typing import Final

# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

#: Minimum value and edge for a STRONG_BET.
STRONG_VALUE: Final[float] = 0.15
STRONG_EDGE: Final[float] = 0.10

#: Minimum value and edge for a BET.
BET_VALUE: Final[float] = 0.05
BET_EDGE: Final[float] = 0.05

#: Observation counts for HIGH and MEDIUM confidence.
HIGH_SAMPLE: Final[int] = 20
MEDIUM_SAMPLE: Final[int] = 10


class Recommendation(str, Enum):
    """Four-level betting recommendation."""
    STRONG_BET = "STRONG_BET"
    BET = "BET"
    CAUTION = "CAUTION"
    AVOID = "AVOID"


class ConfidenceLevel(str, Enum):
    """Confidence in a probability estimate, by observation count."""
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


def classify_recommendation(value: float, edge: float) -> Recommendation:
    """Classify a (value, edge) pair.

    | condition                          | result     |
    |------------------------------------|------------|
    | value ≥ 0.15 and edge ≥ 0.10       | STRONG_BET |
    | value ≥ 0.05 and edge ≥ 0.05       | BET        |
    | value > 0 and edge > 0             | CAUTION    |
    | otherwise (including ``nan``)      | AVOID      |
    """
    if value >= STRONG_VALUE and edge >= STRONG_EDGE:
        return Recommendation.STRONG_BET
    if value >= BET_VALUE and edge >= BET_EDGE:
        return Recommendation.BET
    if value > 0 and edge > 0:
        return Recommendation.CAUTION
    return Recommendation.AVOID


def classify_confidence(sample_size: float) -> ConfidenceLevel:
    """Rate confidence from the raw number of observations behind an estimate."""
    if sample_size >= HIGH_SAMPLE:
        return ConfidenceLevel.HIGH
    if sample_size >= MEDIUM_SAMPLE:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW
