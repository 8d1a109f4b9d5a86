"""
Severity classification.

Reduces an ordered factor list to a score, a severity level and a
confidence label. Pure computation; never raises.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from assessor.app.schemas.findings import (
    ConfidenceLevel,
    FindingType,
    Severity,
)
from assessor.app.schemas.severity import SeverityFactor


# Evaluated high to low.
SEVERITY_THRESHOLDS: Tuple[Tuple[int, Severity], ...] = (
    (8, Severity.CRITICAL),
    (5, Severity.MAJOR),
    (2, Severity.MINOR),
)

CONFIDENCE_HIGH_MIN_FACTORS = 4
CONFIDENCE_MEDIUM_MIN_FACTORS = 2


def total_score(factors: Sequence[SeverityFactor]) -> int:
    return sum(f.points for f in factors)


def classify_score(
    score: int,
    finding_type: Optional[FindingType] = None,
) -> Severity:
    """
    Map a score to a severity level.

    Good practices never receive a severity above OBSERVATION.
    """
    if finding_type is FindingType.GOOD_PRACTICE:
        return Severity.OBSERVATION

    for threshold, severity in SEVERITY_THRESHOLDS:
        if score >= threshold:
            return severity

    return Severity.OBSERVATION


def confidence_for(factors: Sequence[SeverityFactor]) -> ConfidenceLevel:
    """Confidence grows with the number of factors that contributed points."""
    contributing = sum(1 for f in factors if f.points > 0)

    if contributing >= CONFIDENCE_HIGH_MIN_FACTORS:
        return ConfidenceLevel.HIGH
    if contributing >= CONFIDENCE_MEDIUM_MIN_FACTORS:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def classify(
    factors: Sequence[SeverityFactor],
    finding_type: Optional[FindingType] = None,
) -> Tuple[Severity, ConfidenceLevel, int]:
    score = total_score(factors)
    return (
        classify_score(score, finding_type),
        confidence_for(factors),
        score,
    )
