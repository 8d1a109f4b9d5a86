import pytest

from assessor.app.schemas.findings import (
    ConfidenceLevel,
    FindingType,
    Severity,
)
from assessor.app.schemas.severity import FactorCategory, SeverityFactor
from assessor.app.severity.classifier import (
    classify,
    classify_score,
    confidence_for,
)


def _factor(points: int, factor_id: str = "f") -> SeverityFactor:
    return SeverityFactor(
        id=factor_id,
        description="test factor",
        description_fr="facteur de test",
        points=points,
        category=FactorCategory.KEYWORD,
    )


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "score, expected",
    [
        (0, Severity.OBSERVATION),
        (1, Severity.OBSERVATION),
        (2, Severity.MINOR),
        (4, Severity.MINOR),
        (5, Severity.MAJOR),
        (7, Severity.MAJOR),
        (8, Severity.CRITICAL),
        (25, Severity.CRITICAL),
    ],
)
def test_score_thresholds(score, expected):
    assert classify_score(score) is expected


def test_good_practice_is_always_observation():
    assert classify_score(20, FindingType.GOOD_PRACTICE) is Severity.OBSERVATION


# ---------------------------------------------------------------------------
# Confidence
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "points, expected",
    [
        ([], ConfidenceLevel.LOW),
        ([3], ConfidenceLevel.LOW),
        ([3, 1], ConfidenceLevel.MEDIUM),
        ([3, 1, 2], ConfidenceLevel.MEDIUM),
        ([3, 1, 2, 2], ConfidenceLevel.HIGH),
        ([3, 1, 2, 2, 4], ConfidenceLevel.HIGH),
    ],
)
def test_confidence_counts_contributing_factors(points, expected):
    assert confidence_for([_factor(p) for p in points]) is expected


def test_zero_point_factors_do_not_raise_confidence():
    factors = [_factor(0), _factor(0), _factor(0), _factor(0), _factor(3)]
    assert confidence_for(factors) is ConfidenceLevel.LOW


# ---------------------------------------------------------------------------
# Combined
# ---------------------------------------------------------------------------

def test_classify_returns_severity_confidence_and_score():
    factors = [_factor(3), _factor(4), _factor(4), _factor(2)]

    severity, confidence, score = classify(factors, FindingType.NON_CONFORMITY)

    assert severity is Severity.CRITICAL
    assert confidence is ConfidenceLevel.HIGH
    assert score == 13


def test_classify_empty_factor_list():
    assert classify([]) == (Severity.OBSERVATION, ConfidenceLevel.LOW, 0)
