import logging

import pytest

from assessor.app.config import AssessorConfig
from assessor.app.schemas.findings import (
    AuditArea,
    ConfidenceLevel,
    CriticalElement,
    FindingType,
    Severity,
)
from assessor.app.schemas.severity import FactorCategory
from assessor.app.severity import (
    InMemoryRepetitionLookup,
    NullRepetitionLookup,
    calculate_severity_suggestion,
    calculate_severity_suggestion_sync,
)
from assessor.app.severity.calculator import repetition_factor
from assessor.tests.fixtures.finding_factory import (
    FailingLookup,
    FixedCountLookup,
    factor_ids,
    finding_input,
    preview_input,
    prior_findings_for_question,
)

pytestmark = pytest.mark.anyio


# ---------------------------------------------------------------------------
# Reference scenarios
# ---------------------------------------------------------------------------

async def test_separation_failure_is_critical_with_high_confidence():
    finding = finding_input(
        description_en="Failure of separation minima in controlled airspace",
        audit_area=AuditArea.ANS,
        finding_type=FindingType.NON_CONFORMITY,
    )

    result = await calculate_severity_suggestion(
        finding, repetition_lookup=NullRepetitionLookup()
    )

    assert result.suggested is Severity.CRITICAL
    assert result.confidence is ConfidenceLevel.HIGH
    assert result.score == 13
    assert result.is_repeat is False
    assert result.previous_occurrences == 0


async def test_minor_documentation_gap_is_observation_with_low_confidence():
    finding = finding_input(
        description_en="Partial documentation update required",
        finding_type=FindingType.OBSERVATION,
    )

    result = await calculate_severity_suggestion(finding)

    assert factor_ids(result.factors) == ["minor_keywords", "type_observation"]
    assert result.score == 0
    assert result.suggested is Severity.OBSERVATION
    assert result.confidence is ConfidenceLevel.LOW


async def test_standard_reference_alone_is_minor():
    finding = finding_input(icao_reference="Annex 11, Standard 2.3 (shall)")

    result = await calculate_severity_suggestion(finding)

    assert factor_ids(result.factors) == ["icao_standard"]
    assert result.score == 3
    assert result.suggested is Severity.MINOR


async def test_good_practice_overrides_high_scoring_keywords():
    finding = finding_input(
        description_en="Critical failure incident",
        finding_type=FindingType.GOOD_PRACTICE,
    )

    result = await calculate_severity_suggestion(finding)

    assert len(result.factors) == 1
    assert result.score == 0
    assert result.suggested is Severity.OBSERVATION


async def test_repeat_history_raises_observation_to_minor():
    finding = finding_input(
        description_en="Partial documentation update required",
        finding_type=FindingType.OBSERVATION,
        question_id="PQ-ANS-1.001",
    )
    lookup = InMemoryRepetitionLookup(
        prior_findings_for_question("PQ-ANS-1.001", 3)
    )

    result = await calculate_severity_suggestion(
        finding, repetition_lookup=lookup
    )

    repeat = result.factors[-1]
    assert repeat.id == "repeat_finding"
    assert repeat.points == 4
    assert repeat.category is FactorCategory.REPETITION
    assert "3 similar issue(s)" in repeat.description
    assert result.is_repeat is True
    assert result.previous_occurrences == 3
    assert result.score == 4
    assert result.suggested is Severity.MINOR


# ---------------------------------------------------------------------------
# Repetition factor
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "occurrences, expected_points",
    [(1, 2), (2, 4), (3, 4), (12, 4)],
)
def test_repetition_factor_is_capped(occurrences, expected_points):
    assert repetition_factor(occurrences).points == expected_points


def test_no_repetition_factor_without_occurrences():
    assert repetition_factor(0) is None


async def test_lookup_receives_finding_context():
    lookup = FixedCountLookup(1)
    finding = finding_input(
        organization_id="org-42",
        review_id="review-7",
        question_id="PQ-OPS-2.010",
        audit_area=AuditArea.OPS,
    )

    result = await calculate_severity_suggestion(
        finding, repetition_lookup=lookup
    )

    assert lookup.calls == [
        {
            "organization_id": "org-42",
            "exclude_review_id": "review-7",
            "question_id": "PQ-OPS-2.010",
            "audit_area": AuditArea.OPS,
        }
    ]
    assert result.previous_occurrences == 1


async def test_lookup_is_skipped_without_organization():
    lookup = FixedCountLookup(5)
    finding = finding_input(organization_id=None, question_id="PQ-1")

    result = await calculate_severity_suggestion(
        finding, repetition_lookup=lookup
    )

    assert lookup.calls == []
    assert result.is_repeat is False
    assert "repeat_finding" not in factor_ids(result.factors)


async def test_lookup_is_skipped_when_disabled():
    lookup = FixedCountLookup(5)
    config = AssessorConfig(ENABLE_REPETITION_LOOKUP=False)

    result = await calculate_severity_suggestion(
        finding_input(question_id="PQ-1"),
        repetition_lookup=lookup,
        config=config,
    )

    assert lookup.calls == []
    assert result.previous_occurrences == 0


async def test_failing_lookup_degrades_to_no_repetition(caplog):
    caplog.set_level(logging.WARNING, logger="assessor.app.severity.calculator")
    finding = finding_input(
        description_en="Failure of separation minima in controlled airspace",
        audit_area=AuditArea.ANS,
        finding_type=FindingType.NON_CONFORMITY,
    )

    result = await calculate_severity_suggestion(
        finding, repetition_lookup=FailingLookup()
    )

    assert result.is_repeat is False
    assert result.previous_occurrences == 0
    assert result.score == 13
    assert any(
        "Could not check for repeat findings" in record.getMessage()
        for record in caplog.records
    )


# ---------------------------------------------------------------------------
# Synchronous preview
# ---------------------------------------------------------------------------

_PARITY_CASES = [
    dict(),
    dict(
        description_en="Failure of separation minima in controlled airspace",
        audit_area=AuditArea.ANS,
        finding_type=FindingType.NON_CONFORMITY,
    ),
    dict(
        description_en="Training records incomplete",
        audit_area=AuditArea.PEL,
        critical_element=CriticalElement.CE_4,
        icao_reference="Annex 1 RP 1.2",
        finding_type=FindingType.CONCERN,
    ),
    dict(
        description_fr="Procédure d'urgence non établi",
        icao_reference="Doc 9859",
        critical_element=CriticalElement.CE_8,
    ),
    dict(
        description_en="Critical failure incident",
        audit_area=AuditArea.AIG,
        finding_type=FindingType.GOOD_PRACTICE,
    ),
]


@pytest.mark.parametrize("fields", _PARITY_CASES)
async def test_preview_matches_full_evaluation_without_history(fields):
    full = await calculate_severity_suggestion(
        finding_input(**fields), repetition_lookup=FixedCountLookup(0)
    )
    preview = calculate_severity_suggestion_sync(preview_input(**fields))

    assert preview.factors == full.factors
    assert preview.score == full.score
    assert preview.suggested is full.suggested
    assert preview.confidence is full.confidence


async def test_preview_omits_standard_area_by_default():
    fields = dict(audit_area=AuditArea.LEG, finding_type=FindingType.CONCERN)

    full = await calculate_severity_suggestion(finding_input(**fields))
    preview = calculate_severity_suggestion_sync(preview_input(**fields))

    assert factor_ids(full.factors) == ["standard_area", "type_concern"]
    assert factor_ids(preview.factors) == ["type_concern"]
    assert preview.score == full.score - 1


def test_preview_scores_standard_area_when_aligned():
    config = AssessorConfig(ALIGN_PREVIEW_AREA_FACTOR=True)

    preview = calculate_severity_suggestion_sync(
        preview_input(audit_area=AuditArea.LEG), config=config
    )

    assert factor_ids(preview.factors) == ["standard_area"]
    assert preview.score == 1


def test_preview_ignores_organization_context():
    preview = calculate_severity_suggestion_sync(
        finding_input(description_en="Unsafe condition", question_id="PQ-1")
    )

    assert not hasattr(preview, "is_repeat")
    assert factor_ids(preview.factors) == ["critical_keywords"]


# ---------------------------------------------------------------------------
# Good practice with history
# ---------------------------------------------------------------------------

async def test_good_practice_ignores_repeat_history():
    lookup = FixedCountLookup(3)
    finding = finding_input(
        description_en="Critical failure incident",
        finding_type=FindingType.GOOD_PRACTICE,
        question_id="PQ-1",
    )

    result = await calculate_severity_suggestion(
        finding, repetition_lookup=lookup
    )

    assert factor_ids(result.factors) == ["type_good_practice"]
    assert result.factors[0].points == 0
    assert result.score == 0
    assert result.suggested is Severity.OBSERVATION
    assert result.is_repeat is True
    assert result.previous_occurrences == 3


# ---------------------------------------------------------------------------
# Adding a critical keyword
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "description, extra",
    [
        ("", {}),
        ("Training records incomplete", {}),
        ("Deficiency found", {"audit_area": AuditArea.PEL}),
        ("Partial documentation update required", {}),
        (
            "Failure of separation minima in controlled airspace",
            {
                "audit_area": AuditArea.ANS,
                "finding_type": FindingType.NON_CONFORMITY,
            },
        ),
        ("Critical failure incident", {"finding_type": FindingType.GOOD_PRACTICE}),
    ],
)
async def test_critical_keyword_never_lowers_score(description, extra):
    lookup = FixedCountLookup(2)

    before = await calculate_severity_suggestion(
        finding_input(description_en=description, question_id="PQ-1", **extra),
        repetition_lookup=lookup,
    )
    after = await calculate_severity_suggestion(
        finding_input(
            description_en=f"{description} unsafe condition",
            question_id="PQ-1",
            **extra,
        ),
        repetition_lookup=lookup,
    )

    assert after.score >= before.score
