"""
Severity suggestion entry points.

Two variants are exposed:

- `calculate_severity_suggestion` (async): full evaluation, including the
  repetition lookup against prior findings of the organization.
- `calculate_severity_suggestion_sync`: no repetition lookup and no
  suspension points, for live form feedback.

IMPORTANT:
- Suggestions are advisory. The reviewer sets the final severity.
- A failing repetition lookup MUST NOT fail the evaluation. It degrades
  to "no repetition data" and is logged as a warning.
"""

from __future__ import annotations

import logging
from typing import Optional

from assessor.app.config import AssessorConfig
from assessor.app.schemas.findings import (
    FindingInput,
    FindingType,
    SeverityPreviewInput,
)
from assessor.app.schemas.severity import (
    FactorCategory,
    SeverityFactor,
    SeverityPreview,
    SeveritySuggestion,
)
from assessor.app.severity.classifier import classify
from assessor.app.severity.factors import evaluate_factors
from assessor.app.severity.repetition import (
    NullRepetitionLookup,
    RepetitionLookup,
)

logger = logging.getLogger(__name__)


REPETITION_CAP = 4


def repetition_factor(previous_occurrences: int) -> Optional[SeverityFactor]:
    if previous_occurrences <= 0:
        return None

    return SeverityFactor(
        id="repeat_finding",
        description=(
            f"Repeat finding: {previous_occurrences} similar issue(s) "
            "found in organization history"
        ),
        description_fr=(
            f"Constatation répétée: {previous_occurrences} problème(s) "
            "similaire(s) trouvé(s) dans l'historique de l'organisation"
        ),
        points=min(previous_occurrences * 2, REPETITION_CAP),
        category=FactorCategory.REPETITION,
    )


async def _count_previous_occurrences(
    finding: FindingInput,
    lookup: RepetitionLookup,
) -> int:
    """
    Query the repetition lookup, mapping any failure to zero.
    """
    try:
        return await lookup.find_similar_open_findings(
            finding.organization_id,
            finding.review_id,
            question_id=finding.question_id,
            audit_area=finding.audit_area,
        )
    except Exception as exc:
        logger.warning(
            "Could not check for repeat findings "
            "(organization=%s, review=%s): %s",
            finding.organization_id,
            finding.review_id,
            exc,
        )
        return 0


async def calculate_severity_suggestion(
    finding: FindingInput,
    *,
    repetition_lookup: Optional[RepetitionLookup] = None,
    config: Optional[AssessorConfig] = None,
) -> SeveritySuggestion:
    """
    Suggest a severity for a finding, including repetition history.

    The lookup is consulted only when the finding carries an
    organization identifier and repetition lookup is enabled.
    """
    config = config or AssessorConfig()
    lookup = repetition_lookup or NullRepetitionLookup()

    factors = evaluate_factors(finding, include_standard_area=True)

    previous_occurrences = 0
    if finding.organization_id and config.ENABLE_REPETITION_LOOKUP:
        previous_occurrences = await _count_previous_occurrences(
            finding, lookup
        )

    # Good practices stay at a single zero-point factor; history is still
    # reported through is_repeat and previous_occurrences.
    repeat = repetition_factor(previous_occurrences)
    if (
        repeat is not None
        and finding.finding_type is not FindingType.GOOD_PRACTICE
    ):
        factors.append(repeat)

    suggested, confidence, score = classify(factors, finding.finding_type)

    logger.debug(
        "Severity suggestion: %s (score=%d, confidence=%s, repeat=%d)",
        suggested.value,
        score,
        confidence.value,
        previous_occurrences,
    )

    return SeveritySuggestion(
        suggested=suggested,
        confidence=confidence,
        factors=factors,
        score=score,
        is_repeat=previous_occurrences > 0,
        previous_occurrences=previous_occurrences,
    )


def calculate_severity_suggestion_sync(
    finding: SeverityPreviewInput,
    *,
    config: Optional[AssessorConfig] = None,
) -> SeverityPreview:
    """
    Suggest a severity without consulting finding history.

    Audit areas outside the safety-critical and high-risk tiers score
    nothing here unless ALIGN_PREVIEW_AREA_FACTOR is enabled.
    """
    config = config or AssessorConfig()

    if isinstance(finding, FindingInput):
        finding = finding.without_org_context()

    factors = evaluate_factors(
        finding,
        include_standard_area=config.ALIGN_PREVIEW_AREA_FACTOR,
    )
    suggested, confidence, score = classify(factors, finding.finding_type)

    return SeverityPreview(
        suggested=suggested,
        confidence=confidence,
        factors=factors,
        score=score,
    )
