"""
Factor evaluation for severity suggestion.

Produces the ordered list of weighted factors for a finding, excluding
repetition (which requires the persistence layer and is appended by the
async entry point).

Evaluation order is fixed and MUST remain stable:
    1. Audit area
    2. Critical element
    3. ICAO reference type (first match only)
    4. Critical keywords
    5. Major keywords (only without critical matches)
    6. Minor keywords (informational, only without critical/major matches)
    7. Safety impact phrases
    8. Finding type

A GOOD_PRACTICE finding type discards every factor computed before it
and leaves a single informational factor. The discard happens when the
finding type is evaluated, not at entry.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from assessor.app.schemas.findings import FindingType, SeverityPreviewInput
from assessor.app.schemas.severity import FactorCategory, SeverityFactor
from assessor.app.severity.keywords import (
    CORE_CRITICAL_ELEMENTS,
    CRITICAL_KEYWORDS,
    HIGH_RISK_AREAS,
    MAJOR_KEYWORDS,
    MINOR_KEYWORDS,
    SAFETY_CRITICAL_AREAS,
    match_keywords,
    match_safety_impact,
)

logger = logging.getLogger(__name__)


CRITICAL_KEYWORD_CAP = 4
MAJOR_KEYWORD_CAP = 3
SAFETY_IMPACT_CAP = 4


def _factor(
    factor_id: str,
    description: str,
    description_fr: str,
    points: int,
    category: FactorCategory,
) -> SeverityFactor:
    return SeverityFactor(
        id=factor_id,
        description=description,
        description_fr=description_fr,
        points=points,
        category=category,
    )


def _summarize(matches: List[str], limit: int, *, ellipsis: bool) -> str:
    summary = ", ".join(matches[:limit])
    if ellipsis and len(matches) > limit:
        summary += "..."
    return summary


# ---------------------------------------------------------------------------
# Individual signals
# ---------------------------------------------------------------------------

def audit_area_factor(
    finding: SeverityPreviewInput,
    *,
    include_standard_area: bool,
) -> Optional[SeverityFactor]:
    area = finding.audit_area
    if area is None:
        return None

    if area in SAFETY_CRITICAL_AREAS:
        return _factor(
            "safety_critical_area",
            f"Safety-critical audit area: {area.value}",
            f"Zone d'audit critique pour la sécurité: {area.value}",
            3,
            FactorCategory.AREA,
        )

    if area in HIGH_RISK_AREAS:
        return _factor(
            "high_risk_area",
            f"High-risk audit area: {area.value}",
            f"Zone d'audit à haut risque: {area.value}",
            2,
            FactorCategory.AREA,
        )

    if not include_standard_area:
        return None

    return _factor(
        "standard_area",
        f"Standard audit area: {area.value}",
        f"Zone d'audit standard: {area.value}",
        1,
        FactorCategory.AREA,
    )


def critical_element_factor(
    finding: SeverityPreviewInput,
) -> Optional[SeverityFactor]:
    element = finding.critical_element
    if element is None:
        return None

    if element in CORE_CRITICAL_ELEMENTS:
        return _factor(
            "core_critical_element",
            f"Core implementation Critical Element: {element.value}",
            f"Élément critique de mise en œuvre: {element.value}",
            2,
            FactorCategory.AREA,
        )

    return _factor(
        "critical_element",
        f"Critical Element involved: {element.value}",
        f"Élément critique impliqué: {element.value}",
        1,
        FactorCategory.AREA,
    )


def icao_reference_factor(
    finding: SeverityPreviewInput,
) -> Optional[SeverityFactor]:
    """
    Classify the ICAO citation by formality.

    Checks run in strict order and only the first match applies:
    Standard, Annex, PANS/Doc, Recommended Practice, Guidance.
    """
    if not finding.icao_reference:
        return None

    ref = finding.icao_reference.upper()

    if "STANDARD" in ref or "STD" in ref or "SHALL" in ref:
        return _factor(
            "icao_standard",
            "References ICAO Standard (mandatory requirement)",
            "Référence à une Norme OACI (exigence obligatoire)",
            3,
            FactorCategory.REFERENCE,
        )

    if "ANNEX" in ref and "RP" not in ref and "RECOMMENDED" not in ref:
        return _factor(
            "icao_annex",
            "References ICAO Annex provision",
            "Référence à une disposition d'Annexe OACI",
            2,
            FactorCategory.REFERENCE,
        )

    if "PANS" in ref or "DOC" in ref:
        return _factor(
            "icao_pans",
            "References ICAO PANS/Doc requirement",
            "Référence à une exigence PANS/Doc OACI",
            2,
            FactorCategory.REFERENCE,
        )

    if "RP" in ref or "RECOMMENDED" in ref:
        return _factor(
            "icao_recommended",
            "References ICAO Recommended Practice",
            "Référence à une Pratique recommandée OACI",
            1,
            FactorCategory.REFERENCE,
        )

    if "GUIDANCE" in ref or "GM" in ref:
        return _factor(
            "icao_guidance",
            "References ICAO Guidance Material",
            "Référence à un Manuel d'orientation OACI",
            0,
            FactorCategory.REFERENCE,
        )

    return None


def keyword_factors(text: str) -> List[SeverityFactor]:
    """
    Evaluate the three keyword tiers.

    Tiers are mutually exclusive: a critical match suppresses the major
    and minor tiers, a major match suppresses the minor tier.
    """
    factors: List[SeverityFactor] = []

    critical = match_keywords(text, CRITICAL_KEYWORDS)
    if critical:
        points = min(len(critical) * 2, CRITICAL_KEYWORD_CAP)
        summary = _summarize(critical, 3, ellipsis=True)
        factors.append(
            _factor(
                "critical_keywords",
                f"Critical keywords detected: {summary}",
                f"Mots-clés critiques détectés: {summary}",
                points,
                FactorCategory.KEYWORD,
            )
        )
        return factors

    major = match_keywords(text, MAJOR_KEYWORDS)
    if major:
        points = min(len(major), MAJOR_KEYWORD_CAP)
        summary = _summarize(major, 3, ellipsis=True)
        factors.append(
            _factor(
                "major_keywords",
                f"Major keywords detected: {summary}",
                f"Mots-clés majeurs détectés: {summary}",
                points,
                FactorCategory.KEYWORD,
            )
        )
        return factors

    minor = match_keywords(text, MINOR_KEYWORDS)
    if minor:
        summary = _summarize(minor, 3, ellipsis=False)
        factors.append(
            _factor(
                "minor_keywords",
                f"Minor severity indicators: {summary}",
                f"Indicateurs de sévérité mineure: {summary}",
                0,
                FactorCategory.KEYWORD,
            )
        )

    return factors


def safety_impact_factor(text: str) -> Optional[SeverityFactor]:
    matches = match_safety_impact(text)
    if not matches:
        return None

    points = min(len(matches) * 2, SAFETY_IMPACT_CAP)
    summary = _summarize(matches, 2, ellipsis=False)
    return _factor(
        "safety_impact",
        f"Direct safety impact identified: {summary}",
        f"Impact direct sur la sécurité identifié: {summary}",
        points,
        FactorCategory.SAFETY,
    )


_TYPE_FACTORS = {
    FindingType.NON_CONFORMITY: (
        "type_non_conformity",
        "Finding type: Non-Conformity",
        "Type de constatation: Non-conformité",
        2,
    ),
    FindingType.CONCERN: (
        "type_concern",
        "Finding type: Concern",
        "Type de constatation: Préoccupation",
        1,
    ),
    FindingType.OBSERVATION: (
        "type_observation",
        "Finding type: Observation",
        "Type de constatation: Observation",
        0,
    ),
    FindingType.RECOMMENDATION: (
        "type_recommendation",
        "Finding type: Recommendation",
        "Type de constatation: Recommandation",
        0,
    ),
    FindingType.GOOD_PRACTICE: (
        "type_good_practice",
        "Good Practice - no severity applicable",
        "Bonne pratique - aucune sévérité applicable",
        0,
    ),
}


def finding_type_factor(
    finding: SeverityPreviewInput,
) -> Optional[SeverityFactor]:
    if finding.finding_type is None:
        return None

    factor_id, description, description_fr, points = _TYPE_FACTORS[
        finding.finding_type
    ]
    return _factor(
        factor_id,
        description,
        description_fr,
        points,
        FactorCategory.TYPE,
    )


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def evaluate_factors(
    finding: SeverityPreviewInput,
    *,
    include_standard_area: bool = True,
) -> List[SeverityFactor]:
    """
    Compute the ordered factor list for a finding (repetition excluded).

    `include_standard_area` controls the +1 catch-all for audit areas
    outside the safety-critical and high-risk tiers.
    """
    factors: List[SeverityFactor] = []
    text = finding.combined_text()

    area = audit_area_factor(
        finding, include_standard_area=include_standard_area
    )
    if area is not None:
        factors.append(area)

    element = critical_element_factor(finding)
    if element is not None:
        factors.append(element)

    reference = icao_reference_factor(finding)
    if reference is not None:
        factors.append(reference)

    factors.extend(keyword_factors(text))

    safety = safety_impact_factor(text)
    if safety is not None:
        factors.append(safety)

    finding_type = finding_type_factor(finding)
    if finding_type is not None:
        if finding.finding_type is FindingType.GOOD_PRACTICE:
            if factors:
                logger.debug(
                    "Good practice finding: discarding %d factor(s): %s",
                    len(factors),
                    [f.id for f in factors],
                )
            factors.clear()
        factors.append(finding_type)

    return factors
