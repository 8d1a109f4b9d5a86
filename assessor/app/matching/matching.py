"""
Reviewer matching and team building.

Ranks reviewers for a peer review on expertise, language, availability
and experience, screens them for conflicts of interest, and assembles a
team greedily so that each pick adds coverage the team still lacks.

IMPORTANT:
- Matching is advisory. Programme coordinators confirm assignments.
- Reviewers from the target organization are never proposed.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Set

from assessor.app.config import AssessorConfig
from assessor.app.matching.constants import (
    AVAILABLE_COVERAGE,
    CONFLICT_REASONS,
    FIRST_LEAD_VALUE,
    HARD_CONFLICT_TYPES,
    NEW_EXPERTISE_VALUE,
    NEW_LANGUAGE_VALUE,
    TEAM_BASE_SCORE_WEIGHT,
    TEAM_COVERAGE_WEIGHT,
)
from assessor.app.matching.scoring import (
    calculate_total_score,
    round_half_up,
    score_availability,
    score_experience,
    score_expertise,
    score_language,
)
from assessor.app.schemas.reviewer import (
    AssignmentCheck,
    AvailabilityStatus,
    COIStatus,
    COIType,
    ConflictOfInterest,
    CoverageReport,
    EligibilityResult,
    ExpertiseArea,
    ExpertiseScoreResult,
    Language,
    LanguageScoreResult,
    MatchingCriteria,
    MatchResult,
    ReviewerProfile,
    ScoreBreakdown,
    TeamBuildResult,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Conflicts of interest
# ---------------------------------------------------------------------------

def check_coi_status(
    conflicts: Iterable[ConflictOfInterest],
    target_organization_id: str,
    home_organization_id: str,
) -> COIStatus:
    """
    Determine the conflict-of-interest status against the target.

    The home organization is always a hard, non-waivable conflict.
    Otherwise the first declared conflict for the target decides.
    """
    if home_organization_id == target_organization_id:
        return COIStatus(
            has_conflict=True,
            severity="HARD",
            coi_type=COIType.HOME_ORGANIZATION,
            reason="Home organization",
            is_waivable=False,
        )

    for coi in conflicts:
        if coi.organization_id != target_organization_id:
            continue

        is_hard = coi.coi_type in HARD_CONFLICT_TYPES
        return COIStatus(
            has_conflict=True,
            severity="HARD" if is_hard else "SOFT",
            coi_type=coi.coi_type,
            reason=CONFLICT_REASONS.get(coi.coi_type, "Conflict of interest"),
            is_waivable=not is_hard,
        )

    return COIStatus(has_conflict=False)


_HARD_COI_REASONS = {
    COIType.HOME_ORGANIZATION: (
        "Works at target organization",
        "Travaille pour l'organisation cible",
    ),
    COIType.FAMILY_RELATIONSHIP: (
        "Has family member at target organization",
        "A un membre de la famille dans l'organisation cible",
    ),
    COIType.FORMER_EMPLOYEE: (
        "Former employee of target organization",
        "Ancien employé de l'organisation cible",
    ),
    COIType.RECENT_REVIEW: (
        "Recently reviewed this organization",
        "A récemment évalué cette organisation",
    ),
}


def determine_eligibility(
    coi_status: COIStatus,
    expertise: ExpertiseScoreResult,
    language: LanguageScoreResult,
    availability: AvailabilityStatus,
) -> EligibilityResult:
    """
    Decide whether a reviewer may be assigned, with a bilingual reason.

    Checks run in order: hard COI, expertise coverage below 50%,
    language capability, availability below 50%.
    """
    if coi_status.has_conflict and coi_status.severity == "HARD":
        reason, reason_fr = _HARD_COI_REASONS.get(
            coi_status.coi_type,
            (
                "Conflict of interest with target organization",
                "Conflit d'intérêts avec l'organisation cible",
            ),
        )
        return EligibilityResult(
            is_eligible=False, reason=reason, reason_fr=reason_fr
        )

    considered = len(expertise.matched_required) + len(expertise.missing_required)
    coverage = len(expertise.matched_required) / (considered or 1)
    if considered and coverage < 0.5:
        return EligibilityResult(
            is_eligible=False,
            reason="Insufficient expertise match",
            reason_fr="Expertise insuffisante",
        )

    if not language.can_conduct_review and language.missing_languages:
        return EligibilityResult(
            is_eligible=False,
            reason="Cannot conduct review in required languages",
            reason_fr="Ne peut pas effectuer la revue dans les langues requises",
        )

    if availability.coverage < 0.5:
        return EligibilityResult(
            is_eligible=False,
            reason="Unavailable during review period",
            reason_fr="Indisponible pendant la période de revue",
        )

    return EligibilityResult(is_eligible=True)


# ---------------------------------------------------------------------------
# Single reviewer
# ---------------------------------------------------------------------------

def calculate_match_score(
    reviewer: ReviewerProfile,
    criteria: MatchingCriteria,
) -> MatchResult:
    expertise = score_expertise(
        reviewer.expertise,
        criteria.required_expertise,
        criteria.preferred_expertise,
    )
    language = score_language(reviewer.languages, criteria.required_languages)
    availability = score_availability(
        reviewer.availability,
        criteria.review_start_date,
        criteria.review_end_date,
    )
    experience = score_experience(
        reviewer.years_experience,
        reviewer.reviews_completed,
    )
    total = calculate_total_score(expertise, language, availability, experience)

    coi_status = check_coi_status(
        reviewer.conflicts,
        criteria.target_organization_id,
        reviewer.home_organization_id,
    )

    availability_status = AvailabilityStatus(
        is_available=availability.coverage >= AVAILABLE_COVERAGE,
        available_days=availability.available_days,
        total_days=availability.total_days,
        coverage=availability.coverage,
        conflicts=availability.conflicts,
    )

    warnings: List[str] = []
    if coi_status.has_conflict:
        label = "Hard COI" if coi_status.severity == "HARD" else "Soft COI"
        warnings.append(f"{label}: {coi_status.reason}")

    if expertise.missing_required:
        warnings.append(
            "Missing expertise: "
            + ", ".join(a.value for a in expertise.missing_required)
        )

    if language.missing_languages:
        warnings.append(
            "Missing languages: "
            + ", ".join(lang.value for lang in language.missing_languages)
        )

    if not availability_status.is_available:
        warnings.append(
            f"Low availability: "
            f"{int(round_half_up(availability_status.coverage * 100, 0))}%"
        )

    if not language.can_conduct_review:
        warnings.append("Cannot conduct review in required languages")

    eligibility = determine_eligibility(
        coi_status, expertise, language, availability_status
    )

    return MatchResult(
        reviewer_id=reviewer.user_id,
        reviewer_profile_id=reviewer.id,
        full_name=reviewer.full_name,
        organization=reviewer.organization_label,
        organization_id=reviewer.home_organization_id,
        score=total.total_score,
        max_score=total.max_possible_score,
        percentage=total.percentage,
        breakdown=ScoreBreakdown(
            expertise_score=total.expertise_score,
            language_score=total.language_score,
            availability_score=total.availability_score,
            experience_score=total.experience_score,
        ),
        expertise_details=expertise,
        language_details=language,
        availability_details=availability,
        experience_details=experience,
        coi_status=coi_status,
        availability_status=availability_status,
        warnings=warnings,
        is_eligible=eligibility.is_eligible,
        ineligibility_reason=eligibility.reason,
        ineligibility_reason_fr=eligibility.reason_fr,
        is_lead_qualified=reviewer.is_lead_qualified,
        reviews_completed=reviewer.reviews_completed,
    )


def find_matching_reviewers(
    criteria: MatchingCriteria,
    reviewers: Iterable[ReviewerProfile],
) -> List[MatchResult]:
    """
    Score and rank every candidate reviewer.

    Excluded reviewers and reviewers from the target organization are
    skipped. Eligible reviewers come first, then by score descending.
    """
    excluded = set(criteria.exclude_reviewer_ids)
    results: List[MatchResult] = []

    for reviewer in reviewers:
        if reviewer.id in excluded:
            continue
        if reviewer.home_organization_id == criteria.target_organization_id:
            continue
        results.append(calculate_match_score(reviewer, criteria))

    results.sort(key=lambda r: (not r.is_eligible, -r.score))

    logger.info(
        "Matched %d reviewer(s) for organization %s (%d eligible)",
        len(results),
        criteria.target_organization_id,
        sum(1 for r in results if r.is_eligible),
    )
    return results


# ---------------------------------------------------------------------------
# Team building
# ---------------------------------------------------------------------------

def _team_coverage(team: Sequence[MatchResult]):
    expertise: Set[ExpertiseArea] = set()
    languages: Set[Language] = set()
    has_lead = False
    for member in team:
        expertise.update(member.expertise_details.matched_required)
        languages.update(member.language_details.matched_languages)
        has_lead = has_lead or member.is_lead_qualified
    return expertise, languages, has_lead


def select_next_team_member(
    team: Sequence[MatchResult],
    candidates: Sequence[MatchResult],
) -> Optional[MatchResult]:
    """
    Pick the candidate adding the most value to the current team.

    Value blends the candidate's own score with the coverage it adds:
    new required expertise, new languages, and a first lead reviewer.
    Ties keep candidate order.
    """
    if not candidates:
        return None

    covered_expertise, covered_languages, has_lead = _team_coverage(team)

    best: Optional[MatchResult] = None
    best_value = float("-inf")

    for candidate in candidates:
        added = 0
        for area in candidate.expertise_details.matched_required:
            if area not in covered_expertise:
                added += NEW_EXPERTISE_VALUE
        for language in candidate.language_details.matched_languages:
            if language not in covered_languages:
                added += NEW_LANGUAGE_VALUE
        if not has_lead and candidate.is_lead_qualified:
            added += FIRST_LEAD_VALUE

        value = (
            candidate.score * TEAM_BASE_SCORE_WEIGHT
            + added * TEAM_COVERAGE_WEIGHT
        )
        if value > best_value:
            best, best_value = candidate, value

    return best


def generate_coverage_report(
    team: Sequence[MatchResult],
    required_expertise: Sequence[ExpertiseArea],
    required_languages: Sequence[Language],
) -> CoverageReport:
    covered_expertise: List[ExpertiseArea] = []
    covered_languages: List[Language] = []
    has_lead = False

    for member in team:
        for area in (
            list(member.expertise_details.matched_required)
            + list(member.expertise_details.matched_preferred)
        ):
            if area not in covered_expertise:
                covered_expertise.append(area)
        for language in member.language_details.matched_languages:
            if language not in covered_languages:
                covered_languages.append(language)
        has_lead = has_lead or member.is_lead_qualified

    expertise_missing = [a for a in required_expertise if a not in covered_expertise]
    languages_missing = [
        lang for lang in required_languages if lang not in covered_languages
    ]

    expertise_coverage = (
        (len(required_expertise) - len(expertise_missing)) / len(required_expertise)
        if required_expertise
        else 1.0
    )
    language_coverage = (
        (len(required_languages) - len(languages_missing)) / len(required_languages)
        if required_languages
        else 1.0
    )

    balance = "GOOD"
    if expertise_coverage < 0.8 or language_coverage < 1 or not has_lead:
        balance = "FAIR"
    if expertise_coverage < 0.5 or language_coverage < 0.5:
        balance = "POOR"

    return CoverageReport(
        expertise_covered=covered_expertise,
        expertise_missing=expertise_missing,
        expertise_coverage=round_half_up(expertise_coverage, 2),
        languages_covered=covered_languages,
        languages_missing=languages_missing,
        language_coverage=round_half_up(language_coverage, 2),
        has_lead_qualified=has_lead,
        team_balance=balance,
    )


def check_team_viability(
    team: Sequence[MatchResult],
    coverage: CoverageReport,
    required_size: int,
    *,
    min_team_size: int,
) -> bool:
    if len(team) < min_team_size:
        return False
    if len(team) < required_size * 0.8:
        return False
    if coverage.expertise_coverage < 0.5:
        return False
    if coverage.language_coverage < 0.5:
        return False
    return True


def build_optimal_team(
    criteria: MatchingCriteria,
    candidates: Sequence[MatchResult],
    *,
    config: Optional[AssessorConfig] = None,
) -> TeamBuildResult:
    """
    Assemble a review team from ranked candidates.

    Must-include reviewers are placed first regardless of eligibility.
    Remaining seats are filled greedily from eligible candidates. The
    requested size is clamped to the configured team-size bounds.
    """
    config = config or AssessorConfig()
    team_size = min(
        max(criteria.team_size, config.MATCHING_MIN_TEAM_SIZE),
        config.MATCHING_MAX_TEAM_SIZE,
    )

    warnings: List[str] = []
    team: List[MatchResult] = []

    must_include = set(criteria.must_include_reviewer_ids)
    for candidate in candidates:
        if candidate.reviewer_profile_id in must_include:
            team.append(candidate)
            if not candidate.is_eligible:
                warnings.append(
                    f"Required reviewer {candidate.full_name} "
                    "has eligibility issues"
                )

    selected = {member.reviewer_profile_id for member in team}
    pool = [
        c
        for c in candidates
        if c.is_eligible and c.reviewer_profile_id not in selected
    ]

    while len(team) < team_size and pool:
        next_member = select_next_team_member(team, pool)
        if next_member is None:
            break
        team.append(next_member)
        pool = [
            c
            for c in pool
            if c.reviewer_profile_id != next_member.reviewer_profile_id
        ]

    coverage = generate_coverage_report(
        team, criteria.required_expertise, criteria.required_languages
    )
    is_viable = check_team_viability(
        team,
        coverage,
        team_size,
        min_team_size=config.MATCHING_MIN_TEAM_SIZE,
    )

    if len(team) < team_size:
        warnings.append(
            f"Could only find {len(team)} of {team_size} required team members"
        )
    if not coverage.has_lead_qualified:
        warnings.append("Team has no lead-qualified reviewer")
    if coverage.expertise_missing:
        warnings.append(
            "Missing expertise coverage: "
            + ", ".join(a.value for a in coverage.expertise_missing)
        )
    if coverage.languages_missing:
        warnings.append(
            "Missing language coverage: "
            + ", ".join(lang.value for lang in coverage.languages_missing)
        )

    total = sum(member.score for member in team)
    average = total / len(team) if team else 0.0

    if not is_viable:
        logger.warning(
            "Team for organization %s is not viable: %s",
            criteria.target_organization_id,
            "; ".join(warnings) or "insufficient coverage",
        )

    return TeamBuildResult(
        team=team,
        coverage_report=coverage,
        total_score=round_half_up(total),
        average_score=round_half_up(average),
        warnings=warnings,
        is_viable=is_viable,
    )


# ---------------------------------------------------------------------------
# Candidate list helpers
# ---------------------------------------------------------------------------

def filter_by_min_score(
    candidates: Iterable[MatchResult],
    min_score: float,
) -> List[MatchResult]:
    return [c for c in candidates if c.score >= min_score]


def filter_eligible_only(candidates: Iterable[MatchResult]) -> List[MatchResult]:
    return [c for c in candidates if c.is_eligible]


def get_top_candidates(
    candidates: Sequence[MatchResult],
    limit: int,
) -> List[MatchResult]:
    return list(candidates[:limit])


def can_assign_reviewer(
    reviewer: ReviewerProfile,
    criteria: MatchingCriteria,
) -> AssignmentCheck:
    result = calculate_match_score(reviewer, criteria)
    if result.is_eligible:
        return AssignmentCheck(can_assign=True)
    return AssignmentCheck(can_assign=False, reasons=result.warnings)
