"""
Reviewer matching component scores.

Each function scores one dimension of a reviewer's fit for a review:

    expertise     max 40
    language      max 25
    availability  max 25
    experience    max 10

Scores are rounded half-up to one decimal place so that totals are
stable across platforms.
"""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from assessor.app.matching.constants import (
    AVAILABILITY_MAX,
    EXPERIENCE_MAX,
    EXPERTISE_MAX,
    EXPERTISE_PREFERRED_MAX,
    EXPERTISE_REQUIRED_MAX,
    LANGUAGE_MAX,
    LANGUAGE_PROFICIENCY_BONUS,
    MAX_POSSIBLE_SCORE,
    MIN_REVIEWS_FOR_LEAD,
    MIN_YEARS_EXPERIENCE,
    PROFICIENCY_MULTIPLIERS,
    REVIEW_CAPABLE_LANGUAGE_LEVELS,
)
from assessor.app.schemas.reviewer import (
    AvailabilityScoreResult,
    AvailabilitySlot,
    AvailabilityType,
    ExperienceScoreResult,
    ExpertiseArea,
    ExpertiseRecord,
    ExpertiseScoreResult,
    Language,
    LanguageRecord,
    LanguageScoreResult,
    TotalScoreBreakdown,
)


def round_half_up(value: float, places: int = 1) -> float:
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


# ---------------------------------------------------------------------------
# Expertise (max 40)
# ---------------------------------------------------------------------------

def score_expertise(
    reviewer_expertise: Iterable[ExpertiseRecord],
    required: Sequence[ExpertiseArea],
    preferred: Optional[Sequence[ExpertiseArea]] = None,
) -> ExpertiseScoreResult:
    """
    Score reviewer expertise against required and preferred areas.

    Required areas share 30 points, preferred areas (not already
    required) share 10 points; each area's share is scaled by the
    reviewer's proficiency multiplier. Both parts are capped. With no
    required areas the reviewer receives the full 40.
    """
    preferred = list(preferred or [])

    if not required:
        return ExpertiseScoreResult(score=EXPERTISE_MAX, max_score=EXPERTISE_MAX)

    levels = {record.area: record.proficiency_level for record in reviewer_expertise}

    matched_required: List[ExpertiseArea] = []
    missing_required: List[ExpertiseArea] = []
    required_score = 0.0
    per_required = EXPERTISE_REQUIRED_MAX / len(required)

    for area in required:
        level = levels.get(area)
        if level is None:
            missing_required.append(area)
            continue
        matched_required.append(area)
        required_score += per_required * PROFICIENCY_MULTIPLIERS.get(level, 1.0)

    required_score = min(required_score, EXPERTISE_REQUIRED_MAX)

    matched_preferred: List[ExpertiseArea] = []
    preferred_score = 0.0
    if preferred:
        per_preferred = EXPERTISE_PREFERRED_MAX / len(preferred)
        for area in preferred:
            if area in required:
                continue
            level = levels.get(area)
            if level is None:
                continue
            matched_preferred.append(area)
            preferred_score += per_preferred * PROFICIENCY_MULTIPLIERS.get(level, 1.0)

    preferred_score = min(preferred_score, EXPERTISE_PREFERRED_MAX)

    total = min(required_score + preferred_score, EXPERTISE_MAX)

    return ExpertiseScoreResult(
        score=round_half_up(total),
        max_score=EXPERTISE_MAX,
        matched_required=matched_required,
        matched_preferred=matched_preferred,
        missing_required=missing_required,
    )


# ---------------------------------------------------------------------------
# Language (max 25)
# ---------------------------------------------------------------------------

def can_conduct_review_in(record: LanguageRecord) -> bool:
    return record.proficiency in REVIEW_CAPABLE_LANGUAGE_LEVELS


def score_language(
    reviewer_languages: Iterable[LanguageRecord],
    required: Sequence[Language],
) -> LanguageScoreResult:
    """
    Score reviewer languages against the review's working languages.

    Per required language: 60% for speaking it, up to 25% more by
    proficiency, 15% more if the reviewer can conduct interviews in it.
    """
    if not required:
        return LanguageScoreResult(score=LANGUAGE_MAX, max_score=LANGUAGE_MAX)

    by_language: Dict[Language, LanguageRecord] = {
        record.language: record for record in reviewer_languages
    }

    matched: List[Language] = []
    missing: List[Language] = []
    total = 0.0
    can_conduct = True
    per_language = LANGUAGE_MAX / len(required)

    for language in required:
        record = by_language.get(language)
        if record is None:
            missing.append(language)
            can_conduct = False
            continue

        matched.append(language)

        points = per_language * 0.6
        points += per_language * 0.25 * LANGUAGE_PROFICIENCY_BONUS.get(
            record.proficiency, 0.5
        )
        if record.can_conduct_interviews:
            points += per_language * 0.15
        total += points

        if not can_conduct_review_in(record):
            can_conduct = False

    return LanguageScoreResult(
        score=round_half_up(min(total, LANGUAGE_MAX)),
        max_score=LANGUAGE_MAX,
        matched_languages=matched,
        missing_languages=missing,
        can_conduct_review=can_conduct,
    )


# ---------------------------------------------------------------------------
# Availability (max 25)
# ---------------------------------------------------------------------------

def days_between(start: date, end: date) -> int:
    """Number of calendar days in the period, both ends included."""
    return abs((end - start).days) + 1


def _iter_days(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def score_availability(
    slots: Iterable[AvailabilitySlot],
    start_date: date,
    end_date: date,
) -> AvailabilityScoreResult:
    """
    Score reviewer availability over the review period.

    Days without a slot count as unavailable. Where slots overlap, the
    later slot wins. AVAILABLE days count fully, TENTATIVE days count
    half. ON_ASSIGNMENT notes are reported as conflicts.
    """
    total_days = days_between(start_date, end_date)

    day_status: Dict[date, AvailabilityType] = {
        day: AvailabilityType.UNAVAILABLE
        for day in _iter_days(start_date, end_date)
    }
    conflicts: List[str] = []

    for slot in slots:
        if slot.end_date < start_date or slot.start_date > end_date:
            continue

        overlap_start = max(slot.start_date, start_date)
        overlap_end = min(slot.end_date, end_date)

        for day in _iter_days(overlap_start, overlap_end):
            day_status[day] = slot.availability_type
            if (
                slot.availability_type is AvailabilityType.ON_ASSIGNMENT
                and slot.notes
            ):
                conflicts.append(slot.notes)

    available_days = 0.0
    for status in day_status.values():
        if status is AvailabilityType.AVAILABLE:
            available_days += 1.0
        elif status is AvailabilityType.TENTATIVE:
            available_days += 0.5

    coverage = available_days / total_days
    score = round_half_up(coverage * AVAILABILITY_MAX)

    return AvailabilityScoreResult(
        score=min(score, AVAILABILITY_MAX),
        max_score=AVAILABILITY_MAX,
        available_days=round_half_up(available_days),
        total_days=total_days,
        coverage=round_half_up(coverage, 2),
        conflicts=list(dict.fromkeys(conflicts)),
    )


# ---------------------------------------------------------------------------
# Experience (max 10)
# ---------------------------------------------------------------------------

def _years_bonus(years: int) -> float:
    if years >= 15:
        return 5.0
    if years >= 10:
        return 3.0
    if years >= MIN_YEARS_EXPERIENCE:
        return 1 + ((years - 5) / 5) * 2
    return 0.0


def _reviews_bonus(reviews: int) -> float:
    if reviews >= 10:
        return 5.0
    if reviews >= 5:
        return 3.0
    if reviews >= MIN_REVIEWS_FOR_LEAD:
        return 1 + ((reviews - 2) / 3) * 2
    if reviews > 0:
        return reviews * 0.5
    return 0.0


def score_experience(
    years_in_aviation: int,
    reviews_completed: int,
) -> ExperienceScoreResult:
    years_bonus = min(_years_bonus(years_in_aviation), 5.0)
    reviews_bonus = min(_reviews_bonus(reviews_completed), 5.0)
    total = round_half_up(years_bonus + reviews_bonus)

    return ExperienceScoreResult(
        score=min(total, EXPERIENCE_MAX),
        max_score=EXPERIENCE_MAX,
        years_bonus=round_half_up(years_bonus),
        reviews_bonus=round_half_up(reviews_bonus),
    )


# ---------------------------------------------------------------------------
# Total
# ---------------------------------------------------------------------------

def calculate_total_score(
    expertise: ExpertiseScoreResult,
    language: LanguageScoreResult,
    availability: AvailabilityScoreResult,
    experience: ExperienceScoreResult,
) -> TotalScoreBreakdown:
    total = (
        expertise.score
        + language.score
        + availability.score
        + experience.score
    )

    return TotalScoreBreakdown(
        expertise_score=expertise.score,
        language_score=language.score,
        availability_score=availability.score,
        experience_score=experience.score,
        total_score=round_half_up(total),
        max_possible_score=MAX_POSSIBLE_SCORE,
        percentage=int(math.floor(total / MAX_POSSIBLE_SCORE * 100 + 0.5)),
    )
