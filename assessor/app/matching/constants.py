"""
Reviewer matching weights and qualification thresholds.
"""

from __future__ import annotations

from typing import Dict

from assessor.app.schemas.reviewer import (
    COIType,
    LanguageProficiency,
    ProficiencyLevel,
)


# ---------------------------------------------------------------------------
# Component maxima (sum to 100)
# ---------------------------------------------------------------------------

EXPERTISE_MAX = 40.0
EXPERTISE_REQUIRED_MAX = 30.0
EXPERTISE_PREFERRED_MAX = 10.0

LANGUAGE_MAX = 25.0
AVAILABILITY_MAX = 25.0
EXPERIENCE_MAX = 10.0

MAX_POSSIBLE_SCORE = 100.0


# ---------------------------------------------------------------------------
# Qualification thresholds
# ---------------------------------------------------------------------------

MIN_YEARS_EXPERIENCE = 5
MIN_REVIEWS_FOR_LEAD = 2

# Coverage required for a reviewer to be considered available.
AVAILABLE_COVERAGE = 0.8


# ---------------------------------------------------------------------------
# Multipliers
# ---------------------------------------------------------------------------

PROFICIENCY_MULTIPLIERS: Dict[ProficiencyLevel, float] = {
    ProficiencyLevel.BASIC: 0.6,
    ProficiencyLevel.COMPETENT: 0.8,
    ProficiencyLevel.PROFICIENT: 1.0,
    ProficiencyLevel.EXPERT: 1.2,
}

LANGUAGE_PROFICIENCY_BONUS: Dict[LanguageProficiency, float] = {
    LanguageProficiency.BASIC: 0.25,
    LanguageProficiency.INTERMEDIATE: 0.5,
    LanguageProficiency.ADVANCED: 0.8,
    LanguageProficiency.NATIVE: 1.0,
}

REVIEW_CAPABLE_LANGUAGE_LEVELS = frozenset(
    {
        LanguageProficiency.INTERMEDIATE,
        LanguageProficiency.ADVANCED,
        LanguageProficiency.NATIVE,
    }
)


# ---------------------------------------------------------------------------
# Conflicts of interest
# ---------------------------------------------------------------------------

HARD_CONFLICT_TYPES = frozenset(
    {COIType.HOME_ORGANIZATION, COIType.FAMILY_RELATIONSHIP}
)

CONFLICT_REASONS: Dict[COIType, str] = {
    COIType.EMPLOYMENT: "Employment relationship",
    COIType.FINANCIAL: "Financial interest",
    COIType.CONTRACTUAL: "Contractual relationship",
    COIType.PERSONAL: "Personal relationship",
    COIType.PREVIOUS_REVIEW: "Previously reviewed",
    COIType.HOME_ORGANIZATION: "Current employer",
    COIType.FAMILY_RELATIONSHIP: "Family relationship",
    COIType.FORMER_EMPLOYEE: "Former employee",
    COIType.BUSINESS_INTEREST: "Business interest",
    COIType.RECENT_REVIEW: "Recently reviewed this organization",
    COIType.OTHER: "Other declared conflict",
}


# ---------------------------------------------------------------------------
# Team building
# ---------------------------------------------------------------------------

TEAM_BASE_SCORE_WEIGHT = 0.7
TEAM_COVERAGE_WEIGHT = 0.3

NEW_EXPERTISE_VALUE = 10
NEW_LANGUAGE_VALUE = 8
FIRST_LEAD_VALUE = 15
