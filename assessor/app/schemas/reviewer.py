"""
Reviewer matching schemas.

Defines reviewer profiles, matching criteria and the scored results the
matcher produces. Profiles are snapshots supplied by the caller; the
matcher never loads or persists reviewer data.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, ConfigDict


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ExpertiseArea(str, Enum):
    ATS = "ATS"
    AIM = "AIM"
    CNS = "CNS"
    MET = "MET"
    SAR = "SAR"
    PANS_OPS = "PANS_OPS"
    SMS = "SMS"
    SSP = "SSP"
    HUMAN_FACTORS = "HUMAN_FACTORS"
    TRAINING = "TRAINING"
    AERODROME = "AERODROME"
    QUALITY_MANAGEMENT = "QUALITY_MANAGEMENT"


class ProficiencyLevel(str, Enum):
    BASIC = "BASIC"
    COMPETENT = "COMPETENT"
    PROFICIENT = "PROFICIENT"
    EXPERT = "EXPERT"


class Language(str, Enum):
    EN = "EN"
    FR = "FR"
    ES = "ES"
    PT = "PT"
    AR = "AR"
    RU = "RU"
    ZH = "ZH"


class LanguageProficiency(str, Enum):
    BASIC = "BASIC"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    NATIVE = "NATIVE"


class AvailabilityType(str, Enum):
    AVAILABLE = "AVAILABLE"
    TENTATIVE = "TENTATIVE"
    UNAVAILABLE = "UNAVAILABLE"
    ON_ASSIGNMENT = "ON_ASSIGNMENT"


class COIType(str, Enum):
    """Declared conflict-of-interest types."""

    # Legacy types
    EMPLOYMENT = "EMPLOYMENT"
    FINANCIAL = "FINANCIAL"
    CONTRACTUAL = "CONTRACTUAL"
    PERSONAL = "PERSONAL"
    PREVIOUS_REVIEW = "PREVIOUS_REVIEW"

    # Current types
    HOME_ORGANIZATION = "HOME_ORGANIZATION"
    FAMILY_RELATIONSHIP = "FAMILY_RELATIONSHIP"
    FORMER_EMPLOYEE = "FORMER_EMPLOYEE"
    BUSINESS_INTEREST = "BUSINESS_INTEREST"
    RECENT_REVIEW = "RECENT_REVIEW"
    OTHER = "OTHER"


COISeverity = Literal["HARD", "SOFT"]
TeamBalance = Literal["GOOD", "FAIR", "POOR"]


# ---------------------------------------------------------------------------
# Reviewer profile (INPUT)
# ---------------------------------------------------------------------------


class ExpertiseRecord(BaseModel):
    area: ExpertiseArea
    proficiency_level: ProficiencyLevel
    years_experience: int = Field(0, ge=0)

    model_config = ConfigDict(frozen=True, extra="forbid")


class LanguageRecord(BaseModel):
    language: Language
    proficiency: LanguageProficiency
    can_conduct_interviews: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")


class AvailabilitySlot(BaseModel):
    start_date: date
    end_date: date
    availability_type: AvailabilityType
    notes: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="forbid")


class ConflictOfInterest(BaseModel):
    organization_id: str
    coi_type: COIType

    model_config = ConfigDict(frozen=True, extra="forbid")


class ReviewerProfile(BaseModel):
    """
    Snapshot of a reviewer's qualifications used for matching.
    """

    id: str = Field(..., description="Reviewer profile identifier")
    user_id: str = Field(..., description="Identifier of the reviewer's user")
    full_name: str

    home_organization_id: str
    home_organization_name: str
    home_organization_code: Optional[str] = None

    expertise: List[ExpertiseRecord] = Field(default_factory=list)
    languages: List[LanguageRecord] = Field(default_factory=list)
    availability: List[AvailabilitySlot] = Field(default_factory=list)
    conflicts: List[ConflictOfInterest] = Field(default_factory=list)

    years_experience: int = Field(0, ge=0)
    reviews_completed: int = Field(0, ge=0)
    is_lead_qualified: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def organization_label(self) -> str:
        if self.home_organization_code:
            return (
                f"{self.home_organization_name} "
                f"({self.home_organization_code})"
            )
        return self.home_organization_name


class MatchingCriteria(BaseModel):
    target_organization_id: str
    required_expertise: List[ExpertiseArea] = Field(default_factory=list)
    preferred_expertise: List[ExpertiseArea] = Field(default_factory=list)
    required_languages: List[Language] = Field(default_factory=list)
    review_start_date: date
    review_end_date: date
    team_size: int = Field(3, ge=1)
    must_include_reviewer_ids: List[str] = Field(default_factory=list)
    exclude_reviewer_ids: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Component score results
# ---------------------------------------------------------------------------


class ExpertiseScoreResult(BaseModel):
    score: float
    max_score: float
    matched_required: List[ExpertiseArea] = Field(default_factory=list)
    matched_preferred: List[ExpertiseArea] = Field(default_factory=list)
    missing_required: List[ExpertiseArea] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")


class LanguageScoreResult(BaseModel):
    score: float
    max_score: float
    matched_languages: List[Language] = Field(default_factory=list)
    missing_languages: List[Language] = Field(default_factory=list)
    can_conduct_review: bool = True

    model_config = ConfigDict(frozen=True, extra="forbid")


class AvailabilityScoreResult(BaseModel):
    score: float
    max_score: float
    available_days: float
    total_days: int
    coverage: float
    conflicts: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")


class ExperienceScoreResult(BaseModel):
    score: float
    max_score: float
    years_bonus: float
    reviews_bonus: float

    model_config = ConfigDict(frozen=True, extra="forbid")


class TotalScoreBreakdown(BaseModel):
    expertise_score: float
    language_score: float
    availability_score: float
    experience_score: float
    total_score: float
    max_possible_score: float
    percentage: int

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Match and team results
# ---------------------------------------------------------------------------


class COIStatus(BaseModel):
    has_conflict: bool
    severity: Optional[COISeverity] = None
    coi_type: Optional[COIType] = None
    reason: Optional[str] = None
    is_waivable: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")


class AvailabilityStatus(BaseModel):
    is_available: bool
    available_days: float
    total_days: int
    coverage: float
    conflicts: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")


class EligibilityResult(BaseModel):
    is_eligible: bool
    reason: Optional[str] = None
    reason_fr: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="forbid")


class ScoreBreakdown(BaseModel):
    expertise_score: float
    language_score: float
    availability_score: float
    experience_score: float

    model_config = ConfigDict(frozen=True, extra="forbid")


class MatchResult(BaseModel):
    """
    Scored assessment of one reviewer against matching criteria.
    """

    reviewer_id: str
    reviewer_profile_id: str
    full_name: str
    organization: str
    organization_id: str

    score: float
    max_score: float
    percentage: int
    breakdown: ScoreBreakdown

    expertise_details: ExpertiseScoreResult
    language_details: LanguageScoreResult
    availability_details: AvailabilityScoreResult
    experience_details: ExperienceScoreResult

    coi_status: COIStatus
    availability_status: AvailabilityStatus
    warnings: List[str] = Field(default_factory=list)

    is_eligible: bool
    ineligibility_reason: Optional[str] = None
    ineligibility_reason_fr: Optional[str] = None
    is_lead_qualified: bool
    reviews_completed: int

    model_config = ConfigDict(frozen=True, extra="forbid")


class CoverageReport(BaseModel):
    expertise_covered: List[ExpertiseArea] = Field(default_factory=list)
    expertise_missing: List[ExpertiseArea] = Field(default_factory=list)
    expertise_coverage: float
    languages_covered: List[Language] = Field(default_factory=list)
    languages_missing: List[Language] = Field(default_factory=list)
    language_coverage: float
    has_lead_qualified: bool
    team_balance: TeamBalance

    model_config = ConfigDict(frozen=True, extra="forbid")


class TeamBuildResult(BaseModel):
    team: List[MatchResult] = Field(default_factory=list)
    coverage_report: CoverageReport
    total_score: float
    average_score: float
    warnings: List[str] = Field(default_factory=list)
    is_viable: bool

    model_config = ConfigDict(frozen=True, extra="forbid")


class AssignmentCheck(BaseModel):
    can_assign: bool
    reasons: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# HTTP request bodies
# ---------------------------------------------------------------------------


class MatchRequest(BaseModel):
    criteria: MatchingCriteria
    reviewers: List[ReviewerProfile] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")


class TeamRequest(MatchRequest):
    """
    Team assembly request.

    Candidates are scored from `reviewers` before the team is built.
    """
