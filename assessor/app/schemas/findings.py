"""
Finding input schema.

Defines the enumerations and the transient input structure used to
describe a review finding to the severity suggestion engine, together
with the read-only record shape of prior findings consulted for
repetition.

Inputs are caller-constructed and never persisted by this service.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field
from pydantic import ConfigDict


# ---------------------------------------------------------------------------
# Enumerations (FROZEN CONTRACTS)
# ---------------------------------------------------------------------------


class Severity(str, Enum):
    """
    Severity level of a finding.

    Ordering is intentional and MUST remain stable.
    """

    CRITICAL = "CRITICAL"
    MAJOR = "MAJOR"
    MINOR = "MINOR"
    OBSERVATION = "OBSERVATION"


class ConfidenceLevel(str, Enum):
    """
    Confidence in a severity suggestion.

    Derived from the number of factors that contributed points.
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FindingType(str, Enum):
    """Classification of an audit observation."""

    NON_CONFORMITY = "NON_CONFORMITY"
    CONCERN = "CONCERN"
    OBSERVATION = "OBSERVATION"
    RECOMMENDATION = "RECOMMENDATION"
    GOOD_PRACTICE = "GOOD_PRACTICE"


class FindingStatus(str, Enum):
    """Workflow status of a recorded finding."""

    OPEN = "OPEN"
    CAP_REQUIRED = "CAP_REQUIRED"
    CAP_SUBMITTED = "CAP_SUBMITTED"
    CAP_ACCEPTED = "CAP_ACCEPTED"
    IN_PROGRESS = "IN_PROGRESS"
    VERIFICATION = "VERIFICATION"
    CLOSED = "CLOSED"
    DEFERRED = "DEFERRED"


class AuditArea(str, Enum):
    """
    USOAP audit area.

    Fixed taxonomy of inspected domains used by the ICAO oversight
    programme.
    """

    LEG = "LEG"
    ORG = "ORG"
    PEL = "PEL"
    OPS = "OPS"
    AIR = "AIR"
    AIG = "AIG"
    ANS = "ANS"
    AGA = "AGA"
    SSP = "SSP"


class CriticalElement(str, Enum):
    """ICAO critical element (implementation pillar)."""

    CE_1 = "CE_1"
    CE_2 = "CE_2"
    CE_3 = "CE_3"
    CE_4 = "CE_4"
    CE_5 = "CE_5"
    CE_6 = "CE_6"
    CE_7 = "CE_7"
    CE_8 = "CE_8"


# ---------------------------------------------------------------------------
# Finding input (PUBLIC, FROZEN)
# ---------------------------------------------------------------------------


class SeverityPreviewInput(BaseModel):
    """
    Finding characteristics without organization context.

    Accepted by the synchronous preview used for live form feedback.
    Every optional field may be absent; absence contributes no factor.
    """

    description_en: Optional[str] = Field(
        None,
        description="Finding description (English)",
    )

    description_fr: Optional[str] = Field(
        None,
        description="Finding description (French)",
    )

    title_en: Optional[str] = Field(
        None,
        description="Finding title (English)",
    )

    title_fr: Optional[str] = Field(
        None,
        description="Finding title (French)",
    )

    audit_area: Optional[AuditArea] = Field(
        None,
        description="USOAP audit area of the inspected domain",
    )

    critical_element: Optional[CriticalElement] = Field(
        None,
        description="ICAO critical element involved",
    )

    icao_reference: Optional[str] = Field(
        None,
        description="Free-text ICAO citation (e.g. 'Annex 11, Chapter 2')",
    )

    finding_type: Optional[FindingType] = Field(
        None,
        description="Classification of the finding",
    )

    question_id: Optional[str] = Field(
        None,
        description="Protocol question the finding is linked to, if any",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    def combined_text(self) -> str:
        """
        Concatenate all text fields for keyword scanning.

        Absent fields contribute an empty string so the separator count
        stays fixed.
        """
        return " ".join(
            [
                self.description_en or "",
                self.description_fr or "",
                self.title_en or "",
                self.title_fr or "",
            ]
        )


class FindingInput(SeverityPreviewInput):
    """
    Full finding characteristics, including organization context.

    The organization and review identifiers are used only to look up
    prior findings; they carry no ownership semantics here.
    """

    organization_id: Optional[str] = Field(
        None,
        description="Organization under review (enables repetition lookup)",
    )

    review_id: Optional[str] = Field(
        None,
        description="Current review, excluded from the repetition lookup",
    )

    def without_org_context(self) -> SeverityPreviewInput:
        return SeverityPreviewInput(
            **self.model_dump(exclude={"organization_id", "review_id"})
        )


# ---------------------------------------------------------------------------
# Prior finding record (READ-ONLY)
# ---------------------------------------------------------------------------


class PriorFindingRecord(BaseModel):
    """
    Projection of a recorded finding used for repetition detection.

    `question_audit_area` is the audit area of the protocol question the
    finding is attached to, when it is attached to one.
    """

    finding_id: str
    organization_id: str
    review_id: str
    status: FindingStatus = FindingStatus.OPEN
    question_id: Optional[str] = None
    question_audit_area: Optional[AuditArea] = None
    severity: Optional[Severity] = None
    reference_number: Optional[str] = None

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )
