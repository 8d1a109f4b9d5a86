"""
Severity suggestion result schemas.

A suggestion is an explainable, advisory projection: every point in the
score is attributed to a factor, and zero-point informational factors are
retained so reviewers can see which signals were recognized.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field, ConfigDict

from assessor.app.schemas.findings import Severity, ConfidenceLevel


class FactorCategory(str, Enum):
    """Source of a severity factor."""

    AREA = "area"
    REFERENCE = "reference"
    KEYWORD = "keyword"
    REPETITION = "repetition"
    SAFETY = "safety"
    TYPE = "type"


class SeverityFactor(BaseModel):
    """
    A single weighted signal contributing to a severity suggestion.
    """

    id: str = Field(
        ...,
        description="Stable short key (e.g. 'safety_critical_area')",
    )

    description: str = Field(
        ...,
        description="Human-readable explanation (English)",
    )

    description_fr: str = Field(
        ...,
        description="Human-readable explanation (French)",
    )

    points: int = Field(
        ...,
        ge=0,
        description="Contribution to the score; 0 for informational factors",
    )

    category: FactorCategory

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )


class SeverityPreview(BaseModel):
    """
    Result of the synchronous preview (no repetition data).
    """

    suggested: Severity
    confidence: ConfidenceLevel
    factors: List[SeverityFactor] = Field(default_factory=list)
    score: int = Field(
        ...,
        ge=0,
        description="Sum of factor points",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )


class SeveritySuggestion(SeverityPreview):
    """
    Result of the full severity evaluation, including repetition.
    """

    is_repeat: bool = Field(
        False,
        description="Whether similar open findings exist for the organization",
    )

    previous_occurrences: int = Field(
        0,
        ge=0,
        description="Number of similar open findings found",
    )
