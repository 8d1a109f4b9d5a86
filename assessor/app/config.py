"""
Runtime configuration for the Assessor microservice.

This module centralizes environment-driven configuration and feature
flags. It defines whether the repetition lookup is consulted during
severity suggestion, how the live preview treats unlisted audit areas,
and the team-size bounds used by reviewer matching.

Configuration is read-only at runtime and must not influence scoring
outcomes in non-deterministic ways.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, ValidationInfo


class AssessorConfig(BaseModel):
    """
    Runtime configuration for the Assessor microservice.

    Configuration is environment-driven, read-only at runtime, and must
    not introduce non-deterministic behavior into scoring outcomes.
    """

    # ------------------------------------------------------------------
    # Severity suggestion
    # ------------------------------------------------------------------

    ENABLE_REPETITION_LOOKUP: bool = Field(
        True,
        description=(
            "Consult prior open findings of the organization when "
            "computing the full severity suggestion"
        ),
    )

    ALIGN_PREVIEW_AREA_FACTOR: bool = Field(
        False,
        description=(
            "Award the +1 'standard audit area' factor in the live preview "
            "as well. When false the preview only scores tiered areas."
        ),
    )

    PRIOR_FINDINGS_PATH: Path | None = Field(
        None,
        description=(
            "Path to a JSON array of prior finding records used by the "
            "in-memory repetition lookup. Without it, repetition lookup "
            "finds nothing."
        ),
    )

    # ------------------------------------------------------------------
    # Reviewer matching
    # ------------------------------------------------------------------

    MATCHING_MIN_TEAM_SIZE: int = Field(
        2,
        description="Smallest team the matcher will try to assemble",
    )

    MATCHING_MAX_TEAM_SIZE: int = Field(
        6,
        description="Largest team the matcher will try to assemble",
    )

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    LOG_LEVEL: str = Field(
        "INFO",
        description="Root log level for the service process",
    )

    # ------------------------------------------------------------------
    # Validators (Pydantic v2)
    # ------------------------------------------------------------------

    @field_validator("MATCHING_MIN_TEAM_SIZE")
    @classmethod
    def min_team_size_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(
                f"MATCHING_MIN_TEAM_SIZE must be at least 1, got {v}"
            )
        return v

    @field_validator("MATCHING_MAX_TEAM_SIZE")
    @classmethod
    def max_team_size_not_below_min(
        cls, v: int, info: ValidationInfo
    ) -> int:
        minimum = info.data.get("MATCHING_MIN_TEAM_SIZE")
        if minimum is not None and v < minimum:
            raise ValueError(
                "MATCHING_MAX_TEAM_SIZE cannot be smaller than "
                f"MATCHING_MIN_TEAM_SIZE ({v} < {minimum})."
            )
        return v

    @field_validator("PRIOR_FINDINGS_PATH")
    @classmethod
    def prior_findings_path_must_exist(
        cls, v: Path | None
    ) -> Path | None:
        if v is None:
            return v
        if not v.exists():
            raise ValueError(
                f"Configured PRIOR_FINDINGS_PATH does not exist: {v}"
            )
        if not v.is_file():
            raise ValueError(
                f"Configured PRIOR_FINDINGS_PATH is not a file: {v}"
            )
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        allowed = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        if level not in allowed:
            raise ValueError(
                f"Unsupported LOG_LEVEL '{v}'. "
                f"Allowed values: {sorted(allowed)}"
            )
        return level

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "AssessorConfig":
        """
        Load configuration from environment variables.

        All values are parsed once at startup and must remain immutable.
        """

        def env_bool(name: str, default: bool) -> bool:
            raw = os.getenv(name)
            if raw is None:
                return default
            return raw.lower() in {"1", "true", "yes", "on"}

        prior_findings_env = os.getenv("ASSESSOR_PRIOR_FINDINGS_PATH")

        return cls(
            ENABLE_REPETITION_LOOKUP=env_bool(
                "ASSESSOR_ENABLE_REPETITION_LOOKUP", True
            ),
            ALIGN_PREVIEW_AREA_FACTOR=env_bool(
                "ASSESSOR_ALIGN_PREVIEW_AREA_FACTOR", False
            ),
            PRIOR_FINDINGS_PATH=(
                Path(prior_findings_env)
                if prior_findings_env
                else None
            ),
            MATCHING_MIN_TEAM_SIZE=int(
                os.getenv("ASSESSOR_MATCHING_MIN_TEAM_SIZE", "2")
            ),
            MATCHING_MAX_TEAM_SIZE=int(
                os.getenv("ASSESSOR_MATCHING_MAX_TEAM_SIZE", "6")
            ),
            LOG_LEVEL=os.getenv(
                "ASSESSOR_LOG_LEVEL", "INFO"
            ),
        )

    model_config = {
        "frozen": True,
    }
