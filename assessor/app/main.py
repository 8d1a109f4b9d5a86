"""
FastAPI entrypoint for the Assessor microservice.

This module defines the public HTTP interface for severity suggestion and
reviewer matching. Callers submit finding characteristics or reviewer
snapshots; the service scores them and returns explainable results.

The application holds no state of its own beyond what is wired at
startup: the configuration and the repetition lookup.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.responses import Response

from assessor.app.config import AssessorConfig
from assessor.app.matching import build_optimal_team, find_matching_reviewers
from assessor.app.schemas.findings import FindingInput, SeverityPreviewInput
from assessor.app.schemas.reviewer import (
    MatchRequest,
    MatchResult,
    TeamBuildResult,
    TeamRequest,
)
from assessor.app.schemas.severity import SeverityPreview, SeveritySuggestion
from assessor.app.severity import (
    InMemoryRepetitionLookup,
    NullRepetitionLookup,
    RepetitionLookup,
    calculate_severity_suggestion,
    calculate_severity_suggestion_sync,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Presentation helpers (presentation-only)
# ---------------------------------------------------------------------------

def pretty_json(data: Any) -> str:
    """
    Pretty-print JSON for human-readable output.

    PRESENTATION ONLY: scoring results are returned unchanged.
    """
    return json.dumps(
        data,
        ensure_ascii=False,
        allow_nan=False,
        indent=2,
        separators=(", ", ": "),
    )


class PrettyJSONResponse(Response):
    """
    Pretty-printed JSON response for human-readable console output.
    """

    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        return pretty_json(content).encode("utf-8")


# ---------------------------------------------------------------------------
# Application setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Assessor Service",
    description=(
        "Advisory severity suggestion for review findings and "
        "reviewer matching for peer reviews"
    ),
    version="0.1.0",
)


# ---------------------------------------------------------------------------
# Startup / Shutdown
# ---------------------------------------------------------------------------

@app.on_event("startup")
def startup_event() -> None:
    """
    Application startup hook.

    Configuration is loaded once and treated as immutable for the lifetime
    of the process. The repetition lookup is wired explicitly here.
    """
    config = AssessorConfig.from_env()
    logging.basicConfig(level=config.LOG_LEVEL)

    repetition_lookup: RepetitionLookup
    if config.PRIOR_FINDINGS_PATH is not None:
        repetition_lookup = InMemoryRepetitionLookup.from_json_file(
            config.PRIOR_FINDINGS_PATH
        )
        logger.info(
            "Loaded %d prior finding(s) from %s",
            len(repetition_lookup),
            config.PRIOR_FINDINGS_PATH,
        )
    else:
        repetition_lookup = NullRepetitionLookup()

    app.state.config = config
    app.state.repetition_lookup = repetition_lookup


@app.on_event("shutdown")
def shutdown_event() -> None:
    """Application shutdown hook."""
    pass


# ---------------------------------------------------------------------------
# Severity suggestion
# ---------------------------------------------------------------------------

@app.post(
    "/severity/suggest",
    response_model=SeveritySuggestion,
    response_class=PrettyJSONResponse,
    summary="Suggest a severity for a finding, including repeat history",
)
async def suggest_severity(finding: FindingInput) -> SeveritySuggestion:
    config: AssessorConfig = app.state.config
    lookup: RepetitionLookup = app.state.repetition_lookup

    return await calculate_severity_suggestion(
        finding,
        repetition_lookup=lookup,
        config=config,
    )


@app.post(
    "/severity/preview",
    response_model=SeverityPreview,
    response_class=PrettyJSONResponse,
    summary="Preview a severity suggestion without finding history",
)
def preview_severity(finding: SeverityPreviewInput) -> SeverityPreview:
    config: AssessorConfig = app.state.config
    return calculate_severity_suggestion_sync(finding, config=config)


# ---------------------------------------------------------------------------
# Reviewer matching
# ---------------------------------------------------------------------------

@app.post(
    "/reviewers/match",
    response_model=List[MatchResult],
    response_class=PrettyJSONResponse,
    summary="Rank reviewers against matching criteria",
)
def match_reviewers(request: MatchRequest) -> List[MatchResult]:
    return find_matching_reviewers(request.criteria, request.reviewers)


@app.post(
    "/reviewers/team",
    response_model=TeamBuildResult,
    response_class=PrettyJSONResponse,
    summary="Assemble a review team from candidate reviewers",
)
def build_team(request: TeamRequest) -> TeamBuildResult:
    """
    Score the submitted reviewers, then assemble a team from the ranking.
    """
    config: AssessorConfig = app.state.config
    candidates = find_matching_reviewers(request.criteria, request.reviewers)
    return build_optimal_team(request.criteria, candidates, config=config)


# ---------------------------------------------------------------------------
# Health Check
# ---------------------------------------------------------------------------

@app.get(
    "/health",
    summary="Service health check",
)
def health_check() -> JSONResponse:
    """Simple health check endpoint."""
    return JSONResponse(
        content={
            "status": "ok",
            "service": "assessor",
        }
    )
