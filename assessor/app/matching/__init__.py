"""
Reviewer matching engine.

Deterministic scoring of reviewer fit (expertise, language, availability,
experience), conflict-of-interest screening and greedy team assembly.
"""

from .matching import (
    build_optimal_team,
    calculate_match_score,
    can_assign_reviewer,
    filter_by_min_score,
    filter_eligible_only,
    find_matching_reviewers,
    get_top_candidates,
)

__all__ = [
    "build_optimal_team",
    "calculate_match_score",
    "can_assign_reviewer",
    "filter_by_min_score",
    "filter_eligible_only",
    "find_matching_reviewers",
    "get_top_candidates",
]
