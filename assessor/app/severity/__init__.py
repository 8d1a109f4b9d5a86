"""
Severity suggestion engine.

Deterministic, explainable scoring of review findings. Factor evaluation
and classification are pure; the only I/O is the injected repetition
lookup used by the async entry point.
"""

from .calculator import (
    calculate_severity_suggestion,
    calculate_severity_suggestion_sync,
)
from .repetition import (
    RepetitionLookup,
    NullRepetitionLookup,
    InMemoryRepetitionLookup,
)

__all__ = [
    "calculate_severity_suggestion",
    "calculate_severity_suggestion_sync",
    "RepetitionLookup",
    "NullRepetitionLookup",
    "InMemoryRepetitionLookup",
]
