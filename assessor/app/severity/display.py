"""
Presentation helpers for severity suggestions.

PRESENTATION ONLY: these mappings MUST NOT influence scoring.
"""

from __future__ import annotations

from typing import Dict, Literal

from assessor.app.schemas.findings import ConfidenceLevel, Severity
from assessor.app.schemas.severity import FactorCategory


Locale = Literal["en", "fr"]


_SEVERITY_COLORS: Dict[Severity, str] = {
    Severity.CRITICAL: "destructive",
    Severity.MAJOR: "orange",
    Severity.MINOR: "yellow",
    Severity.OBSERVATION: "blue",
}

_CONFIDENCE_COLORS: Dict[ConfidenceLevel, str] = {
    ConfidenceLevel.HIGH: "green",
    ConfidenceLevel.MEDIUM: "yellow",
    ConfidenceLevel.LOW: "gray",
}

_CATEGORY_LABELS: Dict[FactorCategory, Dict[str, str]] = {
    FactorCategory.AREA: {"en": "Audit Area", "fr": "Zone d'audit"},
    FactorCategory.REFERENCE: {"en": "ICAO Reference", "fr": "Référence OACI"},
    FactorCategory.KEYWORD: {"en": "Keywords", "fr": "Mots-clés"},
    FactorCategory.REPETITION: {"en": "History", "fr": "Historique"},
    FactorCategory.SAFETY: {"en": "Safety Impact", "fr": "Impact sécurité"},
    FactorCategory.TYPE: {"en": "Finding Type", "fr": "Type de constatation"},
}


def severity_color(severity: Severity) -> str:
    return _SEVERITY_COLORS.get(severity, "secondary")


def confidence_color(confidence: ConfidenceLevel) -> str:
    return _CONFIDENCE_COLORS.get(confidence, "gray")


def factor_category_label(
    category: FactorCategory,
    locale: Locale = "en",
) -> str:
    """Return the localized label of a factor category."""
    return _CATEGORY_LABELS[category][locale]
