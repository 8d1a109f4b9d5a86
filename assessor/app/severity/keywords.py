"""
Static keyword corpus for severity suggestion.

Bilingual (English / French) word and phrase lists partitioned by
severity tendency, plus the fixed audit-area and critical-element tiers.

Matching is case-insensitive substring containment. There is no
stemming, tokenization or word-boundary check: a hit anywhere in the
combined finding text counts.

All tables are immutable and loaded once at import time.
"""

from __future__ import annotations

from typing import Iterable, List

from assessor.app.schemas.findings import AuditArea, CriticalElement


# ---------------------------------------------------------------------------
# Tiers
# ---------------------------------------------------------------------------

SAFETY_CRITICAL_AREAS = frozenset(
    {AuditArea.ANS, AuditArea.OPS, AuditArea.AIR, AuditArea.AIG}
)

HIGH_RISK_AREAS = frozenset(
    {AuditArea.PEL, AuditArea.AGA, AuditArea.SSP}
)

# Implementation-focused elements (CE-5 to CE-8)
CORE_CRITICAL_ELEMENTS = frozenset(
    {
        CriticalElement.CE_5,
        CriticalElement.CE_6,
        CriticalElement.CE_7,
        CriticalElement.CE_8,
    }
)


# ---------------------------------------------------------------------------
# Keyword lists
# ---------------------------------------------------------------------------

CRITICAL_KEYWORDS = (
    # English
    "failure",
    "failed",
    "unsafe",
    "incident",
    "accident",
    "violation",
    "immediate",
    "imminent",
    "danger",
    "hazard",
    "critical",
    "fatal",
    "death",
    "injury",
    "collision",
    "separation",
    "unauthorized",
    "loss of",
    "runway incursion",
    "airprox",
    "near miss",
    # French
    "défaillance",
    "échec",
    "dangereux",
    "incident",
    "accident",
    "violation",
    "immédiat",
    "imminent",
    "danger",
    "risque",
    "critique",
    "mortel",
    "décès",
    "blessure",
    "collision",
    "séparation",
    "non autorisé",
    "perte de",
)

MAJOR_KEYWORDS = (
    # English
    "incomplete",
    "missing",
    "non-compliance",
    "non-conformity",
    "gap",
    "deficiency",
    "inadequate",
    "insufficient",
    "not implemented",
    "not established",
    "no evidence",
    "lack of",
    "absence",
    "systematic",
    "repeated",
    "multiple",
    "significant",
    "substantial",
    # French
    "incomplet",
    "manquant",
    "non-conformité",
    "écart",
    "lacune",
    "déficience",
    "inadéquat",
    "insuffisant",
    "non mis en œuvre",
    "non établi",
    "aucune preuve",
    "absence de",
    "systématique",
    "répété",
    "significatif",
)

# Informational only: never adds points.
MINOR_KEYWORDS = (
    # English
    "partial",
    "partially",
    "minor",
    "small",
    "limited",
    "isolated",
    "administrative",
    "documentation",
    "update required",
    "outdated",
    "not current",
    "editorial",
    # French
    "partiel",
    "partiellement",
    "mineur",
    "petit",
    "limité",
    "isolé",
    "administratif",
    "documentation",
    "mise à jour requise",
    "obsolète",
    "non à jour",
)

SAFETY_IMPACT_PHRASES = (
    # English
    "safety of flight",
    "air traffic",
    "aircraft operation",
    "navigation service",
    "communication failure",
    "surveillance",
    "terrain awareness",
    "controlled airspace",
    "separation minima",
    "emergency procedure",
    # French
    "sécurité des vols",
    "circulation aérienne",
    "exploitation des aéronefs",
    "service de navigation",
    "panne de communication",
    "surveillance",
    "conscience du terrain",
    "espace aérien contrôlé",
    "minima de séparation",
    "procédure d'urgence",
)


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

def match_keywords(text: str, keywords: Iterable[str]) -> List[str]:
    """
    Return every corpus entry contained in `text`, in corpus order.

    Entries listed twice (shared between languages) are returned twice.
    """
    lowered = text.lower()
    return [keyword for keyword in keywords if keyword.lower() in lowered]


def match_safety_impact(text: str) -> List[str]:
    return match_keywords(text, SAFETY_IMPACT_PHRASES)
