from __future__ import annotations

from typing import List, Optional, Tuple

# Ordered: cost metrics first, their labels contain the generic words
# ("cost per engagement", "cost per 1000 impressions").
KPI_SYNONYMS: List[Tuple[str, List[str]]] = [
    ("cpe", ["cpe", "cost per engagement", "cost-per-engagement", "עלות למעורבות", "עלות לאינטראקציה"]),
    ("cpm", ["cpm", "cost per mille", "cost per 1000", "cost per thousand", "עלות לאלף"]),
    ("potentialEngagement", ["engagement", "interactions", "מעורבות", "אינטראקציות", "אנגייג'מנט"]),
    ("estimatedImpressions", ["impression", "views", "חשיפות", "צפיות", "אימפרשנס"]),
    ("potentialReach", ["reach", "חשיפה", "הגעה", "טווח", "ריץ'"]),
]

KPI_SLOTS = [slot for slot, _ in KPI_SYNONYMS]


def match_kpi_slot(label: Optional[str]) -> Optional[str]:
    """
    Media-targets slot for a free-text KPI label, or None.
    Substring match over Hebrew / English / acronym variants.
    """
    if not isinstance(label, str):
        return None
    low = label.strip().lower()
    if not low:
        return None
    for slot, keywords in KPI_SYNONYMS:
        if any(kw in low for kw in keywords):
            return slot
    return None
