from __future__ import annotations

import re
from typing import Dict, List, Optional

# Field type -> keywords used to pick the most relevant brief paragraphs.
# Zero API calls: plain keyword scoring over the raw brief text.
FIELD_KEYWORDS: Dict[str, List[str]] = {
    "background": [
        "רקע", "אודות", "החברה", "המותג", "הסיפור", "היסטוריה",
        "פעילות", "תחום", "עוסק", "מתמחה", "מציע", "מספק",
        "הוקמה", "נוסדה", "שנים", "מוביל", "brand",
    ],
    "goals": [
        "מטרה", "מטרות", "יעד", "יעדים", "להשיג", "לקדם", "לחזק",
        "להגדיל", "לבסס", "מודעות", "חשיפה", "מכירות", "המרות",
        "kpi", "roi", "תוצאות", "ביצועים", "הצלחה",
    ],
    "audience": [
        "קהל", "יעד", "גילאי", "דמוגרפי", "צרכן", "לקוח", "פרופיל",
        "נשים", "גברים", "צעיר", "אמהות", "הורים", "סגנון חיים",
        "תחומי עניין", "התנהגות", "רכישה", "צריכה",
    ],
    "insight": [
        "תובנה", "ממצא", "נתון", "מחקר", "מגמה", "טרנד", "שינוי",
        "הזדמנות", "פער", "צורך", "בעיה", "אתגר", "כאב",
    ],
    "strategy": [
        "אסטרטגיה", "גישה", "תוכנית", "כיוון", "מהלך", "שלב",
        "תהליך", "ציר", "עיקרון", "מסר", "מיצוב", "positioning",
    ],
    "creative": [
        "קריאייטיב", "רעיון", "קונספט", "ויזואל", "תוכן", "סגנון",
        "עיצוב", "נראות", "שפה", "טון", "look", "feel", "mood",
    ],
    "deliverables": [
        "תוצר", "דליברבל", "סטורי", "רילז", "פוסט", "תוכן", "כמות",
        "סרטון", "וידאו", "תמונה", "קמפיין", "פרסום",
    ],
    "budget": [
        "תקציב", "עלות", "מחיר", "השקעה", "בג'ט", "budget",
        "שקל", 'ש"ח', "₪", "nis", "כסף", "פיננסי",
    ],
}

MIN_BRIEF_CHARS = 20
MIN_PARAGRAPH_CHARS = 15


def _split_paragraphs(text: str) -> List[str]:
    parts = re.split(r"\r?\n\s*\r?\n", text or "")
    return [p.strip() for p in parts if len(p.strip()) > MIN_PARAGRAPH_CHARS]


def _score(paragraph: str, keywords: List[str]) -> int:
    low = paragraph.lower()
    return sum(low.count(kw.lower()) for kw in keywords)


def extract_brief_excerpt(raw_brief_text: str, field_type: str, max_length: int = 600) -> Optional[str]:
    """
    Best-matching paragraphs of the raw brief for one wizard field type.
    Paragraphs are taken by descending score until max_length would be
    exceeded (the first one is always kept). None when nothing matches.
    """
    if not raw_brief_text or len(raw_brief_text.strip()) < MIN_BRIEF_CHARS:
        return None

    keywords = FIELD_KEYWORDS.get(field_type)
    if not keywords:
        return None

    scored = [(p, _score(p, keywords)) for p in _split_paragraphs(raw_brief_text)]
    relevant = [p for p, sc in sorted(scored, key=lambda x: x[1], reverse=True) if sc > 0]
    if not relevant:
        return None

    out: List[str] = []
    used = 0
    for p in relevant:
        extra = len(p) + (2 if out else 0)
        if out and used + extra > max_length:
            break
        out.append(p)
        used += extra

    return "\n\n".join(out) or None
