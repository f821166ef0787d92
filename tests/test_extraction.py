from proposal_wizard.core.excerpts import extract_brief_excerpt
from proposal_wizard.core.extraction import extracted_data_to_step_data

EXTRACTED = {
    "brand": {"name": "Acme", "background": "Family shoe maker"},
    "targetAudience": {
        "primary": {"gender": "נשים", "ageRange": "25-45", "interests": ["fashion"], "painPoints": ["sore feet"]},
        "secondary": {"gender": "גברים"},
        "behavior": "Shops online",
    },
    "campaignGoals": ["awareness", "sales"],
    "keyInsight": "Comfort is the new chic",
    "strategyDirection": "Everyday heroes",
    "creativeDirection": "Street-style shoots",
    "deliverables": [{"type": "reel", "description": "30s"}, "junk"],
    "budget": {"amount": 80000},
}


def test_baseline_mapping():
    steps = extracted_data_to_step_data(EXTRACTED)
    assert steps["brief"] == {
        "brandName": "Acme",
        "brandBrief": "Family shoe maker",
        "brandPainPoints": ["sore feet"],
        "brandObjective": "awareness",
    }
    assert [g["title"] for g in steps["goals"]["goals"]] == ["awareness", "sales"]
    assert steps["target_audience"]["targetSecondary"] == {"gender": "גברים"}
    assert steps["key_insight"]["keyInsight"] == "Comfort is the new chic"
    assert steps["strategy"]["strategyHeadline"] == "Everyday heroes"
    assert steps["creative"]["activityConcept"] == "Street-style shoots"
    assert steps["deliverables"]["deliverables"] == [
        {"type": "reel", "quantity": 1, "description": "30s", "purpose": ""}
    ]
    assert steps["media_targets"]["budget"] == 80000
    assert steps["media_targets"]["currency"] == "₪"


def test_missing_sections_create_no_steps():
    assert extracted_data_to_step_data({}) == {}
    assert extracted_data_to_step_data(None) == {}
    assert extracted_data_to_step_data({"brand": "odd", "budget": {"amount": 0}}) == {}


BRIEF = """המותג אקמה הוקם לפני 40 שנה ומתמחה בנעליים נוחות לכל היום.

מטרות הקמפיין: להגדיל מודעות ולחזק את המכירות באונליין.

קהל היעד הוא נשים בגילאי 25-45, אמהות עובדות עם סגנון חיים עמוס.

התקציב לקמפיין הוא 80 אלף ש"ח כולל הפקה."""


def test_excerpt_picks_relevant_paragraph():
    assert "התקציב" in extract_brief_excerpt(BRIEF, "budget")
    assert "קהל היעד" in extract_brief_excerpt(BRIEF, "audience")


def test_excerpt_respects_max_length_but_keeps_first():
    out = extract_brief_excerpt(BRIEF, "goals", max_length=10)
    assert out is not None
    assert "\n\n" not in out


def test_excerpt_none_cases():
    assert extract_brief_excerpt("", "goals") is None
    assert extract_brief_excerpt("short", "goals") is None
    assert extract_brief_excerpt(BRIEF, "unknown-field") is None
    assert extract_brief_excerpt("x" * 50, "budget") is None
