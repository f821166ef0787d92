"""
VALIDATION ENGINE (per wizard step)

- Declarative "required field present" checks, no I/O, O(1) per step
- Returns None when the step is valid, else {field: localized message}
- Optional steps are always valid, whatever they contain
- The engine never blocks navigation; the caller decides what to do with errors
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from .constants import (
    STEP_BRIEF,
    STEP_DELIVERABLES,
    STEP_GOALS,
    STEP_INFLUENCERS,
    STEP_KEY_INSIGHT,
    STEP_MEDIA_TARGETS,
    STEP_QUANTITIES,
    STEP_STRATEGY,
    STEP_TARGET_AUDIENCE,
)
from .registry import is_known_step, get_step_meta, required_steps
from .types import StepId, WizardState

FORM_FIELD = "_form"

# -------------------------------------------------
# 1) Messages (ID-based, UI shows text as-is)
# -------------------------------------------------

MESSAGES_HE: Dict[str, str] = {
    "E_FORM_EMPTY": "נדרש למלא נתונים",
    "E_BRAND_NAME": "שם המותג נדרש",
    "E_BRAND_BRIEF": "רקע על המותג נדרש",
    "E_GOALS": "נדרשת לפחות מטרה אחת",
    "E_TARGET_GENDER": "נדרש מגדר קהל יעד",
    "E_TARGET_AGE": "נדרש טווח גילאים",
    "E_KEY_INSIGHT": "נדרשת תובנה",
    "E_STRATEGY_HEADLINE": "נדרשת כותרת אסטרטגיה",
    "E_DELIVERABLES": "נדרש לפחות תוצר אחד",
    "E_INFLUENCER_COUNT": "נדרש מספר משפיענים",
    "E_BUDGET": "נדרש תקציב",
}

# -------------------------------------------------
# 2) Rules: step -> [(field, kind, message id)]
#    kind: "text" (non-blank string), "list" (non-empty), "value" (truthy)
# -------------------------------------------------

STEP_RULES: Dict[StepId, List[Tuple[str, str, str]]] = {
    STEP_BRIEF: [
        ("brandName", "text", "E_BRAND_NAME"),
        ("brandBrief", "text", "E_BRAND_BRIEF"),
    ],
    STEP_GOALS: [("goals", "list", "E_GOALS")],
    STEP_TARGET_AUDIENCE: [
        ("targetGender", "text", "E_TARGET_GENDER"),
        ("targetAgeRange", "text", "E_TARGET_AGE"),
    ],
    STEP_KEY_INSIGHT: [("keyInsight", "text", "E_KEY_INSIGHT")],
    STEP_STRATEGY: [("strategyHeadline", "text", "E_STRATEGY_HEADLINE")],
    STEP_DELIVERABLES: [("deliverables", "list", "E_DELIVERABLES")],
    STEP_QUANTITIES: [("influencerCount", "value", "E_INFLUENCER_COUNT")],
    STEP_MEDIA_TARGETS: [("budget", "value", "E_BUDGET")],
    # Influencers can be empty at this stage
    STEP_INFLUENCERS: [],
}


def _present(value: Any, kind: str) -> bool:
    if kind == "text":
        return isinstance(value, str) and value.strip() != ""
    if kind == "list":
        return isinstance(value, (list, tuple)) and len(value) > 0
    return bool(value)


def message(message_id: str) -> str:
    return MESSAGES_HE.get(message_id, message_id)


def validate_step(step_id: StepId, data: Optional[Dict[str, Any]]) -> Optional[Dict[str, str]]:
    if not is_known_step(step_id) or not get_step_meta(step_id).required:
        return None

    if not isinstance(data, dict):
        return {FORM_FIELD: message("E_FORM_EMPTY")}

    errors: Dict[str, str] = {}
    for field_name, kind, message_id in STEP_RULES.get(step_id, []):
        if not _present(data.get(field_name), kind):
            errors[field_name] = message(message_id)

    return errors or None


def validate_state(state: WizardState) -> Dict[StepId, Dict[str, str]]:
    """Errors for every required step; empty dict means the wizard may finish."""
    out: Dict[StepId, Dict[str, str]] = {}
    for step in required_steps():
        errors = validate_step(step, state.step_data.get(step) or {})
        if errors:
            out[step] = errors
    return out
