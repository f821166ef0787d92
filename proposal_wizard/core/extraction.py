from __future__ import annotations

from typing import Any, Dict, List

from .constants import (
    DEFAULT_CURRENCY,
    STEP_BRIEF,
    STEP_CREATIVE,
    STEP_DELIVERABLES,
    STEP_GOALS,
    STEP_KEY_INSIGHT,
    STEP_MEDIA_TARGETS,
    STEP_STRATEGY,
    STEP_TARGET_AUDIENCE,
)
from .types import StepData


def _d(v: Any) -> Dict[str, Any]:
    return v if isinstance(v, dict) else {}


def _l(v: Any) -> List[Any]:
    return list(v) if isinstance(v, list) else []


def _s(v: Any) -> str:
    return v.strip() if isinstance(v, str) else ""


def extracted_data_to_step_data(extracted: Dict[str, Any]) -> StepData:
    """
    Pre-populate wizard steps from the one-shot brief extraction.

    Only steps the extraction actually has something for are created;
    odd-typed sections are treated as missing.
    """
    extracted = _d(extracted)
    brand = _d(extracted.get("brand"))
    audience = _d(extracted.get("targetAudience"))
    primary = _d(audience.get("primary"))
    goals = [g for g in _l(extracted.get("campaignGoals")) if _s(g)]
    budget = _d(extracted.get("budget"))

    step_data: StepData = {}

    # Brief
    if _s(brand.get("name")) or _s(brand.get("background")):
        step_data[STEP_BRIEF] = {
            "brandName": _s(brand.get("name")),
            "brandBrief": _s(brand.get("background")),
            "brandPainPoints": _l(primary.get("painPoints")),
            "brandObjective": _s(goals[0]) if goals else "",
        }

    # Goals
    if goals:
        step_data[STEP_GOALS] = {
            "goals": [{"title": _s(g), "description": ""} for g in goals],
            "customGoals": [],
        }

    # Target audience
    if primary:
        ta: Dict[str, Any] = {
            "targetGender": _s(primary.get("gender")),
            "targetAgeRange": _s(primary.get("ageRange")),
            "targetDescription": _s(primary.get("lifestyle")),
            "targetBehavior": _s(audience.get("behavior")),
            "targetInsights": _l(primary.get("interests")),
        }
        secondary = _d(audience.get("secondary"))
        if secondary:
            ta["targetSecondary"] = dict(secondary)
        step_data[STEP_TARGET_AUDIENCE] = ta

    # Key insight
    if _s(extracted.get("keyInsight")):
        step_data[STEP_KEY_INSIGHT] = {
            "keyInsight": _s(extracted.get("keyInsight")),
            "insightSource": _s(extracted.get("insightSource")),
        }

    # Strategy
    if _s(extracted.get("strategyDirection")):
        step_data[STEP_STRATEGY] = {
            "strategyHeadline": _s(extracted.get("strategyDirection")),
            "strategyPillars": [],
        }

    # Creative
    if _s(extracted.get("creativeDirection")):
        step_data[STEP_CREATIVE] = {
            "activityTitle": "",
            "activityConcept": _s(extracted.get("creativeDirection")),
            "activityDescription": "",
            "activityApproach": [],
            "referenceImages": [],
        }

    # Deliverables
    deliverables = [_d(x) for x in _l(extracted.get("deliverables")) if isinstance(x, dict)]
    if deliverables:
        step_data[STEP_DELIVERABLES] = {
            "deliverables": [
                {
                    "type": _s(d.get("type")),
                    "quantity": d.get("quantity") or 1,
                    "description": _s(d.get("description")),
                    "purpose": "",
                }
                for d in deliverables
            ],
            "referenceImages": [],
        }

    # Media targets
    if budget.get("amount"):
        step_data[STEP_MEDIA_TARGETS] = {
            "budget": budget.get("amount"),
            "currency": _s(budget.get("currency")) or DEFAULT_CURRENCY,
            "potentialReach": 0,
            "potentialEngagement": 0,
            "cpe": 0,
        }

    return step_data
