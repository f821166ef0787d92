from __future__ import annotations

import copy
from typing import Any, Dict, List, Tuple

from ..core.constants import (
    STEP_BRIEF,
    STEP_CREATIVE,
    STEP_DELIVERABLES,
    STEP_GOALS,
    STEP_INFLUENCERS,
    STEP_KEY_INSIGHT,
    STEP_MEDIA_TARGETS,
    STEP_QUANTITIES,
    STEP_STRATEGY,
    STEP_TARGET_AUDIENCE,
)
from ..core.types import StepData
from ..research.numbers import parse_short_number

# step -> [(proposal key, step field)]; straight copies
DIRECT_FIELDS: Dict[str, List[Tuple[str, str]]] = {
    STEP_BRIEF: [
        ("brandName", "brandName"),
        ("brandBrief", "brandBrief"),
        ("brandPainPoints", "brandPainPoints"),
        ("brandObjective", "brandObjective"),
    ],
    STEP_TARGET_AUDIENCE: [
        ("targetGender", "targetGender"),
        ("targetAgeRange", "targetAgeRange"),
        ("targetDescription", "targetDescription"),
        ("targetBehavior", "targetBehavior"),
        ("targetInsights", "targetInsights"),
    ],
    STEP_KEY_INSIGHT: [
        ("keyInsight", "keyInsight"),
        ("insightSource", "insightSource"),
        ("insightData", "insightData"),
    ],
    STEP_STRATEGY: [
        ("strategyHeadline", "strategyHeadline"),
        ("strategyDescription", "strategyDescription"),
        ("strategyPillars", "strategyPillars"),
        ("strategyFlow", "strategyFlow"),
    ],
    STEP_CREATIVE: [
        ("activityTitle", "activityTitle"),
        ("activityConcept", "activityConcept"),
        ("activityDescription", "activityDescription"),
        ("activityApproach", "activityApproach"),
        ("activityDifferentiator", "activityDifferentiator"),
    ],
    STEP_DELIVERABLES: [
        ("deliverablesDetailed", "deliverables"),
        ("deliverablesSummary", "deliverablesSummary"),
    ],
    STEP_MEDIA_TARGETS: [
        ("budget", "budget"),
        ("currency", "currency"),
        ("potentialReach", "potentialReach"),
        ("potentialEngagement", "potentialEngagement"),
        ("cpe", "cpe"),
        ("cpm", "cpm"),
        ("estimatedImpressions", "estimatedImpressions"),
        ("metricsExplanation", "metricsExplanation"),
    ],
    STEP_INFLUENCERS: [
        ("enhancedInfluencers", "influencers"),
        ("influencerStrategy", "influencerStrategy"),
        ("influencerCriteria", "influencerCriteria"),
        ("influencerNote", "influencerNote"),
    ],
}


def _titles(items: Any, key: str) -> List[Any]:
    if not isinstance(items, list):
        return []
    return [it.get(key) for it in items if isinstance(it, dict)]


def recompute_quantities(quantities: Dict[str, Any]) -> Dict[str, Any]:
    """
    Copy of the quantities step with derived totals recomputed:
    totalQuantity = perInfluencer * influencerCount * months (missing months -> 1),
    totalDeliverables = sum of totalQuantity. Stored totals are ignored.
    """
    q = copy.deepcopy(quantities)
    count = parse_short_number(q.get("influencerCount"))
    months = parse_short_number(q.get("campaignDurationMonths")) or 1

    total = 0
    content_types = q.get("contentTypes")
    if isinstance(content_types, list):
        for ct in content_types:
            if not isinstance(ct, dict):
                continue
            ct["totalQuantity"] = parse_short_number(ct.get("quantityPerInfluencer")) * count * months
            total += ct["totalQuantity"]

    q["totalDeliverables"] = total
    return q


def project_proposal(step_data: StepData) -> Dict[str, Any]:
    """
    Flatten the step-data map into the proposal record for rendering.
    Keys are stable; a value missing upstream is a key missing here.
    """
    out: Dict[str, Any] = {}
    if not isinstance(step_data, dict):
        return out

    def step(step_id: str) -> Dict[str, Any]:
        v = step_data.get(step_id)
        return v if isinstance(v, dict) else {}

    for step_id, pairs in DIRECT_FIELDS.items():
        src = step(step_id)
        for out_key, field in pairs:
            if field in src:
                out[out_key] = copy.deepcopy(src[field])

    goals = step(STEP_GOALS)
    if "goals" in goals:
        out["goalsDetailed"] = copy.deepcopy(goals["goals"])
        out["goals"] = _titles(goals["goals"], "title")

    deliverables = step(STEP_DELIVERABLES)
    if "deliverables" in deliverables:
        out["deliverables"] = _titles(deliverables["deliverables"], "type")

    creative = step(STEP_CREATIVE)
    if creative:
        refs = creative.get("referenceImages")
        out["creativeSlides"] = [
            {
                "title": creative.get("activityTitle"),
                "description": creative.get("activityDescription"),
                "referenceImages": _titles(refs, "url"),
            }
        ]

    quantities = step(STEP_QUANTITIES)
    if quantities:
        q = recompute_quantities(quantities)
        out["quantitiesSummary"] = q
        out["totalDeliverables"] = q["totalDeliverables"]
        if "influencerCount" in q:
            out["influencerCount"] = q["influencerCount"]
        if "campaignDurationMonths" in q:
            out["campaignDurationMonths"] = q["campaignDurationMonths"]

    return out
