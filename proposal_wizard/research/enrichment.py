"""
=========================================================
ENRICHMENT MERGER
=========================================================

Folds brand research + influencer strategy into the step-data map.

Rule families:
- richer wins    : free text replaced only by a strictly longer candidate
- list override  : research lists replace provisional guesses when non-empty
- fill only      : written only over blank / trivial (<= 20 chars) values
- numeric rollup : tier counts summed, KPI labels matched bilingually
- list fill      : influencer profiles only into an empty list

Research payloads are loosely typed external documents: every path is
read with dict.get + isinstance, a missing or odd-typed branch is skipped.
"""

from __future__ import annotations

import copy
import logging
import math
from typing import Any, Dict, List, Optional

from ..core.constants import (
    STEP_BRIEF,
    STEP_INFLUENCERS,
    STEP_MEDIA_TARGETS,
    STEP_QUANTITIES,
    STEP_RESEARCH,
    STEP_STRATEGY,
    STEP_TARGET_AUDIENCE,
    USER_CONTENT_THRESHOLD,
)
from ..core.types import StepData
from .kpi import match_kpi_slot
from .numbers import parse_percent, parse_short_number

logger = logging.getLogger(__name__)

RESEARCH_PHASE_COMPLETE = "complete"
INSTAGRAM_PROFILE_URL = "https://www.instagram.com/{handle}"


# -------------------------
# Structural accessors
# -------------------------
def _d(v: Any) -> Dict[str, Any]:
    return v if isinstance(v, dict) else {}


def _l(v: Any) -> List[Any]:
    return v if isinstance(v, list) else []


def _t(v: Any) -> str:
    return v.strip() if isinstance(v, str) else ""


def _strings(v: Any) -> List[str]:
    return [_t(x) for x in _l(v) if _t(x)]


def _payload(v: Any) -> Optional[Dict[str, Any]]:
    return v if isinstance(v, dict) and v else None


class _Writer:
    """Step-data copy that only materializes a step when a value is written."""

    def __init__(self, step_data: StepData):
        self.data: StepData = copy.deepcopy(step_data) if isinstance(step_data, dict) else {}
        self.written: List[str] = []

    def get(self, step: str, field: str) -> Any:
        return _d(self.data.get(step)).get(field)

    def set(self, step: str, field: str, value: Any) -> None:
        if not isinstance(self.data.get(step), dict):
            self.data[step] = {}
        self.data[step][field] = value
        self.written.append(f"{step}.{field}")

    # --- rule families ---
    def richer(self, step: str, field: str, candidate: Any) -> None:
        new = _t(candidate)
        if new and len(new) > len(_t(self.get(step, field))):
            self.set(step, field, new)

    def override_list(self, step: str, field: str, items: List[Any]) -> None:
        if items:
            self.set(step, field, items)

    def fill(self, step: str, field: str, candidate: Any) -> None:
        new = _t(candidate)
        if not new:
            return
        current = self.get(step, field)
        if isinstance(current, str) and len(current.strip()) > USER_CONTENT_THRESHOLD:
            return
        if current not in (None, "") and not isinstance(current, str):
            return
        if _t(current) != new:
            self.set(step, field, new)

    def fill_number(self, step: str, field: str, value: Any) -> None:
        if value and not self.get(step, field):
            self.set(step, field, value)


def _influencer_profile(rec: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    handle = _t(rec.get("handle")).lstrip("@")
    name = _t(rec.get("name")) or handle
    if not name:
        return None

    category = _t(rec.get("category"))
    return {
        "name": name,
        "username": handle,
        "profileUrl": INSTAGRAM_PROFILE_URL.format(handle=handle) if handle else "",
        "profilePicUrl": _t(rec.get("profilePicUrl")),
        "categories": [category] if category else [],
        "followers": parse_short_number(rec.get("followers")),
        "engagementRate": parse_percent(rec.get("engagement")),
        "bio": _t(rec.get("whyRelevant")),
    }


def _apply_brand(w: _Writer, brand: Dict[str, Any]) -> None:
    audience = _d(_d(brand.get("targetDemographics")).get("primaryAudience"))

    w.richer(STEP_BRIEF, "brandBrief", brand.get("companyDescription"))
    w.override_list(STEP_BRIEF, "brandPainPoints", _strings(audience.get("painPoints")))

    w.fill(STEP_TARGET_AUDIENCE, "targetGender", audience.get("gender"))
    w.fill(STEP_TARGET_AUDIENCE, "targetAgeRange", audience.get("ageRange"))
    w.fill(STEP_TARGET_AUDIENCE, "targetDescription", audience.get("lifestyle"))
    w.override_list(STEP_TARGET_AUDIENCE, "targetInsights", _strings(audience.get("interests")))

    w.richer(STEP_STRATEGY, "strategyDescription", brand.get("suggestedApproach"))


def _apply_influencer(w: _Writer, strategy: Dict[str, Any]) -> None:
    w.fill(STEP_STRATEGY, "strategyHeadline", strategy.get("strategyTitle"))

    pillars = []
    for theme in _l(strategy.get("contentThemes")):
        title = _t(_d(theme).get("theme"))
        if title:
            pillars.append({"title": title, "description": _t(_d(theme).get("description"))})
    w.override_list(STEP_STRATEGY, "strategyPillars", pillars)

    w.richer(STEP_INFLUENCERS, "influencerStrategy", strategy.get("strategySummary"))

    # headcount = sum of per-tier recommendations
    total = sum(parse_short_number(_d(t).get("recommendedCount")) for t in _l(strategy.get("tiers")))
    if isinstance(total, float) and not math.isfinite(total):
        total = 0
    if total > 0:
        w.fill_number(STEP_QUANTITIES, "influencerCount", int(total))

    # first KPI matching a slot wins that slot
    seen = set()
    for kpi in _l(strategy.get("expectedKPIs")):
        kpi = _d(kpi)
        slot = match_kpi_slot(kpi.get("metric"))
        if slot is None or slot in seen:
            continue
        value = parse_short_number(kpi.get("target"))
        if value:
            seen.add(slot)
            w.fill_number(STEP_MEDIA_TARGETS, slot, value)

    if not _l(w.get(STEP_INFLUENCERS, "influencers")):
        profiles = [p for p in (_influencer_profile(_d(r)) for r in _l(strategy.get("recommendations"))) if p]
        if profiles:
            w.set(STEP_INFLUENCERS, "influencers", profiles)


def enrich_step_data(
    step_data: StepData,
    brand_research: Optional[Dict[str, Any]] = None,
    influencer_strategy: Optional[Dict[str, Any]] = None,
) -> StepData:
    """
    New step-data map with research folded in. Inputs are never mutated;
    with no research payload the result is a deep-equal copy.
    """
    w = _Writer(step_data)
    brand = _payload(brand_research)
    strategy = _payload(influencer_strategy)
    if brand is None and strategy is None:
        return w.data

    if brand is not None:
        _apply_brand(w, brand)
    if strategy is not None:
        _apply_influencer(w, strategy)

    research = dict(_d(w.data.get(STEP_RESEARCH)))
    research["researchEnabled"] = True
    research["researchPhase"] = RESEARCH_PHASE_COMPLETE
    if brand is not None:
        research["brandResearch"] = copy.deepcopy(brand)
    if strategy is not None:
        research["influencerStrategy"] = copy.deepcopy(strategy)
    w.data[STEP_RESEARCH] = research

    logger.info("[Research] Enrichment wrote %d field(s): %s", len(w.written), ", ".join(w.written) or "-")
    return w.data


def changed_steps(before: StepData, after: StepData) -> List[str]:
    """Step ids whose data differs between two step-data maps."""
    before = _d(before)
    after = _d(after)
    return [step for step in after if after.get(step) != before.get(step)]
