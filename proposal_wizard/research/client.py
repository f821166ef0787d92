from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from ..core import config
from .json_parser import JSONParseError, parse_json_strict

logger = logging.getLogger(__name__)

BRAND_RESEARCH_PATH = "/api/research"
INFLUENCER_RESEARCH_PATH = "/api/influencers"


class ResearchError(RuntimeError):
    pass


def _d(v: Any) -> Dict[str, Any]:
    return v if isinstance(v, dict) else {}


def influencer_request_payload(brand_name: str, extracted: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Body for the influencer research call: a trimmed brand summary built
    from the extraction (the full brand research is not awaited).
    """
    extracted = _d(extracted)
    brand = _d(extracted.get("brand"))
    primary = _d(_d(extracted.get("targetAudience")).get("primary"))
    goals = extracted.get("campaignGoals")

    return {
        "mode": "research",
        "brandResearch": {
            "brandName": brand_name,
            "industry": brand.get("industry") or "",
            "targetDemographics": {
                "primaryAudience": {
                    "gender": primary.get("gender") or "",
                    "ageRange": primary.get("ageRange") or "",
                    "interests": primary.get("interests") if isinstance(primary.get("interests"), list) else [],
                },
            },
        },
        "budget": _d(extracted.get("budget")).get("amount") or 0,
        "goals": goals if isinstance(goals, list) else [],
    }


# -------------------------
# Client
# -------------------------
class ResearchClient:
    """
    Single entry point for the research provider.

    - USE_RESEARCH=0 => never calls the network, returns minimal stub payloads
    - USE_RESEARCH=1 => POSTs to RESEARCH_BASE_URL

    Bodies go through the tolerant JSON parser, not r.json(): a plain JSON
    route parses the same, and a model-backed provider that wraps its answer
    in fences or prose still yields the object.

    Non-2xx responses and unparseable bodies raise ResearchError; the
    caller (runner) decides what a single failure means.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_sec: Optional[float] = None,
        use_research: Optional[bool] = None,
        verify_ssl: Optional[bool] = None,
    ):
        self.base_url = (base_url if base_url is not None else config.research_base_url()).rstrip("/")
        self.timeout_sec = timeout_sec if timeout_sec is not None else config.research_timeout_sec()
        self.use_research = use_research if use_research is not None else config.use_research()
        self.verify_ssl = verify_ssl if verify_ssl is not None else config.research_verify_ssl()

    # -------------------------
    # Public API
    # -------------------------
    def brand_research(self, brand_name: str) -> Dict[str, Any]:
        """Returns {"research": {...}, "colors": {...} | None}."""
        if not self.use_research:
            return self._stub_brand(brand_name)

        data = self._post(BRAND_RESEARCH_PATH, {"brandName": brand_name})
        research = data.get("research")
        if not isinstance(research, dict):
            raise ResearchError("Brand research response has no 'research' object")
        colors = data.get("colors")
        return {"research": research, "colors": colors if isinstance(colors, dict) else None}

    def influencer_research(self, brand_name: str, extracted: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Returns the influencer strategy document."""
        if not self.use_research:
            return self._stub_influencer(brand_name)

        data = self._post(INFLUENCER_RESEARCH_PATH, influencer_request_payload(brand_name, extracted))
        strategy = data.get("strategy")
        # some deployments return the strategy at the top level
        return strategy if isinstance(strategy, dict) else data

    # -------------------------
    # Stubs (offline mode)
    # -------------------------
    def _stub_brand(self, brand_name: str) -> Dict[str, Any]:
        return {
            "research": {
                "brandName": brand_name,
                "companyDescription": "",
                "targetDemographics": {"primaryAudience": {}},
            },
            "colors": None,
        }

    def _stub_influencer(self, brand_name: str) -> Dict[str, Any]:
        return {
            "strategyTitle": "",
            "strategySummary": "",
            "tiers": [],
            "recommendations": [],
            "contentThemes": [],
            "expectedKPIs": [],
        }

    # -------------------------
    # HTTP
    # -------------------------
    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.base_url:
            raise ResearchError("RESEARCH_BASE_URL is required when USE_RESEARCH=1")

        url = self.base_url + path
        logger.info("[Research] POST %s", url)
        try:
            r = requests.post(
                url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout_sec,
                verify=self.verify_ssl,
            )
        except requests.RequestException as e:
            raise ResearchError(f"Research request to {path} failed: {e}") from e

        if not r.ok:
            raise ResearchError(f"Research HTTP {r.status_code} on {path}: {r.text[:500]}")

        try:
            data = parse_json_strict(r.text)
        except JSONParseError as e:
            raise ResearchError(f"Unparseable research response from {path}") from e

        if not isinstance(data, dict):
            raise ResearchError(f"Research response from {path} is not an object")
        return data
