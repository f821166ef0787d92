from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .client import ResearchClient, ResearchError

logger = logging.getLogger(__name__)


@dataclass
class ResearchResults:
    brand: Optional[Dict[str, Any]] = None
    colors: Optional[Dict[str, Any]] = None
    influencer: Optional[Dict[str, Any]] = None
    errors: Dict[str, str] = field(default_factory=dict)  # {"brand"|"influencer": message}

    @property
    def empty(self) -> bool:
        return self.brand is None and self.influencer is None


def run_research(
    brand_name: str,
    extracted: Optional[Dict[str, Any]],
    client: ResearchClient,
) -> ResearchResults:
    """
    Fire brand + influencer research concurrently and wait for BOTH
    (all-settled). One failure is recorded in .errors; both failing
    raises ResearchError. No brand name => no calls.
    """
    results = ResearchResults()
    name = (brand_name or "").strip()
    if not name:
        logger.info("[Research] No brand name, skipping research")
        return results

    with ThreadPoolExecutor(max_workers=2) as pool:
        brand_f = pool.submit(client.brand_research, name)
        influencer_f = pool.submit(client.influencer_research, name, extracted)

        try:
            brand = brand_f.result()
            results.brand = brand.get("research")
            results.colors = brand.get("colors")
        except Exception as e:
            logger.warning("[Research] Brand research failed: %s", e)
            results.errors["brand"] = str(e)

        try:
            results.influencer = influencer_f.result()
        except Exception as e:
            logger.warning("[Research] Influencer research failed: %s", e)
            results.errors["influencer"] = str(e)

    if results.empty:
        raise ResearchError("Both research calls failed: " + "; ".join(results.errors.values()))

    logger.info(
        "[Research] Done (brand=%s, influencer=%s)",
        results.brand is not None,
        results.influencer is not None,
    )
    return results
