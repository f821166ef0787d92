from __future__ import annotations

import math
import os

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


def env_str(key: str, default: str = "") -> str:
    """Stripped value of `key`; an unset variable falls back to `default`."""
    return str(os.environ.get(key, default)).strip()


def env_bool(key: str, default: str = "0") -> bool:
    # 1/true/yes/y/on, any case; everything else is False
    return env_str(key, default).lower() in _TRUTHY


def env_float(key: str, default: float) -> float:
    raw = env_str(key, "")
    if not raw:
        return float(default)
    try:
        value = float(raw)
    except ValueError:
        return float(default)
    return value if math.isfinite(value) else float(default)


# -------------------------------------------------
# Runtime getters (read at call time, not import time)
# -------------------------------------------------
def use_research() -> bool:
    """USE_RESEARCH=0 -> research client returns stub payloads (no network)."""
    return env_bool("USE_RESEARCH", "0")


def research_base_url() -> str:
    return env_str("RESEARCH_BASE_URL", "").rstrip("/")


def research_timeout_sec() -> float:
    return env_float("RESEARCH_TIMEOUT_SEC", 60.0)


def research_verify_ssl() -> bool:
    return env_bool("RESEARCH_VERIFY_SSL", "1")


def autosave_delay_sec() -> float:
    return env_float("AUTOSAVE_DELAY_SEC", 5.0)


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper() or "INFO"
