"""
Per-field version history.

Each field key owns ONE linear timeline with a cursor:
- push discards everything forward of the cursor, then appends (no redo after fork)
- the timeline is capped; the oldest entries fall off the front
- navigation only moves the cursor, clamped to the bounds

All functions return new objects and never mutate their arguments.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .constants import MAX_VERSIONS_PER_KEY
from .types import VersionEntry, VersionHistory

DIRECTION_PREV = "prev"
DIRECTION_NEXT = "next"


def _clamped_index(history: VersionHistory) -> int:
    n = len(history.versions)
    if n == 0:
        return -1
    return max(0, min(int(history.current_index), n - 1))


def clamp_history(history: VersionHistory, cap: int = MAX_VERSIONS_PER_KEY) -> VersionHistory:
    """
    Repair a history loaded from outside (tampered cursor, too many versions).
    Keeps the newest `cap` versions and re-bases the cursor onto them.
    """
    versions = list(history.versions)
    idx = _clamped_index(history)

    dropped = max(0, len(versions) - cap)
    if dropped:
        versions = versions[dropped:]
        idx = max(0, idx - dropped)

    if not versions:
        idx = -1
    return VersionHistory(versions=versions, current_index=idx)


def is_valid_history(history: VersionHistory, cap: int = MAX_VERSIONS_PER_KEY) -> bool:
    n = len(history.versions)
    if n > cap:
        return False
    if n == 0:
        return history.current_index == -1
    return 0 <= history.current_index < n


def push_version(
    history: Optional[VersionHistory],
    data: Dict[str, Any],
    source: str,
    timestamp: str,
    cap: int = MAX_VERSIONS_PER_KEY,
) -> VersionHistory:
    existing = history or VersionHistory()
    idx = _clamped_index(existing)

    # Abandoned "future" branch is discarded before appending
    trimmed = list(existing.versions[: idx + 1])
    trimmed.append(VersionEntry(data=dict(data or {}), timestamp=timestamp, source=source))

    versions = trimmed[-cap:]
    return VersionHistory(versions=versions, current_index=len(versions) - 1)


def navigate(history: Optional[VersionHistory], direction: str) -> Optional[VersionHistory]:
    """
    Returns the moved history, or None when nothing moves
    (unknown direction, empty history, already at the bound).
    """
    if history is None or not history.versions:
        return None

    cur = _clamped_index(history)
    if direction == DIRECTION_PREV:
        new_idx = max(0, cur - 1)
    elif direction == DIRECTION_NEXT:
        new_idx = min(len(history.versions) - 1, cur + 1)
    else:
        return None

    if new_idx == cur:
        return None
    return VersionHistory(versions=list(history.versions), current_index=new_idx)


def current_version(history: Optional[VersionHistory]) -> Optional[VersionEntry]:
    if history is None or not history.versions:
        return None
    return history.versions[_clamped_index(history)]
