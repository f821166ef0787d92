from __future__ import annotations

from typing import Dict, List, Optional

from .constants import STATUS_PENDING, STEP_DATA_SLOTS, STEP_ORDER, WIZARD_STEPS
from .types import StepId, StepMeta


def _build_step_meta() -> Dict[StepId, StepMeta]:
    """
    Step order must be deterministic: order is the WIZARD_STEPS position (1-based).
    """
    out: Dict[StepId, StepMeta] = {}
    for i, (step_id, required, label, label_short, description) in enumerate(WIZARD_STEPS, start=1):
        out[step_id] = StepMeta(
            id=step_id,
            order=i,
            required=required,
            label=label,
            label_short=label_short,
            description=description,
        )
    return out


STEP_META = _build_step_meta()


def is_known_step(step_id: Optional[str]) -> bool:
    return step_id in STEP_META


def is_data_slot(step_id: Optional[str]) -> bool:
    """Steps plus the research phase slot: valid keys of step_data."""
    return step_id in STEP_DATA_SLOTS


def get_step_meta(step_id: StepId) -> StepMeta:
    return STEP_META[step_id]


def all_steps() -> List[StepMeta]:
    return [STEP_META[s] for s in STEP_ORDER]


def required_steps() -> List[StepId]:
    return [s for s in STEP_ORDER if STEP_META[s].required]


def step_index(step_id: StepId) -> int:
    """0-based position, -1 for unknown ids."""
    try:
        return STEP_ORDER.index(step_id)
    except ValueError:
        return -1


def next_step(step_id: StepId) -> Optional[StepId]:
    idx = step_index(step_id)
    if idx < 0 or idx >= len(STEP_ORDER) - 1:
        return None
    return STEP_ORDER[idx + 1]


def prev_step(step_id: StepId) -> Optional[StepId]:
    idx = step_index(step_id)
    if idx <= 0:
        return None
    return STEP_ORDER[idx - 1]


def initial_statuses() -> Dict[StepId, str]:
    return {s: STATUS_PENDING for s in STEP_ORDER}
