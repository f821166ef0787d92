from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, List, Optional

from .constants import STATUS_ACTIVE, STATUS_COMPLETED, STATUS_SKIPPED
from .history import navigate, push_version
from .registry import (
    is_data_slot,
    is_known_step,
    next_step,
    prev_step,
    required_steps,
    step_index,
)
from .state import has_content, left_step_status, normalize_state, now_iso
from .types import (
    FieldKey,
    GoToStep,
    LoadState,
    MarkDirty,
    MarkSaved,
    MarkStepComplete,
    NavigateVersion,
    NextStep,
    PrevStep,
    PushVersion,
    SetDocumentId,
    SetExtractedData,
    SkipStep,
    StepId,
    Transition,
    UpdateStepData,
    WizardAction,
    WizardState,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], str]


def _ignored(state: WizardState, action: WizardAction, why: str) -> Transition:
    # Illegal transitions are silent no-ops; UI is expected to hide them already
    logger.debug("[Wizard] Ignored %s: %s", type(action).__name__, why)
    return Transition(state=state, applied=False)


def _applied(state: WizardState) -> Transition:
    return Transition(state=state, applied=True)


def _parse_key(raw) -> Optional[FieldKey]:
    try:
        key = FieldKey.parse(raw)
    except ValueError:
        return None
    return key if is_known_step(key.step) else None


# -----------------------------
# Step navigation
# -----------------------------
def _go_to_step(state: WizardState, action: GoToStep) -> Transition:
    target = action.step
    if not is_known_step(target):
        return _ignored(state, action, f"unknown step {target!r}")

    status = state.step_statuses.get(target)
    if target != state.current_step and status not in (STATUS_COMPLETED, STATUS_SKIPPED):
        return _ignored(state, action, f"step {target!r} is {status}")

    statuses = dict(state.step_statuses)
    if target != state.current_step:
        statuses[state.current_step] = left_step_status(state, state.current_step)
    statuses[target] = STATUS_ACTIVE

    return _applied(replace(state, current_step=target, step_statuses=statuses))


def _next_step(state: WizardState, action: NextStep) -> Transition:
    current = state.current_step
    nxt = next_step(current)
    if nxt is None:
        return _ignored(state, action, "already at the last step")

    # "Continue" always advances the active step's progress
    status = STATUS_COMPLETED if has_content(state.step_data, current) else state.step_statuses.get(current)
    if status == STATUS_ACTIVE:
        status = STATUS_COMPLETED

    statuses = dict(state.step_statuses)
    statuses[current] = status
    statuses[nxt] = STATUS_ACTIVE

    return _applied(replace(state, current_step=nxt, step_statuses=statuses, is_dirty=True))


def _prev_step(state: WizardState, action: PrevStep) -> Transition:
    current = state.current_step
    prv = prev_step(current)
    if prv is None:
        return _ignored(state, action, "already at the first step")

    statuses = dict(state.step_statuses)
    statuses[current] = left_step_status(state, current)
    statuses[prv] = STATUS_ACTIVE

    return _applied(replace(state, current_step=prv, step_statuses=statuses))


def _skip_step(state: WizardState, action: SkipStep) -> Transition:
    # Required steps are NOT rejected here; that policy belongs to the caller
    current = state.current_step
    nxt = next_step(current)
    if nxt is None:
        return _ignored(state, action, "already at the last step")

    statuses = dict(state.step_statuses)
    statuses[current] = STATUS_SKIPPED
    statuses[nxt] = STATUS_ACTIVE

    return _applied(replace(state, current_step=nxt, step_statuses=statuses, is_dirty=True))


def _mark_step_complete(state: WizardState, action: MarkStepComplete) -> Transition:
    if not is_known_step(action.step):
        return _ignored(state, action, f"unknown step {action.step!r}")

    statuses = dict(state.step_statuses)
    statuses[action.step] = STATUS_COMPLETED
    return _applied(replace(state, step_statuses=statuses))


# -----------------------------
# Step data
# -----------------------------
def _merge_into_step(state: WizardState, step: StepId, patch) -> WizardState:
    step_data = dict(state.step_data)
    step_data[step] = {**(state.step_data.get(step) or {}), **dict(patch or {})}
    return replace(state, step_data=step_data, is_dirty=True)


def _update_step_data(state: WizardState, action: UpdateStepData) -> Transition:
    if not is_data_slot(action.step):
        return _ignored(state, action, f"unknown step {action.step!r}")
    return _applied(_merge_into_step(state, action.step, action.data))


# -----------------------------
# Version history
# -----------------------------
def _push_version(state: WizardState, action: PushVersion, clock: Clock) -> Transition:
    key = _parse_key(action.key)
    if key is None:
        return _ignored(state, action, f"bad field key {action.key!r}")

    history = dict(state.version_history)
    history[key] = push_version(history.get(key), action.data, action.source, clock())
    return _applied(replace(state, version_history=history))


def _navigate_version(state: WizardState, action: NavigateVersion) -> Transition:
    key = _parse_key(action.key)
    if key is None:
        return _ignored(state, action, f"bad field key {action.key!r}")

    moved = navigate(state.version_history.get(key), action.direction)
    if moved is None:
        return _ignored(state, action, f"no {action.direction!r} version for {key}")

    history = dict(state.version_history)
    history[key] = moved

    # Navigating is equivalent to the user making that edit
    version = moved.versions[moved.current_index]
    new_state = _merge_into_step(state, key.step, version.data)
    return _applied(replace(new_state, version_history=history))


# -----------------------------
# Public entrypoints
# -----------------------------
def apply_action(
    state: WizardState,
    action: WizardAction,
    clock: Optional[Clock] = None,
) -> Transition:
    """
    Single mutation surface of the wizard.

    Pure: the input state is never modified. Returns the next state plus
    `applied`, which is False for ignored actions (state returned as-is).
    Never raises on well-typed input.
    """
    if isinstance(action, GoToStep):
        return _go_to_step(state, action)
    if isinstance(action, NextStep):
        return _next_step(state, action)
    if isinstance(action, PrevStep):
        return _prev_step(state, action)
    if isinstance(action, SkipStep):
        return _skip_step(state, action)
    if isinstance(action, UpdateStepData):
        return _update_step_data(state, action)
    if isinstance(action, MarkStepComplete):
        return _mark_step_complete(state, action)
    if isinstance(action, LoadState):
        return _applied(replace(normalize_state(action.state), is_dirty=False))
    if isinstance(action, MarkSaved):
        return _applied(replace(state, is_dirty=False, last_saved_at=action.timestamp))
    if isinstance(action, SetDocumentId):
        return _applied(replace(state, document_id=action.document_id))
    if isinstance(action, SetExtractedData):
        return _applied(replace(state, extracted_data=dict(action.data or {})))
    if isinstance(action, MarkDirty):
        return _applied(replace(state, is_dirty=True))
    if isinstance(action, PushVersion):
        return _push_version(state, action, clock or now_iso)
    if isinstance(action, NavigateVersion):
        return _navigate_version(state, action)

    return _ignored(state, action, "unknown action")


def reduce(state: WizardState, action: WizardAction, clock: Optional[Clock] = None) -> WizardState:
    return apply_action(state, action, clock=clock).state


# -----------------------------
# Queries
# -----------------------------
def can_navigate_to_step(state: WizardState, step: StepId) -> bool:
    """Progress-bar clicks: completed, skipped, or the current step."""
    status = state.step_statuses.get(step)
    return step == state.current_step or status in (STATUS_COMPLETED, STATUS_SKIPPED)


def is_wizard_complete(state: WizardState) -> bool:
    return all(state.step_statuses.get(s) == STATUS_COMPLETED for s in required_steps())


def current_step_number(state: WizardState) -> int:
    """1-based, for display."""
    return step_index(state.current_step) + 1


def active_steps(state: WizardState) -> List[StepId]:
    return [s for s, status in state.step_statuses.items() if status == STATUS_ACTIVE]
