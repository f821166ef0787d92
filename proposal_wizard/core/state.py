from __future__ import annotations

import copy
import json
import logging
from dataclasses import asdict, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .constants import (
    FIRST_STEP,
    MAX_VERSIONS_PER_KEY,
    STATUS_ACTIVE,
    STATUS_COMPLETED,
    STATUS_PENDING,
    STEP_ORDER,
    STEP_STATUSES,
)
from .extraction import extracted_data_to_step_data
from .history import clamp_history, is_valid_history
from .registry import initial_statuses, is_data_slot, is_known_step
from .types import FieldKey, StepData, StepId, VersionEntry, VersionHistory, WizardState

logger = logging.getLogger(__name__)

# Keys inside the document-store blob
DOC_WIZARD_STATE = "_wizardState"
DOC_EXTRACTED_DATA = "_extractedData"
DOC_STEP_DATA = "_stepData"
DOC_WIZARD_COMPLETE = "_wizardComplete"


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _is_empty(v: Any) -> bool:
    if v is None:
        return True
    if isinstance(v, str):
        return v.strip() == ""
    if isinstance(v, (list, tuple, dict, set)):
        return len(v) == 0
    return False


def has_content(step_data: StepData, step: StepId) -> bool:
    """True when the step holds at least one non-empty value."""
    payload = step_data.get(step)
    if not isinstance(payload, dict):
        return False
    return any(not _is_empty(v) for v in payload.values())


def left_step_status(state: WizardState, step: StepId) -> str:
    """
    Status of a step we are navigating away from without "continue".
    Only an active step changes; anything else keeps its status.
    """
    status = state.step_statuses.get(step, STATUS_PENDING)
    if status != STATUS_ACTIVE:
        return status
    return STATUS_COMPLETED if has_content(state.step_data, step) else STATUS_PENDING


# -----------------------------
# Construction
# -----------------------------
def initial_state(document_id: Optional[str] = None) -> WizardState:
    statuses = initial_statuses()
    statuses[FIRST_STEP] = STATUS_ACTIVE
    return WizardState(
        document_id=document_id,
        current_step=FIRST_STEP,
        step_statuses=statuses,
    )


def normalize_state(state: WizardState) -> WizardState:
    """
    Repairs malformed-but-well-typed state instead of failing:
    - total status map (missing -> pending, unknown keys/values dropped)
    - unknown current step -> first step, a pending current step becomes active
    - any other "active" step demoted
    - version cursors clamped, histories trimmed to the cap
    """
    repaired = []

    current = state.current_step
    if not is_known_step(current):
        repaired.append(f"current_step={current!r}")
        current = FIRST_STEP

    statuses: Dict[StepId, str] = {}
    for step in STEP_ORDER:
        status = state.step_statuses.get(step)
        if status not in STEP_STATUSES:
            if status is not None:
                repaired.append(f"status[{step}]={status!r}")
            status = STATUS_PENDING
        statuses[step] = status
    extras = [k for k in state.step_statuses if k not in statuses]
    if extras:
        repaired.append(f"unknown statuses {extras}")

    for step in STEP_ORDER:
        if step != current and statuses[step] == STATUS_ACTIVE:
            statuses[step] = (
                STATUS_COMPLETED if has_content(state.step_data, step) else STATUS_PENDING
            )
            repaired.append(f"extra active step {step}")

    # A completed current step is the "generated" marker and is kept as-is
    if statuses[current] not in (STATUS_ACTIVE, STATUS_COMPLETED):
        if statuses[current] != STATUS_PENDING:
            repaired.append(f"current step {current} was {statuses[current]}")
        statuses[current] = STATUS_ACTIVE

    history: Dict[FieldKey, VersionHistory] = {}
    for key, hist in state.version_history.items():
        if not is_valid_history(hist, MAX_VERSIONS_PER_KEY):
            repaired.append(f"history cursor {key}")
            hist = clamp_history(hist, MAX_VERSIONS_PER_KEY)
        history[key] = hist

    if repaired:
        logger.warning("[Wizard] Repaired persisted state: %s", "; ".join(repaired))

    return replace(
        state,
        current_step=current,
        step_statuses=statuses,
        version_history=history,
    )


# -----------------------------
# JSON layout (document-store shape, camelCase)
# -----------------------------
def state_to_dict(state: WizardState) -> Dict[str, Any]:
    return {
        "documentId": state.document_id,
        "currentStep": state.current_step,
        "stepStatuses": dict(state.step_statuses),
        "stepData": copy.deepcopy(state.step_data),
        "extractedData": copy.deepcopy(state.extracted_data),
        "versionHistory": {
            str(key): {
                "versions": [copy.deepcopy(asdict(v)) for v in hist.versions],
                "currentIndex": hist.current_index,
            }
            for key, hist in state.version_history.items()
        },
        "isDirty": state.is_dirty,
        "lastSavedAt": state.last_saved_at,
    }


def _list_or_empty(v: Any) -> list:
    return v if isinstance(v, list) else []


def _parse_history(raw: Any) -> Optional[VersionHistory]:
    if not isinstance(raw, dict):
        return None

    versions = []
    for v in _list_or_empty(raw.get("versions")):
        if not isinstance(v, dict):
            continue
        data = v.get("data")
        versions.append(
            VersionEntry(
                data=dict(data) if isinstance(data, dict) else {},
                timestamp=str(v.get("timestamp") or ""),
                source=str(v.get("source") or ""),
            )
        )

    try:
        idx = int(raw.get("currentIndex", len(versions) - 1))
    except (TypeError, ValueError, OverflowError):
        idx = len(versions) - 1

    return VersionHistory(versions=versions, current_index=idx)


def _dict_or_empty(v: Any) -> Dict[str, Any]:
    return v if isinstance(v, dict) else {}


def state_from_dict(data: Any) -> WizardState:
    """
    Rehydrates a serialized WizardState.
    Backward-compatible: accepts the older "aiVersionHistory" key and
    defaults anything missing. Never raises on odd input.
    """
    if not isinstance(data, dict):
        return initial_state()

    statuses = _dict_or_empty(data.get("stepStatuses"))
    step_data = {k: v for k, v in _dict_or_empty(data.get("stepData")).items() if isinstance(v, dict)}
    extracted = {k: v for k, v in _dict_or_empty(data.get("extractedData")).items() if isinstance(v, dict)}

    vh_raw = data.get("versionHistory")
    if vh_raw is None:
        vh_raw = data.get("aiVersionHistory")

    history: Dict[FieldKey, VersionHistory] = {}
    for raw_key, raw_hist in _dict_or_empty(vh_raw).items():
        try:
            key = FieldKey.parse(raw_key)
        except ValueError:
            logger.warning("[Wizard] Dropping history with bad key %r", raw_key)
            continue
        hist = _parse_history(raw_hist)
        if hist is not None:
            history[key] = hist

    last_saved = data.get("lastSavedAt")
    doc_id = data.get("documentId")

    state = WizardState(
        document_id=str(doc_id) if doc_id is not None else None,
        current_step=str(data.get("currentStep") or FIRST_STEP),
        step_statuses={str(k): v for k, v in statuses.items()},
        step_data=copy.deepcopy(step_data),
        extracted_data=copy.deepcopy(extracted),
        version_history=history,
        is_dirty=bool(data.get("isDirty", False)),
        last_saved_at=str(last_saved) if last_saved is not None else None,
    )
    return normalize_state(state)


def dump_state(state: WizardState) -> str:
    return json.dumps(state_to_dict(state), ensure_ascii=False, indent=2)


def load_state(text: str) -> WizardState:
    return state_from_dict(json.loads(text))


# -----------------------------
# Session bootstrap from a document blob
# -----------------------------
def state_from_document(document_id: Optional[str], data: Optional[Dict[str, Any]]) -> WizardState:
    """
    Resume a persisted wizard (trusted, never dirty) or start fresh from
    the upstream extraction. Either shape may be absent.
    """
    data = data if isinstance(data, dict) else {}

    saved = data.get(DOC_WIZARD_STATE)
    if isinstance(saved, dict):
        state = state_from_dict(saved)
        return replace(
            state,
            document_id=document_id if document_id is not None else state.document_id,
            is_dirty=False,
        )

    state = initial_state(document_id)

    baseline: StepData = {}
    extracted = data.get(DOC_EXTRACTED_DATA)
    if isinstance(extracted, dict):
        baseline = extracted_data_to_step_data(extracted)

    step_data = copy.deepcopy(baseline)

    # Research phase may have written enriched step data before the wizard opened
    enriched = data.get(DOC_STEP_DATA)
    if isinstance(enriched, dict):
        for step, payload in enriched.items():
            if is_data_slot(step) and isinstance(payload, dict):
                step_data[step] = {**step_data.get(step, {}), **copy.deepcopy(payload)}

    return replace(state, step_data=step_data, extracted_data=baseline)
