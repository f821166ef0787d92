from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional

from ..export.projector import project_proposal
from ..research.client import ResearchClient
from ..research.enrichment import changed_steps, enrich_step_data
from ..research.runner import ResearchResults, run_research
from .autosave import Debouncer
from .config import autosave_delay_sec
from .constants import SOURCE_AI, SOURCE_RESEARCH, STEP_BRIEF, STEP_RESEARCH
from .reducer import (
    apply_action,
    can_navigate_to_step,
    current_step_number,
    is_wizard_complete,
)
from .registry import get_step_meta
from .state import (
    DOC_EXTRACTED_DATA,
    DOC_WIZARD_COMPLETE,
    DOC_WIZARD_STATE,
    now_iso,
    state_from_document,
    state_to_dict,
)
from .types import (
    FieldKey,
    GoToStep,
    MarkSaved,
    MarkStepComplete,
    NavigateVersion,
    NextStep,
    PrevStep,
    PushVersion,
    SkipStep,
    StepId,
    UpdateStepData,
    WizardAction,
    WizardState,
)
from .validation import validate_state, validate_step

logger = logging.getLogger(__name__)

# save_fn(document_id, patch_payload); raising means the save failed
SaveFn = Callable[[Optional[str], Dict[str, Any]], Any]

# field under which a step's research-enriched snapshot is versioned
ENRICHMENT_VERSION_FIELD = "enrichment"

# NOTE:
# This module is the main integration point for external tools/UI.
# The reducer stays pure; everything here is caller-side policy:
# validate-before-continue, save-before-navigate, debounced autosave.


@dataclass
class FinishResult:
    errors: Dict[StepId, Dict[str, str]] = field(default_factory=dict)
    payload: Optional[Dict[str, Any]] = None
    saved: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors


class WizardSession:
    """
    One open wizard for one document.

    Holds the current WizardState and routes every change through the
    reducer. Dirty states are persisted through save_fn after a quiet
    period (AUTOSAVE_DELAY_SEC), and immediately before navigating.
    Without save_fn nothing is ever persisted.
    """

    def __init__(
        self,
        document_id: Optional[str],
        document: Optional[Dict[str, Any]] = None,
        save_fn: Optional[SaveFn] = None,
        clock: Optional[Callable[[], str]] = None,
        autosave_delay: Optional[float] = None,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        self.document: Dict[str, Any] = document if isinstance(document, dict) else {}
        self.state: WizardState = state_from_document(document_id, self.document)
        self.save_fn = save_fn
        self.clock = clock or now_iso

        # autosave fires on a timer thread
        self._lock = threading.RLock()
        self._autosave: Optional[Debouncer] = None
        if save_fn is not None:
            delay = autosave_delay if autosave_delay is not None else autosave_delay_sec()
            self._autosave = Debouncer(delay, self.save_now, timer_factory=timer_factory)

    # -----------------------------
    # Core
    # -----------------------------
    def dispatch(self, action: WizardAction) -> bool:
        with self._lock:
            transition = apply_action(self.state, action, clock=self.clock)
            self.state = transition.state
            dirty = self.state.is_dirty
        if transition.applied and dirty and self._autosave is not None:
            self._autosave.call()
        return transition.applied

    @property
    def current_step(self) -> StepId:
        return self.state.current_step

    @property
    def current_step_data(self) -> Dict[str, Any]:
        return self.state.step_data.get(self.state.current_step) or {}

    @property
    def step_number(self) -> int:
        return current_step_number(self.state)

    def is_complete(self) -> bool:
        return is_wizard_complete(self.state)

    def can_go_to(self, step: StepId) -> bool:
        return can_navigate_to_step(self.state, step)

    # -----------------------------
    # Editing
    # -----------------------------
    def update(self, data: Dict[str, Any], step: Optional[StepId] = None) -> bool:
        """Shallow-merge data into a step (default: the current one)."""
        return self.dispatch(UpdateStepData(step=step or self.state.current_step, data=data))

    def push_version(self, key, data: Dict[str, Any], source: str = SOURCE_AI) -> bool:
        return self.dispatch(PushVersion(key=key, data=data, source=source))

    def navigate_version(self, key, direction: str) -> bool:
        return self.dispatch(NavigateVersion(key=key, direction=direction))

    # -----------------------------
    # Navigation
    # -----------------------------
    def _save_if_dirty(self) -> None:
        if self.state.is_dirty:
            self.save_now()

    def continue_(self) -> Optional[Dict[str, str]]:
        """
        Validate the current step (required steps only), mark it complete
        and advance. Returns the field errors instead when blocked.
        """
        current = self.state.current_step
        if get_step_meta(current).required:
            errors = validate_step(current, self.current_step_data)
            if errors:
                logger.info("[Wizard] Continue blocked on %s: %s", current, ", ".join(errors))
                return errors

        self.dispatch(MarkStepComplete(step=current))
        self._save_if_dirty()
        self.dispatch(NextStep())
        return None

    def back(self) -> bool:
        self._save_if_dirty()
        return self.dispatch(PrevStep())

    def skip(self) -> bool:
        self._save_if_dirty()
        return self.dispatch(SkipStep())

    def go_to(self, step: StepId) -> bool:
        self._save_if_dirty()
        return self.dispatch(GoToStep(step=step))

    # -----------------------------
    # Research
    # -----------------------------
    def apply_research(
        self,
        brand_research: Optional[Dict[str, Any]] = None,
        influencer_strategy: Optional[Dict[str, Any]] = None,
    ) -> List[StepId]:
        """
        Fold research results into the step data. Each changed step goes
        through UpdateStepData and gets a research-sourced version, so fields
        research overwrote are one "prev" away. Navigation merges, so fields
        research added are kept. Returns changed step ids.
        """
        with self._lock:
            before = self.state.step_data
            enriched = enrich_step_data(before, brand_research, influencer_strategy)
            changed = changed_steps(before, enriched)

            for step in changed:
                if step != STEP_RESEARCH and step in before:
                    # baseline snapshot first, so navigating back restores it
                    key = FieldKey(step, ENRICHMENT_VERSION_FIELD)
                    if key not in self.state.version_history:
                        self.dispatch(PushVersion(key=key, data=dict(before[step]), source=SOURCE_AI))
                self.dispatch(UpdateStepData(step=step, data=enriched[step]))
                if step != STEP_RESEARCH:
                    self.dispatch(
                        PushVersion(key=FieldKey(step, ENRICHMENT_VERSION_FIELD), data=enriched[step], source=SOURCE_RESEARCH)
                    )

        logger.info("[Research] Applied to steps: %s", ", ".join(changed) or "-")
        return changed

    def run_research(self, client: Optional[ResearchClient] = None) -> ResearchResults:
        """
        Research phase: both provider calls (all-settled), then enrichment.
        Brand name comes from the brief step.
        """
        client = client or ResearchClient()
        brand_name = str((self.state.step_data.get(STEP_BRIEF) or {}).get("brandName") or "")
        extracted = self.document.get(DOC_EXTRACTED_DATA)

        results = run_research(brand_name, extracted if isinstance(extracted, dict) else None, client)
        if not results.empty:
            self.apply_research(results.brand, results.influencer)
        return results

    # -----------------------------
    # Persistence
    # -----------------------------
    def _persisted_state(self) -> Dict[str, Any]:
        # persisted state is never dirty
        return state_to_dict(replace(self.state, is_dirty=False))

    def _write(self, payload: Dict[str, Any]) -> bool:
        if self.save_fn is None:
            return False
        if self._autosave is not None:
            self._autosave.cancel()
        try:
            self.save_fn(self.state.document_id, payload)
        except Exception:
            logger.exception("[Wizard] Save failed for document %s", self.state.document_id)
            return False
        self.dispatch(MarkSaved(timestamp=self.clock()))
        return True

    def save_now(self) -> bool:
        """PATCH-style save of the wizard state. False when not saved."""
        with self._lock:
            return self._write({DOC_WIZARD_STATE: self._persisted_state()})

    def flush(self) -> bool:
        """Run a pending autosave right away (e.g. on exit)."""
        if self._autosave is None:
            return False
        return self._autosave.flush()

    def finish(self) -> FinishResult:
        """
        Validate every required step, mark the current one complete and
        build the final document payload (proposal record + wizard state).
        """
        with self._lock:
            errors = validate_state(self.state)
            if errors:
                logger.info("[Wizard] Finish blocked, invalid steps: %s", ", ".join(errors))
                return FinishResult(errors=errors)

            self.dispatch(MarkStepComplete(step=self.state.current_step))
            payload = {
                **project_proposal(self.state.step_data),
                DOC_WIZARD_STATE: self._persisted_state(),
                DOC_WIZARD_COMPLETE: True,
            }
            saved = self._write(payload)

        return FinishResult(payload=payload, saved=saved)
