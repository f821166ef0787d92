from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


StepId = str
FieldName = str
StepData = Dict[StepId, Dict[str, Any]]


@dataclass(frozen=True)
class StepMeta:
    id: StepId
    order: int                    # 1..N, dense
    required: bool
    label: str = ""
    label_short: str = ""
    description: str = ""


@dataclass(frozen=True)
class FieldKey:
    """
    Address of one versionable value: (step, field).
    Rendered as "<step>.<field>" when persisted.
    """
    step: StepId
    field: FieldName

    @classmethod
    def parse(cls, raw: Union["FieldKey", str]) -> "FieldKey":
        if isinstance(raw, FieldKey):
            return raw
        text = str(raw or "")
        step, sep, name = text.partition(".")
        if not sep or not step or not name:
            raise ValueError(f"Invalid field key: {text!r} (expected '<step>.<field>')")
        return cls(step=step, field=name)

    def __str__(self) -> str:
        return f"{self.step}.{self.field}"


@dataclass
class VersionEntry:
    data: Dict[str, Any]
    timestamp: str                # ISO-8601 timestamp
    source: str                   # "ai" | "research" | "manual"


@dataclass
class VersionHistory:
    versions: List[VersionEntry] = field(default_factory=list)
    current_index: int = -1


@dataclass
class WizardState:
    current_step: StepId
    step_statuses: Dict[StepId, str]

    document_id: Optional[str] = None

    # User-editable payload per step (shape is step specific)
    step_data: StepData = field(default_factory=dict)

    # Original AI-extracted baseline, read path only
    extracted_data: StepData = field(default_factory=dict)

    version_history: Dict[FieldKey, VersionHistory] = field(default_factory=dict)

    is_dirty: bool = False
    last_saved_at: Optional[str] = None


@dataclass(frozen=True)
class Transition:
    state: WizardState
    applied: bool


# -----------------------------
# Actions
# -----------------------------
@dataclass(frozen=True)
class GoToStep:
    step: StepId


@dataclass(frozen=True)
class NextStep:
    pass


@dataclass(frozen=True)
class PrevStep:
    pass


@dataclass(frozen=True)
class SkipStep:
    pass


@dataclass(frozen=True)
class UpdateStepData:
    step: StepId
    data: Dict[str, Any]


@dataclass(frozen=True)
class MarkStepComplete:
    step: StepId


@dataclass(frozen=True)
class LoadState:
    state: WizardState


@dataclass(frozen=True)
class MarkSaved:
    timestamp: str


@dataclass(frozen=True)
class SetDocumentId:
    document_id: str


@dataclass(frozen=True)
class SetExtractedData:
    data: StepData


@dataclass(frozen=True)
class MarkDirty:
    pass


@dataclass(frozen=True)
class PushVersion:
    key: Union[FieldKey, str]
    data: Dict[str, Any]
    source: str


@dataclass(frozen=True)
class NavigateVersion:
    key: Union[FieldKey, str]
    direction: str                # "prev" | "next"


WizardAction = Union[
    GoToStep,
    NextStep,
    PrevStep,
    SkipStep,
    UpdateStepData,
    MarkStepComplete,
    LoadState,
    MarkSaved,
    SetDocumentId,
    SetExtractedData,
    MarkDirty,
    PushVersion,
    NavigateVersion,
]
