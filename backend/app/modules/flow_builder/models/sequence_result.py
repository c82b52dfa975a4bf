"""
Result types for flow assembly.

These are plain dataclasses rather than ORM models: nothing about a
submitted sequence is persisted.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from app.modules.flow_builder.constants import FailureStage


@dataclass(frozen=True)
class FlowRef:
    """A flow created in Klaviyo."""
    id: str


@dataclass(frozen=True)
class ActionRef:
    """A flow action (email or time delay) created in Klaviyo."""
    id: str


@dataclass(frozen=True)
class TemplateRef:
    """A message template created in Klaviyo."""
    id: str


@dataclass
class StepFailure:
    """
    A non-fatal failure of one remote call within a step.

    status is the upstream HTTP status, or None for transport faults.
    error holds the upstream body verbatim (or the fault message).
    """
    step: int
    stage: FailureStage
    status: Optional[int]
    error: str

    def to_dict(self) -> dict:
        return {
            "step": self.step,
            "stage": self.stage.value,
            "status": self.status,
            "error": self.error,
        }


@dataclass
class StepOutcome:
    """
    What happened for one email step.

    action_id is None when the email action itself could not be created;
    in that case no template, link or delay was attempted for the step.
    """
    step: int
    action_id: Optional[str] = None
    template_id: Optional[str] = None
    linked: bool = False
    delay_action_id: Optional[str] = None
    failures: List[StepFailure] = field(default_factory=list)

    @property
    def created(self) -> bool:
        return self.action_id is not None

    def fail(self, stage: FailureStage, status: Optional[int], error: str) -> None:
        self.failures.append(StepFailure(self.step, stage, status, error))


@dataclass
class SequenceResult:
    """
    Outcome of a completed assembly.

    action_ids only lists email actions that were created. message always
    counts the requested steps, so compare len(action_ids) against the
    request (or look at failures) to detect a partial result.
    """
    flow_id: str
    message: str = ""
    steps: List[StepOutcome] = field(default_factory=list)

    @property
    def action_ids(self) -> List[str]:
        return [s.action_id for s in self.steps if s.action_id is not None]

    @property
    def delay_action_ids(self) -> List[str]:
        return [s.delay_action_id for s in self.steps if s.delay_action_id is not None]

    @property
    def failures(self) -> List[StepFailure]:
        return [f for s in self.steps for f in s.failures]

    @property
    def is_partial(self) -> bool:
        return any(s.failures for s in self.steps)

    def failures_for_stage(self, stage: FailureStage) -> List[StepFailure]:
        return [f for f in self.failures if f.stage == stage]
