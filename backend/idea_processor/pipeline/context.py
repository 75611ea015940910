import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from idea_processor.errors import IdeaProcessorError

logger = logging.getLogger(__name__)


class FlowState(Enum):
    RECEIVED = "received"
    BUILDING = "building"
    CALLING = "calling"
    SANITIZING = "sanitizing"
    VALIDATING = "validating"
    PERSISTING = "persisting"
    COMPLETED = "completed"
    FAILED = "failed"


# No retry edges: a failed flow stays failed
TRANSITIONS: Dict[FlowState, FrozenSet[FlowState]] = {
    FlowState.RECEIVED: frozenset({FlowState.BUILDING, FlowState.FAILED}),
    FlowState.BUILDING: frozenset({FlowState.CALLING}),
    FlowState.CALLING: frozenset({FlowState.SANITIZING, FlowState.FAILED}),
    FlowState.SANITIZING: frozenset({FlowState.VALIDATING}),
    FlowState.VALIDATING: frozenset(
        {FlowState.PERSISTING, FlowState.COMPLETED, FlowState.FAILED}
    ),
    FlowState.PERSISTING: frozenset({FlowState.COMPLETED, FlowState.FAILED}),
    FlowState.COMPLETED: frozenset(),
    FlowState.FAILED: frozenset(),
}


@dataclass
class FlowContext:
    """
    Per-request state of one flow (process, tech-stack, mvp, dev-prompt).
    """
    flow: str
    idea_id: Optional[str] = None

    state: FlowState = FlowState.RECEIVED
    history: List[FlowState] = field(default_factory=lambda: [FlowState.RECEIVED])

    prompt: Optional[str] = None
    raw_response: Optional[str] = None
    sanitized_response: Optional[str] = None

    error: Optional[IdeaProcessorError] = None
    failed_at: Optional[FlowState] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (FlowState.COMPLETED, FlowState.FAILED)

    def advance(self, state: FlowState) -> None:
        if state not in TRANSITIONS[self.state]:
            raise RuntimeError(
                f"{self.flow}: illegal transition {self.state.value} -> {state.value}"
            )
        logger.debug(
            "[%s] %s -> %s (idea=%s)",
            self.flow,
            self.state.value,
            state.value,
            self.idea_id,
        )
        self.state = state
        self.history.append(state)

    def fail(self, error: IdeaProcessorError) -> None:
        self.failed_at = self.state
        self.error = error
        self.advance(FlowState.FAILED)
        logger.error(
            "[%s] failed at %s: %s %s",
            self.flow,
            self.failed_at.value,
            error.kind,
            error.message,
        )
