"""Label orchestration events published by TransitionOrchestrator"""

from dataclasses import dataclass

from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource
from models.state import OrchestratorState


@dataclass(init=False)
class LabelStateChangedEvent(Event):
    state: OrchestratorState

    def __init__(self, state: OrchestratorState):
        super().__init__(
            type=EventType.LABEL_STATE_CHANGED,
            source=EventSource.TRANSITION_ORCHESTRATOR,
        )
        self.state = state
