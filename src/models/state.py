"""
Runtime state snapshots for the timing components (not persisted).

Snapshots are immutable: FrameSequencer and TransitionOrchestrator build a
new one on every change, so listeners may keep references freely.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from models.enums import SequencerStatus, OrchestratorPhase


@dataclass(frozen=True)
class SequencerState:
    """
    Snapshot of FrameSequencer playback position.

    Attributes:
        current_frame_index: Index into the frame list
        current_iteration: Completed passes through the frame list
        status: STOPPED / RUNNING / PAUSED
        accumulated_drift_ms: Time collected towards the next frame advance
    """

    current_frame_index: int = 0
    current_iteration: int = 0
    status: SequencerStatus = SequencerStatus.STOPPED
    accumulated_drift_ms: float = 0.0

    @property
    def is_running(self) -> bool:
        return self.status == SequencerStatus.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.status == SequencerStatus.PAUSED


@dataclass(frozen=True)
class OrchestratorState:
    """
    Snapshot of the label orchestrator.

    next_label is only set while is_transitioning is True.
    """

    current_label: str = ""
    next_label: Optional[str] = None
    is_transitioning: bool = False
    current_index: int = 0

    @property
    def phase(self) -> OrchestratorPhase:
        return OrchestratorPhase.TRANSITIONING if self.is_transitioning else OrchestratorPhase.HOLDING

    def __repr__(self) -> str:
        arrow = f" → {self.next_label}" if self.is_transitioning else ""
        return f"OrchestratorState({self.phase.name}, [{self.current_index}] {self.current_label}{arrow})"
