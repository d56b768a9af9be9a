"""Frame playback events published by FrameSequencer"""

from dataclasses import dataclass

from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource
from models.pattern import Pattern


@dataclass(init=False)
class FrameChangedEvent(Event):
    """Current frame changed (pattern is always a valid grid)"""
    frame_index: int
    pattern: Pattern

    def __init__(self, frame_index: int, pattern: Pattern):
        super().__init__(
            type=EventType.FRAME_CHANGED,
            source=EventSource.FRAME_SEQUENCER,
        )
        self.frame_index = frame_index
        self.pattern = pattern


@dataclass(init=False)
class CycleCompletedEvent(Event):
    """One full pass through the frame list finished"""
    iteration: int

    def __init__(self, iteration: int):
        """
        Args:
            iteration: Number of completed passes, including this one
        """
        super().__init__(
            type=EventType.CYCLE_COMPLETED,
            source=EventSource.FRAME_SEQUENCER,
        )
        self.iteration = iteration


@dataclass(init=False)
class SequenceCompletedEvent(Event):
    """Configured iteration count reached, sequencer stopped"""
    iterations: int

    def __init__(self, iterations: int):
        super().__init__(
            type=EventType.SEQUENCE_COMPLETED,
            source=EventSource.FRAME_SEQUENCER,
        )
        self.iterations = iterations
