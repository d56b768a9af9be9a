"""
Event system for the Morse pattern engine

Synchronous events emitted by the timing components.
"""

# Event type, base class, and sources
from models.events.types import EventType
from models.events.base import Event
from models.events.sources import EventSource

# Frame playback
from models.events.sequencer_events import (
    FrameChangedEvent,
    CycleCompletedEvent,
    SequenceCompletedEvent,
)

# Label orchestration
from models.events.orchestrator_events import LabelStateChangedEvent

__all__ = [
    # Type, base, and sources
    "EventType",
    "Event",
    "EventSource",

    # Frame playback
    "FrameChangedEvent",
    "CycleCompletedEvent",
    "SequenceCompletedEvent",

    # Labels
    "LabelStateChangedEvent",
]
