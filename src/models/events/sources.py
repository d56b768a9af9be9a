from enum import Enum, auto


class EventSource(Enum):
    """Event source identifiers for engine events"""
    FRAME_SEQUENCER = auto()          # Pattern frame playback
    TRANSITION_ORCHESTRATOR = auto()  # Label hold/transition cycle
