from enum import Enum, auto


class EventType(Enum):
    # Frame playback
    FRAME_CHANGED = auto()
    CYCLE_COMPLETED = auto()
    SEQUENCE_COMPLETED = auto()

    # Label orchestration
    LABEL_STATE_CHANGED = auto()
