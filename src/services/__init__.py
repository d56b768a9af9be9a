"""Services layer"""

from .event_bus import EventBus
from .editor_service import EditorService, EditorState
from .interchange_service import InterchangeService

__all__ = [
    "EventBus",
    "EditorService",
    "EditorState",
    "InterchangeService",
]
