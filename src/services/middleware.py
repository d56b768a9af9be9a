"""
Middleware for EventBus

Middleware = pipeline functions that process events before handlers.
Can modify events, block events, or log/validate events.
"""

from models.events import Event, EventType
from models.state import OrchestratorState
from utils.logger import get_logger, LogCategory
from utils.serialization import Serializer

log = get_logger().for_category(LogCategory.EVENT)


def log_middleware(event: Event) -> Event:
    """
    Log all events for debugging

    Usage:
        event_bus.add_middleware(log_middleware)
    """
    source_str = Serializer.enum_to_str(event.source)

    # Patterns are large, show only their size
    data = event.to_data()
    if "pattern" in data:
        data["pattern"] = f"{len(data['pattern'])}x{len(data['pattern'])}"
    if isinstance(data.get("state"), OrchestratorState):
        data["state"] = Serializer.orchestrator_state_to_dict(data["state"])

    log.debug(f"Event: {event.type.name} from {source_str} | {data}")
    return event


def drop_frame_changes_middleware(event: Event):
    """
    Block FRAME_CHANGED events (headless runs that only care about cycle/sequence completion)

    Usage:
        event_bus.add_middleware(drop_frame_changes_middleware)
    """
    if event.type == EventType.FRAME_CHANGED:
        return None
    return event
