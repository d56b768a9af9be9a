"""
Event Bus - Central event routing system

Implements pub-sub pattern:
- Publishers: publish(event)
- Subscribers: subscribe(event_type, handler, priority, filter_fn) -> unsubscribe
- Middleware: add_middleware(middleware_fn)

Publishing is synchronous: the timing components publish from inside a clock
callback and every handler has run by the time publish() returns.
"""

from typing import Callable, List, Dict, Optional
from dataclasses import dataclass
from models.events import Event, EventType
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)

Unsubscribe = Callable[[], None]


@dataclass
class EventHandler:
    """Event handler registration"""
    handler: Callable[[Event], None]
    priority: int
    filter_fn: Optional[Callable[[Event], bool]]


class EventBus:
    """
    Event bus for pub-sub event handling

    Features:
    - Priority-based handler execution (high priority first)
    - Per-handler filtering (fine-grained control)
    - Middleware pipeline (logging, blocking)
    - Wildcard subscriptions (event_type=None receives every event)
    - Fault tolerance (one handler crash doesn't stop others)

    Example:
        bus = EventBus()

        unsubscribe = bus.subscribe(
            EventType.FRAME_CHANGED,
            handler_fn,
            priority=10,
            filter_fn=lambda e: e.frame_index == 0
        )

        bus.publish(FrameChangedEvent(0, pattern))
        unsubscribe()
    """

    def __init__(self, history_limit: int = 100):
        # Handlers organized by event type (None = all events)
        self._handlers: Dict[Optional[EventType], List[EventHandler]] = {}

        # Middleware pipeline (applied in registration order)
        self._middleware: List[Callable[[Event], Optional[Event]]] = []

        # Event history (bounded, newest last)
        self._event_history: List[Event] = []
        self._history_limit = history_limit

    def subscribe(
        self,
        event_type: Optional[EventType],
        handler: Callable[[Event], None],
        priority: int = 0,
        filter_fn: Optional[Callable[[Event], bool]] = None
    ) -> Unsubscribe:
        """
        Subscribe to event type

        Args:
            event_type: Which events to listen for (None = every event)
            handler: Function to call with the event
            priority: Execution priority (higher = called first, default: 0)
            filter_fn: Optional filter (return True = handle, False = skip)

        Returns:
            Callable that removes this registration (safe to call twice)
        """
        handler_entry = EventHandler(handler, priority, filter_fn)
        handlers = self._handlers.setdefault(event_type, [])
        handlers.append(handler_entry)

        # Sort by priority (descending - highest first), stable for equal priority
        handlers.sort(key=lambda h: h.priority, reverse=True)

        log.debug(
            "Event handler subscribed",
            event_type=event_type.name if event_type else "*",
            handler=getattr(handler, "__name__", repr(handler)),
            priority=priority
        )

        def unsubscribe() -> None:
            entries = self._handlers.get(event_type, [])
            if handler_entry in entries:
                entries.remove(handler_entry)

        return unsubscribe

    def add_middleware(self, middleware: Callable[[Event], Optional[Event]]) -> None:
        """
        Add middleware to event processing pipeline

        Middleware can:
        - Modify events (return modified event)
        - Block events (return None)
        - Log/validate events

        Middleware runs in registration order (FIFO).
        """
        self._middleware.append(middleware)
        log.debug(
            "Middleware registered",
            middleware=getattr(middleware, "__name__", repr(middleware))
        )

    def publish(self, event: Event) -> None:
        """
        Publish event to all subscribers

        Flow:
        1. Apply middleware (can modify or block event)
        2. Save to event history
        3. Collect handlers for the event type plus wildcard handlers
        4. Execute handlers by priority (high → low)
        5. Apply per-handler filters
        6. Catch and log handler exceptions (fault tolerance)
        """
        for middleware in self._middleware:
            processed_event = middleware(event)
            if processed_event is None:
                # Event blocked by middleware
                return
            event = processed_event

        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            self._event_history.pop(0)

        # Snapshot: handlers may unsubscribe themselves while we iterate
        handlers = list(self._handlers.get(event.type, [])) + list(self._handlers.get(None, []))
        if not handlers:
            return
        handlers.sort(key=lambda h: h.priority, reverse=True)

        for handler_entry in handlers:
            if handler_entry.filter_fn and not handler_entry.filter_fn(event):
                continue

            try:
                handler_entry.handler(event)
            except Exception as e:
                log.error(
                    f"Event handler failed: {getattr(handler_entry.handler, '__name__', '?')} for {event.type.name}",
                    exception=repr(e)
                )
                # Continue to next handler (fault tolerance)

    def handler_count(self, event_type: Optional[EventType] = None) -> int:
        """Number of handlers registered for event_type (None = wildcard handlers)"""
        return len(self._handlers.get(event_type, []))

    def clear(self) -> None:
        """Drop every handler (middleware and history stay)"""
        self._handlers.clear()

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """
        Get recent events from history

        Args:
            limit: Number of recent events to return

        Returns:
            List of recent events (newest last)
        """
        return self._event_history[-limit:]

    def clear_history(self) -> None:
        """Clear event history"""
        self._event_history.clear()
