"""
Tests for event bus functionality

Tests publishing, subscription, unsubscribe, middleware, filtering,
priority, fault tolerance and history.
"""

from models.events import (
    EventType,
    EventSource,
    FrameChangedEvent,
    CycleCompletedEvent,
    LabelStateChangedEvent,
)
from models.state import OrchestratorState
from services.event_bus import EventBus
from services.middleware import log_middleware, drop_frame_changes_middleware


def frame_event(index=0):
    return FrameChangedEvent(index, [[True]])


class TestEventBus:

    def test_basic_pub_sub(self):
        bus = EventBus()
        received = []

        bus.subscribe(EventType.FRAME_CHANGED, received.append)
        bus.publish(frame_event(3))

        assert len(received) == 1
        assert received[0].frame_index == 3
        assert received[0].source == EventSource.FRAME_SEQUENCER

    def test_only_matching_type_delivered(self):
        bus = EventBus()
        received = []

        bus.subscribe(EventType.CYCLE_COMPLETED, received.append)
        bus.publish(frame_event())
        bus.publish(CycleCompletedEvent(1))

        assert [e.type for e in received] == [EventType.CYCLE_COMPLETED]

    def test_wildcard_subscription(self):
        bus = EventBus()
        received = []

        bus.subscribe(None, received.append)
        bus.publish(frame_event())
        bus.publish(LabelStateChangedEvent(OrchestratorState(current_label="A")))

        assert len(received) == 2

    def test_unsubscribe(self):
        bus = EventBus()
        received = []

        unsubscribe = bus.subscribe(EventType.FRAME_CHANGED, received.append)
        bus.publish(frame_event())
        unsubscribe()
        unsubscribe()   # second call is harmless
        bus.publish(frame_event())

        assert len(received) == 1
        assert bus.handler_count(EventType.FRAME_CHANGED) == 0

    def test_filtering(self):
        bus = EventBus()
        even, odd = [], []

        bus.subscribe(EventType.FRAME_CHANGED, even.append, filter_fn=lambda e: e.frame_index % 2 == 0)
        bus.subscribe(EventType.FRAME_CHANGED, odd.append, filter_fn=lambda e: e.frame_index % 2 == 1)

        for index in range(5):
            bus.publish(frame_event(index))

        assert [e.frame_index for e in even] == [0, 2, 4]
        assert [e.frame_index for e in odd] == [1, 3]

    def test_middleware_blocking(self):
        bus = EventBus()
        received = []

        bus.add_middleware(drop_frame_changes_middleware)
        bus.subscribe(None, received.append)

        bus.publish(frame_event())
        bus.publish(CycleCompletedEvent(1))

        assert [e.type for e in received] == [EventType.CYCLE_COMPLETED]

    def test_log_middleware_passes_event_through(self):
        bus = EventBus()
        received = []

        bus.add_middleware(log_middleware)
        bus.subscribe(EventType.FRAME_CHANGED, received.append)
        bus.publish(frame_event())

        assert len(received) == 1

    def test_priority(self):
        bus = EventBus()
        execution_order = []

        bus.subscribe(EventType.FRAME_CHANGED, lambda e: execution_order.append("low"), priority=1)
        bus.subscribe(EventType.FRAME_CHANGED, lambda e: execution_order.append("high"), priority=10)
        bus.subscribe(None, lambda e: execution_order.append("medium"), priority=5)

        bus.publish(frame_event())

        assert execution_order == ["high", "medium", "low"]

    def test_fault_tolerance(self):
        bus = EventBus()
        received = []

        def failing_handler(event):
            raise RuntimeError("boom")

        bus.subscribe(EventType.FRAME_CHANGED, failing_handler, priority=10)
        bus.subscribe(EventType.FRAME_CHANGED, received.append)

        bus.publish(frame_event())

        assert len(received) == 1

    def test_handler_may_unsubscribe_itself(self):
        bus = EventBus()
        calls = []
        unsubscribe = None

        def once(event):
            calls.append(event)
            unsubscribe()

        unsubscribe = bus.subscribe(EventType.FRAME_CHANGED, once)
        bus.publish(frame_event())
        bus.publish(frame_event())

        assert len(calls) == 1

    def test_history_is_bounded(self):
        bus = EventBus(history_limit=3)
        for index in range(5):
            bus.publish(frame_event(index))

        history = bus.get_event_history(limit=10)
        assert [e.frame_index for e in history] == [2, 3, 4]

        bus.clear_history()
        assert bus.get_event_history() == []

    def test_clear_drops_handlers(self):
        bus = EventBus()
        received = []
        bus.subscribe(None, received.append)
        bus.clear()
        bus.publish(frame_event())
        assert received == []

    def test_event_to_data(self):
        data = CycleCompletedEvent(2).to_data()
        assert data == {"iteration": 2}
