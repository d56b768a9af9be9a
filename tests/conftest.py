import pytest

from engine.clock import ManualClock
from patterns.cache import PatternCache
from patterns.codec import create_empty_pattern
from services.event_bus import EventBus


@pytest.fixture
def clock():
    """Simulated clock starting at t=0"""
    return ManualClock()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def cache():
    return PatternCache(capacity=100)


def make_frame(size: int, on_cell: int) -> list:
    """size×size pattern with exactly one cell (row-major index) switched on"""
    pattern = create_empty_pattern(size)
    pattern[on_cell // size][on_cell % size] = True
    return pattern


@pytest.fixture
def frames():
    """Four distinct 3×3 frames"""
    return [make_frame(3, i) for i in range(4)]


@pytest.fixture
def recorder():
    """Collects every event passed to it"""
    class Recorder:
        def __init__(self):
            self.events = []

        def __call__(self, event):
            self.events.append(event)

        def of_type(self, event_type):
            return [e for e in self.events if e.type == event_type]

    return Recorder()
