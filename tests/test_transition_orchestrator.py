"""
Tests for TransitionOrchestrator driven by a ManualClock.
"""

import pytest

from engine.transition_orchestrator import TransitionOrchestrator
from models.enums import OrchestratorPhase
from models.events import EventType
from models.state import OrchestratorState

LABELS = ["Loading", "Processing", "Scanning"]


@pytest.fixture
def make_orchestrator(clock, recorder):
    def factory(labels=LABELS, **kwargs):
        kwargs.setdefault("hold_duration_ms", 1000)
        kwargs.setdefault("transition_duration_ms", 200)
        orchestrator = TransitionOrchestrator(labels, clock=clock, **kwargs)
        orchestrator.subscribe(recorder)
        return orchestrator
    return factory


def states(recorder):
    return [e.state for e in recorder.of_type(EventType.LABEL_STATE_CHANGED)]


class TestConstruction:

    def test_negative_duration_rejected(self, clock):
        with pytest.raises(ValueError):
            TransitionOrchestrator(LABELS, hold_duration_ms=-1, clock=clock)
        with pytest.raises(ValueError):
            TransitionOrchestrator(LABELS, transition_duration_ms=-1, clock=clock)

    def test_durations_raised_to_minimum(self, clock):
        orchestrator = TransitionOrchestrator(LABELS, hold_duration_ms=0, transition_duration_ms=5, clock=clock)
        assert orchestrator.hold_duration_ms == 16
        assert orchestrator.transition_duration_ms == 16

    def test_initial_state(self, make_orchestrator):
        state = make_orchestrator().get_state()
        assert state == OrchestratorState(current_label="Loading", current_index=0)
        assert state.phase == OrchestratorPhase.HOLDING

    def test_empty_labels_state(self, make_orchestrator):
        assert make_orchestrator(labels=[]).get_state() == OrchestratorState()


class TestCycle:

    def test_hold_then_transition(self, make_orchestrator, clock, recorder):
        orchestrator = make_orchestrator()
        orchestrator.start()
        assert recorder.events == []

        clock.advance(999)
        assert recorder.events == []

        clock.advance(1)
        state = orchestrator.get_state()
        assert state.is_transitioning
        assert state.current_label == "Loading"
        assert state.next_label == "Processing"

        clock.advance(200)
        state = orchestrator.get_state()
        assert not state.is_transitioning
        assert state.next_label is None
        assert state.current_label == "Processing"
        assert state.current_index == 1

    def test_phases_alternate(self, make_orchestrator, clock, recorder):
        orchestrator = make_orchestrator()
        orchestrator.start()
        clock.advance(1200 * 6)

        emitted = states(recorder)
        assert len(emitted) == 12
        assert [s.is_transitioning for s in emitted] == [True, False] * 6

    def test_every_label_visited_in_order(self, make_orchestrator, clock, recorder):
        orchestrator = make_orchestrator()
        orchestrator.start()
        clock.advance(1200 * 6)

        holds = [s.current_index for s in states(recorder) if not s.is_transitioning]
        assert holds == [1, 2, 0, 1, 2, 0]

    def test_single_label_transitions_to_itself(self, make_orchestrator, clock, recorder):
        orchestrator = make_orchestrator(labels=["Only"])
        orchestrator.start()
        clock.advance(1000)

        state = orchestrator.get_state()
        assert state.is_transitioning
        assert state.next_label == "Only"

    def test_start_twice_schedules_once(self, make_orchestrator, clock):
        orchestrator = make_orchestrator()
        orchestrator.start()
        orchestrator.start()
        assert clock.pending_count() == 1
        assert orchestrator.is_running

    def test_start_without_labels_is_noop(self, make_orchestrator, clock):
        orchestrator = make_orchestrator(labels=[])
        orchestrator.start()
        assert not orchestrator.is_running
        assert clock.pending_count() == 0

    def test_set_durations_applies_to_next_phase(self, make_orchestrator, clock):
        orchestrator = make_orchestrator()
        orchestrator.start()
        orchestrator.set_durations(hold_duration_ms=500, transition_duration_ms=100)

        clock.advance(1000)     # current hold keeps its original length
        assert orchestrator.get_state().is_transitioning

        clock.advance(100)
        assert orchestrator.get_state().current_index == 1

        clock.advance(500)
        assert orchestrator.get_state().is_transitioning


class TestPauseResume:

    def test_resume_uses_remaining_time(self, make_orchestrator, clock):
        orchestrator = make_orchestrator()
        orchestrator.start()

        clock.advance(700)
        orchestrator.pause()
        assert not orchestrator.is_running
        assert clock.pending_count() == 0

        clock.jump(10_000)
        orchestrator.start()

        clock.advance(299)
        assert not orchestrator.get_state().is_transitioning
        clock.advance(1)
        assert orchestrator.get_state().is_transitioning

    def test_pause_during_transition(self, make_orchestrator, clock):
        orchestrator = make_orchestrator()
        orchestrator.start()
        clock.advance(1050)
        orchestrator.pause()

        orchestrator.start()
        clock.advance(149)
        assert orchestrator.get_state().is_transitioning
        clock.advance(1)
        assert orchestrator.get_state().current_label == "Processing"

    def test_stop_discards_remaining_time(self, make_orchestrator, clock):
        orchestrator = make_orchestrator()
        orchestrator.start()
        clock.advance(700)
        orchestrator.pause()
        orchestrator.stop()

        orchestrator.start()
        clock.advance(300)
        assert not orchestrator.get_state().is_transitioning
        clock.advance(700)
        assert orchestrator.get_state().is_transitioning

    def test_stop_mid_transition_restarts_full_transition(self, make_orchestrator, clock):
        orchestrator = make_orchestrator()
        orchestrator.start()
        clock.advance(1150)
        orchestrator.stop()
        assert orchestrator.get_state().is_transitioning

        orchestrator.start()
        clock.advance(199)
        assert orchestrator.get_state().is_transitioning
        clock.advance(1)
        assert orchestrator.get_state().current_index == 1


class TestControl:

    def test_reset(self, make_orchestrator, clock, recorder):
        orchestrator = make_orchestrator()
        orchestrator.start()
        clock.advance(1500)
        assert orchestrator.get_state().current_index == 1

        orchestrator.reset()
        assert not orchestrator.is_running
        assert orchestrator.get_state() == OrchestratorState(current_label="Loading", current_index=0)
        assert states(recorder)[-1].current_index == 0
        assert clock.pending_count() == 0

    def test_reset_at_initial_state_is_not_reemitted(self, make_orchestrator, recorder):
        orchestrator = make_orchestrator()
        orchestrator.reset()
        orchestrator.reset()
        assert len(states(recorder)) == 1

    def test_set_labels_wraps_index(self, make_orchestrator, clock, recorder):
        orchestrator = make_orchestrator()
        orchestrator.start()
        clock.advance(2400)     # holding the third label
        assert orchestrator.get_state().current_index == 2

        orchestrator.set_labels(["A", "B"])
        assert orchestrator.get_state().current_index == 0
        assert states(recorder)[-1].current_label == "A"

    def test_set_labels_empty_stops(self, make_orchestrator, clock, recorder):
        orchestrator = make_orchestrator()
        orchestrator.start()
        orchestrator.set_labels([])

        assert not orchestrator.is_running
        assert clock.pending_count() == 0
        assert states(recorder)[-1] == OrchestratorState()

    def test_destroy(self, make_orchestrator, clock, recorder):
        orchestrator = make_orchestrator()
        orchestrator.start()
        orchestrator.destroy()

        assert clock.pending_count() == 0
        orchestrator.start()
        orchestrator.reset()
        clock.advance(5000)
        assert recorder.events == []


class TestReentrancy:

    def test_stop_from_listener(self, clock):
        orchestrator = TransitionOrchestrator(LABELS, hold_duration_ms=100, transition_duration_ms=100, clock=clock)
        orchestrator.subscribe(lambda e: orchestrator.stop())
        orchestrator.start()

        clock.advance(100)
        assert not orchestrator.is_running
        assert clock.pending_count() == 0
        assert orchestrator.get_state().is_transitioning

    def test_pause_from_listener_keeps_full_phase(self, clock):
        orchestrator = TransitionOrchestrator(LABELS, hold_duration_ms=100, transition_duration_ms=50, clock=clock)
        unsubscribe = orchestrator.subscribe(lambda e: orchestrator.pause(), EventType.LABEL_STATE_CHANGED)
        orchestrator.start()
        clock.advance(100)

        assert not orchestrator.is_running
        assert clock.pending_count() == 0

        unsubscribe()
        orchestrator.start()
        clock.advance(49)
        assert orchestrator.get_state().is_transitioning
        clock.advance(1)
        assert orchestrator.get_state().current_index == 1

    def test_failing_listener_does_not_break_cycle(self, clock):
        orchestrator = TransitionOrchestrator(LABELS, hold_duration_ms=100, transition_duration_ms=100, clock=clock)

        def failing(event):
            raise RuntimeError("listener bug")

        orchestrator.subscribe(failing)
        orchestrator.start()
        clock.advance(400)

        assert orchestrator.get_state().current_index == 2
