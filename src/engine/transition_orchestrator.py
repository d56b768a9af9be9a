"""
TransitionOrchestrator - label morph state machine

Cycles through a list of labels:

    HOLDING (hold_duration_ms)
        → TRANSITIONING to labels[(i + 1) % n] (transition_duration_ms)
        → HOLDING on the next label
        → ...

Every state change is published as a LabelStateChangedEvent carrying an
immutable OrchestratorState. Identical consecutive states are not re-published.
"""

from __future__ import annotations
from typing import Callable, List, Optional, Sequence

from engine.clock import Clock, AsyncioClock, TimerHandle
from models.events import Event, EventType, EventSource, LabelStateChangedEvent
from models.state import OrchestratorState
from services.event_bus import EventBus, Unsubscribe
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.ORCHESTRATOR)

MIN_DURATION_MS = 16
DEFAULT_HOLD_DURATION_MS = 2000
DEFAULT_TRANSITION_DURATION_MS = 600


class TransitionOrchestrator:
    """
    Hold → transition → hold cycle over a list of labels.

    Example:
        orchestrator = TransitionOrchestrator(["Loading", "Processing"], clock=clock)
        orchestrator.subscribe(lambda e: render(e.state))
        orchestrator.start()
    """

    def __init__(
        self,
        labels: Sequence[str],
        hold_duration_ms: float = DEFAULT_HOLD_DURATION_MS,
        transition_duration_ms: float = DEFAULT_TRANSITION_DURATION_MS,
        clock: Optional[Clock] = None,
        event_bus: Optional[EventBus] = None,
    ):
        if hold_duration_ms < 0 or transition_duration_ms < 0:
            raise ValueError(
                f"durations must not be negative (hold={hold_duration_ms}, transition={transition_duration_ms})"
            )

        self._labels: List[str] = list(labels)
        self._hold_ms = max(MIN_DURATION_MS, hold_duration_ms)
        self._transition_ms = max(MIN_DURATION_MS, transition_duration_ms)
        self._clock = clock or AsyncioClock()
        self._bus = event_bus or EventBus()

        self._index = 0
        self._transitioning = False
        self._running = False

        # Current phase timer
        self._handle: Optional[TimerHandle] = None
        self._scheduled_at_ms = 0.0
        self._scheduled_delay_ms = 0.0
        self._remaining_ms: Optional[float] = None

        self._last_emitted: Optional[OrchestratorState] = None
        self._subscriptions: List[Unsubscribe] = []
        self._destroyed = False

        log.debug(
            "TransitionOrchestrator initialized",
            labels=len(self._labels),
            hold=f"{self._hold_ms}ms",
            transition=f"{self._transition_ms}ms",
        )

    def subscribe(
        self,
        listener: Callable[[Event], None],
        event_type: Optional[EventType] = None,
    ) -> Unsubscribe:
        """Register a listener for orchestrator events; returns an unsubscribe callable"""
        unsubscribe = self._bus.subscribe(
            event_type,
            listener,
            filter_fn=lambda e: e.source == EventSource.TRANSITION_ORCHESTRATOR,
        )
        self._subscriptions.append(unsubscribe)
        return unsubscribe

    # === Control ===

    def start(self) -> None:
        """Start cycling, or continue the interrupted phase after pause()"""
        if self._destroyed or self._running or not self._labels:
            return

        self._running = True

        if self._remaining_ms is not None:
            delay = self._remaining_ms
            self._remaining_ms = None
            log.debug("Resumed", remaining=f"{delay:.1f}ms")
        else:
            delay = self._transition_ms if self._transitioning else self._hold_ms
            log.info("Label cycle started", labels=len(self._labels), label=self._current_label())

        self._schedule(delay)

    def pause(self) -> None:
        if not self._running:
            return

        elapsed = self._clock.now() - self._scheduled_at_ms
        self._remaining_ms = max(0.0, self._scheduled_delay_ms - elapsed)
        self._cancel()
        self._running = False
        log.debug("Paused", remaining=f"{self._remaining_ms:.1f}ms")

    def stop(self) -> None:
        self._cancel()
        self._remaining_ms = None
        if self._running:
            self._running = False
            log.debug("Stopped", label=self._current_label())

    def reset(self) -> None:
        """Stop and go back to holding the first label"""
        self.stop()
        self._index = 0
        self._transitioning = False
        self._emit()

    def destroy(self) -> None:
        """Stop timers and drop listeners; later emissions do nothing"""
        self.stop()
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions.clear()
        self._destroyed = True

    # === Configuration ===

    def set_labels(self, labels: Sequence[str]) -> None:
        """Replace the label list (empty list stops the cycle)"""
        self._labels = list(labels)

        if not self._labels:
            self.stop()
            self._index = 0
            self._transitioning = False
            log.warn("Label list cleared, cycle stopped")
        elif self._index >= len(self._labels):
            self._index = 0

        self._emit()

    def set_durations(
        self,
        hold_duration_ms: Optional[float] = None,
        transition_duration_ms: Optional[float] = None,
    ) -> None:
        """Update phase durations (raised to at least 16 ms, used from the next phase)"""
        if hold_duration_ms is not None:
            self._hold_ms = max(MIN_DURATION_MS, hold_duration_ms)
        if transition_duration_ms is not None:
            self._transition_ms = max(MIN_DURATION_MS, transition_duration_ms)

    # === Queries ===

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def hold_duration_ms(self) -> float:
        return self._hold_ms

    @property
    def transition_duration_ms(self) -> float:
        return self._transition_ms

    def get_state(self) -> OrchestratorState:
        if not self._labels:
            return OrchestratorState()

        next_label = None
        if self._transitioning:
            next_label = self._labels[(self._index + 1) % len(self._labels)]

        return OrchestratorState(
            current_label=self._labels[self._index],
            next_label=next_label,
            is_transitioning=self._transitioning,
            current_index=self._index,
        )

    # === Phase timers ===

    def _current_label(self) -> str:
        return self._labels[self._index] if self._labels else ""

    def _schedule(self, delay_ms: float) -> None:
        self._scheduled_at_ms = self._clock.now()
        self._scheduled_delay_ms = delay_ms
        self._handle = self._clock.call_later(delay_ms, self._on_phase_end)

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _on_phase_end(self) -> None:
        self._handle = None
        if not self._running:
            return
        if not self._labels:
            self.stop()
            return

        if self._transitioning:
            self._index = (self._index + 1) % len(self._labels)
            self._transitioning = False
            self._schedule(self._hold_ms)
        else:
            self._transitioning = True
            self._schedule(self._transition_ms)

        # Timer is armed before listeners run so stop()/pause() from a listener cancels it
        self._emit()

    def _emit(self) -> None:
        if self._destroyed:
            return

        state = self.get_state()
        if state == self._last_emitted:
            return

        self._last_emitted = state
        log.debug("State changed", state=repr(state))
        self._bus.publish(LabelStateChangedEvent(state))
