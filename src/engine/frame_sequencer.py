"""
FrameSequencer - tempo-driven playback of a pattern list

Architecture:
  - A repeating clock callback (every tick_interval_ms) measures the time
    since the previous tick and adds it to an accumulator
  - While the accumulator holds at least one tempo interval, the sequencer
    advances one frame and subtracts exactly one interval, so late ticks
    never shift the frame grid (no cumulative drift)
  - A single tick steps through at most max_catch_up_frames; after a longer
    stall the older frames are applied in one jump (position and iteration
    stay exact, their wraps fold into a single cycle event)

Events (published on the EventBus):
  FrameChangedEvent     last frame of each advance batch, on reset/set_frames
  CycleCompletedEvent   every wrap back to frame 0 (wraps inside a skipped stall share one)
  SequenceCompletedEvent finite iteration count reached (after the cycle event)
"""

from __future__ import annotations
from typing import Callable, List, Optional, Sequence

from engine.clock import Clock, AsyncioClock, TimerHandle
from models.enums import SequencerStatus
from models.events import (
    Event,
    EventType,
    EventSource,
    FrameChangedEvent,
    CycleCompletedEvent,
    SequenceCompletedEvent,
)
from models.pattern import Pattern, Iterations, INFINITE
from models.state import SequencerState
from patterns.codec import is_valid_pattern, copy_pattern
from services.event_bus import EventBus, Unsubscribe
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SEQUENCER)

MIN_TEMPO_MS = 16
DEFAULT_TEMPO_MS = 200
DEFAULT_TICK_INTERVAL_MS = 16
DEFAULT_MAX_CATCH_UP_FRAMES = 120


def _check_iterations(iterations: Iterations) -> Iterations:
    if iterations == INFINITE:
        return INFINITE
    if isinstance(iterations, bool) or not isinstance(iterations, int):
        raise TypeError(f"iterations must be a positive int or '{INFINITE}', got {iterations!r}")
    if iterations < 1:
        raise ValueError(f"iterations must be >= 1, got {iterations}")
    return iterations


class FrameSequencer:
    """
    Plays a list of patterns at a fixed tempo.

    Example:
        sequencer = FrameSequencer(preset.copy_frames(), tempo_ms=preset.tempo, clock=AsyncioClock())
        sequencer.subscribe(on_frame, EventType.FRAME_CHANGED)
        sequencer.start()
    """

    def __init__(
        self,
        frames: Optional[Sequence[Pattern]] = None,
        tempo_ms: float = DEFAULT_TEMPO_MS,
        iterations: Iterations = INFINITE,
        clock: Optional[Clock] = None,
        tick_interval_ms: float = DEFAULT_TICK_INTERVAL_MS,
        max_catch_up_frames: int = DEFAULT_MAX_CATCH_UP_FRAMES,
        event_bus: Optional[EventBus] = None,
    ):
        """
        Args:
            frames: Patterns to play (invalid ones are skipped on emit)
            tempo_ms: Milliseconds per frame (> 0, raised to at least 16)
            iterations: Passes before stopping, or "infinite"
            clock: Time source (default: AsyncioClock)
            tick_interval_ms: Cadence of the repeating tick callback
            max_catch_up_frames: Frame advances allowed in a single tick
            event_bus: Bus to publish on (default: private bus)
        """
        if tempo_ms <= 0:
            raise ValueError(f"tempo_ms must be positive, got {tempo_ms}")
        if tick_interval_ms <= 0:
            raise ValueError(f"tick_interval_ms must be positive, got {tick_interval_ms}")
        if max_catch_up_frames < 1:
            raise ValueError(f"max_catch_up_frames must be >= 1, got {max_catch_up_frames}")

        self._frames: List[Pattern] = list(frames or [])
        self._tempo_ms = max(MIN_TEMPO_MS, tempo_ms)
        self._iterations = _check_iterations(iterations)
        self._clock = clock or AsyncioClock()
        self._tick_interval_ms = tick_interval_ms
        self._max_catch_up_frames = max_catch_up_frames
        self._bus = event_bus or EventBus()

        # Playback position
        self._frame_index = 0
        self._iteration = 0
        self._status = SequencerStatus.STOPPED

        # Timing
        self._accumulated_ms = 0.0
        self._last_tick_ms = 0.0
        self._pause_offset_ms: Optional[float] = None
        self._handle: Optional[TimerHandle] = None

        # Bumped by start/pause/stop; a tick batch ends when it changes
        self._run_id = 0

        self._subscriptions: List[Unsubscribe] = []
        self._destroyed = False

        log.debug(
            "FrameSequencer initialized",
            frames=len(self._frames),
            tempo=f"{self._tempo_ms}ms",
            iterations=self._iterations,
        )

    # === Subscriptions ===

    def subscribe(
        self,
        listener: Callable[[Event], None],
        event_type: Optional[EventType] = None,
    ) -> Unsubscribe:
        """
        Register a listener for sequencer events.

        Args:
            listener: Called with each event
            event_type: Only this event type (None = every sequencer event)

        Returns:
            Callable that removes the listener
        """
        unsubscribe = self._bus.subscribe(
            event_type,
            listener,
            filter_fn=lambda e: e.source == EventSource.FRAME_SEQUENCER,
        )
        self._subscriptions.append(unsubscribe)
        return unsubscribe

    # === Playback control ===

    def start(self) -> None:
        """Start playback, or resume it after pause()"""
        if self._destroyed or self._status == SequencerStatus.RUNNING or not self._frames:
            return

        now = self._clock.now()

        if self._status == SequencerStatus.PAUSED and self._pause_offset_ms is not None:
            # Resume: keep the time already spent inside the current interval
            self._last_tick_ms = now - self._pause_offset_ms
            log.debug("Resumed", frame=self._frame_index, offset=f"{self._pause_offset_ms:.1f}ms")
        else:
            self._last_tick_ms = now
            self._accumulated_ms = 0.0
            if self._iterations != INFINITE and self._iteration >= self._iterations:
                self._iteration = 0
            log.info("Playback started", frames=len(self._frames), tempo=f"{self._tempo_ms}ms")

        self._pause_offset_ms = None
        self._status = SequencerStatus.RUNNING
        self._run_id += 1
        self._schedule_tick()

    def pause(self) -> None:
        """Stop ticking but remember the position inside the current frame"""
        if self._status != SequencerStatus.RUNNING:
            return

        self._pause_offset_ms = self._clock.now() - self._last_tick_ms
        self._cancel_tick()
        self._status = SequencerStatus.PAUSED
        self._run_id += 1
        log.debug("Paused", frame=self._frame_index)

    def stop(self) -> None:
        """Stop playback, keeping the frame index"""
        self._cancel_tick()
        self._pause_offset_ms = None
        self._run_id += 1
        if self._status != SequencerStatus.STOPPED:
            self._status = SequencerStatus.STOPPED
            log.debug("Stopped", frame=self._frame_index, iteration=self._iteration)

    def reset(self) -> None:
        """Stop and rewind to frame 0, iteration 0"""
        self.stop()
        self._frame_index = 0
        self._iteration = 0
        self._accumulated_ms = 0.0
        self._emit_frame()

    def destroy(self) -> None:
        """Stop, drop frames and remove every listener added via subscribe()"""
        self.stop()
        self._frames = []
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions.clear()
        self._destroyed = True

    # === Configuration ===

    def set_frames(self, frames: Sequence[Pattern]) -> None:
        """Replace the frame list (empty list stops playback)"""
        self._frames = list(frames)

        if not self._frames:
            self.stop()
            self._frame_index = 0
            log.warn("Frame list cleared, playback stopped")
            return

        if self._frame_index >= len(self._frames):
            self._frame_index = 0

        self._emit_frame()

    def set_tempo(self, tempo_ms: float) -> None:
        """Milliseconds per frame, raised to at least 16 (applies from the next tick)"""
        self._tempo_ms = max(MIN_TEMPO_MS, tempo_ms)

    def set_iterations(self, iterations: Iterations) -> None:
        if iterations != INFINITE and isinstance(iterations, int) and not isinstance(iterations, bool):
            iterations = max(1, iterations)
        self._iterations = _check_iterations(iterations)

    # === Queries ===

    @property
    def tempo_ms(self) -> float:
        return self._tempo_ms

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    def get_progress(self) -> float:
        """Fraction of the finite run played so far (0.0 for infinite runs)"""
        if self._iterations == INFINITE or not self._frames:
            return 0.0

        total = len(self._frames) * self._iterations
        played = self._iteration * len(self._frames) + self._frame_index
        return min(1.0, played / total)

    def get_current_pattern(self) -> Optional[Pattern]:
        """Copy of the current frame, None if there is no valid frame"""
        if not self._frames:
            return None
        pattern = self._frames[self._frame_index]
        if not is_valid_pattern(pattern):
            return None
        return copy_pattern(pattern)

    def get_state(self) -> SequencerState:
        return SequencerState(
            current_frame_index=self._frame_index,
            current_iteration=self._iteration,
            status=self._status,
            accumulated_drift_ms=self._accumulated_ms,
        )

    # === Tick loop ===

    def _schedule_tick(self) -> None:
        self._handle = self._clock.call_later(self._tick_interval_ms, self._tick)

    def _cancel_tick(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self) -> None:
        # The handle that fired is spent; anything set below comes from a listener
        self._handle = None
        if self._status != SequencerStatus.RUNNING:
            return

        now = self._clock.now()
        self._accumulated_ms += now - self._last_tick_ms
        self._last_tick_ms = now

        run_id = self._run_id
        due = int(self._accumulated_ms // self._tempo_ms)
        if due > self._max_catch_up_frames:
            skipped = due - self._max_catch_up_frames
            self._accumulated_ms -= skipped * self._tempo_ms
            due = self._max_catch_up_frames
            log.warn(
                "Playback fell behind, skipping frames",
                skipped=skipped,
                advanced=due,
            )
            self._skip(skipped)

        for step in range(due):
            if self._run_id != run_id:
                break
            self._accumulated_ms -= self._tempo_ms
            self._advance(emit=(step == due - 1))

        if self._status == SequencerStatus.RUNNING and self._handle is None:
            self._schedule_tick()

    def _skip(self, count: int) -> None:
        """Advance count frames without emitting frame events (wraps fold into one cycle event)"""
        if not self._frames:
            return
        wraps, self._frame_index = divmod(self._frame_index + count, len(self._frames))
        if not wraps:
            return

        self._iteration += wraps
        if self._iterations != INFINITE and self._iteration >= self._iterations:
            self._iteration = self._iterations
            self._frame_index = 0
            self._publish(CycleCompletedEvent(self._iteration))
            self._complete()
            return

        self._publish(CycleCompletedEvent(self._iteration))

    def _complete(self) -> None:
        self.stop()
        log.info("Sequence complete", iterations=self._iteration)
        self._publish(SequenceCompletedEvent(self._iteration))

    def _advance(self, emit: bool) -> None:
        if not self._frames:
            self.stop()
            return

        self._frame_index += 1

        if self._frame_index >= len(self._frames):
            self._frame_index = 0
            self._iteration += 1
            self._publish(CycleCompletedEvent(self._iteration))

            if self._iterations != INFINITE and self._iteration >= self._iterations:
                self._complete()
                return

        if emit:
            self._emit_frame()

    def _emit_frame(self) -> None:
        if not self._frames:
            return

        pattern = self._frames[self._frame_index]
        if not is_valid_pattern(pattern):
            log.debug("Skipping invalid frame", frame=self._frame_index)
            return

        self._publish(FrameChangedEvent(self._frame_index, copy_pattern(pattern)))

    def _publish(self, event: Event) -> None:
        if not self._destroyed:
            self._bus.publish(event)
