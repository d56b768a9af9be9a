"""
Timing engine - clock, frame sequencer and label orchestrator
"""

from .clock import Clock, AsyncioClock, ManualClock
from .frame_sequencer import FrameSequencer
from .transition_orchestrator import TransitionOrchestrator

__all__ = [
    'Clock',
    'AsyncioClock',
    'ManualClock',
    'FrameSequencer',
    'TransitionOrchestrator',
]
