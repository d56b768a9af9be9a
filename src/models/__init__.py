"""
Models package - Data models for the Morse pattern engine
"""

from .enums import SequencerStatus, OrchestratorPhase, AnimationPreset, DrawingTool, LogLevel, LogCategory
from .pattern import Pattern, Point, EditorFrame, INFINITE
from .state import SequencerState, OrchestratorState

__all__ = [
    'SequencerStatus',
    'OrchestratorPhase',
    'AnimationPreset',
    'DrawingTool',
    'LogLevel',
    'LogCategory',
    'Pattern',
    'Point',
    'EditorFrame',
    'INFINITE',
    'SequencerState',
    'OrchestratorState',
]
