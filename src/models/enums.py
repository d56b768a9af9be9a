"""
Enums for the Morse pattern engine
"""

from enum import Enum, auto


class SequencerStatus(Enum):
    """
    FrameSequencer lifecycle

    STOPPED: never started, explicitly stopped, or finished all iterations
    RUNNING: clock callback scheduled, frames advancing
    PAUSED: halted but keeps the sub-frame offset for a precise resume
    """
    STOPPED = auto()
    RUNNING = auto()
    PAUSED = auto()


class OrchestratorPhase(Enum):
    """Label orchestrator phases (strictly alternating)"""
    HOLDING = auto()        # Current label displayed, waiting for hold timer
    TRANSITIONING = auto()  # Current label morphing into next label


class AnimationPreset(Enum):
    """Per-pixel reveal delay presets"""
    FADE = auto()
    SCALE = auto()
    SLIDE = auto()
    WAVE = auto()
    SPIRAL = auto()
    RANDOM = auto()
    RIPPLE = auto()
    CASCADE = auto()


class GeneratorID(Enum):
    """Procedural pattern generators (cache key namespace)"""
    EMPTY = auto()
    FILLED = auto()
    CIRCLE = auto()
    RING = auto()
    CROSS = auto()
    DIAGONAL = auto()
    CHECKERBOARD = auto()
    SPIRAL = auto()
    WAVE = auto()
    HEART = auto()


class DrawingTool(Enum):
    """Editor drawing tools backed by the geometry engine"""
    PENCIL = auto()
    ERASER = auto()
    LINE = auto()
    RECTANGLE = auto()
    CIRCLE = auto()
    FILL = auto()


class ShiftDirection(Enum):
    """Direction for shifting the whole editor pattern by one cell"""
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()        # Configuration loading, validation
    CODEC = auto()         # Pattern validation, compression
    GEOMETRY = auto()      # Editor rasterization, flood fill
    CACHE = auto()         # Generator memoization
    SEQUENCER = auto()     # Frame playback
    ORCHESTRATOR = auto()  # Label transitions
    EVENT = auto()         # Event bus events and handling
    INTERCHANGE = auto()   # JSON import/export
    EDITOR = auto()        # Pattern editor document
    SYSTEM = auto()        # Startup, shutdown, errors

    GENERAL = auto()    # Default general category
