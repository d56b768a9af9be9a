"""
Configuration models

Typed views over the YAML configuration loaded by ConfigManager.
Every section has defaults so a partial config file is still usable.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from models.enums import LogLevel
from models.pattern import Iterations, INFINITE


@dataclass(frozen=True)
class SequencerSettings:
    """Defaults for FrameSequencer"""
    tempo_ms: float = 200
    tick_interval_ms: float = 16
    max_catch_up_frames: int = 120
    iterations: Iterations = INFINITE


@dataclass(frozen=True)
class OrchestratorSettings:
    """Defaults for TransitionOrchestrator"""
    hold_duration_ms: float = 2000
    transition_duration_ms: float = 600


@dataclass(frozen=True)
class CacheSettings:
    """PatternCache sizing"""
    capacity: int = 100


@dataclass(frozen=True)
class EditorSettings:
    """Pattern editor grid limits"""
    default_grid_size: int = 7
    min_grid_size: int = 3
    max_grid_size: int = 16
    default_frame_duration_ms: int = 500
    history_limit: int = 50
    max_frames: int = 10


@dataclass(frozen=True)
class LoggingSettings:
    level: LogLevel = LogLevel.INFO
    use_colors: bool = True


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration"""
    sequencer: SequencerSettings = field(default_factory=SequencerSettings)
    orchestrator: OrchestratorSettings = field(default_factory=OrchestratorSettings)
    cache: CacheSettings = field(default_factory=CacheSettings)
    editor: EditorSettings = field(default_factory=EditorSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    # Raw merged YAML, kept for sections without a typed view (e.g. labels)
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)
