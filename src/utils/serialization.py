"""
Serialization utilities - Central enum and model serialization for JSON

Provides:
- Enums ↔ Strings (AnimationPreset, LogLevel, DrawingTool, ...)
- State snapshots → Dicts (SequencerState, OrchestratorState) for log output
"""

from typing import TypeVar, Type, Any, Dict, Optional
from enum import Enum

from models.state import SequencerState, OrchestratorState

T = TypeVar('T', bound=Enum)


class Serializer:
    """Central enum and model serialization"""

    # ========================================================================
    # ENUM SERIALIZATION
    # ========================================================================

    @staticmethod
    def enum_to_str(value: Optional[Enum]) -> Optional[str]:
        """Convert any enum to string name"""
        return value.name if value else None

    @staticmethod
    def str_to_enum(value: str, enum_type: Type[T]) -> T:
        """Convert string to enum (case-insensitive), raise ValueError if invalid"""
        try:
            return enum_type[value.upper()]
        except (KeyError, AttributeError):
            raise ValueError(f"Invalid {enum_type.__name__}: {value}")

    # ========================================================================
    # STATE SERIALIZATION
    # ========================================================================

    @staticmethod
    def sequencer_state_to_dict(state: SequencerState) -> Dict[str, Any]:
        return {
            "current_frame_index": state.current_frame_index,
            "current_iteration": state.current_iteration,
            "status": state.status.name,
            "is_running": state.is_running,
            "accumulated_drift_ms": round(state.accumulated_drift_ms, 3),
        }

    @staticmethod
    def orchestrator_state_to_dict(state: OrchestratorState) -> Dict[str, Any]:
        return {
            "current_label": state.current_label,
            "next_label": state.next_label,
            "is_transitioning": state.is_transitioning,
            "current_index": state.current_index,
        }

