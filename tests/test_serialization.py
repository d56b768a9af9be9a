"""
Tests for the Serializer helpers and their use in event logging.
"""

import io

import pytest

from models.enums import LogLevel, SequencerStatus, DrawingTool
from models.events import LabelStateChangedEvent
from models.state import SequencerState, OrchestratorState
from services.middleware import log_middleware
from utils.logger import get_logger
from utils.serialization import Serializer


class TestEnums:

    def test_enum_round_trip(self):
        assert Serializer.enum_to_str(DrawingTool.FILL) == "FILL"
        assert Serializer.enum_to_str(None) is None
        assert Serializer.str_to_enum("warn", LogLevel) == LogLevel.WARN

    def test_unknown_enum_name(self):
        with pytest.raises(ValueError, match="Invalid LogLevel"):
            Serializer.str_to_enum("verbose", LogLevel)


class TestStates:

    def test_sequencer_state(self):
        state = SequencerState(2, 1, SequencerStatus.RUNNING, 12.34567)
        assert Serializer.sequencer_state_to_dict(state) == {
            "current_frame_index": 2,
            "current_iteration": 1,
            "status": "RUNNING",
            "is_running": True,
            "accumulated_drift_ms": 12.346,
        }

    def test_orchestrator_state(self):
        state = OrchestratorState("Loading", "Processing", True, 0)
        assert Serializer.orchestrator_state_to_dict(state) == {
            "current_label": "Loading",
            "next_label": "Processing",
            "is_transitioning": True,
            "current_index": 0,
        }


class TestEventLogging:

    def test_orchestrator_state_logged_as_dict(self, monkeypatch):
        stream = io.StringIO()
        logger = get_logger()
        monkeypatch.setattr(logger, "stream", stream)
        monkeypatch.setattr(logger, "min_level", LogLevel.DEBUG)
        monkeypatch.setattr(logger, "use_colors", False)

        event = LabelStateChangedEvent(OrchestratorState("Loading", None, False, 0))
        assert log_middleware(event) is event

        output = stream.getvalue()
        assert "LABEL_STATE_CHANGED" in output
        assert "'current_label': 'Loading'" in output
        assert "OrchestratorState(" not in output
