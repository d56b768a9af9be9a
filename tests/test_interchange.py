"""
Tests for JSON import/export of frame sequences.
"""

import json
from datetime import datetime, timezone

import pytest

from models.errors import DomainError, PatternImportError
from models.interchange import SequenceDocument
from models.pattern import EditorFrame
from services.interchange_service import InterchangeService

CREATED = datetime(2025, 11, 26, 10, 30, tzinfo=timezone.utc)


def diagonal(size):
    return [[row == col for col in range(size)] for row in range(size)]


@pytest.fixture
def service():
    return InterchangeService()


@pytest.fixture
def editor_frames():
    return [
        EditorFrame.from_pattern(diagonal(3), 500),
        EditorFrame.from_pattern([[True] * 3 for _ in range(3)], 1200),
    ]


def document(**overrides):
    data = {
        "name": "Test",
        "frames": [{"pattern": diagonal(2), "duration": 500}],
        "gridSize": 2,
    }
    data.update(overrides)
    return json.dumps(data)


class TestExport:

    def test_document_layout(self, service, editor_frames):
        data = json.loads(service.export_json(editor_frames, 3, name="Blink", created=CREATED))

        assert data["name"] == "Blink"
        assert data["gridSize"] == 3
        assert data["created"] == "2025-11-26T10:30:00Z"
        assert data["frames"][0] == {"pattern": diagonal(3), "duration": 500}
        assert data["frames"][1]["duration"] == 1200

    def test_cells_are_booleans(self, service, editor_frames):
        data = json.loads(service.export_json(editor_frames, 3))
        cells = [cell for frame in data["frames"] for row in frame["pattern"] for cell in row]
        assert all(isinstance(cell, bool) for cell in cells)

    def test_created_defaults_to_now(self, service, editor_frames):
        data = json.loads(service.export_json(editor_frames, 3))
        assert "created" in data

    def test_export_reimports_unchanged(self, service, editor_frames):
        text = service.export_json(editor_frames, 3, created=CREATED)
        imported = service.import_json(text)

        assert imported.side == 3
        assert imported.created == CREATED
        assert imported.to_editor_frames() == editor_frames


class TestImport:

    def test_valid_document(self, service):
        imported = service.import_json(document())
        assert isinstance(imported, SequenceDocument)
        assert imported.name == "Test"
        assert imported.frames[0].pattern == diagonal(2)

    def test_grid_size_optional(self, service):
        text = json.dumps({"frames": [{"pattern": diagonal(4), "duration": 300}]})
        assert service.import_json(text).side == 4

    def test_invalid_json(self, service):
        with pytest.raises(PatternImportError) as exc_info:
            service.import_json("{not json")
        assert exc_info.value.message.startswith("Invalid JSON")
        assert exc_info.value.code == "PATTERN_IMPORT_FAILED"

    @pytest.mark.parametrize("text", ['{"name": "x"}', "[]", '"frames"'])
    def test_missing_frames(self, service, text):
        with pytest.raises(PatternImportError, match="missing frames array"):
            service.import_json(text)

    def test_empty_frames(self, service):
        with pytest.raises(PatternImportError):
            service.import_json(document(frames=[]))

    def test_integer_cells_rejected(self, service):
        frames = [{"pattern": [[1, 0], [0, 1]], "duration": 500}]
        with pytest.raises(PatternImportError) as exc_info:
            service.import_json(document(frames=frames))
        assert any("frames.0.pattern" in error for error in exc_info.value.errors)

    def test_non_square_rejected(self, service):
        frames = [{"pattern": [[True, False], [True]], "duration": 500}]
        with pytest.raises(PatternImportError):
            service.import_json(document(frames=frames))

    @pytest.mark.parametrize("duration", [99, 5001, "500", 500.0, None])
    def test_duration_out_of_range_or_wrong_type(self, service, duration):
        frames = [{"pattern": diagonal(2), "duration": duration}]
        with pytest.raises(PatternImportError):
            service.import_json(document(frames=frames))

    @pytest.mark.parametrize("duration", [100, 5000])
    def test_duration_bounds_inclusive(self, service, duration):
        frames = [{"pattern": diagonal(2), "duration": duration}]
        assert service.import_json(document(frames=frames)).frames[0].duration == duration

    def test_grid_size_mismatch(self, service):
        with pytest.raises(PatternImportError, match="expected 3x3"):
            service.import_json(document(gridSize=3))

    def test_frames_must_share_size(self, service):
        frames = [
            {"pattern": diagonal(2), "duration": 500},
            {"pattern": diagonal(3), "duration": 500},
        ]
        with pytest.raises(PatternImportError, match="frame 2"):
            service.import_json(json.dumps({"frames": frames}))

    def test_every_problem_reported(self, service):
        frames = [
            {"pattern": diagonal(2), "duration": 1},
            {"pattern": diagonal(2), "duration": 99999},
        ]
        with pytest.raises(PatternImportError) as exc_info:
            service.import_json(document(frames=frames))
        assert len(exc_info.value.errors) == 2
        assert exc_info.value.details["errors"] == exc_info.value.errors

    def test_import_error_is_domain_error(self):
        assert issubclass(PatternImportError, DomainError)


class TestCompressed:

    def test_round_trip(self, service, editor_frames):
        text = service.export_compressed(editor_frames, 3)
        assert service.import_compressed(text) == editor_frames

    def test_layout(self, service, editor_frames):
        data = json.loads(service.export_compressed(editor_frames, 3))
        assert data["gridSize"] == 3
        assert data["frames"][1] == {"data": "/4A=", "duration": 1200}

    def test_grid_size_required(self, service):
        with pytest.raises(PatternImportError):
            service.import_compressed('{"frames": [{"data": "AA==", "duration": 500}]}')

    def test_bad_base64(self, service):
        text = '{"gridSize": 2, "frames": [{"data": "***", "duration": 500}]}'
        with pytest.raises(PatternImportError, match="frame 1"):
            service.import_compressed(text)

    def test_invalid_json(self, service):
        with pytest.raises(PatternImportError):
            service.import_compressed("nope")
