"""
Interchange service - JSON import/export of frame sequences

Import is strict: any schema, shape or range violation raises
PatternImportError with every problem listed. Export always writes plain
booleans so an exported document re-imports unchanged.
"""

import json
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from pydantic import ValidationError

from models.errors import PatternImportError
from models.interchange import (
    FrameDocument,
    SequenceDocument,
    CompressedFrameDocument,
    CompressedSequenceDocument,
)
from models.pattern import EditorFrame
from patterns.codec import compress_pattern, decompress_pattern
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.INTERCHANGE)

DEFAULT_SEQUENCE_NAME = "Custom Animation"


def _format_validation_error(error: ValidationError) -> List[str]:
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        messages.append(f"{location}: {item['msg']}" if location else item["msg"])
    return messages


class InterchangeService:
    """
    Converts editor frames to and from JSON documents.

    Example:
        service = InterchangeService()
        text = service.export_json(editor.state.frames, editor.state.grid_size)
        document = service.import_json(text)
        frames = document.to_editor_frames()
    """

    def __init__(self, indent: Optional[int] = 2):
        self.indent = indent

    # === Full JSON ===

    def export_json(
        self,
        frames: Sequence[EditorFrame],
        grid_size: int,
        name: str = DEFAULT_SEQUENCE_NAME,
        created: Optional[datetime] = None,
    ) -> str:
        document = SequenceDocument(
            name=name,
            frames=[
                FrameDocument(pattern=frame.to_pattern(), duration=frame.duration_ms)
                for frame in frames
            ],
            grid_size=grid_size,
            created=created or datetime.now(timezone.utc),
        )
        log.info("Sequence exported", name=name, frames=len(frames), grid=f"{grid_size}x{grid_size}")
        return document.model_dump_json(by_alias=True, exclude_none=True, indent=self.indent)

    def import_json(self, text: str) -> SequenceDocument:
        """
        Parse and validate a JSON sequence document.

        Raises:
            PatternImportError: Invalid JSON or document
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise PatternImportError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e

        if not isinstance(data, dict) or "frames" not in data:
            raise PatternImportError("Invalid format: missing frames array")

        try:
            document = SequenceDocument.model_validate(data)
        except ValidationError as e:
            errors = _format_validation_error(e)
            log.warn("Sequence import rejected", errors=len(errors))
            raise PatternImportError(f"Invalid sequence: {errors[0]}", errors) from e

        log.info("Sequence imported", frames=len(document.frames), grid=f"{document.side}x{document.side}")
        return document

    # === Compressed JSON ===

    def export_compressed(self, frames: Sequence[EditorFrame], grid_size: int) -> str:
        document = CompressedSequenceDocument(
            grid_size=grid_size,
            frames=[
                CompressedFrameDocument(data=compress_pattern(frame.to_pattern()), duration=frame.duration_ms)
                for frame in frames
            ],
        )
        return document.model_dump_json(by_alias=True, exclude_none=True)

    def import_compressed(self, text: str) -> List[EditorFrame]:
        """
        Parse a compressed document back into editor frames.

        Raises:
            PatternImportError: Invalid JSON, schema, or undecodable frame data
        """
        try:
            document = CompressedSequenceDocument.model_validate_json(text)
        except ValidationError as e:
            errors = _format_validation_error(e)
            raise PatternImportError(f"Invalid compressed sequence: {errors[0]}", errors) from e

        frames = []
        for index, frame in enumerate(document.frames):
            pattern = decompress_pattern(frame.data, document.grid_size)
            if pattern is None:
                raise PatternImportError(f"Invalid frame {index + 1}: data is not valid base64")
            frames.append(EditorFrame.from_pattern(pattern, frame.duration))

        log.info("Compressed sequence imported", frames=len(frames), grid=f"{document.grid_size}x{document.grid_size}")
        return frames
