"""
Interchange schemas - Pydantic models for exported/imported frame sequences

JSON document:
    {
      "name": "Custom Animation",
      "frames": [{"pattern": [[true, false, ...], ...], "duration": 500}, ...],
      "gridSize": 7,
      "created": "2025-11-26T10:30:00Z"
    }

Compressed document (patterns as base64 bit strings, see patterns.codec):
    {"gridSize": 7, "frames": [{"data": "AAAA...", "duration": 500}, ...]}
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator, model_validator

from models.pattern import EditorFrame, MIN_FRAME_DURATION_MS, MAX_FRAME_DURATION_MS
from patterns.codec import is_valid_pattern


class FrameDocument(BaseModel):
    """One frame: square boolean grid plus display duration"""
    pattern: List[List[StrictBool]] = Field(description="Square grid, pattern[row][col]")
    duration: int = Field(
        ge=MIN_FRAME_DURATION_MS,
        le=MAX_FRAME_DURATION_MS,
        strict=True,
        description="Frame duration in ms (100-5000)"
    )

    @field_validator("pattern")
    @classmethod
    def pattern_must_be_square(cls, value: List[List[bool]]) -> List[List[bool]]:
        if not is_valid_pattern(value):
            raise ValueError("pattern must be a non-empty square grid")
        return value

    def to_editor_frame(self) -> EditorFrame:
        return EditorFrame.from_pattern(self.pattern, self.duration)


class SequenceDocument(BaseModel):
    """Complete exported sequence"""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Custom Animation",
                "frames": [{"pattern": [[True, False], [False, True]], "duration": 500}],
                "gridSize": 2,
                "created": "2025-11-26T10:30:00Z"
            }
        }
    )

    name: Optional[str] = Field(None, description="Display name")
    frames: List[FrameDocument] = Field(min_length=1, description="Frames in playback order")
    grid_size: Optional[int] = Field(None, alias="gridSize", ge=1, description="Side length of every frame")
    created: Optional[datetime] = Field(None, description="Export timestamp (ISO 8601)")

    @model_validator(mode="after")
    def frames_match_grid_size(self):
        expected = self.grid_size if self.grid_size is not None else len(self.frames[0].pattern)
        for index, frame in enumerate(self.frames):
            if len(frame.pattern) != expected:
                raise ValueError(
                    f"frame {index + 1}: pattern is {len(frame.pattern)}x{len(frame.pattern)}, expected {expected}x{expected}"
                )
        return self

    @property
    def side(self) -> int:
        return self.grid_size if self.grid_size is not None else len(self.frames[0].pattern)

    def to_editor_frames(self) -> List[EditorFrame]:
        return [frame.to_editor_frame() for frame in self.frames]


class CompressedFrameDocument(BaseModel):
    data: str = Field(description="Base64 bit-packed pattern")
    duration: int = Field(ge=MIN_FRAME_DURATION_MS, le=MAX_FRAME_DURATION_MS, strict=True)


class CompressedSequenceDocument(BaseModel):
    """Compact sequence; grid size is required to decode the frames"""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    grid_size: int = Field(alias="gridSize", ge=1)
    frames: List[CompressedFrameDocument] = Field(min_length=1)
