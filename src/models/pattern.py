"""
Pattern domain models

A pattern is a square boolean grid addressed as pattern[row][col].
Points use editor coordinates: x is the column, y is the row.
"""

from dataclasses import dataclass
from typing import List, Tuple, Union, Literal

Pattern = List[List[bool]]

# Iteration count accepted by FrameSequencer
Iterations = Union[int, Literal["infinite"]]

INFINITE: Literal["infinite"] = "infinite"

# Frame duration bounds used by import validation and the editor
MIN_FRAME_DURATION_MS = 100
MAX_FRAME_DURATION_MS = 5000


@dataclass(frozen=True)
class Point:
    """Integer grid coordinate (x = column, y = row)"""
    x: int
    y: int

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def in_bounds(self, grid_size: int) -> bool:
        return 0 <= self.x < grid_size and 0 <= self.y < grid_size


@dataclass(frozen=True)
class EditorFrame:
    """One timeline entry of the editor: pattern + how long it is shown"""
    pattern: Tuple[Tuple[bool, ...], ...]
    duration_ms: int = 500

    @classmethod
    def from_pattern(cls, pattern: Pattern, duration_ms: int = 500) -> "EditorFrame":
        return cls(pattern=tuple(tuple(row) for row in pattern), duration_ms=duration_ms)

    def to_pattern(self) -> Pattern:
        return [list(row) for row in self.pattern]
