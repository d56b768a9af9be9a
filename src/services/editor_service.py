"""
Editor service - the non-visual half of the pattern editor

Holds an immutable EditorState (frames, selected frame, grid size). Every
operation builds a new state; mutations are recorded for undo/redo,
identical consecutive states are not.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, replace
from typing import Deque, List, Optional, Sequence, Tuple

from models.config import EditorSettings
from models.enums import DrawingTool, ShiftDirection
from models.pattern import (
    EditorFrame,
    Pattern,
    Point,
    MIN_FRAME_DURATION_MS,
    MAX_FRAME_DURATION_MS,
)
from patterns.codec import (
    apply_points,
    create_empty_pattern,
    create_filled_pattern,
    normalize_pattern,
)
from patterns.geometry import circle_points, flood_fill_points, line_points, rectangle_points
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EDITOR)


@dataclass(frozen=True)
class EditorState:
    """Editor document snapshot"""
    frames: Tuple[EditorFrame, ...]
    current_frame: int = 0
    grid_size: int = 7

    @property
    def current(self) -> EditorFrame:
        return self.frames[self.current_frame]

    def current_pattern(self) -> Pattern:
        return self.current.to_pattern()


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class EditorService:
    """
    Pattern editor document with undo/redo.

    Example:
        editor = EditorService(config.editor)
        editor.apply_tool(DrawingTool.LINE, Point(0, 0), Point(6, 6))
        editor.add_frame()
        sequencer.set_frames(editor.to_sequencer_frames())
    """

    def __init__(self, settings: Optional[EditorSettings] = None, grid_size: Optional[int] = None):
        self.settings = settings or EditorSettings()

        size = self._clamp_grid_size(grid_size or self.settings.default_grid_size)
        self._state = EditorState(
            frames=(self._blank_frame(size),),
            current_frame=0,
            grid_size=size,
        )

        self._undo_stack: Deque[EditorState] = deque(maxlen=self.settings.history_limit)
        self._redo_stack: List[EditorState] = []

    @property
    def state(self) -> EditorState:
        return self._state

    # === History ===

    def _commit(self, new_state: EditorState) -> EditorState:
        if new_state == self._state:
            return self._state

        self._undo_stack.append(self._state)
        self._redo_stack.clear()
        self._state = new_state
        return new_state

    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def undo(self) -> bool:
        if not self._undo_stack:
            return False
        self._redo_stack.append(self._state)
        self._state = self._undo_stack.pop()
        return True

    def redo(self) -> bool:
        if not self._redo_stack:
            return False
        self._undo_stack.append(self._state)
        self._state = self._redo_stack.pop()
        return True

    # === Drawing ===

    def apply_tool(
        self,
        tool: DrawingTool,
        start: Point,
        end: Optional[Point] = None,
        filled: bool = False
    ) -> EditorState:
        """
        Apply a drawing tool to the current frame.

        PENCIL toggles the start cell (and paints the line to end with the
        same value), ERASER clears, LINE/RECTANGLE/CIRCLE draw from start to
        end, FILL flips the connected region under start.
        """
        pattern = self._state.current_pattern()
        size = self._state.grid_size
        end = end or start

        if tool in (DrawingTool.PENCIL, DrawingTool.FILL) and not start.in_bounds(size):
            return self._state

        if tool == DrawingTool.PENCIL:
            value = not pattern[start.y][start.x]
            points = line_points(start, end)
        elif tool == DrawingTool.ERASER:
            value = False
            points = line_points(start, end)
        elif tool == DrawingTool.LINE:
            value = True
            points = line_points(start, end)
        elif tool == DrawingTool.RECTANGLE:
            value = True
            points = rectangle_points(start, end, filled)
        elif tool == DrawingTool.CIRCLE:
            value = True
            points = circle_points(start, end, filled, grid_size=size)
        elif tool == DrawingTool.FILL:
            value = not pattern[start.y][start.x]
            points = flood_fill_points(pattern, start, size)
        else:
            raise ValueError(f"Unsupported drawing tool: {tool}")

        updated = apply_points(pattern, points, value)
        if updated is None:
            return self._state

        log.debug(f"{tool.name} applied", frame=self._state.current_frame, points=len(points))
        return self._set_current_pattern(updated)

    def clear(self) -> EditorState:
        return self._set_current_pattern(create_empty_pattern(self._state.grid_size))

    def fill(self) -> EditorState:
        return self._set_current_pattern(create_filled_pattern(self._state.grid_size))

    def invert(self) -> EditorState:
        pattern = self._state.current_pattern()
        return self._set_current_pattern([[not cell for cell in row] for row in pattern])

    def shift(self, direction: ShiftDirection, wrap: bool = False) -> EditorState:
        """Move every cell one step in direction; wrap=True rotates the edge around"""
        pattern = self._state.current_pattern()
        size = self._state.grid_size

        if direction == ShiftDirection.UP:
            edge = pattern[0] if wrap else [False] * size
            shifted = pattern[1:] + [edge]
        elif direction == ShiftDirection.DOWN:
            edge = pattern[-1] if wrap else [False] * size
            shifted = [edge] + pattern[:-1]
        elif direction == ShiftDirection.LEFT:
            shifted = [row[1:] + [row[0] if wrap else False] for row in pattern]
        else:
            shifted = [[row[-1] if wrap else False] + row[:-1] for row in pattern]

        return self._set_current_pattern(shifted)

    def _set_current_pattern(self, pattern: Pattern) -> EditorState:
        state = self._state
        frames = list(state.frames)
        frames[state.current_frame] = replace(state.current, pattern=EditorFrame.from_pattern(pattern).pattern)
        return self._commit(replace(state, frames=tuple(frames)))

    # === Frames ===

    def add_frame(self) -> EditorState:
        """Append an empty frame and select it"""
        state = self._state
        if len(state.frames) >= self.settings.max_frames:
            log.warn("Frame limit reached", max_frames=self.settings.max_frames)
            return state

        frames = state.frames + (self._blank_frame(state.grid_size),)
        return self._commit(replace(state, frames=frames, current_frame=len(frames) - 1))

    def duplicate_frame(self, index: Optional[int] = None) -> EditorState:
        """Insert a copy of frame index right after it and select the copy"""
        state = self._state
        index = state.current_frame if index is None else index
        if not 0 <= index < len(state.frames):
            return state
        if len(state.frames) >= self.settings.max_frames:
            log.warn("Frame limit reached", max_frames=self.settings.max_frames)
            return state

        frames = state.frames[:index + 1] + (state.frames[index],) + state.frames[index + 1:]
        return self._commit(replace(state, frames=frames, current_frame=index + 1))

    def delete_frame(self, index: Optional[int] = None) -> EditorState:
        """Remove a frame (the last remaining frame is never removed)"""
        state = self._state
        index = state.current_frame if index is None else index
        if len(state.frames) <= 1 or not 0 <= index < len(state.frames):
            return state

        frames = state.frames[:index] + state.frames[index + 1:]
        return self._commit(replace(
            state,
            frames=frames,
            current_frame=min(state.current_frame, len(frames) - 1),
        ))

    def move_frame(self, from_index: int, to_index: int) -> EditorState:
        """Reorder the timeline; the moved frame becomes the selected one"""
        state = self._state
        count = len(state.frames)
        if not (0 <= from_index < count and 0 <= to_index < count):
            return state

        frames = list(state.frames)
        frame = frames.pop(from_index)
        frames.insert(to_index, frame)
        return self._commit(replace(state, frames=tuple(frames), current_frame=to_index))

    def select_frame(self, index: int) -> EditorState:
        """Change the selected frame (not recorded in history)"""
        state = self._state
        self._state = replace(state, current_frame=_clamp(index, 0, len(state.frames) - 1))
        return self._state

    def set_frame_duration(self, duration_ms: int, index: Optional[int] = None) -> EditorState:
        state = self._state
        index = state.current_frame if index is None else index
        if not 0 <= index < len(state.frames):
            return state

        duration = _clamp(int(duration_ms), MIN_FRAME_DURATION_MS, MAX_FRAME_DURATION_MS)
        frames = list(state.frames)
        frames[index] = replace(frames[index], duration_ms=duration)
        return self._commit(replace(state, frames=tuple(frames)))

    def set_all_durations(self, duration_ms: int) -> EditorState:
        """Same duration for every frame (playback speed)"""
        duration = _clamp(int(duration_ms), MIN_FRAME_DURATION_MS, MAX_FRAME_DURATION_MS)
        frames = tuple(replace(frame, duration_ms=duration) for frame in self._state.frames)
        return self._commit(replace(self._state, frames=frames))

    # === Grid / document ===

    def resize_grid(self, grid_size: int) -> EditorState:
        """Change the grid size, cropping or padding every frame"""
        size = self._clamp_grid_size(grid_size)
        state = self._state
        if size == state.grid_size:
            return state

        frames = tuple(
            replace(frame, pattern=EditorFrame.from_pattern(normalize_pattern(frame.pattern, size)).pattern)
            for frame in state.frames
        )
        log.info("Grid resized", old=state.grid_size, new=size)
        return self._commit(replace(state, frames=frames, grid_size=size))

    def load_patterns(self, patterns: Sequence[Pattern], duration_ms: Optional[int] = None) -> EditorState:
        """
        Replace the timeline with patterns (e.g. a preset).

        Patterns are normalized to the current grid size; invalid ones are
        skipped. Nothing changes if no pattern is usable.
        """
        size = self._state.grid_size
        duration = _clamp(
            int(duration_ms or self.settings.default_frame_duration_ms),
            MIN_FRAME_DURATION_MS,
            MAX_FRAME_DURATION_MS,
        )

        frames = []
        for pattern in patterns[:self.settings.max_frames]:
            normalized = normalize_pattern(pattern, size)
            if normalized is not None:
                frames.append(EditorFrame.from_pattern(normalized, duration))

        if not frames:
            log.warn("No usable patterns to load")
            return self._state

        return self._commit(EditorState(frames=tuple(frames), current_frame=0, grid_size=size))

    def load_frames(self, frames: Sequence[EditorFrame], grid_size: int) -> EditorState:
        """Replace the whole document (e.g. after an import)"""
        if not frames:
            return self._state

        size = self._clamp_grid_size(grid_size)
        loaded = tuple(
            EditorFrame.from_pattern(
                normalize_pattern(frame.pattern, size) or create_empty_pattern(size),
                _clamp(frame.duration_ms, MIN_FRAME_DURATION_MS, MAX_FRAME_DURATION_MS),
            )
            for frame in frames
        )
        return self._commit(EditorState(frames=loaded, current_frame=0, grid_size=size))

    def to_sequencer_frames(self) -> List[Pattern]:
        return [frame.to_pattern() for frame in self._state.frames]

    # === Helpers ===

    def _clamp_grid_size(self, size: int) -> int:
        return _clamp(size, self.settings.min_grid_size, self.settings.max_grid_size)

    def _blank_frame(self, size: int) -> EditorFrame:
        return EditorFrame.from_pattern(create_empty_pattern(size), self.settings.default_frame_duration_ms)
