"""
Preset animation library

Ready-made 8×8 frame sequences with their playback tempo. Presets are built
from the procedural generators, so a shared PatternCache makes rebuilding
them cheap.
"""

import math
import random
from dataclasses import dataclass
from typing import Dict, List, Optional

from models.pattern import Pattern
from patterns.cache import PatternCache
from patterns.codec import copy_pattern, create_empty_pattern
from patterns.generators import (
    create_circle_pattern,
    create_ring_pattern,
    create_cross_pattern,
    create_diagonal_pattern,
    create_spiral_pattern,
    create_wave_pattern,
    create_heart_pattern,
    round_half_up,
)
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.GENERAL)

PRESET_GRID_SIZE = 8

# Morse timing in frames
DOT_FRAMES = 2
DASH_FRAMES = 6
GAP_FRAMES = 2


@dataclass(frozen=True)
class PatternPreset:
    """Named frame sequence with its tempo (ms per frame)"""
    name: str
    description: str
    frames: List[Pattern]
    tempo: int

    def copy_frames(self) -> List[Pattern]:
        return [copy_pattern(frame) for frame in self.frames]


# ============================================================
# Frame sequence builders
# ============================================================

def create_expanding_circles(cache: Optional[PatternCache] = None) -> List[Pattern]:
    frames = [create_circle_pattern(PRESET_GRID_SIZE, radius, cache=cache) for radius in range(0, 5)]
    frames += [create_circle_pattern(PRESET_GRID_SIZE, radius, cache=cache) for radius in range(3, 0, -1)]
    return frames


def create_rotating_cross(cache: Optional[PatternCache] = None) -> List[Pattern]:
    base = create_cross_pattern(PRESET_GRID_SIZE, cache=cache)
    frames = [base]
    center = (PRESET_GRID_SIZE - 1) / 2

    for angle in range(0, 360, 45):
        pattern = create_empty_pattern(PRESET_GRID_SIZE)
        rad = math.radians(angle)
        cos_a, sin_a = math.cos(rad), math.sin(rad)

        for r in range(PRESET_GRID_SIZE):
            for c in range(PRESET_GRID_SIZE):
                if not base[r][c]:
                    continue
                x = c - center
                y = r - center
                new_c = round_half_up(x * cos_a - y * sin_a + center)
                new_r = round_half_up(x * sin_a + y * cos_a + center)
                if 0 <= new_r < PRESET_GRID_SIZE and 0 <= new_c < PRESET_GRID_SIZE:
                    pattern[new_r][new_c] = True

        frames.append(pattern)

    return frames


def create_radar_sweep(steps: int = 16) -> List[Pattern]:
    frames = []
    center = (PRESET_GRID_SIZE - 1) / 2
    beam_half_width = math.pi / 8

    for step in range(steps):
        pattern = create_empty_pattern(PRESET_GRID_SIZE)
        sweep_angle = (step / steps) * math.pi * 2

        for r in range(PRESET_GRID_SIZE):
            for c in range(PRESET_GRID_SIZE):
                x = c - center
                y = r - center
                diff = abs(math.atan2(y, x) - sweep_angle) % (math.pi * 2)
                diff = min(diff, math.pi * 2 - diff)
                if diff < beam_half_width and math.hypot(x, y) <= center:
                    pattern[r][c] = True

        frames.append(pattern)

    return frames


def create_building_blocks() -> List[Pattern]:
    """Rows fill bottom-up, then empty top-down"""
    def filled_from(first_row: int) -> Pattern:
        pattern = create_empty_pattern(PRESET_GRID_SIZE)
        for r in range(first_row, PRESET_GRID_SIZE):
            pattern[r] = [True] * PRESET_GRID_SIZE
        return pattern

    frames = [filled_from(row) for row in range(PRESET_GRID_SIZE - 1, -1, -1)]
    frames += [filled_from(row) for row in range(1, PRESET_GRID_SIZE)]
    return frames


def create_pulse_wave(cache: Optional[PatternCache] = None) -> List[Pattern]:
    return [
        create_ring_pattern(PRESET_GRID_SIZE, radius + 0.5, max(0, radius - 0.5), cache=cache)
        for radius in range(0, 5)
    ]


def create_morse_signal(code: str) -> List[Pattern]:
    """
    Frames for a Morse string made of '.' and '-'.

    A dot is a 2×2 center block for DOT_FRAMES frames, a dash a 2×6 bar for
    DASH_FRAMES frames; every symbol is followed by GAP_FRAMES blank frames.
    Other characters only produce the gap.
    """
    frames: List[Pattern] = []

    for char in code:
        if char == ".":
            for _ in range(DOT_FRAMES):
                pattern = create_empty_pattern(PRESET_GRID_SIZE)
                for r in (3, 4):
                    for c in (3, 4):
                        pattern[r][c] = True
                frames.append(pattern)
        elif char == "-":
            for _ in range(DASH_FRAMES):
                pattern = create_empty_pattern(PRESET_GRID_SIZE)
                for r in (3, 4):
                    for c in range(1, 7):
                        pattern[r][c] = True
                frames.append(pattern)

        for _ in range(GAP_FRAMES):
            frames.append(create_empty_pattern(PRESET_GRID_SIZE))

    return frames


def build_presets(cache: Optional[PatternCache] = None) -> List[PatternPreset]:
    """Build the full preset list (display order)"""
    size = PRESET_GRID_SIZE
    return [
        PatternPreset("Loading", "Expanding circles animation", create_expanding_circles(cache), 100),
        PatternPreset("Processing", "Rotating cross pattern", create_rotating_cross(cache), 80),
        PatternPreset("Scanning", "Radar sweep effect", create_radar_sweep(), 60),
        PatternPreset("Building", "Bottom-up fill animation", create_building_blocks(), 120),
        PatternPreset("Pulse", "Center-out wave effect", create_pulse_wave(cache), 150),
        PatternPreset("SOS", "Morse code SOS signal", create_morse_signal("...---..."), 100),
        PatternPreset("Heart", "Static heart shape", [create_heart_pattern(size, cache=cache)], 1000),
        PatternPreset(
            "Wave",
            "Sine wave pattern",
            [
                create_wave_pattern(size, cache=cache),
                create_wave_pattern(size, 2, 1.5, cache=cache),
                create_wave_pattern(size, 2, 2, cache=cache),
            ],
            200,
        ),
        PatternPreset("Spiral", "Spiral pattern", [create_spiral_pattern(size, cache=cache)], 1000),
        PatternPreset("Diagonal", "Diagonal lines", [create_diagonal_pattern(size, cache=cache)], 1000),
    ]


class PresetLibrary:
    """
    Lazily built preset collection

    Example:
        library = PresetLibrary(cache)
        preset = library.get_preset_by_name("Loading")
        sequencer.set_frames(preset.copy_frames())
    """

    def __init__(self, cache: Optional[PatternCache] = None):
        self.cache = cache
        self._presets: Optional[Dict[str, PatternPreset]] = None

    def _ensure_built(self) -> Dict[str, PatternPreset]:
        if self._presets is None:
            self._presets = {preset.name: preset for preset in build_presets(self.cache)}
            log.debug(f"Built {len(self._presets)} presets")
        return self._presets

    def names(self) -> List[str]:
        return list(self._ensure_built().keys())

    def get_all(self) -> List[PatternPreset]:
        return list(self._ensure_built().values())

    def get_preset_by_name(self, name: str) -> Optional[PatternPreset]:
        """Exact, case-sensitive name lookup"""
        return self._ensure_built().get(name)

    def get_random_preset(self, rng: Optional[random.Random] = None) -> PatternPreset:
        rng = rng or random.Random()
        return rng.choice(self.get_all())
