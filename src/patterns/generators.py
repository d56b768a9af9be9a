"""
Procedural pattern generators and transforms

Generators build square patterns from a few numeric parameters. Each
deterministic generator takes an optional PatternCache; with a cache the
result is memoized under (GeneratorID name, *params) and the caller always
receives its own copy.

Transforms (rotate, flip, scale, morph) always return a new pattern.
"""

import math
import random
from typing import Callable, Optional

from models.enums import GeneratorID
from models.pattern import Pattern
from patterns.cache import PatternCache
from patterns.codec import create_empty_pattern, create_filled_pattern, normalize_pattern

HEART_SHAPE = (
    (0, 1, 1, 0, 0, 1, 1, 0),
    (1, 1, 1, 1, 1, 1, 1, 1),
    (1, 1, 1, 1, 1, 1, 1, 1),
    (1, 1, 1, 1, 1, 1, 1, 1),
    (0, 1, 1, 1, 1, 1, 1, 0),
    (0, 0, 1, 1, 1, 1, 0, 0),
    (0, 0, 0, 1, 1, 0, 0, 0),
    (0, 0, 0, 0, 0, 0, 0, 0),
)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _cached(
    cache: Optional[PatternCache],
    generator_id: GeneratorID,
    build: Callable[..., Pattern],
    *params
) -> Pattern:
    if cache is None:
        return build(*params)
    return cache.get_or_generate((generator_id.name, *params), build, *params)


# ============================================================
# Builders (uncached)
# ============================================================

def _build_circle(size: int, radius: float) -> Pattern:
    pattern = create_empty_pattern(size)
    center = size // 2
    for row in range(size):
        for col in range(size):
            pattern[row][col] = math.hypot(row - center, col - center) <= radius
    return pattern


def _build_ring(size: int, outer_radius: float, inner_radius: float) -> Pattern:
    pattern = create_empty_pattern(size)
    center = size // 2
    for row in range(size):
        for col in range(size):
            distance = math.hypot(row - center, col - center)
            pattern[row][col] = inner_radius <= distance <= outer_radius
    return pattern


def _build_cross(size: int) -> Pattern:
    pattern = create_empty_pattern(size)
    center = size // 2
    for i in range(size):
        pattern[center][i] = True
        pattern[i][center] = True
    return pattern


def _build_diagonal(size: int) -> Pattern:
    pattern = create_empty_pattern(size)
    for i in range(size):
        pattern[i][i] = True
        pattern[i][size - 1 - i] = True
    return pattern


def _build_checkerboard(size: int) -> Pattern:
    return [[(row + col) % 2 == 0 for col in range(size)] for row in range(size)]


def _build_spiral(size: int) -> Pattern:
    pattern = create_empty_pattern(size)
    top, bottom = 0, size - 1
    left, right = 0, size - 1

    while top <= bottom and left <= right:
        for i in range(left, right + 1):
            pattern[top][i] = True
        top += 1

        for i in range(top, bottom + 1):
            pattern[i][right] = True
        right -= 1

        if top <= bottom:
            for i in range(right, left - 1, -1):
                pattern[bottom][i] = True
            bottom -= 1

        if left <= right:
            for i in range(bottom, top - 1, -1):
                pattern[i][left] = True
            left += 1

    return pattern


def _build_wave(size: int, amplitude: float, frequency: float) -> Pattern:
    pattern = create_empty_pattern(size)
    center_y = size // 2

    for col in range(size):
        y = center_y + round_half_up(amplitude * math.sin((col / size) * math.pi * 2 * frequency))
        if 0 <= y < size:
            pattern[y][col] = True
            if y > 0:
                pattern[y - 1][col] = True
            if y < size - 1:
                pattern[y + 1][col] = True

    return pattern


def _build_heart(size: int) -> Pattern:
    pattern = create_empty_pattern(size)
    limit = min(size, len(HEART_SHAPE))
    for row in range(limit):
        for col in range(limit):
            pattern[row][col] = HEART_SHAPE[row][col] == 1
    return pattern


# ============================================================
# Public generators
# ============================================================

def create_blank_pattern(size: int = 8, cache: Optional[PatternCache] = None) -> Pattern:
    return _cached(cache, GeneratorID.EMPTY, create_empty_pattern, size)


def create_solid_pattern(size: int = 8, cache: Optional[PatternCache] = None) -> Pattern:
    return _cached(cache, GeneratorID.FILLED, create_filled_pattern, size)


def create_circle_pattern(size: int = 8, radius: float = 3, cache: Optional[PatternCache] = None) -> Pattern:
    """Filled disc around (size//2, size//2)"""
    return _cached(cache, GeneratorID.CIRCLE, _build_circle, size, radius)


def create_ring_pattern(
    size: int = 8,
    outer_radius: float = 3,
    inner_radius: float = 2,
    cache: Optional[PatternCache] = None
) -> Pattern:
    """Annulus: inner_radius <= distance <= outer_radius"""
    return _cached(cache, GeneratorID.RING, _build_ring, size, outer_radius, inner_radius)


def create_cross_pattern(size: int = 8, cache: Optional[PatternCache] = None) -> Pattern:
    return _cached(cache, GeneratorID.CROSS, _build_cross, size)


def create_diagonal_pattern(size: int = 8, cache: Optional[PatternCache] = None) -> Pattern:
    """Both diagonals (an X)"""
    return _cached(cache, GeneratorID.DIAGONAL, _build_diagonal, size)


def create_checkerboard_pattern(size: int = 8, cache: Optional[PatternCache] = None) -> Pattern:
    return _cached(cache, GeneratorID.CHECKERBOARD, _build_checkerboard, size)


def create_spiral_pattern(size: int = 8, cache: Optional[PatternCache] = None) -> Pattern:
    return _cached(cache, GeneratorID.SPIRAL, _build_spiral, size)


def create_wave_pattern(
    size: int = 8,
    amplitude: float = 2,
    frequency: float = 1,
    cache: Optional[PatternCache] = None
) -> Pattern:
    """Three-pixel-thick sine wave across the columns"""
    return _cached(cache, GeneratorID.WAVE, _build_wave, size, amplitude, frequency)


def create_heart_pattern(size: int = 8, cache: Optional[PatternCache] = None) -> Pattern:
    return _cached(cache, GeneratorID.HEART, _build_heart, size)


def create_random_pattern(size: int = 8, density: float = 0.5, rng: Optional[random.Random] = None) -> Pattern:
    """Random cells (never cached)"""
    rng = rng or random.Random()
    return [[rng.random() < density for _ in range(size)] for _ in range(size)]


# ============================================================
# Transforms
# ============================================================

def rotate_pattern(pattern: Pattern, clockwise: bool = True) -> Pattern:
    size = len(pattern)
    rotated = create_empty_pattern(size)
    for row in range(size):
        for col in range(size):
            if clockwise:
                rotated[col][size - 1 - row] = pattern[row][col]
            else:
                rotated[size - 1 - col][row] = pattern[row][col]
    return rotated


def flip_pattern(pattern: Pattern, horizontal: bool = True) -> Pattern:
    size = len(pattern)
    flipped = create_empty_pattern(size)
    for row in range(size):
        for col in range(size):
            if horizontal:
                flipped[row][size - 1 - col] = pattern[row][col]
            else:
                flipped[size - 1 - row][col] = pattern[row][col]
    return flipped


def scale_pattern(pattern: Pattern, scale: float) -> Pattern:
    """Zoom around the center (scale > 1 enlarges, scale < 1 shrinks)"""
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")

    size = len(pattern)
    center = size // 2
    scaled = create_empty_pattern(size)

    for row in range(size):
        for col in range(size):
            src_row = round_half_up(center + (row - center) / scale)
            src_col = round_half_up(center + (col - center) / scale)
            if 0 <= src_row < size and 0 <= src_col < size:
                scaled[row][col] = pattern[src_row][src_col]

    return scaled


def morph_patterns(source: Pattern, target: Pattern, progress: float) -> Pattern:
    """
    Intermediate frame between two patterns.

    Cells on in both stay on; cells only in source turn off after the
    midpoint; cells only in target turn on after the midpoint. target is
    normalized to the source size first.
    """
    size = len(source)
    target = normalize_pattern(target, size) or create_empty_pattern(size)
    morphed = create_empty_pattern(size)

    for row in range(size):
        for col in range(size):
            was_on = source[row][col]
            will_be_on = target[row][col]
            if was_on and will_be_on:
                morphed[row][col] = True
            elif was_on:
                morphed[row][col] = progress < 0.5
            elif will_be_on:
                morphed[row][col] = progress > 0.5

    return morphed
