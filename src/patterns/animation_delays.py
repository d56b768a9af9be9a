"""
Pixel reveal delays per AnimationPreset

Each preset maps to a pure function (row, col, grid_size) -> delay in ms.
The table must cover every AnimationPreset member; this is checked at import.
RANDOM is the only non-deterministic preset and draws from the rng passed in.
"""

import math
import random
from typing import Callable, Dict, List, Optional

from models.enums import AnimationPreset

DelayFunction = Callable[[int, int, int, random.Random], float]


def _fade_delay(row: int, col: int, grid_size: int, rng: random.Random) -> float:
    return 0.0


def _scale_delay(row: int, col: int, grid_size: int, rng: random.Random) -> float:
    return (row + col) * 20.0


def _slide_delay(row: int, col: int, grid_size: int, rng: random.Random) -> float:
    return col * 30.0


def _wave_delay(row: int, col: int, grid_size: int, rng: random.Random) -> float:
    return math.sin((row + col) / 2) * 100 + 100


def _spiral_delay(row: int, col: int, grid_size: int, rng: random.Random) -> float:
    center = grid_size / 2
    angle = math.atan2(row - center, col - center)
    distance = math.hypot(row - center, col - center)
    return (angle + math.pi) * 50 + distance * 30


def _random_delay(row: int, col: int, grid_size: int, rng: random.Random) -> float:
    return rng.random() * 200


def _ripple_delay(row: int, col: int, grid_size: int, rng: random.Random) -> float:
    center = grid_size / 2
    distance = math.hypot(row - center, col - center)
    max_distance = (math.sqrt(2) * grid_size) / 2
    return (distance / max_distance) * 150


def _cascade_delay(row: int, col: int, grid_size: int, rng: random.Random) -> float:
    return row * 40.0 + col * 10.0


DELAY_FUNCTIONS: Dict[AnimationPreset, DelayFunction] = {
    AnimationPreset.FADE: _fade_delay,
    AnimationPreset.SCALE: _scale_delay,
    AnimationPreset.SLIDE: _slide_delay,
    AnimationPreset.WAVE: _wave_delay,
    AnimationPreset.SPIRAL: _spiral_delay,
    AnimationPreset.RANDOM: _random_delay,
    AnimationPreset.RIPPLE: _ripple_delay,
    AnimationPreset.CASCADE: _cascade_delay,
}

_missing = set(AnimationPreset) - set(DELAY_FUNCTIONS)
if _missing:
    raise RuntimeError(f"Delay table incomplete, missing: {sorted(p.name for p in _missing)}")


def calculate_animation_delay(
    row: int,
    col: int,
    grid_size: int,
    preset: AnimationPreset,
    rng: Optional[random.Random] = None
) -> float:
    """
    Reveal delay (ms) for one pixel.

    Args:
        row, col: Pixel position
        grid_size: Side length of the grid
        preset: Delay preset
        rng: Random source for AnimationPreset.RANDOM
    """
    return DELAY_FUNCTIONS[preset](row, col, grid_size, rng or random.Random())


def build_delay_map(
    grid_size: int,
    preset: AnimationPreset,
    rng: Optional[random.Random] = None
) -> List[List[float]]:
    """Delays for every pixel of a grid_size × grid_size grid"""
    rng = rng or random.Random()
    delay_fn = DELAY_FUNCTIONS[preset]
    return [
        [delay_fn(row, col, grid_size, rng) for col in range(grid_size)]
        for row in range(grid_size)
    ]
