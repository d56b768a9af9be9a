"""
Pattern layer - codec, geometry, cache, generators and presets
"""

from .codec import (
    is_valid_pattern,
    normalize_pattern,
    compress_pattern,
    decompress_pattern,
    pattern_to_string,
    string_to_pattern,
    create_empty_pattern,
    create_filled_pattern,
    copy_pattern,
    apply_points,
)
from .geometry import line_points, rectangle_points, circle_points, flood_fill_points
from .cache import PatternCache

__all__ = [
    'is_valid_pattern',
    'normalize_pattern',
    'compress_pattern',
    'decompress_pattern',
    'pattern_to_string',
    'string_to_pattern',
    'create_empty_pattern',
    'create_filled_pattern',
    'copy_pattern',
    'apply_points',
    'line_points',
    'rectangle_points',
    'circle_points',
    'flood_fill_points',
    'PatternCache',
]
