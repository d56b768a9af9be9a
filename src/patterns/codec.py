"""
Pattern Codec

Validation, normalization, text form and bit-packed compression of patterns.

is_valid_pattern() is the gatekeeper: every other component checks it before
touching caller-supplied data. Nothing here raises on bad input data; failures
come back as False / None.

Compressed format:
    row-major bits → 8 bits per byte (MSB first, last byte zero-padded)
    → standard base64. The grid size is NOT stored and must travel alongside.
"""

import base64
import binascii
import re
from typing import Any, Iterable, Optional

from models.pattern import Pattern, Point
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CODEC)

ON_CHAR = "█"
OFF_CHAR = "░"
ON_CHARS = frozenset("█1#")
OFF_CHARS = frozenset("░0.")

_WHITESPACE = re.compile(r"\s+")


# ============================================================
# Construction
# ============================================================

def create_empty_pattern(size: int) -> Pattern:
    return [[False] * size for _ in range(size)]


def create_filled_pattern(size: int) -> Pattern:
    return [[True] * size for _ in range(size)]


def copy_pattern(pattern: Pattern) -> Pattern:
    """Deep copy (rows are new lists)"""
    return [list(row) for row in pattern]


# ============================================================
# Validation / normalization
# ============================================================

def is_valid_pattern(candidate: Any) -> bool:
    """
    True iff candidate is a non-empty square grid of booleans.

    Accepts lists and tuples. Cells must be real bools: 0/1 integers are
    rejected.
    """
    if not isinstance(candidate, (list, tuple)) or len(candidate) == 0:
        return False

    size = len(candidate)
    for row in candidate:
        if not isinstance(row, (list, tuple)) or len(row) != size:
            return False
        for cell in row:
            if not isinstance(cell, bool):
                return False

    return True


def normalize_pattern(candidate: Any, target_size: int) -> Optional[Pattern]:
    """
    Resize a pattern to target_size × target_size.

    The top-left overlapping region is copied, every other cell is False.
    A pattern that already has the target size comes back as an equal copy.

    Returns:
        New pattern, or None if candidate is invalid or target_size < 1
    """
    if not is_valid_pattern(candidate) or target_size < 1:
        return None

    normalized = create_empty_pattern(target_size)
    overlap = min(len(candidate), target_size)

    for row in range(overlap):
        for col in range(overlap):
            normalized[row][col] = candidate[row][col]

    return normalized


def apply_points(pattern: Any, points: Iterable[Point], value: bool) -> Optional[Pattern]:
    """
    Functional editor mutation: new pattern with points set to value.

    Off-grid points are dropped (line/rectangle tools may produce them).

    Returns:
        New pattern, or None if pattern is invalid
    """
    if not is_valid_pattern(pattern):
        return None

    size = len(pattern)
    updated = copy_pattern(pattern)
    for point in points:
        if point.in_bounds(size):
            updated[point.y][point.x] = value
    return updated


# ============================================================
# Text form
# ============================================================

def pattern_to_string(pattern: Pattern) -> str:
    """One line per row, █ = on, ░ = off"""
    return "\n".join(
        "".join(ON_CHAR if cell else OFF_CHAR for cell in row)
        for row in pattern
    )


def string_to_pattern(text: str, size: int) -> Optional[Pattern]:
    """
    Parse the text form back into a pattern.

    On: █ 1 #    Off: ░ 0 .

    Returns:
        Pattern, or None on wrong dimensions or unknown characters
    """
    lines = text.strip().split("\n")
    if len(lines) != size:
        return None

    pattern: Pattern = []
    for line in lines:
        line = line.rstrip("\r")
        if len(line) != size:
            return None

        row = []
        for char in line:
            if char in ON_CHARS:
                row.append(True)
            elif char in OFF_CHARS:
                row.append(False)
            else:
                return None
        pattern.append(row)

    return pattern


# ============================================================
# Compression
# ============================================================

def compress_pattern(pattern: Pattern) -> str:
    """
    Pack a pattern into a base64 string (8 cells per byte, MSB first).

    The final byte is zero-padded on the right; pad bits carry no meaning
    and are discarded by decompress_pattern() using the known size.

    Example:
        2×2 all-False → 4 bits → one 0x00 byte → "AA=="
    """
    packed = bytearray()
    current = 0
    bit_count = 0

    for row in pattern:
        for cell in row:
            current = (current << 1) | (1 if cell else 0)
            bit_count += 1
            if bit_count == 8:
                packed.append(current)
                current = 0
                bit_count = 0

    if bit_count:
        packed.append(current << (8 - bit_count))

    return base64.b64encode(bytes(packed)).decode("ascii")


def decompress_pattern(compressed: Any, size: int) -> Optional[Pattern]:
    """
    Inverse of compress_pattern().

    Reads size*size bits in row-major order. Bits beyond the end of a
    truncated payload read as False.

    Returns:
        size × size pattern, or None on malformed base64 / invalid size
    """
    if not isinstance(compressed, str) or not isinstance(size, int) or size < 1:
        return None

    text = _WHITESPACE.sub("", compressed)
    text += "=" * (-len(text) % 4)

    try:
        data = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        log.debug("Rejected malformed compressed pattern", error=str(e))
        return None

    total_bits = len(data) * 8
    pattern: Pattern = []

    for row in range(size):
        row_data = []
        for col in range(size):
            index = row * size + col
            if index < total_bits:
                byte = data[index // 8]
                row_data.append(bool((byte >> (7 - index % 8)) & 1))
            else:
                row_data.append(False)
        pattern.append(row_data)

    return pattern
