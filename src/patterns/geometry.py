"""
Geometry Engine

Pure rasterization helpers for the pattern editor. Given identical inputs they
return identical point sets.

Bounds policy:
- line_points / rectangle_points do not bounds-check; callers filter
  (codec.apply_points drops off-grid points)
- circle_points drops out-of-range points when grid_size is given
- flood_fill_points never leaves the grid
"""

import math
from typing import Any, List, Optional, Set, Tuple

from models.pattern import Point
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.GEOMETRY)


def _dedupe(points: List[Point]) -> List[Point]:
    """Remove duplicates, keep first-seen order"""
    return list(dict.fromkeys(points))


# ============================================================
# Line
# ============================================================

def line_points(start: Point, end: Point) -> List[Point]:
    """
    Bresenham line from start to end, both endpoints included exactly once.

    Always yields max(|dx|, |dy|) + 1 points. The traversal is computed from
    the lexicographically smaller endpoint so swapping start and end gives
    the same point set in reverse order (plain Bresenham breaks ties
    differently per direction).
    """
    if (start.x, start.y) > (end.x, end.y):
        return list(reversed(_bresenham(end, start)))
    return _bresenham(start, end)


def _bresenham(start: Point, end: Point) -> List[Point]:
    points: List[Point] = []

    x0, y0 = start.x, start.y
    x1, y1 = end.x, end.y

    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy

    while True:
        points.append(Point(x0, y0))

        if x0 == x1 and y0 == y1:
            break

        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy

    return points


# ============================================================
# Rectangle
# ============================================================

def rectangle_points(corner1: Point, corner2: Point, filled: bool) -> List[Point]:
    """
    Axis-aligned rectangle spanned by two opposite corners.

    filled=True: every point of the closed rectangle.
    filled=False: the perimeter only, no duplicates. Horizontal edges are
    emitted in full, vertical edges without the corners.
    """
    min_x, max_x = min(corner1.x, corner2.x), max(corner1.x, corner2.x)
    min_y, max_y = min(corner1.y, corner2.y), max(corner1.y, corner2.y)

    points: List[Point] = []

    if filled:
        for y in range(min_y, max_y + 1):
            for x in range(min_x, max_x + 1):
                points.append(Point(x, y))
        return points

    # Top and bottom edges
    for x in range(min_x, max_x + 1):
        points.append(Point(x, min_y))
        if min_y != max_y:
            points.append(Point(x, max_y))

    # Left and right edges (corners already emitted)
    for y in range(min_y + 1, max_y):
        points.append(Point(min_x, y))
        if min_x != max_x:
            points.append(Point(max_x, y))

    return points


# ============================================================
# Circle
# ============================================================

def circle_radius(center: Point, edge_point: Point) -> int:
    """Euclidean distance rounded half-up"""
    distance = math.hypot(edge_point.x - center.x, edge_point.y - center.y)
    return int(math.floor(distance + 0.5))


def circle_points(
    center: Point,
    edge_point: Point,
    filled: bool,
    grid_size: Optional[int] = None
) -> List[Point]:
    """
    Circle around center passing through edge_point.

    filled=True: all points with squared distance <= radius².
    filled=False: midpoint circle algorithm, 8-way symmetric octant points.

    Args:
        grid_size: When given, points outside 0..grid_size-1 are dropped

    Returns:
        Deduplicated point list
    """
    radius = circle_radius(center, edge_point)
    points: List[Point] = []

    if filled:
        r2 = radius * radius
        for y in range(-radius, radius + 1):
            for x in range(-radius, radius + 1):
                if x * x + y * y <= r2:
                    points.append(Point(center.x + x, center.y + y))
    else:
        x = radius
        y = 0
        err = 0

        while x >= y:
            points.append(Point(center.x + x, center.y + y))
            points.append(Point(center.x + y, center.y + x))
            points.append(Point(center.x - y, center.y + x))
            points.append(Point(center.x - x, center.y + y))
            points.append(Point(center.x - x, center.y - y))
            points.append(Point(center.x - y, center.y - x))
            points.append(Point(center.x + y, center.y - x))
            points.append(Point(center.x + x, center.y - y))

            if err <= 0:
                y += 1
                err += 2 * y + 1
            if err > 0:
                x -= 1
                err -= 2 * x + 1

    unique = _dedupe(points)
    if grid_size is not None:
        unique = [p for p in unique if p.in_bounds(grid_size)]
    return unique


# ============================================================
# Flood fill
# ============================================================

def flood_fill_points(pattern: Any, start: Point, grid_size: int) -> List[Point]:
    """
    4-connected flood fill from start.

    Collects every reachable point whose cell equals the start cell's value.
    Uses an explicit stack (no recursion limit) and a visited set, so each
    coordinate (filled or not) is read at most once and the walk always
    terminates.

    Returns:
        Filled points, or [] when start is off-grid or the pattern is unusable
    """
    if not pattern:
        return []

    limit = min(grid_size, len(pattern))
    if not start.in_bounds(limit):
        log.debug("Flood fill start outside grid", x=start.x, y=start.y, grid_size=limit)
        return []

    target_value = pattern[start.y][start.x]
    visited: Set[Tuple[int, int]] = set()
    stack: List[Point] = [start]
    points: List[Point] = []

    while stack:
        point = stack.pop()
        key = (point.x, point.y)

        if key in visited:
            continue
        visited.add(key)

        if not point.in_bounds(limit):
            continue
        row = pattern[point.y]
        if point.x >= len(row) or row[point.x] != target_value:
            continue
        points.append(point)

        stack.append(Point(point.x + 1, point.y))
        stack.append(Point(point.x - 1, point.y))
        stack.append(Point(point.x, point.y + 1))
        stack.append(Point(point.x, point.y - 1))

    return points
