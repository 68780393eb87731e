"""
Triangle winding normalization.

The sliding window in the strip generator alternates the orientation of
consecutive triangles. Renderers cull by winding, so every triangle is
forced into one orientation here by swapping its first two points when
needed.
"""

from typing import List

from .scanline_analyzer import Point
from .triangle_generator import Triangle


def winding_value(p1: Point, p2: Point, p3: Point) -> float:
    """
    Orientation test value for three points.

    Equals minus the cross product (p2 - p1) x (p3 - p2). Zero means the
    points are collinear.
    """
    return (p2.y - p1.y) * (p3.x - p2.x) - (p2.x - p1.x) * (p3.y - p2.y)


def vectors_clockwise(p1: Point, p2: Point, p3: Point) -> bool:
    """True when the points need swapping (including collinear points)."""
    return winding_value(p1, p2, p3) >= 0


def signed_area(triangle: Triangle) -> float:
    """
    Signed area of a triangle in pixel space.

    Non-negative for every triangle that went through normalize_winding().
    """
    return -winding_value(triangle.a, triangle.b, triangle.c) / 2.0


def normalize_winding(triangle: Triangle) -> None:
    """
    Swap a and b in place if the triangle has the wrong orientation.

    Not idempotent: call it exactly once per triangle.
    """
    if vectors_clockwise(triangle.a, triangle.b, triangle.c):
        triangle.a, triangle.b = triangle.b, triangle.a


def normalize_triangles(triangles: List[Triangle]) -> List[Triangle]:
    """Normalize every triangle in place and return the same list."""
    for triangle in triangles:
        normalize_winding(triangle)
    return triangles
