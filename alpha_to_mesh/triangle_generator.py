"""
Triangle strip generation module.

For every pair of transition slots (the left and right edge of one opaque
run) and every region, a subset of the region's rows is sampled and their
edge points are pushed through a 3-point sliding window. Each time the
window is full it yields a triangle, so consecutive rows zig-zag into a
connected strip that covers the opaque run.

The `detail` parameter controls how many rows are sampled: lower values
skip more rows and produce fewer, coarser triangles. The first and last
row of a region are always used so its boundary is never lost.
"""

import logging
import math
from collections import deque
from typing import Deque, List

from .constants import MIN_STEP, TRIANGLE_WINDOW
from .region_builder import Region
from .scanline_analyzer import Point

logger = logging.getLogger(__name__)


class Triangle:
    """
    Three 2D points. Mutable so the winding can be fixed in place.
    """

    def __init__(self, a: Point, b: Point, c: Point):
        self.a = a
        self.b = b
        self.c = c

    def points(self) -> List[Point]:
        return [self.a, self.b, self.c]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Triangle):
            return NotImplemented
        return self.points() == other.points()

    def __repr__(self) -> str:
        return f"Triangle({tuple(self.a)}, {tuple(self.b)}, {tuple(self.c)})"


def compute_step(region: Region, detail: float) -> int:
    """
    Work out how many rows to advance between samples in a region.

    step = floor((rows - 3) / (distance * detail)), never below MIN_STEP.
    A zero or negative divisor (single-row region, detail <= 0) falls back
    to MIN_STEP instead of dividing.

    Args:
        region: Region to sample
        detail: Density in (0, 1]; smaller means a bigger step

    Returns:
        Row stride, at least MIN_STEP
    """
    divisor = region.distance * detail
    if divisor <= 0:
        return MIN_STEP

    step = math.floor((len(region.point_lists) - 3) / divisor)
    return max(step, MIN_STEP)


def sample_row_indices(row_count: int, step: int) -> List[int]:
    """
    Pick which row point lists of a region get processed.

    Always the first, then every `step`-th row strictly between first and
    last, then always the last. A single-row region yields [0, 0]: that row
    is processed twice, as both first and last.
    """
    return [0] + list(range(1, row_count - 1, step)) + [row_count - 1]


def _process_line(
    line: List[Point],
    slot: int,
    window: Deque[Point],
    triangles: List['Triangle']
) -> None:
    """Feed the points of one transition slot pair into the window."""
    for m in range(slot, min(slot + 2, len(line))):
        window.append(line[m])

        if len(window) == TRIANGLE_WINDOW:
            triangles.append(Triangle(window[0], window[1], window[2]))


def generate_region_strip(region: Region, slot: int, detail: float) -> List[Triangle]:
    """
    Build the triangle strip of one region for one transition slot pair.

    Args:
        region: Region to tessellate
        slot: Index of the left edge in each row (the right edge is slot + 1)
        detail: Row sampling density

    Returns:
        Triangles in emission order (winding not yet normalized)
    """
    triangles: List[Triangle] = []

    # Oldest point drops out automatically once three are held
    window: Deque[Point] = deque(maxlen=TRIANGLE_WINDOW)

    step = compute_step(region, detail)
    logger.debug(f"Region rows {region.start}-{region.end}, slot {slot}: step {step}")

    for index in sample_row_indices(len(region.point_lists), step):
        _process_line(region.point_lists[index], slot, window, triangles)

    return triangles


def generate_triangles(
    regions: List[Region],
    max_transitions: int,
    detail: float,
    min_transitions: int = 0
) -> List[Triangle]:
    """
    Tessellate every region for every transition slot pair.

    Slots are walked in steps of two (left edge, right edge of one opaque
    run). The outer loop is the slot, so all regions' strips for the first
    opaque run come before any strip for the second.

    Args:
        regions: Gap-filled regions in top-to-bottom order
        max_transitions: Highest transition count over all regions
        detail: Row sampling density
        min_transitions: First slot to walk

    Returns:
        Raw triangles in emission order
    """
    if detail <= 0:
        logger.warning(f"detail={detail} is not positive, sampling every row")

    triangles: List[Triangle] = []

    for slot in range(min_transitions, max_transitions, 2):
        for region in regions:
            triangles.extend(generate_region_strip(region, slot, detail))

    logger.debug(f"Generated {len(triangles)} triangles from {len(regions)} regions")
    return triangles
