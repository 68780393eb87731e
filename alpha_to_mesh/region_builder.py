"""
Region building module.

Consecutive scanned rows that report the same number of transitions share
the same outline topology (same number of opaque runs), so they can be
tessellated together. This module groups those rows into Regions, bridges
single-row seams between neighbouring regions, and reports the range of
transition counts the tessellator has to walk.
"""

import logging
from typing import List, Tuple

from .scanline_analyzer import Point, ScanRow

logger = logging.getLogger(__name__)

# Lowest transition slot walked by the tessellator. Rows without transitions
# never form a region, so the range always starts here.
MIN_TRANSITIONS = 0

# Largest distance between a region's last row and the next region's first
# row that still gets a filler row (adjacent rows, or one skipped row)
MAX_FILL_DISTANCE = 2


class EmptySilhouetteError(ValueError):
    """Raised when an image has no opaque/transparent transitions at all."""


class Region:
    """
    A vertical band of rows that all have the same transition count.

    Row point lists are stored top to bottom. Filler rows added by
    fill_region_gaps() are appended after the scanned rows without moving
    `end`.
    """

    def __init__(self, start: int, points: List[Point], transitions: int):
        """
        Open a region on a single row.

        Args:
            start: Row index of the first row
            points: Transition points of that row
            transitions: Transition count shared by every row in the region
        """
        self.start = start
        self.end = start
        self.point_lists: List[List[Point]] = [points]
        self.transitions = transitions

    def absorb(self, y: int, points: List[Point]) -> None:
        """Extend the region down to row y."""
        self.end = y
        self.point_lists.append(points)

    @property
    def distance(self) -> int:
        return self.end - self.start

    def __repr__(self) -> str:
        return (
            f"Region(rows={self.start}-{self.end}, transitions={self.transitions}, "
            f"point_lists={len(self.point_lists)})"
        )


def group_rows(rows: List[ScanRow]) -> List[Region]:
    """
    Group scanned rows into regions by transition count.

    A row opens a new region whenever its count differs from the previous
    row's count. Rows without transitions never join a region, but they do
    reset the running count, so the rows after them always start fresh.

    Args:
        rows: Scanned rows in top-to-bottom order

    Returns:
        Regions in top-to-bottom order (may be empty)
    """
    regions: List[Region] = []
    last_transitions = 0

    for row in rows:
        transitions = row.transitions

        if transitions != last_transitions:
            if transitions != 0:
                regions.append(Region(row.y, list(row.points), transitions))
            last_transitions = transitions
        elif regions and transitions != 0:
            regions[-1].absorb(row.y, list(row.points))

    return regions


def fill_region_gaps(regions: List[Region]) -> int:
    """
    Bridge the seam between each region and the one below it.

    When the next region starts right after this one (or after a single
    skipped row), this region's last row is copied one row down and
    appended, so its triangle strip reaches the neighbour.

    Args:
        regions: Regions in top-to-bottom order (modified in place)

    Returns:
        Number of filler rows added
    """
    filled = 0

    for region, following in zip(regions, regions[1:]):
        if following.start - region.end > MAX_FILL_DISTANCE:
            continue

        boundary = region.point_lists[-1]
        region.point_lists.append([Point(p.x, p.y + 1) for p in boundary])
        filled += 1

    return filled


def find_transition_range(regions: List[Region]) -> Tuple[int, int]:
    """
    Get the (min, max) transition counts across all regions.

    The minimum is always MIN_TRANSITIONS.

    Raises:
        EmptySilhouetteError: If there are no regions
    """
    if not regions:
        raise EmptySilhouetteError("No regions to measure: the image has no opaque silhouette")

    max_transitions = regions[0].transitions
    for region in regions:
        if region.transitions > max_transitions:
            max_transitions = region.transitions

    return MIN_TRANSITIONS, max_transitions


def build_regions(rows: List[ScanRow]) -> List[Region]:
    """
    Turn scanned rows into gap-filled regions.

    Args:
        rows: Output of scan_image()

    Returns:
        Non-empty list of regions in top-to-bottom order

    Raises:
        EmptySilhouetteError: If no row has any transitions (fully
            transparent image, or a threshold that classifies every
            pixel as transparent)
    """
    regions = group_rows(rows)

    if not regions:
        raise EmptySilhouetteError(
            "Image has no opaque silhouette: no pixel crosses the alpha threshold"
        )

    filled = fill_region_gaps(regions)
    logger.debug(f"Built {len(regions)} regions ({filled} filler rows)")

    return regions
