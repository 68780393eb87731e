"""
Scanline analysis module.

Walks every row of the pixel buffer left to right and records the columns
where the pixels switch between opaque and transparent. These transition
points are the raw outline of the silhouette: everything downstream
(regions, triangles, mesh) is built from them.

A row that ends on an opaque pixel gets one extra point at its last column
so that the opaque run is always closed.
"""

import logging
from typing import List, NamedTuple, Sequence, Union

import numpy as np

from .image_processor import PixelBuffer

logger = logging.getLogger(__name__)


class Point(NamedTuple):
    """Integer pixel coordinate of a transition."""
    x: int
    y: int


class ScanRow(NamedTuple):
    """Transition points found on one image row, in column order."""
    y: int
    points: List[Point]

    @property
    def transitions(self) -> int:
        return len(self.points)


def is_transparent(alpha, threshold):
    """
    Classify alpha value(s) against the threshold.

    Works on a single value or elementwise on a numpy array. The threshold
    is used verbatim, even outside 0-255.
    """
    return alpha < threshold


def scan_row(
    alpha_row: Union[Sequence[int], np.ndarray],
    y: int,
    threshold: float
) -> ScanRow:
    """
    Find the transition points of one row.

    The running state starts as "transparent", so a row whose first pixel
    is opaque records a transition at column 0.

    Args:
        alpha_row: Alpha values for the row, left to right
        y: Row index (stored in every point)
        threshold: Alpha cut-off passed to is_transparent

    Returns:
        ScanRow with the row's transition points
    """
    alpha_row = np.asarray(alpha_row, dtype=np.int32)
    if alpha_row.size == 0:
        return ScanRow(y, [])

    transparent = is_transparent(alpha_row, threshold)

    # State before each column is the classification of the column to its left
    previous = np.concatenate(([True], transparent[:-1]))
    changed = transparent != previous

    columns = [int(x) for x in np.nonzero(changed)[0]]

    # Close an opaque run that reaches the right edge
    last = alpha_row.size - 1
    if not changed[last] and not transparent[last]:
        columns.append(last)

    return ScanRow(y, [Point(x, y) for x in columns])


def scan_image(buffer: PixelBuffer, threshold: float) -> List[ScanRow]:
    """
    Scan every row of the buffer from top to bottom.

    Args:
        buffer: Pixels to scan (read only)
        threshold: Alpha cut-off

    Returns:
        One ScanRow per image row, including rows with no transitions
    """
    alpha = buffer.alpha()
    rows = [scan_row(alpha[y], y, threshold) for y in range(buffer.height)]

    logger.debug(
        f"Scanned {buffer.height} rows: "
        f"{sum(1 for row in rows if row.transitions)} rows with transitions"
    )
    return rows
