"""
Diagnostic overlay rendering.

Draws what the triangulation engine saw on top of the scanned pixels:
- Region start rows (blue line, red markers at the first row's transitions)
- Region end rows (green line, yellow markers at the last row's transitions)
- The triangle wireframe (green)

This is purely for inspection. Nothing here feeds back into the mesh.
"""

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for headless operation

import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
from pathlib import Path
from typing import List

from .constants import (
    DEBUG_RENDER_SUFFIX,
    DEBUG_POINT_RADIUS,
    REGION_START_LINE_COLOR,
    REGION_START_POINT_COLOR,
    REGION_END_LINE_COLOR,
    REGION_END_POINT_COLOR,
    TRIANGLE_WIREFRAME_COLOR,
)
from .image_processor import PixelBuffer
from .region_builder import Region
from .triangle_generator import Triangle


def draw_regions(ax, regions: List[Region], width: int) -> None:
    """Draw start/end lines and transition markers for every region."""
    marker_size = (DEBUG_POINT_RADIUS * 2) ** 2

    for region in regions:
        ax.plot([0, width], [region.start, region.start], color=REGION_START_LINE_COLOR, linewidth=1)
        start_points = region.point_lists[0]
        ax.scatter(
            [p.x for p in start_points],
            [region.start] * len(start_points),
            s=marker_size,
            c=REGION_START_POINT_COLOR,
            zorder=3
        )

        ax.plot([0, width], [region.end, region.end], color=REGION_END_LINE_COLOR, linewidth=1)
        end_points = region.point_lists[-1]
        ax.scatter(
            [p.x for p in end_points],
            [region.end] * len(end_points),
            s=marker_size,
            c=REGION_END_POINT_COLOR,
            zorder=3
        )


def draw_triangles(ax, triangles: List[Triangle]) -> None:
    """Draw every triangle as a closed outline."""
    outlines = [
        [(t.a.x, t.a.y), (t.b.x, t.b.y), (t.c.x, t.c.y), (t.a.x, t.a.y)]
        for t in triangles
    ]
    ax.add_collection(LineCollection(outlines, colors=TRIANGLE_WIREFRAME_COLOR, linewidths=0.5))


def render_debug_overlay(
    buffer: PixelBuffer,
    regions: List[Region],
    triangles: List[Triangle],
    output_path: str
) -> None:
    """
    Render regions and triangles over the scanned pixel buffer to a PNG.

    Args:
        buffer: The buffer that was scanned (already rotated in VERTICAL mode)
        regions: Regions from the triangulation pass
        triangles: Triangles from the triangulation pass
        output_path: Where to save the PNG

    Raises:
        IOError: If the output file cannot be written
    """
    # Scale the figure with the image so small sprites stay legible
    longest = max(buffer.width, buffer.height)
    size_in = max(4.0, min(16.0, longest / 32.0))
    fig = plt.figure(
        figsize=(size_in * buffer.width / longest, size_in * buffer.height / longest),
        dpi=150
    )
    ax = fig.add_axes([0, 0, 1, 1])

    # Pixel (x, y) covers [x, x+1) so draw the image with that extent;
    # transition points then sit on the left edge of their pixel
    ax.imshow(
        buffer.to_array(),
        extent=(0, buffer.width, buffer.height, 0),
        interpolation='nearest'
    )

    draw_regions(ax, regions, buffer.width)
    draw_triangles(ax, triangles)

    ax.set_xlim(0, buffer.width)
    ax.set_ylim(buffer.height, 0)
    ax.axis('off')

    try:
        fig.savefig(output_path, dpi=150)
    finally:
        plt.close(fig)


def generate_debug_path(output_path: str) -> str:
    """
    Derive the overlay image path from a mesh output path.

    Example: "sprite_mesh.obj" → "sprite_mesh_debug.png"
    """
    path = Path(output_path)
    return str(path.with_name(path.stem + DEBUG_RENDER_SUFFIX))
