"""
Test helper utilities for creating test fixtures and sample data.

This module provides utilities for creating test images, pixel buffers and
scanned rows used across multiple test files.
"""

from PIL import Image
from typing import List, Optional, Sequence, Tuple, Dict
import tempfile
import os
import numpy as np

from alpha_to_mesh.image_processor import PixelBuffer
from alpha_to_mesh.region_builder import Region
from alpha_to_mesh.scanline_analyzer import Point, ScanRow


def make_buffer(alpha_rows: Sequence[Sequence[int]], rgb: Tuple[int, int, int] = (255, 0, 0)) -> PixelBuffer:
    """
    Build an in-memory PixelBuffer from a grid of alpha values.

    Args:
        alpha_rows: One list of alpha values per row, top to bottom
        rgb: Color used for every pixel

    Returns:
        PixelBuffer with width len(alpha_rows[0]) and height len(alpha_rows)
    """
    alpha = np.array(alpha_rows, dtype=np.uint8)
    height, width = alpha.shape
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[:, :, 0], arr[:, :, 1], arr[:, :, 2] = rgb
    arr[:, :, 3] = alpha
    return PixelBuffer(width, height, arr)


def center_square_alpha() -> List[List[int]]:
    """4x4 alpha grid: opaque 2x2 block in the middle, transparent elsewhere."""
    return [
        [0, 0, 0, 0],
        [0, 255, 255, 0],
        [0, 255, 255, 0],
        [0, 0, 0, 0],
    ]


def make_row(y: int, xs: Sequence[int]) -> ScanRow:
    """Build a ScanRow with transition points at the given columns."""
    return ScanRow(y, [Point(x, y) for x in xs])


def create_test_image(
    width: int,
    height: int,
    colors: Dict[Tuple[int, int, int, int], list],
    filepath: Optional[str] = None
) -> str:
    """
    Create a test image with specified colors at specified positions.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        colors: Dictionary mapping RGBA tuples to lists of (x, y) coordinates
        filepath: Optional path to save image (defaults to temp file)

    Returns:
        Path to the created image file
    """
    img = Image.new('RGBA', (width, height), (0, 0, 0, 0))
    pixels = img.load()
    if pixels is None:
        raise RuntimeError("Failed to load image pixels")

    for color, positions in colors.items():
        for x, y in positions:
            if 0 <= x < width and 0 <= y < height:
                pixels[x, y] = color

    if filepath is None:
        fd, filepath = tempfile.mkstemp(suffix='.png')
        os.close(fd)

    img.save(filepath)
    return filepath


def create_center_square_image(filepath: Optional[str] = None) -> str:
    """
    Create a 4x4 image with an opaque 2x2 red square in the center.

    Returns:
        Path to the created image file
    """
    red_positions = [(1, 1), (2, 1), (1, 2), (2, 2)]
    return create_test_image(4, 4, {(255, 0, 0, 255): red_positions}, filepath)


def create_opaque_image(width: int, height: int, filepath: Optional[str] = None) -> str:
    """
    Create a fully opaque image.

    Returns:
        Path to the created image file
    """
    positions = [(x, y) for x in range(width) for y in range(height)]
    return create_test_image(width, height, {(0, 128, 0, 255): positions}, filepath)


def create_transparent_image(filepath: Optional[str] = None) -> str:
    """
    Create a 4x4 image where every pixel is fully transparent.

    Returns:
        Path to the created image file
    """
    return create_test_image(4, 4, {}, filepath)


def cleanup_test_file(filepath: str) -> None:
    """
    Remove a test file if it exists.

    Args:
        filepath: Path to file to remove
    """
    if filepath and os.path.exists(filepath):
        os.remove(filepath)


def make_region(row_count: int, xs: Sequence[int] = (0, 4), start: int = 0) -> Region:
    """
    Build a region of `row_count` rows that all have transitions at `xs`.
    """
    region = Region(start, [Point(x, start) for x in xs], len(xs))
    for y in range(start + 1, start + row_count):
        region.absorb(y, [Point(x, y) for x in xs])
    return region
