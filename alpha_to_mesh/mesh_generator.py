"""
Mesh generation module for turning triangles into vertex attributes.

This is where the pixel-space triangles become a renderable mesh! Every
triangle contributes three vertices, each with a position, a normal and a
texture coordinate. Vertices are never shared between triangles: every
three consecutive vertices form one triangle, which is all a renderer's
non-indexed draw call needs.

The whole pipeline lives here too:

    PixelBuffer → scan rows → regions → triangles → winding → attributes
"""

import logging
from typing import List, NamedTuple, Optional

import numpy as np

from .config import GeometryConfig
from .constants import HORIZONTAL, VERTICAL, MESH_NORMAL
from .image_processor import PixelBuffer, rotate_pixel_buffer
from .region_builder import Region, build_regions, find_transition_range
from .scanline_analyzer import scan_image
from .triangle_generator import Triangle, generate_triangles
from .winding import normalize_triangles

logger = logging.getLogger(__name__)


class MeshAttributes:
    """
    Flat vertex attribute arrays of a triangle-soup mesh.

    - positions: 3 floats per vertex
    - normals: 3 floats per vertex
    - uvs: 2 floats per vertex

    All three arrays always describe the same number of vertices, and that
    number is a multiple of 3.
    """

    def __init__(self, positions: np.ndarray, normals: np.ndarray, uvs: np.ndarray):
        """
        Initialize mesh attributes.

        Args:
            positions: Flat float array, length 3 * vertex_count
            normals: Flat float array, length 3 * vertex_count
            uvs: Flat float array, length 2 * vertex_count

        Raises:
            ValueError: If the arrays disagree on the vertex count
        """
        positions = np.asarray(positions, dtype=np.float32).reshape(-1)
        normals = np.asarray(normals, dtype=np.float32).reshape(-1)
        uvs = np.asarray(uvs, dtype=np.float32).reshape(-1)

        if len(positions) % 9 != 0:
            raise ValueError(f"positions must hold whole triangles, got {len(positions)} floats")

        vertex_count = len(positions) // 3
        if len(normals) != vertex_count * 3 or len(uvs) != vertex_count * 2:
            raise ValueError(
                f"Attribute arrays disagree: {vertex_count} positions, "
                f"{len(normals) // 3} normals, {len(uvs) / 2:g} uvs"
            )

        self.positions = positions
        self.normals = normals
        self.uvs = uvs

    @property
    def vertex_count(self) -> int:
        return len(self.positions) // 3

    @property
    def triangle_count(self) -> int:
        return self.vertex_count // 3

    def vertices(self) -> np.ndarray:
        """Positions as a (vertex_count, 3) array."""
        return self.positions.reshape(-1, 3)

    def __repr__(self) -> str:
        return f"MeshAttributes(vertices={self.vertex_count}, triangles={self.triangle_count})"


class TriangulationResult(NamedTuple):
    """Intermediate products of one triangulation pass."""
    regions: List[Region]
    triangles: List[Triangle]
    min_transitions: int
    max_transitions: int


def build_mesh_attributes(
    triangles: List[Triangle],
    image_width: int,
    image_height: int,
    mode: int = HORIZONTAL
) -> MeshAttributes:
    """
    Map normalized pixel-space triangles to mesh attributes.

    Positions are divided by the image width in both modes, so the mesh is
    1 unit wide and keeps the image's aspect ratio.

    HORIZONTAL:
        position = (x / width, (height - y) / width, 0)
        uv       = (x / width, (height - y) / height)
    VERTICAL (triangles scanned from the rotated buffer):
        position = (y / width, x / width, 0)
        uv       = (y / height, x / width)

    Args:
        triangles: Triangles with normalized winding
        image_width: Natural width of the source image
        image_height: Natural height of the source image
        mode: HORIZONTAL or VERTICAL

    Returns:
        MeshAttributes with 3 vertices per triangle, in triangle order
    """
    coords = np.array(
        [(p.x, p.y) for triangle in triangles for p in triangle.points()],
        dtype=np.float64
    ).reshape(-1, 2)
    xs = coords[:, 0]
    ys = coords[:, 1]
    zeros = np.zeros_like(xs)

    scale = float(image_width)

    if mode == VERTICAL:
        positions = np.column_stack((ys / scale, xs / scale, zeros))
        uvs = np.column_stack((ys / image_height, xs / image_width))
    else:
        flipped = image_height - ys
        positions = np.column_stack((xs / scale, flipped / scale, zeros))
        uvs = np.column_stack((xs / image_width, flipped / image_height))

    normals = np.tile(np.array(MESH_NORMAL, dtype=np.float64), (len(coords), 1))

    return MeshAttributes(positions, normals, uvs)


def triangulate_image(buffer: PixelBuffer, threshold: float, detail: float) -> TriangulationResult:
    """
    Run the triangulation engine on an already-oriented pixel buffer.

    Args:
        buffer: Pixels to scan (not modified)
        threshold: Alpha cut-off for transparency
        detail: Row sampling density

    Returns:
        TriangulationResult with regions and normalized triangles

    Raises:
        EmptySilhouetteError: If the image has no opaque silhouette
    """
    rows = scan_image(buffer, threshold)
    regions = build_regions(rows)
    min_transitions, max_transitions = find_transition_range(regions)

    triangles = generate_triangles(regions, max_transitions, detail, min_transitions)
    normalize_triangles(triangles)

    return TriangulationResult(regions, triangles, min_transitions, max_transitions)


def prepare_buffer(buffer: PixelBuffer, mode: int) -> PixelBuffer:
    """Rotate the buffer for VERTICAL mode, pass it through otherwise."""
    if mode == VERTICAL:
        return rotate_pixel_buffer(buffer)
    return buffer


def generate_mesh(
    buffer: PixelBuffer,
    config: Optional[GeometryConfig] = None
) -> MeshAttributes:
    """
    Generate a flat mesh that follows the buffer's opaque silhouette.

    For VERTICAL mode the buffer is rotated before scanning; the attribute
    mapping still uses the natural (unrotated) width and height.

    Args:
        buffer: Decoded RGBA pixels
        config: GeometryConfig (uses defaults if None)

    Returns:
        MeshAttributes ready for a mesh container

    Raises:
        EmptySilhouetteError: If the image has no opaque silhouette
    """
    if config is None:
        config = GeometryConfig()

    scanned = prepare_buffer(buffer, config.mode)
    result = triangulate_image(scanned, config.threshold, config.detail)

    return build_mesh_attributes(result.triangles, buffer.width, buffer.height, config.mode)
