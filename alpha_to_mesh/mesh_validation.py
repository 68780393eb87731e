"""
Mesh validation module using trimesh for quality checks.

The generated mesh is a flat triangle soup, so the usual printing checks
(watertightness, volume) don't apply. What does matter for a renderer:
- Every triangle faces the same way (consistent winding)
- No zero-area slivers that waste draw time
- Positions stay inside the scaled image bounds
- Normals match the fixed mesh normal
"""

from typing import Any, Dict, List, Optional
import logging

import numpy as np
import trimesh
import trimesh.triangles

from .constants import MESH_NORMAL
from .mesh_generator import MeshAttributes

# Set up logging for this module
logger = logging.getLogger(__name__)

# Faces with less area than this (in mesh units) count as degenerate
DEGENERATE_AREA_EPSILON = 1e-12

# Slack allowed on the bounds check for float32 rounding
BOUNDS_TOLERANCE = 1e-5


class ValidationResult:
    """
    Result of mesh validation containing issues found and statistics.
    """

    def __init__(self):
        """Initialize an empty validation result."""
        self.is_valid = True
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.stats: Dict[str, Any] = {}

    def add_error(self, message: str) -> None:
        """Add a critical error that makes the mesh invalid."""
        self.is_valid = False
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        """Add a non-critical warning about mesh quality."""
        self.warnings.append(message)

    def add_stat(self, key: str, value: Any) -> None:
        """Add a statistic about the mesh."""
        self.stats[key] = value

    def __repr__(self) -> str:
        status = "VALID" if self.is_valid else "INVALID"
        return f"ValidationResult({status}, errors={len(self.errors)}, warnings={len(self.warnings)})"


def to_trimesh(mesh: MeshAttributes) -> trimesh.Trimesh:
    """
    Load mesh attributes into an unprocessed trimesh.

    Vertices aren't merged, so face i uses vertices 3i, 3i+1, 3i+2.
    """
    faces = np.arange(mesh.vertex_count, dtype=np.int64).reshape(-1, 3)
    return trimesh.Trimesh(
        vertices=mesh.vertices().astype(np.float64),
        faces=faces,
        process=False,
        validate=False
    )


def validate_mesh(
    mesh: MeshAttributes,
    image_width: Optional[int] = None,
    image_height: Optional[int] = None,
    mesh_name: str = "mesh"
) -> ValidationResult:
    """
    Check a generated mesh for renderer-facing problems.

    Args:
        mesh: Attributes to check
        image_width: Natural image width (enables the bounds check)
        image_height: Natural image height (enables the bounds check)
        mesh_name: Name for messages

    Returns:
        ValidationResult with detailed findings
    """
    result = ValidationResult()
    result.add_stat("vertices", mesh.vertex_count)
    result.add_stat("faces", mesh.triangle_count)

    if mesh.triangle_count == 0:
        result.add_warning(f"{mesh_name}: mesh has no triangles")
        return result

    tm = to_trimesh(mesh)

    # Degenerate faces
    areas = tm.area_faces
    degenerate = int(np.count_nonzero(areas <= DEGENERATE_AREA_EPSILON))
    result.add_stat("area", float(areas.sum()))
    result.add_stat("degenerate_faces", degenerate)
    if degenerate:
        result.add_warning(f"{mesh_name}: {degenerate} zero-area faces")

    # Winding consistency: a flat mesh must have every face normal point
    # along the same side of the Z axis
    face_normals, _valid = trimesh.triangles.normals(tm.triangles)
    if len(face_normals):
        z = face_normals[:, 2]
        forward = int(np.count_nonzero(z > 0))
        backward = int(np.count_nonzero(z < 0))
        result.add_stat("front_facing", forward)
        result.add_stat("back_facing", backward)
        if forward and backward:
            result.add_error(
                f"{mesh_name}: inconsistent winding ({forward} faces one way, {backward} the other)"
            )

    # Normals
    expected_normal = np.array(MESH_NORMAL, dtype=np.float32)
    if not np.allclose(mesh.normals.reshape(-1, 3), expected_normal):
        result.add_error(f"{mesh_name}: normals differ from {MESH_NORMAL}")

    # Bounds
    bounds = tm.bounds
    result.add_stat("bounds", bounds.tolist())
    if image_width and image_height:
        extent = max(image_width, image_height) / image_width
        if bounds[0].min() < -BOUNDS_TOLERANCE or bounds[1][:2].max() > extent + BOUNDS_TOLERANCE:
            result.add_error(
                f"{mesh_name}: positions {bounds.tolist()} outside [0, {extent:g}]"
            )

    logger.debug(f"Validated {mesh_name}: {result}")
    return result


def get_mesh_report(result: ValidationResult, mesh_name: str = "mesh") -> str:
    """
    Format a validation result as a short multi-line report.
    """
    lines = [f"{mesh_name}: {'VALID' if result.is_valid else 'INVALID'}"]

    for key, value in result.stats.items():
        lines.append(f"  {key}: {value}")
    for error in result.errors:
        lines.append(f"  ERROR: {error}")
    for warning in result.warnings:
        lines.append(f"  WARNING: {warning}")

    return "\n".join(lines)
