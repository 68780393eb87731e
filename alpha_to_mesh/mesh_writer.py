"""
Mesh file writers.

The triangulation engine only produces flat attribute arrays. These
writers hand them to the outside world in formats a renderer can load
directly:

- Wavefront OBJ: v/vt/vn records plus one face per vertex triple
- BufferGeometry JSON: position/normal/uv attributes as loaded by three.js
"""

import logging
from pathlib import Path
from typing import Any, Dict

from .constants import COORDINATE_PRECISION, __version__
from .json_utils import dumps_compact_arrays, rounded
from .mesh_generator import MeshAttributes

logger = logging.getLogger(__name__)


def _fmt(value: float, precision: int) -> str:
    # Avoid "-0.0" noise in text output
    text = f"{round(float(value), precision):.{precision}f}".rstrip('0').rstrip('.')
    return "0" if text in ("-0", "") else text


def write_obj(mesh: MeshAttributes, output_path: str, precision: int = COORDINATE_PRECISION) -> None:
    """
    Write mesh attributes as a Wavefront OBJ file.

    Vertices are not shared: face i references vertex, uv and normal
    3i+1, 3i+2, 3i+3 (OBJ indices are 1-based).

    Args:
        mesh: Attributes to write
        output_path: Destination .obj path
        precision: Decimal places for coordinates
    """
    vertices = mesh.positions.reshape(-1, 3)
    normals = mesh.normals.reshape(-1, 3)
    uvs = mesh.uvs.reshape(-1, 2)

    lines = [
        f"# alpha_to_mesh {__version__}",
        f"# {mesh.vertex_count} vertices, {mesh.triangle_count} triangles",
    ]
    lines.extend("v " + " ".join(_fmt(c, precision) for c in v) for v in vertices)
    lines.extend("vt " + " ".join(_fmt(c, precision) for c in uv) for uv in uvs)
    lines.extend("vn " + " ".join(_fmt(c, precision) for c in n) for n in normals)

    for face in range(mesh.triangle_count):
        refs = (3 * face + corner + 1 for corner in range(3))
        lines.append("f " + " ".join(f"{i}/{i}/{i}" for i in refs))

    Path(output_path).write_text("\n".join(lines) + "\n", encoding="utf-8")
    logger.debug(f"Wrote OBJ {output_path}: {mesh.triangle_count} triangles")


def mesh_to_buffer_geometry(mesh: MeshAttributes, precision: int = COORDINATE_PRECISION) -> Dict[str, Any]:
    """
    Build a three.js BufferGeometry JSON document for the mesh.
    """
    def attribute(values, item_size: int) -> Dict[str, Any]:
        return {
            "itemSize": item_size,
            "type": "Float32Array",
            "array": rounded(values, precision),
            "normalized": False,
        }

    return {
        "metadata": {
            "version": 4.5,
            "type": "BufferGeometry",
            "generator": f"alpha_to_mesh {__version__}",
        },
        "type": "BufferGeometry",
        "data": {
            "attributes": {
                "position": attribute(mesh.positions, 3),
                "normal": attribute(mesh.normals, 3),
                "uv": attribute(mesh.uvs, 2),
            }
        },
    }


def write_json(mesh: MeshAttributes, output_path: str, precision: int = COORDINATE_PRECISION) -> None:
    """
    Write mesh attributes as BufferGeometry JSON.

    Args:
        mesh: Attributes to write
        output_path: Destination .json path
        precision: Decimal places for coordinates
    """
    document = mesh_to_buffer_geometry(mesh, precision)
    json_str = dumps_compact_arrays(document, indent=2, array_fields=["array"])
    Path(output_path).write_text(json_str + "\n", encoding="utf-8")
    logger.debug(f"Wrote JSON {output_path}: {mesh.vertex_count} vertices")


WRITERS = {
    "obj": write_obj,
    "json": write_json,
}


def write_mesh(mesh: MeshAttributes, output_path: str, output_format: str) -> None:
    """
    Write the mesh in the requested format.

    Raises:
        ValueError: If the format is unknown
    """
    if output_format not in WRITERS:
        raise ValueError(f"Unknown output format '{output_format}', expected one of {sorted(WRITERS)}")
    WRITERS[output_format](mesh, output_path)
