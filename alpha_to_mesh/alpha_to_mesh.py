"""
Core conversion logic for alpha images to flat meshes.

This module contains the file-level pipeline: load an image, orient it,
triangulate its silhouette, and write the mesh. It's completely separate
from the CLI layer, making it easy to use programmatically or test.

No print statements, no argparse, just clean conversion logic! 🎯
"""

import math
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .config import GeometryConfig
from .image_processor import load_image
from .mesh_generator import build_mesh_attributes, prepare_buffer, triangulate_image
from .mesh_writer import write_mesh


def format_filesize(size_bytes: int) -> str:
    """
    Convert a file size in bytes to a human-readable format.

    Examples:
        >>> format_filesize(0)
        '0B'
        >>> format_filesize(1024)
        '1.0 KB'
        >>> format_filesize(1536)
        '1.5 KB'
    """
    if size_bytes == 0:
        return "0B"
    size_units = ("B", "KB", "MB", "GB", "TB")
    i = min(int(math.floor(math.log(size_bytes, 1024))), len(size_units) - 1)
    s = round(size_bytes / math.pow(1024, i), 2)
    return f"{s} {size_units[i]}"


def convert_image_to_mesh(
    input_path: str,
    output_path: str,
    config: Optional[GeometryConfig] = None,
    progress_callback: Optional[Callable[[str, str], None]] = None
) -> Dict[str, Any]:
    """
    Convert an image with transparency into a flat silhouette mesh file.

    The process:
    1. Load the image and decode it to RGBA
    2. Rotate it 90° if the config asks for VERTICAL mode
    3. Scan rows, build regions, generate and normalize triangles
    4. Map triangles to positions, normals and UVs
    5. Optionally validate the mesh with trimesh
    6. Write OBJ or JSON
    7. Optionally render the debug overlay

    Args:
        input_path: Path to input image file
        output_path: Path where the mesh file should be written
        config: GeometryConfig (uses defaults if None)
        progress_callback: Optional function to call with progress updates
                          Signature: callback(stage: str, message: str)

    Returns:
        Dictionary with conversion statistics:
        {
            'image_width': int,
            'image_height': int,
            'mode': str,
            'num_regions': int,
            'min_transitions': int,
            'max_transitions': int,
            'num_triangles': int,
            'num_vertices': int,
            'output_path': str,
            'file_size': str
        }
        plus 'validation' and 'debug_path' when those steps ran.

    Raises:
        FileNotFoundError: If input image doesn't exist
        IOError: If image can't be loaded or the mesh can't be written
        EmptySilhouetteError: If the image has no opaque silhouette
    """

    def _progress(stage: str, message: str):
        if progress_callback:
            progress_callback(stage, message)

    if config is None:
        config = GeometryConfig()

    input_file = Path(input_path)
    if not input_file.exists():
        raise FileNotFoundError(f"Input image not found: {input_path}")

    # Step 1: Load
    _progress("load", f"Loading image: {input_file.name}")
    buffer = load_image(str(input_path))
    _progress("load", f"Image loaded: {buffer.width}x{buffer.height}px")

    # Step 2: Orient
    scanned = prepare_buffer(buffer, config.mode)
    if scanned is not buffer:
        _progress("load", "Rotated image 90° for vertical mode")

    # Step 3: Triangulate
    _progress("scan", f"Scanning rows (threshold {config.threshold})...")
    result = triangulate_image(scanned, config.threshold, config.detail)
    _progress("scan", f"Found {len(result.regions)} regions, up to {result.max_transitions} transitions per row")
    _progress("triangulate", f"Generated {len(result.triangles)} triangles (detail {config.detail})")

    # Step 4: Attributes
    _progress("mesh", "Building vertex attributes...")
    mesh = build_mesh_attributes(result.triangles, buffer.width, buffer.height, config.mode)
    _progress("mesh", f"{mesh.vertex_count} vertices")

    # Step 5: Validate
    validation = None
    if config.validate_mesh:
        from .mesh_validation import validate_mesh

        _progress("validate", "Validating mesh...")
        validation = validate_mesh(mesh, buffer.width, buffer.height, mesh_name=input_file.stem)
        if validation.is_valid:
            _progress("validate", "✓ Mesh is valid")
        else:
            _progress("validate", f"⚠ {len(validation.errors)} problems found")

    # Step 6: Write
    _progress("export", f"Writing {config.output_format.upper()} file...")
    write_mesh(mesh, output_path, config.output_format)
    _progress("export", "Complete!")

    # Step 7: Debug overlay
    debug_path = None
    if config.debug_render:
        from .debug_render import render_debug_overlay, generate_debug_path

        _progress("debug", "Rendering debug overlay...")
        debug_path = generate_debug_path(output_path)
        render_debug_overlay(scanned, result.regions, result.triangles, debug_path)
        _progress("debug", f"Overlay saved to: {debug_path}")

    stats = {
        'image_width': buffer.width,
        'image_height': buffer.height,
        'mode': config.mode_name,
        'num_regions': len(result.regions),
        'min_transitions': result.min_transitions,
        'max_transitions': result.max_transitions,
        'num_triangles': mesh.triangle_count,
        'num_vertices': mesh.vertex_count,
        'output_path': output_path,
        'file_size': format_filesize(os.path.getsize(output_path)),
    }

    if validation is not None:
        stats['validation'] = validation

    if debug_path:
        stats['debug_path'] = debug_path

    return stats
