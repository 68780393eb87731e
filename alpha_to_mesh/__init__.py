"""
Alpha Image to Mesh Package

Turn an image with transparency into a flat, low-polygon triangle mesh that
follows its opaque silhouette, so renderers can draw sprites, foliage and
cutouts without paying for the transparent part of a full quad.
"""

from .constants import __version__, HORIZONTAL, VERTICAL

# Make the CLI main function easily accessible
from .cli import main

# Core conversion functions and configuration
from .alpha_to_mesh import convert_image_to_mesh
from .config import GeometryConfig
from .image_processor import PixelBuffer, load_image, rotate_pixel_buffer
from .mesh_generator import MeshAttributes, generate_mesh, triangulate_image, build_mesh_attributes
from .region_builder import EmptySilhouetteError

__all__ = [
    "__version__",
    "HORIZONTAL",
    "VERTICAL",
    "main",
    "convert_image_to_mesh",
    "GeometryConfig",
    "PixelBuffer",
    "load_image",
    "rotate_pixel_buffer",
    "MeshAttributes",
    "generate_mesh",
    "triangulate_image",
    "build_mesh_attributes",
    "EmptySilhouetteError",
]
