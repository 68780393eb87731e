"""
Configuration constants for alpha-image to mesh conversion.

All the magic numbers live here! Want to change your defaults?
Just edit these values and every generated mesh will use the new settings.
"""

__version__ = "1.0.0"

# ============================================================================
# Classification
# ============================================================================

# Alpha value below which a pixel counts as transparent (0-255)
# Values outside 0-255 are accepted as-is: <= 0 makes everything opaque,
# > 255 makes everything transparent
DEFAULT_THRESHOLD = 40

# ============================================================================
# Tessellation
# ============================================================================

# Density of the generated geometry, between 0 and 1
# Bigger value means more sampled rows per region, so more triangles
DEFAULT_DETAIL = 0.06

# Smallest row stride used when sampling a region's rows
MIN_STEP = 1

# Number of points in the sliding window that forms a triangle
TRIANGLE_WINDOW = 3

# ============================================================================
# Orientation
# ============================================================================

# Image rows run along the mesh X axis (Y is flipped so row 0 ends up on top)
HORIZONTAL = 0

# Image rows run along the mesh Y axis (buffer is rotated 90° before scanning)
VERTICAL = 1

MODE_NAMES = {
    HORIZONTAL: "horizontal",
    VERTICAL: "vertical",
}

# The mesh is flat, every vertex shares this normal
MESH_NORMAL = (0.0, -1.0, 0.0)

# ============================================================================
# Output
# ============================================================================

# Supported image file extensions for batch processing
SUPPORTED_IMAGE_EXTENSIONS = {'.png', '.gif', '.bmp', '.webp', '.tga', '.tif', '.tiff'}

# Supported mesh output formats
OUTPUT_FORMATS = {"obj", "json"}
DEFAULT_OUTPUT_FORMAT = "obj"

# If no output file is specified, we'll use: {input_name}_mesh.{format}
DEFAULT_OUTPUT_SUFFIX = "_mesh"

# Suffix for the diagnostic overlay image written next to the mesh
DEBUG_RENDER_SUFFIX = "_debug.png"

# Decimal places written for coordinates in text output formats
COORDINATE_PRECISION = 6

# ============================================================================
# Debug overlay colors (matplotlib color strings)
# ============================================================================

REGION_START_LINE_COLOR = "#0000FF"
REGION_START_POINT_COLOR = "#FF0000"
REGION_END_LINE_COLOR = "#00FF00"
REGION_END_POINT_COLOR = "#FFFF00"
TRIANGLE_WIREFRAME_COLOR = "#00FF00"
DEBUG_POINT_RADIUS = 3
