"""
Configuration dataclass for alpha-image to mesh conversion.

This module defines the GeometryConfig dataclass that holds all the
parameters for the triangulation process. This keeps function signatures
clean and makes it easy to add new parameters in the future without
breaking the API.
"""

from dataclasses import dataclass
from .constants import (
    DEFAULT_THRESHOLD,
    DEFAULT_DETAIL,
    DEFAULT_OUTPUT_FORMAT,
    HORIZONTAL,
    VERTICAL,
    MODE_NAMES,
    OUTPUT_FORMATS,
)


@dataclass
class GeometryConfig:
    """
    Configuration for alpha-image to mesh conversion.

    Attributes:
        threshold: Alpha value below which a pixel is transparent. Not
            validated: out-of-range values simply classify every pixel
            the same way.
        detail: Row sampling density in (0, 1]. Not validated: values
            <= 0 fall back to sampling every row.
        mode: HORIZONTAL (default) or VERTICAL orientation
        debug_render: If True, write a PNG overlay of regions and triangles
        validate_mesh: If True, run trimesh quality checks on the output
        output_format: Mesh file format - "obj" or "json"
    """

    threshold: float = DEFAULT_THRESHOLD
    detail: float = DEFAULT_DETAIL
    mode: int = HORIZONTAL

    # Output options
    debug_render: bool = False
    validate_mesh: bool = False
    output_format: str = DEFAULT_OUTPUT_FORMAT

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.mode not in (HORIZONTAL, VERTICAL):
            raise ValueError(f"mode must be HORIZONTAL (0) or VERTICAL (1), got {self.mode}")

        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of {sorted(OUTPUT_FORMATS)}, got {self.output_format}")

    @property
    def mode_name(self) -> str:
        """Human-readable orientation name."""
        return MODE_NAMES[self.mode]


def parse_mode(name: str) -> int:
    """
    Convert an orientation name into its mode constant.

    Args:
        name: "horizontal" or "vertical" (case-insensitive)

    Returns:
        HORIZONTAL or VERTICAL

    Raises:
        ValueError: If the name isn't a known orientation
    """
    lookup = {label: mode for mode, label in MODE_NAMES.items()}
    key = name.strip().lower()
    if key not in lookup:
        raise ValueError(f"mode must be one of {sorted(lookup)}, got '{name}'")
    return lookup[key]
