"""
Image processing module for alpha-image to mesh conversion.

This module handles:
- Loading images with transparency support
- Packaging decoded pixels into a read-only RGBA buffer
- Rotating the buffer for vertical-mode generation
- Measuring the opaque bounding box of an image
"""

import logging
from typing import Tuple, Union

import numpy as np
from PIL import Image

from .constants import DEFAULT_THRESHOLD

logger = logging.getLogger(__name__)

BufferSource = Union[bytes, bytearray, memoryview, np.ndarray]


class PixelBuffer:
    """
    Decoded RGBA pixels of one image, row-major, 4 bytes per pixel.

    This is the only thing the triangulation engine ever looks at. The
    buffer is never modified: every transform returns a new PixelBuffer.
    """

    def __init__(self, width: int, height: int, data: BufferSource):
        """
        Initialize a pixel buffer.

        Args:
            width: Image width in pixels
            height: Image height in pixels
            data: width * height * 4 bytes of RGBA data (or a uint8 array
                  of shape (height, width, 4))

        Raises:
            ValueError: If the dimensions are not positive or the data has
                        the wrong length
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Pixel buffer dimensions must be positive, got {width}x{height}")

        if isinstance(data, np.ndarray):
            data = np.ascontiguousarray(data, dtype=np.uint8).tobytes()
        else:
            data = bytes(data)

        expected = width * height * 4
        if len(data) != expected:
            raise ValueError(
                f"Pixel buffer for {width}x{height} image needs {expected} bytes, got {len(data)}"
            )

        self.width = width
        self.height = height
        self.data = data

    def to_array(self) -> np.ndarray:
        """
        View the buffer as a read-only (height, width, 4) uint8 array.
        """
        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, 4)

    def alpha(self) -> np.ndarray:
        """
        Alpha channel as a (height, width) int32 array.

        Widened from uint8 so comparisons against out-of-range thresholds
        stay exact.
        """
        return self.to_array()[:, :, 3].astype(np.int32)

    def to_image(self) -> Image.Image:
        """Convert back to a PIL RGBA image."""
        return Image.frombytes('RGBA', (self.width, self.height), self.data)

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height}px)"


def pixel_buffer_from_image(img: Image.Image) -> PixelBuffer:
    """
    Build a PixelBuffer from an already-opened PIL image.

    Images without an alpha channel (JPG, RGB PNG) are converted to RGBA,
    which makes them fully opaque.
    """
    img = img.convert('RGBA')
    width, height = img.size
    return PixelBuffer(width, height, img.tobytes())


def load_image(image_path: str) -> PixelBuffer:
    """
    Load an image file and decode it into a PixelBuffer.

    Args:
        image_path: Path to the image file (PNG, GIF, WEBP, etc.)

    Returns:
        PixelBuffer with the image's natural width and height

    Raises:
        FileNotFoundError: If image doesn't exist
        IOError: If image can't be decoded
    """
    with Image.open(image_path) as img:
        buffer = pixel_buffer_from_image(img)

    logger.debug(f"Loaded {image_path}: {buffer.width}x{buffer.height}px")
    return buffer


def rotate_pixel_buffer(buffer: PixelBuffer) -> PixelBuffer:
    """
    Rotate the buffer 90° clockwise about its centre.

    The canvas keeps its original width and height, exactly like drawing the
    image into a same-sized canvas after translate/rotate(π/2)/translate.
    For non-square images the corners that rotate out of the canvas are
    clipped and the uncovered area is left fully transparent.

    Args:
        buffer: Source pixels (not modified)

    Returns:
        New PixelBuffer with the same dimensions
    """
    rotated = buffer.to_image().rotate(-90, resample=Image.Resampling.NEAREST, expand=False)
    return PixelBuffer(buffer.width, buffer.height, rotated.tobytes())


def calculate_bounding_box(
    buffer: PixelBuffer,
    threshold: float = DEFAULT_THRESHOLD
) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """
    Find the box enclosing every pixel with alpha strictly above threshold.

    Args:
        buffer: Pixels to measure
        threshold: Alpha cut-off (pixels must be > threshold to count)

    Returns:
        ((min_x, min_y), (max_x, max_y)). When nothing is above the
        threshold the box stays inverted: ((width, height), (0, 0)).
    """
    ys, xs = np.nonzero(buffer.alpha() > threshold)

    if len(xs) == 0:
        return (buffer.width, buffer.height), (0, 0)

    return (int(xs.min()), int(ys.min())), (int(xs.max()), int(ys.max()))
