"""
app/validation/image_probe.py

Reads pixel dimensions from an image file with Pillow.

Only the image header is parsed (``Image.open`` is lazy), so probing a
large photo does not decode its pixel data.
"""

from __future__ import annotations

from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from app.core.logger import get_logger

logger = get_logger(__name__)


def read_image_dimensions(path: str) -> Optional[Tuple[int, int]]:
    """
    Return ``(width, height)`` of the image at ``path``.

    Returns None when the file cannot be identified as an image, is
    truncated, or trips Pillow's decompression-bomb guard.
    """
    try:
        with Image.open(path) as img:
            width, height = img.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        logger.debug("Could not read image dimensions of '%s': %s", path, exc)
        return None
    return int(width), int(height)
