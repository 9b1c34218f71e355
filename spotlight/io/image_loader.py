"""
Image loading.

Decodes image files or raw encoded bytes into native-resolution RGBA
buffers. Nothing else in the package knows how decoding happens.
"""

import io
import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..editing.models import PixelBuffer

logger = logging.getLogger(__name__)


class ImageLoadError(ValueError):
    """Raised when image data cannot be decoded."""
    pass


def load_image(source: Union[str, Path, bytes]) -> PixelBuffer:
    """
    Decode an image into an RGBA buffer at its native resolution.

    Args:
        source: File path or encoded image bytes

    Returns:
        PixelBuffer with the decoded pixels
    """
    if isinstance(source, (bytes, bytearray)):
        return _decode(io.BytesIO(source), "<bytes>")

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")
    with open(path, 'rb') as f:
        return _decode(f, str(path))


def _decode(stream, label: str) -> PixelBuffer:
    try:
        with Image.open(stream) as img:
            img.load()
            rgba = img.convert('RGBA')
    except (UnidentifiedImageError, OSError) as e:
        raise ImageLoadError(f"Cannot decode image {label}: {e}") from e

    buffer = PixelBuffer(np.array(rgba, dtype=np.uint8))
    logger.debug(f"Loaded {label}: {buffer.width}x{buffer.height}")
    return buffer
