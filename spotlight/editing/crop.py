"""Crop a buffer to the selection rectangle."""

import math
from typing import Optional

from .models import PixelBuffer, Rectangle
from . import selector


def crop(buffer: PixelBuffer, rectangle: Rectangle) -> Optional[PixelBuffer]:
    """
    Return the pixels inside the selection, edges included.

    Uses the same inclusive boundary as the exposure mask, so the crop is
    exactly the region the mask leaves at full brightness. Returns None
    when the selection does not overlap the buffer.
    """
    clipped = selector.clip(rectangle, buffer.size)
    if clipped is None:
        return None

    x0 = math.ceil(clipped.x)
    y0 = math.ceil(clipped.y)
    x1 = math.floor(clipped.right)
    y1 = math.floor(clipped.bottom)
    if x1 < x0 or y1 < y0:
        return None

    return PixelBuffer(buffer.data[y0:y1 + 1, x0:x1 + 1].copy())
