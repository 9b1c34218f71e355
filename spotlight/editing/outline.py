"""
Selection outline rendering.

The outline is redrawn from the pristine image and the latest rectangle on
every pointer update; it never touches the buffer the mask is applied to.
"""

from typing import Optional, Tuple

import cv2
import numpy as np

from .models import PixelBuffer, Rectangle
from . import selector

DEFAULT_COLOR = (255, 0, 0, 255)
DEFAULT_LINE_WIDTH = 2


def render_outline(buffer: PixelBuffer, rectangle: Optional[Rectangle],
                   color: Tuple[int, int, int, int] = DEFAULT_COLOR,
                   line_width: int = DEFAULT_LINE_WIDTH) -> PixelBuffer:
    """
    Stroke the selection rectangle onto a copy of ``buffer``.

    Args:
        buffer: Pristine image to draw over
        rectangle: Current selection, any orientation; None draws nothing
        color: RGBA stroke color
        line_width: Stroke width in pixels

    Returns:
        New buffer with the outline drawn
    """
    frame = np.ascontiguousarray(buffer.data.copy())
    if rectangle is None:
        return PixelBuffer(frame)

    rect = selector.normalize(rectangle)
    top_left = (int(round(rect.x)), int(round(rect.y)))
    bottom_right = (int(round(rect.right)), int(round(rect.bottom)))

    cv2.rectangle(frame, top_left, bottom_right, tuple(int(c) for c in color),
                  thickness=max(1, int(line_width)))
    return PixelBuffer(frame)
