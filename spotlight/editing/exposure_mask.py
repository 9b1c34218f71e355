"""
Exposure mask filter.

Dims every pixel outside a selection rectangle by a constant factor,
leaving the selection (boundary included) and the alpha channel untouched.
"""

import logging
from typing import Optional

import numpy as np

from .models import PixelBuffer, Rectangle, Size
from . import selector

logger = logging.getLogger(__name__)


def outside_mask(shape, rectangle: Optional[Rectangle]) -> np.ndarray:
    """
    Boolean mask of pixels lying strictly outside the rectangle.

    A pixel (x, y) is outside when ``x < startX or x > endX or y < startY
    or y > endY``; pixels on the edges count as inside.

    Args:
        shape: (height, width) of the target buffer
        rectangle: Selection in buffer coordinates, any orientation

    Returns:
        Boolean array of shape (height, width)
    """
    height, width = shape[:2]
    clipped = selector.clip(rectangle, Size(width, height)) if rectangle is not None else None

    if clipped is None:
        # No overlap with the buffer: every pixel is outside
        return np.ones((height, width), dtype=bool)

    y, x = np.ogrid[:height, :width]
    return (
        (x < clipped.x) | (x > clipped.right) |
        (y < clipped.y) | (y > clipped.bottom)
    )


def apply(buffer: PixelBuffer, rectangle: Optional[Rectangle], factor: float,
          in_place: bool = False) -> PixelBuffer:
    """
    Apply the exposure mask.

    Args:
        buffer: Source RGBA buffer
        rectangle: Selection to keep at full brightness; None makes this a no-op
        factor: Multiplier for R, G and B outside the selection, clamped to [0, 1]
        in_place: Write into ``buffer`` instead of returning a new one

    Returns:
        The masked buffer. Unless ``in_place`` is set it never shares memory
        with ``buffer``.
    """
    if rectangle is None:
        logger.debug("No selection, exposure mask skipped")
        return buffer if in_place else buffer.copy()

    factor = _clamp_factor(factor)
    mask = outside_mask(buffer.data.shape, rectangle)

    # Compute the full result before publishing it
    result = buffer.data.copy()
    rgb = result[..., :3]
    dimmed = np.rint(rgb[mask].astype(np.float64) * factor)
    rgb[mask] = np.clip(dimmed, 0, 255).astype(np.uint8)

    logger.debug(
        f"Exposure mask applied: factor={factor}, dimmed {int(mask.sum())} "
        f"of {buffer.width * buffer.height} pixels"
    )

    if in_place:
        buffer.data = result
        return buffer
    return PixelBuffer(result)


class ExposureMaskFilter:
    """Applies the exposure mask with a fixed factor."""

    def __init__(self, factor: float = 0.8):
        self.factor = _clamp_factor(factor)

    def apply(self, buffer: PixelBuffer, rectangle: Optional[Rectangle],
              in_place: bool = False) -> PixelBuffer:
        return apply(buffer, rectangle, self.factor, in_place=in_place)

    def __repr__(self) -> str:
        return f"ExposureMaskFilter(factor={self.factor})"


def _clamp_factor(factor: float) -> float:
    if not 0.0 <= factor <= 1.0:
        clamped = float(min(1.0, max(0.0, factor)))
        logger.warning(f"Mask factor {factor} out of range [0, 1], using {clamped}")
        return clamped
    return float(factor)
