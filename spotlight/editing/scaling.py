"""
Coordinate scaling between display space and native image resolution,
plus the viewport fit policy used to pick a display size.

The editing buffer is always kept at native resolution. Display sizes
produced here are for rendering only and never change the coordinate
space the mask or the persisted selection use.
"""

import logging
from typing import Tuple

import cv2
import numpy as np

from .models import PixelBuffer, Rectangle, Size

logger = logging.getLogger(__name__)


def scale_factors(displayed_size: Size, native_size: Size) -> Tuple[float, float]:
    """
    Per-axis scale from display space to native space.

    Returns:
        (scale_x, scale_y) where scale = native / displayed
    """
    if displayed_size.width <= 0 or displayed_size.height <= 0:
        raise ValueError(f"Displayed size must be positive, got {displayed_size}")
    return (
        native_size.width / displayed_size.width,
        native_size.height / displayed_size.height
    )


def to_native_space(rect: Rectangle, displayed_size: Size, native_size: Size) -> Rectangle:
    """Map a display-space rectangle onto native image pixels."""
    scale_x, scale_y = scale_factors(displayed_size, native_size)
    return Rectangle(
        x=rect.x * scale_x,
        y=rect.y * scale_y,
        width=rect.width * scale_x,
        height=rect.height * scale_y
    )


def to_display_space(rect: Rectangle, displayed_size: Size, native_size: Size) -> Rectangle:
    """Inverse of ``to_native_space``."""
    scale_x, scale_y = scale_factors(displayed_size, native_size)
    return Rectangle(
        x=rect.x / scale_x,
        y=rect.y / scale_y,
        width=rect.width / scale_x,
        height=rect.height / scale_y
    )


def fit_to_viewport(natural_size: Size, viewport_size: Size, fraction: float = 0.9) -> Size:
    """
    Pick a display size that fits the viewport while preserving aspect ratio.

    Args:
        natural_size: Native image dimensions
        viewport_size: Available width/height
        fraction: Share of the viewport the image may occupy

    Returns:
        Display size, never larger than the natural size
    """
    if natural_size.width <= 0 or natural_size.height <= 0:
        raise ValueError(f"Natural size must be positive, got {natural_size}")

    max_width = viewport_size.width * fraction
    max_height = viewport_size.height * fraction
    scale = min(1.0, max_width / natural_size.width, max_height / natural_size.height)
    scale = max(scale, 0.0)

    return Size(natural_size.width * scale, natural_size.height * scale)


def resize_for_display(buffer: PixelBuffer, display_size: Size) -> PixelBuffer:
    """Produce a downscaled copy for on-screen display only."""
    width = max(1, int(round(display_size.width)))
    height = max(1, int(round(display_size.height)))

    if (width, height) == (buffer.width, buffer.height):
        return buffer.copy()

    resized = cv2.resize(
        np.ascontiguousarray(buffer.data), (width, height),
        interpolation=cv2.INTER_AREA
    )
    logger.debug(f"Resized {buffer.width}x{buffer.height} -> {width}x{height} for display")
    return PixelBuffer(resized)
