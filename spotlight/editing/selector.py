"""
Selection rectangle helpers.

Pure functions that turn a sequence of pointer positions into a rectangle
and bring it into a form usable as a mask boundary.
"""

from typing import Optional

from .models import Point, Rectangle, Size


def begin(point: Point) -> Rectangle:
    """Start a selection at ``point`` with zero extent."""
    return Rectangle(x=point.x, y=point.y, width=0.0, height=0.0)


def update(rectangle: Rectangle, point: Point) -> Rectangle:
    """
    Stretch the selection to ``point``.

    The origin stays fixed; width and height become ``point - origin`` and
    may be negative when dragging up or left.
    """
    return Rectangle(
        x=rectangle.x,
        y=rectangle.y,
        width=point.x - rectangle.x,
        height=point.y - rectangle.y
    )


def normalize(rectangle: Rectangle) -> Rectangle:
    """Return the rectangle with its min corner as origin and non-negative extent."""
    return Rectangle(
        x=min(rectangle.x, rectangle.right),
        y=min(rectangle.y, rectangle.bottom),
        width=abs(rectangle.width),
        height=abs(rectangle.height)
    )


def clip(rectangle: Rectangle, size: Size) -> Optional[Rectangle]:
    """
    Normalize and clamp a rectangle to ``[0, width-1] x [0, height-1]``.

    Args:
        rectangle: Possibly un-normalized selection
        size: Dimensions of the buffer the selection refers to

    Returns:
        Clamped rectangle, or None if it does not overlap the buffer at all
    """
    rect = normalize(rectangle)
    max_x = size.width - 1
    max_y = size.height - 1

    if max_x < 0 or max_y < 0:
        return None
    if rect.right < 0 or rect.bottom < 0 or rect.x > max_x or rect.y > max_y:
        return None

    x0 = max(0.0, rect.x)
    y0 = max(0.0, rect.y)
    x1 = min(float(max_x), rect.right)
    y1 = min(float(max_y), rect.bottom)
    return Rectangle(x=x0, y=y0, width=x1 - x0, height=y1 - y0)
