"""
Tests for outline rendering and cropping to the selection.
"""

import numpy as np

from spotlight.editing import PixelBuffer, Rectangle
from spotlight.editing.crop import crop
from spotlight.editing.outline import render_outline

RED = (255, 0, 0, 255)
BLACK = (0, 0, 0, 255)


def _gradient(width, height):
    """Buffer whose red channel encodes x and green channel encodes y."""
    data = np.zeros((height, width, 4), dtype=np.uint8)
    data[..., 0] = np.arange(width)[np.newaxis, :]
    data[..., 1] = np.arange(height)[:, np.newaxis]
    data[..., 3] = 255
    return PixelBuffer(data)


class TestRenderOutline:
    """Test drawing the selection outline."""

    def test_outline_drawn_on_copy(self):
        buffer = PixelBuffer.blank(10, 10, BLACK)
        frame = render_outline(buffer, Rectangle(2, 2, 5, 5), color=RED, line_width=1)

        assert frame.pixel(2, 2) == RED
        assert frame.pixel(7, 7) == RED
        assert frame.pixel(2, 4) == RED
        assert frame.pixel(4, 4) == BLACK
        assert frame.pixel(0, 0) == BLACK
        # Source is untouched
        assert buffer.pixel(2, 2) == BLACK

    def test_outline_normalizes_rectangle(self):
        buffer = PixelBuffer.blank(10, 10, BLACK)
        forward = render_outline(buffer, Rectangle(2, 2, 5, 5), color=RED, line_width=1)
        backward = render_outline(buffer, Rectangle(7, 7, -5, -5), color=RED, line_width=1)

        assert forward == backward

    def test_no_rectangle_returns_copy(self):
        buffer = PixelBuffer.blank(4, 4, BLACK)
        frame = render_outline(buffer, None)

        assert frame == buffer
        assert frame is not buffer


class TestCrop:
    """Test cropping to the selection."""

    def test_crop_is_boundary_inclusive(self):
        buffer = _gradient(6, 5)
        region = crop(buffer, Rectangle(1, 1, 2, 2))

        assert (region.width, region.height) == (3, 3)
        assert region.pixel(0, 0)[:2] == (1, 1)
        assert region.pixel(2, 2)[:2] == (3, 3)

    def test_crop_negative_extent(self):
        buffer = _gradient(6, 5)

        assert crop(buffer, Rectangle(3, 3, -2, -2)) == crop(buffer, Rectangle(1, 1, 2, 2))

    def test_crop_clamped_to_buffer(self):
        buffer = _gradient(6, 5)
        region = crop(buffer, Rectangle(4, 3, 20, 20))

        assert (region.width, region.height) == (2, 2)
        assert region.pixel(1, 1)[:2] == (5, 4)

    def test_crop_outside_returns_none(self):
        assert crop(_gradient(6, 5), Rectangle(10, 10, 2, 2)) is None

    def test_crop_does_not_alias(self):
        buffer = _gradient(6, 5)
        region = crop(buffer, Rectangle(0, 0, 1, 1))
        region.data[...] = 0

        assert buffer.pixel(0, 0) == (0, 0, 0, 255)
        assert buffer.pixel(1, 1) == (1, 1, 0, 255)
