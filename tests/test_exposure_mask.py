"""
Tests for the exposure mask filter.
"""

import numpy as np
import pytest

from spotlight.editing import ExposureMaskFilter, PixelBuffer, Rectangle
from spotlight.editing import exposure_mask, selector
from spotlight.io import load_image
from spotlight.io.encoder import encode_png


def _uniform(width, height, color=(200, 200, 200, 255)):
    return PixelBuffer.blank(width, height, color)


@pytest.fixture
def noisy_buffer():
    """Random RGBA buffer with varying alpha."""
    rng = np.random.default_rng(1234)
    return PixelBuffer(rng.integers(0, 256, size=(24, 32, 4), dtype=np.uint8))


def _inside(shape, rect):
    """Reference inclusive-boundary membership computed pixel by pixel."""
    rect = selector.normalize(rect)
    height, width = shape[:2]
    inside = np.zeros((height, width), dtype=bool)
    for y in range(height):
        for x in range(width):
            inside[y, x] = not (x < rect.x or x > rect.right or
                                y < rect.y or y > rect.bottom)
    return inside


class TestExposureMaskProperties:
    """Properties that hold for any buffer and rectangle."""

    @pytest.mark.parametrize("rect", [
        Rectangle(0, 0, 0, 0),
        Rectangle(3, 4, 10, 8),
        Rectangle(20, 15, -12, -9),
        Rectangle(100, 100, 5, 5),
        None,
    ])
    def test_factor_one_is_identity(self, noisy_buffer, rect):
        result = exposure_mask.apply(noisy_buffer, rect, 1.0)

        assert result == noisy_buffer

    @pytest.mark.parametrize("factor", [0.0, 0.3, 0.5, 0.8])
    def test_outside_pixels_scaled_alpha_kept(self, noisy_buffer, factor):
        rect = Rectangle(5, 6, 11, 7)
        result = exposure_mask.apply(noisy_buffer, rect, factor)

        outside = ~_inside(noisy_buffer.data.shape, rect)
        original = noisy_buffer.data[outside].astype(np.float64)
        expected_rgb = np.rint(original[:, :3] * factor)

        np.testing.assert_array_equal(result.data[outside][:, :3], expected_rgb)
        np.testing.assert_array_equal(result.data[outside][:, 3], noisy_buffer.data[outside][:, 3])

    def test_inside_and_boundary_unchanged(self, noisy_buffer):
        rect = Rectangle(20, 15, -12, -9)
        result = exposure_mask.apply(noisy_buffer, rect, 0.3)

        inside = _inside(noisy_buffer.data.shape, rect)
        np.testing.assert_array_equal(result.data[inside], noisy_buffer.data[inside])
        # Edges are part of the selection
        assert result.pixel(8, 6) == noisy_buffer.pixel(8, 6)
        assert result.pixel(20, 15) == noisy_buffer.pixel(20, 15)

    def test_negative_extent_matches_normalized(self, noisy_buffer):
        raw = Rectangle(20, 15, -12, -9)
        from_raw = exposure_mask.apply(noisy_buffer, raw, 0.5)
        from_normalized = exposure_mask.apply(noisy_buffer, selector.normalize(raw), 0.5)

        assert from_raw == from_normalized

    def test_deterministic(self, noisy_buffer):
        rect = Rectangle(2, 2, 9, 9)

        assert exposure_mask.apply(noisy_buffer, rect, 0.8) == \
            exposure_mask.apply(noisy_buffer, rect, 0.8)


class TestExposureMaskScenarios:
    """Concrete scenarios with known results."""

    def test_four_by_four_inclusive_boundary(self):
        """
        Rectangle (1,1,2,2) keeps columns/rows 1..3; only row 0 and
        column 0 lie outside.
        """
        buffer = _uniform(4, 4)
        result = exposure_mask.apply(buffer, Rectangle(1, 1, 2, 2), 0.5)

        for y in range(4):
            for x in range(4):
                if x == 0 or y == 0:
                    assert result.pixel(x, y) == (100, 100, 100, 255)
                else:
                    assert result.pixel(x, y) == (200, 200, 200, 255)

        # Corners: three dimmed, the bottom-right sits on the boundary
        assert result.pixel(0, 0) == (100, 100, 100, 255)
        assert result.pixel(3, 0) == (100, 100, 100, 255)
        assert result.pixel(0, 3) == (100, 100, 100, 255)
        assert result.pixel(3, 3) == (200, 200, 200, 255)

    def test_zero_area_keeps_only_origin(self):
        buffer = _uniform(5, 4)
        result = exposure_mask.apply(buffer, Rectangle(2, 1, 0, 0), 0.5)

        dimmed = np.all(result.data[..., :3] == 100, axis=-1)
        assert dimmed.sum() == 5 * 4 - 1
        assert result.pixel(2, 1) == (200, 200, 200, 255)

    def test_rectangle_outside_buffer_dims_everything(self):
        buffer = _uniform(4, 4)
        result = exposure_mask.apply(buffer, Rectangle(10, 10, 3, 3), 0.5)

        assert np.all(result.data[..., :3] == 100)
        assert np.all(result.data[..., 3] == 255)

    def test_partially_outside_rectangle_is_clamped(self):
        buffer = _uniform(4, 4)
        result = exposure_mask.apply(buffer, Rectangle(-10, -10, 11, 100), 0.5)

        # Columns 0..1 selected on every row
        assert np.all(result.data[:, :2, :3] == 200)
        assert np.all(result.data[:, 2:, :3] == 100)

    def test_fractional_coordinates(self):
        buffer = _uniform(4, 1)
        result = exposure_mask.apply(buffer, Rectangle(0.5, 0, 1.8, 0), 0.5)

        assert [result.pixel(x, 0)[0] for x in range(4)] == [100, 200, 200, 100]


class TestExposureMaskBehaviour:
    """Aliasing, no-op and factor handling."""

    def test_no_selection_is_noop(self, noisy_buffer):
        result = exposure_mask.apply(noisy_buffer, None, 0.3)

        assert result == noisy_buffer
        assert result is not noisy_buffer
        assert not np.shares_memory(result.data, noisy_buffer.data)

    def test_input_not_mutated(self, noisy_buffer):
        before = noisy_buffer.copy()
        result = exposure_mask.apply(noisy_buffer, Rectangle(1, 1, 3, 3), 0.3)

        assert noisy_buffer == before
        assert not np.shares_memory(result.data, noisy_buffer.data)

    def test_in_place(self):
        buffer = _uniform(4, 4)
        result = exposure_mask.apply(buffer, Rectangle(1, 1, 2, 2), 0.5, in_place=True)

        assert result is buffer
        assert buffer.pixel(0, 0) == (100, 100, 100, 255)

    def test_factor_above_one_is_clamped(self, noisy_buffer):
        result = exposure_mask.apply(noisy_buffer, Rectangle(1, 1, 3, 3), 1.7)

        assert result == noisy_buffer

    def test_negative_factor_is_clamped(self):
        result = exposure_mask.apply(_uniform(3, 3), Rectangle(1, 1, 0, 0), -0.5)

        assert result.pixel(0, 0) == (0, 0, 0, 255)
        assert result.pixel(1, 1) == (200, 200, 200, 255)

    def test_filter_class(self):
        mask_filter = ExposureMaskFilter(0.5)
        result = mask_filter.apply(_uniform(4, 4), Rectangle(1, 1, 2, 2))

        assert mask_filter.factor == 0.5
        assert result.pixel(0, 0) == (100, 100, 100, 255)

    def test_png_round_trip_is_exact(self, noisy_buffer):
        masked = exposure_mask.apply(noisy_buffer, Rectangle(4, 4, 10, 10), 0.3)
        decoded = load_image(encode_png(masked))

        assert decoded == masked
