#!/usr/bin/env python3
"""Tests for relative luminance."""
import numpy as np
import pytest

from night_relief.color_space import LUMINANCE_WEIGHTS, relative_luminance, rgba_to_luminance


def reference_luminance(value: int) -> float:
    """Relative luminance of a neutral grey, computed channel by channel."""
    c = value / 255.0
    linear = c / 12.92 if c <= 0.04045 else ((c + 0.055) / 1.055) ** 2.4
    return min(linear * float(LUMINANCE_WEIGHTS.sum()), 1.0)


class TestRelativeLuminance:
    """Tests for the sRGB luminance formula."""

    def test_black_is_zero(self):
        assert relative_luminance(np.array([0, 0, 0], dtype=np.uint8)) == 0.0

    def test_white_is_exactly_one(self):
        assert relative_luminance(np.array([255, 255, 255], dtype=np.uint8)) == 1.0

    def test_mid_grey_matches_wcag(self):
        """#808080 has relative luminance ~0.2159, not the naive 0.502."""
        value = relative_luminance(np.array([128, 128, 128], dtype=np.uint8))
        assert value == pytest.approx(0.21586, abs=1e-4)
        assert value == pytest.approx(reference_luminance(128))

    def test_green_dominates(self):
        """Green contributes most to perceived brightness, blue least."""
        red = relative_luminance(np.array([255, 0, 0], dtype=np.uint8))
        green = relative_luminance(np.array([0, 255, 0], dtype=np.uint8))
        blue = relative_luminance(np.array([0, 0, 255], dtype=np.uint8))
        assert green > red > blue
        assert red == pytest.approx(0.2126729)
        assert green == pytest.approx(0.7151522)
        assert blue == pytest.approx(0.0721750)

    def test_dark_values_use_linear_segment(self):
        value = relative_luminance(np.array([10, 10, 10], dtype=np.uint8))
        assert value == pytest.approx(reference_luminance(10))
        assert value == pytest.approx(10 / 255 / 12.92, rel=1e-6)

    def test_monotonic_in_grey_level(self):
        greys = np.repeat(np.arange(256, dtype=np.uint8)[:, None], 3, axis=1)
        values = relative_luminance(greys)
        assert np.all(np.diff(values) > 0)
        assert values.min() >= 0.0
        assert values.max() <= 1.0

    def test_keeps_leading_shape(self):
        rgb = np.zeros((4, 5, 3), dtype=np.uint8)
        assert relative_luminance(rgb).shape == (4, 5)


class TestRgbaToLuminance:
    """Tests for RGBA input handling."""

    def test_alpha_is_ignored(self):
        opaque = np.array([[[200, 100, 50, 255]]], dtype=np.uint8)
        transparent = np.array([[[200, 100, 50, 0]]], dtype=np.uint8)
        assert rgba_to_luminance(opaque)[0, 0] == rgba_to_luminance(transparent)[0, 0]

    def test_rejects_rgb_input(self):
        with pytest.raises(ValueError, match="RGBA"):
            rgba_to_luminance(np.zeros((2, 2, 3), dtype=np.uint8))
