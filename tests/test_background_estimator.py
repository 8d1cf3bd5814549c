"""
Tests for background color estimation.

Tests cover:
- Corner sampling order
- Per-channel rounding of the corner average
- Distance map values
"""

import math
import unittest

import numpy as np
import pytest
from PIL import Image

from GC_Libs.CutoutLib.background_estimator import (
    color_distance_map,
    corner_pixels,
    estimate_background_color,
)


class TestCornerPixels(unittest.TestCase):
    """Test corner sampling."""

    def test_order_is_tl_tr_bl_br(self):
        pixels = np.zeros((4, 5, 4), dtype=np.uint8)
        pixels[0, 0, :3] = (1, 1, 1)
        pixels[0, 4, :3] = (2, 2, 2)
        pixels[3, 0, :3] = (3, 3, 3)
        pixels[3, 4, :3] = (4, 4, 4)

        self.assertEqual(
            corner_pixels(pixels),
            [(1, 1, 1), (2, 2, 2), (3, 3, 3), (4, 4, 4)],
        )

    def test_single_pixel_image(self):
        pixels = np.array([[[9, 8, 7, 255]]], dtype=np.uint8)
        self.assertEqual(corner_pixels(pixels), [(9, 8, 7)] * 4)


class TestEstimateBackgroundColor(unittest.TestCase):
    """Test reference color estimation."""

    def test_uniform_background(self):
        image = Image.new("RGBA", (30, 20), (240, 240, 240, 255))
        pixels = np.asarray(image)
        self.assertEqual(estimate_background_color(pixels), (240, 240, 240))

    def test_half_rounds_up(self):
        """Channel means ending in .5 round up."""
        pixels = np.zeros((2, 2, 4), dtype=np.uint8)
        pixels[0, 0, :3] = (240, 10, 0)
        pixels[0, 1, :3] = (241, 10, 0)
        pixels[1, 0, :3] = (240, 11, 0)
        pixels[1, 1, :3] = (241, 10, 1)

        # means: 240.5, 10.25, 0.25
        self.assertEqual(estimate_background_color(pixels), (241, 10, 0))

    def test_ignores_interior(self):
        image = Image.new("RGBA", (10, 10), (0, 0, 255, 255))
        image.putpixel((5, 5), (255, 0, 0, 255))
        self.assertEqual(estimate_background_color(np.asarray(image)), (0, 0, 255))

    def test_returns_ints(self):
        pixels = np.full((3, 3, 4), 7, dtype=np.uint8)
        color = estimate_background_color(pixels)
        self.assertTrue(all(isinstance(c, int) for c in color))


class TestColorDistanceMap:
    """Tests for color_distance_map."""

    def test_zero_at_reference(self):
        pixels = np.full((4, 4, 4), 240, dtype=np.uint8)
        distance = color_distance_map(pixels, (240, 240, 240))

        assert distance.shape == (4, 4)
        assert np.all(distance == 0.0)

    def test_euclidean_rgb(self):
        pixels = np.array([[[255, 0, 0, 255]]], dtype=np.uint8)
        distance = color_distance_map(pixels, (240, 240, 240))

        assert distance[0, 0] == pytest.approx(math.sqrt(15 ** 2 + 240 ** 2 + 240 ** 2))

    def test_alpha_ignored(self):
        opaque = np.array([[[10, 20, 30, 255]]], dtype=np.uint8)
        clear = np.array([[[10, 20, 30, 0]]], dtype=np.uint8)

        assert color_distance_map(opaque, (0, 0, 0))[0, 0] == color_distance_map(clear, (0, 0, 0))[0, 0]

    def test_no_uint8_overflow(self):
        pixels = np.array([[[0, 0, 0, 255]]], dtype=np.uint8)
        distance = color_distance_map(pixels, (255, 255, 255))

        assert distance[0, 0] == pytest.approx(math.sqrt(3 * 255 ** 2))
