"""
Tests for mask erosion and alpha masking.
"""

import numpy as np
import pytest

from GC_Libs.CutoutLib.cutout_models import InvalidParameterError
from GC_Libs.CutoutLib.morphology import apply_mask_to_alpha, erode_mask


def square_mask(size=100, x=40, y=40, w=20, h=20):
    mask = np.zeros((size, size), dtype=bool)
    mask[y:y + h, x:x + w] = True
    return mask


class TestErodeMask:
    """Tests for erode_mask."""

    def test_zero_iterations_is_identity(self):
        mask = square_mask()
        result = erode_mask(mask, 0)

        np.testing.assert_array_equal(result, mask)
        assert result is not mask

    def test_strips_one_ring_per_iteration(self):
        result = erode_mask(square_mask(), 2)
        np.testing.assert_array_equal(result, square_mask(x=42, y=42, w=16, h=16))

    def test_is_monotone(self):
        mask = square_mask()
        mask[10:15, 70:90] = True
        previous = mask
        for k in range(1, 5):
            current = erode_mask(mask, k)
            assert not np.any(current & ~previous)
            previous = current

    def test_border_pixels_are_never_eroded(self):
        mask = np.ones((5, 5), dtype=bool)
        mask[1, 1] = False

        result = erode_mask(mask, 1)

        assert result[0, 1]
        assert result[1, 0]
        assert not result[1, 2]
        assert not result[2, 1]
        assert result[0].all()
        assert result[:, 0].all()

    def test_uses_previous_pass_only(self):
        """One pass removes exactly one ring, not a cascade."""
        mask = np.ones((7, 7), dtype=bool)
        mask[3, 0] = False  # border pixel, background

        result = erode_mask(mask, 1)

        assert not result[3, 1]
        assert result[3, 2]

    def test_tiny_image_unchanged(self):
        mask = np.array([[True, False], [True, True]])
        np.testing.assert_array_equal(erode_mask(mask, 3), mask)

    def test_input_not_modified(self):
        mask = square_mask()
        before = mask.copy()
        erode_mask(mask, 3)
        np.testing.assert_array_equal(mask, before)

    def test_negative_iterations_raise(self):
        with pytest.raises(InvalidParameterError):
            erode_mask(square_mask(), -1)

    def test_negative_iterations_is_value_error(self):
        with pytest.raises(ValueError):
            erode_mask(square_mask(), -1)


class TestApplyMaskToAlpha:
    """Tests for apply_mask_to_alpha."""

    def test_rejected_pixels_are_cleared(self):
        alpha = np.full((4, 4), 200, dtype=np.uint8)
        mask = np.zeros((4, 4), dtype=bool)
        mask[1:3, 1:3] = True

        result = apply_mask_to_alpha(alpha, mask)

        assert int(result.sum()) == 4 * 200
        assert np.all(result[1:3, 1:3] == 200)
        assert np.all(alpha == 200)
