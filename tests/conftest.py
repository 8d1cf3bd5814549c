"""
Pytest configuration and shared fixtures for Gear Cutout tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import pytest
from PIL import Image


@pytest.fixture
def write_sprite():
    """
    Provide a helper that saves a gear-like test sprite.

    The sprite is a 100x100 light-gray (240, 240, 240) frame with a red
    rectangle; the rectangle defaults to 20x20 at (40, 40).

    Returns:
        Callable (path, square=(x, y, w, h)) -> path
    """
    def _write(path, square=(40, 40, 20, 20)):
        image = Image.new("RGBA", (100, 100), (240, 240, 240, 255))
        x, y, w, h = square
        image.paste(Image.new("RGBA", (w, h), (255, 0, 0, 255)), (x, y))
        image.save(path)
        return path
    return _write
