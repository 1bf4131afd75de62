"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from juliascope.stream.frame import Frame


def make_checkerboard(width: int = 200, height: int = 200, square: int = 10) -> np.ndarray:
    """Black/white RGBA checkerboard."""
    ys, xs = np.mgrid[0:height, 0:width]
    white = ((xs // square + ys // square) % 2).astype(bool)
    img = np.zeros((height, width, 4), dtype=np.uint8)
    img[white, :3] = 255
    img[:, :, 3] = 255
    return img


def make_solid(color, width: int = 100, height: int = 100) -> np.ndarray:
    """Solid RGBA image."""
    img = np.empty((height, width, 4), dtype=np.uint8)
    img[:, :] = color
    return img


def make_gradient(width: int = 100, height: int = 100) -> np.ndarray:
    """Red encodes x, green encodes y, so every pixel is distinguishable."""
    ys, xs = np.mgrid[0:height, 0:width]
    img = np.zeros((height, width, 4), dtype=np.uint8)
    img[:, :, 0] = (xs * 255 // max(width - 1, 1)).astype(np.uint8)
    img[:, :, 1] = (ys * 255 // max(height - 1, 1)).astype(np.uint8)
    img[:, :, 3] = 255
    return img


@pytest.fixture
def checkerboard() -> np.ndarray:
    return make_checkerboard()


@pytest.fixture
def checkerboard_frame(checkerboard) -> Frame:
    return Frame(checkerboard)


@pytest.fixture
def red_frame() -> Frame:
    """100x100 opaque solid red frame."""
    return Frame(make_solid((255, 0, 0, 255)))


@pytest.fixture
def gradient() -> np.ndarray:
    return make_gradient()


@pytest.fixture
def solid_image():
    """Factory: solid_image(color, width=100, height=100)."""
    return make_solid


@pytest.fixture
def checkerboard_image():
    """Factory: checkerboard_image(width=200, height=200, square=10)."""
    return make_checkerboard
