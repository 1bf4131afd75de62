"""Tests for the RGBA frame model."""

import dataclasses

import numpy as np
import pytest

from juliascope.stream.frame import Frame, InvalidFrameError


class TestFrame:
    def test_basic_properties(self, gradient):
        frame = Frame(gradient, origin=(3.0, 4.0), timestamp=2.0, frame_id=9)
        assert frame.width == 100
        assert frame.height == 100
        assert frame.size == (100, 100)
        assert frame.extent == (3.0, 4.0, 100, 100)
        assert not frame.is_empty

    def test_pixels_copied_and_read_only(self, gradient):
        frame = Frame(gradient)
        assert not frame.pixels.flags.writeable
        gradient[0, 0] = 7
        assert frame.pixels[0, 0, 3] == 255
        with pytest.raises(ValueError):
            frame.pixels[0, 0, 0] = 1

    def test_read_only_view_is_detached_from_base(self):
        base = np.zeros((4, 4, 4), dtype=np.uint8)
        view = base.view()
        view.flags.writeable = False
        frame = Frame(view)
        base[0, 0, 0] = 99
        assert frame.pixels[0, 0, 0] == 0
        assert not frame.pixels.flags.writeable

    def test_read_only_owned_array_is_shared(self, red_frame):
        assert Frame(red_frame.pixels).pixels is red_frame.pixels

    def test_frozen(self, red_frame):
        with pytest.raises(dataclasses.FrozenInstanceError):
            red_frame.origin = (1.0, 1.0)

    @pytest.mark.parametrize(
        "pixels",
        [
            np.zeros((4, 4, 3), dtype=np.uint8),
            np.zeros((4, 4), dtype=np.uint8),
            np.zeros((4, 4, 4), dtype=np.float32),
            [[0, 0, 0, 0]],
        ],
    )
    def test_invalid_pixels(self, pixels):
        with pytest.raises(InvalidFrameError):
            Frame(pixels)

    def test_invalid_frame_error_is_value_error(self):
        with pytest.raises(ValueError):
            Frame(np.zeros((2, 2, 2), dtype=np.uint8))

    def test_empty(self):
        assert Frame(np.zeros((0, 5, 4), dtype=np.uint8)).is_empty

    def test_from_rgb_adds_opaque_alpha(self):
        rgb = np.full((3, 5, 3), 40, dtype=np.uint8)
        frame = Frame.from_array(rgb, timestamp=1.0, frame_id=2)
        assert frame.pixels.shape == (3, 5, 4)
        assert (frame.pixels[:, :, 3] == 255).all()
        assert (frame.pixels[:, :, :3] == 40).all()
        assert frame.frame_id == 2

    def test_from_grayscale(self):
        gray = np.arange(6, dtype=np.uint8).reshape(2, 3)
        frame = Frame.from_array(gray)
        np.testing.assert_array_equal(frame.pixels[:, :, 0], gray)
        np.testing.assert_array_equal(frame.pixels[:, :, 2], gray)

    def test_from_array_rejects_float(self):
        with pytest.raises(InvalidFrameError):
            Frame.from_array(np.zeros((2, 2, 3)))

    def test_rgb(self, red_frame):
        rgb = red_frame.rgb()
        assert rgb.shape == (100, 100, 3)
        assert rgb.flags.c_contiguous

    def test_with_pixels_keeps_metadata(self, gradient):
        frame = Frame(gradient, origin=(1.0, 2.0), timestamp=5.0, frame_id=3)
        other = frame.with_pixels(np.zeros((10, 10, 4), dtype=np.uint8))
        assert other.origin == (1.0, 2.0)
        assert other.timestamp == 5.0
        assert other.frame_id == 3
        moved = frame.with_pixels(gradient, origin=(8, 9))
        assert moved.origin == (8, 9)

    def test_repr_is_compact(self, red_frame):
        assert repr(red_frame) == "Frame(size=100x100, origin=(0.0, 0.0), frame_id=None)"
