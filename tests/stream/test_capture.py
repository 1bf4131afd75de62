"""Tests for camera capture and the processing worker."""

import threading

import cv2
import numpy as np
import pytest

from juliascope.options import CaptureResolution, PixelFormat
from juliascope.pipeline import FramePipeline
from juliascope.stream.capture import CameraCapture, FrameWorker, bgr_to_frame, frame_to_bgr
from juliascope.stream.frame import Frame


class FakeVideoCapture:
    """Stands in for cv2.VideoCapture."""

    def __init__(self, index, opened=True, image=None):
        self.index = index
        self.opened = opened
        self.image = image
        self.released = False
        self.props = {}

    def isOpened(self):
        return self.opened and not self.released

    def set(self, prop, value):
        self.props[prop] = value
        return True

    def read(self):
        if self.image is None:
            return False, None
        return True, self.image.copy()

    def release(self):
        self.released = True


def _factory(image=None, available=(0,)):
    created = []

    def factory(index):
        cap = FakeVideoCapture(index, opened=index in available, image=image)
        created.append(cap)
        return cap

    factory.created = created
    return factory


def _bgr(height=8, width=8, color=(255, 0, 0)):
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[:, :] = color
    return img


class TestConversion:
    def test_bgr_to_frame_swaps_channels(self):
        frame = bgr_to_frame(_bgr(color=(255, 0, 0)), timestamp=1.0, frame_id=4)
        np.testing.assert_array_equal(frame.pixels[0, 0], [0, 0, 255, 255])
        assert frame.frame_id == 4

    def test_grayscale_input(self):
        frame = bgr_to_frame(np.full((4, 4), 9, dtype=np.uint8), timestamp=0.0, frame_id=1)
        np.testing.assert_array_equal(frame.pixels[0, 0], [9, 9, 9, 255])

    def test_frame_to_bgr(self, red_frame):
        bgr = frame_to_bgr(red_frame)
        assert bgr.shape == (100, 100, 3)
        np.testing.assert_array_equal(bgr[0, 0], [0, 0, 255])


class TestCameraCapture:
    def test_list_cameras(self):
        factory = _factory(available=(0, 2))
        assert CameraCapture.list_cameras(4, capture_factory=factory) == [0, 2]
        assert all(cap.released for cap in factory.created)

    def test_open_failure(self):
        capture = CameraCapture(index=3, capture_factory=_factory())
        with pytest.raises(RuntimeError):
            capture.open()
        assert not capture.is_open

    def test_open_applies_resolution(self):
        factory = _factory(image=_bgr())
        capture = CameraCapture(resolution=CaptureResolution.HD1080, capture_factory=factory)
        capture.open()
        props = factory.created[0].props
        assert props[cv2.CAP_PROP_FRAME_WIDTH] == 1920
        assert props[cv2.CAP_PROP_FRAME_HEIGHT] == 1080
        capture.stop()

    def test_open_sets_pixel_format(self):
        factory = _factory(image=_bgr())
        capture = CameraCapture(pixel_format=PixelFormat.BGRA, capture_factory=factory)
        capture.open()
        assert cv2.CAP_PROP_FOURCC in factory.created[0].props
        capture.stop()

    def test_read_increments_frame_id(self):
        capture = CameraCapture(capture_factory=_factory(image=_bgr()))
        assert capture.read() is None
        capture.open()
        first = capture.read()
        second = capture.read()
        assert (first.frame_id, second.frame_id) == (1, 2)
        assert first.size == (8, 8)
        capture.stop()

    def test_select_switches_device(self):
        factory = _factory(image=_bgr(), available=(0, 1))
        capture = CameraCapture(capture_factory=factory)
        capture.open()
        capture.select(1)
        assert capture.index == 1
        assert factory.created[0].released
        assert capture.is_open
        capture.stop()
        assert factory.created[1].released

    def test_threaded_delivery(self):
        capture = CameraCapture(capture_factory=_factory(image=_bgr()))
        got = threading.Event()
        frames = []

        def on_frame(frame, timestamp):
            frames.append(frame)
            got.set()

        capture.start(on_frame)
        try:
            assert got.wait(5.0)
        finally:
            capture.stop()
        assert isinstance(frames[0], Frame)
        assert not capture.is_open


class TestFrameWorker:
    def test_newer_frame_replaces_pending(self, red_frame, checkerboard_frame):
        worker = FrameWorker(FramePipeline(), on_result=lambda frame: None)
        assert worker.submit(red_frame) is True
        assert worker.submit(checkerboard_frame) is False
        assert worker.dropped == 1

    def test_processes_submitted_frame(self, red_frame):
        results = []
        done = threading.Event()

        def on_result(frame):
            results.append(frame)
            done.set()

        worker = FrameWorker(FramePipeline(), on_result)
        worker.start()
        try:
            worker.submit(red_frame)
            assert done.wait(10.0)
        finally:
            worker.stop()
        assert results[0].size == (100, 100)

    def test_callback_error_does_not_stop_worker(self, red_frame):
        calls = []
        second = threading.Event()

        def on_result(frame):
            calls.append(frame)
            if len(calls) == 1:
                raise RuntimeError("display gone")
            second.set()

        worker = FrameWorker(FramePipeline(), on_result)
        worker.start()
        try:
            worker.submit(red_frame)
            while not calls:
                second.wait(0.01)
            worker.submit(red_frame)
            assert second.wait(10.0)
        finally:
            worker.stop()
        assert len(calls) == 2
        assert worker.delivered == 1

    def test_stop_without_start(self):
        worker = FrameWorker(FramePipeline(), on_result=lambda frame: None)
        worker.stop()
