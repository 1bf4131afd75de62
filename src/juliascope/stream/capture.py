"""
Capture and Processing Threads
==============================

Glue between a camera, the frame pipeline and a display callback.

    CameraCapture  : reader thread, delivers (Frame, timestamp) per capture
    FrameWorker    : processing thread, one frame at a time, latest wins

Design Rules:
    - No queue between capture and processing: the worker holds at most
      one pending frame and a newer frame replaces it (counted as dropped)
    - Frames are processed strictly one after another on the worker thread
    - The control surface never touches these threads; it only writes the
      pipeline's ParameterStore
"""

import logging
import threading
import time
from typing import Callable, List, Optional

import cv2
import numpy as np

from juliascope.options import CaptureResolution, PixelFormat
from juliascope.pipeline import FramePipeline
from juliascope.stream.frame import Frame


logger = logging.getLogger(__name__)

FrameCallback = Callable[[Frame, float], None]
ResultCallback = Callable[[Frame], None]


def bgr_to_frame(bgr: np.ndarray, timestamp: float, frame_id: int) -> Frame:
    """Convert an OpenCV BGR(A) image to an RGBA Frame."""
    if bgr.ndim == 3 and bgr.shape[2] == 4:
        rgba = cv2.cvtColor(bgr, cv2.COLOR_BGRA2RGBA)
    elif bgr.ndim == 2:
        rgba = cv2.cvtColor(bgr, cv2.COLOR_GRAY2RGBA)
    else:
        rgba = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGBA)
    return Frame(rgba, timestamp=timestamp, frame_id=frame_id)


def frame_to_bgr(frame: Frame) -> np.ndarray:
    """Convert an RGBA Frame to an OpenCV BGR image for display."""
    return np.ascontiguousarray(frame.pixels[:, :, 2::-1])


class CameraCapture:
    """
    OpenCV camera reader.

    Args:
        index: Device index.
        resolution: Requested capture size.
        pixel_format: Requested device pixel format, if any.
        capture_factory: Callable returning a ``cv2.VideoCapture``-like
            object for a device index.
    """

    def __init__(
        self,
        index: int = 0,
        resolution: CaptureResolution = CaptureResolution.HD720,
        pixel_format: Optional[PixelFormat] = None,
        capture_factory: Callable = cv2.VideoCapture,
    ):
        self.index = index
        self.resolution = resolution
        self.pixel_format = pixel_format
        self._factory = capture_factory
        self._cap = None
        self._frame_id = 0
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()
        self._cap_lock = threading.Lock()

    @staticmethod
    def list_cameras(max_index: int = 5, capture_factory: Callable = cv2.VideoCapture) -> List[int]:
        """Probe device indices 0..max_index-1 and return the ones that open."""
        found = []
        for index in range(max_index):
            cap = capture_factory(index)
            try:
                if cap.isOpened():
                    found.append(index)
            finally:
                cap.release()
        logger.info(f"Discovered {len(found)} camera(s): {found}")
        return found

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def open(self) -> None:
        """
        Open the device and apply the requested format.

        Raises:
            RuntimeError: If the device cannot be opened.
        """
        cap = self._factory(self.index)
        if not cap.isOpened():
            cap.release()
            raise RuntimeError(f"Cannot open camera {self.index}")

        if self.pixel_format is not None:
            cap.set(cv2.CAP_PROP_FOURCC, cv2.VideoWriter_fourcc(*self.pixel_format.fourcc))
        with self._cap_lock:
            self._cap = cap
        self.apply_resolution(self.resolution)
        logger.info(f"Opened camera {self.index} at {self.resolution.value}")

    def apply_resolution(self, resolution: CaptureResolution) -> None:
        self.resolution = resolution
        with self._cap_lock:
            if self._cap is None:
                return
            width, height = resolution.dimensions
            self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
            self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

    def select(self, index: int) -> None:
        """Switch to another device, keeping the reader thread if running."""
        if index == self.index and self.is_open:
            return
        with self._cap_lock:
            old, self._cap = self._cap, None
        if old is not None:
            old.release()
        self.index = index
        self.open()

    def read(self) -> Optional[Frame]:
        """Grab one frame; ``None`` if the device returned nothing."""
        with self._cap_lock:
            if self._cap is None:
                return None
            ok, image = self._cap.read()
        if not ok or image is None:
            return None
        self._frame_id += 1
        return bgr_to_frame(image, time.time(), self._frame_id)

    def start(self, on_frame: FrameCallback) -> None:
        """Read continuously on a daemon thread, calling ``on_frame`` per frame."""
        if not self.is_open:
            self.open()
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, args=(on_frame,), name="juliascope-capture", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float = 2.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        with self._cap_lock:
            if self._cap is not None:
                self._cap.release()
                self._cap = None
        logger.info(f"Closed camera {self.index}")

    def _run(self, on_frame: FrameCallback) -> None:
        failures = 0
        while not self._stop.is_set():
            frame = self.read()
            if frame is None:
                failures += 1
                if failures == 1 or failures % 100 == 0:
                    logger.warning(f"Camera {self.index} returned no frame ({failures} in a row)")
                time.sleep(0.01)
                continue
            failures = 0
            on_frame(frame, frame.timestamp)


class FrameWorker:
    """
    Dedicated processing role for a FramePipeline.

    ``submit`` may be called from any thread (typically the capture
    thread). The worker keeps only the newest unprocessed frame.

    Args:
        pipeline: Pipeline to drive.
        on_result: Called on the worker thread with each output frame.
    """

    def __init__(self, pipeline: FramePipeline, on_result: ResultCallback):
        self.pipeline = pipeline
        self.on_result = on_result
        self._pending: Optional[Frame] = None
        self._cond = threading.Condition()
        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._dropped = 0
        self._delivered = 0

    @property
    def dropped(self) -> int:
        with self._cond:
            return self._dropped

    @property
    def delivered(self) -> int:
        with self._cond:
            return self._delivered

    def submit(self, frame: Frame, timestamp: Optional[float] = None) -> bool:
        """
        Hand over a captured frame.

        Returns:
            True if the frame was queued without displacing another one.
        """
        with self._cond:
            replaced = self._pending is not None
            if replaced:
                self._dropped += 1
            self._pending = frame
            self._cond.notify()
        return not replaced

    def start(self) -> None:
        with self._cond:
            if self._running:
                return
            self._running = True
        self._thread = threading.Thread(target=self._run, name="juliascope-worker", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 2.0) -> None:
        with self._cond:
            self._running = False
            self._cond.notify_all()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _take(self) -> Optional[Frame]:
        with self._cond:
            while self._running and self._pending is None:
                self._cond.wait()
            frame, self._pending = self._pending, None
            return frame if self._running else None

    def _run(self) -> None:
        while True:
            frame = self._take()
            if frame is None:
                return
            result = self.pipeline.handle_frame(frame)
            if result is None:
                continue
            try:
                self.on_result(result)
            except Exception:
                logger.exception("Display callback failed")
                continue
            with self._cond:
                self._delivered += 1
