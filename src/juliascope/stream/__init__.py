"""
Stream Module
=============

Frame value type plus the capture and processing threads around the
pipeline.

    - Frame: immutable RGBA frame
    - CameraCapture: OpenCV reader thread (capture collaborator)
    - FrameWorker: single processing thread, latest frame wins
"""

from juliascope.stream.frame import Frame, InvalidFrameError

__all__ = [
    "Frame",
    "InvalidFrameError",
]
