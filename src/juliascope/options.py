"""
Capture and pre-filter presets offered by the control surface.
"""

from enum import Enum
from typing import Tuple


class UpscaleFactor(str, Enum):
    """Pre-warp supersampling presets."""

    NONE = "1×"
    ONE_POINT_FIVE = "1.5×"
    TWO = "2×"
    THREE = "3×"

    @property
    def scale(self) -> float:
        return _UPSCALE[self]

    @classmethod
    def from_scale(cls, scale: float) -> "UpscaleFactor":
        for member, value in _UPSCALE.items():
            if value == scale:
                return member
        raise ValueError(f"No upscale preset for {scale}")

    def next(self) -> "UpscaleFactor":
        members = list(UpscaleFactor)
        return members[(members.index(self) + 1) % len(members)]


_UPSCALE = {
    UpscaleFactor.NONE: 1.0,
    UpscaleFactor.ONE_POINT_FIVE: 1.5,
    UpscaleFactor.TWO: 2.0,
    UpscaleFactor.THREE: 3.0,
}


class CaptureResolution(str, Enum):
    """Camera resolution presets."""

    HD720 = "720p"
    HD1080 = "1080p"
    UHD4K = "4K"

    @property
    def dimensions(self) -> Tuple[int, int]:
        """(width, height) requested from the device."""
        return _RESOLUTIONS[self]

    @classmethod
    def from_name(cls, name: str) -> "CaptureResolution":
        key = name.strip().lower()
        for member in cls:
            if member.value.lower() == key or member.name.lower() == key:
                return member
        raise ValueError(f"Unknown capture resolution: {name!r}")


_RESOLUTIONS = {
    CaptureResolution.HD720: (1280, 720),
    CaptureResolution.HD1080: (1920, 1080),
    CaptureResolution.UHD4K: (3840, 2160),
}


class PixelFormat(str, Enum):
    """
    Pixel formats a capture device may deliver before RGBA conversion.

    OpenCV negotiates formats by FOURCC only, which carries no range flag,
    so both YCbCr 4:2:0 variants request NV12 and the device picks the range.
    """

    YCBCR420 = "YCbCr 4:2:0"
    BGRA = "BGRA (32-bit)"
    YCBCR420_VIDEO = "YCbCr 4:2:0 (Video Range)"

    @property
    def fourcc(self) -> str:
        return _FOURCC[self]

    @property
    def cli_name(self) -> str:
        return self.name.lower().replace("_", "-")

    @classmethod
    def from_name(cls, name: str) -> "PixelFormat":
        key = name.strip().lower()
        for member in cls:
            if member.cli_name == key or member.value.lower() == key:
                return member
        raise ValueError(f"Unknown pixel format: {name!r}")


_FOURCC = {
    PixelFormat.YCBCR420: "NV12",
    PixelFormat.BGRA: "BGRA",
    PixelFormat.YCBCR420_VIDEO: "NV12",
}
