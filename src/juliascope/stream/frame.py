"""
Frame Data Model
================

RGBA frame passed between the capture collaborator, the pipeline stages
and the display collaborator.

Design Rules:
    - Pixels are (H, W, 4) uint8 RGBA, row 0 at the top
    - Frames are never mutated in place; stages return new frames
    - ``origin`` is the top-left of the frame's extent in the coordinate
      space it was produced in (a zoom crop shifts it inward)
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


class InvalidFrameError(ValueError):
    """Raised when pixel data cannot be interpreted as an RGBA frame."""


@dataclass(frozen=True, eq=False)
class Frame:
    """
    Immutable RGBA frame.

    Attributes:
        pixels: (H, W, 4) uint8 array. Marked read-only on construction.
        origin: (x, y) of the extent's top-left corner.
        timestamp: Capture time in seconds, if known.
        frame_id: Capture counter, if known.
    """

    pixels: np.ndarray
    origin: Tuple[float, float] = (0.0, 0.0)
    timestamp: Optional[float] = None
    frame_id: Optional[int] = None

    def __post_init__(self):
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray):
            raise InvalidFrameError(f"Frame pixels must be a numpy array, got {type(pixels).__name__}")
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise InvalidFrameError(f"Frame pixels must be (H, W, 4), got shape {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise InvalidFrameError(f"Frame pixels must be uint8, got {pixels.dtype}")
        # Views can still change through their base array.
        if pixels.flags.writeable or not pixels.flags.owndata:
            pixels = pixels.copy()
            pixels.flags.writeable = False
            object.__setattr__(self, "pixels", pixels)

    @classmethod
    def from_array(
        cls,
        array: np.ndarray,
        timestamp: Optional[float] = None,
        frame_id: Optional[int] = None,
    ) -> "Frame":
        """
        Build a frame from a grayscale, RGB or RGBA uint8 array.

        Grayscale and RGB inputs get an opaque alpha channel.

        Raises:
            InvalidFrameError: If the array is not uint8 with 1, 3 or 4 channels.
        """
        array = np.asarray(array)
        if array.dtype != np.uint8:
            raise InvalidFrameError(f"Expected uint8 pixels, got {array.dtype}")

        if array.ndim == 2:
            array = np.repeat(array[:, :, np.newaxis], 3, axis=2)
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise InvalidFrameError(f"Unsupported pixel array shape {array.shape}")

        if array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=2)

        return cls(array, timestamp=timestamp, frame_id=frame_id)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height)."""
        return self.width, self.height

    @property
    def extent(self) -> Tuple[float, float, int, int]:
        """(x, y, width, height) of the frame's rectangle."""
        return self.origin[0], self.origin[1], self.width, self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def rgb(self) -> np.ndarray:
        """(H, W, 3) uint8 copy without alpha."""
        return np.ascontiguousarray(self.pixels[:, :, :3])

    def with_pixels(self, pixels: np.ndarray, origin: Optional[Tuple[float, float]] = None) -> "Frame":
        """New frame carrying this frame's timestamp and id."""
        return Frame(
            pixels,
            origin=self.origin if origin is None else origin,
            timestamp=self.timestamp,
            frame_id=self.frame_id,
        )

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixels."""
        return (
            f"Frame(size={self.width}x{self.height}, "
            f"origin={self.origin}, frame_id={self.frame_id})"
        )
