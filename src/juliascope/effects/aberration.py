"""
Radial chromatic aberration.

Red is read from further out along the ray from the image center, blue
from further in, green and alpha stay put. The shift grows linearly with
distance from the center and vanishes at the center itself.
"""

from typing import Callable, Optional

import numpy as np

from juliascope.core.sampling import fetch_channel, to_uint8
from juliascope.effects.kernels import CHROMATIC_ABERRATION, KernelProvider
from juliascope.stream.frame import Frame


DEFAULT_STRENGTH = 8.0

AberrationKernel = Callable[..., np.ndarray]


def radial_chromatic_aberration(
    pixels: np.ndarray,
    strength: float = DEFAULT_STRENGTH,
) -> np.ndarray:
    """
    Offset R and B radially for a lens-fringe look.

    For a pixel p with image midpoint c:
    ``offset = normalize(p - c) * strength * |p - c| / |c|``;
    red comes from ``p + offset`` and blue from ``p - offset``.

    Args:
        pixels: (H, W, 4) uint8 RGBA.
        strength: Shift in pixels at distance |c| from the center (>= 0).

    Returns:
        (H, W, 4) uint8 RGBA. ``strength == 0`` returns an identical copy.
    """
    if not np.isfinite(strength) or strength < 0:
        raise ValueError(f"strength must be a finite value >= 0, got {strength}")
    if strength == 0:
        return pixels.copy()

    h, w = pixels.shape[:2]
    cx, cy = w / 2.0, h / 2.0
    radius = np.hypot(cx, cy)
    if radius == 0:
        return pixels.copy()

    ys, xs = np.mgrid[0:h, 0:w].astype(np.float64)

    # normalize(d) * |d| is d itself, so the offset is linear in d.
    gain = strength / radius
    off_x = (xs - cx) * gain
    off_y = (ys - cy) * gain

    result = pixels.copy()
    red = pixels[:, :, 0].astype(np.float32)
    blue = pixels[:, :, 2].astype(np.float32)
    result[:, :, 0] = to_uint8(fetch_channel(red, xs + off_x, ys + off_y))
    result[:, :, 2] = to_uint8(fetch_channel(blue, xs - off_x, ys - off_y))
    return result


class ChromaticAberrationStage:
    """Frame-level wrapper around the aberration kernel; ``None`` when unavailable."""

    def __init__(self, kernel: Optional[AberrationKernel] = radial_chromatic_aberration):
        self.kernel = kernel

    @classmethod
    def from_provider(cls, provider: KernelProvider) -> "ChromaticAberrationStage":
        return cls(provider.get(CHROMATIC_ABERRATION))

    @property
    def available(self) -> bool:
        return self.kernel is not None

    def process(self, frame: Frame, strength: float = DEFAULT_STRENGTH) -> Optional[Frame]:
        if self.kernel is None:
            return None
        return frame.with_pixels(self.kernel(frame.pixels, strength=strength))
