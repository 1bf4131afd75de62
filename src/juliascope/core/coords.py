"""
Pixel <-> normalized complex-plane conversion.

The normalized plane puts the configured center at the origin and uses half
of the shorter image side as the unit, so the mapping never stretches a
non-square image.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


def half_min_extent(width: float, height: float) -> float:
    """Unit length of the normalized plane for an image extent."""
    return min(width, height) / 2.0


@dataclass(frozen=True)
class CoordinateMapper:
    """
    Converts output pixel positions to the normalized plane and
    normalized (warped) positions back into source pixel space.

    Attributes:
        output_size: (width, height) of the output image.
        source_size: (width, height) of the source image.
        center: Normalization center in output pixel space. Defaults to the
            output midpoint.
    """

    output_size: Tuple[float, float]
    source_size: Tuple[float, float]
    center: Optional[Tuple[float, float]] = None

    def __post_init__(self):
        if self.center is None:
            ow, oh = self.output_size
            object.__setattr__(self, "center", (ow / 2.0, oh / 2.0))

    @property
    def output_unit(self) -> float:
        return half_min_extent(*self.output_size)

    @property
    def source_unit(self) -> float:
        return half_min_extent(*self.source_size)

    @property
    def source_center(self) -> Tuple[float, float]:
        sw, sh = self.source_size
        return sw / 2.0, sh / 2.0

    def to_normalized(self, px, py):
        """
        Output pixel position -> normalized coordinate.

        ``normalized = (pixel - center) / (min(width, height) / 2)``
        """
        cx, cy = self.center
        unit = self.output_unit
        return (px - cx) / unit, (py - cy) / unit

    def to_source(self, nx, ny):
        """
        Normalized coordinate -> source pixel position.

        ``source = normalized * (min(src_w, src_h) / 2) + source_center``
        """
        scx, scy = self.source_center
        unit = self.source_unit
        return nx * unit + scx, ny * unit + scy

    def normalized_distance(self, px, py):
        """Euclidean distance of an output pixel from the center, in normalized units."""
        nx, ny = self.to_normalized(px, py)
        return np.hypot(nx, ny)
