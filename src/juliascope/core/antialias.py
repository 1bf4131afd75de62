"""
Antialiasing sample policy.

Decides how many warp evaluations an output pixel gets and at which
sub-pixel offsets. Offsets are in output pixels relative to the pixel
position.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np


Offsets = Tuple[Tuple[float, float], ...]

SINGLE_SAMPLE: Offsets = ((0.0, 0.0),)

GRID_2X2: Offsets = (
    (-0.25, -0.25),
    (0.25, -0.25),
    (-0.25, 0.25),
    (0.25, 0.25),
)

GRID_4X4: Offsets = tuple(
    ((sx - 1.5) * 0.25, (sy - 1.5) * 0.25)
    for sy in range(4)
    for sx in range(4)
)

_OFFSETS_BY_COUNT = {
    1: SINGLE_SAMPLE,
    4: GRID_2X2,
    16: GRID_4X4,
}


class AntialiasingMode(str, Enum):
    """Closed set of antialiasing policies."""

    OFF = "None"
    FIXED_GRID = "4x MSAA"
    ADAPTIVE = "Adaptive"

    @classmethod
    def from_name(cls, name: str) -> "AntialiasingMode":
        """
        Look up a mode by CLI-style name, enum name or label.

        Raises:
            ValueError: If the name does not match any mode.
        """
        key = name.strip()
        alias = _ALIASES.get(key.lower())
        if alias is not None:
            return alias
        try:
            return cls[key.upper()]
        except KeyError:
            pass
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown antialiasing mode: {name!r}") from None

    def next(self) -> "AntialiasingMode":
        members = list(AntialiasingMode)
        return members[(members.index(self) + 1) % len(members)]


_ALIASES = {
    "none": AntialiasingMode.OFF,
    "off": AntialiasingMode.OFF,
    "msaa4x": AntialiasingMode.FIXED_GRID,
    "4x": AntialiasingMode.FIXED_GRID,
    "fixed": AntialiasingMode.FIXED_GRID,
    "adaptive": AntialiasingMode.ADAPTIVE,
}


@dataclass(frozen=True)
class AdaptiveThresholds:
    """
    Distance buckets for adaptive sampling, in normalized units.

    A pixel with ``dist < inner`` gets ``inner_samples``; ``inner <= dist <
    outer`` gets ``middle_samples``; anything further out gets
    ``outer_samples``. Both comparisons are strict on the upper bound.
    """

    inner: float = 0.3
    outer: float = 0.7
    inner_samples: int = 16
    middle_samples: int = 4
    outer_samples: int = 1

    def __post_init__(self):
        if not (np.isfinite(self.inner) and np.isfinite(self.outer)):
            raise ValueError("Adaptive thresholds must be finite")
        if not 0.0 <= self.inner <= self.outer:
            raise ValueError(
                f"Adaptive thresholds must satisfy 0 <= inner <= outer, "
                f"got inner={self.inner}, outer={self.outer}"
            )
        for count in (self.inner_samples, self.middle_samples, self.outer_samples):
            if count not in _OFFSETS_BY_COUNT:
                raise ValueError(
                    f"Sample count must be one of {sorted(_OFFSETS_BY_COUNT)}, got {count}"
                )

    def sample_count(self, dist):
        """Sample count for a normalized distance (scalar or array)."""
        counts = np.where(
            dist < self.inner,
            self.inner_samples,
            np.where(dist < self.outer, self.middle_samples, self.outer_samples),
        )
        if np.ndim(counts) == 0:
            return int(counts)
        return counts


def offsets_for_count(count: int) -> Offsets:
    """Sub-pixel offsets for a 1, 4 or 16 sample pattern."""
    try:
        return _OFFSETS_BY_COUNT[count]
    except KeyError:
        raise ValueError(f"No sample pattern with {count} samples") from None


def sample_offsets(
    mode: AntialiasingMode,
    dist: float = 0.0,
    thresholds: AdaptiveThresholds | None = None,
) -> Offsets:
    """
    Offsets used for one output pixel.

    Args:
        mode: Antialiasing mode.
        dist: Normalized distance of the pixel from the center. Only read
            in adaptive mode.
        thresholds: Adaptive buckets; defaults to 0.3 / 0.7.

    Returns:
        Tuple of (dx, dy) offsets.
    """
    if mode is AntialiasingMode.OFF:
        return SINGLE_SAMPLE
    if mode is AntialiasingMode.FIXED_GRID:
        return GRID_2X2
    if mode is AntialiasingMode.ADAPTIVE:
        thresholds = thresholds or AdaptiveThresholds()
        return offsets_for_count(thresholds.sample_count(dist))
    raise ValueError(f"Unsupported antialiasing mode: {mode!r}")
