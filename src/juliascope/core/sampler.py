"""
Antialiased backward sampling through a warp.

For every output pixel: pick sub-pixel offsets from the antialiasing
policy, push each through CoordinateMapper -> warp -> CoordinateMapper
inverse -> fetch, and average the fetched colors per channel (alpha
included).
"""

from typing import Tuple

import numpy as np

from juliascope.core.antialias import (
    AdaptiveThresholds,
    AntialiasingMode,
    Offsets,
    offsets_for_count,
    sample_offsets,
)
from juliascope.core.coords import CoordinateMapper
from juliascope.core.sampling import fetch
from juliascope.core.warp import WarpVariant, warp


class AntialiasingSampler:
    """
    Samples a source image through a warp with a given antialiasing mode.

    Args:
        mapper: Output/source coordinate conversion.
        variant: Warp function.
        mode: Antialiasing mode.
        thresholds: Adaptive distance buckets.
    """

    def __init__(
        self,
        mapper: CoordinateMapper,
        variant: WarpVariant = WarpVariant.SQUARE,
        mode: AntialiasingMode = AntialiasingMode.ADAPTIVE,
        thresholds: AdaptiveThresholds | None = None,
    ):
        self.mapper = mapper
        self.variant = variant
        self.mode = mode
        self.thresholds = thresholds or AdaptiveThresholds()

    def source_position(self, px, py):
        """Where in the source an output position reads from."""
        nx, ny = self.mapper.to_normalized(px, py)
        wx, wy = warp(nx, ny, self.variant)
        return self.mapper.to_source(wx, wy)

    def offsets_for(self, px: float, py: float) -> Offsets:
        """Sub-pixel offsets for a single output pixel."""
        dist = float(self.mapper.normalized_distance(px, py))
        return sample_offsets(self.mode, dist, self.thresholds)

    def sample_counts(self, width: int, height: int) -> np.ndarray:
        """(H, W) int array with the number of samples each output pixel gets."""
        if self.mode is AntialiasingMode.OFF:
            return np.ones((height, width), dtype=np.int64)
        if self.mode is AntialiasingMode.FIXED_GRID:
            return np.full((height, width), 4, dtype=np.int64)
        ys, xs = _pixel_grid(width, height)
        dist = self.mapper.normalized_distance(xs, ys)
        return np.asarray(self.thresholds.sample_count(dist), dtype=np.int64)

    def sample_pixel(self, source: np.ndarray, px: float, py: float) -> np.ndarray:
        """Averaged (4,) float32 color for one output pixel."""
        offsets = self.offsets_for(px, py)
        xs = np.array([px], dtype=np.float64)
        ys = np.array([py], dtype=np.float64)
        return self._mean_color(source, xs, ys, offsets)[0]

    def render(self, source: np.ndarray, size: Tuple[int, int]) -> np.ndarray:
        """
        Sample every output pixel.

        Args:
            source: (H, W, 4) float32 source image.
            size: Output (width, height).

        Returns:
            (out_h, out_w, 4) float32 averaged colors.
        """
        width, height = size
        ys, xs = _pixel_grid(width, height)
        out = np.zeros((height, width, source.shape[2]), dtype=np.float32)
        if width == 0 or height == 0:
            return out

        counts = self.sample_counts(width, height)
        for count in np.unique(counts):
            mask = counts == count
            out[mask] = self._mean_color(
                source, xs[mask], ys[mask], offsets_for_count(int(count))
            )
        return out

    def _mean_color(
        self,
        source: np.ndarray,
        xs: np.ndarray,
        ys: np.ndarray,
        offsets: Offsets,
    ) -> np.ndarray:
        total = np.zeros(xs.shape + (source.shape[2],), dtype=np.float64)
        for dx, dy in offsets:
            sx, sy = self.source_position(xs + dx, ys + dy)
            total += fetch(source, sx, sy)
        return (total / len(offsets)).astype(np.float32)


def _pixel_grid(width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
    """(ys, xs) float64 grids of integer pixel positions."""
    ys, xs = np.mgrid[0:height, 0:width]
    return ys.astype(np.float64), xs.astype(np.float64)
