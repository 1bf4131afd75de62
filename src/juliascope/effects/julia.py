"""
Full-frame Julia-style warp.

Backward-maps every output pixel through the selected complex function,
with optional supersampling (upscale) and an inward crop (zoom) that trims
the unsampled fringe the warp leaves near the output edges.
"""

from typing import Callable, Optional, Tuple

import numpy as np

from juliascope.core.antialias import AdaptiveThresholds, AntialiasingMode
from juliascope.core.coords import CoordinateMapper
from juliascope.core.sampler import AntialiasingSampler
from juliascope.core.sampling import as_float_rgba, to_uint8
from juliascope.core.warp import WarpVariant
from juliascope.effects.kernels import JULIA_WARP, KernelProvider
from juliascope.params import FrameParameters
from juliascope.stream.frame import Frame


WarpKernel = Callable[..., np.ndarray]


def output_size(width: int, height: int, upscale: float = 1.0) -> Tuple[int, int]:
    """Output (width, height) for a source extent scaled by ``upscale``."""
    return int(round(width * upscale)), int(round(height * upscale))


def zoom_inset(zoom: float) -> float:
    """Fraction of width/height removed from each side at a zoom level."""
    if zoom <= 1.0:
        return 0.0
    return (zoom - 1.0) / zoom / 2.0


def crop_zoom(pixels: np.ndarray, zoom: float) -> Tuple[np.ndarray, Tuple[int, int]]:
    """
    Symmetric rectangular inset crop.

    Args:
        pixels: (H, W, C) array.
        zoom: Zoom level; <= 1 leaves the array untouched.

    Returns:
        (cropped, (x0, y0)) where (x0, y0) is the crop's top-left corner.
    """
    inset = zoom_inset(zoom)
    if inset == 0.0:
        return pixels, (0, 0)

    h, w = pixels.shape[:2]
    x0 = min(int(round(w * inset)), max((w - 1) // 2, 0))
    y0 = min(int(round(h * inset)), max((h - 1) // 2, 0))
    return pixels[y0:h - y0, x0:w - x0], (x0, y0)


def julia_warp(
    pixels: np.ndarray,
    upscale: float = 1.0,
    center: Tuple[float, float] = (0.5, 0.5),
    variant: WarpVariant = WarpVariant.SQUARE,
    antialiasing: AntialiasingMode = AntialiasingMode.ADAPTIVE,
    thresholds: AdaptiveThresholds | None = None,
) -> np.ndarray:
    """
    Warp an RGBA image.

    Args:
        pixels: (H, W, 4) uint8 source.
        upscale: Output extent multiplier (>= 1).
        center: Normalization center as a fraction of the output extent.
        variant: Warp function.
        antialiasing: Sampling policy.
        thresholds: Adaptive distance buckets.

    Returns:
        (round(H * upscale), round(W * upscale), 4) uint8 image.
    """
    src_h, src_w = pixels.shape[:2]
    out_w, out_h = output_size(src_w, src_h, upscale)

    mapper = CoordinateMapper(
        output_size=(out_w, out_h),
        source_size=(src_w, src_h),
        center=(center[0] * out_w, center[1] * out_h),
    )
    sampler = AntialiasingSampler(mapper, variant, antialiasing, thresholds)
    colors = sampler.render(as_float_rgba(pixels), (out_w, out_h))
    return to_uint8(colors)


class JuliaWarpStage:
    """
    Frame-level wrapper around the warp kernel.

    The kernel is optional: when the provider could not supply it,
    ``process`` returns ``None`` and the caller passes the source through.
    """

    def __init__(
        self,
        kernel: Optional[WarpKernel] = julia_warp,
        thresholds: AdaptiveThresholds | None = None,
    ):
        self.kernel = kernel
        self.thresholds = thresholds or AdaptiveThresholds()

    @classmethod
    def from_provider(
        cls,
        provider: KernelProvider,
        thresholds: AdaptiveThresholds | None = None,
    ) -> "JuliaWarpStage":
        return cls(provider.get(JULIA_WARP), thresholds)

    @property
    def available(self) -> bool:
        return self.kernel is not None

    def process(self, frame: Frame, params: FrameParameters) -> Optional[Frame]:
        """
        Warp one frame with a parameter snapshot.

        Returns:
            The warped (and possibly cropped) frame, or ``None`` if the
            warp kernel is unavailable.
        """
        if self.kernel is None:
            return None

        warped = self.kernel(
            frame.pixels,
            upscale=params.upscale_factor,
            center=params.center,
            variant=params.warp_variant,
            antialiasing=params.antialiasing,
            thresholds=self.thresholds,
        )
        cropped, (x0, y0) = crop_zoom(warped, params.zoom_level)
        ox, oy = frame.origin
        return frame.with_pixels(cropped, origin=(ox + x0, oy + y0))
