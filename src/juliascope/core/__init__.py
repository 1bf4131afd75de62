"""Pure per-pixel math: warp functions, coordinate mapping, sampling."""

from juliascope.core.antialias import AdaptiveThresholds, AntialiasingMode, sample_offsets
from juliascope.core.coords import CoordinateMapper
from juliascope.core.sampler import AntialiasingSampler
from juliascope.core.warp import WarpVariant, warp

__all__ = [
    "AdaptiveThresholds",
    "AntialiasingMode",
    "AntialiasingSampler",
    "CoordinateMapper",
    "WarpVariant",
    "sample_offsets",
    "warp",
]
