"""Real-time complex-plane warp for video feedback fractals."""

from juliascope.core.antialias import AdaptiveThresholds, AntialiasingMode
from juliascope.core.warp import WarpVariant
from juliascope.params import FrameParameters, ParameterStore
from juliascope.pipeline import FramePipeline, PipelineConfig, PipelineStats
from juliascope.stream.frame import Frame

__version__ = "0.1.0"
__all__ = [
    "AdaptiveThresholds",
    "AntialiasingMode",
    "WarpVariant",
    "FrameParameters",
    "ParameterStore",
    "FramePipeline",
    "PipelineConfig",
    "PipelineStats",
    "Frame",
]
