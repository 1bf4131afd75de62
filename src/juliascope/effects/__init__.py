"""Frame stages and the kernel provider they load from."""

from juliascope.effects.aberration import ChromaticAberrationStage, radial_chromatic_aberration
from juliascope.effects.julia import JuliaWarpStage, julia_warp
from juliascope.effects.kernels import KernelProvider, KernelUnavailableError

__all__ = [
    "ChromaticAberrationStage",
    "JuliaWarpStage",
    "KernelProvider",
    "KernelUnavailableError",
    "julia_warp",
    "radial_chromatic_aberration",
]
