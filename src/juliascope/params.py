"""
Per-frame parameters and the snapshot cell shared between threads.

``FrameParameters`` is an immutable value. ``ParameterStore`` holds the
current value; every setter builds a new value and swaps it in under a
lock, and ``snapshot()`` hands out the current one. A reader therefore
always sees a whole, valid parameter set and can keep using it for an
entire frame while the control side keeps mutating the store.
"""

import dataclasses
import logging
import math
import threading
from dataclasses import dataclass
from typing import Tuple, Union

from juliascope.core.antialias import AntialiasingMode
from juliascope.core.warp import WarpVariant
from juliascope.options import UpscaleFactor


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameParameters:
    """
    Everything the pipeline reads for one frame.

    Attributes:
        upscale_factor: Output extent multiplier, >= 1.
        center: Normalization center as a fraction of the output extent,
            each component in [0, 1].
        warp_variant: Complex function applied by the warp.
        aberration_enabled: Run the chromatic aberration stage.
        antialiasing: Sampling policy of the warp.
        zoom_level: Inward crop factor, >= 1.
    """

    upscale_factor: float = 1.0
    center: Tuple[float, float] = (0.5, 0.5)
    warp_variant: WarpVariant = WarpVariant.SQUARE
    aberration_enabled: bool = False
    antialiasing: AntialiasingMode = AntialiasingMode.ADAPTIVE
    zoom_level: float = 1.0

    def __post_init__(self):
        if not (math.isfinite(self.upscale_factor) and self.upscale_factor >= 1.0):
            raise ValueError(f"upscale_factor must be >= 1, got {self.upscale_factor}")
        if not (math.isfinite(self.zoom_level) and self.zoom_level >= 1.0):
            raise ValueError(f"zoom_level must be >= 1, got {self.zoom_level}")
        if len(self.center) != 2 or not all(
            math.isfinite(c) and 0.0 <= c <= 1.0 for c in self.center
        ):
            raise ValueError(f"center must lie in [0, 1] x [0, 1], got {self.center}")
        if not isinstance(self.warp_variant, WarpVariant):
            raise ValueError(f"warp_variant must be a WarpVariant, got {self.warp_variant!r}")
        if not isinstance(self.antialiasing, AntialiasingMode):
            raise ValueError(f"antialiasing must be an AntialiasingMode, got {self.antialiasing!r}")


def _finite(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    return value


class ParameterStore:
    """
    Thread-safe holder of the current ``FrameParameters``.

    Setters are fire-and-forget: they validate, clamp where the value has
    an obvious nearest legal value, and publish a new snapshot before
    returning. They never wait on the frame-processing side.

    Example:
        store = ParameterStore()
        store.set_warp_variant("z3")         # control thread
        params = store.snapshot()            # processing thread, once per frame
    """

    def __init__(self, initial: FrameParameters | None = None):
        self._params = initial or FrameParameters()
        self._version = 0
        self._lock = threading.Lock()

    @property
    def version(self) -> int:
        """Number of published changes since creation."""
        with self._lock:
            return self._version

    def snapshot(self) -> FrameParameters:
        """Current parameters; immutable, safe to keep for a whole frame."""
        with self._lock:
            return self._params

    def update(self, **changes) -> FrameParameters:
        """
        Apply several field changes as one atomic publish.

        Values are passed through unchanged; use the setters for clamping.

        Raises:
            ValueError: If the resulting parameters are invalid.
        """
        with self._lock:
            new = dataclasses.replace(self._params, **changes)
            self._params = new
            self._version += 1
        logger.debug(f"Parameters updated: {changes}")
        return new

    def set_upscale_factor(self, value: Union[float, UpscaleFactor]) -> FrameParameters:
        if isinstance(value, UpscaleFactor):
            value = value.scale
        value = _finite("upscale_factor", value)
        return self.update(upscale_factor=max(1.0, value))

    def set_center(self, x: float, y: float) -> FrameParameters:
        x = min(max(_finite("center.x", x), 0.0), 1.0)
        y = min(max(_finite("center.y", y), 0.0), 1.0)
        return self.update(center=(x, y))

    def set_warp_variant(self, variant: Union[str, WarpVariant]) -> FrameParameters:
        if not isinstance(variant, WarpVariant):
            variant = WarpVariant.from_name(variant)
        return self.update(warp_variant=variant)

    def set_antialiasing(self, mode: Union[str, AntialiasingMode]) -> FrameParameters:
        if not isinstance(mode, AntialiasingMode):
            mode = AntialiasingMode.from_name(mode)
        return self.update(antialiasing=mode)

    def set_zoom_level(self, value: float) -> FrameParameters:
        value = _finite("zoom_level", value)
        return self.update(zoom_level=max(1.0, value))

    def set_aberration_enabled(self, enabled: bool) -> FrameParameters:
        return self.update(aberration_enabled=bool(enabled))
