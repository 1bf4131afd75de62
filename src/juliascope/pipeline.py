"""
Per-frame driver.

Takes one parameter snapshot, warps, optionally adds chromatic aberration,
and returns the frame to display. Any stage that is unavailable or fails
degrades to passing its input through; ``handle_frame`` never raises for
those cases.
"""

import dataclasses
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from juliascope.core.antialias import AdaptiveThresholds
from juliascope.effects.aberration import DEFAULT_STRENGTH, ChromaticAberrationStage
from juliascope.effects.julia import JuliaWarpStage
from juliascope.effects.kernels import KernelProvider
from juliascope.params import FrameParameters, ParameterStore
from juliascope.stream.frame import Frame


logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Static pipeline settings (not changed per frame)."""

    aberration_strength: float = DEFAULT_STRENGTH
    adaptive_thresholds: AdaptiveThresholds = field(default_factory=AdaptiveThresholds)

    def __post_init__(self):
        if not self.aberration_strength >= 0:
            raise ValueError(f"aberration_strength must be >= 0, got {self.aberration_strength}")


@dataclass
class PipelineStats:
    """Counters for observability; ``FramePipeline.stats()`` returns a copy."""

    processed: int = 0
    skipped: int = 0
    warp_fallbacks: int = 0
    aberration_fallbacks: int = 0
    last_duration_ms: float = 0.0


class FramePipeline:
    """
    Snapshot -> warp -> optional aberration, once per captured frame.

    Args:
        store: Parameter cell written by the control surface. A fresh one
            with defaults is created when omitted.
        config: Static settings.
        provider: Kernel source; defaults to the built-in kernels.

    Example:
        pipeline = FramePipeline()
        pipeline.parameters.set_warp_variant("z3")
        out = pipeline.handle_frame(Frame.from_array(rgb))
    """

    def __init__(
        self,
        store: ParameterStore | None = None,
        config: PipelineConfig | None = None,
        provider: KernelProvider | None = None,
    ):
        self.parameters = store or ParameterStore()
        self.cfg = config or PipelineConfig()
        provider = provider or KernelProvider()

        self.warp_stage = JuliaWarpStage.from_provider(provider, self.cfg.adaptive_thresholds)
        self.aberration_stage = ChromaticAberrationStage.from_provider(provider)

        self._stats = PipelineStats()
        self._stats_lock = threading.Lock()
        self._warned: set[str] = set()

    def stats(self) -> PipelineStats:
        with self._stats_lock:
            return dataclasses.replace(self._stats)

    def handle_frame(self, frame: Frame) -> Optional[Frame]:
        """
        Process one captured frame.

        Args:
            frame: Raw input frame.

        Returns:
            The frame to display, or ``None`` for an empty input frame
            (nothing is emitted for that cycle).
        """
        if frame.is_empty:
            logger.debug(f"Skipping empty frame {frame!r}")
            self._count(skipped=1)
            return None

        t0 = time.perf_counter()
        params = self.parameters.snapshot()
        result = self.process(frame, params)

        with self._stats_lock:
            self._stats.processed += 1
            self._stats.last_duration_ms = (time.perf_counter() - t0) * 1000.0
        return result

    def process(self, frame: Frame, params: FrameParameters) -> Frame:
        """Run the stages against an explicit snapshot."""
        warped = self._run_stage(
            "warp",
            lambda: self.warp_stage.process(frame, params),
        )
        if warped is None:
            self._count(warp_fallbacks=1)
            warped = frame

        if not params.aberration_enabled:
            return warped

        final = self._run_stage(
            "aberration",
            lambda: self.aberration_stage.process(warped, self.cfg.aberration_strength),
        )
        if final is None:
            self._count(aberration_fallbacks=1)
            return warped
        return final

    def _run_stage(self, name: str, run) -> Optional[Frame]:
        try:
            result = run()
        except Exception:
            if name not in self._warned:
                self._warned.add(name)
                logger.exception(f"{name} stage failed; passing frames through")
            return None

        if result is None and name not in self._warned:
            self._warned.add(name)
            logger.warning(f"{name} stage unavailable; passing frames through")
        return result

    def _count(self, **deltas: int) -> None:
        with self._stats_lock:
            for key, delta in deltas.items():
                setattr(self._stats, key, getattr(self._stats, key) + delta)
