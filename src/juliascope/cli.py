"""
CLI entry point for the live feedback-fractal camera.

Usage:
    juliascope live [options]
    juliascope still <image> [-o output] [options]

Point the camera at the window showing ``juliascope live`` to get
recursive fractal feedback.
"""

import argparse
import logging
import sys
import threading
import time
from pathlib import Path
from typing import Optional

import cv2
import numpy as np
from PIL import Image

from juliascope.core.antialias import AntialiasingMode
from juliascope.core.warp import WarpVariant
from juliascope.effects.aberration import DEFAULT_STRENGTH
from juliascope.options import CaptureResolution, PixelFormat, UpscaleFactor
from juliascope.params import FrameParameters, ParameterStore
from juliascope.pipeline import FramePipeline, PipelineConfig
from juliascope.stream.capture import CameraCapture, FrameWorker, frame_to_bgr
from juliascope.stream.frame import Frame


logger = logging.getLogger(__name__)

WINDOW_NAME = "juliascope"
CENTER_STEP = 0.02
ZOOM_STEP = 0.1

KEY_HELP = (
    "w: warp  a: antialiasing  u: upscale  c: aberration  "
    "+/-: zoom  i/j/k/l: move center  r: reset  q/Esc: quit"
)


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for the CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


def apply_key(store: ParameterStore, key: int) -> bool:
    """
    Map a keypress to a parameter change.

    Returns:
        False when the key asks to quit, True otherwise.
    """
    if key < 0:
        return True
    ch = chr(key & 0xFF)
    params = store.snapshot()

    if ch in ("q", "\x1b"):
        return False
    if ch == "w":
        store.set_warp_variant(params.warp_variant.next())
    elif ch == "a":
        store.set_antialiasing(params.antialiasing.next())
    elif ch == "u":
        try:
            preset = UpscaleFactor.from_scale(params.upscale_factor)
        except ValueError:
            preset = UpscaleFactor.THREE
        store.set_upscale_factor(preset.next())
    elif ch == "c":
        store.set_aberration_enabled(not params.aberration_enabled)
    elif ch in ("+", "="):
        store.set_zoom_level(params.zoom_level + ZOOM_STEP)
    elif ch in ("-", "_"):
        store.set_zoom_level(params.zoom_level - ZOOM_STEP)
    elif ch in ("i", "j", "k", "l"):
        dx = {"j": -CENTER_STEP, "l": CENTER_STEP}.get(ch, 0.0)
        dy = {"i": -CENTER_STEP, "k": CENTER_STEP}.get(ch, 0.0)
        store.set_center(params.center[0] + dx, params.center[1] + dy)
    elif ch == "r":
        store.update(upscale_factor=1.0, center=(0.5, 0.5), zoom_level=1.0)
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="juliascope",
        description="Real-time complex-plane warp for video feedback fractals",
    )
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level (default: INFO)")

    sub = parser.add_subparsers(dest="command", required=True)

    def add_effect_args(p: argparse.ArgumentParser):
        p.add_argument(
            "--upscale", type=float, default=1.0,
            choices=[f.scale for f in UpscaleFactor],
            help="Output supersampling factor (default: 1)",
        )
        p.add_argument(
            "--warp", type=str, default="z2",
            choices=["z2", "z3", "z4", "sin"],
            help="Warp function (default: z2)",
        )
        p.add_argument(
            "--antialias", type=str, default="adaptive",
            choices=["none", "msaa4x", "adaptive"],
            help="Antialiasing mode (default: adaptive)",
        )
        p.add_argument("--zoom", type=float, default=1.0, help="Inward crop zoom, >= 1 (default: 1)")
        p.add_argument("--center", type=float, nargs=2, default=(0.5, 0.5), metavar=("X", "Y"),
                       help="Warp center as fractions of the output (default: 0.5 0.5)")
        p.add_argument("--aberration", action="store_true", help="Enable chromatic aberration")
        p.add_argument("--strength", type=float, default=DEFAULT_STRENGTH,
                       help=f"Chromatic aberration strength in pixels (default: {DEFAULT_STRENGTH})")

    live = sub.add_parser("live", help="Warp a live camera feed")
    live.add_argument("--camera", type=int, default=0, help="Camera index (default: 0)")
    live.add_argument("--list-cameras", action="store_true", help="List camera indices and exit")
    live.add_argument(
        "--resolution", type=str, default="720p",
        choices=[r.value.lower() for r in CaptureResolution],
        help="Capture resolution (default: 720p)",
    )
    live.add_argument(
        "--pixel-format", type=str, default=None,
        choices=[f.cli_name for f in PixelFormat],
        help="Requested device pixel format (default: device default)",
    )
    add_effect_args(live)

    still = sub.add_parser("still", help="Warp a single image file")
    still.add_argument("image", type=Path, help="Input image")
    still.add_argument("-o", "--output", type=Path, default=None,
                       help="Output PNG path (default: <image>_julia.png)")
    add_effect_args(still)

    return parser


def params_from_args(args: argparse.Namespace) -> FrameParameters:
    store = ParameterStore()
    store.set_upscale_factor(args.upscale)
    store.set_warp_variant(args.warp)
    store.set_antialiasing(args.antialias)
    store.set_zoom_level(args.zoom)
    store.set_center(*args.center)
    store.set_aberration_enabled(args.aberration)
    return store.snapshot()


def run_still(args: argparse.Namespace) -> int:
    if not args.image.exists():
        print(f"Error: Image not found: {args.image}", file=sys.stderr)
        return 1

    output = args.output or args.image.with_name(f"{args.image.stem}_julia.png")
    params = params_from_args(args)
    pipeline = FramePipeline(
        ParameterStore(params),
        PipelineConfig(aberration_strength=args.strength),
    )

    with Image.open(args.image) as img:
        frame = Frame.from_array(np.asarray(img.convert("RGBA")))

    print(f"Warping {args.image} ({frame.width}x{frame.height})")
    print(f"  Warp: {params.warp_variant.value}, Antialiasing: {params.antialiasing.value}, "
          f"Upscale: {params.upscale_factor}, Zoom: {params.zoom_level}")

    t0 = time.time()
    result = pipeline.handle_frame(frame)
    if result is None:
        print("Error: Empty image", file=sys.stderr)
        return 1

    Image.fromarray(np.ascontiguousarray(result.pixels)).save(output)
    print(f"Done in {time.time() - t0:.2f}s -> {output} ({result.width}x{result.height})")
    return 0


def run_live(args: argparse.Namespace) -> int:
    if args.list_cameras:
        for index in CameraCapture.list_cameras():
            print(index)
        return 0

    store = ParameterStore(params_from_args(args))
    pipeline = FramePipeline(store, PipelineConfig(aberration_strength=args.strength))

    latest_lock = threading.Lock()
    latest: dict = {"frame": None}

    def show(frame: Frame):
        with latest_lock:
            latest["frame"] = frame

    worker = FrameWorker(pipeline, show)
    pixel_format = PixelFormat.from_name(args.pixel_format) if args.pixel_format else None
    capture = CameraCapture(
        args.camera,
        CaptureResolution.from_name(args.resolution),
        pixel_format,
    )
    try:
        capture.open()
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(KEY_HELP)
    worker.start()
    capture.start(worker.submit)
    cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_NORMAL)
    try:
        while True:
            with latest_lock:
                frame: Optional[Frame] = latest["frame"]
                latest["frame"] = None
            if frame is not None:
                cv2.imshow(WINDOW_NAME, frame_to_bgr(frame))
            if not apply_key(store, cv2.waitKey(1)):
                break
    except KeyboardInterrupt:
        pass
    finally:
        capture.stop()
        worker.stop()
        cv2.destroyAllWindows()

    stats = pipeline.stats()
    logger.info(
        f"Processed {stats.processed} frames, dropped {worker.dropped}, "
        f"skipped {stats.skipped}, last frame {stats.last_duration_ms:.1f}ms"
    )
    return 0


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        if args.command == "still":
            return run_still(args)
        return run_live(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
