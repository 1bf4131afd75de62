"""
Image fetch for backward-mapped sampling.

Bilinear interpolation via scipy's ``map_coordinates``. Positions outside
the source extent read as transparent black (all four channels zero).
"""

import numpy as np
from scipy.ndimage import map_coordinates


OUTSIDE = -1.0


def as_float_rgba(image: np.ndarray) -> np.ndarray:
    """Return an (H, W, 4) float32 copy of an RGBA image for sampling."""
    if image.ndim != 3 or image.shape[2] != 4:
        raise ValueError(f"Expected (H, W, 4) image, got shape {image.shape}")
    return image.astype(np.float32)


def _coords(sx, sy) -> np.ndarray:
    sx = np.asarray(sx, dtype=np.float64)
    sy = np.asarray(sy, dtype=np.float64)

    # Non-finite positions come from extreme warps; treat them as outside.
    bad = ~(np.isfinite(sx) & np.isfinite(sy))
    if np.any(bad):
        sx = np.where(bad, OUTSIDE, sx)
        sy = np.where(bad, OUTSIDE, sy)

    return np.array([sy.ravel(), sx.ravel()])


def _map(channel: np.ndarray, coords: np.ndarray) -> np.ndarray:
    return map_coordinates(
        channel,
        coords,
        output=np.float32,
        order=1,
        mode="constant",
        cval=0.0,
    )


def fetch_channel(channel: np.ndarray, sx, sy) -> np.ndarray:
    """
    Sample one (H, W) channel at fractional pixel positions.

    Returns:
        float32 array shaped like ``sx``.
    """
    return _map(channel, _coords(sx, sy)).reshape(np.shape(sx))


def fetch(image: np.ndarray, sx, sy) -> np.ndarray:
    """
    Sample an RGBA image at fractional pixel positions.

    Args:
        image: (H, W, C) float32 source.
        sx: Column positions, any shape.
        sy: Row positions, same shape as ``sx``.

    Returns:
        float32 array of shape ``sx.shape + (C,)``.
    """
    shape = np.shape(sx)
    coords = _coords(sx, sy)
    out = np.empty((coords.shape[1], image.shape[2]), dtype=np.float32)
    for c in range(image.shape[2]):
        out[:, c] = _map(image[:, :, c], coords)
    return out.reshape(shape + (image.shape[2],))


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Round and clip float channel values to uint8."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)
