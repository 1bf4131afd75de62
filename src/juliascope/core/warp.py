"""
Complex-plane warp functions.

Each variant maps a normalized coordinate (x, y), read as z = x + iy,
to a transformed coordinate. Everything is vectorized with numpy: x and y
may be scalars or arrays of any matching shape.
"""

from enum import Enum

import numpy as np


class WarpVariant(str, Enum):
    """Closed set of warp functions, keyed by their display label."""

    SQUARE = "z²"
    CUBE = "z³"
    QUART = "z⁴"
    SINE = "sin(z)"

    @classmethod
    def from_name(cls, name: str) -> "WarpVariant":
        """
        Look up a variant by CLI-style name, enum name or label.

        Accepts "z2", "z3", "z4", "sin", "SQUARE", "z²", ...

        Raises:
            ValueError: If the name does not match any variant.
        """
        key = name.strip()
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return cls[key.upper()]
        except KeyError:
            pass
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown warp variant: {name!r}") from None

    def next(self) -> "WarpVariant":
        members = list(WarpVariant)
        return members[(members.index(self) + 1) % len(members)]


_ALIASES = {
    "z2": WarpVariant.SQUARE,
    "z3": WarpVariant.CUBE,
    "z4": WarpVariant.QUART,
    "sin": WarpVariant.SINE,
    "sinz": WarpVariant.SINE,
}


def _square(x, y):
    return x * x - y * y, 2.0 * x * y


def warp(x, y, variant: WarpVariant = WarpVariant.SQUARE):
    """
    Apply a warp variant to normalized coordinates.

    Args:
        x: Real component(s).
        y: Imaginary component(s).
        variant: Which function to apply.

    Returns:
        (x', y') tuple with the same shape as the inputs.
    """
    if variant is WarpVariant.SQUARE:
        return _square(x, y)

    if variant is WarpVariant.CUBE:
        a, b = _square(x, y)
        return a * x - b * y, a * y + b * x

    if variant is WarpVariant.QUART:
        a, b = _square(x, y)
        return a * a - b * b, 2.0 * a * b

    if variant is WarpVariant.SINE:
        return np.sin(x) * np.cosh(y), np.cos(x) * np.sinh(y)

    raise ValueError(f"Unsupported warp variant: {variant!r}")
