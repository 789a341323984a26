"""Jet and autumn colour maps and colouring of depth images."""

from __future__ import annotations

import math

import numpy as np

Color = tuple[float, float, float]

_SIZE = 128


def _jet_entry(i: int) -> Color:
    if i < 16:
        return (0.0, 0.0, (17 + i) / 32)
    if i < 48:
        return (0.0, (i - 15) / 32, 1.0)
    if i < 80:
        return ((i - 47) / 32, 1.0, (79 - i) / 32)
    if i < 112:
        return (1.0, (111 - i) / 32, 0.0)
    return ((143 - i) / 32, 0.0, 0.0)


COLORMAP_JET: tuple[Color, ...] = tuple(_jet_entry(i) for i in range(_SIZE))
COLORMAP_AUTUMN: tuple[Color, ...] = tuple(
    (1.0, float(f"{i / (_SIZE - 1):.5g}"), 0.0) for i in range(_SIZE)
)

_COLORMAPS: dict[str, tuple[Color, ...]] = {
    "jet": COLORMAP_JET,
    "autumn": COLORMAP_AUTUMN,
}

_JET_BGR = (
    np.array(COLORMAP_JET, dtype=np.float32)[:, ::-1] * np.float32(255.0)
).astype(np.uint8)


def colormap(name: str, idx: int) -> Color:
    """The (r, g, b) colour, each in [0, 1], at index idx of the named map."""
    table = _COLORMAPS.get(name)
    if table is None:
        raise ValueError(f"unknown colour map: {name!r}")
    if not 0 <= idx < _SIZE:
        raise IndexError(f"colour map index out of range: {idx}")
    return table[idx]


def color_depth_image(depth, min_range: float, max_range: float) -> np.ndarray:
    """Colour a float depth image with the jet map into an 8-bit BGR image.

    Near depths map to the red end, far depths to the blue end; pixels with
    zero (or non-finite) depth stay black.
    """
    img = np.asarray(depth, dtype=np.float32)
    if img.ndim != 2:
        raise ValueError("depth image must be two-dimensional")
    if not (math.isfinite(min_range) and math.isfinite(max_range)) or max_range <= min_range:
        raise ValueError("max_range must be greater than min_range")

    low = np.float32(min_range)
    span = np.float32(max_range) - low

    out = np.zeros(img.shape + (3,), dtype=np.uint8)
    mask = (img != 0) & np.isfinite(img)
    values = img[mask]
    scaled = np.minimum(values - low, span) / span * np.float32(127.0)
    idx = np.clip(127 - np.trunc(scaled).astype(np.int64), 0, _SIZE - 1)
    out[mask] = _JET_BGR[idx]
    return out