"""Small geometric and timing helpers."""

from __future__ import annotations

import math
import time
from collections.abc import Iterable, Sequence

_LONG_MAX = 2**63 - 1
_LONG_MIN = -(2**63)
_UINT64_MAX = 2**64 - 1

Point = tuple[float, float]
Cell = tuple[int, int]


def hypot3(x: float, y: float, z: float) -> float:
    """Euclidean norm of a 3-vector."""
    return math.sqrt(x * x + y * y + z * z)


def d2r(deg: float) -> float:
    """Convert degrees to radians."""
    return deg / 180.0 * math.pi


def r2d(rad: float) -> float:
    """Convert radians to degrees."""
    return rad / math.pi * 180.0


def sinc(theta: float) -> float:
    """Unnormalised sinc, sin(theta) / theta."""
    return math.sin(theta) / theta


def time_in_microseconds() -> int:
    """Wall-clock time in whole microseconds since the epoch."""
    return time.time_ns() // 1000


def time_in_seconds() -> float:
    """Wall-clock time in seconds since the epoch."""
    return time.time_ns() / 1_000_000_000.0


def bres_line(x0: int, y0: int, x1: int, y1: int) -> list[Cell]:
    """Cells crossed by the line from (x0, y0) to (x1, y1), Bresenham style."""
    cells: list[Cell] = []
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy

    while True:
        cells.append((x0, y0))
        if x0 == x1 and y0 == y1:
            return cells
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy


def bres_circle(x0: int, y0: int, r: int) -> list[Cell]:
    """Cells covered by the filled circle of radius r centred at (x0, y0).

    Cells are returned ordered by x, then by y.
    """
    filled: set[Cell] = set()

    def fill(line: Iterable[Cell]) -> None:
        filled.update(line)

    fill(bres_line(x0, y0 - r, x0, y0 + r))
    fill(bres_line(x0 - r, y0, x0 + r, y0))

    f = 1 - r
    ddf_x = 1
    ddf_y = -2 * r
    x = 0
    y = r
    while x < y:
        if f >= 0:
            y -= 1
            ddf_y += 2
            f += ddf_y
        x += 1
        ddf_x += 2
        f += ddf_x

        fill(bres_line(x0 - x, y0 + y, x0 + x, y0 + y))
        fill(bres_line(x0 - x, y0 - y, x0 + x, y0 - y))
        fill(bres_line(x0 - y, y0 + x, x0 + y, y0 + x))
        fill(bres_line(x0 - y, y0 - x, x0 + y, y0 - x))

    return sorted(filled)


def fit_circle(points: Sequence[Point]) -> tuple[float, float, float]:
    """Fit a circle to points with the modified least squares method.

    Returns (center_x, center_y, radius).
    """
    n = len(points)
    sum_x = sum_y = sum_xx = sum_xy = sum_yy = 0.0
    sum_xxx = sum_xxy = sum_xyy = sum_yyy = 0.0
    for x, y in points:
        sum_x += x
        sum_y += y
        sum_xx += x * x
        sum_xy += x * y
        sum_yy += y * y
        sum_xxx += x * x * x
        sum_xxy += x * x * y
        sum_xyy += x * y * y
        sum_yyy += y * y * y

    a = n * sum_xx - sum_x**2
    b = n * sum_xy - sum_x * sum_y
    c = n * sum_yy - sum_y**2
    d = 0.5 * (n * sum_xyy - sum_x * sum_yy + n * sum_xxx - sum_x * sum_xx)
    e = 0.5 * (n * sum_xxy - sum_y * sum_xx + n * sum_yyy - sum_y * sum_yy)

    denom = a * c - b**2
    center_x = (d * c - b * e) / denom
    center_y = (a * e - b * d) / denom

    radius = sum(math.hypot(x - center_x, y - center_y) for x, y in points) / n
    return center_x, center_y, radius


def intersect_circles(
    x1: float, y1: float, r1: float, x2: float, y2: float, r2: float
) -> list[Point]:
    """Intersection points of two circles: none, one or two."""
    d = math.hypot(x1 - x2, y1 - y2)
    if d > r1 + r2:
        return []
    if d < abs(r1 - r2):
        return []

    a = (r1**2 - r2**2 + d**2) / (2.0 * d)
    h = math.sqrt(r1**2 - a**2)

    x3 = x1 + a * (x2 - x1) / d
    y3 = y1 + a * (y2 - y1) / d

    if h < 1e-10:
        return [(x3, y3)]

    return [
        (x3 + h * (y2 - y1) / d, y3 - h * (x2 - x1) / d),
        (x3 - h * (y2 - y1) / d, y3 + h * (x2 - x1) / d),
    ]


def timestamp_diff(t1: int, t2: int) -> int:
    """Signed difference t2 - t1 of two unsigned 64-bit stamps, clamped to int64."""
    for stamp in (t1, t2):
        if not 0 <= stamp <= _UINT64_MAX:
            raise ValueError(f"timestamp out of unsigned 64-bit range: {stamp}")
    if t2 > t1:
        return min(t2 - t1, _LONG_MAX)
    d = t1 - t2
    if d > _LONG_MAX:
        return _LONG_MIN
    return -d