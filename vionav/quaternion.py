"""Quaternion helpers in (x, y, z, w) storage order."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def _as_vector(values: Sequence[float], size: int, name: str) -> np.ndarray:
    array = np.asarray(values, dtype=float).reshape(-1)
    if array.shape != (size,):
        raise ValueError(f"{name} must have {size} components, got {array.size}")
    return array


def quaternion_product(q1: Sequence[float], q2: Sequence[float]) -> np.ndarray:
    """Hamilton product q1 * q2 of quaternions stored as (x, y, z, w)."""
    x1, y1, z1, w1 = _as_vector(q1, 4, "q1")
    x2, y2, z2, w2 = _as_vector(q2, 4, "q2")
    return np.array(
        [
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        ]
    )


def quaternion_plus(x: Sequence[float], delta: Sequence[float]) -> np.ndarray:
    """Apply a rotation-vector increment delta to quaternion x on the left."""
    q = _as_vector(x, 4, "x")
    d = _as_vector(delta, 3, "delta")
    norm_delta = float(np.linalg.norm(d))
    if norm_delta > 0.0:
        q_delta = np.empty(4)
        q_delta[:3] = np.sin(norm_delta) / norm_delta * d
        q_delta[3] = np.cos(norm_delta)
        return quaternion_product(q_delta, q)
    return q.copy()


def quaternion_jacobian(x: Sequence[float]) -> np.ndarray:
    """4x3 Jacobian of quaternion_plus with respect to delta at zero."""
    qx, qy, qz, qw = _as_vector(x, 4, "x")
    return np.array(
        [
            [qw, qz, -qy],
            [-qz, qw, qx],
            [qy, -qx, qw],
            [-qx, -qy, -qz],
        ]
    )