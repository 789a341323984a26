"""Rigid-body transform stored as a quaternion and a translation."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def _rotation_to_quaternion(m: np.ndarray) -> np.ndarray:
    q = np.empty(4)
    trace = m[0, 0] + m[1, 1] + m[2, 2]
    if trace > 0.0:
        t = np.sqrt(trace + 1.0)
        q[3] = 0.5 * t
        t = 0.5 / t
        q[0] = (m[2, 1] - m[1, 2]) * t
        q[1] = (m[0, 2] - m[2, 0]) * t
        q[2] = (m[1, 0] - m[0, 1]) * t
        return q

    i = 0
    if m[1, 1] > m[0, 0]:
        i = 1
    if m[2, 2] > m[i, i]:
        i = 2
    j = (i + 1) % 3
    k = (j + 1) % 3
    t = np.sqrt(m[i, i] - m[j, j] - m[k, k] + 1.0)
    q[i] = 0.5 * t
    t = 0.5 / t
    q[3] = (m[k, j] - m[j, k]) * t
    q[j] = (m[j, i] + m[i, j]) * t
    q[k] = (m[k, i] + m[i, k]) * t
    return q


def _quaternion_to_rotation(q: np.ndarray) -> np.ndarray:
    x, y, z, w = q
    return np.array(
        [
            [1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - z * w), 2.0 * (x * z + y * w)],
            [2.0 * (x * y + z * w), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - x * w)],
            [2.0 * (x * z - y * w), 2.0 * (y * z + x * w), 1.0 - 2.0 * (x * x + y * y)],
        ]
    )


class Transform:
    """Rotation quaternion (x, y, z, w) plus translation vector."""

    def __init__(
        self,
        rotation: Sequence[float] | None = None,
        translation: Sequence[float] | None = None,
    ) -> None:
        self.rotation = (
            np.array([0.0, 0.0, 0.0, 1.0])
            if rotation is None
            else np.asarray(rotation, dtype=float).reshape(-1).copy()
        )
        self.translation = (
            np.zeros(3)
            if translation is None
            else np.asarray(translation, dtype=float).reshape(-1).copy()
        )
        if self.rotation.shape != (4,):
            raise ValueError("rotation must be a quaternion (x, y, z, w)")
        if self.translation.shape != (3,):
            raise ValueError("translation must have 3 components")

    @classmethod
    def from_matrix(cls, matrix: Sequence[Sequence[float]]) -> Transform:
        """Build a transform from a 4x4 homogeneous matrix."""
        h = np.asarray(matrix, dtype=float)
        if h.shape != (4, 4):
            raise ValueError("matrix must be 4x4")
        return cls(_rotation_to_quaternion(h[:3, :3]), h[:3, 3])

    def to_matrix(self) -> np.ndarray:
        """The 4x4 homogeneous matrix of this transform."""
        h = np.eye(4)
        h[:3, :3] = _quaternion_to_rotation(self.rotation)
        h[:3, 3] = self.translation
        return h

    def __repr__(self) -> str:
        return f"Transform(rotation={self.rotation.tolist()}, translation={self.translation.tolist()})"