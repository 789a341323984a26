"""Recovery of feature depths from 8-bit depth images."""

from __future__ import annotations

import logging

import numpy as np

from vionav.messages import Channel, Header, PointCloud

_log = logging.getLogger(__name__)

DEPTH_OFFSET = 0.01
SATURATED_PIXEL = 255
U_CHANNEL = "u_of_point"
V_CHANNEL = "v_of_point"
Z_CHANNEL = "Z_of_point"


def depth_from_pixel(value: int, min_range: float, max_range: float) -> float | None:
    """Metric depth encoded by an 8-bit depth pixel.

    A saturated pixel (255) is out of range and gives 0.0; a zero pixel carries
    no depth and gives None; other values scale linearly onto the range.
    """
    z = int(value)
    if not 0 <= z <= SATURATED_PIXEL:
        raise ValueError(f"depth pixel must be in 0..255, got {value}")
    if z == SATURATED_PIXEL:
        return 0.0
    if z > 0:
        return z * (max_range - min_range) / 255.0 + DEPTH_OFFSET
    return None


def _as_depth_image(image) -> np.ndarray:
    arr = np.asarray(image)
    if arr.ndim != 2:
        raise ValueError("depth image must be single-channel and two-dimensional")
    if arr.dtype == np.uint8:
        return arr
    if not np.issubdtype(arr.dtype, np.integer):
        raise ValueError("depth image must hold integer pixel values")
    if arr.size and (arr.min() < 0 or arr.max() > SATURATED_PIXEL):
        raise ValueError("depth image pixels must be in 0..255")
    return arr.astype(np.uint8)


class DepthRecovery:
    """Pairs feature clouds with depth images of the same stamp and adds depths."""

    def __init__(self, min_range: float = 0.01, max_range: float = 8.0) -> None:
        self.min_range = min_range
        self.max_range = max_range
        self._images: dict[float, np.ndarray] = {}

    def __len__(self) -> int:
        return len(self._images)

    def add_depth_image(self, stamp: float, image) -> None:
        """Keep a depth image until a feature cloud with the same stamp arrives.

        An image for a stamp already held is ignored.
        """
        self._images.setdefault(stamp, _as_depth_image(image))

    def process(self, cloud: PointCloud) -> PointCloud | None:
        """Return a copy of cloud with a Z_of_point channel, or None without an image.

        The depth image used is discarded afterwards.
        """
        stamp = cloud.header.stamp
        image = self._images.get(stamp)
        if image is None:
            _log.warning("no depth image for frame %.3f", stamp / 1000)
            return None

        u_values = cloud.channel(U_CHANNEL).values
        v_values = cloud.channel(V_CHANNEL).values
        if len(u_values) != len(v_values):
            raise ValueError("u and v channels differ in length")

        rows, cols = image.shape
        depths: list[float] = []
        for u_raw, v_raw in zip(u_values, v_values):
            u = round(u_raw)
            v = round(v_raw)
            if 0 < u < cols and 0 < v < rows:
                depth = depth_from_pixel(int(image[v, u]), self.min_range, self.max_range)
                if depth is not None:
                    depths.append(depth)
            else:
                _log.error("pixel (%d, %d) lies outside the depth image", u, v)

        result = PointCloud(
            header=Header(stamp=cloud.header.stamp, frame_id=cloud.header.frame_id),
            points=list(cloud.points),
            channels=[Channel(c.name, list(c.values)) for c in cloud.channels],
        )
        result.channels.append(Channel(Z_CHANNEL, depths))
        del self._images[stamp]
        _log.debug("%d depth images pending", len(self._images))
        return result