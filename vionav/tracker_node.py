"""Frame-rate control and message building for the feature tracking stage."""

from __future__ import annotations

import logging
import math
from enum import Enum

import numpy as np

from vionav.messages import Channel, Header, PointCloud

_log = logging.getLogger(__name__)

MAX_FRAME_GAP = 1.0
RATE_TOLERANCE = 0.01
CLOUD_FRAME_ID = "camera"

CHANNEL_NAMES = (
    "id_of_point",
    "track_cnt_of_point",
    "velocity_x_of_point",
    "velocity_y_of_point",
    "u_of_point",
    "v_of_point",
)

GREEN = (0, 255, 0)
BLUE = (255, 0, 0)
PURPLE = (255, 0, 255)
RED = (0, 0, 255)

BGR = tuple[int, int, int]


class FrameDecision(Enum):
    """What to do with an incoming image."""

    FIRST_FRAME = "first_frame"
    RESTART = "restart"
    TRACK = "track"
    FIRST_PUBLISH = "first_publish"
    PUBLISH = "publish"

    @property
    def process_image(self) -> bool:
        """Whether the image is handed to the tracker."""
        return self in (FrameDecision.TRACK, FrameDecision.FIRST_PUBLISH, FrameDecision.PUBLISH)

    @property
    def publish_frame(self) -> bool:
        """Whether the tracker treats the frame as one to publish."""
        return self in (FrameDecision.FIRST_PUBLISH, FrameDecision.PUBLISH)

    @property
    def send_cloud(self) -> bool:
        """Whether the feature cloud of the frame is actually sent."""
        return self is FrameDecision.PUBLISH


def _round_half_away(value: float) -> float:
    if math.isnan(value) or math.isinf(value):
        return value
    return math.copysign(math.floor(abs(value) + 0.5), value)


class PublishRateController:
    """Decides per image whether to track, publish or restart.

    Stamps are header stamps; the time used is the stamp divided by 1000.
    The first image only starts the clock; a gap of more than one second or
    a step backwards in time asks for a restart. Frames are published while
    the published rate does not exceed freq, and the first published frame
    is withheld.
    """

    def __init__(self, freq: int) -> None:
        if freq <= 0:
            raise ValueError("publishing frequency must be positive")
        self.freq = freq
        self._first_image = True
        self._first_image_time = 0.0
        self._last_image_time = 0.0
        self._pub_count = 1
        self._init_pub = False

    @property
    def pub_count(self) -> int:
        """Frames published since the rate window was last restarted."""
        return self._pub_count

    def update(self, stamp: float) -> FrameDecision:
        """Classify the image with the given header stamp."""
        time = stamp / 1000
        if self._first_image:
            self._first_image = False
            self._first_image_time = time
            self._last_image_time = time
            return FrameDecision.FIRST_FRAME

        if time - self._last_image_time > MAX_FRAME_GAP or time < self._last_image_time:
            _log.warning("images are not continuous, restarting the feature tracker")
            self._first_image = True
            self._last_image_time = 0.0
            self._pub_count = 1
            return FrameDecision.RESTART
        self._last_image_time = time

        elapsed = time - self._first_image_time
        if elapsed > 0:
            rate = self._pub_count / elapsed
        else:
            rate = math.inf if self._pub_count > 0 else math.nan

        if not _round_half_away(rate) <= self.freq:
            return FrameDecision.TRACK

        if abs(rate - self.freq) < RATE_TOLERANCE * self.freq:
            self._first_image_time = time
            self._pub_count = 0
        self._pub_count += 1

        if not self._init_pub:
            self._init_pub = True
            return FrameDecision.FIRST_PUBLISH
        return FrameDecision.PUBLISH


def _f32(value: float) -> float:
    return float(np.float32(value))


def build_feature_cloud(tracker, header: Header) -> PointCloud:
    """Cloud of the tracker's current features seen more than once.

    Points are the normalised coordinates (x, y, 1); channels hold the id,
    track count, velocity and pixel coordinates of each point.
    """
    values: dict[str, list[float]] = {name: [] for name in CHANNEL_NAMES}
    points: list[tuple[float, float, float]] = []
    rows = zip(
        tracker.ids,
        tracker.track_cnt,
        tracker.cur_un_pts,
        tracker.pts_velocity,
        tracker.cur_pts,
    )
    for ident, cnt, un, velocity, pixel in rows:
        if cnt <= 1:
            continue
        points.append((_f32(un[0]), _f32(un[1]), 1.0))
        values["id_of_point"].append(_f32(ident))
        values["track_cnt_of_point"].append(_f32(cnt))
        values["velocity_x_of_point"].append(_f32(velocity[0]))
        values["velocity_y_of_point"].append(_f32(velocity[1]))
        values["u_of_point"].append(_f32(pixel[0]))
        values["v_of_point"].append(_f32(pixel[1]))

    return PointCloud(
        header=Header(stamp=header.stamp, frame_id=CLOUD_FRAME_ID),
        points=points,
        channels=[Channel(name, values[name]) for name in CHANNEL_NAMES],
    )


def track_color(track_cnt: int) -> BGR:
    """BGR drawing colour for a feature tracked track_cnt times."""
    if track_cnt <= 20:
        return GREEN
    if track_cnt <= 40:
        return BLUE
    if track_cnt <= 60:
        return PURPLE
    return RED