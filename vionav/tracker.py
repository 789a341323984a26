"""KLT-style feature tracking across consecutive grey images.

Image operations (optical flow, RANSAC fundamental-matrix filtering, corner
detection, histogram equalisation) and the camera model are supplied by the
caller, so the tracker itself only keeps the bookkeeping of points, ids, track
counts, the spacing mask and the normalised coordinates and velocities.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Protocol, TypeVar

import numpy as np

from vionav.parameters import TrackerParameters
from vionav.timing import TicToc

_log = logging.getLogger(__name__)

Point = tuple[float, float]
T = TypeVar("T")

QUALITY_LEVEL = 0.05
RANSAC_CONFIDENCE = 0.99
MIN_POINTS_FOR_F = 8
MASK_FREE = 255


class CameraModel(Protocol):
    """Lifts a pixel to a ray in the camera frame, removing distortion."""

    def lift_projective(self, point: Point) -> Sequence[float]: ...


OpticalFlow = Callable[
    [np.ndarray, np.ndarray, list[Point]],
    tuple[Sequence[Point], Sequence[int], Sequence[float]],
]
FundamentalFilter = Callable[[list[Point], list[Point], float, float], Sequence[int]]
Detector = Callable[[np.ndarray, int, float, int, np.ndarray], Sequence[Point]]
Equalizer = Callable[[np.ndarray], np.ndarray]


def in_border(point: Point, params: TrackerParameters) -> bool:
    """Whether the rounded pixel lies inside the image minus its border."""
    x = round(point[0])
    y = round(point[1])
    b = params.border_size
    return b <= x < params.col - b and b <= y < params.row - b


def reduce_by_status(values: Sequence[T], status: Sequence[int]) -> list[T]:
    """Keep the values whose status entry is non-zero.

    The status may be longer than the values; extra entries are ignored.
    """
    if len(status) < len(values):
        raise ValueError("status is shorter than the values it filters")
    return [value for value, keep in zip(values, status) if keep]


def _as_point(point: Sequence[float]) -> Point:
    return (float(point[0]), float(point[1]))


def _percent(new: int, old: int) -> float:
    return 100.0 * new / old if old else 0.0


class FeatureTracker:
    """Tracks features from frame to frame and assigns them global ids.

    Points are kept for three frames: prev (processed before), cur (last
    processed) and forw (just received). After read_image the cur lists
    describe the newest frame.
    """

    def __init__(
        self,
        camera: CameraModel,
        params: TrackerParameters,
        flow: OpticalFlow,
        fundamental: FundamentalFilter,
        detector: Detector,
        equalizer: Equalizer | None = None,
    ) -> None:
        self.camera = camera
        self.params = params
        self._flow = flow
        self._fundamental = fundamental
        self._detector = detector
        self._equalizer = equalizer

        self.cur_time = 0.0
        self.prev_time = 0.0
        self.prev_img: np.ndarray | None = None
        self.cur_img: np.ndarray | None = None
        self.forw_img: np.ndarray | None = None

        self.prev_pts: list[Point] = []
        self.cur_pts: list[Point] = []
        self.forw_pts: list[Point] = []
        self.prev_un_pts: list[Point] = []
        self.cur_un_pts: list[Point] = []
        self.prev_un_pts_map: dict[int, Point] = {}
        self.cur_un_pts_map: dict[int, Point] = {}
        self.pts_velocity: list[Point] = []
        self.ids: list[int] = []
        self.track_cnt: list[int] = []

        self.mask: np.ndarray | None = None
        self.n_pts: list[Point] = []
        self.n_id = 0

    # ------------------------------------------------------------------ frames

    def read_image(self, image, time: float, publish: bool = False) -> None:
        """Process a new grey image taken at time.

        When publish is set, outliers are rejected with the fundamental matrix
        and new features are detected to refill up to max_cnt.
        """
        self.cur_time = time
        img = np.asarray(image)
        if self.params.equalize and self._equalizer is not None:
            timer = TicToc()
            img = np.asarray(self._equalizer(img))
            _log.debug("histogram equalisation took %fms", timer.toc())

        if self.forw_img is None:
            self.prev_img = self.cur_img = self.forw_img = img
        else:
            self.forw_img = img

        self.forw_pts = []
        if self.cur_pts:
            self._track()

        self.track_cnt = [n + 1 for n in self.track_cnt]

        if publish:
            self.reject_with_f()
            self.set_mask()
            if self.params.max_cnt - len(self.forw_pts) > 0:
                self.add_points()
            else:
                self.n_pts = []

        self.update_ids()

        self.prev_img = self.cur_img
        self.cur_img = self.forw_img
        self.prev_pts = self.cur_pts
        self.cur_pts = self.forw_pts
        self.prev_un_pts = self.cur_un_pts

        self.undistorted_points()
        self.prev_time = self.cur_time

    def _track(self) -> None:
        timer = TicToc()
        raw_pts, raw_status, raw_err = self._flow(self.cur_img, self.forw_img, list(self.cur_pts))
        pts = [_as_point(p) for p in raw_pts]
        status = [1 if s else 0 for s in raw_status]
        err = [float(e) for e in raw_err]
        if not len(pts) == len(status) == len(err) == len(self.cur_pts):
            raise ValueError("optical flow returned results of the wrong length")

        limit = (max(err) + sum(err) / len(err)) / 2
        status = [
            int(bool(s) and in_border(p, self.params) and not e > limit)
            for p, s, e in zip(pts, status, err)
        ]

        size_old = len(self.cur_pts)
        self.forw_pts = pts
        self._reduce_all(status)
        _log.debug(
            "optical flow: %d -> %d : %.2f%%, took %fms",
            size_old,
            len(self.forw_pts),
            _percent(len(self.forw_pts), size_old),
            timer.toc(),
        )

    def _reduce_all(self, status: Sequence[int]) -> None:
        self.prev_pts = reduce_by_status(self.prev_pts, status)
        self.cur_pts = reduce_by_status(self.cur_pts, status)
        self.forw_pts = reduce_by_status(self.forw_pts, status)
        self.ids = reduce_by_status(self.ids, status)
        self.track_cnt = reduce_by_status(self.track_cnt, status)

    # ---------------------------------------------------------------- outliers

    def _undistorted_pixel(self, point: Point) -> Point:
        x, y, z = (float(v) for v in self.camera.lift_projective(point))
        f = self.params.focal_length
        return (f * x / z + self.params.col / 2.0, f * y / z + self.params.row / 2.0)

    def reject_with_f(self) -> None:
        """Drop matches that disagree with a RANSAC fundamental matrix.

        Needs at least eight tracked points; otherwise nothing is done.
        """
        if len(self.forw_pts) < MIN_POINTS_FOR_F:
            return
        if len(self.cur_pts) != len(self.forw_pts):
            raise ValueError("current and forward points differ in number")
        timer = TicToc()
        un_cur = [self._undistorted_pixel(p) for p in self.cur_pts]
        un_forw = [self._undistorted_pixel(p) for p in self.forw_pts]
        status = [
            1 if s else 0
            for s in self._fundamental(un_cur, un_forw, self.params.f_threshold, RANSAC_CONFIDENCE)
        ]
        size_old = len(self.cur_pts)
        self._reduce_all(status)
        _log.debug(
            "fundamental matrix rejection: %d -> %d : %.2f%%, took %fms",
            size_old,
            len(self.forw_pts),
            _percent(len(self.forw_pts), size_old),
            timer.toc(),
        )

    # -------------------------------------------------------------------- mask

    @staticmethod
    def _pixel(point: Point) -> tuple[int, int]:
        return round(point[0]), round(point[1])

    def _fill_circle(self, center: Point, radius: int) -> None:
        assert self.mask is not None
        cx, cy = self._pixel(center)
        rows, cols = self.mask.shape
        y0, y1 = max(cy - radius, 0), min(cy + radius + 1, rows)
        x0, x1 = max(cx - radius, 0), min(cx + radius + 1, cols)
        if y0 >= y1 or x0 >= x1:
            return
        ys, xs = np.ogrid[y0:y1, x0:x1]
        disk = (xs - cx) ** 2 + (ys - cy) ** 2 <= radius * radius
        self.mask[y0:y1, x0:x1][disk] = 0

    def _mask_free(self, point: Point) -> bool:
        assert self.mask is not None
        x, y = self._pixel(point)
        rows, cols = self.mask.shape
        if not (0 <= x < cols and 0 <= y < rows):
            return False
        return int(self.mask[y, x]) == MASK_FREE

    def set_mask(self) -> None:
        """Keep only well-spaced points, favouring those tracked longest.

        The mask marks with 0 a disc of radius min_dist around every kept point.
        """
        timer = TicToc()
        self.mask = np.full((self.params.row, self.params.col), MASK_FREE, dtype=np.uint8)

        entries = sorted(
            zip(self.track_cnt, self.forw_pts, self.cur_pts, self.ids),
            key=lambda entry: entry[0],
            reverse=True,
        )

        self.forw_pts = []
        self.cur_pts = []
        self.ids = []
        self.track_cnt = []
        for cnt, forw, cur, ident in entries:
            if self._mask_free(forw):
                self.forw_pts.append(forw)
                self.cur_pts.append(cur)
                self.ids.append(ident)
                self.track_cnt.append(cnt)
                self._fill_circle(forw, self.params.min_dist)

        _log.debug("setting the mask took %fms", timer.toc())

    # -------------------------------------------------------------- detection

    def add_points(self) -> None:
        """Detect new features outside the mask and append them with id -1."""
        if self.forw_img is None:
            raise RuntimeError("no image has been read")
        timer = TicToc()
        if self.mask is None:
            _log.warning("mask is empty")
        elif self.mask.dtype != np.uint8 or self.mask.ndim != 2:
            _log.warning("mask type wrong")
        elif self.mask.shape != self.forw_img.shape[:2]:
            _log.warning("wrong mask size")

        size_old = len(self.forw_pts)
        needed = self.params.max_cnt - size_old
        if needed > 0:
            found = self._detector(
                self.forw_img, needed, QUALITY_LEVEL, self.params.min_dist, self.mask
            )
            self.n_pts = [_as_point(p) for p in found][:needed]
        else:
            self.n_pts = []

        for point in self.n_pts:
            self.forw_pts.append(point)
            self.ids.append(-1)
            self.track_cnt.append(1)

        _log.debug(
            "new features: %d -> %d : %.2f%%, took %fms",
            size_old,
            len(self.forw_pts),
            _percent(len(self.forw_pts), size_old),
            timer.toc(),
        )

    def update_ids(self) -> None:
        """Give every point with id -1 the next global id."""
        for i, ident in enumerate(self.ids):
            if ident == -1:
                self.ids[i] = self.n_id
                self.n_id += 1
        _log.debug("total features (n_id): %d", self.n_id)

    # ------------------------------------------------------------ coordinates

    def undistorted_points(self) -> None:
        """Compute normalised coordinates of cur_pts and their velocities."""
        self.cur_un_pts = []
        self.cur_un_pts_map = {}
        for point, ident in zip(self.cur_pts, self.ids):
            x, y, z = (float(v) for v in self.camera.lift_projective(point))
            un = (x / z, y / z)
            self.cur_un_pts.append(un)
            self.cur_un_pts_map.setdefault(ident, un)

        self.pts_velocity = []
        if self.prev_un_pts_map:
            dt = self.cur_time - self.prev_time
            for un, ident in zip(self.cur_un_pts, self.ids):
                previous = self.prev_un_pts_map.get(ident) if ident != -1 else None
                if previous is None:
                    self.pts_velocity.append((0.0, 0.0))
                else:
                    self.pts_velocity.append(
                        ((un[0] - previous[0]) / dt, (un[1] - previous[1]) / dt)
                    )
        else:
            self.pts_velocity = [(0.0, 0.0)] * len(self.cur_pts)
        self.prev_un_pts_map = self.cur_un_pts_map