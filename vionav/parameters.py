"""Configuration of the feature tracker."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class FeatureStrategy(IntEnum):
    """How new features are detected."""

    SHI_TOMASI = 1
    AKAZE = 2


@dataclass(frozen=True)
class TrackerParameters:
    """Image geometry, detection limits and display settings of the tracker."""

    row: int = 480
    col: int = 640
    focal_length: int = 443
    num_of_cam: int = 1
    image_topic: str = "/origin/mono_image_pub"
    imu_topic: str = "/origin/imu_measure_pub"
    min_dist: int = 30
    border_size: int = 2
    freq: int = 25
    f_threshold: float = 0.5
    equalize: bool = True
    feature_class: FeatureStrategy = FeatureStrategy.SHI_TOMASI
    show_track: int = 2
    opencv_show: bool = False
    max_cnt: int = 30

    def __post_init__(self) -> None:
        object.__setattr__(self, "feature_class", FeatureStrategy(self.feature_class))
        if self.row <= 0 or self.col <= 0:
            raise ValueError("image size must be positive")
        if self.focal_length <= 0:
            raise ValueError("focal length must be positive")
        if self.num_of_cam < 1:
            raise ValueError("at least one camera is required")
        if self.min_dist < 0:
            raise ValueError("minimum feature distance must not be negative")
        if self.border_size < 0 or 2 * self.border_size >= min(self.row, self.col):
            raise ValueError("border size does not fit the image")
        if self.freq <= 0:
            raise ValueError("tracking frequency must be positive")
        if self.f_threshold <= 0:
            raise ValueError("RANSAC threshold must be positive")
        if self.show_track not in (0, 1, 2):
            raise ValueError("show_track must be 0, 1 or 2")
        if self.max_cnt < 0:
            raise ValueError("maximum feature count must not be negative")