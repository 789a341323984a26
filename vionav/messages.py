"""Plain message types passed between the processing stages."""

from __future__ import annotations

from dataclasses import dataclass, field

Vector3 = tuple[float, float, float]
Quaternion = tuple[float, float, float, float]

_ZERO_COVARIANCE: tuple[float, ...] = (0.0,) * 9


@dataclass
class Header:
    """Time stamp in seconds and the frame the data is expressed in."""

    stamp: float = 0.0
    frame_id: str = ""


@dataclass
class Channel:
    """A named list of per-point values."""

    name: str
    values: list[float] = field(default_factory=list)


@dataclass
class PointCloud:
    """Points with any number of named per-point channels."""

    header: Header = field(default_factory=Header)
    points: list[Vector3] = field(default_factory=list)
    channels: list[Channel] = field(default_factory=list)

    def channel(self, name: str) -> Channel:
        """The channel with the given name; the last one if several share it."""
        for candidate in reversed(self.channels):
            if candidate.name == name:
                return candidate
        raise KeyError(name)


@dataclass
class Odometry:
    """Pose and linear velocity; orientation is (x, y, z, w)."""

    header: Header = field(default_factory=Header)
    orientation: Quaternion = (0.0, 0.0, 0.0, 1.0)
    linear_velocity: Vector3 = (0.0, 0.0, 0.0)
    position: Vector3 = (0.0, 0.0, 0.0)


@dataclass
class ImuMeasurement:
    """Angular velocity and linear acceleration with row-major 3x3 covariances."""

    header: Header = field(default_factory=Header)
    angular_velocity: Vector3 = (0.0, 0.0, 0.0)
    linear_acceleration: Vector3 = (0.0, 0.0, 0.0)
    angular_velocity_covariance: tuple[float, ...] = _ZERO_COVARIANCE
    linear_acceleration_covariance: tuple[float, ...] = _ZERO_COVARIANCE

    def __post_init__(self) -> None:
        self.angular_velocity_covariance = tuple(self.angular_velocity_covariance)
        self.linear_acceleration_covariance = tuple(self.linear_acceleration_covariance)
        for cov in (self.angular_velocity_covariance, self.linear_acceleration_covariance):
            if len(cov) != 9:
                raise ValueError("covariance must have 9 entries")