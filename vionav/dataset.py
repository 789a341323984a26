"""Playback of a simulated flight dataset of IMU, ground truth and images."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

import numpy as np

from vionav.messages import Header, ImuMeasurement, Odometry

IMU_FILE = "imu_measure.txt"
GROUND_TRUTH_FILE = "ground_truth.txt"
MONO_DIR = "mono_pic"
DEPTH_DIR = "depth_pic"
IMAGE_EVERY = 5
DEFAULT_END_FLAG = "60.32800000"

_IMU_COVARIANCE = (0.25, 0.0, 0.0, 0.0, 0.25, 0.0, 0.0, 0.0, 0.25)


def _stamp(text: str) -> float:
    """Stamp of a time token: seconds in single precision, scaled by 1000."""
    try:
        seconds = np.float32(float(text))
    except ValueError:
        raise ValueError(f"invalid time stamp: {text!r}") from None
    return float(seconds * np.float32(1000.0))


def parse_imu_line(line: str) -> ImuMeasurement | None:
    """Parse 't wx wy wz ax ay az'; None when the line has another field count."""
    fields = line.split(" ")
    if len(fields) != 7:
        return None
    gyro = tuple(float(v) for v in fields[1:4])
    accel = tuple(float(v) for v in fields[4:7])
    return ImuMeasurement(
        header=Header(stamp=_stamp(fields[0]), frame_id="imu"),
        angular_velocity=gyro,
        linear_acceleration=accel,
        angular_velocity_covariance=_IMU_COVARIANCE,
        linear_acceleration_covariance=_IMU_COVARIANCE,
    )


def parse_ground_truth_line(line: str) -> Odometry | None:
    """Parse 't qw qx qy qz vx vy vz x y z'; None when the field count differs."""
    fields = line.split(" ")
    if len(fields) != 11:
        return None
    qw, qx, qy, qz = (float(v) for v in fields[1:5])
    return Odometry(
        header=Header(stamp=_stamp(fields[0]), frame_id="world"),
        orientation=(qx, qy, qz, qw),
        linear_velocity=tuple(float(v) for v in fields[5:8]),
        position=tuple(float(v) for v in fields[8:11]),
    )


def image_name(stamp_text: str) -> str:
    """File name of the image for a time token.

    Five characters are cut from the token starting two places after the
    decimal point, and '.jpg' is appended.
    """
    dot = stamp_text.find(".")
    if dot < 0:
        raise ValueError(f"time stamp has no decimal point: {stamp_text!r}")
    cut = dot + 3
    if cut > len(stamp_text):
        raise ValueError(f"time stamp too short for an image name: {stamp_text!r}")
    return stamp_text[:cut] + stamp_text[cut + 5 :] + ".jpg"


@dataclass
class _Frame:
    """Everything produced by one playback step."""

    imu: ImuMeasurement | None
    ground_truth: Odometry | None
    path: tuple[Odometry, ...] = ()
    path_stamp: float | None = None
    mono_image: Path | None = None
    depth_image: Path | None = None
    image_stamp: float | None = field(default=None)


def _next_line(stream: TextIO) -> str | None:
    line = stream.readline()
    if line == "":
        return None
    return line.rstrip("\n")


class DatasetPlayer:
    """Steps through a dataset directory, one IMU and ground-truth line per step.

    Every fifth step also names the mono and depth images for that time.
    Playback stops once the last IMU stamp equals end_flag or both files end.
    """

    def __init__(self, root: str | os.PathLike[str], end_flag: str = DEFAULT_END_FLAG) -> None:
        self.root = Path(root)
        self.end_flag = end_flag

    def frames(self) -> Iterator[_Frame]:
        """Yield the frames of the dataset in file order."""
        with (self.root / IMU_FILE).open(encoding="utf-8") as imu_file, (
            self.root / GROUND_TRUTH_FILE
        ).open(encoding="utf-8") as gt_file:
            poses: list[Odometry] = []
            path_stamp: float | None = None
            last_stamp = ""
            count = 0
            while last_stamp != self.end_flag:
                imu_line = _next_line(imu_file)
                gt_line = _next_line(gt_file)
                if imu_line is None and gt_line is None:
                    return
                count += 1

                imu_text = imu_line or ""
                imu = parse_imu_line(imu_text)
                if imu is not None:
                    last_stamp = imu_text.split(" ")[0]

                gt_text = gt_line or ""
                ground_truth = parse_ground_truth_line(gt_text)
                if ground_truth is not None:
                    path_stamp = ground_truth.header.stamp
                    poses.append(
                        Odometry(
                            header=Header(frame_id="world"),
                            orientation=ground_truth.orientation,
                            position=ground_truth.position,
                        )
                    )

                frame = _Frame(
                    imu=imu,
                    ground_truth=ground_truth,
                    path=tuple(poses),
                    path_stamp=path_stamp,
                )
                if count == IMAGE_EVERY:
                    name = image_name(gt_text.split(" ")[0])
                    frame.mono_image = self.root / MONO_DIR / name
                    frame.depth_image = self.root / DEPTH_DIR / name
                    frame.image_stamp = _stamp(last_stamp)
                    count = 0
                yield frame