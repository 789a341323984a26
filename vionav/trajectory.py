"""Recording of odometry messages as plain-text trajectory lines."""

from __future__ import annotations

from types import TracebackType
from typing import TextIO

from vionav.messages import Odometry


def format_odometry_line(odometry: Odometry) -> str:
    """One trajectory line: time qx qy qz qw vx vy vz x y z, fixed 8 decimals.

    The time written is the header stamp divided by 1000.
    """
    values = (
        odometry.header.stamp / 1000,
        *odometry.orientation,
        *odometry.linear_velocity,
        *odometry.position,
    )
    return " ".join(f"{value:.8f}" for value in values)


class TrajectoryRecorder:
    """Writes one line per odometry message to a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def record(self, odometry: Odometry) -> None:
        """Append the line for odometry and flush the stream."""
        self._stream.write(format_odometry_line(odometry) + "\n")
        self._stream.flush()

    def __enter__(self) -> TrajectoryRecorder:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._stream.close()