import io

import pytest

from vionav.messages import Header, Odometry
from vionav.trajectory import TrajectoryRecorder, format_odometry_line


def _sample():
    return Odometry(
        header=Header(stamp=60328.0, frame_id="world"),
        orientation=(0.1, -0.2, 0.3, 0.9),
        linear_velocity=(1.5, -2.25, 0.125),
        position=(10.0, -3.5, 7.75),
    )


def test_identity_pose_line():
    line = format_odometry_line(Odometry())
    assert line == " ".join(["0.00000000"] * 4 + ["1.00000000"] + ["0.00000000"] * 6)


def test_line_has_eleven_fields_with_eight_decimals():
    fields = format_odometry_line(_sample()).split(" ")
    assert len(fields) == 11
    for text in fields:
        assert len(text.split(".")[1]) == 8


def test_line_round_trip():
    odom = _sample()
    fields = [float(text) for text in format_odometry_line(odom).split(" ")]
    assert fields[0] * 1000 == pytest.approx(odom.header.stamp)
    assert tuple(fields[1:5]) == pytest.approx(odom.orientation)
    assert tuple(fields[5:8]) == pytest.approx(odom.linear_velocity)
    assert tuple(fields[8:11]) == pytest.approx(odom.position)


def test_recorder_writes_lines_in_order():
    stream = io.StringIO()
    recorder = TrajectoryRecorder(stream)
    first = _sample()
    second = Odometry(header=Header(stamp=61000.0))
    recorder.record(first)
    recorder.record(second)
    lines = stream.getvalue().splitlines()
    assert lines == [format_odometry_line(first), format_odometry_line(second)]
    assert stream.getvalue().endswith("\n")


def test_context_manager_closes_stream():
    stream = io.StringIO()
    with TrajectoryRecorder(stream) as recorder:
        recorder.record(_sample())
        assert stream.getvalue().count("\n") == 1
    assert stream.closed


def test_recorder_writes_to_file(tmp_path):
    path = tmp_path / "riekf_esti.txt"
    with TrajectoryRecorder(path.open("w")) as recorder:
        recorder.record(_sample())
    assert path.read_text().strip() == format_odometry_line(_sample())