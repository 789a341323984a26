import numpy as np
import pytest

from vionav.depth import DepthRecovery, depth_from_pixel
from vionav.messages import Channel, Header, PointCloud


def _cloud(stamp, us, vs):
    return PointCloud(
        header=Header(stamp=stamp, frame_id="camera"),
        points=[(float(u), float(v), 1.0) for u, v in zip(us, vs)],
        channels=[
            Channel("id_of_point", [float(i) for i in range(len(us))]),
            Channel("u_of_point", list(us)),
            Channel("v_of_point", list(vs)),
        ],
    )


def _image():
    img = np.zeros((10, 10), dtype=np.uint8)
    img[3, 4] = 255
    img[2, 2] = 100
    img[7, 8] = 50
    return img


def test_saturated_pixel_is_zero_depth():
    assert depth_from_pixel(255, 0.01, 8.0) == 0.0


def test_zero_pixel_has_no_depth():
    assert depth_from_pixel(0, 0.01, 8.0) is None


def test_depth_is_linear_above_offset():
    d1 = depth_from_pixel(40, 0.01, 8.0) - 0.01
    d2 = depth_from_pixel(80, 0.01, 8.0) - 0.01
    assert d2 == pytest.approx(2 * d1)


def test_depth_increases_with_pixel_value():
    assert depth_from_pixel(1, 0.01, 8.0) < depth_from_pixel(254, 0.01, 8.0)


def test_pixel_out_of_range_raises():
    with pytest.raises(ValueError):
        depth_from_pixel(256, 0.01, 8.0)


def test_process_adds_depth_channel():
    rec = DepthRecovery(0.01, 8.0)
    rec.add_depth_image(5.0, _image())
    cloud = _cloud(5.0, [4.0, 6.0, 2.0, 0.0, 20.0], [3.0, 5.0, 2.0, 1.0, 1.0])
    out = rec.process(cloud)
    assert out.channels[-1].name == "Z_of_point"
    assert out.channels[-1].values == [0.0, depth_from_pixel(100, 0.01, 8.0)]
    assert [c.name for c in out.channels[:-1]] == [c.name for c in cloud.channels]
    assert out.points == cloud.points
    assert out.header.stamp == 5.0
    assert len(cloud.channels) == 3


def test_image_is_consumed():
    rec = DepthRecovery()
    rec.add_depth_image(1.0, _image())
    assert len(rec) == 1
    rec.process(_cloud(1.0, [2.0], [2.0]))
    assert len(rec) == 0
    assert rec.process(_cloud(1.0, [2.0], [2.0])) is None


def test_missing_image_returns_none():
    rec = DepthRecovery()
    rec.add_depth_image(1.0, _image())
    assert rec.process(_cloud(2.0, [2.0], [2.0])) is None
    assert len(rec) == 1


def test_coordinates_are_rounded():
    rec = DepthRecovery(0.01, 8.0)
    rec.add_depth_image(1.0, _image())
    out = rec.process(_cloud(1.0, [7.6], [7.4]))
    assert out.channel("Z_of_point").values == [depth_from_pixel(50, 0.01, 8.0)]


def test_first_image_for_stamp_wins():
    rec = DepthRecovery(0.01, 8.0)
    rec.add_depth_image(1.0, _image())
    rec.add_depth_image(1.0, np.full((10, 10), 255, dtype=np.uint8))
    out = rec.process(_cloud(1.0, [2.0], [2.0]))
    assert out.channel("Z_of_point").values == [depth_from_pixel(100, 0.01, 8.0)]


def test_mismatched_channels_raise():
    rec = DepthRecovery()
    rec.add_depth_image(1.0, _image())
    cloud = _cloud(1.0, [2.0, 3.0], [2.0, 3.0])
    cloud.channel("v_of_point").values.pop()
    with pytest.raises(ValueError):
        rec.process(cloud)


def test_missing_u_channel_raises():
    rec = DepthRecovery()
    rec.add_depth_image(1.0, _image())
    cloud = PointCloud(header=Header(stamp=1.0), channels=[Channel("v_of_point", [1.0])])
    with pytest.raises(KeyError):
        rec.process(cloud)


def test_colour_image_rejected():
    rec = DepthRecovery()
    with pytest.raises(ValueError):
        rec.add_depth_image(1.0, np.zeros((4, 4, 3), dtype=np.uint8))