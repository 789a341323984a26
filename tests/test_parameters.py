import dataclasses

import pytest

from vionav.parameters import FeatureStrategy, TrackerParameters


def test_defaults_match_configuration():
    params = TrackerParameters()
    assert (params.row, params.col) == (480, 640)
    assert params.focal_length == 443
    assert params.min_dist == 30
    assert params.border_size == 2
    assert params.freq == 25
    assert params.f_threshold == 0.5
    assert params.show_track == 2
    assert params.max_cnt == 30
    assert params.image_topic == "/origin/mono_image_pub"
    assert params.imu_topic == "/origin/imu_measure_pub"
    assert params.equalize is True
    assert params.opencv_show is False


def test_default_strategy_is_shi_tomasi():
    assert TrackerParameters().feature_class is FeatureStrategy.SHI_TOMASI


def test_integer_strategy_is_coerced():
    params = TrackerParameters(feature_class=2)
    assert params.feature_class is FeatureStrategy.AKAZE


def test_unknown_strategy_raises():
    with pytest.raises(ValueError):
        TrackerParameters(feature_class=3)


@pytest.mark.parametrize(
    "overrides",
    [
        {"row": 0},
        {"col": -1},
        {"focal_length": 0},
        {"num_of_cam": 0},
        {"min_dist": -1},
        {"border_size": 300},
        {"freq": 0},
        {"f_threshold": 0.0},
        {"show_track": 3},
        {"max_cnt": -5},
    ],
)
def test_invalid_values_raise(overrides):
    with pytest.raises(ValueError):
        TrackerParameters(**overrides)


def test_parameters_are_frozen():
    params = TrackerParameters()
    with pytest.raises(dataclasses.FrozenInstanceError):
        params.row = 10
    assert params.row == 480


def test_replace_keeps_other_values():
    params = dataclasses.replace(TrackerParameters(), max_cnt=150)
    assert params.max_cnt == 150
    assert params.col == TrackerParameters().col