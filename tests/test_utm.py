import pytest

from vionav.utm import UTMCoordinate, ll_to_utm, utm_letter_designator, utm_to_ll


def test_letter_designator_limits():
    assert utm_letter_designator(84.0) == "X"
    assert utm_letter_designator(72.0) == "X"
    assert utm_letter_designator(85.0) == "Z"
    assert utm_letter_designator(-81.0) == "Z"


def test_letter_designator_hemisphere_boundary():
    assert utm_letter_designator(0.0) == "N"
    assert utm_letter_designator(-0.5) == "M"
    assert utm_letter_designator(-80.0) == "C"


@pytest.mark.parametrize(
    "lat,lon",
    [(48.1, 11.6), (-33.9, 18.4), (1.3, 103.8), (60.2, 5.3), (-45.0, -70.0), (75.0, 15.0)],
)
def test_round_trip(lat, lon):
    utm = ll_to_utm(lat, lon)
    back_lat, back_lon = utm_to_ll(utm.northing, utm.easting, utm.zone)
    assert back_lat == pytest.approx(lat, abs=1e-6)
    assert back_lon == pytest.approx(lon, abs=1e-6)


def test_central_meridian_has_false_easting():
    utm = ll_to_utm(45.0, 9.0)
    assert utm.easting == pytest.approx(500000.0)
    assert utm.zone.startswith("32")


def test_equator_has_zero_northing():
    utm = ll_to_utm(0.0, 9.0)
    assert utm.northing == pytest.approx(0.0, abs=1e-6)


def test_southern_hemisphere_offset():
    utm = ll_to_utm(-10.0, 20.0)
    assert utm.northing > 5_000_000.0
    assert utm.zone.endswith(utm_letter_designator(-10.0))


def test_svalbard_special_zone():
    utm = ll_to_utm(78.0, 15.0)
    assert utm.zone == "33X"


def test_result_is_utm_coordinate_value():
    utm = ll_to_utm(10.0, 10.0)
    assert utm == UTMCoordinate(utm.northing, utm.easting, utm.zone)
    assert utm.zone.endswith("P")


def test_invalid_zone_raises():
    with pytest.raises(ValueError):
        utm_to_ll(0.0, 500000.0, "abc")