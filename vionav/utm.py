"""Conversion between WGS84 latitude/longitude and UTM coordinates."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

WGS84_A = 6378137.0
WGS84_ECCSQ = 0.00669437999013

_K0 = 0.9996
_FALSE_EASTING = 500000.0
_FALSE_NORTHING_SOUTH = 10000000.0
_BAND_LETTERS = "CDEFGHJKLMNPQRSTUVW"
_ZONE_PATTERN = re.compile(r"\s*([+-]?\d+)\s*(\S)")


@dataclass(frozen=True)
class UTMCoordinate:
    """A UTM position: northing and easting in metres, and zone such as '32U'."""

    northing: float
    easting: float
    zone: str


def utm_letter_designator(latitude: float) -> str:
    """UTM latitude band letter; 'Z' when outside 80S to 84N."""
    if 72.0 <= latitude <= 84.0:
        return "X"
    if -80.0 <= latitude < 72.0:
        return _BAND_LETTERS[int(math.floor((latitude + 80.0) / 8.0))]
    return "Z"


def _zone_number(latitude: float, longitude: float) -> int:
    zone = int((longitude + 180.0) / 6.0) + 1
    if 56.0 <= latitude < 64.0 and 3.0 <= longitude < 12.0:
        zone = 32
    if 72.0 <= latitude < 84.0:
        if 0.0 <= longitude < 9.0:
            zone = 31
        elif 9.0 <= longitude < 21.0:
            zone = 33
        elif 21.0 <= longitude < 33.0:
            zone = 35
        elif 33.0 <= longitude < 42.0:
            zone = 37
    return zone


def ll_to_utm(latitude: float, longitude: float) -> UTMCoordinate:
    """Convert latitude/longitude in decimal degrees to UTM."""
    e2 = WGS84_ECCSQ
    lat_rad = math.radians(latitude)
    long_rad = math.radians(longitude)

    zone_number = _zone_number(latitude, longitude)
    long_origin = float((zone_number - 1) * 6 - 180 + 3)
    long_origin_rad = long_origin * math.pi / 180.0
    zone = f"{zone_number}{utm_letter_designator(latitude)}"

    ecc_prime_sq = e2 / (1.0 - e2)
    sin_lat = math.sin(lat_rad)
    n = WGS84_A / math.sqrt(1.0 - e2 * sin_lat * sin_lat)
    t = math.tan(lat_rad) ** 2
    c = ecc_prime_sq * math.cos(lat_rad) ** 2
    a = math.cos(lat_rad) * (long_rad - long_origin_rad)

    m = WGS84_A * (
        (1.0 - e2 / 4.0 - 3.0 * e2**2 / 64.0 - 5.0 * e2**3 / 256.0) * lat_rad
        - (3.0 * e2 / 8.0 + 3.0 * e2**2 / 32.0 + 45.0 * e2**3 / 1024.0)
        * math.sin(2.0 * lat_rad)
        + (15.0 * e2**2 / 256.0 + 45.0 * e2**3 / 1024.0) * math.sin(4.0 * lat_rad)
        - (35.0 * e2**3 / 3072.0) * math.sin(6.0 * lat_rad)
    )

    easting = (
        _K0
        * n
        * (
            a
            + (1.0 - t + c) * a**3 / 6.0
            + (5.0 - 18.0 * t + t * t + 72.0 * c - 58.0 * ecc_prime_sq) * a**5 / 120.0
        )
        + _FALSE_EASTING
    )

    northing = _K0 * (
        m
        + n
        * math.tan(lat_rad)
        * (
            a * a / 2.0
            + (5.0 - t + 9.0 * c + 4.0 * c * c) * a**4 / 24.0
            + (61.0 - 58.0 * t + t * t + 600.0 * c - 330.0 * ecc_prime_sq)
            * a**6
            / 720.0
        )
    )
    if latitude < 0.0:
        northing += _FALSE_NORTHING_SOUTH

    return UTMCoordinate(northing=northing, easting=easting, zone=zone)


def utm_to_ll(northing: float, easting: float, zone: str) -> tuple[float, float]:
    """Convert UTM to (latitude, longitude) in decimal degrees."""
    match = _ZONE_PATTERN.match(zone)
    if match is None:
        raise ValueError(f"invalid UTM zone: {zone!r}")
    zone_number = int(match.group(1))
    zone_letter = match.group(2)

    e2 = WGS84_ECCSQ
    e1 = (1.0 - math.sqrt(1.0 - e2)) / (1.0 + math.sqrt(1.0 - e2))

    x = easting - _FALSE_EASTING
    y = northing
    if ord(zone_letter) < ord("N"):
        y -= _FALSE_NORTHING_SOUTH

    long_origin = (zone_number - 1.0) * 6.0 - 180.0 + 3.0
    ecc_prime_sq = e2 / (1.0 - e2)

    m = y / _K0
    mu = m / (WGS84_A * (1.0 - e2 / 4.0 - 3.0 * e2**2 / 64.0 - 5.0 * e2**3 / 256.0))

    phi1 = (
        mu
        + (3.0 * e1 / 2.0 - 27.0 * e1**3 / 32.0) * math.sin(2.0 * mu)
        + (21.0 * e1**2 / 16.0 - 55.0 * e1**4 / 32.0) * math.sin(4.0 * mu)
        + (151.0 * e1**3 / 96.0) * math.sin(6.0 * mu)
    )

    sin_phi = math.sin(phi1)
    n1 = WGS84_A / math.sqrt(1.0 - e2 * sin_phi * sin_phi)
    t1 = math.tan(phi1) ** 2
    c1 = ecc_prime_sq * math.cos(phi1) ** 2
    r1 = WGS84_A * (1.0 - e2) / (1.0 - e2 * sin_phi * sin_phi) ** 1.5
    d = x / (n1 * _K0)

    latitude = phi1 - (n1 * math.tan(phi1) / r1) * (
        d * d / 2.0
        - (5.0 + 3.0 * t1 + 10.0 * c1 - 4.0 * c1 * c1 - 9.0 * ecc_prime_sq) * d**4 / 24.0
        + (61.0 + 90.0 * t1 + 298.0 * c1 + 45.0 * t1 * t1 - 252.0 * ecc_prime_sq - 3.0 * c1 * c1)
        * d**6
        / 720.0
    )
    latitude = math.degrees(latitude)

    longitude = (
        d
        - (1.0 + 2.0 * t1 + c1) * d**3 / 6.0
        + (5.0 - 2.0 * c1 + 28.0 * t1 - 3.0 * c1 * c1 + 8.0 * ecc_prime_sq + 24.0 * t1 * t1)
        * d**5
        / 120.0
    ) / math.cos(phi1)
    longitude = long_origin + longitude / math.pi * 180.0

    return latitude, longitude