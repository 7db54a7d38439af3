"""Tests for frame-tagged sky positions and spherical geometry."""

from __future__ import annotations

import math

import cspyce
import pytest

from candidate_planner.constants import GALACTIC_POLE_DEC, GALACTIC_POLE_RA, OBLIQUITY, TWOPI
from candidate_planner.coords import (
    Frame,
    SkyPosition,
    Visibility,
    angular_separation,
    culmination_altitude,
    ecliptic_to_equatorial,
    equatorial_to_ecliptic,
    galactic_latitude,
    hour_angle_hours,
    midpoint,
    offset_point,
    rise_set_hour_angle,
)

_TEIDE_LAT = math.radians(28.3)


def _radec(ra_deg: float, dec_deg: float) -> SkyPosition:
    return SkyPosition(math.radians(ra_deg), math.radians(dec_deg), Frame.EQUATORIAL)


@pytest.mark.parametrize(
    'a,b',
    [((10.0, 20.0), (40.0, -5.0)), ((350.0, 60.0), (10.0, 55.0)), ((123.0, -80.0), (300.0, 10.0))],
)
def test_angular_separation_matches_spice(a: tuple[float, float], b: tuple[float, float]) -> None:
    """Separation agrees with SPICE vsep and is symmetric."""
    pa, pb = _radec(*a), _radec(*b)
    expected = cspyce.vsep(cspyce.radrec(1.0, pa.lon, pa.lat), cspyce.radrec(1.0, pb.lon, pb.lat))
    assert angular_separation(pa, pb) == pytest.approx(expected, rel=1e-9)
    assert angular_separation(pb, pa) == angular_separation(pa, pb)


def test_angular_separation_self_is_zero() -> None:
    """A position is at distance zero from itself."""
    p = _radec(201.3, -11.2)
    assert angular_separation(p, p) == pytest.approx(0.0, abs=1e-7)
    assert angular_separation(_radec(0.0, 0.0), _radec(90.0, 0.0)) == pytest.approx(math.pi / 2)


def test_frames_must_match() -> None:
    """Combining positions from different frames is refused."""
    equatorial = _radec(10.0, 10.0)
    topocentric = SkyPosition(equatorial.lon, equatorial.lat, Frame.TOPOCENTRIC)
    with pytest.raises(ValueError, match='frames'):
        angular_separation(equatorial, topocentric)
    with pytest.raises(ValueError):
        midpoint(equatorial, SkyPosition(0.1, 0.1, Frame.ECLIPTIC))
    with pytest.raises(ValueError):
        ecliptic_to_equatorial(equatorial)
    with pytest.raises(ValueError):
        equatorial_to_ecliptic(SkyPosition(0.1, 0.1, Frame.ECLIPTIC))
    with pytest.raises(ValueError):
        SkyPosition(0.1, 0.1, Frame.ECLIPTIC).radec_text()


def test_ecliptic_to_equatorial_known_point() -> None:
    """Ecliptic longitude 90 deg maps to RA 6h and Dec equal to the obliquity."""
    p = ecliptic_to_equatorial(SkyPosition(math.pi / 2, 0.0, Frame.ECLIPTIC))
    assert p.frame is Frame.EQUATORIAL
    assert p.lon == pytest.approx(math.pi / 2, abs=1e-12)
    assert p.lat == pytest.approx(OBLIQUITY, abs=1e-12)


@pytest.mark.parametrize('lon_deg', [0.0, 45.0, 135.0, 200.0, 359.5])
@pytest.mark.parametrize('lat_deg', [-80.0, -30.0, 0.0, 12.5, 75.0])
def test_ecliptic_equatorial_round_trip(lon_deg: float, lat_deg: float) -> None:
    """Ecliptic -> equatorial -> ecliptic returns the original angles within 1e-9 rad."""
    start = SkyPosition(math.radians(lon_deg), math.radians(lat_deg), Frame.ECLIPTIC)
    back = equatorial_to_ecliptic(ecliptic_to_equatorial(start))
    assert back.frame is Frame.ECLIPTIC
    assert abs(math.remainder(back.lon - start.lon, TWOPI)) < 1e-9
    assert back.lat == pytest.approx(start.lat, abs=1e-9)
    assert 0.0 <= back.lon < TWOPI


@pytest.mark.parametrize('lat_deg', [-75.0, -30.0, 30.0, 75.0])
def test_round_trip_at_equinox_stays_below_two_pi(lat_deg: float) -> None:
    """Longitudes that come back a hair below zero wrap to 0, never to 2 pi."""
    start = SkyPosition(0.0, math.radians(lat_deg), Frame.ECLIPTIC)
    back = equatorial_to_ecliptic(ecliptic_to_equatorial(start))
    assert 0.0 <= back.lon < TWOPI
    assert abs(math.remainder(back.lon, TWOPI)) < 1e-9


def test_rise_set_at_site_latitude_declination() -> None:
    """Dec equal to latitude above a 35 deg limit stays up about 4.2 h either side of transit."""
    position = _radec(100.0, 28.3)
    result = rise_set_hour_angle(position, _TEIDE_LAT, 35.0)
    sin_lat = math.sin(_TEIDE_LAT)
    cos_lat = math.cos(_TEIDE_LAT)
    expected = math.degrees(math.acos((math.sin(math.radians(35.0)) - sin_lat * sin_lat) / (cos_lat * cos_lat))) / 15.0
    assert result.kind is Visibility.RISES_AND_SETS
    assert result.half_width_hours == pytest.approx(expected, abs=1e-9)
    assert result.half_width_hours == pytest.approx(4.217, abs=0.01)


def test_rise_set_meridian_only_edge() -> None:
    """A limit equal to the culmination altitude leaves a zero-width window, not a failure."""
    result = rise_set_hour_angle(_radec(100.0, 28.3), _TEIDE_LAT, 90.0)
    assert result.kind is Visibility.RISES_AND_SETS
    assert result.half_width_hours == pytest.approx(0.0, abs=1e-5)


def test_rise_set_circumpolar_and_never_rises() -> None:
    """Undefined hour angles are split by the culmination altitude."""
    circumpolar = rise_set_hour_angle(_radec(0.0, 80.0), math.radians(60.0), 20.0)
    assert circumpolar.kind is Visibility.CIRCUMPOLAR
    assert circumpolar.half_width_hours == 12.0
    never = rise_set_hour_angle(_radec(0.0, -70.0), _TEIDE_LAT, 35.0)
    assert never.kind is Visibility.NEVER_RISES
    assert never.half_width_hours == 0.0
    assert math.isnan(hour_angle_hours(_radec(0.0, -70.0), _TEIDE_LAT, 35.0))


def test_rise_set_requires_radec() -> None:
    """Rise/set geometry needs an RA/Dec position."""
    with pytest.raises(ValueError):
        rise_set_hour_angle(SkyPosition(0.0, 0.0, Frame.ECLIPTIC), _TEIDE_LAT, 0.0)


def test_culmination_altitude() -> None:
    """Altitude at transit is 90 - |lat - dec| on either side of the zenith."""
    lat = math.radians(28.3)
    assert culmination_altitude(math.radians(28.3), lat) == pytest.approx(90.0)
    assert culmination_altitude(math.radians(48.3), lat) == pytest.approx(70.0)
    assert culmination_altitude(math.radians(-11.7), lat) == pytest.approx(50.0)


def test_midpoint_on_equator() -> None:
    """Midpoint of two equatorial points lies halfway along the equator."""
    mid = midpoint(_radec(0.0, 0.0), _radec(90.0, 0.0))
    assert mid.lon == pytest.approx(math.pi / 4)
    assert mid.lat == pytest.approx(0.0, abs=1e-12)
    assert mid.frame is Frame.EQUATORIAL


def test_midpoint_is_equidistant() -> None:
    """The midpoint is half the separation from each end."""
    a, b = _radec(350.0, 40.0), _radec(20.0, 10.0)
    mid = midpoint(a, b)
    half = angular_separation(a, b) / 2
    assert angular_separation(a, mid) == pytest.approx(half, abs=1e-9)
    assert angular_separation(b, mid) == pytest.approx(half, abs=1e-9)


def test_offset_point_north_and_west() -> None:
    """Bearing 0 moves north; bearing 90 deg moves to smaller RA."""
    start = SkyPosition(1.0, 0.2, Frame.EQUATORIAL)
    north = offset_point(start, 0.1, 0.0)
    assert north.lon == pytest.approx(1.0)
    assert north.lat == pytest.approx(0.3)
    west = offset_point(start, 0.1, math.pi / 2)
    assert west.lon < start.lon
    assert angular_separation(start, west) == pytest.approx(0.1, abs=1e-9)


def test_galactic_latitude() -> None:
    """The galactic pole is at +90 and the anticentre on the plane."""
    pole = SkyPosition(GALACTIC_POLE_RA, GALACTIC_POLE_DEC, Frame.EQUATORIAL)
    assert galactic_latitude(pole) == pytest.approx(90.0, abs=1e-5)
    assert galactic_latitude(_radec(86.405, 28.936)) == pytest.approx(0.0, abs=0.5)


def test_sky_position_helpers() -> None:
    """Hour and degree views of a position."""
    p = _radec(90.0, -45.0)
    assert p.hours == pytest.approx(6.0)
    assert p.lon_deg == pytest.approx(90.0)
    assert p.lat_deg == pytest.approx(-45.0)
    assert p.radec_text() == '06 00 00.00 -45 00 00.0'
