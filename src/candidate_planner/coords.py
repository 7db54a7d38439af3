"""Positions on the celestial sphere: frame-tagged coordinates and spherical geometry.

A ``SkyPosition`` is a (longitude, latitude) pair in radians tagged with the
frame it belongs to. Functions in this module that change frame return a new
position in the target frame; everything else requires matching frames.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from candidate_planner.angle_utils import format_radec, normalize_angle
from candidate_planner.constants import (
    DEGREES_PER_HOUR_RA,
    GALACTIC_POLE_DEC,
    GALACTIC_POLE_RA,
    HALF_WIDTH_CIRCUMPOLAR_HOURS,
    HOURS_PER_RADIAN,
    OBLIQUITY,
)

# acos arguments within this distance of +/-1 are treated as on the boundary
_ACOS_SLACK = 1e-12


class Frame(Enum):
    """Reference frame of a SkyPosition."""

    ECLIPTIC = 'ecliptic'
    EQUATORIAL = 'equatorial'
    TOPOCENTRIC = 'topocentric'
    GEOGRAPHIC = 'geographic'


_RADEC_FRAMES = (Frame.EQUATORIAL, Frame.TOPOCENTRIC)


@dataclass(frozen=True)
class SkyPosition:
    """Longitude-like and latitude-like angles (radians) in a given frame.

    For equatorial and topocentric frames lon is right ascension and lat is
    declination; for the geographic frame lon is east longitude.
    """

    lon: float
    lat: float
    frame: Frame = Frame.EQUATORIAL

    @property
    def hours(self) -> float:
        """Longitude (or RA) in hours."""
        return self.lon * HOURS_PER_RADIAN

    @property
    def lon_deg(self) -> float:
        return math.degrees(self.lon)

    @property
    def lat_deg(self) -> float:
        return math.degrees(self.lat)

    def radec_text(self) -> str:
        """'hh mm ss.ss +dd mm ss.s' for RA/Dec frames."""
        _require_radec(self)
        return format_radec(self.lon, self.lat)


class Visibility(Enum):
    """How an object relates to a minimum altitude at a given latitude."""

    RISES_AND_SETS = 'rises-and-sets'
    CIRCUMPOLAR = 'circumpolar'
    NEVER_RISES = 'never-rises'


@dataclass(frozen=True)
class RiseSet:
    """Rise/set classification and hours either side of the meridian above the limit."""

    kind: Visibility
    half_width_hours: float


def _require_same_frame(a: SkyPosition, b: SkyPosition) -> None:
    if a.frame is not b.frame:
        raise ValueError(f'Cannot combine positions in {a.frame.value} and {b.frame.value} frames')


def _require_radec(p: SkyPosition) -> None:
    if p.frame not in _RADEC_FRAMES:
        raise ValueError(f'Expected an RA/Dec position, got {p.frame.value} frame')


def _clamp_unit(x: float) -> float:
    return max(-1.0, min(1.0, x))


def angular_separation(a: SkyPosition, b: SkyPosition) -> float:
    """Great-circle distance between two positions in the same frame (radians)."""
    _require_same_frame(a, b)
    cos_d = math.sin(a.lat) * math.sin(b.lat) + math.cos(a.lat) * math.cos(b.lat) * math.cos(
        a.lon - b.lon
    )
    return math.acos(_clamp_unit(cos_d))


def ecliptic_to_equatorial(p: SkyPosition, obliquity: float = OBLIQUITY) -> SkyPosition:
    """Rotate an ecliptic (lon, lat) position to equatorial (RA, Dec), RA in [0, 2 pi)."""
    if p.frame is not Frame.ECLIPTIC:
        raise ValueError(f'Expected an ecliptic position, got {p.frame.value} frame')
    cb = math.cos(p.lat)
    x = cb * math.cos(p.lon)
    y = cb * math.sin(p.lon) * math.cos(obliquity) - math.sin(p.lat) * math.sin(obliquity)
    z = math.sin(p.lat) * math.cos(obliquity) + cb * math.sin(obliquity) * math.sin(p.lon)
    ra = normalize_angle(math.atan2(y, x))
    return SkyPosition(ra, math.atan2(z, math.hypot(x, y)), Frame.EQUATORIAL)


def equatorial_to_ecliptic(p: SkyPosition, obliquity: float = OBLIQUITY) -> SkyPosition:
    """Rotate an equatorial (RA, Dec) position to ecliptic (lon, lat), lon in [0, 2 pi)."""
    if p.frame is not Frame.EQUATORIAL:
        raise ValueError(f'Expected an equatorial position, got {p.frame.value} frame')
    cd = math.cos(p.lat)
    x = cd * math.cos(p.lon)
    y = cd * math.sin(p.lon) * math.cos(obliquity) + math.sin(p.lat) * math.sin(obliquity)
    z = math.sin(p.lat) * math.cos(obliquity) - cd * math.sin(obliquity) * math.sin(p.lon)
    lon = normalize_angle(math.atan2(y, x))
    return SkyPosition(lon, math.atan2(z, math.hypot(x, y)), Frame.ECLIPTIC)


def culmination_altitude(dec: float, latitude: float) -> float:
    """Altitude (degrees) of an object of declination dec at upper culmination.

    90 - |latitude - dec|; negative when the object never clears the horizon.
    """
    return 90.0 - abs(math.degrees(latitude) - math.degrees(dec))


def hour_angle_hours(position: SkyPosition, latitude: float, min_altitude_deg: float) -> float:
    """Hour angle (hours) at which an object crosses min_altitude_deg.

    Returns math.nan where the object never crosses that altitude at this
    latitude; see rise_set_hour_angle for a result that says which way.
    """
    _require_radec(position)
    dec = position.lat
    denom = math.cos(dec) * math.cos(latitude)
    if denom == 0.0:
        return math.nan
    x = (math.sin(math.radians(min_altitude_deg)) - math.sin(dec) * math.sin(latitude)) / denom
    if abs(x) > 1.0:
        if abs(x) - 1.0 > _ACOS_SLACK:
            return math.nan
        x = _clamp_unit(x)
    return math.degrees(math.acos(x)) / DEGREES_PER_HOUR_RA


def rise_set_hour_angle(position: SkyPosition, latitude: float, min_altitude_deg: float) -> RiseSet:
    """Classify visibility above min_altitude_deg and give the half width in hours.

    Where the hour-angle equation has no solution the culmination altitude
    decides: at or above the limit the object is circumpolar (12 h either
    side), below it the object never rises (0 h).

    Parameters:
        position: Object RA/Dec.
        latitude: Site latitude (radians).
        min_altitude_deg: Altitude threshold (degrees).
    """
    half_width = hour_angle_hours(position, latitude, min_altitude_deg)
    if not math.isnan(half_width):
        return RiseSet(Visibility.RISES_AND_SETS, half_width)
    if culmination_altitude(position.lat, latitude) >= min_altitude_deg:
        return RiseSet(Visibility.CIRCUMPOLAR, HALF_WIDTH_CIRCUMPOLAR_HOURS)
    return RiseSet(Visibility.NEVER_RISES, 0.0)


def midpoint(a: SkyPosition, b: SkyPosition) -> SkyPosition:
    """Point halfway along the great circle from a to b."""
    _require_same_frame(a, b)
    dlon = b.lon - a.lon
    bx = math.cos(b.lat) * math.cos(dlon)
    by = math.cos(b.lat) * math.sin(dlon)
    lat = math.atan2(
        math.sin(a.lat) + math.sin(b.lat),
        math.sqrt((math.cos(a.lat) + bx) ** 2 + by * by),
    )
    lon = normalize_angle(a.lon + math.atan2(by, math.cos(a.lat) + bx))
    return SkyPosition(lon, lat, a.frame)


def offset_point(p: SkyPosition, distance: float, bearing: float) -> SkyPosition:
    """Point at angular distance (radians) from p along a bearing clockwise from north.

    Bearings run clockwise on a chart drawn north up and east left, so a
    bearing of pi/2 points west (decreasing RA).
    """
    lat = math.asin(
        _clamp_unit(
            math.sin(p.lat) * math.cos(distance)
            + math.cos(p.lat) * math.sin(distance) * math.cos(bearing)
        )
    )
    lon = p.lon - math.atan2(
        math.sin(bearing) * math.sin(distance) * math.cos(p.lat),
        math.cos(distance) - math.sin(p.lat) * math.sin(lat),
    )
    return SkyPosition(normalize_angle(lon), lat, p.frame)


def galactic_latitude(p: SkyPosition) -> float:
    """Galactic latitude (degrees) of an RA/Dec position."""
    _require_radec(p)
    s = math.sin(GALACTIC_POLE_DEC) * math.sin(p.lat) + math.cos(GALACTIC_POLE_DEC) * math.cos(
        p.lat
    ) * math.cos(p.lon - GALACTIC_POLE_RA)
    return math.degrees(math.asin(_clamp_unit(s)))
