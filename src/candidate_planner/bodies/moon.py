"""Position and approximate phase of the Moon.

Unperturbed mean elements with secular drift (ecliptic of date). Errors
reach a degree or two, which is fine for judging how far a target is from
the Moon but not for occultation work.
"""

from __future__ import annotations

import math

from candidate_planner.angle_utils import normalize_angle
from candidate_planner.constants import (
    EARTH_RADIUS_AU,
    REFERENCE_NEW_MOON_JD,
    SCHLYTER_EPOCH_JD,
    SYNODIC_MONTH_DAYS,
    TWOPI,
)
from candidate_planner.coords import (
    Frame,
    SkyPosition,
    angular_separation,
    ecliptic_to_equatorial,
)
from candidate_planner.kepler import true_anomaly_radius
from candidate_planner.observatories import ObservingSite, topocentric
from candidate_planner.time_utils import Moment

_INCLINATION = math.radians(5.1454)
_SEMI_MAJOR_AXIS = 60.2666  # Earth radii
_ECCENTRICITY = 0.054900


def _geocentric(moment: Moment) -> tuple[SkyPosition, float]:
    """Geocentric equatorial position and distance in AU."""
    d = moment.jd - SCHLYTER_EPOCH_JD
    node = math.radians(125.1228 - 0.0529538083 * d)
    peri = math.radians(318.0634 + 0.1643573223 * d)
    m = normalize_angle(math.radians(115.3654 + 13.0649929509 * d))
    v, r = true_anomaly_radius(m, _ECCENTRICITY, _SEMI_MAJOR_AXIS)
    u = v + peri
    x = r * (math.cos(node) * math.cos(u) - math.sin(node) * math.sin(u) * math.cos(_INCLINATION))
    y = r * (math.sin(node) * math.cos(u) + math.cos(node) * math.sin(u) * math.cos(_INCLINATION))
    z = r * math.sin(u) * math.sin(_INCLINATION)
    ecliptic = SkyPosition(normalize_angle(math.atan2(y, x)), math.atan2(z, math.hypot(x, y)), Frame.ECLIPTIC)
    return (ecliptic_to_equatorial(ecliptic), r * EARTH_RADIUS_AU)


def moon_position(moment: Moment, site: ObservingSite | None = None) -> SkyPosition:
    """RA/Dec of the Moon: geocentric, or topocentric when a site is given."""
    equatorial, distance = _geocentric(moment)
    if site is None:
        return equatorial
    return topocentric(site, equatorial, moment, distance)


def moon_separation(position: SkyPosition, moment: Moment, site: ObservingSite) -> float:
    """Angle (degrees) between a position and the Moon at a moment.

    Topocentric positions are compared with the Moon as seen from the site,
    geocentric equatorial positions with the geocentric Moon.
    """
    moon = moon_position(moment, site if position.frame is Frame.TOPOCENTRIC else None)
    return math.degrees(angular_separation(position, moon))


def illuminated_fraction(moment: Moment) -> float:
    """Approximate illuminated fraction of the Moon's disc, 0 (new) to 1 (full).

    Treats illumination as a cosine of the time since a reference new Moon
    modulo the mean synodic month. The real lunar orbit makes actual phases
    drift from this by up to about half a day.
    """
    cycle = ((moment.jd - REFERENCE_NEW_MOON_JD) / SYNODIC_MONTH_DAYS) % 1.0
    return 0.5 * (math.cos((cycle - 0.5) * TWOPI) + 1.0)


def illuminated_percent(moment: Moment) -> float:
    """illuminated_fraction as a percentage."""
    return 100.0 * illuminated_fraction(moment)
