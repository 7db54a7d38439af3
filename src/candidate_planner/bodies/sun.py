"""Geocentric position of the Sun from mean elements (ecliptic of date)."""

from __future__ import annotations

import math
from dataclasses import dataclass

from candidate_planner.angle_utils import normalize_angle
from candidate_planner.constants import SCHLYTER_EPOCH_JD
from candidate_planner.coords import Frame, SkyPosition, ecliptic_to_equatorial
from candidate_planner.kepler import true_anomaly_radius
from candidate_planner.time_utils import Moment


@dataclass(frozen=True)
class SunState:
    """Sun as seen from the geocentre at one moment.

    x and y are geocentric ecliptic rectangular coordinates in AU (the Sun
    lies in the ecliptic, so z is 0).
    """

    ecliptic: SkyPosition
    equatorial: SkyPosition
    distance: float
    mean_longitude: float
    x: float
    y: float


def sun_state(moment: Moment) -> SunState:
    """Evaluate the Sun's mean-element orbit at a moment."""
    d = moment.jd - SCHLYTER_EPOCH_JD
    w = math.radians(282.9404 + 4.70935e-5 * d)  # longitude of perihelion
    e = 0.016709 - 1.151e-9 * d
    m = normalize_angle(math.radians(356.0470 + 0.9856002585 * d))
    v, r = true_anomaly_radius(m, e, 1.0)
    lon = normalize_angle(v + w)
    ecliptic = SkyPosition(lon, 0.0, Frame.ECLIPTIC)
    return SunState(
        ecliptic=ecliptic,
        equatorial=ecliptic_to_equatorial(ecliptic),
        distance=r,
        mean_longitude=normalize_angle(w + m),
        x=r * math.cos(lon),
        y=r * math.sin(lon),
    )


def sun_position(moment: Moment) -> SkyPosition:
    """Geocentric equatorial RA/Dec of the Sun."""
    return sun_state(moment).equatorial
