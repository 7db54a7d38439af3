"""Two-body propagation of minor-planet and comet orbits to topocentric RA/Dec.

Elements are heliocentric, referred to the J2000 ecliptic. The chain is:
anomaly and radius -> heliocentric ecliptic rectangular -> minus Earth (VSOP87)
-> geocentric ecliptic -> equatorial -> topocentric. No light-time,
aberration, nutation or planetary perturbations are applied, which limits
accuracy to roughly an arcminute for well-determined orbits near epoch.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from candidate_planner.angle_utils import normalize_angle
from candidate_planner.bodies.earth import earth_position
from candidate_planner.constants import GAUSS_K, PARABOLIC_THRESHOLD, TWOPI
from candidate_planner.coords import Frame, SkyPosition, ecliptic_to_equatorial
from candidate_planner.kepler import near_parabolic, true_anomaly_radius
from candidate_planner.observatories import ObservingSite, topocentric
from candidate_planner.time_utils import Moment


@dataclass(frozen=True)
class OrbitalElements:
    """Osculating heliocentric elements of one object.

    Angles are radians, distances AU, mean motion radians/day. Missing
    perihelion distance, mean motion and perihelion time are derived from the
    others. Instances are replaced wholesale when an orbit is updated.
    """

    epoch: Moment
    mean_anomaly: float
    inclination: float
    node: float
    perihelion_arg: float
    semi_major_axis: float
    eccentricity: float
    perihelion_distance: float | None = None
    mean_motion: float | None = None
    perihelion_time: Moment | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        e = self.eccentricity
        a = self.semi_major_axis
        if e < 0.0:
            raise ValueError(f'Negative eccentricity {e}')
        if e < PARABOLIC_THRESHOLD and a <= 0.0:
            raise ValueError(f'Elliptical orbit needs a positive semi-major axis, got {a}')
        if self.perihelion_distance is None:
            if a <= 0.0:
                raise ValueError('Perihelion distance required when the semi-major axis is not positive')
            object.__setattr__(self, 'perihelion_distance', a * (1.0 - e))
        if self.mean_motion is None and a > 0.0:
            object.__setattr__(self, 'mean_motion', GAUSS_K / a**1.5)
        if self.perihelion_time is None:
            if not self.mean_motion:
                raise ValueError('Perihelion time required when the mean motion is unknown')
            m = math.remainder(self.mean_anomaly, TWOPI)
            object.__setattr__(self, 'perihelion_time', self.epoch.plus(-m / self.mean_motion))

    @classmethod
    def from_degrees(
        cls,
        epoch: Moment,
        mean_anomaly: float,
        perihelion_arg: float,
        node: float,
        inclination: float,
        eccentricity: float,
        semi_major_axis: float,
        mean_motion: float | None = None,
    ) -> OrbitalElements:
        """Build from angles in degrees (mean motion in degrees/day), in orbit-catalog column order."""
        return cls(
            epoch=epoch,
            mean_anomaly=math.radians(mean_anomaly),
            inclination=math.radians(inclination),
            node=math.radians(node),
            perihelion_arg=math.radians(perihelion_arg),
            semi_major_axis=semi_major_axis,
            eccentricity=eccentricity,
            mean_motion=math.radians(mean_motion) if mean_motion is not None else None,
        )

    @property
    def is_near_parabolic(self) -> bool:
        return self.eccentricity >= PARABOLIC_THRESHOLD


@dataclass(frozen=True)
class ObjectState:
    """Where an object is at one moment, as seen from one site.

    position is topocentric RA/Dec; equatorial is the geocentric RA/Dec;
    heliocentric is the heliocentric ecliptic longitude/latitude. r and delta
    are heliocentric and geocentric distances in AU; phase_angle is the
    Sun-object-Earth angle in radians.
    """

    position: SkyPosition
    equatorial: SkyPosition
    heliocentric: SkyPosition
    r: float
    delta: float
    phase_angle: float


def anomaly_and_radius(elements: OrbitalElements, moment: Moment) -> tuple[float, float]:
    """True anomaly (radians) and heliocentric distance (AU) at a moment."""
    if elements.is_near_parabolic:
        assert elements.perihelion_time is not None
        assert elements.perihelion_distance is not None
        return near_parabolic(
            moment - elements.perihelion_time,
            elements.perihelion_distance,
            elements.eccentricity,
        )
    assert elements.mean_motion is not None
    mean_anomaly = elements.mean_anomaly + (moment - elements.epoch) * elements.mean_motion
    return true_anomaly_radius(mean_anomaly, elements.eccentricity, elements.semi_major_axis)


def heliocentric_ecliptic(elements: OrbitalElements, moment: Moment) -> np.ndarray:
    """Heliocentric ecliptic rectangular position (AU) at a moment."""
    v, r = anomaly_and_radius(elements, moment)
    node = elements.node
    u = v + elements.perihelion_arg
    inc = elements.inclination
    return r * np.array(
        [
            math.cos(node) * math.cos(u) - math.sin(node) * math.sin(u) * math.cos(inc),
            math.sin(node) * math.cos(u) + math.cos(node) * math.sin(u) * math.cos(inc),
            math.sin(u) * math.sin(inc),
        ],
        dtype=np.float64,
    )


def _ecliptic_angles(vec: np.ndarray) -> SkyPosition:
    x, y, z = (float(c) for c in vec)
    return SkyPosition(normalize_angle(math.atan2(y, x)), math.atan2(z, math.hypot(x, y)), Frame.ECLIPTIC)


def position_at(elements: OrbitalElements, moment: Moment, site: ObservingSite) -> ObjectState:
    """Propagate an orbit to a moment and observe it from a site.

    Raises:
        KeplerConvergenceError: If the elliptical solution does not converge.
    """
    helio = heliocentric_ecliptic(elements, moment)
    geo = helio - earth_position(moment)
    r = float(np.linalg.norm(helio))
    delta = float(np.linalg.norm(geo))
    equatorial = ecliptic_to_equatorial(_ecliptic_angles(geo))
    cos_phase = float(np.dot(helio, geo)) / (r * delta)
    return ObjectState(
        position=topocentric(site, equatorial, moment, delta),
        equatorial=equatorial,
        heliocentric=_ecliptic_angles(helio),
        r=r,
        delta=delta,
        phase_angle=math.acos(max(-1.0, min(1.0, cos_phase))),
    )


def topocentric_position(elements: OrbitalElements, moment: Moment, site: ObservingSite) -> SkyPosition:
    """Topocentric RA/Dec only."""
    return position_at(elements, moment, site).position
