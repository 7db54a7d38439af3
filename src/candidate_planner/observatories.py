"""Observing sites: catalog, local sidereal time, and topocentric parallax."""

from __future__ import annotations

import math
from dataclasses import dataclass

from candidate_planner.angle_utils import normalize_angle
from candidate_planner.constants import (
    EARTH_RADIUS_AU,
    HOURS_PER_DAY,
    TWOPI,
)
from candidate_planner.coords import Frame, SkyPosition
from candidate_planner.time_utils import Moment


@dataclass(frozen=True)
class ObservingSite:
    """A fixed observatory on the Earth.

    position holds east longitude and geographic latitude (radians) in the
    geographic frame. rho_sin_phi and rho_cos_phi are the geocentric
    (parallax) constants in Earth radii, as listed with observatory codes.
    """

    code: str
    name: str
    position: SkyPosition
    rho_sin_phi: float
    rho_cos_phi: float
    min_altitude_deg: float = 35.0
    limiting_magnitude: float = 19.5

    @property
    def latitude(self) -> float:
        return self.position.lat

    @property
    def longitude(self) -> float:
        return self.position.lon

    @property
    def label(self) -> str:
        """'CODE-Name' as shown in site menus."""
        return f'{self.code}-{self.name}'


def _site(
    code: str,
    name: str,
    lat_deg: float,
    east_lon_deg: float,
    rho_sin_phi: float,
    rho_cos_phi: float,
    min_alt: float,
    mag: float,
) -> ObservingSite:
    return ObservingSite(
        code=code,
        name=name,
        position=SkyPosition(math.radians(east_lon_deg), math.radians(lat_deg), Frame.GEOGRAPHIC),
        rho_sin_phi=rho_sin_phi,
        rho_cos_phi=rho_cos_phi,
        min_altitude_deg=min_alt,
        limiting_magnitude=mag,
    )


SITES: dict[str, ObservingSite] = {
    'G40': _site('G40', 'Slooh Teide', 28.3, 343.491740, 0.471441, 0.881470, 35.0, 19.5),
    'W88': _site('W88', 'Slooh Chile', -33.26, 289.46570, -0.545574, 0.837136, 35.0, 19.5),
}


def get_site(code: str) -> ObservingSite:
    """Look up a site by observatory code (case-insensitive).

    Raises:
        KeyError: If the code is not in the catalog.
    """
    key = code.strip().upper()
    try:
        return SITES[key]
    except KeyError:
        raise KeyError(f'Unknown observing site {code!r}; expected one of {", ".join(SITES)}') from None


def site_choices() -> list[str]:
    """Site labels in catalog order."""
    return [site.label for site in SITES.values()]


def local_sidereal_time(site: ObservingSite, moment: Moment) -> float:
    """Local mean sidereal time at the site (radians, [0, 2 pi))."""
    return normalize_angle(moment.gmst() + site.longitude)


def sidereal_offset_hours(site: ObservingSite, moment: Moment) -> float:
    """Local sidereal time minus UT at the site, in hours, in [0, 24).

    An object of right ascension RA (hours) transits at UT = RA - offset.
    """
    offset = local_sidereal_time(site, moment) - TWOPI * moment.day_fraction
    return normalize_angle(offset * HOURS_PER_DAY / TWOPI, HOURS_PER_DAY)


def topocentric(site: ObservingSite, equatorial: SkyPosition, moment: Moment, distance_au: float) -> SkyPosition:
    """Shift a geocentric RA/Dec to the position seen from the site.

    Parameters:
        site: Observing site.
        equatorial: Geocentric equatorial position.
        moment: Time of observation.
        distance_au: Geocentric distance of the object in AU.

    Returns:
        Topocentric RA/Dec, RA in [0, 2 pi).
    """
    if equatorial.frame is not Frame.EQUATORIAL:
        raise ValueError(f'Expected a geocentric equatorial position, got {equatorial.frame.value} frame')
    if distance_au <= 0.0:
        raise ValueError(f'Geocentric distance must be positive, got {distance_au}')
    sin_par = EARTH_RADIUS_AU / distance_au
    ra, dec = equatorial.lon, equatorial.lat
    ha = local_sidereal_time(site, moment) - ra
    denom = math.cos(dec) - site.rho_cos_phi * sin_par * math.cos(ha)
    dra = math.atan2(-site.rho_cos_phi * sin_par * math.sin(ha), denom)
    topo_dec = math.atan2((math.sin(dec) - site.rho_sin_phi * sin_par) * math.cos(dra), denom)
    return SkyPosition(normalize_angle(ra + dra), topo_dec, Frame.TOPOCENTRIC)
