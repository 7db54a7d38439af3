"""Ephemerides and observing windows for asteroid and candidate follow-up.

This package plans one night's observations from a fixed site:
- Time: Julian Date moments, sidereal time, compact catalog dates
- Ephemerides: low-order Sun and Moon orbits and a truncated VSOP87 Earth
- Orbits: two-body propagation of catalog elements to topocentric RA/Dec
- Visibility: sunset/sunrise window, meridian transit, rise/set, Moon distance

Free-form dates are parsed with rms-julian; the Earth series uses numpy.
"""

__all__: list[str] = []
