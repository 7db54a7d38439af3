"""Low-order analytic ephemerides of the Sun, Moon and Earth.

The Sun and Moon use two-body elements with linear secular terms (solved
through the shared Kepler routine); the Earth uses a truncated VSOP87A series.
Every function evaluates at the Moment it is given and keeps no state.
"""

from candidate_planner.bodies.earth import earth_position
from candidate_planner.bodies.moon import (
    illuminated_fraction,
    illuminated_percent,
    moon_position,
    moon_separation,
)
from candidate_planner.bodies.sun import SunState, sun_position, sun_state

__all__ = [
    'SunState',
    'earth_position',
    'illuminated_fraction',
    'illuminated_percent',
    'moon_position',
    'moon_separation',
    'sun_position',
    'sun_state',
]
