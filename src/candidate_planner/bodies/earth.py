"""Heliocentric position of the Earth from a truncated VSOP87A series.

Coordinates are rectangular, heliocentric, referred to the J2000 ecliptic and
equinox, in AU. Each axis is a sum over tiers k = 0, 1, 2 of
T^k * sum(A * cos(B + C * T)) with T in Julian millennia from J2000. Only the
largest terms are kept; the truncation error is below 1e-4 AU over
1900-2100, ample for the sub-degree accuracy of the propagator.
"""

from __future__ import annotations

import numpy as np

from candidate_planner.constants import DAYS_PER_JULIAN_MILLENNIUM, J2000_JD
from candidate_planner.time_utils import Moment

# Rows are (A, B, C): amplitude (AU), phase (rad), frequency (rad / millennium).
_X0 = np.array(
    [
        [0.99982928844, 1.75348568475, 6283.07584999140],
        [0.00835257300, 1.71034539450, 12566.15169998280],
        [0.00561144206, 0.00000000000, 0.00000000000],
        [0.00010466628, 1.66722645223, 18849.22754997420],
        [0.00003110838, 0.66875185215, 83996.84731811189],
        [0.00002552498, 0.58310207301, 529.69096509460],
        [0.00002137256, 1.09235189672, 1577.34354244780],
        [0.00001709103, 0.49540223397, 6279.55273164240],
        [0.00001707882, 6.15315547484, 6286.59896834040],
        [0.00001445242, 3.47272783760, 2352.86615377180],
        [0.00001091006, 3.68984782465, 5223.69391980220],
        [0.00000934386, 6.07389922585, 12036.46073488820],
        [0.00000899144, 3.17571950523, 10213.28554621100],
    ]
)
_X1 = np.array(
    [
        [0.00123403056, 0.00000000000, 0.00000000000],
        [0.00051500156, 6.00266267204, 12566.15169998280],
        [0.00001290726, 5.95943124583, 18849.22754997420],
        [0.00001068627, 2.01554176551, 6283.07584999140],
    ]
)
_Y0 = np.array(
    [
        [0.99989211030, 0.18265890456, 6283.07584999140],
        [0.02442699036, 3.14159265359, 0.00000000000],
        [0.00835292314, 0.13952878991, 12566.15169998280],
        [0.00010466965, 0.09641690558, 18849.22754997420],
        [0.00003110838, 5.38114091484, 83996.84731811189],
        [0.00002570338, 5.30103973360, 529.69096509460],
        [0.00002147473, 2.66253538905, 1577.34354244780],
        [0.00001709219, 5.20780401071, 6279.55273164240],
        [0.00001707987, 4.58232858766, 6286.59896834040],
        [0.00001440265, 1.90068164664, 2352.86615377180],
    ]
)
_Y1 = np.array(
    [
        [0.00093046324, 0.00000000000, 0.00000000000],
        [0.00051506609, 4.43180499286, 12566.15169998280],
        [0.00001290800, 4.38860998277, 18849.22754997420],
    ]
)
_Z0 = np.array(
    [
        [0.00000279620, 3.19870156017, 84334.66158130829],
        [0.00000101625, 5.42248110597, 5507.55323866740],
        [0.00000080445, 3.88013204458, 5223.69391980220],
        [0.00000043806, 3.70444689758, 2352.86615377180],
        [0.00000031933, 4.00026369781, 1577.34354244780],
    ]
)
_Z1 = np.array(
    [
        [0.00227777722, 3.41376620530, 6283.07584999140],
        [0.00003805678, 3.37063423795, 12566.15169998280],
        [0.00003619589, 0.00000000000, 0.00000000000],
    ]
)
_Z2 = np.array(
    [
        [0.00009721424, 5.15192809600, 6283.07584999140],
    ]
)

_SERIES = {
    'x': (_X0, _X1),
    'y': (_Y0, _Y1),
    'z': (_Z0, _Z1, _Z2),
}


def _sum_tier(terms: np.ndarray, t: float) -> float:
    return float(np.sum(terms[:, 0] * np.cos(terms[:, 1] + terms[:, 2] * t)))


def _sum_axis(tiers: tuple[np.ndarray, ...], t: float) -> float:
    return sum(_sum_tier(terms, t) * t**k for k, terms in enumerate(tiers))


def millennia_since_j2000(moment: Moment) -> float:
    """Julian millennia from J2000 to the moment."""
    return (moment.jd - J2000_JD) / DAYS_PER_JULIAN_MILLENNIUM


def earth_position(moment: Moment) -> np.ndarray:
    """Heliocentric ecliptic (J2000) rectangular position of the Earth in AU.

    Returns:
        Length-3 array (x, y, z).
    """
    t = millennia_since_j2000(moment)
    return np.array([_sum_axis(_SERIES[axis], t) for axis in ('x', 'y', 'z')], dtype=np.float64)
