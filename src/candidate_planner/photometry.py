"""Asteroid brightness in the H-G system (Bowell et al. 1989) and size from H."""

from __future__ import annotations

import math

from candidate_planner.constants import DEFAULT_SLOPE_G

# Diameter in metres of an H = 0 asteroid with geometric albedo 0.14
_DIAMETER_H0_M = 3551901.90501
# Phase functions underflow to zero towards 180 degrees
_MAX_PHASE_ANGLE = math.radians(179.0)


def _phase_terms(phase_angle: float) -> tuple[float, float, float]:
    sina = math.sin(phase_angle)
    tana2 = math.tan(phase_angle / 2.0)
    weight = math.exp(-90.56 * tana2 * tana2)
    return (sina, tana2, weight)


def phi1(phase_angle: float) -> float:
    """H-G phase function phi1 for a phase angle in radians."""
    sina, tana2, weight = _phase_terms(phase_angle)
    smooth = 1.0 - 0.986 * sina / (0.119 + 1.341 * sina - 0.754 * sina * sina)
    linear = math.exp(-3.332 * tana2**0.631)
    return weight * smooth + (1.0 - weight) * linear


def phi2(phase_angle: float) -> float:
    """H-G phase function phi2 for a phase angle in radians."""
    sina, tana2, weight = _phase_terms(phase_angle)
    smooth = 1.0 - 0.238 * sina / (0.119 + 1.341 * sina - 0.754 * sina * sina)
    linear = math.exp(-1.862 * tana2**1.218)
    return weight * smooth + (1.0 - weight) * linear


def apparent_magnitude(
    h: float,
    r: float,
    delta: float,
    phase_angle: float,
    g: float = DEFAULT_SLOPE_G,
) -> float:
    """Predicted V magnitude.

    Parameters:
        h: Absolute magnitude H.
        r: Heliocentric distance (AU).
        delta: Geocentric distance (AU).
        phase_angle: Sun-object-observer angle (radians), 0..pi.
        g: Slope parameter G.
    """
    phase_angle = min(max(phase_angle, 0.0), _MAX_PHASE_ANGLE)
    reduced = (1.0 - g) * phi1(phase_angle) + g * phi2(phase_angle)
    return h + 5.0 * math.log10(r * delta) - 2.5 * math.log10(reduced)


def estimated_diameter_m(h: float) -> float:
    """Diameter in metres for absolute magnitude h, assuming albedo 0.14."""
    return _DIAMETER_H0_M * 10.0 ** (-0.2 * h)
