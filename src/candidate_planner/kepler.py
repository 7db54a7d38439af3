"""Kepler's equation for elliptical orbits and the near-parabolic closed form."""

from __future__ import annotations

import math

from candidate_planner.constants import (
    GAUSS_K,
    KEPLER_MAX_ITERATIONS,
    KEPLER_TOLERANCE,
    PARABOLIC_THRESHOLD,
    TWOPI,
)


class KeplerConvergenceError(RuntimeError):
    """Newton-Raphson iteration on Kepler's equation did not converge."""


def solve_kepler(
    mean_anomaly: float,
    eccentricity: float,
    tol: float = KEPLER_TOLERANCE,
    max_iter: int = KEPLER_MAX_ITERATIONS,
) -> float:
    """Eccentric anomaly E solving E - e sin E = M by safeguarded Newton-Raphson.

    Starts from E = M and stops when |E - e sin E - M| < tol, so M = 0
    returns exactly 0. The root is kept bracketed between M and M + e
    (M - e for negative M); a Newton step that leaves the bracket is
    replaced by bisection, so high eccentricities converge as well.

    Parameters:
        mean_anomaly: M in radians (any range; E is returned near M).
        eccentricity: e, 0 <= e < PARABOLIC_THRESHOLD.
        tol: Residual tolerance in radians.
        max_iter: Iteration limit.

    Returns:
        Eccentric anomaly in radians.

    Raises:
        ValueError: If e is negative or at/above the parabolic threshold.
        KeplerConvergenceError: If the residual is still above tol after max_iter steps.
    """
    e = eccentricity
    if not 0.0 <= e < PARABOLIC_THRESHOLD:
        raise ValueError(f'Eccentricity {e} outside elliptical range [0, {PARABOLIC_THRESHOLD})')
    # Iterate on M reduced to [-pi, pi]; whole turns are added back at the end.
    turns = round(mean_anomaly / TWOPI)
    m = mean_anomaly - turns * TWOPI
    low, high = (m, m + e) if m >= 0.0 else (m - e, m)
    ecc_anomaly = m
    for _ in range(max_iter):
        residual = ecc_anomaly - e * math.sin(ecc_anomaly) - m
        if abs(residual) < tol:
            return ecc_anomaly + turns * TWOPI
        # E - e sin E increases with E, so the residual sign says which side the root is on.
        if residual < 0.0:
            low = ecc_anomaly
        else:
            high = ecc_anomaly
        step = ecc_anomaly - residual / (1.0 - e * math.cos(ecc_anomaly))
        ecc_anomaly = step if low < step < high else 0.5 * (low + high)
    residual = ecc_anomaly - e * math.sin(ecc_anomaly) - m
    if abs(residual) < tol:
        return ecc_anomaly + turns * TWOPI
    raise KeplerConvergenceError(
        f'Kepler equation did not converge for M={mean_anomaly!r}, e={e!r} '
        f'after {max_iter} iterations (residual {residual:.3e})'
    )


def true_anomaly_radius(mean_anomaly: float, eccentricity: float, semi_major_axis: float) -> tuple[float, float]:
    """True anomaly (radians) and radius (units of a) on an elliptical orbit."""
    ecc_anomaly = solve_kepler(mean_anomaly, eccentricity)
    e = eccentricity
    x = semi_major_axis * (math.cos(ecc_anomaly) - e)
    y = semi_major_axis * math.sin(ecc_anomaly) * math.sqrt(1.0 - e * e)
    return (math.atan2(y, x), math.hypot(x, y))


def near_parabolic(days_since_perihelion: float, perihelion_distance: float, eccentricity: float) -> tuple[float, float]:
    """True anomaly and heliocentric distance for e close to 1, without iteration.

    Solves Barker's equation for the parabola through a cube-root
    construction, then applies a three-term series correction in the
    eccentricity offset (1 - e)/(1 + e). Good for near-parabolic and mildly
    hyperbolic orbits within a few hundred days of perihelion; accuracy
    degrades with |t - T| and with e far from 1.

    Parameters:
        days_since_perihelion: t - T in days (negative before perihelion).
        perihelion_distance: q in AU.
        eccentricity: e (typically >= PARABOLIC_THRESHOLD).

    Returns:
        (v, r): true anomaly in radians and distance in AU.
    """
    e = eccentricity
    q = perihelion_distance
    a = 0.75 * days_since_perihelion * GAUSS_K * math.sqrt((1.0 + e) / (q * q * q))
    b = math.sqrt(1.0 + a * a)
    w = math.cbrt(b + a) - math.cbrt(b - a)
    f = (1.0 - e) / (1.0 + e)
    w2 = w * w
    a1 = 2.0 / 3.0 + 0.4 * w2
    a2 = 7.0 / 5.0 + 33.0 / 35.0 * w2 + 37.0 / 175.0 * w2 * w2
    a3 = w2 * (432.0 / 175.0 + 956.0 / 1125.0 * w2 + 84.0 / 1575.0 * w2 * w2)
    c = w2 / (1.0 + w2)
    g = f * c * c
    w1 = w * (1.0 + f * c * (a1 + a2 * g + a3 * g * g))
    v = 2.0 * math.atan(w1)
    r = q * (1.0 + w1 * w1) / (1.0 + w1 * w1 * f)
    return (v, r)
