"""Angle normalisation and sexagesimal parsing and formatting for right ascension and declination."""

from __future__ import annotations

import math
import re

from candidate_planner.constants import DEGREES_PER_HOUR_RA, TWOPI


def normalize_angle(angle: float, period: float = TWOPI) -> float:
    """Reduce an angle to [0, period).

    A plain ``% period`` returns ``period`` itself for tiny negative inputs;
    that case is mapped to 0.
    """
    value = angle % period
    return 0.0 if value >= period else value


def parse_sexagesimal(string: str) -> float | None:
    """Parse hours/degrees with optional minutes and seconds.

    Accepts 'h m s', 'h m' or 'h' (whitespace or ':' separated). Minutes and
    seconds must be non-negative; a leading minus sign makes the whole value
    negative, so '-0 30' is -0.5.

    Parameters:
        string: Text such as '12 30 45.5', '-05:30' or '+28.3'.

    Returns:
        Value in the units of the first field, or None on parse failure.
    """
    s = string.strip()
    if not s:
        return None
    parts = re.split(r'[\s:]+', s)
    if len(parts) > 3:
        return None
    try:
        values = [float(p) for p in parts]
    except ValueError:
        return None
    if any(v < 0 for v in values[1:]):
        return None
    value = abs(values[0])
    for i, v in enumerate(values[1:], start=1):
        value += v / 60.0**i
    if s.startswith('-'):
        value = -value
    return value


def parse_radec(string: str) -> tuple[float, float] | None:
    """Parse 'hh mm ss.s +dd mm ss.s' into (RA, Dec) radians.

    Returns:
        (ra, dec) in radians, or None unless exactly six fields parse.
    """
    parts = string.split()
    if len(parts) != 6:
        return None
    ra_hours = parse_sexagesimal(' '.join(parts[:3]))
    dec_deg = parse_sexagesimal(' '.join(parts[3:]))
    if ra_hours is None or dec_deg is None:
        return None
    return (math.radians(ra_hours * DEGREES_PER_HOUR_RA), math.radians(dec_deg))


def _split_sexagesimal(value: float, ndecimal: int) -> tuple[int, int, int, int]:
    """Split abs(value) into whole units, minutes, seconds and scaled decimal seconds."""
    scale = 10**ndecimal
    total = round(abs(value) * 3600.0 * scale)
    whole_secs, frac = divmod(total, scale)
    whole_mins, secs = divmod(whole_secs, 60)
    units, mins = divmod(whole_mins, 60)
    return (int(units), int(mins), int(secs), int(frac))


def format_ra(ra: float, ndecimal: int = 2) -> str:
    """Format RA (radians) as 'hh mm ss.ss'."""
    hours = normalize_angle(ra) * 12.0 / math.pi
    h, m, s, frac = _split_sexagesimal(hours, ndecimal)
    if h >= 24:
        h -= 24
    return f'{h:02d} {m:02d} {s:02d}.{frac:0{ndecimal}d}'


def format_dec(dec: float, ndecimal: int = 1) -> str:
    """Format Dec (radians) as '+dd mm ss.s'."""
    d, m, s, frac = _split_sexagesimal(math.degrees(dec), ndecimal)
    sign = '-' if dec < 0 else '+'
    return f'{sign}{d:02d} {m:02d} {s:02d}.{frac:0{ndecimal}d}'


def format_radec(ra: float, dec: float) -> str:
    """Format RA/Dec (radians) as 'hh mm ss.ss +dd mm ss.s'."""
    return f'{format_ra(ra)} {format_dec(dec)}'
