"""Configuration: session defaults and leap-second path from environment variables."""

import os

from candidate_planner.constants import DEFAULT_SITE_CODE


def get_site_code() -> str:
    """Return the observing site code (CANDIDATE_SITE env var or default).

    Returns:
        Site code string, e.g. 'G40'.
    """
    return os.environ.get('CANDIDATE_SITE', DEFAULT_SITE_CODE).strip() or DEFAULT_SITE_CODE


def get_min_altitude() -> str:
    """Return the raw minimum altitude setting (CANDIDATE_MIN_ALT), '' if unset."""
    return os.environ.get('CANDIDATE_MIN_ALT', '').strip()


def get_mag_limit() -> str:
    """Return the raw limiting magnitude setting (CANDIDATE_MAG_LIMIT), '' if unset."""
    return os.environ.get('CANDIDATE_MAG_LIMIT', '').strip()


def get_twilight() -> str:
    """Return the raw twilight setting (CANDIDATE_TWILIGHT), '' if unset.

    Either a Sun altitude in degrees or one of the names 'astronomical',
    'nautical', 'civil', 'horizon'.
    """
    return os.environ.get('CANDIDATE_TWILIGHT', '').strip()


def get_min_galactic_latitude() -> str:
    """Return the raw minimum galactic latitude setting, '' if unset."""
    return os.environ.get('CANDIDATE_MIN_GALACTIC_LAT', '').strip()


def get_leapsecs_path() -> str | None:
    """Return path to a NAIF LSK leap seconds file for rms-julian, or None.

    None means rms-julian's bundled LSK is used.
    """
    path = os.environ.get('JULIAN_LEAPSECS', '').strip()
    return path or None
