"""Session parameters: parsing of numeric settings and loading from the environment."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace

from candidate_planner import config
from candidate_planner.constants import (
    DEFAULT_SITE_CODE,
    DEFAULT_TWILIGHT_DEG,
    TWILIGHT_ALTITUDES,
)
from candidate_planner.observatories import ObservingSite, get_site

logger = logging.getLogger(__name__)


class BadParameterError(ValueError):
    """A user-supplied setting could not be parsed or is out of range."""

    def __init__(self, name: str, value: str, reason: str = 'not a number') -> None:
        super().__init__(f'Invalid {name} {value!r}: {reason}')
        self.name = name
        self.value = value


def parse_float_param(
    name: str,
    value: str,
    minimum: float | None = None,
    maximum: float | None = None,
) -> float:
    """Parse a numeric setting.

    Parameters:
        name: Setting name used in the error message.
        value: Raw text.
        minimum, maximum: Optional inclusive bounds.

    Raises:
        BadParameterError: If the text is not a finite number or is out of bounds.
    """
    try:
        result = float(value)
    except (ValueError, TypeError):
        raise BadParameterError(name, value) from None
    if not math.isfinite(result):
        raise BadParameterError(name, value, 'not finite')
    if minimum is not None and result < minimum:
        raise BadParameterError(name, value, f'below {minimum:g}')
    if maximum is not None and result > maximum:
        raise BadParameterError(name, value, f'above {maximum:g}')
    return result


def parse_int_param(name: str, value: str, minimum: int | None = None) -> int:
    """Parse an integer setting; raises BadParameterError like parse_float_param."""
    try:
        result = int(value)
    except (ValueError, TypeError):
        raise BadParameterError(name, value, 'not an integer') from None
    if minimum is not None and result < minimum:
        raise BadParameterError(name, value, f'below {minimum}')
    return result


def parse_twilight(value: str) -> float:
    """Sun altitude (degrees) from a number or a twilight name such as 'nautical'."""
    key = value.strip().lower()
    if key in TWILIGHT_ALTITUDES:
        return TWILIGHT_ALTITUDES[key]
    return parse_float_param('twilight', value, -90.0, 90.0)


@dataclass
class SessionParams:
    """Settings for one observing session.

    Parameters:
        site_code: Observatory code from the site catalog.
        min_altitude_deg: Altitude an object must clear to count as visible.
        mag_limit: Faintest apparent magnitude worth listing.
        twilight_deg: Sun altitude that bounds the night.
        min_galactic_lat: Objects closer to the galactic plane are filtered out.
        jobs: Worker threads for batch updates.
    """

    site_code: str = DEFAULT_SITE_CODE
    min_altitude_deg: float = 35.0
    mag_limit: float = 19.5
    twilight_deg: float = DEFAULT_TWILIGHT_DEG
    min_galactic_lat: float = 0.0
    jobs: int = 1

    @property
    def site(self) -> ObservingSite:
        return get_site(self.site_code)

    @classmethod
    def for_site(cls, site: ObservingSite, **overrides: float) -> SessionParams:
        """Params using the site's own default altitude and magnitude limits."""
        params = cls(
            site_code=site.code,
            min_altitude_deg=site.min_altitude_deg,
            mag_limit=site.limiting_magnitude,
        )
        return replace(params, **overrides)


def _env_float(name: str, raw: str, default: float, minimum: float, maximum: float) -> float:
    if not raw:
        return default
    try:
        return parse_float_param(name, raw, minimum, maximum)
    except BadParameterError as e:
        logger.error('%s; using default %g', e, default)
        return default


def session_params_from_env() -> SessionParams:
    """Build SessionParams from CANDIDATE_* environment variables.

    Unknown site codes and unparsable numbers are logged and replaced by their
    defaults; altitude and magnitude defaults come from the chosen site.
    """
    code = config.get_site_code()
    try:
        site = get_site(code)
    except KeyError as e:
        logger.error('%s; using %s', e.args[0], DEFAULT_SITE_CODE)
        site = get_site(DEFAULT_SITE_CODE)
    twilight = DEFAULT_TWILIGHT_DEG
    raw_twilight = config.get_twilight()
    if raw_twilight:
        try:
            twilight = parse_twilight(raw_twilight)
        except BadParameterError as e:
            logger.error('%s; using default %g', e, DEFAULT_TWILIGHT_DEG)
    return SessionParams(
        site_code=site.code,
        min_altitude_deg=_env_float(
            'minimum altitude', config.get_min_altitude(), site.min_altitude_deg, -90.0, 90.0
        ),
        mag_limit=_env_float(
            'magnitude limit', config.get_mag_limit(), site.limiting_magnitude, -30.0, 40.0
        ),
        twilight_deg=twilight,
        min_galactic_lat=_env_float(
            'minimum galactic latitude', config.get_min_galactic_latitude(), 0.0, 0.0, 90.0
        ),
    )
