"""Observing windows and per-object visibility for one site and one night.

``compute_window`` bounds the night by the Sun crossing a twilight altitude.
``update_object`` then places each tracked object on that night: meridian
transit (estimated from the midnight position and refined once from the
position at transit), rise and set at a minimum altitude, best altitude,
motion, brightness and distance from the Moon.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from candidate_planner.angle_utils import normalize_angle
from candidate_planner.bodies.moon import moon_separation
from candidate_planner.bodies.sun import sun_position
from candidate_planner.candidates import (
    STATUS_FAILED,
    STATUS_NO_POSITION,
    STATUS_OK,
    TrackedObject,
)
from candidate_planner.constants import (
    ARCMIN_PER_HOUR_PER_RAD_PER_DAY,
    HOURS_PER_DAY,
)
from candidate_planner.coords import (
    Visibility,
    angular_separation,
    culmination_altitude,
    galactic_latitude,
    rise_set_hour_angle,
)
from candidate_planner.kepler import KeplerConvergenceError
from candidate_planner.observatories import ObservingSite, sidereal_offset_hours
from candidate_planner.orbits import ObjectState, position_at
from candidate_planner.params import SessionParams
from candidate_planner.photometry import apparent_magnitude, estimated_diameter_m
from candidate_planner.time_utils import Moment

logger = logging.getLogger(__name__)

# Shortest baseline (days) over which motion is measured
_MIN_MOTION_BASELINE = 1.0 / HOURS_PER_DAY


@dataclass(frozen=True)
class ObservationWindow:
    """Boundaries of the next (or current) night at a site.

    Parameters:
        now: Time the window was computed for.
        sunset: Sun sinks below the twilight altitude.
        midnight: Halfway between sunset and sunrise.
        sunrise: Next time the Sun climbs above the twilight altitude, after now.
        sidereal_offset_hours: Local sidereal time minus UT at midnight (hours).
        site_code: Observatory code.
        twilight_deg: Sun altitude used for the boundaries.
    """

    now: Moment
    sunset: Moment
    midnight: Moment
    sunrise: Moment
    sidereal_offset_hours: float
    site_code: str
    twilight_deg: float

    @property
    def in_progress(self) -> bool:
        """True when now falls between sunset and sunrise."""
        return self.sunset <= self.now < self.sunrise

    @property
    def duration_hours(self) -> float:
        return (self.sunrise - self.sunset) * HOURS_PER_DAY


def compute_window(now: Moment, site: ObservingSite, twilight_deg: float) -> ObservationWindow:
    """Find the night that ends at the first sunrise after now.

    Parameters:
        now: Current time.
        site: Observing site.
        twilight_deg: Sun altitude (degrees) that defines sunset and sunrise.

    Raises:
        ValueError: If the Sun stays above or below the twilight altitude all
            day at this site and date.
    """
    sun = sun_position(now)
    crossing = rise_set_hour_angle(sun, site.latitude, twilight_deg)
    if crossing.kind is Visibility.CIRCUMPOLAR:
        raise ValueError(f'Sun stays above {twilight_deg:g} deg at {site.code} on {now.iso_date()}')
    if crossing.kind is Visibility.NEVER_RISES:
        raise ValueError(f'Sun stays below {twilight_deg:g} deg at {site.code} on {now.iso_date()}')
    half_width = crossing.half_width_hours
    offset = sidereal_offset_hours(site, now)
    sunrise = now.copy()
    sunrise.set_day_fraction(normalize_angle(sun.hours - offset - half_width, HOURS_PER_DAY) / HOURS_PER_DAY)
    while sunrise <= now:
        sunrise.add(1.0)
    sunset = sunrise.plus(-(HOURS_PER_DAY - 2.0 * half_width) / HOURS_PER_DAY)
    midnight = Moment(0.5 * (sunset.jd + sunrise.jd))
    logger.debug(
        'Window at %s for %s: sunset %s, midnight %s, sunrise %s',
        site.code,
        now.iso(),
        sunset.iso(),
        midnight.iso(),
        sunrise.iso(),
    )
    return ObservationWindow(
        now=now.copy(),
        sunset=sunset,
        midnight=midnight,
        sunrise=sunrise,
        sidereal_offset_hours=sidereal_offset_hours(site, midnight),
        site_code=site.code,
        twilight_deg=twilight_deg,
    )


def meridian_time(ra_hours: float, window: ObservationWindow) -> Moment:
    """UT of the meridian transit of right ascension ra_hours nearest the window's sunset.

    The transit is first placed on the date of ``window.now``, then moved by
    whole days until it lies within 12 hours of sunset.
    """
    meridian = window.now.copy()
    transit_hours = normalize_angle(ra_hours - window.sidereal_offset_hours, HOURS_PER_DAY)
    meridian.set_day_fraction(transit_hours / HOURS_PER_DAY)
    while window.sunset - meridian > 0.5:
        meridian.add(1.0)
    while meridian - window.sunset > 0.5:
        meridian.add(-1.0)
    return meridian


def _motion(
    obj: TrackedObject,
    midnight_state: ObjectState,
    meridian_state: ObjectState,
    meridian: Moment,
    window: ObservationWindow,
    site: ObservingSite,
) -> float:
    """Angular rate (arcmin/hour) between midnight and transit."""
    assert obj.elements is not None
    later, moved = meridian, meridian_state.position
    if abs(meridian - window.midnight) < _MIN_MOTION_BASELINE:
        later = window.midnight.plus(_MIN_MOTION_BASELINE)
        moved = position_at(obj.elements, later, site).position
    elapsed = abs(later - window.midnight)
    return ARCMIN_PER_HOUR_PER_RAD_PER_DAY * angular_separation(midnight_state.position, moved) / elapsed


def _update(obj: TrackedObject, window: ObservationWindow, site: ObservingSite, min_altitude_deg: float) -> None:
    state: ObjectState | None = None
    if obj.has_orbit:
        assert obj.elements is not None
        midnight_state = position_at(obj.elements, window.midnight, site)
        first_estimate = meridian_time(midnight_state.position.hours, window)
        state = position_at(obj.elements, first_estimate, site)
        obj.motion = _motion(obj, midnight_state, state, first_estimate, window, site)
        obj.position = state.position
        moon_reference = obj.position if obj.is_comet else midnight_state.position
    elif obj.position is not None:
        moon_reference = obj.position
    else:
        obj.clear_visibility()
        obj.status = STATUS_NO_POSITION
        return

    position = obj.position
    meridian = meridian_time(position.hours, window)
    crossing = rise_set_hour_angle(position, site.latitude, min_altitude_deg)
    obj.meridian = meridian
    obj.half_width_hours = crossing.half_width_hours
    obj.visibility = crossing.kind
    obj.rise_time = meridian.plus(-crossing.half_width_hours / HOURS_PER_DAY)
    obj.set_time = meridian.plus(crossing.half_width_hours / HOURS_PER_DAY)
    obj.best_altitude = culmination_altitude(position.lat, site.latitude)
    obj.moon_separation = moon_separation(moon_reference, meridian, site)
    obj.galactic_latitude = galactic_latitude(position)
    if state is not None:
        obj.helio_distance = state.r
        obj.geo_distance = state.delta
        obj.phase_angle_deg = math.degrees(state.phase_angle)
        if obj.h is not None:
            obj.magnitude = apparent_magnitude(obj.h, state.r, state.delta, state.phase_angle, obj.g)
    if obj.h is not None:
        obj.diameter_m = estimated_diameter_m(obj.h)
    obj.status = STATUS_OK
    obj.error = None


def update_object(
    obj: TrackedObject,
    window: ObservationWindow,
    site: ObservingSite,
    min_altitude_deg: float,
) -> None:
    """Fill in position, transit, rise/set and related fields of one object in place.

    Sets ``obj.status`` to 'ok', 'no-position' when there is neither an orbit
    nor a supplied position, or 'failed' when the computation breaks down
    (the reason goes to ``obj.error``). Never raises for per-object problems;
    errors other than the expected numeric ones are logged with a traceback.
    """
    try:
        _update(obj, window, site, min_altitude_deg)
    except (KeplerConvergenceError, ValueError, ArithmeticError) as e:
        logger.warning('Cannot update %s: %s', obj.identity, e)
        _mark_failed(obj, str(e))
    except Exception as e:
        logger.exception('Unexpected error updating %s', obj.identity)
        _mark_failed(obj, f'{type(e).__name__}: {e}')


def _mark_failed(obj: TrackedObject, reason: str) -> None:
    obj.clear_visibility()
    obj.status = STATUS_FAILED
    obj.error = reason


def update_objects(
    objects: Iterable[TrackedObject],
    window: ObservationWindow,
    site: ObservingSite,
    min_altitude_deg: float,
    jobs: int = 1,
) -> list[TrackedObject]:
    """Update every object; one object's failure does not stop the rest.

    Parameters:
        objects: Objects to update in place.
        window: Night to place them on.
        site: Observing site.
        min_altitude_deg: Altitude limit for rise and set.
        jobs: Worker threads; 1 updates sequentially.

    Returns:
        The objects whose update failed.
    """
    items = list(objects)
    jobs = max(1, int(jobs))
    if jobs == 1 or len(items) < 2:
        for obj in items:
            update_object(obj, window, site, min_altitude_deg)
    else:
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            futures = [executor.submit(update_object, obj, window, site, min_altitude_deg) for obj in items]
            for fut in as_completed(futures):
                fut.result()
    failed = [obj for obj in items if obj.status == STATUS_FAILED]
    if failed:
        logger.info('%d of %d objects failed to update', len(failed), len(items))
    return failed


def is_observable(obj: TrackedObject, params: SessionParams) -> bool:
    """Whether an updated object clears the session's altitude, brightness and galactic limits.

    Objects without a magnitude estimate pass the brightness test.
    """
    if obj.status != STATUS_OK or obj.visibility is Visibility.NEVER_RISES:
        return False
    if obj.best_altitude is None or obj.best_altitude < params.min_altitude_deg:
        return False
    if obj.magnitude is not None and obj.magnitude > params.mag_limit:
        return False
    if obj.galactic_latitude is not None and abs(obj.galactic_latitude) < params.min_galactic_lat:
        return False
    return True
