"""CLI entry point: candidate-planner window|visibility subcommands."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from typing import NoReturn, TextIO, cast

from candidate_planner.angle_utils import parse_radec
from candidate_planner.bodies.moon import illuminated_percent
from candidate_planner.candidates import STATUS_OK, TrackedObject
from candidate_planner.coords import Frame, SkyPosition
from candidate_planner.observatories import get_site, site_choices
from candidate_planner.orbits import OrbitalElements
from candidate_planner.params import (
    BadParameterError,
    SessionParams,
    parse_float_param,
    parse_twilight,
    session_params_from_env,
)
from candidate_planner.time_utils import Moment, decode_compact_date
from candidate_planner.visibility import (
    ObservationWindow,
    compute_window,
    is_observable,
    update_objects,
)

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI (stderr, level from --verbose or CANDIDATE_PLANNER_LOG)."""
    level = logging.DEBUG if verbose else logging.WARNING
    env_level = os.environ.get('CANDIDATE_PLANNER_LOG', '').upper()
    if env_level in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        level = getattr(logging, env_level)
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(name)s: %(message)s',
        stream=sys.stderr,
    )


def _session_params(args: argparse.Namespace) -> SessionParams:
    """Environment settings overridden by whichever options were given."""
    params = session_params_from_env()
    if args.site:
        site = get_site(args.site)
        params = replace(
            params,
            site_code=site.code,
            min_altitude_deg=site.min_altitude_deg,
            mag_limit=site.limiting_magnitude,
        )
    if args.twilight is not None:
        params.twilight_deg = parse_twilight(args.twilight)
    if getattr(args, 'min_alt', None) is not None:
        params.min_altitude_deg = parse_float_param('minimum altitude', args.min_alt, -90.0, 90.0)
    if getattr(args, 'jobs', None) is not None:
        params.jobs = max(1, args.jobs)
    return params


def _parse_time(text: str | None) -> Moment:
    if not text:
        return Moment.now()
    moment = Moment.from_text(text)
    if moment is None:
        raise BadParameterError('time', text, 'unrecognised date/time')
    return moment


def _parse_epoch(text: str) -> Moment:
    """Epoch as a five-character catalog date ('K14AU') or any date text."""
    if decode_compact_date(text.strip()) is not None:
        return Moment.from_compact(text.strip())
    return _parse_time(text)


def _write_window(out: TextIO, window: ObservationWindow, site_label: str) -> None:
    state = 'in progress' if window.in_progress else 'upcoming'
    out.write(f'Site:      {site_label}\n')
    out.write(f'Now:       {window.now.iso()} UT\n')
    out.write(f'Twilight:  {window.twilight_deg:g} deg\n')
    out.write(f'Sunset:    {window.sunset.iso()} UT\n')
    midnight = window.midnight
    out.write(f'Midnight:  {midnight.iso()} UT (JD {midnight.jd_text()}, day {midnight.day_of_year_text()})\n')
    out.write(f'Sunrise:   {window.sunrise.iso()} UT\n')
    out.write(f'Night:     {window.duration_hours:.1f} h ({state})\n')
    out.write(f'Moon:      {illuminated_percent(midnight):.0f}% illuminated\n')


def _fmt(value: float | None, spec: str) -> str:
    return '-' if value is None else format(value, spec)


def _write_object(out: TextIO, obj: TrackedObject, observable: bool) -> None:
    if obj.status != STATUS_OK:
        reason = f': {obj.error}' if obj.error else ''
        out.write(f'{obj.identity:<14} {obj.status}{reason}\n')
        return
    assert obj.position is not None
    assert obj.rise_time is not None and obj.meridian is not None and obj.set_time is not None
    out.write(
        f'{obj.identity:<14} {obj.position.radec_text()}'
        f'  V {_fmt(obj.magnitude, "5.1f")}'
        f'  motion {_fmt(obj.motion, ".2f")}\'/h'
        f'  alt {_fmt(obj.best_altitude, ".0f")}'
        f'  rise {obj.rise_time.hhmm()} transit {obj.meridian.hhmm()} set {obj.set_time.hhmm()}'
        f'  moon {_fmt(obj.moon_separation, ".0f")}'
        f'  {"observable" if observable else "not observable"}\n'
    )


def _window_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Print the observing window (window subcommand).

    Returns:
        Exit code 0 on success, 1 on error.
    """
    del parser
    try:
        params = _session_params(args)
        site = params.site
        window = compute_window(_parse_time(args.time), site, params.twilight_deg)
    except (KeyError, ValueError) as e:
        print(f'Error: {e.args[0] if isinstance(e, KeyError) else e}', file=sys.stderr)
        return 1
    _write_window(sys.stdout, window, site.label)
    return 0


def _visibility_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Compute tonight's visibility of one object (visibility subcommand).

    Returns:
        Exit code 0 on success (including an object that failed to update), 1 on bad input.
    """
    if args.radec is None and args.elements is None:
        parser.error('visibility needs --radec or --elements')
    try:
        params = _session_params(args)
        site = params.site
        window = compute_window(_parse_time(args.time), site, params.twilight_deg)
        obj = TrackedObject(name=args.name, number=args.number or '', h=args.h)
        if args.elements is not None:
            epoch, *numbers = args.elements
            values = [parse_float_param('orbital element', v) for v in numbers]
            obj.elements = OrbitalElements.from_degrees(_parse_epoch(epoch), *values)
            obj.is_comet = args.comet
        else:
            radec = parse_radec(args.radec)
            if radec is None:
                raise BadParameterError('position', args.radec, "expected 'hh mm ss +dd mm ss'")
            obj.position = SkyPosition(radec[0], radec[1], Frame.EQUATORIAL)
            obj.is_candidate = True
    except (KeyError, ValueError) as e:
        print(f'Error: {e.args[0] if isinstance(e, KeyError) else e}', file=sys.stderr)
        return 1
    update_objects([obj], window, site, params.min_altitude_deg, jobs=params.jobs)
    _write_window(sys.stdout, window, site.label)
    _write_object(sys.stdout, obj, is_observable(obj, params))
    return 0


def main() -> int:
    """Entry point for candidate-planner CLI (window | visibility).

    Returns:
        Exit code 0 on success, 1 on failure.
    """
    parser = argparse.ArgumentParser(
        prog='candidate-planner',
        description='Observing windows and visibility of asteroids and candidates.',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)
    sites = ', '.join(site_choices())

    window_parser = subparsers.add_parser('window', help='Show sunset, midnight and sunrise')
    window_parser.add_argument('--site', type=str, default='', help=f'Site code ({sites}); env: CANDIDATE_SITE')
    window_parser.add_argument(
        '--time', type=str, default='', help='Time to plan from (UT, any rms-julian format); default now'
    )
    window_parser.add_argument(
        '--twilight',
        type=str,
        default=None,
        help='Sun altitude in degrees or astronomical|nautical|civil|horizon; env: CANDIDATE_TWILIGHT',
    )
    window_parser.add_argument('-v', '--verbose', action='store_true', help='Show DEBUG logs')
    window_parser.set_defaults(func=_window_cmd)

    vis_parser = subparsers.add_parser('visibility', help='Rise, transit and set of one object')
    vis_parser.add_argument('--name', type=str, required=True, help='Object name or designation')
    vis_parser.add_argument('--number', type=str, default='', help='Minor planet number')
    source = vis_parser.add_mutually_exclusive_group()
    source.add_argument('--radec', type=str, default=None, help="Observed position 'hh mm ss +dd mm ss'")
    source.add_argument(
        '--elements',
        nargs=7,
        metavar=('EPOCH', 'M', 'PERI', 'NODE', 'INCL', 'E', 'A'),
        default=None,
        help='Heliocentric J2000 elements, angles in degrees; EPOCH as K14AU or a date',
    )
    vis_parser.add_argument('--h', type=float, default=None, help='Absolute magnitude H')
    vis_parser.add_argument('--comet', action='store_true', help='Object is a comet')
    vis_parser.add_argument('--site', type=str, default='', help=f'Site code ({sites}); env: CANDIDATE_SITE')
    vis_parser.add_argument('--time', type=str, default='', help='Time to plan from (UT); default now')
    vis_parser.add_argument('--twilight', type=str, default=None, help='Twilight altitude or name')
    vis_parser.add_argument('--min-alt', type=str, default=None, help='Minimum altitude (deg); env: CANDIDATE_MIN_ALT')
    vis_parser.add_argument('-j', '--jobs', type=int, default=None, help='Worker threads')
    vis_parser.add_argument('-v', '--verbose', action='store_true', help='Show DEBUG logs')
    vis_parser.set_defaults(func=_visibility_cmd)

    args = parser.parse_args()
    _configure_logging(verbose=args.verbose)
    return cast(int, args.func(parser, args))


def cli_main() -> NoReturn:
    """Entry point for console_scripts; calls main() and exits with its return code."""
    sys.exit(main())


if __name__ == '__main__':
    sys.exit(main())
