"""Fixed constants: time scales, angle conversions, astronomical reference values."""

import math

# Time: seconds per unit and reference epochs (Julian Dates, UT)
SECONDS_PER_MINUTE = 60.0
SECONDS_PER_HOUR = 3600.0
SECONDS_PER_DAY = 86400.0
HOURS_PER_DAY = 24.0
MINUTES_PER_DAY = 1440.0
J2000_JD = 2451545.0  # 2000 Jan 1 12:00
J2000_MIDNIGHT_JD = 2451544.5  # 2000 Jan 1 00:00, day 0 of rms-julian's day count
SCHLYTER_EPOCH_JD = 2451543.5  # 1999 Dec 31 00:00, day 0 of the Sun/Moon element series
GREGORIAN_SWITCH_JD = 2299161  # first Julian day number of the Gregorian calendar
GREGORIAN_CUTOVER = 15 + 31 * (10 + 12 * 1582)  # 1582 Oct 15 as d + 31*(m + 12*y)
DAYS_PER_JULIAN_CENTURY = 36525.0
DAYS_PER_JULIAN_MILLENNIUM = 365250.0

# Angle
TWOPI = 2.0 * math.pi
HALFPI = 0.5 * math.pi
DEGREES_PER_CIRCLE = 360.0
DEGREES_PER_HOUR_RA = 15.0  # right ascension: 360 deg / 24 h
HOURS_PER_RADIAN = 12.0 / math.pi
ARCMIN_PER_DEGREE = 60.0
ARCSEC_PER_RADIAN = 206264.806
# Motion rate: radians/day -> arcmin/hour (60 * 180/pi / 24)
ARCMIN_PER_HOUR_PER_RAD_PER_DAY = 143.2

# Astronomy
OBLIQUITY_DEG = 23.43929111  # mean obliquity of the ecliptic at J2000
OBLIQUITY = math.radians(OBLIQUITY_DEG)
GAUSS_K = 0.01720209895  # Gaussian gravitational constant (AU^1.5 / day)
PARABOLIC_THRESHOLD = 0.98  # eccentricity at and above which the near-parabolic solution is used
EARTH_RADIUS_AU = 4.26345e-5  # equatorial radius of the Earth in AU (horizontal parallax at 1 AU)
GALACTIC_POLE_RA = 3.366  # radians
GALACTIC_POLE_DEC = 0.4734  # radians

# Sidereal time (radians): GMST at 0h UT = a + b*J + c*J^2, J in Julian centuries
GMST0_A = 1.75336856
GMST0_B = 628.3319705
GMST0_C = 6.77071e-06
SIDEREAL_RAD_PER_DAY = 6.300388097  # 2 pi * 1.00273790935

# Moon phase approximation
REFERENCE_NEW_MOON_JD = 2456688.403472  # 2014 Jan 30 21:41 UT
SYNODIC_MONTH_DAYS = 29.53059

# Kepler solver
KEPLER_TOLERANCE = 1e-8
KEPLER_MAX_ITERATIONS = 50

# Observing session defaults
DEFAULT_SITE_CODE = 'G40'
DEFAULT_TWILIGHT_DEG = -12.0
DEFAULT_SLOPE_G = 0.15
HALF_WIDTH_CIRCUMPOLAR_HOURS = 12.0

# Named twilight thresholds (Sun altitude in degrees)
TWILIGHT_ALTITUDES: dict[str, float] = {
    'astronomical': -18.0,
    'nautical': -12.0,
    'civil': -6.0,
    'horizon': 0.0,
}

# Compact catalog dates: century letter and the 62-symbol digit alphabet
COMPACT_CENTURIES: dict[str, int] = {'I': 1800, 'J': 1900, 'K': 2000}
COMPACT_ALPHABET = '0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz'

# Month names as written in catalog text dates
CATALOG_MONTHS = (
    'Jan.',
    'Feb.',
    'Mar.',
    'Apr.',
    'May',
    'June',
    'July',
    'Aug.',
    'Sep.',
    'Oct.',
    'Nov.',
    'Dec.',
)
