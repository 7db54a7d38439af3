"""Time handling: Julian Date moments, calendar conversion, sidereal time, catalog dates.

All times are UT. The master representation of an instant is the Julian Date;
calendar fields are derived on demand and re-derived whenever the Julian value
changes. Free-form date strings are parsed through rms-julian.
"""

from __future__ import annotations

import functools
import logging
import math
import re
from datetime import datetime, timezone

import julian

from candidate_planner.angle_utils import normalize_angle
from candidate_planner.config import get_leapsecs_path
from candidate_planner.constants import (
    CATALOG_MONTHS,
    COMPACT_ALPHABET,
    COMPACT_CENTURIES,
    DAYS_PER_JULIAN_CENTURY,
    GMST0_A,
    GMST0_B,
    GMST0_C,
    GREGORIAN_CUTOVER,
    GREGORIAN_SWITCH_JD,
    HOURS_PER_DAY,
    J2000_JD,
    J2000_MIDNIGHT_JD,
    MINUTES_PER_DAY,
    SECONDS_PER_DAY,
    SIDEREAL_RAD_PER_DAY,
)

logger = logging.getLogger(__name__)

# ASCII only; str.isdigit also accepts characters such as superscripts that int() rejects
_TWO_DIGITS = re.compile(r'[0-9]{2}')

# Leap seconds loaded once at first use.
_leapsecs_loaded = False


def _ensure_leapsecs() -> None:
    """Load a leap seconds kernel for rms-julian if not already loaded.

    Uses the LSK named by JULIAN_LEAPSECS when set and readable, otherwise
    rms-julian's bundled LSK.
    """
    global _leapsecs_loaded
    if _leapsecs_loaded:
        return
    path = get_leapsecs_path()
    if path is not None:
        try:
            julian.load_lsk(path)
            _leapsecs_loaded = True
            return
        except (OSError, KeyError, ValueError) as e:
            logger.info('Leap seconds from %s not used (%s); using rms-julian bundled LSK.', path, e)
    julian.load_lsk()
    _leapsecs_loaded = True


def julian_from_calendar(day: int, month: int, year: int) -> float:
    """Julian Date at 0h UT of a calendar date.

    Julian calendar before 1582 Oct 15, Gregorian from then on. Negative years
    are astronomical-style BC years without a year zero (-1 is 1 BC).

    Parameters:
        day, month, year: Calendar date.

    Returns:
        Julian Date (ends in .5).
    """
    jy = year
    if jy < 0:
        jy += 1
    if month > 2:
        jm = month + 1
    else:
        jy -= 1
        jm = month + 13
    jd = math.floor(365.25 * jy) + math.floor(30.6001 * jm) + day + 1720995.0
    if day + 31 * (month + 12 * year) >= GREGORIAN_CUTOVER:
        ja = int(0.01 * jy)
        jd += 2 - ja + int(0.25 * ja)
    return jd - 0.5


def calendar_from_julian(jd: float) -> tuple[int, int, int, int, int, int]:
    """Split a Julian Date into (year, month, day, hour, minute, second).

    Time of day is rounded to the nearest second, carrying into the date.
    """
    day_number, secs = divmod(round((jd + 0.5) * SECONDS_PER_DAY), int(SECONDS_PER_DAY))
    ja = int(day_number)
    if ja < GREGORIAN_SWITCH_JD:
        jc = ja + 1524
    else:
        jb = int((ja - 1867216.25) / 36524.25)
        jc = ja + jb - jb // 4 + 1525
    jd_ = int((jc - 122.1) / 365.25)
    je = 365 * jd_ + jd_ // 4
    f = int((jc - je) / 30.6001)
    day = jc - je - int(30.6001 * f)
    month = f - 1 - 12 * (f // 14)
    year = jd_ - 4715 - (7 + month) // 10
    hour, rem = divmod(int(secs), 3600)
    minute, second = divmod(rem, 60)
    return (year, month, day, hour, minute, second)


def greenwich_sidereal_time(jd: float) -> float:
    """Greenwich mean sidereal time in radians, in [0, 2 pi).

    Parameters:
        jd: Julian Date (UT).
    """
    j0 = 0.5 + math.floor(jd - 0.5)
    t = (j0 - J2000_JD) / DAYS_PER_JULIAN_CENTURY
    gmst0 = GMST0_A + GMST0_B * t + GMST0_C * t * t
    return normalize_angle(gmst0 + SIDEREAL_RAD_PER_DAY * ((jd + 0.5) % 1.0))


def _valid_month_day(year: int, month: int, day: int) -> bool:
    return 1 <= month <= 12 and 1 <= day <= julian.days_in_ym(year, month, proleptic=True)


def decode_compact_date(code: str) -> tuple[int, int, int] | None:
    """Decode a five-character catalog date such as 'K1438' or 'K14AU'.

    Character 1 is the century (I=1800, J=1900, K=2000), characters 2-3 the
    two-digit year, characters 4 and 5 the month and day as indexes into the
    alphabet 0-9A-Za-z.

    Returns:
        (year, month, day) or None if the code is malformed.
    """
    if len(code) != 5:
        return None
    century = COMPACT_CENTURIES.get(code[0])
    if century is None or _TWO_DIGITS.fullmatch(code[1:3]) is None:
        return None
    month = COMPACT_ALPHABET.find(code[3])
    day = COMPACT_ALPHABET.find(code[4])
    year = century + int(code[1:3])
    if not _valid_month_day(year, month, day):
        return None
    return (year, month, day)


def encode_compact_date(year: int, month: int, day: int) -> str:
    """Encode a calendar date as a five-character catalog date.

    Raises:
        ValueError: If the year is outside 1800-2099 or the month or day does
            not exist in that year's calendar.
    """
    for letter, century in COMPACT_CENTURIES.items():
        if century <= year < century + 100:
            break
    else:
        raise ValueError(f'Year {year} outside compact date range 1800-2099')
    if not _valid_month_day(year, month, day):
        raise ValueError(f'Invalid date {year}-{month:02d}-{day:02d} for compact date')
    return f'{letter}{year - century:02d}{COMPACT_ALPHABET[month]}{COMPACT_ALPHABET[day]}'


def parse_datetime(string: str) -> tuple[int, float] | None:
    """Parse a date/time string to UTC (day, sec) with rms-julian.

    Parameters:
        string: Date/time string in any format accepted by rms-julian; a
            trailing ISO 'Z' is accepted.

    Returns:
        (day, sec) where day counts days since 2000-01-01 and sec is seconds
        within that day; None on parse failure.
    """
    _ensure_leapsecs()
    candidate_strings = [string]
    stripped = string.strip()
    if stripped.endswith(('Z', 'z')):
        candidate_strings.append(stripped[:-1])
    for candidate in candidate_strings:
        try:
            result = julian.day_sec_from_string(candidate)
            day, sec = result[0], result[1]
            return (int(day), float(sec))
        except (ValueError, TypeError, LookupError, OSError):
            continue
    return None


def _int_or(text: str, default: int) -> int:
    try:
        return int(text.strip())
    except ValueError:
        return default


@functools.total_ordering
class Moment:
    """A single instant held as a Julian Date (UT).

    Calendar fields are computed lazily from the Julian value and cached; every
    mutator drops the cache so stale calendar values are never returned.
    Moments compare and order by Julian Date.
    """

    def __init__(self, jd: float = J2000_JD) -> None:
        self._jd = float(jd)
        self._calendar: tuple[int, int, int, int, int, int] | None = None

    # Construction

    @classmethod
    def from_calendar(
        cls,
        day: int,
        month: int,
        year: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
    ) -> Moment:
        """Moment at the given UT calendar date and time of day."""
        m = cls()
        m.set_calendar(day, month, year, hour, minute, second)
        return m

    @classmethod
    def now(cls) -> Moment:
        """Moment for the current UT clock time, to the second."""
        m = cls()
        m.set_now()
        return m

    @classmethod
    def from_day_sec(cls, day: int, sec: float) -> Moment:
        """Moment from an rms-julian (day since 2000-01-01, seconds in day) pair."""
        return cls(J2000_MIDNIGHT_JD + day + sec / SECONDS_PER_DAY)

    @classmethod
    def from_text(cls, string: str) -> Moment | None:
        """Moment from a free-form date/time string (rms-julian syntax), None if unparsable."""
        parsed = parse_datetime(string)
        if parsed is None:
            return None
        return cls.from_day_sec(*parsed)

    @classmethod
    def from_compact(cls, code: str) -> Moment:
        """Moment at 0h UT of a five-character catalog date.

        A malformed code is logged and yields the default J2000 moment.
        """
        ymd = decode_compact_date(code)
        if ymd is None:
            logger.warning('Malformed compact date %r; using J2000', code)
            return cls()
        year, month, day = ymd
        return cls.from_calendar(day, month, year)

    @classmethod
    def from_catalog_text(cls, string: str) -> Moment:
        """Moment at 0h UT from a catalog text date such as '2014 Jan. 30' or '2014 May  3'.

        Unparsable year, month or day fields default to 1.
        """
        s = string.strip()
        year = _int_or(s[:4], 1)
        month = 1
        for i, name in enumerate(CATALOG_MONTHS):
            if name in s:
                month = i + 1
                break
        match = re.search(r'([0-9]{1,2})(?:\.[0-9]*)?\s*$', s[4:])
        day = int(match.group(1)) if match else 1
        return cls.from_calendar(day, month, year)

    @classmethod
    def from_iso_date(cls, string: str) -> Moment:
        """Moment at 0h UT from 'YYYY-MM-DD'; bad fields default to 1900, 1, 1."""
        year = _int_or(string[0:4], 1900)
        month = _int_or(string[5:7], 1)
        day = _int_or(string[8:], 1)
        return cls.from_calendar(day, month, year)

    def copy(self) -> Moment:
        """Return an independent Moment at the same instant."""
        return Moment(self._jd)

    # Mutation

    @property
    def jd(self) -> float:
        """Julian Date."""
        return self._jd

    def set_julian(self, jd: float) -> None:
        """Set the instant from a Julian Date."""
        self._jd = float(jd)
        self._calendar = None

    def set_calendar(
        self,
        day: int,
        month: int,
        year: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
    ) -> None:
        """Set the instant from a UT calendar date and time of day."""
        self.set_julian(julian_from_calendar(day, month, year))
        self.set_time_of_day(hour, minute, second)

    def set_time_of_day(self, hour: int, minute: int = 0, second: int = 0) -> None:
        """Keep the date, replace the time of day."""
        self.set_day_fraction(hour / HOURS_PER_DAY + minute / MINUTES_PER_DAY + second / SECONDS_PER_DAY)

    def set_day_fraction(self, fraction: float) -> None:
        """Keep the date, set the time of day to a fraction of a day after 0h UT."""
        self.set_julian(math.floor(self._jd - 0.5) + 0.5 + fraction)

    def set_now(self) -> None:
        """Set to the current UT clock time, to the second."""
        now = datetime.now(timezone.utc)
        self.set_calendar(now.day, now.month, now.year, now.hour, now.minute, now.second)

    def add(self, days: float) -> None:
        """Move the instant by a number of days (may be negative)."""
        self.set_julian(self._jd + days)

    def plus(self, days: float) -> Moment:
        """Return a new Moment offset by a number of days."""
        return Moment(self._jd + days)

    # Calendar fields

    def calendar(self) -> tuple[int, int, int, int, int, int]:
        """(year, month, day, hour, minute, second), derived from the current Julian value."""
        if self._calendar is None:
            self._calendar = calendar_from_julian(self._jd)
        return self._calendar

    @property
    def year(self) -> int:
        return self.calendar()[0]

    @property
    def month(self) -> int:
        return self.calendar()[1]

    @property
    def day(self) -> int:
        return self.calendar()[2]

    @property
    def hour(self) -> int:
        return self.calendar()[3]

    @property
    def minute(self) -> int:
        return self.calendar()[4]

    @property
    def second(self) -> int:
        return self.calendar()[5]

    @property
    def day_fraction(self) -> float:
        """Fraction of the UT day elapsed since 0h."""
        return (self._jd + 0.5) % 1.0

    @property
    def day_number(self) -> int:
        """Days since 2000-01-01 (rms-julian day count)."""
        return math.floor(self._jd - J2000_MIDNIGHT_JD)

    def day_of_year(self) -> int:
        """Day of the year, 1 = Jan 1."""
        return int(julian.yd_from_day(self.day_number)[1])

    def gmst(self) -> float:
        """Greenwich mean sidereal time (radians)."""
        return greenwich_sidereal_time(self._jd)

    def compact(self) -> str:
        """Five-character catalog date of this moment's calendar day."""
        year, month, day = self.calendar()[:3]
        return encode_compact_date(year, month, day)

    # Formatting

    def iso_date(self) -> str:
        """'YYYY-MM-DD'."""
        year, month, day = self.calendar()[:3]
        return f'{year:04d}-{month:02d}-{day:02d}'

    def hhmm(self) -> str:
        """'HH:MM'."""
        return f'{self.hour:02d}:{self.minute:02d}'

    def iso(self) -> str:
        """'YYYY-MM-DD HH:MM:SS'."""
        return f'{self.iso_date()} {self.hour:02d}:{self.minute:02d}:{self.second:02d}'

    def jd_text(self) -> str:
        """Julian Date to four decimals."""
        return f'{self._jd:.4f}'

    def catalog_date(self, padded: bool = False) -> str:
        """Catalog style 'YYYY Mon. D'; padded=True space-pads single-digit days."""
        year, month, day = self.calendar()[:3]
        day_text = f'{day:2d}' if padded else f'{day:d}'
        return f'{year:04d} {CATALOG_MONTHS[month - 1]} {day_text}'

    def day_of_year_text(self) -> str:
        """'YYYY-DDD'."""
        return f'{self.year:04d}-{self.day_of_year():03d}'

    # Comparison

    def __sub__(self, other: Moment) -> float:
        """Days between two moments."""
        return self._jd - other._jd

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Moment):
            return NotImplemented
        return self._jd == other._jd

    def __lt__(self, other: Moment) -> bool:
        return self._jd < other._jd

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f'Moment({self._jd!r})'

    def __str__(self) -> str:
        return self.iso()
