"""Tests for Julian Date moments, calendar conversion, sidereal time and catalog dates."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import julian
import pytest

from candidate_planner import time_utils
from candidate_planner.time_utils import (
    Moment,
    calendar_from_julian,
    decode_compact_date,
    encode_compact_date,
    greenwich_sidereal_time,
    julian_from_calendar,
)


def test_ensure_leapsecs_uses_configured_kernel(monkeypatch: pytest.MonkeyPatch) -> None:
    """JULIAN_LEAPSECS path is handed to rms-julian once."""

    calls: list[str | None] = []

    def _load_lsk(path: str | None = None) -> None:
        calls.append(path)

    monkeypatch.setattr('julian.load_lsk', _load_lsk)
    monkeypatch.setattr('candidate_planner.time_utils.get_leapsecs_path', lambda: 'dummy.tls')
    monkeypatch.setattr(time_utils, '_leapsecs_loaded', False)

    time_utils._ensure_leapsecs()
    time_utils._ensure_leapsecs()

    assert calls == ['dummy.tls']


def test_ensure_leapsecs_falls_back_to_bundled_kernel(monkeypatch: pytest.MonkeyPatch) -> None:
    """An unreadable LSK path falls back to rms-julian's bundled kernel."""

    calls: list[str | None] = []

    def _load_lsk(path: str | None = None) -> None:
        calls.append(path)
        if path is not None:
            raise OSError('missing')

    monkeypatch.setattr('julian.load_lsk', _load_lsk)
    monkeypatch.setattr('candidate_planner.time_utils.get_leapsecs_path', lambda: '/no/such.tls')
    monkeypatch.setattr(time_utils, '_leapsecs_loaded', False)

    time_utils._ensure_leapsecs()

    assert calls == ['/no/such.tls', None]


def test_julian_from_calendar_j2000() -> None:
    """2000-01-01 0h UT is JD 2451544.5 and noon is the J2000 epoch."""
    assert julian_from_calendar(1, 1, 2000) == 2451544.5
    assert Moment.from_calendar(1, 1, 2000, 12).jd == pytest.approx(2451545.0, abs=1e-9)


def test_julian_from_calendar_gregorian_cutover() -> None:
    """1582 Oct 4 (Julian) is followed directly by 1582 Oct 15 (Gregorian)."""
    assert julian_from_calendar(15, 10, 1582) - julian_from_calendar(4, 10, 1582) == 1.0
    assert julian_from_calendar(15, 10, 1582) == 2299160.5


@pytest.mark.parametrize('year,month,day', [(1900, 3, 1), (1969, 7, 20), (2000, 2, 29), (2024, 12, 31)])
def test_julian_from_calendar_matches_rms_julian(year: int, month: int, day: int) -> None:
    """Gregorian dates agree with rms-julian's day numbers."""
    expected = 2451544.5 + julian.day_from_ymd(year, month, day)
    assert julian_from_calendar(day, month, year) == pytest.approx(expected, abs=1e-9)


@pytest.mark.parametrize(
    'date',
    [
        (1000, 6, 15),
        (1582, 10, 4),
        (1582, 10, 15),
        (1600, 2, 29),
        (1899, 12, 31),
        (1900, 2, 28),
        (2000, 2, 29),
        (2024, 7, 4),
        (2099, 12, 31),
    ],
)
def test_calendar_round_trip(date: tuple[int, int, int]) -> None:
    """Calendar date -> Julian Date -> calendar date is the identity."""
    year, month, day = date
    assert calendar_from_julian(julian_from_calendar(day, month, year)) == (year, month, day, 0, 0, 0)


def test_calendar_from_julian_time_of_day() -> None:
    """Fractional days split into hours, minutes and whole seconds."""
    assert calendar_from_julian(2451545.0) == (2000, 1, 1, 12, 0, 0)
    moment = Moment.from_calendar(31, 12, 1999, 23, 59, 59)
    assert moment.calendar() == (1999, 12, 31, 23, 59, 59)


def test_greenwich_sidereal_time_at_j2000() -> None:
    """GMST at J2000.0 is 18.6974 hours."""
    gmst = greenwich_sidereal_time(2451545.0)
    assert gmst * 12.0 / 3.141592653589793 == pytest.approx(18.6974, abs=2e-3)
    assert 0.0 <= gmst < 2 * 3.141592653589793


def test_decode_compact_date() -> None:
    """Century letter, two-digit year, then month and day from the 0-9A-Za-z alphabet."""
    assert decode_compact_date('K14AU') == (2014, 10, 30)
    assert decode_compact_date('J9911') == (1999, 1, 1)
    assert decode_compact_date('I0123') == (1801, 2, 3)


@pytest.mark.parametrize('code', ['', 'K14A', 'K14AUU', 'X14AU', 'K1xAU', 'K140U', 'K14D1', 'K14A0', 'K14Av', 'K14A!'])
def test_decode_compact_date_rejects_malformed(code: str) -> None:
    """Bad length, century, year digits, month or day yield None."""
    assert decode_compact_date(code) is None


@pytest.mark.parametrize(
    'ymd',
    [(1800, 1, 1), (1899, 12, 31), (1900, 6, 15), (1999, 9, 9), (2000, 10, 10), (2014, 2, 28), (2099, 12, 31)],
)
def test_compact_date_round_trip(ymd: tuple[int, int, int]) -> None:
    """encode then decode returns the same date."""
    code = encode_compact_date(*ymd)
    assert len(code) == 5
    assert decode_compact_date(code) == ymd


def test_encode_compact_date_range() -> None:
    """Years outside 1800-2099 cannot be encoded."""
    assert encode_compact_date(2014, 10, 30) == 'K14AU'
    with pytest.raises(ValueError, match='1799'):
        encode_compact_date(1799, 12, 31)
    with pytest.raises(ValueError):
        encode_compact_date(2100, 1, 1)


@pytest.mark.parametrize('ymd', [(2014, 2, 31), (2023, 2, 29), (2014, 4, 31), (1900, 2, 29), (2014, 13, 1), (2014, 1, 0)])
def test_encode_compact_date_rejects_impossible_days(ymd: tuple[int, int, int]) -> None:
    """A day past the end of its month is rejected, not rolled into the next month."""
    with pytest.raises(ValueError, match='Invalid date'):
        encode_compact_date(*ymd)


def test_encode_compact_date_leap_days() -> None:
    """February 29 exists in Gregorian leap years, 2000 included."""
    assert encode_compact_date(2024, 2, 29) == 'K242T'
    assert encode_compact_date(2000, 2, 29) == 'K002T'
    assert decode_compact_date('K242T') == (2024, 2, 29)


@pytest.mark.parametrize('code', ['K142V', 'K232T', 'K144V', 'J002T'])
def test_decode_compact_date_rejects_impossible_days(code: str) -> None:
    """Feb 31 2014, Feb 29 2023, Apr 31 2014 and Feb 29 1900 decode to None."""
    assert decode_compact_date(code) is None


@pytest.mark.parametrize('code', ['K²3AU', 'K1²AU', 'K٣١AU'])
def test_decode_compact_date_rejects_non_ascii_digits(code: str) -> None:
    """Superscript and Arabic-Indic digits in the year are malformed."""
    assert decode_compact_date(code) is None


def test_from_compact_non_ascii_digits_defaults_to_j2000(caplog: pytest.LogCaptureFixture) -> None:
    """A superscript digit falls back to J2000 with a warning instead of raising."""
    with caplog.at_level(logging.WARNING, logger='candidate_planner.time_utils'):
        moment = Moment.from_compact('K²3AU')
    assert moment.jd == 2451545.0
    assert 'Malformed compact date' in caplog.text


def test_from_compact_malformed_defaults_to_j2000(caplog: pytest.LogCaptureFixture) -> None:
    """A malformed compact date is logged and gives the J2000 moment."""
    with caplog.at_level(logging.WARNING, logger='candidate_planner.time_utils'):
        moment = Moment.from_compact('Z99ZZ')
    assert moment.jd == 2451545.0
    assert 'Malformed compact date' in caplog.text


def test_from_compact_and_compact() -> None:
    """Moment.compact() inverts Moment.from_compact()."""
    moment = Moment.from_compact('K243V')
    assert moment.iso_date() == '2024-03-31'
    assert moment.compact() == 'K243V'


def test_calendar_cache_is_refreshed_after_changes() -> None:
    """Calendar fields follow every change of the Julian value."""
    moment = Moment.from_calendar(31, 12, 1999, 18)
    assert (moment.year, moment.month, moment.day) == (1999, 12, 31)
    moment.add(0.5)
    assert (moment.year, moment.month, moment.day, moment.hour) == (2000, 1, 1, 6)
    moment.set_julian(2451545.0)
    assert moment.hour == 12
    moment.set_calendar(29, 2, 2024, 3, 4, 5)
    assert moment.iso() == '2024-02-29 03:04:05'


def test_set_time_of_day_keeps_date() -> None:
    """Setting the time of day leaves the date alone."""
    moment = Moment.from_calendar(10, 8, 2023, 22, 15)
    moment.set_time_of_day(1, 30)
    assert moment.iso() == '2023-08-10 01:30:00'
    moment.set_day_fraction(0.75)
    assert moment.hhmm() == '18:00'


def test_copy_and_plus_are_independent() -> None:
    """copy() and plus() never alias the original."""
    moment = Moment(2451545.0)
    other = moment.copy()
    other.add(1.0)
    later = moment.plus(2.0)
    assert moment.jd == 2451545.0
    assert other.jd == 2451546.0
    assert later - moment == 2.0


def test_ordering_and_equality() -> None:
    """Moments compare by Julian Date."""
    assert Moment(2451545.0) == Moment(2451545.0)
    assert Moment(2451545.0) < Moment(2451545.1)
    assert Moment(2451546.0) >= Moment(2451545.0)
    assert Moment(2451545.0) != 2451545.0


def test_now_tracks_utc_clock() -> None:
    """Moment.now() is the current UT to within a few seconds."""
    before = datetime.now(timezone.utc)
    moment = Moment.now()
    expected = Moment.from_calendar(
        before.day, before.month, before.year, before.hour, before.minute, before.second
    )
    assert abs(moment - expected) * 86400.0 < 5.0


def test_text_formats() -> None:
    """ISO, Julian and catalog text forms."""
    moment = Moment.from_calendar(3, 5, 2014, 7, 8, 9)
    assert moment.iso_date() == '2014-05-03'
    assert moment.hhmm() == '07:08'
    assert moment.iso() == '2014-05-03 07:08:09'
    assert Moment(2451545.0).jd_text() == '2451545.0000'
    assert moment.catalog_date() == '2014 May 3'
    assert moment.catalog_date(padded=True) == '2014 May  3'
    assert Moment.from_calendar(1, 3, 2000).day_of_year_text() == '2000-061'


def test_from_catalog_text() -> None:
    """Catalog text dates parse with either day padding."""
    assert Moment.from_catalog_text('2014 Jan. 30').iso_date() == '2014-01-30'
    assert Moment.from_catalog_text('2014 May  3').iso_date() == '2014-05-03'
    assert Moment.from_catalog_text('2013 Sep. 7').iso_date() == '2013-09-07'


def test_from_iso_date_defaults() -> None:
    """Unparsable ISO fields fall back to 1900-01-01 components."""
    assert Moment.from_iso_date('2014-05-03').jd == julian_from_calendar(3, 5, 2014)
    assert Moment.from_iso_date('xxxx-yy-zz').iso_date() == '1900-01-01'


def test_from_text_uses_rms_julian() -> None:
    """Free-form dates parse through rms-julian, including a trailing Z."""
    moment = Moment.from_text('2000-01-01 12:00:00')
    assert moment is not None
    assert moment.jd == pytest.approx(2451545.0, abs=1e-6)
    zulu = Moment.from_text('2022-08-18T00:01:47Z')
    plain = Moment.from_text('2022-08-18T00:01:47')
    assert zulu is not None and plain is not None
    assert zulu == plain
