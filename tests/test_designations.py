"""Tests for packed minor planet numbers and provisional designations."""

from __future__ import annotations

import pytest

from candidate_planner.designations import (
    catalog_id,
    pack_designation,
    pack_number,
    unpack_designation,
    unpack_number,
)


@pytest.mark.parametrize(
    'number,packed',
    [('(433)', '00433'), ('1', '00001'), ('99999', '99999'), ('(100000)', 'A0000'), ('(123456)', 'C3456')],
)
def test_pack_number(number: str, packed: str) -> None:
    """Numbers pack to five characters, with a letter above 99999."""
    assert pack_number(number) == packed
    assert unpack_number(packed) == number.strip('()')


@pytest.mark.parametrize('number', ['', '0', '-5', 'abc', '620000', '²', '(4³3)', '٤٣٣'])
def test_pack_number_invalid(number: str) -> None:
    """Unsupported numbers pack to ''."""
    assert pack_number(number) == ''


@pytest.mark.parametrize('packed', ['', '433', '0043x', '!1234', '0²433', '²0433', 'A²433'])
def test_unpack_number_invalid(packed: str) -> None:
    """Malformed packed numbers unpack to ''."""
    assert unpack_number(packed) == ''


@pytest.mark.parametrize(
    'designation,packed',
    [
        ('2014 AB12', 'K14A12B'),
        ('1998 SS162', 'J98SG2S'),
        ('2007 TA', 'K07T00A'),
        ('1898 DQ', 'I98D00Q'),
    ],
)
def test_pack_designation(designation: str, packed: str) -> None:
    """Provisional designations pack to seven characters and back."""
    assert pack_designation(designation) == packed
    assert unpack_designation(packed) == designation


@pytest.mark.parametrize('designation', ['1700 AA', '2014 ab12', '2014AB12', '2014 AB1234', '2014 AB620', '٢٠١٤ AB12', '2014 AB1²'])
def test_pack_designation_invalid(designation: str) -> None:
    """Unsupported designations pack to ''."""
    assert pack_designation(designation) == ''


@pytest.mark.parametrize('packed', ['K14A12', 'X14A12B', 'K1xA12B', 'K14A!2B', 'K1²A12B', 'K14A1²B', 'K14AA²B'])
def test_unpack_designation_invalid(packed: str) -> None:
    """Malformed packed designations, non-ASCII digits included, unpack to ''."""
    assert unpack_designation(packed) == ''


def test_catalog_id_prefers_number() -> None:
    """The packed number identifies numbered objects; otherwise the designation does."""
    assert catalog_id('00433', 'I98D00Q') == '00433'
    assert catalog_id('', 'K14A12B') == 'K14A12B'
    assert catalog_id('', '') == ''
