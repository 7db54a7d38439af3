"""Packed catalog identifiers for numbered minor planets and provisional designations.

Numbers up to 99999 pack as five digits; larger numbers replace the leading
ten-thousands with a letter (100000 -> 'A0000'). Provisional designations
such as '2014 AB12' pack to seven characters ('K14A12B'). Unsupported input
packs to ''.
"""

from __future__ import annotations

import re

_LETTERS = 'ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz'
_CENTURY_CODES = {'18': 'I', '19': 'J', '20': 'K'}
_CODE_CENTURIES = {v: k for k, v in _CENTURY_CODES.items()}
_DESIGNATION_RE = re.compile(r'^([0-9]{2})([0-9]{2}) ([A-Z])([A-Z])([0-9]{0,3})$')
_MAX_PACKED_NUMBER = 99999 + 10000 * len(_LETTERS)


def _is_digits(text: str) -> bool:
    """True for a non-empty run of ASCII digits; str.isdigit alone accepts superscripts."""
    return text.isascii() and text.isdigit()


def pack_number(number: str) -> str:
    """Pack a minor planet number such as '(123456)' or '433'."""
    text = number.strip().strip('()')
    if not _is_digits(text):
        return ''
    n = int(text)
    if n <= 0 or n > _MAX_PACKED_NUMBER:
        return ''
    if n > 99999:
        return f'{_LETTERS[n // 10000 - 10]}{n % 10000:04d}'
    return f'{n:05d}'


def unpack_number(packed: str) -> str:
    """Inverse of pack_number, returned without brackets ('' if invalid)."""
    if len(packed) != 5 or not _is_digits(packed[1:]):
        return ''
    if _is_digits(packed[0]):
        return str(int(packed))
    idx = _LETTERS.find(packed[0])
    if idx < 0:
        return ''
    return str((idx + 10) * 10000 + int(packed[1:]))


def pack_designation(designation: str) -> str:
    """Pack a provisional designation such as '2014 AB12'."""
    match = _DESIGNATION_RE.match(designation.strip())
    if match is None:
        return ''
    century, year, half_month, letter, cycle = match.groups()
    code = _CENTURY_CODES.get(century)
    if code is None:
        return ''
    count = int(cycle) if cycle else 0
    if count > 619:
        return ''
    if count > 99:
        cycle_text = f'{_LETTERS[count // 10 - 10]}{count % 10}'
    else:
        cycle_text = f'{count:02d}'
    return f'{code}{year}{half_month}{cycle_text}{letter}'


def unpack_designation(packed: str) -> str:
    """Inverse of pack_designation ('' if invalid)."""
    if len(packed) != 7:
        return ''
    century = _CODE_CENTURIES.get(packed[0])
    if century is None or not _is_digits(packed[1:3]):
        return ''
    cycle_code = packed[4:6]
    if _is_digits(cycle_code):
        count = int(cycle_code)
    else:
        idx = _LETTERS.find(cycle_code[0])
        if idx < 0 or not _is_digits(cycle_code[1]):
            return ''
        count = (idx + 10) * 10 + int(cycle_code[1])
    suffix = str(count) if count else ''
    return f'{century}{packed[1:3]} {packed[3]}{packed[6]}{suffix}'


def catalog_id(packed_number: str, packed_designation: str) -> str:
    """Identifier used to match orbit catalog records: the number when present."""
    return packed_number or packed_designation
