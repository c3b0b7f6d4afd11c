"""
Grammar primitives: whitespace, keyword literals and numbers.

All scanners work on a bytes document with an explicit cursor and bounds
check against ``len(data)``; none of them rely on a terminator byte.
"""

import math
from typing import Final

from ._errors import JSONParseError
from ._errors import Position

WHITESPACE: Final = frozenset(b" \t\n\r")

_MINUS: Final = ord("-")
_PLUS: Final = ord("+")
_DOT: Final = ord(".")
_ZERO: Final = ord("0")
_NINE: Final = ord("9")
_EXPONENT: Final = frozenset(b"eE")


def _is_digit(byte: int) -> bool:
    return _ZERO <= byte <= _NINE


def skip_whitespace(data: bytes, pos: Position) -> Position:
    """Returns the position of the first non-whitespace byte from pos on."""
    end = len(data)
    while pos < end and data[pos] in WHITESPACE:
        pos += 1
    return pos


def match_literal(data: bytes, pos: Position, literal: bytes) -> Position:
    """Matches ``literal`` at ``pos`` and returns the position after it."""
    end = pos + len(literal)
    if data[pos:end] != literal:
        raise JSONParseError("Invalid literal", data, pos)
    return end


def _skip_digits(data: bytes, pos: Position) -> Position:
    end = len(data)
    while pos < end and _is_digit(data[pos]):
        pos += 1
    return pos


def _require_digit(data: bytes, pos: Position, start: Position) -> None:
    if pos >= len(data) or not _is_digit(data[pos]):
        raise JSONParseError("Invalid number", data, start)


def scan_number(data: bytes, pos: Position) -> Position:
    """
    Validates a number starting at ``pos`` and returns the position after it.

    Accepts ``-? (0 | [1-9][0-9]*) (. [0-9]+)? ([eE] [+-]? [0-9]+)?``. A
    leading zero ends the integer part, so ``0123`` scans as ``0`` and the
    caller rejects the digits that follow.
    """
    start = pos
    end = len(data)

    if pos < end and data[pos] == _MINUS:
        pos += 1

    _require_digit(data, pos, start)
    if data[pos] == _ZERO:
        pos += 1
    else:
        pos = _skip_digits(data, pos + 1)

    if pos < end and data[pos] == _DOT:
        pos += 1
        _require_digit(data, pos, start)
        pos = _skip_digits(data, pos)

    if pos < end and data[pos] in _EXPONENT:
        pos += 1
        if pos < end and data[pos] in (_PLUS, _MINUS):
            pos += 1
        _require_digit(data, pos, start)
        pos = _skip_digits(data, pos)

    return pos


def convert_number(data: bytes, start: Position, end: Position) -> float:
    """
    Converts an already validated number to a double.

    Magnitudes beyond the finite double range are rejected; values that
    underflow simply become zero.
    """
    number = float(data[start:end].decode("ascii"))
    if math.isinf(number):
        raise JSONParseError("Number out of range", data, start)
    return number
