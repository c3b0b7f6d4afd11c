"""
String codec tests.

Validates UTF-8 encoding across the 1-4 byte forms, strict UTF-8 decoding,
and that a failed string decode or encode leaves the scratch buffer exactly
as it found it.
"""

from typing import Any

import pytest

import jtree
from jtree._codec import decode_string
from jtree._codec import decode_utf8
from jtree._codec import encode_string
from jtree._codec import encode_utf8
from jtree._scratch import ScratchBuffer


@pytest.mark.parametrize(
    "codepoint,expected",
    [
        (0x24, b"\x24"),
        (0x7F, b"\x7f"),
        (0x80, b"\xc2\x80"),
        (0xA2, b"\xc2\xa2"),
        (0x7FF, b"\xdf\xbf"),
        (0x800, b"\xe0\xa0\x80"),
        (0x20AC, b"\xe2\x82\xac"),
        (0xFFFF, b"\xef\xbf\xbf"),
        (0x10000, b"\xf0\x90\x80\x80"),
        (0x1D11E, b"\xf0\x9d\x84\x9e"),
        (0x10FFFF, b"\xf4\x8f\xbf\xbf"),
    ],
)
def test_encode_utf8_forms(codepoint: int, expected: bytes) -> None:
    """
    Validates each codepoint range picks the right byte form.
    """
    assert encode_utf8(codepoint) == expected
    assert decode_utf8(expected, 0) == (codepoint, len(expected))


def test_encode_utf8_out_of_range() -> None:
    """
    Validates codepoints beyond U+10FFFF are refused.
    """
    with pytest.raises(ValueError):
        encode_utf8(0x110000)


def test_decode_utf8_walks_sequences() -> None:
    """
    Validates decoding advances past one sequence at a time.
    """
    data = "a€\U0001d11e".encode()
    assert decode_utf8(data, 0) == (0x61, 1)
    assert decode_utf8(data, 1) == (0x20AC, 4)
    assert decode_utf8(data, 4) == (0x1D11E, 8)


@pytest.mark.parametrize(
    "data,pos",
    [
        (b"\xe0\x80\x80", 0),
        (b"\xf0\x80\x80\x80", 0),
        (b"x\xbf", 1),
        (b"\xf5\x80\x80\x80", 0),
        (b"\xe2\x82", 0),
    ],
)
def test_decode_utf8_rejects(data: bytes, pos: int) -> None:
    """
    Validates overlong, stray, out-of-range and truncated sequences fail.
    """
    with pytest.raises(jtree.JSONSerializeError) as exc_info:
        decode_utf8(data, pos)
    assert exc_info.value.pos == pos


def test_decode_string_rolls_back_on_error() -> None:
    """
    Validates a failed string decode discards only its own bytes.
    """
    buffer: ScratchBuffer[Any] = ScratchBuffer()
    buffer.push(b"outer")
    data = b'"abc\\u00e9\\q"'

    with pytest.raises(jtree.JSONParseError, match="Invalid escape"):
        decode_string(data, 1, buffer)

    assert buffer.top == 5
    assert buffer.pop(5) == b"outer"


def test_decode_string_leaves_buffer_balanced() -> None:
    """
    Validates a successful decode pops everything it pushed.
    """
    buffer: ScratchBuffer[Any] = ScratchBuffer()
    buffer.push(b"xy")
    decoded, end = decode_string(b'"a\\tb" tail', 1, buffer)

    assert decoded == b"a\tb"
    assert end == 6
    assert buffer.top == 2


def test_encode_string_rolls_back_on_error() -> None:
    """
    Validates a failed encode leaves earlier output untouched.
    """
    buffer: ScratchBuffer[Any] = ScratchBuffer()
    buffer.push(b"[1, ")

    with pytest.raises(jtree.JSONSerializeError):
        encode_string(b"good \xc3\xa9 then \xff", buffer)

    assert buffer.pop(buffer.top) == b"[1, "


def test_encode_string_appends() -> None:
    """
    Validates encode pushes one quoted string onto existing output.
    """
    buffer: ScratchBuffer[Any] = ScratchBuffer()
    buffer.push(b"[")
    encode_string(b"a/b\n\xc3\xa9", buffer)

    assert buffer.pop(buffer.top) == b'["a\\/b\\n\\u00E9"'
