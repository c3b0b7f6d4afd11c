"""
String codec: escape decoding for the parser, escape encoding for the
serializer, and the UTF-8 / codepoint / UTF-16 surrogate conversions both
directions need.
"""

from typing import Any
from typing import Final

from ._errors import JSONParseError
from ._errors import JSONSerializeError
from ._errors import Position
from ._profiling import ProfileContext
from ._scratch import ScratchBuffer

QUOTE: Final = ord('"')
BACKSLASH: Final = ord("\\")

_CONTROL_LIMIT: Final = 0x20
_ASCII_LIMIT: Final = 0x80
_MAX_CODEPOINT: Final = 0x10FFFF

HIGH_SURROGATES: Final = range(0xD800, 0xDC00)
LOW_SURROGATES: Final = range(0xDC00, 0xE000)

_HEX_DIGITS: Final = frozenset(b"0123456789abcdefABCDEF")

# Escape letter -> decoded byte
_ESCAPES: Final = {
    ord('"'): QUOTE,
    ord("\\"): BACKSLASH,
    ord("/"): ord("/"),
    ord("b"): ord("\b"),
    ord("f"): ord("\f"),
    ord("n"): ord("\n"),
    ord("r"): ord("\r"),
    ord("t"): ord("\t"),
}

# Raw byte -> two character escape
_SHORTHANDS: Final = {
    QUOTE: b'\\"',
    BACKSLASH: b"\\\\",
    ord("/"): b"\\/",
    ord("\b"): b"\\b",
    ord("\f"): b"\\f",
    ord("\n"): b"\\n",
    ord("\r"): b"\\r",
    ord("\t"): b"\\t",
}

# (lead bytes, payload mask, continuation count, smallest legal codepoint)
_UTF8_LEADS: Final = (
    (range(0xC2, 0xE0), 0x1F, 1, 0x80),
    (range(0xE0, 0xF0), 0x0F, 2, 0x800),
    (range(0xF0, 0xF5), 0x07, 3, 0x10000),
)


def encode_utf8(codepoint: int) -> bytes:
    """UTF-8 encodes a codepoint using the 1, 2, 3 or 4 byte form."""
    if codepoint < 0x80:
        return bytes((codepoint,))
    if codepoint < 0x800:
        return bytes((0xC0 | (codepoint >> 6), 0x80 | (codepoint & 0x3F)))
    if codepoint < 0x10000:
        return bytes(
            (
                0xE0 | (codepoint >> 12),
                0x80 | ((codepoint >> 6) & 0x3F),
                0x80 | (codepoint & 0x3F),
            )
        )
    if codepoint <= _MAX_CODEPOINT:
        return bytes(
            (
                0xF0 | (codepoint >> 18),
                0x80 | ((codepoint >> 12) & 0x3F),
                0x80 | ((codepoint >> 6) & 0x3F),
                0x80 | (codepoint & 0x3F),
            )
        )
    raise ValueError(f"codepoint {codepoint:#x} is out of range")


def decode_utf8(data: bytes, pos: Position) -> tuple[int, Position]:
    """
    Decodes one UTF-8 sequence starting at ``pos``.

    Returns the codepoint and the position after the sequence. Overlong
    forms, encoded surrogates, codepoints above U+10FFFF, stray continuation
    bytes and truncated sequences raise ``JSONSerializeError``.
    """
    lead = data[pos]
    if lead < _ASCII_LIMIT:
        return lead, pos + 1

    for leads, mask, count, minimum in _UTF8_LEADS:
        if lead in leads:
            break
    else:
        raise JSONSerializeError("Invalid UTF-8 start byte", pos)

    if pos + count >= len(data):
        raise JSONSerializeError("Truncated UTF-8 sequence", pos)

    codepoint = lead & mask
    for offset in range(1, count + 1):
        byte = data[pos + offset]
        if byte & 0xC0 != 0x80:
            raise JSONSerializeError("Invalid UTF-8 continuation byte", pos)
        codepoint = (codepoint << 6) | (byte & 0x3F)

    if (
        codepoint < minimum
        or codepoint in HIGH_SURROGATES
        or codepoint in LOW_SURROGATES
        or codepoint > _MAX_CODEPOINT
    ):
        raise JSONSerializeError("Invalid UTF-8 sequence", pos)

    return codepoint, pos + count + 1


def _read_hex4(data: bytes, pos: Position) -> int:
    digits = data[pos : pos + 4]
    if len(digits) != 4 or not all(byte in _HEX_DIGITS for byte in digits):
        raise JSONParseError("Invalid \\u escape", data, pos - 2)
    return int(digits, 16)


def _decode_escape(
    data: bytes, pos: Position, buffer: ScratchBuffer[Any]
) -> Position:
    """Decodes the escape whose backslash is at ``pos``."""
    if pos + 1 >= len(data):
        raise JSONParseError("Unterminated escape", data, pos)

    letter = data[pos + 1]
    decoded = _ESCAPES.get(letter)
    if decoded is not None:
        buffer.push_byte(decoded)
        return pos + 2

    if letter != ord("u"):
        raise JSONParseError("Invalid escape", data, pos)

    codepoint = _read_hex4(data, pos + 2)
    pos += 6
    if codepoint in HIGH_SURROGATES:
        if data[pos : pos + 2] != b"\\u":
            raise JSONParseError("Invalid surrogate pair", data, pos - 6)
        low = _read_hex4(data, pos + 2)
        if low not in LOW_SURROGATES:
            raise JSONParseError("Invalid surrogate pair", data, pos - 6)
        codepoint = 0x10000 + ((codepoint - 0xD800) << 10) + (low - 0xDC00)
        pos += 6
    elif codepoint in LOW_SURROGATES:
        # Stricter than pairing alone requires: an unpaired low surrogate is
        # rejected too, so every decoded escape is valid UTF-8.
        raise JSONParseError("Invalid surrogate pair", data, pos - 6)

    buffer.push(encode_utf8(codepoint))
    return pos


def decode_string(
    data: bytes, pos: Position, buffer: ScratchBuffer[Any]
) -> tuple[bytes, Position]:
    """
    Decodes a string body starting just after its opening quote.

    Returns the decoded bytes and the position after the closing quote.
    Embedded NUL bytes produced by ``\\u0000`` are kept. On failure every
    byte pushed for this string is discarded before the error propagates.
    """
    with ProfileContext("parse_string"):
        start = pos - 1
        end = len(data)
        mark = buffer.top
        try:
            while True:
                run = pos
                while run < end:
                    byte = data[run]
                    if (
                        byte == QUOTE
                        or byte == BACKSLASH
                        or byte < _CONTROL_LIMIT
                    ):
                        break
                    run += 1
                if run > pos:
                    buffer.push(data[pos:run])
                    pos = run

                if pos >= end:
                    raise JSONParseError(
                        "Unterminated string starting at", data, start
                    )

                byte = data[pos]
                if byte == QUOTE:
                    return buffer.pop(buffer.top - mark), pos + 1
                if byte == BACKSLASH:
                    pos = _decode_escape(data, pos, buffer)
                else:
                    raise JSONParseError(
                        "Invalid control character", data, pos
                    )
        except JSONParseError:
            buffer.truncate(mark)
            raise


def _unicode_escape(codepoint: int) -> bytes:
    if codepoint >= 0x10000:
        codepoint -= 0x10000
        high = 0xD800 + (codepoint >> 10)
        low = 0xDC00 + (codepoint & 0x3FF)
        return b"\\u%04X\\u%04X" % (high, low)
    return b"\\u%04X" % codepoint


def encode_string(data: bytes, buffer: ScratchBuffer[Any]) -> None:
    """
    Pushes ``data`` onto the buffer as a quoted, escaped JSON string.

    Non-ASCII text and control characters without a shorthand are emitted
    as ``\\uXXXX`` escapes (a surrogate pair above the BMP), so the output
    is pure ASCII. Malformed UTF-8 raises ``JSONSerializeError`` after
    rolling back whatever was pushed for this string.
    """
    with ProfileContext("encode_string", len(data)):
        mark = buffer.top
        buffer.push_byte(QUOTE)
        pos = 0
        end = len(data)
        try:
            while pos < end:
                run = pos
                while run < end:
                    byte = data[run]
                    if (
                        byte < _CONTROL_LIMIT
                        or byte >= _ASCII_LIMIT
                        or byte in _SHORTHANDS
                    ):
                        break
                    run += 1
                if run > pos:
                    buffer.push(data[pos:run])
                    pos = run
                if pos >= end:
                    break

                shorthand = _SHORTHANDS.get(data[pos])
                if shorthand is not None:
                    buffer.push(shorthand)
                    pos += 1
                else:
                    codepoint, pos = decode_utf8(data, pos)
                    buffer.push(_unicode_escape(codepoint))
        except JSONSerializeError:
            buffer.truncate(mark)
            raise
        buffer.push_byte(QUOTE)
