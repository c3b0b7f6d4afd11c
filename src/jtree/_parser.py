"""
Recursive-descent JSON parser producing a ``Value`` tree.

Parsing is all-or-nothing: any error unwinds the whole call, discarding
every partially built member and staged array element, and the caller
gets a single ``JSONParseError``.
"""

import logging
from typing import Any
from typing import Final

from ._codec import QUOTE
from ._codec import decode_string
from ._config import ParseConfig
from ._errors import JSONParseError
from ._errors import ParseOutcome
from ._grammar import convert_number
from ._grammar import match_literal
from ._grammar import scan_number
from ._grammar import skip_whitespace
from ._profiling import ProfileContext
from ._scratch import ScratchBuffer
from ._utf8_mapper import UTF8PositionMapper
from ._value import JsonType
from ._value import Member
from ._value import Value

logger = logging.getLogger(__name__)

type JsonText = str | bytes | bytearray | memoryview

_LBRACE: Final = ord("{")
_RBRACE: Final = ord("}")
_LBRACKET: Final = ord("[")
_RBRACKET: Final = ord("]")
_COMMA: Final = ord(",")
_COLON: Final = ord(":")
_MINUS: Final = ord("-")

# First byte -> (literal, tag)
_LITERALS: Final = {
    ord("t"): (b"true", JsonType.TRUE),
    ord("f"): (b"false", JsonType.FALSE),
    ord("n"): (b"null", JsonType.NULL),
}


class JsonParser:
    """
    Recursive-descent parser over a length-bounded byte cursor.

    One parser handles one document. Decoded string bytes and array
    elements are staged on the call's ``ScratchBuffer``; nesting beyond
    ``config.max_depth`` is reported as a parse error.
    """

    def __init__(
        self, data: bytes, config: ParseConfig, buffer: ScratchBuffer[Value]
    ) -> None:
        self.data = data
        self.pos = 0
        self.end = len(data)
        self.config = config
        self.buffer = buffer
        self.depth = 0

    def _error(self, msg: str) -> JSONParseError:
        return JSONParseError(msg, self.data, self.pos)

    def _skip_whitespace(self) -> None:
        self.pos = skip_whitespace(self.data, self.pos)

    def _peek(self) -> int | None:
        return self.data[self.pos] if self.pos < self.end else None

    def _enter_container(self) -> None:
        self.depth += 1
        if self.depth > self.config.max_depth:
            raise self._error("Maximum nesting depth exceeded")

    def parse_document(self) -> Value:
        """
        Parses exactly one value surrounded by optional whitespace.

        A ``max_depth`` above what the interpreter stack allows still
        fails as a parse error, at the position where recursion ran out.
        """
        self._skip_whitespace()
        try:
            value = self.parse_value()
        except RecursionError:
            raise self._error("Maximum nesting depth exceeded") from None
        self._skip_whitespace()
        if self.pos != self.end:
            value.free()
            raise self._error("Extra data")
        return value

    def parse_value(self) -> Value:
        """Parses the value starting at the current (non-whitespace) byte."""
        byte = self._peek()
        if byte is None:
            raise self._error("Expecting value")
        if byte == _LBRACE:
            return self.parse_object()
        if byte == _LBRACKET:
            return self.parse_array()
        if byte == QUOTE:
            return self.parse_string()
        if byte in _LITERALS:
            literal, json_type = _LITERALS[byte]
            self.pos = match_literal(self.data, self.pos, literal)
            return Value._of(json_type)
        if byte == _MINUS or ord("0") <= byte <= ord("9"):
            return self.parse_number()
        raise self._error("Expecting value")

    def parse_number(self) -> Value:
        with ProfileContext("parse_number"):
            start = self.pos
            self.pos = scan_number(self.data, start)
            number = convert_number(self.data, start, self.pos)
            return Value._of(JsonType.NUMBER, number)

    def parse_string(self) -> Value:
        data, self.pos = decode_string(self.data, self.pos + 1, self.buffer)
        return Value._of(JsonType.STRING, data)

    def parse_array(self) -> Value:
        """
        Parses an array. Elements are staged on the scratch buffer and moved
        into one list when the closing bracket arrives.
        """
        with ProfileContext("parse_array"):
            self._enter_container()
            self.pos += 1
            self._skip_whitespace()
            if self._peek() == _RBRACKET:
                self.pos += 1
                self.depth -= 1
                return Value._of(JsonType.ARRAY, [])

            staged = 0
            try:
                while True:
                    self.buffer.push_value(self.parse_value())
                    staged += 1
                    self._skip_whitespace()
                    byte = self._peek()
                    if byte == _COMMA:
                        self.pos += 1
                        self._skip_whitespace()
                    elif byte == _RBRACKET:
                        self.pos += 1
                        self.depth -= 1
                        elements = self.buffer.pop_values(staged)
                        return Value._of(JsonType.ARRAY, elements)
                    else:
                        raise self._error("Expecting ',' or ']' delimiter")
            except JSONParseError:
                for element in self.buffer.pop_values(staged):
                    element.free()
                raise

    def parse_object(self) -> Value:
        """Parses an object, keeping members in the order they appear."""
        with ProfileContext("parse_object"):
            self._enter_container()
            self.pos += 1
            self._skip_whitespace()
            if self._peek() == _RBRACE:
                self.pos += 1
                self.depth -= 1
                return Value._of(JsonType.OBJECT, [])

            members: list[Member] = []
            try:
                while True:
                    if self._peek() != QUOTE:
                        raise self._error(
                            "Expecting property name enclosed in double quotes"
                        )
                    key, self.pos = decode_string(
                        self.data, self.pos + 1, self.buffer
                    )
                    self._skip_whitespace()
                    if self._peek() != _COLON:
                        raise self._error("Expecting ':' delimiter")
                    self.pos += 1
                    self._skip_whitespace()
                    members.append(Member(key, self.parse_value()))

                    self._skip_whitespace()
                    byte = self._peek()
                    if byte == _COMMA:
                        self.pos += 1
                        self._skip_whitespace()
                    elif byte == _RBRACE:
                        self.pos += 1
                        self.depth -= 1
                        return Value._of(JsonType.OBJECT, members)
                    else:
                        raise self._error("Expecting ',' or '}' delimiter")
            except JSONParseError:
                for member in members:
                    member.value.free()
                raise


def _coerce_input(text: JsonText) -> bytes:
    if isinstance(text, str):
        try:
            return text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise JSONParseError("Invalid character", text, e.start) from e
    if isinstance(text, bytes | bytearray | memoryview):
        return bytes(text)
    raise TypeError(
        f"the JSON document must be str or bytes, not {type(text).__name__}"
    )


def parse(text: JsonText, **kwargs: Any) -> Value:
    """
    Parses one JSON document into a ``Value`` tree.

    ``text`` is UTF-8 bytes or a ``str`` (encoded to UTF-8 first). Keyword
    arguments build a ``ParseConfig``. Raises ``JSONParseError`` on any
    grammar violation; positions refer to ``text`` as given.
    """
    config = ParseConfig(**kwargs)
    data = _coerce_input(text)

    buffer: ScratchBuffer[Value] = ScratchBuffer()
    with ProfileContext("parse", len(data)), buffer:
        try:
            return JsonParser(data, config, buffer).parse_document()
        except JSONParseError as e:
            logger.debug("parse failed: %s", e)
            if isinstance(text, str):
                pos = UTF8PositionMapper(text).byte_to_char(e.pos)
                raise JSONParseError(e.msg, text, pos) from None
            raise


def try_parse(text: JsonText, **kwargs: Any) -> tuple[Value, ParseOutcome]:
    """
    Parses like ``parse`` but reports failure as an outcome.

    On error the returned value is null and nothing else survives.
    """
    try:
        return parse(text, **kwargs), ParseOutcome.OK
    except JSONParseError:
        return Value(), ParseOutcome.ERROR
