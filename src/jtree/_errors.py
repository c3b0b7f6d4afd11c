"""
Error and outcome types shared by the parser and serializer.

Parsing collapses every grammar violation into one exception type and one
outcome; serialization fails only on malformed UTF-8 inside a string.
"""

from enum import Enum

type Position = int


class ParseOutcome(Enum):
    """Pass/fail result of a non-raising parse."""

    OK = "ok"
    ERROR = "error"


class SerializeOutcome(Enum):
    """Pass/fail result of a non-raising serialize."""

    OK = "ok"
    ERROR = "error"


class JSONParseError(ValueError):
    """
    Handles JSON parsing failures with precise position and context information.

    The position is an offset into ``doc``: a character index when the
    document was given as ``str``, a byte index when it was given as bytes.
    Line and column numbers are derived from it.
    """

    def __init__(
        self, msg: str, doc: str | bytes = "", pos: Position = 0
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.doc = doc
        self.pos = pos

        newline = "\n" if isinstance(doc, str) else b"\n"
        self.lineno = doc.count(newline, 0, pos) + 1 if doc else 1
        self.colno = pos - doc.rfind(newline, 0, pos) if doc else pos + 1

        super().__init__(f"{msg} at line {self.lineno}, column {self.colno}")

    def __reduce__(self) -> tuple[type, tuple[str, str | bytes, Position]]:
        return self.__class__, (self.msg, self.doc, self.pos)


class JSONSerializeError(ValueError):
    """
    Raised when a string payload or object key is not valid UTF-8.

    ``pos`` is the byte offset of the offending sequence inside that string.
    """

    def __init__(self, msg: str, pos: Position = 0) -> None:
        self.msg = msg
        self.pos = pos
        super().__init__(f"{msg} at byte {pos}")

    def __reduce__(self) -> tuple[type, tuple[str, Position]]:
        return self.__class__, (self.msg, self.pos)
