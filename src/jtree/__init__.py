"""
In-memory JSON value trees.

Parses UTF-8 JSON text into a tree of ``Value`` nodes, lets callers query
and mutate that tree through typed accessors and setters, and serializes it
back to canonical compact text. ``loads``/``dumps`` wrap the same engine for
native Python objects, in the manner of the standard library json module.
"""

import logging
from typing import IO
from typing import Any

from ._config import DEFAULT_MAX_DEPTH
from ._config import ParseConfig
from ._errors import JSONParseError
from ._errors import JSONSerializeError
from ._errors import ParseOutcome
from ._errors import SerializeOutcome
from ._parser import JsonParser
from ._parser import JsonText
from ._parser import parse
from ._parser import try_parse
from ._profiling import HotPathStats
from ._profiling import clear_hot_path_stats
from ._profiling import get_hot_path_stats
from ._serializer import serialize
from ._serializer import try_serialize
from ._value import CopyMode
from ._value import JsonType
from ._value import Member
from ._value import Value
from ._value import deep_copy
from ._value import free

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())


def loads(s: JsonText, **kwargs: Any) -> Any:
    """
    Parses a JSON document into native Python objects.

    Numbers become floats, strings are decoded from UTF-8, and objects keep
    the first value seen for a duplicated key. Bytes input must be valid
    UTF-8 throughout; a malformed sequence raises ``JSONParseError`` at its
    byte offset.
    """
    if isinstance(s, bytes | bytearray | memoryview):
        s = bytes(s)
        try:
            s.decode("utf-8")
        except UnicodeDecodeError as e:
            raise JSONParseError("Invalid UTF-8 sequence", s, e.start) from None
    return parse(s, **kwargs).to_python()


def dumps(obj: Any) -> str:
    """Serializes native Python objects to canonical compact JSON text."""
    return serialize(Value.from_python(obj)).decode("ascii")


def load(fp: IO[str] | IO[bytes], **kwargs: Any) -> Any:
    """
    Parses a JSON document read from a text or binary file-like object.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return loads(fp.read(), **kwargs)


def dump(obj: Any, fp: IO[str]) -> None:
    """
    Serializes native Python objects to a text file-like object.
    """
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")

    fp.write(dumps(obj))


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "CopyMode",
    "HotPathStats",
    "JSONParseError",
    "JSONSerializeError",
    "JsonParser",
    "JsonText",
    "JsonType",
    "Member",
    "ParseConfig",
    "ParseOutcome",
    "SerializeOutcome",
    "Value",
    "clear_hot_path_stats",
    "deep_copy",
    "dump",
    "dumps",
    "free",
    "get_hot_path_stats",
    "load",
    "loads",
    "parse",
    "serialize",
    "try_parse",
    "try_serialize",
]
