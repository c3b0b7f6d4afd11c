"""
Serializer: renders a ``Value`` tree as canonical compact JSON text.

Array elements and object members are separated by ``", "`` and keys by
``": "``. Output is ASCII; a failure leaves no partial text behind.
"""

import logging
from typing import Any

from ._codec import encode_string
from ._errors import JSONSerializeError
from ._errors import SerializeOutcome
from ._profiling import ProfileContext
from ._scratch import ScratchBuffer
from ._value import JsonType
from ._value import Value

logger = logging.getLogger(__name__)

_ITEM_SEPARATOR = b", "
_KEY_SEPARATOR = b": "


def _encode_number(number: float, buffer: ScratchBuffer[Any]) -> None:
    """Seventeen significant digits round-trip every finite double exactly."""
    buffer.push(b"%.17g" % number)


def _encode_tree(root: Value, buffer: ScratchBuffer[Any]) -> None:
    """
    Renders ``root`` with an explicit work stack, so depth does not matter.

    The stack holds values still to render, raw punctuation, and
    ``(key, value)`` members whose key has not been written yet.
    """
    pending: list[Value | bytes | tuple[bytes, Value]] = [root]
    while pending:
        item = pending.pop()
        if isinstance(item, bytes):
            buffer.push(item)
        elif isinstance(item, tuple):
            key, member = item
            encode_string(key, buffer)
            buffer.push(_KEY_SEPARATOR)
            pending.append(member)
        elif item.get_type() is JsonType.ARRAY:
            buffer.push_byte(ord("["))
            pending.append(b"]")
            _push_reversed(pending, list(item.iter_array()))
        elif item.get_type() is JsonType.OBJECT:
            buffer.push_byte(ord("{"))
            pending.append(b"}")
            _push_reversed(pending, list(item.iter_members()))
        else:
            _encode_scalar(item, buffer)


def _push_reversed(
    pending: list[Value | bytes | tuple[bytes, Value]],
    children: list[Value] | list[tuple[bytes, Value]],
) -> None:
    for index in range(len(children) - 1, -1, -1):
        pending.append(children[index])
        if index:
            pending.append(_ITEM_SEPARATOR)


def _encode_scalar(value: Value, buffer: ScratchBuffer[Any]) -> None:
    json_type = value.get_type()
    if json_type is JsonType.NULL:
        buffer.push(b"null")
    elif json_type is JsonType.TRUE:
        buffer.push(b"true")
    elif json_type is JsonType.FALSE:
        buffer.push(b"false")
    elif json_type is JsonType.NUMBER:
        _encode_number(value.get_number(), buffer)
    else:
        encode_string(value.get_string(), buffer)


def serialize(value: Value) -> bytes:
    """
    Serializes ``value`` to UTF-8 (in practice ASCII) JSON text.

    Raises ``JSONSerializeError`` if any string or key holds malformed
    UTF-8; nothing is returned in that case.
    """
    if not isinstance(value, Value):
        raise TypeError(f"expected a Value, got {type(value).__name__}")

    buffer: ScratchBuffer[Any] = ScratchBuffer()
    with ProfileContext("serialize"), buffer:
        try:
            _encode_tree(value, buffer)
        except JSONSerializeError as e:
            logger.debug("serialize failed: %s", e)
            raise
        return buffer.pop(buffer.top)


def try_serialize(value: Value) -> tuple[bytes, SerializeOutcome]:
    """Serializes like ``serialize`` but reports failure as an outcome."""
    try:
        return serialize(value), SerializeOutcome.OK
    except JSONSerializeError:
        return b"", SerializeOutcome.ERROR
