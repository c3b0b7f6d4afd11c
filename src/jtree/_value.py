"""
In-memory value tree: the tagged ``Value`` node, object ``Member`` entries,
typed accessors and the mutation API.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

type Key = bytes | str


class JsonType(Enum):
    """Tag of a ``Value``; decides which payload is active."""

    NULL = "null"
    TRUE = "true"
    FALSE = "false"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class CopyMode(Enum):
    """
    Ownership mode for values handed to ``set_array`` and
    ``append_object_members``.

    ``MOVE`` transfers the payload into the parent and resets the supplied
    value to null. ``CLONE`` deep-copies it and leaves the original alone.
    """

    MOVE = "move"
    CLONE = "clone"


@dataclass(slots=True)
class Member:
    """A key/value pair inside an object. The key is raw bytes."""

    key: bytes
    value: Value

    @property
    def key_length(self) -> int:
        return len(self.key)


def _as_key(key: Key) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, bytes | bytearray | memoryview):
        return bytes(key)
    raise TypeError(f"keys must be str or bytes, not {type(key).__name__}")


class Value:
    """
    One JSON value and everything it owns.

    A fresh ``Value`` is null. Payloads by tag: ``float`` for numbers,
    ``bytes`` for strings, ``list[Value]`` for arrays and ``list[Member]``
    for objects; literals carry none. Objects keep members in insertion
    order and allow duplicate keys.
    """

    __slots__ = ("_type", "_payload")

    # Mutable, compared structurally
    __hash__ = None  # type: ignore[assignment]

    def __init__(self) -> None:
        self._type = JsonType.NULL
        self._payload: Any = None

    @classmethod
    def _of(cls, json_type: JsonType, payload: Any = None) -> Value:
        value = cls()
        value._type = json_type
        value._payload = payload
        return value

    def _take(self) -> Value:
        """Moves this value's payload into a new node and resets self."""
        moved = Value._of(self._type, self._payload)
        self._type = JsonType.NULL
        self._payload = None
        return moved

    def _expect(self, json_type: JsonType) -> None:
        if self._type is not json_type:
            raise TypeError(
                f"expected a {json_type.value} value, "
                f"got {self._type.value}"
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        pending = [(self, other)]
        while pending:
            mine, theirs = pending.pop()
            if mine._type is not theirs._type:
                return False
            if mine._type is JsonType.ARRAY:
                if len(mine._payload) != len(theirs._payload):
                    return False
                pending.extend(zip(mine._payload, theirs._payload))
            elif mine._type is JsonType.OBJECT:
                if len(mine._payload) != len(theirs._payload):
                    return False
                for left, right in zip(mine._payload, theirs._payload):
                    if left.key != right.key:
                        return False
                    pending.append((left.value, right.value))
            elif mine._payload != theirs._payload:
                return False
        return True

    def __repr__(self) -> str:
        if self._payload is None:
            return f"Value({self._type.name})"
        return f"Value({self._type.name}, {self._payload!r})"

    # Accessors

    def get_type(self) -> JsonType:
        return self._type

    def get_number(self) -> float:
        self._expect(JsonType.NUMBER)
        return self._payload  # type: ignore[no-any-return]

    def get_string(self) -> bytes:
        self._expect(JsonType.STRING)
        return self._payload  # type: ignore[no-any-return]

    def get_string_length(self) -> int:
        self._expect(JsonType.STRING)
        return len(self._payload)

    def get_array_size(self) -> int:
        self._expect(JsonType.ARRAY)
        return len(self._payload)

    def get_array_element(self, index: int) -> Value:
        self._expect(JsonType.ARRAY)
        if not 0 <= index < len(self._payload):
            raise IndexError(f"array index {index} out of range")
        return self._payload[index]  # type: ignore[no-any-return]

    def get_object_size(self) -> int:
        self._expect(JsonType.OBJECT)
        return len(self._payload)

    def _member(self, index: int) -> Member:
        self._expect(JsonType.OBJECT)
        if not 0 <= index < len(self._payload):
            raise IndexError(f"member index {index} out of range")
        return self._payload[index]  # type: ignore[no-any-return]

    def get_object_key(self, index: int) -> bytes:
        return self._member(index).key

    def get_object_key_length(self, index: int) -> int:
        return self._member(index).key_length

    def get_object_value(self, index: int) -> Value:
        return self._member(index).value

    def find_object_value(self, key: Key) -> Value | None:
        """
        Returns the value of the first member whose key equals ``key``.

        Keys compare as whole byte strings, so embedded NUL bytes and
        length both matter. Returns None when no member matches.
        """
        self._expect(JsonType.OBJECT)
        wanted = _as_key(key)
        for member in self._payload:
            if member.key == wanted:
                return member.value  # type: ignore[no-any-return]
        return None

    def iter_array(self) -> Iterator[Value]:
        self._expect(JsonType.ARRAY)
        return iter(self._payload)

    def iter_members(self) -> Iterator[tuple[bytes, Value]]:
        self._expect(JsonType.OBJECT)
        return ((member.key, member.value) for member in self._payload)

    # Setters. Each one replaces whatever payload was there before.

    def set_null(self) -> None:
        self._type = JsonType.NULL
        self._payload = None

    def set_true(self) -> None:
        self._type = JsonType.TRUE
        self._payload = None

    def set_false(self) -> None:
        self._type = JsonType.FALSE
        self._payload = None

    def set_boolean(self, flag: bool) -> None:
        self._type = JsonType.TRUE if flag else JsonType.FALSE
        self._payload = None

    def set_number(self, number: float) -> None:
        if isinstance(number, bool) or not isinstance(number, int | float):
            raise TypeError(
                f"number must be int or float, not {type(number).__name__}"
            )
        number = float(number)
        if not math.isfinite(number):
            raise ValueError("Out of range float values are not JSON compliant")
        self._type = JsonType.NUMBER
        self._payload = number

    def set_string(self, data: bytes | bytearray | memoryview | str) -> None:
        if isinstance(data, str):
            payload = data.encode("utf-8")
        elif isinstance(data, bytes | bytearray | memoryview):
            payload = bytes(data)
        else:
            raise TypeError(
                f"string data must be str or bytes, not {type(data).__name__}"
            )
        self._type = JsonType.STRING
        self._payload = payload

    def set_array(
        self, values: Iterable[Value], mode: CopyMode = CopyMode.CLONE
    ) -> None:
        """
        Replaces this value with an array of ``values``, in order.

        With ``CopyMode.MOVE`` each supplied value is emptied into the new
        array and left null; with ``CopyMode.CLONE`` each is deep-copied.
        Nothing is moved unless every supplied value is a ``Value``.
        """
        sources = [_check_source(value) for value in values]
        elements = _adopt_all(sources, mode)
        self._type = JsonType.ARRAY
        self._payload = elements

    def append_object_members(
        self,
        members: Iterable[tuple[Key, Value]],
        mode: CopyMode = CopyMode.CLONE,
    ) -> None:
        """
        Appends ``(key, value)`` pairs to the end of this object.

        A value that is not already an object becomes an empty object
        first. Duplicate keys are appended, never merged. Every key and
        value is checked before any value is moved, so a rejected call
        leaves both this object and the supplied values unchanged.
        """
        pairs = [
            (_as_key(key), _check_source(value)) for key, value in members
        ]
        values = _adopt_all([value for _, value in pairs], mode)
        added = [
            Member(key, value)
            for (key, _), value in zip(pairs, values, strict=True)
        ]
        if self._type is not JsonType.OBJECT:
            self._type = JsonType.OBJECT
            self._payload = []
        self._payload.extend(added)

    def deep_copy(self) -> Value:
        """
        Returns a fully independent copy of this tree.

        Like ``free``, walks the tree with an explicit stack.
        """
        root = Value._of(self._type, self._payload)
        pending = [(self, root)]
        while pending:
            source, copy = pending.pop()
            if source._type is JsonType.ARRAY:
                copy._payload = [
                    Value._of(element._type, element._payload)
                    for element in source._payload
                ]
                pending.extend(zip(source._payload, copy._payload))
            elif source._type is JsonType.OBJECT:
                copy._payload = [
                    Member(
                        member.key,
                        Value._of(member.value._type, member.value._payload),
                    )
                    for member in source._payload
                ]
                pending.extend(
                    (member.value, copied.value)
                    for member, copied in zip(source._payload, copy._payload)
                )
        return root

    def free(self) -> None:
        """
        Releases every descendant and resets this value to null.

        Walks the tree with an explicit stack, so depth does not matter.
        Freeing an already-null value does nothing.
        """
        pending = [self]
        while pending:
            value = pending.pop()
            if value._type is JsonType.ARRAY:
                pending.extend(value._payload)
            elif value._type is JsonType.OBJECT:
                pending.extend(member.value for member in value._payload)
            value._type = JsonType.NULL
            value._payload = None

    # Conversions to and from native Python objects

    @classmethod
    def from_python(cls, obj: Any) -> Value:  # noqa: PLR0911
        """
        Builds a tree from ``None``, bools, numbers, str/bytes, lists,
        tuples and dicts keyed by str or bytes.
        """
        value = cls()
        if obj is None:
            return value
        if obj is True or obj is False:
            value.set_boolean(obj)
            return value
        if isinstance(obj, int | float):
            value.set_number(obj)
            return value
        if isinstance(obj, str | bytes | bytearray):
            value.set_string(obj)
            return value
        if isinstance(obj, list | tuple):
            value._type = JsonType.ARRAY
            value._payload = [cls.from_python(item) for item in obj]
            return value
        if isinstance(obj, dict):
            value._type = JsonType.OBJECT
            value._payload = [
                Member(_as_key(key), cls.from_python(item))
                for key, item in obj.items()
            ]
            return value
        msg = f"Object of type {type(obj).__name__} is not JSON serializable"
        raise TypeError(msg)

    def to_python(self) -> Any:
        """
        Converts this tree to native objects.

        Strings are decoded as UTF-8 (malformed bytes raise
        ``UnicodeDecodeError``), numbers stay floats, and objects become
        dicts that keep the first member for each duplicated key.
        """
        root = self._native_shell()
        pending = [(self, root)]
        while pending:
            value, native = pending.pop()
            if value._type is JsonType.ARRAY:
                for element in value._payload:
                    child = element._native_shell()
                    native.append(child)
                    pending.append((element, child))
            elif value._type is JsonType.OBJECT:
                for member in value._payload:
                    key = member.key.decode("utf-8")
                    if key not in native:
                        child = member.value._native_shell()
                        native[key] = child
                        pending.append((member.value, child))
        return root

    def _native_shell(self) -> Any:  # noqa: PLR0911
        """Native scalar, or an empty list/dict for containers."""
        if self._type is JsonType.NULL:
            return None
        if self._type is JsonType.TRUE:
            return True
        if self._type is JsonType.FALSE:
            return False
        if self._type is JsonType.NUMBER:
            return self._payload
        if self._type is JsonType.STRING:
            return self._payload.decode("utf-8")
        if self._type is JsonType.ARRAY:
            return []
        return {}


def _check_source(value: Value) -> Value:
    if not isinstance(value, Value):
        raise TypeError(f"expected a Value, got {type(value).__name__}")
    return value


def _adopt_all(sources: list[Value], mode: CopyMode) -> list[Value]:
    """Moves or clones already checked values, in order."""
    if mode is CopyMode.MOVE:
        return [value._take() for value in sources]
    if mode is CopyMode.CLONE:
        return [value.deep_copy() for value in sources]
    raise TypeError(f"mode must be a CopyMode, not {type(mode).__name__}")


def deep_copy(value: Value) -> Value:
    """Returns a fully independent copy of ``value``."""
    return _check_source(value).deep_copy()


def free(value: Value) -> None:
    """Releases ``value``'s descendants and resets it to null."""
    _check_source(value).free()
