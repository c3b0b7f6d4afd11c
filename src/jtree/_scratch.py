"""Call-local scratch stack used while parsing and serializing."""

from __future__ import annotations

from typing import Any
from typing import Final

INITIAL_CAPACITY: Final = 256


class ScratchBuffer[T]:
    """
    Growable append/pop stack private to a single parse or serialize call.

    Bytes live on a byte stack whose capacity grows by half again (starting
    at 256 bytes) whenever a push would overflow it. The parser stages
    decoded string bytes there and the serializer accumulates its output
    there. Parsed array elements are staged on a parallel value stack until
    the closing bracket is seen.

    Use as a context manager; leaving the ``with`` block releases
    everything still staged.
    """

    __slots__ = ("_data", "_top", "_values")

    def __init__(self) -> None:
        self._data = bytearray()
        self._top = 0
        self._values: list[T] = []

    def __enter__(self) -> ScratchBuffer[T]:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.release()

    @property
    def top(self) -> int:
        """Number of bytes currently on the byte stack."""
        return self._top

    @property
    def capacity(self) -> int:
        return len(self._data)

    @property
    def value_count(self) -> int:
        return len(self._values)

    def _reserve(self, size: int) -> None:
        capacity = len(self._data)
        if size <= capacity:
            return
        if capacity == 0:
            capacity = INITIAL_CAPACITY
        while capacity < size:
            capacity += capacity >> 1
        self._data.extend(bytes(capacity - len(self._data)))

    def push(self, data: bytes | bytearray | memoryview) -> None:
        """Appends ``data`` to the byte stack."""
        size = len(data)
        end = self._top + size
        self._reserve(end)
        self._data[self._top : end] = data
        self._top = end

    def push_byte(self, byte: int) -> None:
        self._reserve(self._top + 1)
        self._data[self._top] = byte
        self._top += 1

    def pop(self, size: int) -> bytes:
        """
        Removes the top ``size`` bytes and returns them.

        The returned object is an independent copy; the popped region of the
        buffer itself is overwritten by the next push.
        """
        if size < 0 or size > self._top:
            raise IndexError(
                f"cannot pop {size} bytes from a buffer holding {self._top}"
            )
        start = self._top - size
        popped = bytes(self._data[start : self._top])
        self._top = start
        return popped

    def truncate(self, mark: int) -> None:
        """Discards everything pushed since ``top`` was ``mark``."""
        if mark < 0 or mark > self._top:
            raise IndexError(f"mark {mark} is outside the buffer")
        self._top = mark

    def push_value(self, value: T) -> None:
        self._values.append(value)

    def pop_values(self, count: int) -> list[T]:
        """Removes the top ``count`` staged values, oldest first."""
        if count < 0 or count > len(self._values):
            raise IndexError(
                f"cannot pop {count} values from a stack holding "
                f"{len(self._values)}"
            )
        if count == 0:
            return []
        popped = self._values[-count:]
        del self._values[-count:]
        return popped

    def release(self) -> None:
        """Drops all storage; the buffer may be reused afterwards."""
        self._data = bytearray()
        self._top = 0
        self._values.clear()
