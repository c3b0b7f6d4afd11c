"""
Document generators for jtree benchmarks.

Every generator is seeded so a benchmark run always sees the same bytes.
Documents are produced as native objects and rendered with the standard
library so the input never depends on the code being measured.
"""

import json
import random
import string
from collections.abc import Callable
from typing import Any

DOCUMENT_KINDS = (
    "record",
    "catalog",
    "mixed_array",
    "nested",
    "escape_heavy",
    "unicode_heavy",
)

_SEED = 20240115
_SHORTHAND_CHARS = '"\\/\b\f\n\r\t'
_NON_ASCII = "éß€中文\U0001f600\U0001d11e"


def generate_document(kind: str) -> bytes:
    """Returns the UTF-8 JSON text for a named document kind."""
    return json.dumps(generate_native(kind), ensure_ascii=False).encode()


def generate_native(kind: str) -> Any:
    """Returns the native object behind a named document kind."""
    generators: dict[str, Callable[[random.Random], Any]] = {
        "record": _record,
        "catalog": _catalog,
        "mixed_array": _mixed_array,
        "nested": _nested,
        "escape_heavy": _escape_heavy,
        "unicode_heavy": _unicode_heavy,
    }

    if kind not in generators:
        raise ValueError(f"Unknown document kind: {kind}")

    return generators[kind](random.Random(_SEED))


def _record(rng: random.Random) -> dict[str, Any]:
    """A single small object, well under a kilobyte."""
    return {
        "id": rng.randint(1, 10**6),
        "name": _word(rng, 12),
        "enabled": rng.random() < 0.5,
        "ratio": rng.random(),
        "tags": [_word(rng, 5) for _ in range(4)],
        "parent": None,
    }


def _catalog(rng: random.Random) -> dict[str, Any]:
    """Several hundred records keyed by name."""
    return {
        f"item_{index:04d}": _record(rng) | {"price": rng.uniform(0, 1e4)}
        for index in range(400)
    }


def _mixed_array(rng: random.Random) -> list[Any]:
    """A flat array drawing from every value kind."""
    makers: list[Callable[[], Any]] = [
        lambda: rng.randint(-(10**9), 10**9),
        lambda: rng.uniform(-1e6, 1e6),
        lambda: rng.choice([True, False, None]),
        lambda: _word(rng, rng.randint(1, 40)),
        lambda: [rng.random() for _ in range(3)],
        lambda: {"k": _word(rng, 6)},
    ]
    return [rng.choice(makers)() for _ in range(2000)]


def _nested(rng: random.Random) -> dict[str, Any]:
    """A branching tree nine levels deep."""

    def node(depth: int) -> dict[str, Any]:
        if depth == 0:
            return {"leaf": _word(rng, 8)}
        return {
            "depth": depth,
            "children": [node(depth - 1) for _ in range(2)],
            "label": _word(rng, 10),
        }

    return node(9)


def _escape_heavy(rng: random.Random) -> list[str]:
    """Strings where roughly a third of characters need an escape."""
    alphabet = string.ascii_letters + string.digits + " "

    def text() -> str:
        return "".join(
            rng.choice(_SHORTHAND_CHARS + "\x01")
            if rng.random() < 0.3
            else rng.choice(alphabet)
            for _ in range(64)
        )

    return [text() for _ in range(300)]


def _unicode_heavy(rng: random.Random) -> dict[str, list[str]]:
    """Multi-byte text, including characters above the BMP."""
    return {
        _word(rng, 6): [
            "".join(rng.choice(_NON_ASCII) for _ in range(32))
            for _ in range(10)
        ]
        for _ in range(40)
    }


def _word(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(string.ascii_letters, k=length))
