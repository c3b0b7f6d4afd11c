"""Parse configuration and its environment-driven defaults."""

import os
from dataclasses import dataclass


def _depth_from_environment() -> int:
    """Reads ``JTREE_MAX_DEPTH``, defaulting to 256."""
    raw = os.environ.get("JTREE_MAX_DEPTH", "256")
    try:
        depth = int(raw)
    except ValueError:
        raise ValueError(
            f"JTREE_MAX_DEPTH must be an integer, got {raw!r}"
        ) from None
    if depth < 1:
        raise ValueError(f"JTREE_MAX_DEPTH must be at least 1, got {depth}")
    return depth


# Nesting cap for parsing. The parser recurses once per container level, so
# the default stays inside the interpreter's default recursion limit.
DEFAULT_MAX_DEPTH = _depth_from_environment()


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures JSON parsing behavior with immutable settings.

    ``max_depth`` bounds the number of nested arrays and objects; a document
    nested deeper is reported as a parse error rather than exhausting the
    call stack. A limit deeper than the interpreter stack allows still ends
    in a parse error, raised where recursion ran out.
    """

    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(
            self.max_depth, int
        ):
            raise TypeError("max_depth must be an integer")
        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")
