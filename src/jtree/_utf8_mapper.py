"""Byte offset to character offset mapping for error positions."""

from __future__ import annotations

from bisect import bisect_right
from typing import Final


class UTF8PositionMapper:
    """Maps offsets in the UTF-8 encoding of a text back to the text.

    The parser works on bytes, but a caller that passed ``str`` expects
    error positions as character indexes. Instead of mapping every byte,
    the mapper records a checkpoint every ``checkpoint_interval`` characters
    and walks forward from the nearest one.
    """

    def __init__(self, text: str, checkpoint_interval: int = 256) -> None:
        """Initialize position mapper with checkpoint system.

        Args:
            text: The text whose UTF-8 encoding was parsed
            checkpoint_interval: Characters between checkpoints
        """
        self.text: Final = text
        self.checkpoint_interval: Final = checkpoint_interval
        self._byte_checkpoints: list[int] = []
        self._char_checkpoints: list[int] = []
        self._is_ascii_only = text.isascii()

        if not self._is_ascii_only:
            self._build_checkpoints()

    def _build_checkpoints(self) -> None:
        byte_pos = 0
        for char_pos, char in enumerate(self.text):
            if char_pos % self.checkpoint_interval == 0:
                self._byte_checkpoints.append(byte_pos)
                self._char_checkpoints.append(char_pos)
            byte_pos += _utf8_width(char)

    def byte_to_char(self, byte_pos: int) -> int:
        """Convert a byte offset to the index of the character containing it.

        Args:
            byte_pos: Byte offset into the UTF-8 encoded text

        Returns:
            Character index in the original text
        """
        if self._is_ascii_only:
            return byte_pos

        index = bisect_right(self._byte_checkpoints, byte_pos) - 1
        current_byte = self._byte_checkpoints[index]
        current_char = self._char_checkpoints[index]

        while current_char < len(self.text):
            width = _utf8_width(self.text[current_char])
            if current_byte + width > byte_pos:
                break
            current_byte += width
            current_char += 1

        return current_char


def _utf8_width(char: str) -> int:
    codepoint = ord(char)
    if codepoint < 0x80:
        return 1
    if codepoint < 0x800:
        return 2
    if codepoint < 0x10000:
        return 3
    return 4
