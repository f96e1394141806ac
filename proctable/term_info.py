"""Terminal size and line-oriented output with cursor control."""

from __future__ import annotations

import os
import sys
from typing import TextIO

_CLEAR_LINE = "\r\x1b[2K"
_CLEAR_SCREEN = "\r\x1b[2J\r\x1b[H"
_FALLBACK_SIZE = (24, 79)


def _cursor_to(x: int, y: int) -> str:
    return f"\x1b[{y + 1};{x + 1}H"


def _cursor_down(n: int) -> str:
    return f"\x1b[{n}B" if n > 0 else ""


def _terminal_size(stream: TextIO) -> tuple[int, int]:
    try:
        size = os.get_terminal_size(stream.fileno())
    except (AttributeError, OSError, ValueError):
        return _FALLBACK_SIZE
    return size.lines, size.columns


class TermInfo:
    """An output terminal: its size and the operations the display needs."""

    def __init__(self, clear_by_line: bool = False, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self.height, self.width = _terminal_size(self._stream)
        self.clear_by_line = clear_by_line

    def _write(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()

    def write_line(self, text: str) -> None:
        """Write one line, clearing the current line first if configured."""
        if self.clear_by_line:
            self._write(_CLEAR_LINE)
        self._write(text + "\n")

    def clear_screen(self) -> None:
        self._write(_CLEAR_SCREEN)

    def move_cursor_to(self, x: int, y: int) -> None:
        self._write(_cursor_to(x, y))

    def clear_rest_lines(self) -> None:
        """Clear as many lines as the terminal is tall, moving down after each."""
        for _ in range(self.height):
            self._write(_CLEAR_LINE)
            self._write(_cursor_down(1))