"""Search, text layout and formatting helpers shared by the display code."""

from __future__ import annotations

import re
import sys
import time
from enum import Enum
from typing import Iterable, Protocol, Sequence

from wcwidth import wcwidth

from proctable.config import ColumnAlign, SearchLogic

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_INTEGER = re.compile(r"[+-]?[0-9]+")
_ESCAPE = "\x1b"

_BINARY_UNITS = ("KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB")


class Searchable(Protocol):
    def find_partial(self, pid: int, keyword: str) -> bool: ...

    def find_exact(self, pid: int, keyword: str) -> bool: ...


class KeywordClass(Enum):
    NUMERIC = "Numeric"
    NONNUMERIC = "NonNumeric"


def _initial(logic: SearchLogic) -> bool:
    return logic in (SearchLogic.AND, SearchLogic.NAND)


def _combine(logic: SearchLogic, acc: bool, hit: bool) -> bool:
    if logic in (SearchLogic.AND, SearchLogic.NAND):
        return acc and hit
    return acc or hit


def _find(columns: Sequence[Searchable], pid: int, keywords: Iterable[str], logic: SearchLogic, exact: bool) -> bool:
    result = _initial(logic)
    for keyword in keywords:
        if exact:
            hit = any(column.find_exact(pid, keyword) for column in columns)
        else:
            hit = any(column.find_partial(pid, keyword) for column in columns)
        result = _combine(logic, result, hit)
    return result


def find_partial(columns: Sequence[Searchable], pid: int, keywords: Iterable[str], logic: SearchLogic) -> bool:
    """Combine, by ``logic``, whether each keyword is partially found in any column."""
    return _find(columns, pid, keywords, logic, exact=False)


def find_exact(columns: Sequence[Searchable], pid: int, keywords: Iterable[str], logic: SearchLogic) -> bool:
    """Combine, by ``logic``, whether each keyword exactly matches any column."""
    return _find(columns, pid, keywords, logic, exact=True)


def classify(keyword: str) -> KeywordClass:
    """A keyword is numeric when it is a 64-bit signed integer."""
    if _INTEGER.fullmatch(keyword) and _I64_MIN <= int(keyword) <= _I64_MAX:
        return KeywordClass.NUMERIC
    return KeywordClass.NONNUMERIC


def _char_width(char: str) -> int:
    return max(wcwidth(char), 0)


def _text_width(text: str) -> int:
    return sum(_char_width(c) for c in text)


def adjust(text: str, width: int, align: ColumnAlign) -> str:
    """Pad ``text`` to ``width`` display cells with the given alignment, or cut it."""
    text_width = _text_width(text)
    if width < text_width:
        return truncate(text, width)
    space = width - text_width
    if align is ColumnAlign.LEFT:
        return text + " " * space
    if align is ColumnAlign.RIGHT:
        return " " * space + text
    left = space // 2
    right = space - left
    return " " * left + text + " " * right


def parse_time(seconds: int) -> str:
    """Format a duration in seconds as HH:MM:SS, days or years."""
    sec = seconds % 60
    minutes = (seconds // 60) % 60
    hours = (seconds // 3600) % 24
    days = seconds / (60.0 * 60.0 * 24.0)
    years = seconds / (365.0 * 60.0 * 60.0 * 24.0)
    if years >= 1.0:
        return f"{years:.1f}years"
    if days >= 1.0:
        return f"{days:.1f}days"
    return f"{hours:02}:{minutes:02}:{sec:02}"


def truncate(text: str, width: int) -> str:
    """Cut ``text`` to ``width`` display cells; escape sequences take no room."""
    total = 0
    kept: list[str] = []
    in_escape = False
    for char in text:
        if char == _ESCAPE:
            in_escape = True
        if in_escape:
            if char == "m":
                in_escape = False
            kept.append(char)
            continue
        total += _char_width(char)
        if total > width:
            return "".join(kept)
        kept.append(char)
    return text


def change_endian(value: int) -> int:
    """Swap the byte order of a 32-bit value."""
    return int.from_bytes((value & 0xFFFFFFFF).to_bytes(4, "big"), "little")


def format_sid(sid: Sequence[int], abbr: bool) -> str:
    """Render a security identifier, optionally eliding the middle authorities."""
    head = f"S-{sid[0]}-{sid[1]}-{sid[2]}"
    rest = sid[3:]
    if not rest:
        return head
    if abbr:
        return f"{head}-...-{sid[-1]}"
    return "-".join([head, *(str(s) for s in rest)])


def bytify(value: int) -> str:
    """Format a byte count with a binary unit prefix, e.g. ``1.500K``."""
    if value < 1024:
        return str(value)
    amount = float(value)
    unit = _BINARY_UNITS[0]
    for power, name in enumerate(_BINARY_UNITS, start=1):
        if value >= 1024**power:
            amount = value / 1024**power
            unit = name
    formatted = f"{amount:.3f} {unit}"
    return formatted.replace(" ", "").replace("B", "").replace("i", "")


def lap(start: float, message: str) -> float:
    """Report the time elapsed since ``start`` on stderr and return a new start."""
    elapsed = time.monotonic() - start
    secs = int(elapsed)
    millis = int((elapsed - secs) * 1000)
    print(f"{message} [{secs}.{millis:03}s]", file=sys.stderr)
    return time.monotonic()