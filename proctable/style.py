"""Coloring of table cells according to the configured styles."""

from __future__ import annotations

from proctable.config import (
    Color,
    ColorByTheme,
    ColumnStyle,
    ColumnStyleKind,
    ConfigStyle,
    ConfigTheme,
    NamedColor,
)

_RESET = "\x1b[0m"

# Base color, whether it is the bright variant.
_NAMED: dict[NamedColor, tuple[int, bool]] = {
    NamedColor.BRIGHT_BLACK: (0, True),
    NamedColor.BRIGHT_RED: (1, True),
    NamedColor.BRIGHT_GREEN: (2, True),
    NamedColor.BRIGHT_YELLOW: (3, True),
    NamedColor.BRIGHT_BLUE: (4, True),
    NamedColor.BRIGHT_MAGENTA: (5, True),
    NamedColor.BRIGHT_CYAN: (6, True),
    NamedColor.BRIGHT_WHITE: (7, True),
    NamedColor.BLACK: (0, False),
    NamedColor.RED: (1, False),
    NamedColor.GREEN: (2, False),
    NamedColor.YELLOW: (3, False),
    NamedColor.BLUE: (4, False),
    NamedColor.MAGENTA: (5, False),
    NamedColor.CYAN: (6, False),
    NamedColor.WHITE: (7, False),
}

_STATE_ORDER = ("D", "R", "S", "T", "t", "Z", "X", "K", "W", "P")
_UNIT_ORDER = ("K", "M", "G", "T", "P")


def _escape(color: Color, faded: bool) -> str:
    if isinstance(color, NamedColor):
        base, bright = _NAMED[color]
        if bright and not faded:
            return f"\x1b[38;5;{base + 8}m"
        return f"\x1b[{30 + base}m"
    return f"\x1b[38;5;{color}m"


def apply_color(text: str, color: ColorByTheme, theme: ConfigTheme, faded: bool) -> str:
    """Wrap ``text`` in the escape codes of the color chosen for ``theme``."""
    if theme is ConfigTheme.DARK:
        chosen = color.dark
    elif theme is ConfigTheme.LIGHT:
        chosen = color.light
    else:
        raise ValueError(f"theme must be resolved to dark or light, got {theme!r}")
    return f"{_escape(chosen, faded)}{text}{_RESET}"


def _by_state(text: str, style: ConfigStyle) -> ColorByTheme:
    states = style.by_state
    for letter in _STATE_ORDER:
        if letter in text:
            return getattr(states, f"color_{letter.lower()}")
    return states.color_x


def _by_unit(text: str, style: ConfigStyle) -> ColorByTheme:
    units = style.by_unit
    for letter in _UNIT_ORDER:
        if letter in text:
            return getattr(units, f"color_{letter.lower()}")
    return units.color_x


def _percentage(text: str) -> float:
    stripped = text.strip()
    if "_" in stripped:
        return 0.0
    try:
        return float(stripped)
    except ValueError:
        return 0.0


def _by_percentage(text: str, style: ConfigStyle) -> ColorByTheme:
    value = _percentage(text)
    levels = style.by_percentage
    if value > 100.0:
        return levels.color_100
    if value > 75.0:
        return levels.color_075
    if value > 50.0:
        return levels.color_050
    if value > 25.0:
        return levels.color_025
    return levels.color_000


def apply_style(
    text: str, column_style: ColumnStyle, style: ConfigStyle, theme: ConfigTheme, faded: bool
) -> str:
    """Color a cell according to its column style."""
    kind = column_style.kind
    if kind is ColumnStyleKind.FIXED:
        color = column_style.color
    elif kind is ColumnStyleKind.BY_PERCENTAGE:
        color = _by_percentage(text, style)
    elif kind is ColumnStyleKind.BY_STATE:
        color = _by_state(text, style)
    else:
        color = _by_unit(text, style)
    return apply_color(text, color, theme, faded)


def color_to_column_style(color: ColorByTheme) -> ColumnStyle:
    """A fixed column style using ``color``."""
    return ColumnStyle(ColumnStyleKind.FIXED, color)