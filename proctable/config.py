"""Configuration model, TOML loading and TOML writing."""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Union

import tomli_w


class ConfigError(Exception):
    """Raised when a configuration cannot be read or is invalid."""


class ConfigTheme(Enum):
    AUTO = "Auto"
    DARK = "Dark"
    LIGHT = "Light"


class NamedColor(Enum):
    BRIGHT_BLACK = "BrightBlack"
    BRIGHT_RED = "BrightRed"
    BRIGHT_GREEN = "BrightGreen"
    BRIGHT_YELLOW = "BrightYellow"
    BRIGHT_BLUE = "BrightBlue"
    BRIGHT_MAGENTA = "BrightMagenta"
    BRIGHT_CYAN = "BrightCyan"
    BRIGHT_WHITE = "BrightWhite"
    BLACK = "Black"
    RED = "Red"
    GREEN = "Green"
    YELLOW = "Yellow"
    BLUE = "Blue"
    MAGENTA = "Magenta"
    CYAN = "Cyan"
    WHITE = "White"


# A color is either one of the named colors or an index into the 256-color palette.
Color = Union[NamedColor, int]

_COLOR256 = re.compile(r"\+?[0-9]+")


def parse_color(text: str) -> Color:
    """Parse a color name or a 0-255 palette index."""
    try:
        return NamedColor(text)
    except ValueError:
        pass
    if isinstance(text, str) and _COLOR256.fullmatch(text):
        value = int(text)
        if value <= 255:
            return value
    raise ConfigError(f"invalid color: {text!r}")


def format_color(color: Color) -> str:
    """Render a color the way it is written in the configuration file."""
    if isinstance(color, NamedColor):
        return color.value
    if isinstance(color, int) and not isinstance(color, bool) and 0 <= color <= 255:
        return str(color)
    raise ConfigError(f"invalid color: {color!r}")


@dataclass(frozen=True)
class ColorByTheme:
    """A pair of colors, one for dark and one for light backgrounds."""

    dark: Color
    light: Color


def parse_color_by_theme(text: str) -> ColorByTheme:
    """Parse ``"Dark|Light"`` or a single color used for both themes."""
    if not isinstance(text, str):
        raise ConfigError(f"invalid color: {text!r}")
    dark, sep, light = text.partition("|")
    if sep:
        return ColorByTheme(parse_color(dark), parse_color(light))
    color = parse_color(text)
    return ColorByTheme(color, color)


def format_color_by_theme(color: ColorByTheme) -> str:
    if color.dark == color.light:
        return format_color(color.dark)
    return f"{format_color(color.dark)}|{format_color(color.light)}"


class ColumnStyleKind(Enum):
    FIXED = "Fixed"
    BY_PERCENTAGE = "ByPercentage"
    BY_STATE = "ByState"
    BY_UNIT = "ByUnit"


@dataclass(frozen=True)
class ColumnStyle:
    """How a column is colored: a fixed color or a rule based on its content."""

    kind: ColumnStyleKind
    color: ColorByTheme | None = None

    def __post_init__(self) -> None:
        if (self.kind is ColumnStyleKind.FIXED) != (self.color is not None):
            raise ConfigError("a fixed column style needs exactly one color")


def parse_column_style(text: str) -> ColumnStyle:
    if text in ("ByPercentage", "ByState", "ByUnit"):
        return ColumnStyle(ColumnStyleKind(text))
    return ColumnStyle(ColumnStyleKind.FIXED, parse_color_by_theme(text))


def format_column_style(style: ColumnStyle) -> str:
    if style.kind is ColumnStyleKind.FIXED:
        return format_color_by_theme(style.color)
    return style.kind.value


class ColumnAlign(Enum):
    LEFT = "Left"
    RIGHT = "Right"
    CENTER = "Center"


class ColorMode(Enum):
    AUTO = "Auto"
    ALWAYS = "Always"
    DISABLE = "Disable"


class PagerMode(Enum):
    AUTO = "Auto"
    ALWAYS = "Always"
    DISABLE = "Disable"


class SearchKind(Enum):
    EXACT = "Exact"
    PARTIAL = "Partial"


class SearchLogic(Enum):
    AND = "And"
    OR = "Or"
    NAND = "Nand"
    NOR = "Nor"


class SortOrder(Enum):
    ASCENDING = "Ascending"
    DESCENDING = "Descending"


_DEFAULT_COLOR = ColorByTheme(NamedColor.BRIGHT_WHITE, NamedColor.BLACK)


def _pair(dark: NamedColor, light: NamedColor) -> ColorByTheme:
    return ColorByTheme(dark, light)


@dataclass
class ConfigColumn:
    kind: str
    style: ColumnStyle
    numeric_search: bool = False
    nonnumeric_search: bool = False
    align: ColumnAlign = ColumnAlign.LEFT
    max_width: int | None = None
    min_width: int | None = None
    header: str | None = None


@dataclass
class StyleByPercentage:
    color_000: ColorByTheme = _pair(NamedColor.BRIGHT_BLUE, NamedColor.BLUE)
    color_025: ColorByTheme = _pair(NamedColor.BRIGHT_GREEN, NamedColor.GREEN)
    color_050: ColorByTheme = _pair(NamedColor.BRIGHT_YELLOW, NamedColor.YELLOW)
    color_075: ColorByTheme = _pair(NamedColor.BRIGHT_RED, NamedColor.RED)
    color_100: ColorByTheme = _pair(NamedColor.BRIGHT_RED, NamedColor.RED)


@dataclass
class StyleByUnit:
    color_k: ColorByTheme = _pair(NamedColor.BRIGHT_BLUE, NamedColor.BLUE)
    color_m: ColorByTheme = _pair(NamedColor.BRIGHT_GREEN, NamedColor.GREEN)
    color_g: ColorByTheme = _pair(NamedColor.BRIGHT_YELLOW, NamedColor.YELLOW)
    color_t: ColorByTheme = _pair(NamedColor.BRIGHT_RED, NamedColor.RED)
    color_p: ColorByTheme = _pair(NamedColor.BRIGHT_RED, NamedColor.RED)
    color_x: ColorByTheme = _pair(NamedColor.BRIGHT_BLUE, NamedColor.BLUE)


@dataclass
class StyleByState:
    color_d: ColorByTheme = _pair(NamedColor.BRIGHT_RED, NamedColor.RED)
    color_r: ColorByTheme = _pair(NamedColor.BRIGHT_GREEN, NamedColor.GREEN)
    color_s: ColorByTheme = _pair(NamedColor.BRIGHT_BLUE, NamedColor.BLUE)
    color_t: ColorByTheme = _pair(NamedColor.BRIGHT_CYAN, NamedColor.CYAN)
    color_z: ColorByTheme = _pair(NamedColor.BRIGHT_MAGENTA, NamedColor.MAGENTA)
    color_x: ColorByTheme = _pair(NamedColor.BRIGHT_MAGENTA, NamedColor.MAGENTA)
    color_k: ColorByTheme = _pair(NamedColor.BRIGHT_YELLOW, NamedColor.YELLOW)
    color_w: ColorByTheme = _pair(NamedColor.BRIGHT_YELLOW, NamedColor.YELLOW)
    color_p: ColorByTheme = _pair(NamedColor.BRIGHT_YELLOW, NamedColor.YELLOW)


@dataclass
class ConfigStyle:
    header: ColorByTheme = _DEFAULT_COLOR
    unit: ColorByTheme = _DEFAULT_COLOR
    tree: ColorByTheme = _DEFAULT_COLOR
    by_percentage: StyleByPercentage = field(default_factory=StyleByPercentage)
    by_state: StyleByState = field(default_factory=StyleByState)
    by_unit: StyleByUnit = field(default_factory=StyleByUnit)


@dataclass
class ConfigSearch:
    numeric_search: SearchKind = SearchKind.EXACT
    nonnumeric_search: SearchKind = SearchKind.PARTIAL
    logic: SearchLogic = SearchLogic.AND


@dataclass
class ConfigDisplay:
    show_self: bool = False
    show_thread: bool = False
    show_thread_in_tree: bool = True
    show_parent_in_tree: bool = True
    show_children_in_tree: bool = True
    cut_to_terminal: bool = True
    cut_to_pager: bool = False
    cut_to_pipe: bool = False
    color_mode: ColorMode = ColorMode.AUTO
    separator: str = "│"
    ascending: str = "▲"
    descending: str = "▼"
    tree_symbols: tuple[str, str, str, str, str] = ("│", "─", "┬", "├", "└")
    abbr_sid: bool = True
    theme: ConfigTheme = ConfigTheme.AUTO


@dataclass
class ConfigSort:
    column: int = 0
    order: SortOrder = SortOrder.ASCENDING


@dataclass
class ConfigDocker:
    path: str = "unix:///var/run/docker.sock"


@dataclass
class ConfigPager:
    mode: PagerMode = PagerMode.AUTO
    detect_width: bool = False
    command: str | None = None


@dataclass
class Config:
    columns: list[ConfigColumn]
    style: ConfigStyle = field(default_factory=ConfigStyle)
    search: ConfigSearch = field(default_factory=ConfigSearch)
    display: ConfigDisplay = field(default_factory=ConfigDisplay)
    sort: ConfigSort = field(default_factory=ConfigSort)
    docker: ConfigDocker = field(default_factory=ConfigDocker)
    pager: ConfigPager = field(default_factory=ConfigPager)


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

_REQUIRED = object()


def _bool(value: Any, where: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{where}: expected a boolean, got {value!r}")
    return value


def _str(value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{where}: expected a string, got {value!r}")
    return value


def _uint(value: Any, where: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ConfigError(f"{where}: expected a non-negative integer, got {value!r}")
    return value


def _table(value: Any, where: str) -> dict:
    if not isinstance(value, dict):
        raise ConfigError(f"{where}: expected a table, got {value!r}")
    return value


def _enum(cls: type[Enum]) -> Callable[[Any, str], Enum]:
    def convert(value: Any, where: str) -> Enum:
        try:
            return cls(_str(value, where))
        except ValueError:
            names = ", ".join(m.value for m in cls)
            raise ConfigError(f"{where}: unknown variant {value!r}, expected one of {names}") from None

    return convert


def _wrap(parse: Callable[[str], Any]) -> Callable[[Any, str], Any]:
    def convert(value: Any, where: str) -> Any:
        try:
            return parse(_str(value, where))
        except ConfigError as exc:
            raise ConfigError(f"{where}: {exc}") from exc

    return convert


_color_by_theme = _wrap(parse_color_by_theme)
_column_style = _wrap(parse_column_style)


def _field(table: dict, key: str, where: str, convert: Callable[[Any, str], Any], default: Any = _REQUIRED) -> Any:
    if key not in table:
        if default is _REQUIRED:
            raise ConfigError(f"{where}: missing field `{key}`")
        return default() if isinstance(default, type) else default
    return convert(table[key], f"{where}.{key}")


def _colors(cls: type, value: Any, where: str) -> Any:
    table = _table(value, where)
    return cls(**{f.name: _field(table, f.name, where, _color_by_theme) for f in fields(cls)})


def _column(value: Any, where: str) -> ConfigColumn:
    t = _table(value, where)
    return ConfigColumn(
        kind=_field(t, "kind", where, _str),
        style=_field(t, "style", where, _column_style),
        numeric_search=_field(t, "numeric_search", where, _bool, False),
        nonnumeric_search=_field(t, "nonnumeric_search", where, _bool, False),
        align=_field(t, "align", where, _enum(ColumnAlign), ColumnAlign.LEFT),
        max_width=_field(t, "max_width", where, _uint, None),
        min_width=_field(t, "min_width", where, _uint, None),
        header=_field(t, "header", where, _str, None),
    )


def _columns(value: Any, where: str) -> list[ConfigColumn]:
    if not isinstance(value, list):
        raise ConfigError(f"{where}: expected an array of tables")
    return [_column(item, f"{where}[{n}]") for n, item in enumerate(value)]


def _style(value: Any, where: str) -> ConfigStyle:
    t = _table(value, where)
    return ConfigStyle(
        header=_field(t, "header", where, _color_by_theme, _DEFAULT_COLOR),
        unit=_field(t, "unit", where, _color_by_theme, _DEFAULT_COLOR),
        tree=_field(t, "tree", where, _color_by_theme, _DEFAULT_COLOR),
        by_percentage=_field(t, "by_percentage", where, lambda v, w: _colors(StyleByPercentage, v, w), StyleByPercentage),
        by_state=_field(t, "by_state", where, lambda v, w: _colors(StyleByState, v, w), StyleByState),
        by_unit=_field(t, "by_unit", where, lambda v, w: _colors(StyleByUnit, v, w), StyleByUnit),
    )


def _search(value: Any, where: str) -> ConfigSearch:
    t = _table(value, where)
    return ConfigSearch(
        numeric_search=_field(t, "numeric_search", where, _enum(SearchKind), SearchKind.EXACT),
        nonnumeric_search=_field(t, "nonnumeric_search", where, _enum(SearchKind), SearchKind.PARTIAL),
        logic=_field(t, "logic", where, _enum(SearchLogic), SearchLogic.AND),
    )


def _tree_symbols(value: Any, where: str) -> tuple[str, ...]:
    if not isinstance(value, list) or len(value) != 5:
        raise ConfigError(f"{where}: expected an array of 5 strings")
    return tuple(_str(item, f"{where}[{n}]") for n, item in enumerate(value))


def _display(value: Any, where: str) -> ConfigDisplay:
    t = _table(value, where)
    d = ConfigDisplay()
    return ConfigDisplay(
        show_self=_field(t, "show_self", where, _bool, d.show_self),
        show_thread=_field(t, "show_thread", where, _bool, d.show_thread),
        show_thread_in_tree=_field(t, "show_thread_in_tree", where, _bool, d.show_thread_in_tree),
        show_parent_in_tree=_field(t, "show_parent_in_tree", where, _bool, d.show_parent_in_tree),
        show_children_in_tree=_field(t, "show_children_in_tree", where, _bool, d.show_children_in_tree),
        cut_to_terminal=_field(t, "cut_to_terminal", where, _bool, d.cut_to_terminal),
        cut_to_pager=_field(t, "cut_to_pager", where, _bool, d.cut_to_pager),
        cut_to_pipe=_field(t, "cut_to_pipe", where, _bool, d.cut_to_pipe),
        color_mode=_field(t, "color_mode", where, _enum(ColorMode), d.color_mode),
        separator=_field(t, "separator", where, _str, d.separator),
        ascending=_field(t, "ascending", where, _str, d.ascending),
        descending=_field(t, "descending", where, _str, d.descending),
        tree_symbols=_field(t, "tree_symbols", where, _tree_symbols, d.tree_symbols),
        abbr_sid=_field(t, "abbr_sid", where, _bool, d.abbr_sid),
        theme=_field(t, "theme", where, _enum(ConfigTheme), d.theme),
    )


def _sort(value: Any, where: str) -> ConfigSort:
    t = _table(value, where)
    return ConfigSort(
        column=_field(t, "column", where, _uint, 0),
        order=_field(t, "order", where, _enum(SortOrder), SortOrder.ASCENDING),
    )


def _docker(value: Any, where: str) -> ConfigDocker:
    t = _table(value, where)
    return ConfigDocker(path=_field(t, "path", where, _str))


def _pager(value: Any, where: str) -> ConfigPager:
    t = _table(value, where)
    return ConfigPager(
        mode=_field(t, "mode", where, _enum(PagerMode), PagerMode.AUTO),
        detect_width=_field(t, "detect_width", where, _bool, False),
        command=_field(t, "command", where, _str, None),
    )


def config_from_dict(data: dict) -> Config:
    """Build a Config from a parsed TOML document."""
    t = _table(data, "config")
    return Config(
        columns=_field(t, "columns", "config", _columns),
        style=_field(t, "style", "config", _style, ConfigStyle),
        search=_field(t, "search", "config", _search, ConfigSearch),
        display=_field(t, "display", "config", _display, ConfigDisplay),
        sort=_field(t, "sort", "config", _sort, ConfigSort),
        docker=_field(t, "docker", "config", _docker, ConfigDocker),
        pager=_field(t, "pager", "config", _pager, ConfigPager),
    )


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def _colors_to_dict(obj: Any) -> dict:
    return {f.name: format_color_by_theme(getattr(obj, f.name)) for f in fields(obj)}


def _column_to_dict(column: ConfigColumn) -> dict:
    out: dict[str, Any] = {
        "kind": column.kind,
        "style": format_column_style(column.style),
        "numeric_search": column.numeric_search,
        "nonnumeric_search": column.nonnumeric_search,
        "align": column.align.value,
    }
    for key in ("max_width", "min_width", "header"):
        value = getattr(column, key)
        if value is not None:
            out[key] = value
    return out


def config_to_dict(config: Config) -> dict:
    """Turn a Config into plain data ready for a TOML writer."""
    style = config.style
    display = config.display
    pager: dict[str, Any] = {"mode": config.pager.mode.value, "detect_width": config.pager.detect_width}
    if config.pager.command is not None:
        pager["command"] = config.pager.command
    return {
        "columns": [_column_to_dict(c) for c in config.columns],
        "style": {
            "header": format_color_by_theme(style.header),
            "unit": format_color_by_theme(style.unit),
            "tree": format_color_by_theme(style.tree),
            "by_percentage": _colors_to_dict(style.by_percentage),
            "by_state": _colors_to_dict(style.by_state),
            "by_unit": _colors_to_dict(style.by_unit),
        },
        "search": {
            "numeric_search": config.search.numeric_search.value,
            "nonnumeric_search": config.search.nonnumeric_search.value,
            "logic": config.search.logic.value,
        },
        "display": {
            "show_self": display.show_self,
            "show_thread": display.show_thread,
            "show_thread_in_tree": display.show_thread_in_tree,
            "show_parent_in_tree": display.show_parent_in_tree,
            "show_children_in_tree": display.show_children_in_tree,
            "cut_to_terminal": display.cut_to_terminal,
            "cut_to_pager": display.cut_to_pager,
            "cut_to_pipe": display.cut_to_pipe,
            "color_mode": display.color_mode.value,
            "separator": display.separator,
            "ascending": display.ascending,
            "descending": display.descending,
            "tree_symbols": list(display.tree_symbols),
            "abbr_sid": display.abbr_sid,
            "theme": display.theme.value,
        },
        "sort": {"column": config.sort.column, "order": config.sort.order.value},
        "docker": {"path": config.docker.path},
        "pager": pager,
    }


_OBSOLETE_COLOR256 = '"Color256" keyword for 8bit color is obsolete'


def loads(text: str) -> Config:
    """Parse a configuration from TOML text."""
    try:
        return config_from_dict(tomllib.loads(text))
    except (tomllib.TOMLDecodeError, ConfigError) as exc:
        if "Color256" in text:
            raise ConfigError(f"{_OBSOLETE_COLOR256}: {exc}") from exc
        if isinstance(exc, ConfigError):
            raise
        raise ConfigError(str(exc)) from exc


def dumps(config: Config) -> str:
    """Render a configuration as TOML text."""
    return tomli_w.dumps(config_to_dict(config))


def load_config(path: str | Path) -> Config:
    """Read and parse the configuration file at ``path``."""
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ConfigError(f"failed to open file ({str(path)!r})") from exc
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigError(f"failed to read file ({str(path)!r})") from exc
    try:
        return loads(text)
    except ConfigError as exc:
        raise ConfigError(f"failed to parse toml ({str(path)!r}): {exc}") from exc