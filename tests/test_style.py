import pytest

from proctable.config import (
    ColorByTheme,
    ColumnStyle,
    ColumnStyleKind,
    ConfigStyle,
    ConfigTheme,
    NamedColor,
)
from proctable.style import apply_color, apply_style, color_to_column_style


@pytest.fixture
def style():
    return ConfigStyle()


def test_apply_color_plain_red():
    pair = ColorByTheme(NamedColor.RED, NamedColor.BLUE)
    assert apply_color("text", pair, ConfigTheme.DARK, False) == "\x1b[31mtext\x1b[0m"


def test_apply_color_palette_index():
    pair = ColorByTheme(200, 200)
    assert apply_color("x", pair, ConfigTheme.LIGHT, False) == "\x1b[38;5;200mx\x1b[0m"


def test_apply_color_picks_theme():
    pair = ColorByTheme(NamedColor.RED, NamedColor.BLUE)
    dark = apply_color("x", pair, ConfigTheme.DARK, False)
    light = apply_color("x", pair, ConfigTheme.LIGHT, False)
    assert dark == apply_color("x", ColorByTheme(NamedColor.RED, NamedColor.RED), ConfigTheme.LIGHT, False)
    assert light == apply_color("x", ColorByTheme(NamedColor.BLUE, NamedColor.BLUE), ConfigTheme.DARK, False)


def test_faded_bright_equals_plain():
    bright = ColorByTheme(NamedColor.BRIGHT_GREEN, NamedColor.BRIGHT_GREEN)
    plain = ColorByTheme(NamedColor.GREEN, NamedColor.GREEN)
    assert apply_color("x", bright, ConfigTheme.DARK, True) == apply_color("x", plain, ConfigTheme.DARK, False)
    assert apply_color("x", bright, ConfigTheme.DARK, False) != apply_color("x", plain, ConfigTheme.DARK, False)


def test_text_preserved():
    pair = ColorByTheme(NamedColor.BRIGHT_CYAN, NamedColor.CYAN)
    out = apply_color("hello", pair, ConfigTheme.DARK, False)
    assert "hello" in out
    assert out.endswith("\x1b[0m")


def test_auto_theme_rejected():
    pair = ColorByTheme(NamedColor.RED, NamedColor.RED)
    with pytest.raises(ValueError):
        apply_color("x", pair, ConfigTheme.AUTO, False)


def test_fixed_style(style):
    pair = ColorByTheme(NamedColor.YELLOW, NamedColor.MAGENTA)
    column_style = color_to_column_style(pair)
    assert column_style.kind is ColumnStyleKind.FIXED
    assert column_style.color == pair
    assert apply_style("x", column_style, style, ConfigTheme.LIGHT, False) == apply_color(
        "x", pair, ConfigTheme.LIGHT, False
    )


@pytest.mark.parametrize(
    "text,attr",
    [("S", "color_s"), ("R", "color_r"), ("Ds", "color_d"), ("t", "color_t"), ("Z", "color_z"), ("?", "color_x")],
)
def test_by_state(style, text, attr):
    cs = ColumnStyle(ColumnStyleKind.BY_STATE)
    expected = apply_color(text, getattr(style.by_state, attr), ConfigTheme.DARK, False)
    assert apply_style(text, cs, style, ConfigTheme.DARK, False) == expected


@pytest.mark.parametrize(
    "text,attr",
    [("1.0K", "color_k"), ("2.5M", "color_m"), ("3G", "color_g"), ("4T", "color_t"), ("5P", "color_p"), ("12", "color_x")],
)
def test_by_unit(style, text, attr):
    cs = ColumnStyle(ColumnStyleKind.BY_UNIT)
    expected = apply_color(text, getattr(style.by_unit, attr), ConfigTheme.LIGHT, True)
    assert apply_style(text, cs, style, ConfigTheme.LIGHT, True) == expected


@pytest.mark.parametrize(
    "text,attr",
    [
        (" 10.0", "color_000"),
        ("30", "color_025"),
        ("60.5", "color_050"),
        ("80", "color_075"),
        ("150", "color_100"),
        ("oops", "color_000"),
        ("25", "color_000"),
    ],
)
def test_by_percentage(style, text, attr):
    cs = ColumnStyle(ColumnStyleKind.BY_PERCENTAGE)
    expected = apply_color(text, getattr(style.by_percentage, attr), ConfigTheme.DARK, False)
    assert apply_style(text, cs, style, ConfigTheme.DARK, False) == expected