import io

from proctable.term_info import _CLEAR_LINE, _CLEAR_SCREEN, TermInfo


def make(clear_by_line=False):
    buf = io.StringIO()
    return TermInfo(clear_by_line, buf), buf


def test_size_falls_back_when_not_a_terminal():
    term, _ = make()
    assert (term.height, term.width) == (24, 79)


def test_write_line_plain():
    term, buf = make()
    term.write_line("abc")
    term.write_line("")
    assert buf.getvalue() == "abc\n\n"


def test_write_line_clears_first():
    term, buf = make(clear_by_line=True)
    term.write_line("abc")
    assert buf.getvalue() == _CLEAR_LINE + "abc\n"


def test_clear_screen():
    term, buf = make()
    term.clear_screen()
    assert buf.getvalue() == _CLEAR_SCREEN


def test_move_cursor_home():
    term, buf = make()
    term.move_cursor_to(0, 0)
    assert buf.getvalue() == "\x1b[1;1H"


def test_move_cursor_distinguishes_axes():
    a, buf_a = make()
    b, buf_b = make()
    a.move_cursor_to(1, 2)
    b.move_cursor_to(2, 1)
    assert buf_a.getvalue() != buf_b.getvalue()
    assert buf_a.getvalue().endswith("H")


def test_clear_rest_lines_follows_height():
    term, buf = make()
    term.height = 3
    term.clear_rest_lines()
    out = buf.getvalue()
    assert out.count(_CLEAR_LINE) == 3
    assert not out.endswith(_CLEAR_LINE)


def test_clear_rest_lines_zero_height_writes_nothing():
    term, buf = make()
    term.height = 0
    term.clear_rest_lines()
    assert buf.getvalue() == ""