import pytest

from siilang.front.diagnose import DiagnoseHandler, DiagnoseLevel, DiagnosticError, Position


SOURCE = "int main() {\n  retrun 0;\n}\n"


def test_error_mismatch_raises_with_location():
    handler = DiagnoseHandler("a.c", SOURCE)
    with pytest.raises(DiagnosticError) as info:
        handler.mismatch(DiagnoseLevel.ERROR, Position(2, 3), "operator", "retrun")
    text = str(info.value)
    assert text.startswith("Error: Expected operator, but found retrun in a.c:2:3\n")


def test_error_shows_source_line_and_caret():
    handler = DiagnoseHandler("a.c", SOURCE)
    with pytest.raises(DiagnosticError) as info:
        handler.unexpect(DiagnoseLevel.ERROR, Position(2, 3), "bad")
    lines = str(info.value).splitlines()
    assert lines[1] == "  retrun 0;"
    assert lines[2].index("^") == 2
    assert lines[2].strip() == "^"


def test_diagnostic_error_is_value_error():
    handler = DiagnoseHandler("a.c", SOURCE)
    with pytest.raises(ValueError):
        handler.unexpect(DiagnoseLevel.ERROR, Position(1, 1), "oops")


def test_warning_returns_message_without_raising():
    handler = DiagnoseHandler("b.c", SOURCE)
    text = handler.unexpect(DiagnoseLevel.WARNING, Position(1, 5), "careful")
    assert text.startswith("Warning: careful in b.c:1:5\n")
    assert text.splitlines()[1] == "int main() {"


def test_info_level_prefix():
    handler = DiagnoseHandler("c.c", SOURCE)
    text = handler.mismatch(DiagnoseLevel.INFO, Position(3, 1), "x", "y")
    assert text.startswith("Info: Expected x, but found y")
    assert text.splitlines()[1:] == ["}", "^"]


def test_last_line_without_newline_is_kept():
    handler = DiagnoseHandler("d.c", "a\nb")
    text = handler.unexpect(DiagnoseLevel.WARNING, Position(2, 1), "m")
    assert text.splitlines()[1] == "b"


def test_caret_column_matches_position():
    handler = DiagnoseHandler("e.c", "abcdefgh\n")
    for column in range(1, 9):
        text = handler.unexpect(DiagnoseLevel.INFO, Position(1, column), "m")
        assert text.splitlines()[2].index("^") == column - 1