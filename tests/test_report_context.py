from __future__ import annotations

from report.context import GREEN, RESET, format_context

SOURCE = "one\ntwo\nthree\nfour\nfive\nsix\n"


def test_format_context_marks_line_and_column() -> None:
    output = format_context(SOURCE, 3, 2, color=False)
    lines = output.split("\n")

    assert len(lines) == 6
    assert lines[0].strip() == "1 | one"
    assert lines[1].strip() == "2 | two"
    assert lines[2] == "  > 3 | three"
    assert lines[3].rstrip().endswith("|  ^")
    assert lines[4].strip() == "4 | four"
    assert lines[5].strip() == "5 | five"


def test_format_context_caret_sits_under_column() -> None:
    lines = format_context(SOURCE, 3, 4, color=False).split("\n")

    code_start = lines[2].index("| ") + 2
    assert lines[3].index("^") == code_start + 3
    assert lines[2][code_start + 3] == "e"


def test_format_context_out_of_range_lines_render_as_star() -> None:
    lines = format_context(SOURCE, 1, 1, color=False).split("\n")

    assert lines[0].strip() == "* |"
    assert lines[1].strip() == "* |"
    assert lines[2] == "  > 1 | one"


def test_format_context_pads_line_numbers() -> None:
    source = "\n".join(f"line {n}" for n in range(1, 12))

    lines = format_context(source, 9, 1, color=False).split("\n")

    assert lines[0].strip() == "7 | line 7"
    assert " 9 | line 9" in lines[2]
    assert lines[4].strip() == "10 | line 10"


def test_format_context_colors() -> None:
    output = format_context(SOURCE, 2, 1)

    assert GREEN in output
    assert RESET in output
    assert "\u001b" not in format_context(SOURCE, 2, 1, color=False)
