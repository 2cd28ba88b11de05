from __future__ import annotations

import pytest

from streamgrep.parser import classify_line, parse_line, split_segments
from streamgrep.types import DiagnosticLine, ResultRecord


def _runs(record: ResultRecord) -> list[tuple[str, bool]]:
    return [(run.text, run.highlighted) for run in record.content]


def test_parse_line_extracts_fields_and_match_runs() -> None:
    raw = "\x1b[35mfoo.txt\x1b[0m:\x1b[32m42\x1b[0m:hello \x1b[31mWORLD\x1b[0m bye"

    record = parse_line(raw)

    assert record is not None
    assert record.filename == "foo.txt"
    assert record.line_number == 42
    assert _runs(record) == [("hello ", False), ("WORLD", True), (" bye", False)]
    assert record.plain_text == "hello WORLD bye"


def test_parse_line_treats_consecutive_escapes_as_one_delimiter(make_rg_line) -> None:
    raw = make_rg_line("src/app.py", 7, "x = ", "needle", " + 1")

    assert split_segments(raw) == ["", "src/app.py", ":", "7", ":x = ", "needle", " + 1"]
    record = parse_line(raw)
    assert record is not None
    assert _runs(record) == [("x = ", False), ("needle", True), (" + 1", False)]


def test_parse_line_handles_several_matches(make_rg_line) -> None:
    record = parse_line(make_rg_line("a.txt", 3, "a ", "X", " b ", "Y", " c"))

    assert record is not None
    assert _runs(record) == [
        ("a ", False),
        ("X", True),
        (" b ", False),
        ("Y", True),
        (" c", False),
    ]


def test_parse_line_match_at_line_edges(make_rg_line) -> None:
    record = parse_line(make_rg_line("a.txt", 1, "", "start", " middle ", "end"))

    assert record is not None
    assert _runs(record) == [("start", True), (" middle ", False), ("end", True)]


def test_parse_line_keeps_colons_inside_content(make_rg_line) -> None:
    record = parse_line(make_rg_line("a.txt", 9, "key: ", "value", ": rest"))

    assert record is not None
    assert record.plain_text == "key: value: rest"


def test_parse_line_without_content_segments() -> None:
    record = parse_line("\x1b[35mfoo.txt\x1b[0m:\x1b[32m5")

    assert record is not None
    assert record.line_number == 5
    assert record.content == ()


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "rg: missing: No such file or directory (os error 2)",
        "\x1b[31mwarning\x1b[0m only",
        "\x1b[35mfoo.txt\x1b[0m:",
    ],
)
def test_lines_without_result_shape_are_diagnostics(raw: str) -> None:
    assert parse_line(raw) is None
    decoded = classify_line(raw)
    assert isinstance(decoded, DiagnosticLine)
    assert decoded.text == raw


@pytest.mark.parametrize("number", ["abc", "0", "-3", "4 2", "", "\u0664\u0662"])
def test_unparseable_line_numbers_are_diagnostics(number: str) -> None:
    raw = f"\x1b[35mfoo.txt\x1b[0m:\x1b[32m{number}\x1b[0m:text"

    assert parse_line(raw) is None
    assert isinstance(classify_line(raw), DiagnosticLine)


def test_empty_filename_is_not_a_result() -> None:
    raw = "\x1b[35m\x1b[0m:\x1b[32m3\x1b[0m:text"

    # Adjacent escapes collapse, so the fields shift and the line number is lost
    assert parse_line(raw) is None


def test_classify_line_returns_records_for_results(make_rg_line) -> None:
    decoded = classify_line(make_rg_line("b.txt", 2, "hit"))

    assert isinstance(decoded, ResultRecord)
    assert decoded.filename == "b.txt"
