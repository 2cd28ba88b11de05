from __future__ import annotations

from streamgrep.aggregator import ResultAggregator, format_line_number
from streamgrep.types import (
    ContentLine,
    FileHeading,
    FileHeadingWithSeparator,
    ResultRecord,
    TextRun,
)


def _record(filename: str, line_number: int = 1) -> ResultRecord:
    return ResultRecord(
        filename=filename,
        line_number=line_number,
        content=(TextRun(text="match", highlighted=True),),
    )


def test_headings_follow_file_transitions() -> None:
    aggregator = ResultAggregator()
    batches = [
        aggregator.add(_record(name, number))
        for number, name in enumerate(["A", "A", "B", "B", "A"], start=1)
    ]

    assert batches[0][0] == FileHeading("A")
    assert batches[1][0] == ContentLine(2, _record("A").content, "A", 5)
    assert batches[2][0] == FileHeadingWithSeparator("B")
    assert len(batches[3]) == 1
    assert batches[4][0] == FileHeadingWithSeparator("A")

    for batch in batches:
        assert isinstance(batch[-1], ContentLine)
        assert sum(isinstance(item, ContentLine) for item in batch) == 1

    assert [len(batch) for batch in batches] == [2, 1, 2, 1, 2]
    assert aggregator.current_file == "A"
    assert aggregator.file_count == 3
    assert aggregator.record_count == 5


def test_initial_state_has_no_current_file() -> None:
    aggregator = ResultAggregator()
    assert aggregator.current_file is None
    assert aggregator.extend([]) == []


def test_content_line_carries_navigation_metadata() -> None:
    aggregator = ResultAggregator(line_number_width=7)
    record = _record("pkg/mod.py", 120)

    heading, line = aggregator.add(record)

    assert heading == FileHeading("pkg/mod.py")
    assert isinstance(line, ContentLine)
    assert line.filename == "pkg/mod.py"
    assert line.line_number == 120
    assert line.content == record.content
    assert line.line_number_display_width == 7


def test_extend_matches_repeated_add() -> None:
    records = [_record("A"), _record("B"), _record("B")]

    assert ResultAggregator().extend(records) == [
        FileHeading("A"),
        ContentLine(1, records[0].content, "A"),
        FileHeadingWithSeparator("B"),
        ContentLine(1, records[1].content, "B"),
        ContentLine(1, records[2].content, "B"),
    ]


def test_format_line_number_pads_to_width() -> None:
    assert format_line_number(42) == "42   "
    assert format_line_number(7, 3) == "7  "
    assert format_line_number(123456) == "123456"
