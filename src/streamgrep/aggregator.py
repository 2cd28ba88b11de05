"""Group decoded records by file and turn them into render instructions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from streamgrep.types import (
    DEFAULT_LINE_NUMBER_WIDTH,
    ContentLine,
    FileHeading,
    FileHeadingWithSeparator,
    RenderInstruction,
    ResultRecord,
)


def format_line_number(line_number: int, width: int = DEFAULT_LINE_NUMBER_WIDTH) -> str:
    """Left-justify ``line_number`` in a column of ``width`` characters."""
    return str(line_number).ljust(width)


@dataclass(slots=True)
class ResultAggregator:
    """Track the current file across records of one search session.

    The aggregator starts with no file seen. The first record emits a plain
    heading, every later change of file emits a heading with a separator,
    and each record emits exactly one content line after its heading.
    """

    line_number_width: int = DEFAULT_LINE_NUMBER_WIDTH
    _current_file: Optional[str] = field(default=None, init=False)
    _file_count: int = field(default=0, init=False)
    _record_count: int = field(default=0, init=False)

    @property
    def current_file(self) -> Optional[str]:
        return self._current_file

    @property
    def file_count(self) -> int:
        """Number of file groups opened so far."""
        return self._file_count

    @property
    def record_count(self) -> int:
        return self._record_count

    def add(self, record: ResultRecord) -> list[RenderInstruction]:
        instructions: list[RenderInstruction] = []

        if self._current_file is None:
            instructions.append(FileHeading(record.filename))
            self._file_count += 1
        elif record.filename != self._current_file:
            instructions.append(FileHeadingWithSeparator(record.filename))
            self._file_count += 1
        self._current_file = record.filename

        instructions.append(
            ContentLine(
                line_number=record.line_number,
                content=record.content,
                filename=record.filename,
                line_number_display_width=self.line_number_width,
            )
        )
        self._record_count += 1
        return instructions

    def extend(self, records: Iterable[ResultRecord]) -> list[RenderInstruction]:
        instructions: list[RenderInstruction] = []
        for record in records:
            instructions.extend(self.add(record))
        return instructions


__all__ = ["ResultAggregator", "format_line_number"]
