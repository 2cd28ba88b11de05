"""Terminal presentation of render instructions with a navigation index."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

import typer

from streamgrep.aggregator import format_line_number
from streamgrep.decoder import strip_ansi
from streamgrep.types import (
    ContentLine,
    DiagnosticText,
    FileHeading,
    FileHeadingWithSeparator,
    RenderInstruction,
    TextRun,
)


@dataclass(slots=True, frozen=True)
class ResultPosition:
    """Where a "jump to result" action should land."""

    filename: str
    line_number: int
    column: int = 0


@dataclass(slots=True, frozen=True)
class _PositionTag:
    filename: str
    line_number: int
    line_number_width: int


class NavigationIndex:
    """Map rendered rows to the result their line-number field points at."""

    def __init__(self) -> None:
        self._tags: dict[int, _PositionTag] = {}

    def tag(
        self,
        row: int,
        *,
        filename: str,
        line_number: int,
        line_number_width: int,
    ) -> None:
        self._tags[row] = _PositionTag(filename, line_number, line_number_width)

    def lookup(self, row: int) -> Optional[ResultPosition]:
        tag = self._tags.get(row)
        if tag is None:
            return None
        return ResultPosition(tag.filename, tag.line_number)

    def locate(self, row: int, column: int) -> Optional[ResultPosition]:
        """Resolve a cursor position to a file position.

        The within-line offset is the cursor column minus the line-number
        column width, clamped to zero.
        """
        position = self.lookup(row)
        if position is None:
            return None
        width = self._tags[row].line_number_width
        return replace(position, column=max(0, column - width))

    def __len__(self) -> int:
        return len(self._tags)


def style_runs(runs: Iterable[TextRun]) -> str:
    return "".join(
        typer.style(run.text, fg=typer.colors.RED, bold=True) if run.highlighted else run.text
        for run in runs
    )


@dataclass
class ResultBuffer:
    """Accumulate rendered rows for a search session."""

    rows: list[str] = field(default_factory=list)
    styled_rows: list[str] = field(default_factory=list)
    index: NavigationIndex = field(default_factory=NavigationIndex)

    def _append(self, plain: str, styled: Optional[str] = None) -> int:
        self.rows.append(plain)
        self.styled_rows.append(plain if styled is None else styled)
        return len(self.rows) - 1

    def apply(self, instruction: RenderInstruction) -> list[int]:
        """Render one instruction and return the indices of the new rows."""
        added: list[int] = []

        if isinstance(instruction, FileHeadingWithSeparator):
            added.append(self._append(""))
        if isinstance(instruction, (FileHeading, FileHeadingWithSeparator)):
            added.append(
                self._append(
                    instruction.filename,
                    typer.style(instruction.filename, fg=typer.colors.MAGENTA, bold=True),
                )
            )
        elif isinstance(instruction, ContentLine):
            number = format_line_number(
                instruction.line_number, instruction.line_number_display_width
            )
            text = "".join(run.text for run in instruction.content)
            row = self._append(
                number + text,
                typer.style(number, fg=typer.colors.GREEN) + style_runs(instruction.content),
            )
            self.index.tag(
                row,
                filename=instruction.filename,
                line_number=instruction.line_number,
                line_number_width=instruction.line_number_display_width,
            )
            added.append(row)
        elif isinstance(instruction, DiagnosticText):
            added.append(self._append(strip_ansi(instruction.text)))

        return added

    def extend(self, instructions: Iterable[RenderInstruction]) -> list[int]:
        added: list[int] = []
        for instruction in instructions:
            added.extend(self.apply(instruction))
        return added

    def text(self) -> str:
        return "\n".join(self.rows)


__all__ = ["NavigationIndex", "ResultBuffer", "ResultPosition", "style_runs"]
