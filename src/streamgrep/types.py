"""Records and render instructions shared by the decoder, CLI and renderers.

This module defines the data that flows through a search session:
- TextRun: a span of visible line content, highlighted or plain
- ResultRecord: one decoded match line (file, line number, runs)
- DiagnosticLine: a raw line that is not a result line
- RenderInstruction: what the presentation layer has to display
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LINE_NUMBER_WIDTH = 5


class TextRun(BaseModel):
    """Ordered, immutable span of line content.

    Consecutive runs alternate between text outside a match and text inside
    one, mirroring the colour codes emitted by the search tool.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Visible text of the run")
    highlighted: bool = Field(
        default=False, description="Whether the run is part of a match"
    )


class ResultRecord(BaseModel):
    """One decoded result line."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(..., min_length=1, description="File the match was found in")
    line_number: int = Field(..., gt=0, description="1-based line number of the match")
    content: tuple[TextRun, ...] = Field(
        default=(), description="Line content split into plain and highlighted runs"
    )

    @property
    def plain_text(self) -> str:
        return "".join(run.text for run in self.content)


class DiagnosticLine(BaseModel):
    """Raw output line that does not have the result-line shape."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="The line exactly as the tool produced it")


@dataclass(slots=True, frozen=True)
class FileHeading:
    """Heading for the first file group of a session."""

    filename: str


@dataclass(slots=True, frozen=True)
class FileHeadingWithSeparator:
    """Heading for a later file group, preceded by a blank line."""

    filename: str


@dataclass(slots=True, frozen=True)
class ContentLine:
    """A result line with its navigation metadata."""

    line_number: int
    content: tuple[TextRun, ...]
    filename: str
    line_number_display_width: int = DEFAULT_LINE_NUMBER_WIDTH


@dataclass(slots=True, frozen=True)
class DiagnosticText:
    """Literal text surfaced without result styling."""

    text: str


RenderInstruction = Union[FileHeading, FileHeadingWithSeparator, ContentLine, DiagnosticText]


@dataclass(slots=True)
class SearchSpec:
    """What to search for and where."""

    term: str
    root: Path
    fixed_strings: bool = True
    paths: list[str] = field(default_factory=list)
    extra_args: list[str] = field(default_factory=list)


@dataclass(slots=True)
class SearchExecutionResult:
    """Outcome of one search tool process."""

    term: str
    returncode: int
    duration_ms: float
    lines: int = 0
    records: int = 0
    diagnostics: int = 0
    files: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """The tool exits 1 when nothing matched, which is not a failure."""
        return self.returncode in (0, 1) and self.error is None


__all__ = [
    "DEFAULT_LINE_NUMBER_WIDTH",
    "ContentLine",
    "DiagnosticLine",
    "DiagnosticText",
    "FileHeading",
    "FileHeadingWithSeparator",
    "RenderInstruction",
    "ResultRecord",
    "SearchExecutionResult",
    "SearchSpec",
    "TextRun",
]
