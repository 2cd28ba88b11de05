"""Incremental decoding and grouping of colour-coded ripgrep output."""

from __future__ import annotations

from streamgrep.aggregator import ResultAggregator
from streamgrep.decoder import StreamDecoder
from streamgrep.parser import classify_line, parse_line
from streamgrep.session import SearchSession, SessionRegistry
from streamgrep.types import (
    ContentLine,
    DiagnosticLine,
    DiagnosticText,
    FileHeading,
    FileHeadingWithSeparator,
    RenderInstruction,
    ResultRecord,
    TextRun,
)

__version__ = "0.1.0"

__all__ = [
    "ContentLine",
    "DiagnosticLine",
    "DiagnosticText",
    "FileHeading",
    "FileHeadingWithSeparator",
    "RenderInstruction",
    "ResultAggregator",
    "ResultRecord",
    "SearchSession",
    "SessionRegistry",
    "StreamDecoder",
    "TextRun",
    "classify_line",
    "parse_line",
]
