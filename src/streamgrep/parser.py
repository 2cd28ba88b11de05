"""Decode colour-coded search tool output lines into result records.

The search tool is run with ``--color=always`` and no heading grouping, so
every result line looks like::

    ESC[35m foo.txt ESC[0m : ESC[32m 42 ESC[0m : hello ESC[31m WORLD ESC[0m bye

Splitting on runs of SGR escape sequences leaves the filename at index 1,
the line number at index 3 and the content from index 4 onwards, where the
highlight colour opens right before every match and closes right after it.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Union

from streamgrep.types import DiagnosticLine, ResultRecord, TextRun

logger = logging.getLogger(__name__)

SGR_RUN_RE = re.compile(r"(?:\x1b\[[0-9]+m)+")

FILENAME_INDEX = 1
LINE_NUMBER_INDEX = 3
CONTENT_START_INDEX = 4
FIELD_SEPARATOR = ":"


def split_segments(raw: str) -> list[str]:
    """Split ``raw`` on every run of SGR escapes, keeping the text between them."""
    return SGR_RUN_RE.split(raw)


def _parse_line_number(value: str) -> Optional[int]:
    # int() would also accept signs, underscores and surrounding whitespace
    if not value.isascii() or not value.isdigit():
        return None
    number = int(value)
    return number if number > 0 else None


def _content_runs(parts: list[str]) -> tuple[TextRun, ...]:
    if parts and parts[0].startswith(FIELD_SEPARATOR):
        parts = [parts[0][len(FIELD_SEPARATOR):], *parts[1:]]

    runs: list[TextRun] = []
    for position, text in enumerate(parts):
        if not text:
            continue
        runs.append(TextRun(text=text, highlighted=position % 2 == 1))
    return tuple(runs)


def parse_line(raw: str) -> Optional[ResultRecord]:
    """Return the record encoded in ``raw`` or ``None`` for non-result lines."""
    segments = split_segments(raw)
    if len(segments) < CONTENT_START_INDEX:
        return None

    filename = segments[FILENAME_INDEX]
    if not filename:
        return None

    line_number = _parse_line_number(segments[LINE_NUMBER_INDEX])
    if line_number is None:
        logger.warning("Unparseable line number %r in result line", segments[LINE_NUMBER_INDEX])
        return None

    return ResultRecord(
        filename=filename,
        line_number=line_number,
        content=_content_runs(segments[CONTENT_START_INDEX:]),
    )


def classify_line(raw: str) -> Union[ResultRecord, DiagnosticLine]:
    """Parse ``raw`` as a result, falling back to a verbatim diagnostic."""
    record = parse_line(raw)
    if record is None:
        return DiagnosticLine(text=raw)
    return record


__all__ = [
    "SGR_RUN_RE",
    "classify_line",
    "parse_line",
    "split_segments",
]
