"""Incremental line decoding for chunked search tool output."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

ANSI_ESCAPE_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")


def strip_ansi(value: str) -> str:
    """Remove ANSI escape sequences from a string."""
    return ANSI_ESCAPE_RE.sub("", value)


def _trim_cr(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line


@dataclass(slots=True)
class StreamDecoder:
    """Split arbitrarily chunked text into complete lines.

    The unterminated tail of every chunk is held back until a later chunk
    completes it or the stream is marked finished.
    """

    _pending: str = field(default="", init=False)
    _finished: bool = field(default=False, init=False)

    @property
    def pending(self) -> str:
        return self._pending

    @property
    def finished(self) -> bool:
        return self._finished

    def feed(self, chunk: str, finished: bool = False) -> list[str]:
        """Feed a raw text chunk and return the lines it completes."""
        buffer = self._pending + chunk
        self._pending = ""

        segments = buffer.split("\n")
        if finished:
            self._finished = True
            # A terminator at the very end does not open another line
            if segments[-1] == "":
                segments.pop()
        else:
            self._pending = segments.pop()

        return [_trim_cr(segment) for segment in segments]

    def flush(self) -> list[str]:
        """Return the held fragment as a final line, if any."""
        return self.feed("", finished=True)


__all__ = ["ANSI_ESCAPE_RE", "StreamDecoder", "strip_ansi"]
