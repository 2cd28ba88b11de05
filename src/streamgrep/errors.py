"""Exceptions raised by streamgrep."""

from __future__ import annotations


class StreamgrepError(Exception):
    """Base error for streamgrep failures surfaced to callers."""


class SessionClosedError(StreamgrepError):
    """Raised when output is fed to a session that already finished."""

    def __init__(self, term: str) -> None:
        super().__init__(f"Search session for '{term}' is already finished")
        self.term = term


class SearchToolNotFoundError(StreamgrepError, RuntimeError):
    """Raised when the search tool binary cannot be located on PATH."""

    def __init__(self, binary: str) -> None:
        super().__init__(f"Search tool binary '{binary}' not found in PATH.")
        self.binary = binary


__all__ = ["SearchToolNotFoundError", "SessionClosedError", "StreamgrepError"]
