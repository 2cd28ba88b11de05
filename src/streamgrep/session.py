"""Per-search state tying the decoder, parser and aggregator together."""

from __future__ import annotations

import logging
from typing import Optional

from streamgrep.aggregator import ResultAggregator
from streamgrep.decoder import StreamDecoder
from streamgrep.errors import SessionClosedError
from streamgrep.parser import classify_line
from streamgrep.types import (
    DEFAULT_LINE_NUMBER_WIDTH,
    DiagnosticLine,
    DiagnosticText,
    RenderInstruction,
)

logger = logging.getLogger(__name__)

# The search tool exits 1 when nothing matched
SUCCESS_RETURNCODES = frozenset({0, 1})


def describe_failure(returncode: Optional[int], error: Optional[str] = None) -> Optional[str]:
    """Return the trailing diagnostic for a failed search, if it failed."""
    if error:
        return f"Search failed: {error}"
    if returncode is None or returncode in SUCCESS_RETURNCODES:
        return None
    if returncode < 0:
        return f"Search terminated by signal {-returncode}"
    return f"Search exited abnormally with code {returncode}"


class SearchSession:
    """Decode the output of one search tool run.

    Chunks must be fed in the order the transport produced them; every line
    derived from a chunk is parsed and aggregated before the call returns.
    """

    def __init__(self, term: str, line_number_width: int = DEFAULT_LINE_NUMBER_WIDTH) -> None:
        self.term = term
        self.decoder = StreamDecoder()
        self.aggregator = ResultAggregator(line_number_width=line_number_width)
        self.lines = 0
        self.diagnostics = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def records(self) -> int:
        return self.aggregator.record_count

    def _process(self, lines: list[str]) -> list[RenderInstruction]:
        instructions: list[RenderInstruction] = []
        for line in lines:
            if not line:
                continue
            self.lines += 1
            decoded = classify_line(line)
            if isinstance(decoded, DiagnosticLine):
                self.diagnostics += 1
                instructions.append(DiagnosticText(decoded.text))
            else:
                instructions.extend(self.aggregator.add(decoded))
        return instructions

    def feed(self, chunk: str) -> list[RenderInstruction]:
        """Process a raw output chunk and return what became renderable."""
        if self._closed:
            raise SessionClosedError(self.term)
        return self._process(self.decoder.feed(chunk))

    def finish(
        self, returncode: Optional[int] = None, error: Optional[str] = None
    ) -> list[RenderInstruction]:
        """Flush the held fragment and report a failed termination."""
        if self._closed:
            raise SessionClosedError(self.term)
        instructions = self._process(self.decoder.flush())
        self._closed = True

        failure = describe_failure(returncode, error)
        if failure is not None:
            logger.warning("Search for %r failed: %s", self.term, failure)
            instructions.append(DiagnosticText(failure))
        return instructions

    def abort(self) -> list[RenderInstruction]:
        """Close the session after the transport went away without finishing.

        The held fragment is still decoded so the last line is not lost.
        """
        if self._closed:
            return []
        if self.decoder.pending:
            logger.info("Flushing unterminated output of aborted search %r", self.term)
        instructions = self._process(self.decoder.flush())
        self._closed = True
        return instructions


class SessionRegistry:
    """Hold one live session per search term.

    Starting a term that already has a session discards the old state.
    """

    def __init__(self, line_number_width: int = DEFAULT_LINE_NUMBER_WIDTH) -> None:
        self.line_number_width = line_number_width
        self._sessions: dict[str, SearchSession] = {}

    def start(self, term: str) -> SearchSession:
        if term in self._sessions:
            logger.debug("Restarting search session for %r", term)
        session = SearchSession(term, line_number_width=self.line_number_width)
        self._sessions[term] = session
        return session

    def get(self, term: str) -> Optional[SearchSession]:
        return self._sessions.get(term)

    def discard(self, term: str) -> None:
        self._sessions.pop(term, None)

    def __contains__(self, term: object) -> bool:
        return term in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


__all__ = ["SearchSession", "SessionRegistry", "describe_failure"]
