"""High-level orchestration of a search: process, session and metrics."""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, Mapping, Optional, Protocol

from streamgrep.observability.metrics import get_metrics_registry
from streamgrep.runners.ripgrep import ChunkCallback, RipgrepRunner
from streamgrep.session import SearchSession, SessionRegistry
from streamgrep.settings import get_search_settings, resolve_runner_config
from streamgrep.types import RenderInstruction, SearchExecutionResult, SearchSpec

logger = logging.getLogger(__name__)

RenderCallback = Callable[[list[RenderInstruction]], None]


class SearchRunnerProtocol(Protocol):
    """Protocol shared by search tool runners."""

    name: str

    def run(
        self,
        spec: SearchSpec,
        on_chunk: ChunkCallback,
        *,
        env: Optional[Mapping[str, str]] = None,
    ) -> SearchExecutionResult:
        ...


def _deliver(instructions: list[RenderInstruction], on_render: Optional[RenderCallback]) -> None:
    if instructions and on_render is not None:
        on_render(instructions)


def _summarize(session: SearchSession, result: SearchExecutionResult) -> SearchExecutionResult:
    result.lines = session.lines
    result.records = session.records
    result.diagnostics = session.diagnostics
    result.files = session.aggregator.file_count
    return result


def execute_search(
    spec: SearchSpec,
    *,
    runner: Optional[SearchRunnerProtocol] = None,
    registry: Optional[SessionRegistry] = None,
    on_render: Optional[RenderCallback] = None,
    env: Optional[Mapping[str, str]] = None,
) -> SearchExecutionResult:
    """Run a search and stream its render instructions to ``on_render``."""
    settings = get_search_settings()
    runner = runner or RipgrepRunner(resolve_runner_config())
    registry = registry or SessionRegistry(line_number_width=settings.LINE_NUMBER_WIDTH)
    session = registry.start(spec.term)

    logger.info("Starting %s search for %r in %s", runner.name, spec.term, spec.root)

    def _on_chunk(chunk: str) -> None:
        logger.debug("Received %d characters for %r", len(chunk), spec.term)
        _deliver(session.feed(chunk), on_render)

    try:
        result = runner.run(spec, _on_chunk, env=env)
    except Exception:
        _deliver(session.abort(), on_render)
        registry.discard(spec.term)
        raise

    _deliver(session.finish(result.returncode, result.error), on_render)
    _summarize(session, result)
    get_metrics_registry().record(result)

    logger.info(
        "Search for %r finished with code %s: %d results in %d files",
        spec.term,
        result.returncode,
        result.records,
        result.files,
    )
    return result


def decode_stream(
    chunks: Iterable[str],
    *,
    term: str = "",
    line_number_width: Optional[int] = None,
    on_render: Optional[RenderCallback] = None,
) -> SearchExecutionResult:
    """Decode already captured search tool output without spawning a process."""
    width = line_number_width or get_search_settings().LINE_NUMBER_WIDTH
    session = SearchSession(term, line_number_width=width)

    started = time.perf_counter()
    for chunk in chunks:
        _deliver(session.feed(chunk), on_render)
    _deliver(session.finish(), on_render)

    result = SearchExecutionResult(
        term=term,
        returncode=0,
        duration_ms=(time.perf_counter() - started) * 1000,
    )
    _summarize(session, result)
    get_metrics_registry().record(result)
    return result


__all__ = ["RenderCallback", "SearchRunnerProtocol", "decode_stream", "execute_search"]
