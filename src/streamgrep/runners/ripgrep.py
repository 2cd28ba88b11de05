"""ripgrep runner streaming colour-coded result chunks to a callback."""

from __future__ import annotations

import codecs
import logging
import shutil
import subprocess
import threading
import time
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from streamgrep.errors import SearchToolNotFoundError
from streamgrep.types import SearchExecutionResult, SearchSpec

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[str], None]


@dataclass(slots=True)
class RipgrepConfig:
    """Configuration for invoking ripgrep."""

    binary: str = "rg"
    chunk_size: int = 4096
    timeout_sec: float = 600


class RipgrepRunner:
    """Run ripgrep and deliver its merged output as it arrives."""

    name = "ripgrep"

    def __init__(self, config: RipgrepConfig | None = None) -> None:
        self.config = config or RipgrepConfig()

    def is_available(self) -> bool:
        """Check if ripgrep is available on PATH."""
        return shutil.which(self.config.binary) is not None

    def _build_command(self, spec: SearchSpec) -> list[str]:
        command: list[str] = [
            self.config.binary,
            # User config files could change the colour layout
            "--no-config",
            "--color=always",
            "--no-heading",
            "--with-filename",
            "--line-number",
        ]
        if spec.fixed_strings:
            command.append("--fixed-strings")
        command.extend(spec.extra_args)
        command.extend(["--", spec.term])
        command.extend(spec.paths)
        return command

    def run(
        self,
        spec: SearchSpec,
        on_chunk: ChunkCallback,
        *,
        env: Optional[Mapping[str, str]] = None,
    ) -> SearchExecutionResult:
        """Execute ripgrep, calling ``on_chunk`` for every decoded chunk in order."""
        if not self.is_available():
            raise SearchToolNotFoundError(self.config.binary)

        command = self._build_command(spec)
        logger.debug("Spawning %s", command)

        started = time.perf_counter()
        process = subprocess.Popen(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            cwd=str(spec.root),
            env=None if env is None else dict(env),
        )

        timed_out = threading.Event()

        def _kill() -> None:
            timed_out.set()
            process.kill()

        timer = threading.Timer(self.config.timeout_sec, _kill)
        timer.daemon = True
        timer.start()

        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        try:
            assert process.stdout is not None
            while True:
                data = process.stdout.read1(self.config.chunk_size)
                if not data:
                    break
                text = decoder.decode(data)
                if text:
                    on_chunk(text)
            tail = decoder.decode(b"", final=True)
            if tail:
                on_chunk(tail)
            returncode = process.wait()
        finally:
            timer.cancel()
            if process.poll() is None:
                process.kill()
                process.wait()
            if process.stdout is not None:
                process.stdout.close()

        duration_ms = (time.perf_counter() - started) * 1000
        error: Optional[str] = None
        if timed_out.is_set():
            error = f"ripgrep timed out after {self.config.timeout_sec:g}s"

        return SearchExecutionResult(
            term=spec.term,
            returncode=returncode,
            duration_ms=duration_ms,
            error=error,
        )


__all__ = ["ChunkCallback", "RipgrepConfig", "RipgrepRunner"]
