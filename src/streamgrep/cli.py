from __future__ import annotations

import json
import pathlib
import sys
from typing import Iterator, Optional, TextIO

import typer

from streamgrep.errors import StreamgrepError
from streamgrep.render import ResultBuffer
from streamgrep.search import RenderCallback, decode_stream, execute_search
from streamgrep.session import SessionRegistry
from streamgrep.settings import get_search_settings
from streamgrep.types import (
    ContentLine,
    DiagnosticText,
    RenderInstruction,
    ResultRecord,
    SearchExecutionResult,
    SearchSpec,
)

app = typer.Typer(no_args_is_help=True, help="Stream grouped, highlighted ripgrep results")


def _instruction_payload(instruction: RenderInstruction) -> Optional[dict[str, object]]:
    if isinstance(instruction, ContentLine):
        record = ResultRecord(
            filename=instruction.filename,
            line_number=instruction.line_number,
            content=instruction.content,
        )
        return {"type": "result", **record.model_dump()}
    if isinstance(instruction, DiagnosticText):
        return {"type": "diagnostic", "text": instruction.text}
    return None


def _make_printer(
    buffer: ResultBuffer, *, as_json: bool, color: Optional[bool]
) -> RenderCallback:
    def _print(instructions: list[RenderInstruction]) -> None:
        if as_json:
            for instruction in instructions:
                payload = _instruction_payload(instruction)
                if payload is not None:
                    typer.echo(json.dumps(payload, ensure_ascii=False))
            return
        for row in buffer.extend(instructions):
            typer.echo(buffer.styled_rows[row], color=color)

    return _print


def _print_summary(result: SearchExecutionResult) -> None:
    typer.echo(
        f"{result.records} results in {result.files} file groups "
        f"({result.diagnostics} diagnostics, {result.duration_ms:.0f} ms)",
        err=True,
    )


def _parse_position(value: str) -> tuple[int, int]:
    row, _, column = value.partition(":")
    try:
        return int(row), int(column or 0)
    except ValueError:
        raise typer.BadParameter("expected ROW or ROW:COLUMN") from None


def _read_chunks(stream: TextIO, size: int) -> Iterator[str]:
    while True:
        chunk = stream.read(size)
        if not chunk:
            return
        yield chunk


@app.command("search")
def search(
    term: str = typer.Argument(..., help="Text to search for"),
    paths: Optional[list[str]] = typer.Argument(None, help="Files or directories to search"),
    root: pathlib.Path = typer.Option(
        pathlib.Path("."), "--root", "-C", help="Directory to run the search from"
    ),
    regex: bool = typer.Option(False, "--regex", help="Interpret TERM as a regular expression"),
    width: Optional[int] = typer.Option(None, "--width", min=1, help="Line number column width"),
    as_json: bool = typer.Option(False, "--json", help="Emit one JSON object per result"),
    color: Optional[bool] = typer.Option(None, "--color/--no-color", help="Force styling on or off"),
    stats: bool = typer.Option(False, "--stats", help="Print a summary to stderr"),
) -> None:
    """Run ripgrep and print results grouped by file."""

    settings = get_search_settings()
    spec = SearchSpec(
        term=term,
        root=root,
        fixed_strings=settings.FIXED_STRINGS and not regex,
        paths=list(paths or []),
        extra_args=settings.extra_args,
    )

    registry = SessionRegistry(line_number_width=width or settings.LINE_NUMBER_WIDTH)
    buffer = ResultBuffer()
    try:
        result = execute_search(
            spec,
            registry=registry,
            on_render=_make_printer(buffer, as_json=as_json, color=color),
        )
    except (StreamgrepError, OSError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    if stats:
        _print_summary(result)
    if not result.ok:
        raise typer.Exit(2)


@app.command("decode")
def decode(
    source: Optional[pathlib.Path] = typer.Argument(
        None, help="File holding coloured ripgrep output (defaults to stdin)"
    ),
    term: str = typer.Option("", "--term", help="Search term the output belongs to"),
    width: Optional[int] = typer.Option(None, "--width", min=1, help="Line number column width"),
    as_json: bool = typer.Option(False, "--json", help="Emit one JSON object per result"),
    color: Optional[bool] = typer.Option(None, "--color/--no-color", help="Force styling on or off"),
    locate: Optional[str] = typer.Option(
        None, "--locate", help="Print the file position under ROW:COLUMN of the rendered output"
    ),
    stats: bool = typer.Option(False, "--stats", help="Print a summary to stderr"),
) -> None:
    """Decode captured `rg --color=always --no-heading` output."""

    chunk_size = get_search_settings().CHUNK_SIZE
    buffer = ResultBuffer()
    printer = _make_printer(buffer, as_json=as_json, color=color)
    target = _parse_position(locate) if locate else None

    def _render(instructions: list[RenderInstruction]) -> None:
        if target is None:
            printer(instructions)
        else:
            buffer.extend(instructions)

    if source is None:
        result = decode_stream(
            _read_chunks(sys.stdin, chunk_size), term=term, line_number_width=width, on_render=_render
        )
    else:
        with source.open("r", encoding="utf-8", errors="replace") as handle:
            result = decode_stream(
                _read_chunks(handle, chunk_size), term=term, line_number_width=width, on_render=_render
            )

    if target is not None:
        position = buffer.index.locate(*target)
        if position is None:
            typer.echo(f"Error: no result at row {target[0]}", err=True)
            raise typer.Exit(1)
        typer.echo(f"{position.filename}:{position.line_number}:{position.column + 1}")

    if stats:
        _print_summary(result)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
