"""Pytest configuration helpers."""

from __future__ import annotations

from typing import Iterator

import pytest


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Iterator[None]:
    """Clear cached search settings between tests."""
    from streamgrep import settings

    settings.get_search_settings.cache_clear()
    try:
        yield
    finally:
        settings.get_search_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_observability_metrics() -> Iterator[None]:
    from streamgrep.observability.metrics import reset_metrics

    reset_metrics()
    try:
        yield
    finally:
        reset_metrics()


def rg_line(filename: str, line_number: int, *parts: str) -> str:
    """Build a result line the way ``rg --color=always --no-heading`` prints it.

    ``parts`` alternate between plain text and matched text, starting with
    plain text.
    """
    content = ""
    for position, text in enumerate(parts):
        if position % 2 == 1:
            content += f"\x1b[0m\x1b[1m\x1b[31m{text}\x1b[0m"
        else:
            content += text
    return (
        f"\x1b[0m\x1b[35m{filename}\x1b[0m:"
        f"\x1b[0m\x1b[32m{line_number}\x1b[0m:{content}"
    )


@pytest.fixture
def make_rg_line():
    return rg_line
