"""Environment-driven settings for the search runner and renderer."""

from __future__ import annotations

import shlex
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from streamgrep.runners.ripgrep import RipgrepConfig
from streamgrep.types import DEFAULT_LINE_NUMBER_WIDTH


class SearchSettings(BaseSettings):
    """Search defaults read from ``STREAMGREP_*`` variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="STREAMGREP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    RG_BINARY: str = Field(
        default="rg",
        description="ripgrep binary used to run searches.",
    )
    TIMEOUT_SEC: float = Field(
        default=600,
        description="Seconds before a running search process is killed.",
    )
    CHUNK_SIZE: int = Field(
        default=4096,
        description="Maximum number of bytes read from the process per chunk.",
    )
    LINE_NUMBER_WIDTH: int = Field(
        default=DEFAULT_LINE_NUMBER_WIDTH,
        description="Column width of the left-justified line number field.",
    )
    FIXED_STRINGS: bool = Field(
        default=True,
        description="Treat the search term as a literal string (--fixed-strings).",
    )
    EXTRA_ARGS: str = Field(
        default="",
        description="Additional ripgrep arguments, shell-quoted.",
    )

    @field_validator("LINE_NUMBER_WIDTH")
    @classmethod
    def validate_width(cls, value: int) -> int:
        if not 1 <= value <= 12:
            raise ValueError("STREAMGREP_LINE_NUMBER_WIDTH must be between 1 and 12")
        return value

    @field_validator("TIMEOUT_SEC", "CHUNK_SIZE")
    @classmethod
    def validate_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("value must be positive")
        return value

    @property
    def extra_args(self) -> list[str]:
        return shlex.split(self.EXTRA_ARGS)


@lru_cache
def get_search_settings() -> SearchSettings:
    """Return cached search settings."""
    return SearchSettings()


def resolve_runner_config(binary: str | None = None) -> RipgrepConfig:
    """Build the runner configuration from settings with optional overrides."""
    settings = get_search_settings()
    return RipgrepConfig(
        binary=binary or settings.RG_BINARY,
        chunk_size=settings.CHUNK_SIZE,
        timeout_sec=settings.TIMEOUT_SEC,
    )


__all__ = ["SearchSettings", "get_search_settings", "resolve_runner_config"]
