"""Settings schema for a dive run and for stored per-user defaults."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_EXCLUDES: tuple[str, ...] = (".git",)


class SearchSettings(BaseModel):
    """Immutable run configuration shared by every dispatch and scan job."""

    model_config = ConfigDict(frozen=True)

    paths: tuple[Path, ...] = Field(default=(Path("."),))
    by_name: bool = Field(default=False, description="Match file names instead of contents")
    match_buffer: int = Field(default=100, ge=1, description="Result buffer capacity")
    carriage: bool = Field(default=False, description="Split records on carriage returns")
    max_files: int = Field(default=500, ge=1, description="Files open at once")
    no_prefix: bool = Field(default=False, description="Omit the path:line: prefix")
    literal: bool = Field(default=False)
    poll_ms: int = Field(default=2, ge=0, description="Collector idle delay")
    all_dirs: bool = Field(default=False, description="Descend into excluded directories")
    all_mimes: bool = Field(default=False, description="Scan octet-stream files too")
    verbose: bool = Field(default=False)
    workers: int = Field(default=64, ge=1, description="Concurrent dispatch/scan jobs")
    exclude: tuple[str, ...] = Field(default=DEFAULT_EXCLUDES)

    @field_validator("paths")
    @classmethod
    def default_to_cwd(cls, value: tuple[Path, ...]) -> tuple[Path, ...]:
        return value or (Path("."),)

    @property
    def separator(self) -> bytes:
        return b"\r" if self.carriage else b"\n"

    @property
    def poll_interval(self) -> float:
        return self.poll_ms / 1000.0


class StoredDefaults(BaseModel):
    """Per-user overrides for the numeric knobs, loaded from settings.json."""

    schema_version: int = Field(default=1)
    msize: int = Field(default=100, ge=1)
    filemax: int = Field(default=500, ge=1)
    ms: int = Field(default=2, ge=0)
    workers: int = Field(default=64, ge=1)
    exclude: list[str] = Field(default_factory=list)

    @field_validator("exclude")
    @classmethod
    def strip_blank(cls, value: list[str]) -> list[str]:
        return [item.strip() for item in value if item.strip()]
