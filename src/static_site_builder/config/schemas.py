"""Build configuration schema."""

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from static_site_builder.config.constants import (
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_PATHS,
    MAX_CONCURRENCY_LIMIT,
)


class BuildConfig(BaseModel):
    """Configuration for one static site build.

    Attributes:
        renderer: Renderer reference (module or file, optional ":attribute").
        output_dir: Directory rendered pages are written to.
        crawl: Follow same-site links found in rendered pages.
        paths: Paths to render; a single string is accepted.
        locals: Values passed to the renderer on every call.
        public_path: Prefix for asset filenames in the asset map.
        assets: Chunk name to filename(s) of the host build.
        max_concurrency: Number of concurrent render workers.
        max_pages: Optional cap on the number of paths rendered.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    renderer: Annotated[str, Field(min_length=1)]
    output_dir: Path
    crawl: bool = False
    paths: list[str] = Field(default_factory=lambda: list(DEFAULT_PATHS))
    locals: dict[str, Any] = Field(default_factory=dict)
    public_path: str | None = None
    assets: dict[str, str | list[str]] = Field(default_factory=dict)
    max_concurrency: Annotated[
        int, Field(ge=1, le=MAX_CONCURRENCY_LIMIT)
    ] = DEFAULT_MAX_CONCURRENCY
    max_pages: Annotated[int, Field(ge=1)] | None = None

    @field_validator("paths", mode="before")
    @classmethod
    def wrap_single_path(cls, v: object) -> object:
        """Accept a bare string or null for paths."""
        if v is None:
            return list(DEFAULT_PATHS)
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("paths")
    @classmethod
    def validate_paths(cls, v: list[str]) -> list[str]:
        """Ensure at least one path and no empty paths."""
        if not v:
            msg = "At least one path is required"
            raise ValueError(msg)
        if any(not path.strip() for path in v):
            msg = "Paths must not be empty"
            raise ValueError(msg)
        return v
