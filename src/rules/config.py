from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from parse.story_chains import ChainPattern
from scan.files import DEFAULT_SOURCE_EXTENSIONS

CONFIG_FILENAME = "storymap.toml"

BackendChoice = Literal["treesitter", "esprima"]


class PatternConfig(BaseModel):
    """Names of the group-registration function and the story method."""

    model_config = ConfigDict(extra="forbid")

    group_function: str = Field(
        default="storiesOf",
        min_length=1,
        description="Function that opens a chain and names its kind",
    )
    story_method: str = Field(
        default="add",
        min_length=1,
        description="Chained method that declares one story",
    )

    def to_pattern(self) -> ChainPattern:
        return ChainPattern(
            group_function=self.group_function,
            story_method=self.story_method,
        )


class StoryMapConfig(BaseModel):
    """Configuration for storymap artifact generation."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = Field(
        default=".storymap",
        description="Output directory for generated artifacts",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all source files)",
    )
    exclude: list[str] = Field(
        default_factory=lambda: ["node_modules/*", "*/node_modules/*"],
        description="Glob patterns for files to exclude",
    )
    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SOURCE_EXTENSIONS),
        description="File suffixes scanned for stories",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    backend: BackendChoice = Field(
        default="treesitter",
        description="Parser back-end used for extraction",
    )
    pattern: PatternConfig = Field(
        default_factory=PatternConfig,
        description="Chain names to recognize",
    )

    @field_validator("extensions", mode="before")
    @classmethod
    def validate_extensions(cls, v: Any) -> Any:
        """Require dotted suffixes such as ``.jsx``."""
        if v is None:
            return list(DEFAULT_SOURCE_EXTENSIONS)

        if not isinstance(v, list):
            msg = "extensions must be a list of file suffixes"
            raise TypeError(msg)

        for suffix in v:
            if not isinstance(suffix, str) or not suffix.startswith("."):
                msg = f"Invalid extension {suffix!r}: expected a suffix like '.jsx'"
                raise ValueError(msg)

        return [suffix.lower() for suffix in v]


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve a config-provided output_dir safely within the repo root.

    The config output_dir must be a non-empty relative path that remains
    within the repository root after resolution. Absolute paths and paths
    that escape the root are rejected.
    """
    if not output_dir:
        msg = "output_dir must be a non-empty relative path"
        raise ConfigError(msg)

    if output_dir.startswith("~"):
        msg = "output_dir must be a relative path within the repo root"
        raise ConfigError(msg)

    output_path = Path(output_dir)
    if output_path.is_absolute():
        msg = "output_dir must be a relative path within the repo root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output_dir '{output_dir}' escapes the repository root"
        raise ConfigError(msg) from exc

    return resolved_output


def load_config(root: Path) -> StoryMapConfig:
    """Load configuration from storymap.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return StoryMapConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return StoryMapConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
