"""Configuration rules for storymap."""

from rules.config import (
    ConfigError,
    PatternConfig,
    StoryMapConfig,
    load_config,
    resolve_output_dir,
)

__all__ = [
    "ConfigError",
    "PatternConfig",
    "StoryMapConfig",
    "load_config",
    "resolve_output_dir",
]
