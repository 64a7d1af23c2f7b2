from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from artifacts.generators import StoriesGenerator
from contract.artifacts import STORIES_JSONL, STORIES_SUMMARY_JSON
from rules.config import load_config, resolve_output_dir

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import StoryMapConfig

logger = logging.getLogger(__name__)


def generate_all_artifacts(
    *,
    root: Path,
    out_dir: Path | None = None,
    config: StoryMapConfig | None = None,
) -> dict[str, object]:
    """Generate the story catalog artifacts for a repository.

    Args:
        root: Root directory of the repository to analyze
        out_dir: Optional output directory for generated artifacts
        config: Optional configuration (default: loaded from storymap.toml)

    Returns:
        Dictionary with counts and list of generated artifact paths.
    """
    if config is None:
        config = load_config(root)

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.output_dir)

    stories_gen = StoriesGenerator()
    story_dicts, summary = stories_gen.generate(
        root=root,
        out_dir=out_dir,
        include_patterns=config.include,
        exclude_patterns=config.exclude,
        nested_gitignore=config.nested_gitignore,
        extensions=config.extensions,
        backend=config.backend,
        pattern=config.pattern.to_pattern(),
    )

    parse_errors = summary.get("parse_errors", [])
    logger.info(
        "Wrote %d stories from %s files to %s (%d skipped)",
        len(story_dicts),
        summary.get("file_count"),
        out_dir,
        len(parse_errors),
    )

    artifacts_list = [STORIES_JSONL, STORIES_SUMMARY_JSON]

    return {
        "story_count": len(story_dicts),
        "file_count": summary.get("file_count", 0),
        "kind_count": len(summary.get("kinds", {})),
        "parse_error_count": len(parse_errors),
        "artifacts": [str(out_dir / name) for name in artifacts_list],
    }
