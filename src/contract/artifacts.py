"""Artifact contract definitions.

This module defines the stable filenames, formats and identifiers of the
story catalog artifacts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Artifact schema version for story artifacts.
ARTIFACT_SCHEMA_VERSION = 1

# Artifact filename constants (stable contract identifiers).
STORIES_JSONL = "stories.jsonl"
STORIES_SUMMARY_JSON = "stories_summary.json"


@dataclass(frozen=True)
class ArtifactSpec:
    """Specification for a contract artifact."""

    filename: str
    format: str
    required_fields_note: str


# ---------------------------------------------------------------------------
# Deterministic story_id
# ---------------------------------------------------------------------------
# Canonical story_id format: story:{path}@L{line}:C{col}:{kind}/{story}
# - path: POSIX relative path (forward slashes, no ./ prefix)
# - line/col: 1-based integers
# - kind/story: names with whitespace runs collapsed

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_name(raw_name: str) -> str:
    """Strip a kind or story name and collapse internal whitespace runs."""
    return _WHITESPACE_RUN.sub(" ", raw_name.strip())


def build_story_id(path: str, line: int, column: int, kind: str, story: str) -> str:
    """Build a deterministic story_id following the contract format.

    Format: ``story:{path}@L{line}:C{column}:{kind}/{story}``
    """
    return (
        f"story:{path}@L{line}:C{column}:"
        f"{normalize_name(kind)}/{normalize_name(story)}"
    )


ARTIFACT_SPECS: dict[str, ArtifactSpec] = {
    "stories": ArtifactSpec(
        filename=STORIES_JSONL,
        format="jsonl",
        required_fields_note="StoryArtifactRecord fields required by contract.",
    ),
    "stories_summary": ArtifactSpec(
        filename=STORIES_SUMMARY_JSON,
        format="json",
        required_fields_note="StoriesSummary fields required by contract.",
    ),
}
