"""Stable artifact contract surface for storymap.

Downstream tools (catalogs, editor integrations) should depend on these
exports rather than on generator internals.
"""

from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    ARTIFACT_SPECS,
    STORIES_JSONL,
    STORIES_SUMMARY_JSON,
    ArtifactSpec,
    build_story_id,
)


def __getattr__(name: str) -> object:
    if name in {"StoriesSummary", "StoryArtifactRecord"}:
        from contract.models import StoriesSummary, StoryArtifactRecord

        return {
            "StoriesSummary": StoriesSummary,
            "StoryArtifactRecord": StoryArtifactRecord,
        }[name]

    if name in {"ValidationMessage", "ValidationResult", "validate_artifacts"}:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            validate_artifacts,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "validate_artifacts": validate_artifacts,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "ARTIFACT_SCHEMA_VERSION",
    "ARTIFACT_SPECS",
    "STORIES_JSONL",
    "STORIES_SUMMARY_JSON",
    "ArtifactSpec",
    "StoriesSummary",
    "StoryArtifactRecord",
    "ValidationMessage",
    "ValidationResult",
    "build_story_id",
    "validate_artifacts",
]
