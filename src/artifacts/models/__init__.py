"""Model namespace for storymap artifact schemas."""

from artifacts.models.artifacts.stories import (
    ParseErrorEntry,
    StoriesSummary,
    StoryArtifactRecord,
    StoryLocation,
    StoryRecord,
)

__all__ = [
    "ParseErrorEntry",
    "StoriesSummary",
    "StoryArtifactRecord",
    "StoryLocation",
    "StoryRecord",
]
