"""Artifact models exposed at the contract boundary."""

from artifacts.models.artifacts.stories import StoriesSummary, StoryArtifactRecord

__all__ = ["StoriesSummary", "StoryArtifactRecord"]
