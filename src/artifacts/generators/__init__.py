"""Artifact generators for storymap."""

from artifacts.generators.stories import StoriesGenerator

__all__ = ["StoriesGenerator"]
