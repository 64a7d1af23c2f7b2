"""Parsing utilities for story extraction."""

from parse.locations import OffsetIndex, PointTable, Position
from parse.stories import available_backends, extract_stories, get_backend
from parse.story_chains import (
    DEFAULT_PATTERN,
    ChainMatch,
    ChainMismatch,
    ChainPattern,
    recognize_chain,
    walk_stories,
)
from parse.syntax import NodeKind, SourceSpan, StoryParseError

__all__ = [
    "DEFAULT_PATTERN",
    "ChainMatch",
    "ChainMismatch",
    "ChainPattern",
    "NodeKind",
    "OffsetIndex",
    "PointTable",
    "Position",
    "SourceSpan",
    "StoryParseError",
    "available_backends",
    "extract_stories",
    "get_backend",
    "recognize_chain",
    "walk_stories",
]
