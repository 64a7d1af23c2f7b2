"""Story models.

``StoryRecord`` is what extraction returns for one file. The artifact models
add the file path and identifiers needed to serialize a whole repository.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from contract.artifacts import ARTIFACT_SCHEMA_VERSION

UNKNOWN_NAME = "[Unknown]"


class StoryLocation(BaseModel):
    """1-based position of the call-chain segment that declared a story."""

    model_config = ConfigDict(frozen=True)

    line: int
    column: int


class StoryRecord(BaseModel):
    """A story found in one source file."""

    model_config = ConfigDict(frozen=True)

    kind: str
    story: str
    location: StoryLocation


class StoryArtifactRecord(BaseModel):
    """Schema for stories.jsonl records."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    story_id: str
    path: str
    kind: str
    story: str
    line: int
    column: int


class ParseErrorEntry(BaseModel):
    """A source file that was skipped because it could not be parsed."""

    path: str
    line: int | None = None
    column: int | None = None
    message: str


class StoriesSummary(BaseModel):
    """Schema for stories_summary.json."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    file_count: int
    story_count: int
    kinds: dict[str, int] = Field(
        default_factory=dict, description="Story count per kind"
    )
    parse_errors: list[ParseErrorEntry] = Field(default_factory=list)


__all__ = [
    "UNKNOWN_NAME",
    "ParseErrorEntry",
    "StoriesSummary",
    "StoryArtifactRecord",
    "StoryLocation",
    "StoryRecord",
]
