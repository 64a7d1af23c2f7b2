"""Validation of story catalog artifacts.

Each artifact is checked on its own first (JSON syntax, schema, schema
version). When both parse cleanly, the summary is cross-checked against the
story records it describes.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import ValidationError

from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    ARTIFACT_SPECS,
    STORIES_JSONL,
    STORIES_SUMMARY_JSON,
    build_story_id,
)
from contract.models import StoriesSummary, StoryArtifactRecord

if TYPE_CHECKING:
    from pathlib import Path

STORIES = "stories"
SUMMARY = "stories_summary"


@dataclass(frozen=True)
class ValidationMessage:
    artifact: str
    path: Path
    message: str
    line: int | None = None

    def location(self) -> str:
        if self.line is None:
            return str(self.path)
        return f"{self.path}:{self.line}"

    def to_dict(self) -> dict[str, object]:
        return {
            "artifact": self.artifact,
            "path": str(self.path),
            "line": self.line,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def error(
        self, artifact: str, path: Path, message: str, line: int | None = None
    ) -> None:
        self.errors.append(ValidationMessage(artifact, path, message, line))

    def warning(
        self, artifact: str, path: Path, message: str, line: int | None = None
    ) -> None:
        self.warnings.append(ValidationMessage(artifact, path, message, line))


def validate_artifacts(
    artifacts_dir: Path, *, strict_schema_version: bool = False
) -> ValidationResult:
    """Validate the story artifacts in ``artifacts_dir``.

    A missing ``schema_version`` is a warning, or an error when
    ``strict_schema_version`` is set. A different version is always an error.
    """
    result = ValidationResult()

    if not artifacts_dir.exists():
        result.error(
            "artifacts_dir", artifacts_dir, "Artifacts directory does not exist."
        )
        return result
    if not artifacts_dir.is_dir():
        result.error(
            "artifacts_dir", artifacts_dir, "Artifacts path is not a directory."
        )
        return result

    for artifact_name, spec in ARTIFACT_SPECS.items():
        path = artifacts_dir / spec.filename
        if not path.is_file():
            result.error(artifact_name, path, "Required artifact file is missing.")
    if result.errors:
        return result

    stories = _read_stories(
        artifacts_dir / STORIES_JSONL,
        result,
        strict_schema_version=strict_schema_version,
    )
    summary = _read_summary(
        artifacts_dir / STORIES_SUMMARY_JSON,
        result,
        strict_schema_version=strict_schema_version,
    )
    if stories is not None and summary is not None:
        _check_summary_totals(
            artifacts_dir / STORIES_SUMMARY_JSON, summary, stories, result
        )

    return result


def _read_stories(
    path: Path,
    result: ValidationResult,
    *,
    strict_schema_version: bool,
) -> list[StoryArtifactRecord] | None:
    """Validate stories.jsonl line by line.

    Returns the records, or None when any line failed to parse.
    """
    try:
        raw_lines = path.read_bytes().splitlines()
    except OSError as exc:
        result.error(STORIES, path, f"Failed to read file: {exc}.")
        return None

    records: list[StoryArtifactRecord] = []
    complete = True
    version_reported = False

    for line_number, raw_line in enumerate(raw_lines, 1):
        if not raw_line.strip():
            continue
        try:
            data = orjson.loads(raw_line)
            record = StoryArtifactRecord.model_validate(data)
        except orjson.JSONDecodeError as exc:
            result.error(STORIES, path, f"Invalid JSON: {exc}.", line_number)
            complete = False
            continue
        except ValidationError as exc:
            result.error(
                STORIES, path, f"Schema validation failed: {exc}.", line_number
            )
            complete = False
            continue

        if not version_reported:
            version_reported = _check_schema_version(
                STORIES,
                path,
                data,
                record.schema_version,
                result,
                line=line_number,
                strict=strict_schema_version,
            )
        _check_story_record(path, record, line_number, result)
        records.append(record)

    return records if complete else None


def _check_story_record(
    path: Path,
    record: StoryArtifactRecord,
    line_number: int,
    result: ValidationResult,
) -> None:
    if record.line < 1 or record.column < 1:
        result.error(
            STORIES,
            path,
            "Story position must be 1-based, "
            f"got line {record.line} column {record.column}.",
            line_number,
        )

    expected_id = build_story_id(
        record.path, record.line, record.column, record.kind, record.story
    )
    if record.story_id != expected_id:
        result.error(
            STORIES,
            path,
            f"story_id {record.story_id!r} does not match its record "
            f"(expected {expected_id!r}).",
            line_number,
        )


def _read_summary(
    path: Path,
    result: ValidationResult,
    *,
    strict_schema_version: bool,
) -> StoriesSummary | None:
    try:
        raw = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        result.error(SUMMARY, path, f"Invalid JSON: {exc}.")
        return None

    if not isinstance(raw, dict):
        result.error(SUMMARY, path, f"Expected JSON object for {STORIES_SUMMARY_JSON}.")
        return None

    try:
        summary = StoriesSummary.model_validate(raw)
    except ValidationError as exc:
        result.error(SUMMARY, path, f"Schema validation failed: {exc}.")
        return None

    _check_schema_version(
        SUMMARY,
        path,
        raw,
        summary.schema_version,
        result,
        strict=strict_schema_version,
    )
    return summary


def _check_summary_totals(
    path: Path,
    summary: StoriesSummary,
    stories: list[StoryArtifactRecord],
    result: ValidationResult,
) -> None:
    if summary.story_count != len(stories):
        result.error(
            SUMMARY,
            path,
            f"story_count is {summary.story_count} but {STORIES_JSONL} "
            f"holds {len(stories)} records.",
        )

    kind_counts = dict(sorted(Counter(story.kind for story in stories).items()))
    if summary.kinds != kind_counts:
        result.error(
            SUMMARY,
            path,
            f"Per-kind counts {summary.kinds} do not match {STORIES_JSONL} "
            f"{kind_counts}.",
        )


def _check_schema_version(
    artifact_name: str,
    path: Path,
    data: Any,
    schema_version: int,
    result: ValidationResult,
    *,
    line: int | None = None,
    strict: bool,
) -> bool:
    """Record a missing or mismatched schema version; return True if one was."""
    if not isinstance(data, dict) or "schema_version" not in data:
        message = f"Missing schema_version; defaulted to {ARTIFACT_SCHEMA_VERSION}."
        if strict:
            result.error(artifact_name, path, message, line)
        else:
            result.warning(artifact_name, path, message, line)
        return True

    if schema_version != ARTIFACT_SCHEMA_VERSION:
        result.error(
            artifact_name,
            path,
            "Schema version mismatch: "
            f"expected {ARTIFACT_SCHEMA_VERSION}, got {schema_version}.",
            line,
        )
        return True

    return False


__all__ = [
    "ValidationMessage",
    "ValidationResult",
    "validate_artifacts",
]
