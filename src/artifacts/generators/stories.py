"""Story catalog artifact generator."""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING, Any

from artifacts.models.artifacts.stories import (
    ParseErrorEntry,
    StoriesSummary,
    StoryArtifactRecord,
)
from artifacts.utils import _get_output_dir_name, _write_json, _write_jsonl
from contract.artifacts import STORIES_JSONL, STORIES_SUMMARY_JSON, build_story_id
from parse.stories import DEFAULT_BACKEND, extract_stories
from parse.syntax import StoryParseError
from scan.files import DEFAULT_SOURCE_EXTENSIONS, find_source_files

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from parse.story_chains import ChainPattern

logger = logging.getLogger(__name__)


class StoriesGenerator:
    """Generates stories.jsonl and stories_summary.json from source files."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "stories"

    def generate(
        self,
        root: Path,
        out_dir: Path,
        include_patterns: list[str] | None = None,
        exclude_patterns: list[str] | None = None,
        nested_gitignore: bool = False,
        extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS,
        backend: str = DEFAULT_BACKEND,
        pattern: ChainPattern | None = None,
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Generate the story artifacts.

        Files that cannot be read or parsed are skipped and listed in the
        summary's ``parse_errors``.
        """
        out_dir.mkdir(parents=True, exist_ok=True)

        out_dir_name = _get_output_dir_name(out_dir, root)
        records: list[StoryArtifactRecord] = []
        parse_errors: list[ParseErrorEntry] = []
        file_count = 0

        for file_path in find_source_files(
            root,
            extensions=extensions,
            output_dir=out_dir_name,
            include_patterns=include_patterns,
            exclude_patterns=exclude_patterns,
            nested_gitignore=nested_gitignore,
        ):
            file_count += 1
            relative_path = file_path.relative_to(root).as_posix()

            try:
                source_text = file_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping %s: %s", relative_path, exc)
                parse_errors.append(
                    ParseErrorEntry(path=relative_path, message=f"unreadable: {exc}")
                )
                continue

            try:
                stories = extract_stories(
                    source_text, backend=backend, pattern=pattern
                )
            except StoryParseError as exc:
                logger.warning(
                    "Skipping %s: parse error at %d:%d: %s",
                    relative_path,
                    exc.line,
                    exc.column,
                    exc.message,
                )
                parse_errors.append(
                    ParseErrorEntry(
                        path=relative_path,
                        line=exc.line,
                        column=exc.column,
                        message=exc.message,
                    )
                )
                continue

            logger.debug("%s: %d stories", relative_path, len(stories))
            for story in stories:
                records.append(
                    StoryArtifactRecord(
                        story_id=build_story_id(
                            relative_path,
                            story.location.line,
                            story.location.column,
                            story.kind,
                            story.story,
                        ),
                        path=relative_path,
                        kind=story.kind,
                        story=story.story,
                        line=story.location.line,
                        column=story.location.column,
                    )
                )

        kind_counts = Counter(record.kind for record in records)
        summary = StoriesSummary(
            file_count=file_count,
            story_count=len(records),
            kinds=dict(sorted(kind_counts.items())),
            parse_errors=parse_errors,
        )

        _write_jsonl(out_dir / STORIES_JSONL, records)
        _write_json(out_dir / STORIES_SUMMARY_JSON, summary)

        record_dicts = [record.model_dump() for record in records]
        return record_dicts, summary.model_dump()


__all__ = ["STORIES_JSONL", "STORIES_SUMMARY_JSON", "StoriesGenerator"]
