"""Command-line interface for storymap."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from artifacts.write import generate_all_artifacts
from contract.validation import validate_artifacts
from parse.stories import available_backends, extract_stories
from parse.syntax import StoryParseError
from report.context import format_context
from rules.config import ConfigError, load_config
from verify.verify import verify_determinism

logger = logging.getLogger("storymap")


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Repository root (default: .)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="storymap")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List stories in one file")
    list_parser.add_argument("file", help="Source file to scan")
    list_parser.add_argument(
        "--backend",
        choices=available_backends(),
        default=None,
        help="Parser backend (default: config backend)",
    )
    list_parser.add_argument(
        "--context",
        action="store_true",
        help="Show the surrounding source lines for each story",
    )
    list_parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI colors in --context output",
    )

    generate_parser = subparsers.add_parser("generate", help="Generate artifacts")
    _add_common_paths(generate_parser)
    generate_parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for generated artifacts (default: config output dir)",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate artifacts")
    _add_common_paths(validate_parser)
    validate_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Verify determinism of artifacts"
    )
    _add_common_paths(verify_parser)
    verify_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )

    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _resolve_output_dir(out_dir: str | None) -> Path | None:
    if out_dir is None:
        return None
    return Path(out_dir).expanduser().resolve()


def _resolve_artifacts_dir(root: Path, artifacts_dir: str | None) -> Path:
    if artifacts_dir is None:
        config = load_config(root)
        return (root / config.output_dir).resolve()
    return Path(artifacts_dir).expanduser().resolve()


def _handle_list(
    file_arg: str, backend: str | None, *, context: bool, color: bool
) -> int:
    file_path = Path(file_arg).expanduser()
    try:
        source_text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        sys.stderr.write(f"{file_path}: error: {exc}\n")
        return 2

    config = load_config(Path.cwd())
    try:
        stories = extract_stories(
            source_text,
            backend=backend or config.backend,
            pattern=config.pattern.to_pattern(),
        )
    except StoryParseError as exc:
        sys.stderr.write(f"{file_path}:{exc.line}:{exc.column}: error: {exc.message}\n")
        return 2

    for story in stories:
        line = story.location.line
        column = story.location.column
        sys.stdout.write(f"{file_path}:{line}:{column}: {story.kind} / {story.story}\n")
        if context:
            sys.stdout.write(format_context(source_text, line, column, color=color))
            sys.stdout.write("\n\n")
    return 0


def _handle_generate(root: Path, out_dir: str | None) -> int:
    resolved_out_dir = _resolve_output_dir(out_dir)
    summary = generate_all_artifacts(root=root, out_dir=resolved_out_dir)
    logger.info(
        "Generated %s stories across %s kinds",
        summary["story_count"],
        summary["kind_count"],
    )
    return 0


def _handle_validate(root: Path, artifacts_dir: str | None) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    result = validate_artifacts(resolved_artifacts_dir)
    for warning in result.warnings:
        logger.warning("%s: %s", warning.location(), warning.message)
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.location()}: {error.message}\n")
        return 1
    return 0


def _handle_verify(root: Path, artifacts_dir: str | None) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    try:
        result = verify_determinism(root=root, artifacts_dir=resolved_artifacts_dir)
    except (FileNotFoundError, NotADirectoryError) as exc:
        sys.stderr.write(f"artifacts-dir: {resolved_artifacts_dir}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        for label, paths in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("mismatches", result.mismatches),
        ):
            for path in paths:
                sys.stderr.write(f"{label}: {path}\n")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        if args.command == "list":
            return _handle_list(
                args.file,
                args.backend,
                context=args.context,
                color=not args.no_color,
            )

        root = Path(args.root).expanduser().resolve()

        if args.command == "generate":
            return _handle_generate(root, args.out_dir)

        if args.command == "validate":
            return _handle_validate(root, args.artifacts_dir)

        if args.command == "verify":
            return _handle_verify(root, args.artifacts_dir)
    except ConfigError as exc:
        sys.stderr.write(f"config error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
