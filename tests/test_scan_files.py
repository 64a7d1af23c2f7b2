from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from scan.files import _build_gitignore_matcher, find_source_files

if TYPE_CHECKING:
    from pathlib import Path


def _touch(path: Path, content: str = "storiesOf('K').add('S', fn);\n") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _relative(repo_root: Path, **kwargs: object) -> list[str]:
    return [
        path.relative_to(repo_root).as_posix()
        for path in find_source_files(repo_root, **kwargs)
    ]


def test_find_source_files_filters_extensions_and_sorts(tmp_path: Path) -> None:
    _touch(tmp_path / "b" / "Card.stories.jsx")
    _touch(tmp_path / "a" / "Button.stories.JS")
    _touch(tmp_path / "a" / "notes.md")
    _touch(tmp_path / "a" / "types.ts")

    assert _relative(tmp_path) == ["a/Button.stories.JS", "b/Card.stories.jsx"]
    assert _relative(tmp_path, extensions=[".ts"]) == ["a/types.ts"]


def test_find_source_files_include_exclude(tmp_path: Path) -> None:
    _touch(tmp_path / "src" / "Card.stories.js")
    _touch(tmp_path / "src" / "Card.js")
    _touch(tmp_path / "node_modules" / "lib" / "index.js")

    assert _relative(
        tmp_path,
        include_patterns=["*.stories.js"],
    ) == ["src/Card.stories.js"]
    assert _relative(
        tmp_path,
        exclude_patterns=["node_modules/*"],
    ) == ["src/Card.js", "src/Card.stories.js"]


def test_find_source_files_skips_output_dir(tmp_path: Path) -> None:
    _touch(tmp_path / ".storymap" / "cached.js")
    _touch(tmp_path / "src" / "Card.stories.js")

    assert _relative(tmp_path) == ["src/Card.stories.js"]


def test_root_gitignore_respected(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("dist/\n", encoding="utf-8")
    _touch(tmp_path / "dist" / "bundle.js")
    _touch(tmp_path / "src" / "Card.stories.js")

    assert _relative(tmp_path) == ["src/Card.stories.js"]


def test_nested_gitignore_only_when_enabled(tmp_path: Path) -> None:
    _touch(tmp_path / "pkg" / "generated.js")
    _touch(tmp_path / "pkg" / "Card.stories.js")
    (tmp_path / "pkg" / ".gitignore").write_text("generated.js\n", encoding="utf-8")

    assert _relative(tmp_path) == ["pkg/Card.stories.js", "pkg/generated.js"]
    assert _relative(tmp_path, nested_gitignore=True) == ["pkg/Card.stories.js"]


def test_no_gitignore_means_no_matcher(tmp_path: Path) -> None:
    assert _build_gitignore_matcher(tmp_path, nested_gitignore=False) is None
    assert _build_gitignore_matcher(tmp_path, nested_gitignore=True) is None


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_find_source_files_skips_symlinked_dirs(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _touch(repo_root / "src" / "Card.stories.js")

    external_root = tmp_path / "external"
    _touch(external_root / "leak.stories.js")

    (repo_root / "linked").symlink_to(external_root, target_is_directory=True)

    results = _relative(repo_root)

    assert "src/Card.stories.js" in results
    assert "linked/leak.stories.js" not in results
