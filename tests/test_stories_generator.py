from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from artifacts.generators.stories import StoriesGenerator
from artifacts.write import generate_all_artifacts
from contract.artifacts import STORIES_JSONL, STORIES_SUMMARY_JSON
from parse.story_chains import ChainPattern
from rules.config import StoryMapConfig


def _read_records(path: Path) -> list[dict[str, object]]:
    return [
        json.loads(line)
        for line in path.read_text(encoding="utf-8").splitlines()
        if line.strip()
    ]


def _write_source_file(repo_root: Path, relative_path: str, source: str) -> Path:
    path = repo_root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source, encoding="utf-8")
    return path


def _copy_mini_repo_fixture(root: Path) -> None:
    fixture_repo = Path(__file__).parent / "fixtures" / "mini_repo"
    shutil.copytree(fixture_repo, root)


def test_stories_generator_records_shape(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_source_file(
        repo_root,
        "src/Button.stories.js",
        "storiesOf('Button')\n  .add('Primary', fn)\n  .add('Secondary', fn);\n",
    )
    out_dir = tmp_path / "artifacts"

    StoriesGenerator().generate(root=repo_root, out_dir=out_dir)
    records = _read_records(out_dir / STORIES_JSONL)

    assert [(r["kind"], r["story"]) for r in records] == [
        ("Button", "Primary"),
        ("Button", "Secondary"),
    ]
    assert records[0] == {
        "schema_version": 1,
        "story_id": "story:src/Button.stories.js@L2:C4:Button/Primary",
        "path": "src/Button.stories.js",
        "kind": "Button",
        "story": "Primary",
        "line": 2,
        "column": 4,
    }


def test_stories_generator_is_byte_deterministic(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)

    out_dir_one = tmp_path / "out_one"
    out_dir_two = tmp_path / "out_two"
    StoriesGenerator().generate(root=repo_root, out_dir=out_dir_one)
    StoriesGenerator().generate(root=repo_root, out_dir=out_dir_two)

    for name in (STORIES_JSONL, STORIES_SUMMARY_JSON):
        assert (out_dir_one / name).read_bytes() == (out_dir_two / name).read_bytes()


def test_stories_generator_orders_files_by_path(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_source_file(repo_root, "b/z.js", "storiesOf('Z').add('z', fn);\n")
    _write_source_file(repo_root, "a/y.jsx", "storiesOf('Y').add('y', fn);\n")
    _write_source_file(repo_root, "a/x.ts", "storiesOf('X').add('x', fn);\n")

    record_dicts, _ = StoriesGenerator().generate(
        root=repo_root, out_dir=tmp_path / "artifacts"
    )

    assert [record["path"] for record in record_dicts] == ["a/y.jsx", "b/z.js"]


def test_stories_generator_skips_unparseable_files(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_source_file(repo_root, "broken.js", "storiesOf('K').add(\n")
    _write_source_file(repo_root, "ok.js", "storiesOf('K').add('S', fn);\n")
    out_dir = tmp_path / "artifacts"

    with caplog.at_level("WARNING"):
        _, summary = StoriesGenerator().generate(root=repo_root, out_dir=out_dir)

    assert summary["file_count"] == 2
    assert summary["story_count"] == 1
    assert summary["kinds"] == {"K": 1}
    assert [entry["path"] for entry in summary["parse_errors"]] == ["broken.js"]
    assert "broken.js" in caplog.text

    on_disk = json.loads((out_dir / STORIES_SUMMARY_JSON).read_text(encoding="utf-8"))
    assert on_disk == summary


def test_stories_generator_custom_pattern_and_backend(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_source_file(
        repo_root,
        "group.js",
        "describeGroup('G').story('One', fn);\nstoriesOf('K').add('S', fn);\n",
    )

    record_dicts, _ = StoriesGenerator().generate(
        root=repo_root,
        out_dir=tmp_path / "artifacts",
        backend="esprima",
        pattern=ChainPattern(group_function="describeGroup", story_method="story"),
    )

    assert [(r["kind"], r["story"], r["column"]) for r in record_dicts] == [
        ("G", "One", 20)
    ]


def test_generate_all_artifacts_respects_gitignore(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)

    result = generate_all_artifacts(root=repo_root, config=StoryMapConfig())

    out_dir = repo_root / ".storymap"
    records = _read_records(out_dir / STORIES_JSONL)
    assert result["story_count"] == 7
    assert result["kind_count"] == 3
    assert result["file_count"] == 3
    assert {record["path"] for record in records} == {
        "src/components/Button.stories.js",
        "src/components/Card.stories.jsx",
    }
    assert result["artifacts"] == [
        str(out_dir / STORIES_JSONL),
        str(out_dir / STORIES_SUMMARY_JSON),
    ]
