from __future__ import annotations

from pathlib import Path

import pytest

from parse.story_chains import ChainPattern
from rules.config import ConfigError, StoryMapConfig, load_config


def _write_config(repo_root: Path, toml_content: str) -> None:
    (repo_root / "storymap.toml").write_text(toml_content, encoding="utf-8")


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config == StoryMapConfig()
    assert config.output_dir == ".storymap"
    assert config.backend == "treesitter"
    assert config.extensions == [".js", ".jsx", ".mjs", ".cjs"]
    assert config.pattern.to_pattern() == ChainPattern()


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_pattern_key_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[pattern]
group_function = "storiesOf"
bogus = true
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "exclude = [")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_unknown_backend_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, 'backend = "acorn"')

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_extension_without_dot_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, 'extensions = ["jsx"]')

    with pytest.raises(ConfigError, match="Invalid extension"):
        load_config(tmp_path)


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
exclude = ["vendor/*"]
extensions = [".JSX"]
backend = "esprima"

[pattern]
group_function = "describeGroup"
story_method = "story"
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.exclude == ["vendor/*"]
    assert config.extensions == [".jsx"]
    assert config.backend == "esprima"
    assert config.pattern.to_pattern() == ChainPattern(
        group_function="describeGroup", story_method="story"
    )
