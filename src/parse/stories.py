"""Story extraction entry point."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from parse.estree_js import parse_estree_js
from parse.story_chains import DEFAULT_PATTERN, flatten_matches, walk_stories
from parse.treesitter_js import parse_treesitter_js

if TYPE_CHECKING:
    from collections.abc import Callable

    from artifacts.models.artifacts.stories import StoryRecord
    from parse.story_chains import ChainPattern
    from parse.syntax import ParsedSource

logger = logging.getLogger(__name__)

BackendName = Literal["treesitter", "esprima"]

DEFAULT_BACKEND: BackendName = "treesitter"

_BACKENDS: dict[str, Callable[[str], ParsedSource]] = {
    "treesitter": parse_treesitter_js,
    "esprima": parse_estree_js,
}


def available_backends() -> list[str]:
    return sorted(_BACKENDS)


def get_backend(name: str) -> Callable[[str], ParsedSource]:
    """Return the parse function registered under ``name``."""
    try:
        return _BACKENDS[name]
    except KeyError:
        msg = (
            f"Unknown parser backend '{name}'. "
            f"Valid backends: {', '.join(available_backends())}"
        )
        raise ValueError(msg) from None


def extract_stories(
    source_text: str,
    *,
    backend: str = DEFAULT_BACKEND,
    pattern: ChainPattern | None = None,
) -> list[StoryRecord]:
    """Find every story declared in a source file.

    Args:
        source_text: Full text of the file.
        backend: Name of the parser back-end (see ``available_backends``).
        pattern: Group function and story method names
            (default: ``storiesOf`` / ``add``).

    Returns:
        StoryRecord objects in declaration order. Empty when the file declares
        no stories.

    Raises:
        StoryParseError: If the source cannot be parsed.
    """
    active_pattern = pattern or DEFAULT_PATTERN
    parsed = get_backend(backend)(source_text)
    matches = walk_stories(parsed.root, parsed.adapter, active_pattern)
    records = flatten_matches(matches, parsed.resolver, active_pattern)
    logger.debug(
        "Extracted %d stories from %d chains (backend=%s)",
        len(records),
        len(matches),
        backend,
    )
    return records


__all__ = [
    "DEFAULT_BACKEND",
    "BackendName",
    "available_backends",
    "extract_stories",
    "get_backend",
]
