"""Recognition of ``storiesOf(kind).add(story, ...)`` call chains.

The recognizer walks down the callee spine of one call expression; the walker
offers every call expression of a file to it. Both only talk to nodes through
a ``SyntaxAdapter``, so any parser back-end can drive them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from artifacts.models.artifacts.stories import (
    UNKNOWN_NAME,
    StoryLocation,
    StoryRecord,
)
from parse.syntax import NodeKind, SourceSpan

if TYPE_CHECKING:
    from collections.abc import Iterable

    from parse.locations import LocationResolver
    from parse.syntax import SyntaxAdapter


@dataclass(frozen=True)
class ChainPattern:
    """Names that make up a recognized chain."""

    group_function: str = "storiesOf"
    story_method: str = "add"


DEFAULT_PATTERN = ChainPattern()


@dataclass(frozen=True)
class NamedSpan:
    name: str
    span: SourceSpan


@dataclass
class ChainMatch:
    """A fully recognized chain.

    ``stories`` and ``links`` are in source order: the group-registration call
    comes first in ``links``, the outermost call last.
    """

    kind: NamedSpan | None = None
    stories: list[NamedSpan] = field(default_factory=list)
    links: list[Any] = field(default_factory=list)


@dataclass
class ChainMismatch:
    """A candidate call that is not a story chain.

    ``links`` holds the calls visited on the callee spine, outermost first, and
    ``terminal`` the callee where the descent stopped. Every call in ``links``
    shares that terminal, so none of them can match either.
    """

    reason: str
    links: list[Any] = field(default_factory=list)
    terminal: Any = None


def _first_argument(call: Any, adapter: SyntaxAdapter) -> Any | None:
    arguments = adapter.arguments(call)
    return arguments[0] if arguments else None


def _literal_name(node: Any | None, adapter: SyntaxAdapter) -> str:
    if node is None or adapter.kind(node) is not NodeKind.STRING:
        return UNKNOWN_NAME
    return adapter.string_value(node) or UNKNOWN_NAME


def recognize_chain(
    node: Any,
    adapter: SyntaxAdapter,
    pattern: ChainPattern = DEFAULT_PATTERN,
) -> ChainMatch | ChainMismatch:
    """Recognize ``node`` as the outermost call of a story chain.

    Descends the callee spine one call at a time. Member calls named
    ``pattern.story_method`` contribute a story, other member calls are
    stepped over, and the descent ends at a plain identifier callee. Anything
    else, or an identifier other than ``pattern.group_function``, discards
    the whole chain.
    """
    stories: list[NamedSpan] = []
    links: list[Any] = []
    current = node

    while True:
        links.append(current)
        callee = adapter.callee(current)
        callee_kind = adapter.kind(callee)

        if callee_kind is NodeKind.MEMBER:
            target = adapter.member_object(callee)
            if adapter.kind(target) is not NodeKind.CALL:
                return ChainMismatch(
                    "member access on a non-call object",
                    links=links,
                    terminal=callee,
                )
            if adapter.member_property(callee) == pattern.story_method:
                stories.append(
                    NamedSpan(
                        name=_literal_name(_first_argument(current, adapter), adapter),
                        span=adapter.span(callee),
                    )
                )
            current = target
            continue

        if callee_kind is NodeKind.IDENTIFIER:
            name = adapter.identifier_name(callee)
            if name != pattern.group_function:
                return ChainMismatch(
                    f"root call was {name!r}, not a group call",
                    links=links,
                    terminal=callee,
                )
            argument = _first_argument(current, adapter)
            kind_span = adapter.span(argument if argument is not None else callee)
            stories.reverse()
            links.reverse()
            return ChainMatch(
                kind=NamedSpan(name=_literal_name(argument, adapter), span=kind_span),
                stories=stories,
                links=links,
            )

        return ChainMismatch(
            f"unsupported callee shape: {callee_kind.value}",
            links=links,
            terminal=callee,
        )


def _spine_arguments(links: Iterable[Any], adapter: SyntaxAdapter) -> list[Any]:
    return [argument for link in links for argument in adapter.arguments(link)]


def walk_stories(
    root: Any,
    adapter: SyntaxAdapter,
    pattern: ChainPattern = DEFAULT_PATTERN,
) -> list[ChainMatch]:
    """Collect every story chain under ``root`` in pre-order.

    Call expressions are offered to the recognizer. Calls on the callee spine
    of a candidate are never offered again, whether it matched or not; only
    their arguments are walked, so chains declared inside story callbacks are
    still found. After a mismatch the callee that stopped the descent is
    walked too, since it may hold candidates of its own.
    """
    matches: list[ChainMatch] = []
    stack: list[Any] = [root]

    while stack:
        node = stack.pop()
        pending: list[Any]
        if adapter.kind(node) is NodeKind.CALL:
            outcome = recognize_chain(node, adapter, pattern)
            if isinstance(outcome, ChainMatch):
                matches.append(outcome)
                pending = _spine_arguments(outcome.links, adapter)
            else:
                # mismatch links are outermost first
                pending = _spine_arguments(reversed(outcome.links), adapter)
                if outcome.terminal is not None:
                    pending.insert(0, outcome.terminal)
        else:
            pending = adapter.children(node)
        stack.extend(reversed(pending))

    return matches


def flatten_matches(
    matches: list[ChainMatch],
    resolver: LocationResolver,
    pattern: ChainPattern = DEFAULT_PATTERN,
) -> list[StoryRecord]:
    """Turn recognized chains into one flat, ordered list of story records.

    A story's span ends right after the method name, so its column is moved
    back by the name's length to land on the method name's first character.
    """
    records: list[StoryRecord] = []
    shift = len(pattern.story_method)
    for match in matches:
        if match.kind is None:
            continue
        for story in match.stories:
            position = resolver.resolve(story.span.end)
            records.append(
                StoryRecord(
                    kind=match.kind.name,
                    story=story.name,
                    location=StoryLocation(
                        line=position.line,
                        column=position.column - shift,
                    ),
                )
            )
    return records


__all__ = [
    "DEFAULT_PATTERN",
    "ChainMatch",
    "ChainMismatch",
    "ChainPattern",
    "NamedSpan",
    "flatten_matches",
    "recognize_chain",
    "walk_stories",
]
