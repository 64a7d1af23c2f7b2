"""Parser-neutral view of a JavaScript syntax tree.

Every parser back-end exposes its nodes through a ``SyntaxAdapter`` so that a
single chain recognizer serves all of them. Nodes stay opaque: the core only
ever asks the adapter about them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from parse.locations import LocationResolver


class NodeKind(str, Enum):
    """Node shapes the chain recognizer distinguishes."""

    CALL = "call"
    MEMBER = "member"
    IDENTIFIER = "identifier"
    STRING = "string"
    OTHER = "other"


@dataclass(frozen=True)
class SourceSpan:
    """Start/end offsets of a node in the back-end's offset space."""

    start: int
    end: int


class SyntaxAdapter(Protocol):
    def kind(self, node: Any) -> NodeKind: ...

    def callee(self, call: Any) -> Any: ...

    def arguments(self, call: Any) -> list[Any]: ...

    def member_object(self, member: Any) -> Any: ...

    def member_property(self, member: Any) -> str | None: ...

    def identifier_name(self, identifier: Any) -> str: ...

    def string_value(self, literal: Any) -> str: ...

    def children(self, node: Any) -> list[Any]: ...

    def span(self, node: Any) -> SourceSpan: ...


@dataclass(frozen=True)
class ParsedSource:
    """A parsed file: its root node plus the capabilities to inspect it."""

    root: Any
    adapter: SyntaxAdapter
    resolver: LocationResolver


class StoryParseError(Exception):
    """Raised when source text cannot be parsed into a syntax tree."""

    def __init__(self, message: str, *, line: int, column: int) -> None:
        super().__init__(f"{line}:{column}: {message}")
        self.message = message
        self.line = line
        self.column = column


__all__ = [
    "NodeKind",
    "ParsedSource",
    "SourceSpan",
    "StoryParseError",
    "SyntaxAdapter",
]
