"""Esprima back-end: ESTree trees for JavaScript (JSX included)."""

from __future__ import annotations

from typing import Any

import esprima
from esprima.error_handler import Error as EsprimaError
from esprima.nodes import Node

from parse.locations import OffsetIndex
from parse.syntax import NodeKind, ParsedSource, SourceSpan, StoryParseError

_SKIPPED_FIELDS = frozenset({"type", "range", "loc"})


def _start_offset(node: Node) -> int:
    node_range = getattr(node, "range", None)
    return node_range[0] if node_range else 0


class EstreeAdapter:
    """Expose esprima nodes through the ``SyntaxAdapter`` protocol."""

    def kind(self, node: Any) -> NodeKind:
        if not isinstance(node, Node):
            return NodeKind.OTHER
        node_type = node.type
        if node_type == "CallExpression":
            return NodeKind.CALL
        if node_type == "MemberExpression":
            if getattr(node, "computed", False):
                return NodeKind.OTHER
            return NodeKind.MEMBER
        if node_type == "Identifier":
            return NodeKind.IDENTIFIER
        if node_type == "Literal" and isinstance(node.value, str):
            return NodeKind.STRING
        return NodeKind.OTHER

    def callee(self, call: Node) -> Any:
        return call.callee

    def arguments(self, call: Node) -> list[Any]:
        return list(call.arguments or [])

    def member_object(self, member: Node) -> Any:
        return member.object

    def member_property(self, member: Node) -> str | None:
        prop = member.property
        if not isinstance(prop, Node) or prop.type != "Identifier":
            return None
        return prop.name

    def identifier_name(self, identifier: Node) -> str:
        return identifier.name

    def string_value(self, literal: Node) -> str:
        return literal.value

    def children(self, node: Any) -> list[Any]:
        if not isinstance(node, Node):
            return []
        found: list[Node] = []
        for key, value in vars(node).items():
            if key in _SKIPPED_FIELDS:
                continue
            if isinstance(value, Node):
                found.append(value)
            elif isinstance(value, list):
                found.extend(item for item in value if isinstance(item, Node))
        found.sort(key=_start_offset)
        return found

    def span(self, node: Node) -> SourceSpan:
        start, end = node.range
        return SourceSpan(start=start, end=end)


def parse_estree_js(source_text: str) -> ParsedSource:
    """Parse JavaScript source with esprima as an ES module with JSX enabled.

    Raises:
        StoryParseError: If esprima rejects the source.
    """
    try:
        tree = esprima.parseModule(source_text, {"jsx": True, "range": True})
    except EsprimaError as exc:
        message = getattr(exc, "description", None) or str(exc)
        raise StoryParseError(
            message,
            line=getattr(exc, "lineNumber", None) or 1,
            column=getattr(exc, "column", None) or 1,
        ) from exc

    return ParsedSource(
        root=tree,
        adapter=EstreeAdapter(),
        resolver=OffsetIndex(source_text),
    )


__all__ = ["EstreeAdapter", "parse_estree_js"]
