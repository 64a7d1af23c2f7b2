"""Tree-sitter back-end for JavaScript (JSX included)."""

from __future__ import annotations

import re

from tree_sitter import Language, Node, Parser
from tree_sitter_javascript import language as get_javascript_language

from parse.locations import PointTable
from parse.syntax import NodeKind, ParsedSource, SourceSpan, StoryParseError

_PARSER: Parser | None = None

_NODE_KINDS = {
    "call_expression": NodeKind.CALL,
    "member_expression": NodeKind.MEMBER,
    "identifier": NodeKind.IDENTIFIER,
    "string": NodeKind.STRING,
}

_PROPERTY_TYPES = ("property_identifier", "private_property_identifier")

_SINGLE_CHAR_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "0": "\0",
}

_LINE_TERMINATORS = frozenset("\r\n\u2028\u2029")

# strict mode (and so module code) forbids octal escapes other than \0
_LEGACY_OCTAL_ESCAPE = re.compile(r"\\(?:[0-7]{2,3}|[1-7])")


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with the JavaScript language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_javascript_language())
        _PARSER = Parser(lang)

    return _PARSER


def _unwrap(node: Node | None) -> Node | None:
    """Look through parentheses, which ESTree parsers do not keep as nodes."""
    while node is not None and node.type == "parenthesized_expression":
        inner = [child for child in node.named_children if child.type != "comment"]
        if len(inner) != 1:
            break
        node = inner[0]
    return node


def _decode_node_text(node: Node) -> str:
    return (node.text or b"").decode("utf8", errors="ignore")


def _decode_escape(raw: str) -> str:
    """Decode one JavaScript escape sequence such as ``\\n`` or ``\\u{1F600}``."""
    body = raw[1:]
    if not body:
        return raw
    if body in _SINGLE_CHAR_ESCAPES:
        return _SINGLE_CHAR_ESCAPES[body]
    if body[0] in _LINE_TERMINATORS:
        return ""
    if body[0] in "ux" and len(body) > 1:
        digits = body[1:].strip("{}")
        try:
            return chr(int(digits, 16))
        except (OverflowError, ValueError):
            return raw
    return body


class TreeSitterAdapter:
    """Expose tree-sitter JavaScript nodes through the ``SyntaxAdapter`` protocol."""

    def __init__(self, points: PointTable) -> None:
        self._points = points

    def kind(self, node: Node | None) -> NodeKind:
        if node is None:
            return NodeKind.OTHER
        kind = _NODE_KINDS.get(node.type, NodeKind.OTHER)
        if kind is NodeKind.CALL:
            # tagged templates are call_expressions with a template_string argument
            arguments = node.child_by_field_name("arguments")
            if arguments is None or arguments.type != "arguments":
                return NodeKind.OTHER
        return kind

    def callee(self, call: Node) -> Node | None:
        return _unwrap(call.child_by_field_name("function"))

    def arguments(self, call: Node) -> list[Node]:
        arguments = call.child_by_field_name("arguments")
        if arguments is None:
            return []
        return [
            _unwrap(child) or child
            for child in arguments.named_children
            if child.type != "comment"
        ]

    def member_object(self, member: Node) -> Node | None:
        return _unwrap(member.child_by_field_name("object"))

    def member_property(self, member: Node) -> str | None:
        prop = member.child_by_field_name("property")
        if prop is None or prop.type not in _PROPERTY_TYPES:
            return None
        return _decode_node_text(prop)

    def identifier_name(self, identifier: Node) -> str:
        return _decode_node_text(identifier)

    def string_value(self, literal: Node) -> str:
        parts: list[str] = []
        for child in literal.named_children:
            if child.type == "string_fragment":
                parts.append(_decode_node_text(child))
            elif child.type == "escape_sequence":
                parts.append(_decode_escape(_decode_node_text(child)))
        return "".join(parts)

    def children(self, node: Node) -> list[Node]:
        return list(node.named_children)

    def span(self, node: Node) -> SourceSpan:
        self._points.record(node.start_byte, tuple(node.start_point))
        self._points.record(node.end_byte, tuple(node.end_point))
        return SourceSpan(start=node.start_byte, end=node.end_byte)


def _first_error_node(root: Node) -> Node | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def _first_legacy_octal_escape(root: Node) -> Node | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "escape_sequence":
            if _LEGACY_OCTAL_ESCAPE.fullmatch(_decode_node_text(node)):
                return node
            continue
        stack.extend(reversed(node.named_children))
    return None


def parse_treesitter_js(source_text: str) -> ParsedSource:
    """Parse JavaScript source with tree-sitter.

    Module code is strict, so legacy octal escapes in string literals are
    rejected as well.

    Raises:
        StoryParseError: If the tree contains syntax errors.
    """
    source_bytes = source_text.encode("utf8")
    tree = _get_parser().parse(source_bytes)
    root_node = tree.root_node
    points = PointTable(source_bytes)

    if root_node.has_error:
        bad_node = _first_error_node(root_node) or root_node
        points.record(bad_node.start_byte, tuple(bad_node.start_point))
        position = points.resolve(bad_node.start_byte)
        message = (
            f"missing {bad_node.type}" if bad_node.is_missing else "unexpected syntax"
        )
        raise StoryParseError(message, line=position.line, column=position.column)

    octal_escape = _first_legacy_octal_escape(root_node)
    if octal_escape is not None:
        points.record(octal_escape.start_byte, tuple(octal_escape.start_point))
        position = points.resolve(octal_escape.start_byte)
        raise StoryParseError(
            "octal escape sequences are not allowed in strict mode",
            line=position.line,
            column=position.column,
        )

    return ParsedSource(
        root=root_node,
        adapter=TreeSitterAdapter(points),
        resolver=points,
    )


__all__ = ["TreeSitterAdapter", "parse_treesitter_js"]
