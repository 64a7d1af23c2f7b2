"""Offset to line/column resolution.

Two strategies are provided. ``OffsetIndex`` computes a line-start table once
per file and bisects into it. ``PointTable`` is filled while a back-end hands
out spans, from positions the parser already attached to its nodes.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Position:
    """1-based line and column."""

    line: int
    column: int


class LocationResolver(Protocol):
    def resolve(self, offset: int) -> Position: ...


class OffsetIndex:
    """Resolve character offsets against a precomputed line-start table."""

    def __init__(self, text: str) -> None:
        starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                starts.append(index + 1)
        self._line_starts = starts
        self._length = len(text)

    def resolve(self, offset: int) -> Position:
        if offset < 0 or offset > self._length:
            msg = f"Offset {offset} is outside the source (length {self._length})"
            raise ValueError(msg)
        line_index = bisect_right(self._line_starts, offset) - 1
        return Position(
            line=line_index + 1,
            column=offset - self._line_starts[line_index] + 1,
        )


def char_column(source_bytes: bytes, offset: int, byte_column: int) -> int:
    """Convert a byte column on the line ending at ``offset`` to a 1-based char column."""
    line_prefix = source_bytes[offset - byte_column : offset]
    return len(line_prefix.decode("utf8", errors="replace")) + 1


class PointTable:
    """Side table of offset -> position, recorded per node by a back-end."""

    def __init__(self, source_bytes: bytes) -> None:
        self._source_bytes = source_bytes
        self._points: dict[int, Position] = {}

    def record(self, offset: int, point: tuple[int, int]) -> None:
        row, byte_column = point
        self._points[offset] = Position(
            line=row + 1,
            column=char_column(self._source_bytes, offset, byte_column),
        )

    def resolve(self, offset: int) -> Position:
        try:
            return self._points[offset]
        except KeyError:
            msg = f"No node position recorded for offset {offset}"
            raise LookupError(msg) from None

    def __len__(self) -> int:
        return len(self._points)


__all__ = ["LocationResolver", "OffsetIndex", "PointTable", "Position", "char_column"]
