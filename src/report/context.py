"""Human-readable source context for reported story locations."""

from __future__ import annotations

GRAY = "\u001b[90m"
GREEN = "\u001b[32;1m"
RESET = "\u001b[39;0m"


def _format_line(lines: list[str], index: int, pad_size: int) -> str:
    if index < 0 or index >= len(lines):
        return f"{'*'.rjust(pad_size)} |"
    return f"{str(index + 1).rjust(pad_size)} | {lines[index]}"


def format_context(
    source_text: str,
    line: int,
    column: int,
    *,
    color: bool = True,
) -> str:
    """Render the lines around ``line`` with a caret under ``column``.

    Two lines of context are shown on each side. Lines that fall outside the
    file are drawn as ``*``. Both ``line`` and ``column`` are 1-based.
    """
    gray, green, reset = (GRAY, GREEN, RESET) if color else ("", "", "")
    lines = source_text.split("\n")
    current = line - 1
    width = len(str(current + 2))

    def context(index: int) -> str:
        return f"   {gray} {_format_line(lines, index, width)} {reset}"

    return "\n".join(
        [
            context(current - 2),
            context(current - 1),
            f" {green} >{reset} {_format_line(lines, current, width)}",
            f"   {gray} {' '.rjust(width)} |{green} {'^'.rjust(column)} {reset}",
            context(current + 1),
            context(current + 2),
        ]
    )


__all__ = ["format_context"]
