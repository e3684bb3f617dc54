"""Helpers for pointing at token spans in grammar source."""

from typing import Optional

from ..core.grammar.tokens import Span


def highlight_span(source: str, span: Optional[Span], marker: str = "^") -> str:
    """
    Return the source line holding `span` with a marker run underneath.

    Returns an empty string when there is no span or the line does not exist.

    Examples:
        >>> print(highlight_span("a: |u %;", Span(0, 6, 1)))
        a: |u %;
              ^
    """
    if span is None:
        return ""
    lines = source.split("\n")
    if not 0 <= span.line < len(lines):
        return ""
    line = lines[span.line].rstrip("\r")
    return f"{line}\n{' ' * span.start}{marker * max(span.length, 1)}"
