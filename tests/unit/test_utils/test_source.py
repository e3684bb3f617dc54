"""
Tests for source highlighting.
"""
from shadergen.core.grammar.tokens import Span
from shadergen.utils.source import highlight_span

SOURCE = "A: |B;\nB: |add(u);\n"


class TestHighlightSpan:

    def test_marks_span_under_line(self):
        assert highlight_span(SOURCE, Span(1, 4, 3)) == "B: |add(u);\n    ^^^"

    def test_custom_marker(self):
        assert highlight_span(SOURCE, Span(0, 0, 1), marker="~") == "A: |B;\n~"

    def test_zero_length_span_still_marks(self):
        assert highlight_span(SOURCE, Span(0, 5, 0)).endswith("     ^")

    def test_missing_span_or_line(self):
        assert highlight_span(SOURCE, None) == ""
        assert highlight_span(SOURCE, Span(7, 0, 1)) == ""

    def test_crlf_source(self):
        assert highlight_span("A: |u %;\r\n", Span(0, 6, 1)) == "A: |u %;\n      ^"
