"""
Tests for the ShaderGen exception hierarchy and its message formatting.
"""
import pytest

from shadergen.core.grammar.tokens import Span
from shadergen.utils.exceptions import (
    ConfigurationError,
    GenerationError,
    GrammarError,
    InvalidConfigError,
    MaxDepthOutOfRange,
    MissingConfigError,
    ParseFail,
    ReferenceCycleError,
    ShaderGenError,
    SourceTooLarge,
    TokenError,
    TokeniserErr,
    UnexpectedChar,
    WrongNumberOfFunctionArgs,
    format_exception_chain,
)


class TestShaderGenError:

    def test_plain_message(self):
        error = ShaderGenError("Something failed")
        assert str(error) == "Something failed"
        assert error.context == {}
        assert error.original_traceback is None

    def test_context_and_suggestion_in_str(self):
        error = ShaderGenError("Bad", context={"rule": "A"}, suggestion="Fix it")
        assert str(error) == "Bad (Context: rule=A) | Suggestion: Fix it"

    def test_detailed_message(self):
        cause = ValueError("inner")
        error = ShaderGenError("Outer", context={"depth": 3}, suggestion="Retry", cause=cause)
        detailed = error.get_detailed_message()
        assert detailed.splitlines() == [
            "ShaderGenError: Outer",
            "Context:",
            "  depth: 3",
            "Suggestion: Retry",
            "Caused by: ValueError: inner",
        ]


class TestHierarchy:

    @pytest.mark.parametrize("error", [
        UnexpectedChar("%"),
        SourceTooLarge(0, 300),
        WrongNumberOfFunctionArgs("add", 2, 1),
        GenerationError("expr", 4),
        ReferenceCycleError("B", 1),
        MaxDepthOutOfRange(0, 128),
    ])
    def test_grammar_errors(self, error):
        assert isinstance(error, GrammarError)
        assert isinstance(error, ShaderGenError)

    def test_token_errors_are_not_parse_fails(self):
        assert issubclass(UnexpectedChar, TokenError)
        assert not issubclass(TokenError, ParseFail)

    def test_configuration_errors(self):
        assert isinstance(MissingConfigError("x.yaml"), ConfigurationError)
        assert isinstance(InvalidConfigError("bad"), ConfigurationError)

    def test_tokeniser_error_wraps_token_error(self):
        inner = UnexpectedChar("%")
        error = TokeniserErr(inner, span=Span(0, 6, 1))
        assert error.error is inner
        assert error.span == Span(0, 6, 1)
        assert "'%'" in error.message
        assert error.context == {"char": "%"}


class TestMessages:

    def test_wrong_number_of_args(self):
        error = WrongNumberOfFunctionArgs("add", 2, 1)
        assert error.message == "Function 'add' expects 2 argument(s), got 1"
        assert error.span is None

    def test_invalid_config_suggestion_names_field(self):
        error = InvalidConfigError("bad depth", config_field="generator.max_depth", invalid_value=0)
        assert error.context == {"field": "generator.max_depth", "invalid_value": 0}
        assert "generator.max_depth" in error.suggestion

    def test_generation_error_context(self):
        error = GenerationError("expr", 4)
        assert error.context == {"rule": "expr", "depth": 4}

    def test_reference_cycle_is_a_generation_error(self):
        error = ReferenceCycleError("B", 1)
        assert isinstance(error, GenerationError)
        assert error.context == {"rule": "B", "depth": 1}
        assert error.message == "Rule 'B' starts a cycle of bare rule references with no way out"
        assert "not a bare rule reference" in error.suggestion

    def test_max_depth_out_of_range(self):
        error = MaxDepthOutOfRange(500, 128)
        assert (error.max_depth, error.limit) == (500, 128)
        assert error.message == "max_depth must be between 1 and 128, got 500"
        assert error.context == {"max_depth": 500, "limit": 128}
        assert not isinstance(error, GenerationError)


class TestFormatExceptionChain:

    def test_single_exception(self):
        assert format_exception_chain(ValueError("boom")) == "ValueError: boom"

    def test_follows_cause(self):
        error = InvalidConfigError("outer", cause=KeyError("missing"))
        text = format_exception_chain(error)
        assert text.startswith("InvalidConfigError: outer")
        assert "  Caused by:" in text
        assert text.splitlines()[-1] == "KeyError: 'missing'"

    def test_follows_raise_from(self):
        try:
            try:
                raise KeyError("inner")
            except KeyError as e:
                raise RuntimeError("outer") from e
        except RuntimeError as e:
            text = format_exception_chain(e)
        assert text.splitlines() == ["RuntimeError: outer", "  Caused by:", "KeyError: 'inner'"]
