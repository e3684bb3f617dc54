"""
Custom Exception Classes for ShaderGen

This module defines the exception classes raised by the grammar compiler and
the expression generator. All custom exceptions inherit from ShaderGenError
to allow for unified exception handling.

Exception Hierarchy:
    ShaderGenError (base)
    ├── ConfigurationError
    │   ├── InvalidConfigError
    │   └── MissingConfigError
    └── GrammarError
        ├── TokenError
        │   ├── UnexpectedChar
        │   └── SourceTooLarge
        ├── ParseFail
        │   ├── TokeniserErr
        │   ├── UnterminatedRule
        │   ├── NoRulesFound
        │   ├── ExpectedIdentifier
        │   ├── ExpectedBars
        │   ├── BadArglist
        │   ├── EmptyExpression
        │   ├── UnsupportedNumberOfFunctionArgs
        │   ├── WrongNumberOfFunctionArgs
        │   ├── FunctionNotWhitelisted
        │   ├── NoTerminalReplacementInChannelRule
        │   ├── NoTerminalReplacementInRule
        │   ├── UndefinedRule
        │   ├── WeightOutOfRange
        │   └── WeightOverflow
        ├── GenerationError
        │   └── ReferenceCycleError
        ├── MaxDepthOutOfRange
        └── SymbolicMathError
"""

from typing import Optional, Any, Dict, List
import traceback


class ShaderGenError(Exception):
    """
    Base exception for all ShaderGen errors.

    Attributes:
        message: Primary error message
        context: Additional context information (optional)
        suggestion: Suggested action to resolve the error (optional)
        cause: Original exception that caused this error (optional)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.suggestion = suggestion
        self.cause = cause

        if cause:
            self.original_traceback = traceback.format_exc()
        else:
            self.original_traceback = None

    def __str__(self) -> str:
        result = self.message

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            result += f" (Context: {context_str})"

        if self.suggestion:
            result += f" | Suggestion: {self.suggestion}"

        return result

    def get_detailed_message(self) -> str:
        """Return a detailed error message including context and suggestions."""
        lines = [f"{self.__class__.__name__}: {self.message}"]

        if self.context:
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        if self.suggestion:
            lines.append(f"Suggestion: {self.suggestion}")

        if self.cause:
            lines.append(f"Caused by: {type(self.cause).__name__}: {self.cause}")

        return "\n".join(lines)


# Configuration-related exceptions
class ConfigurationError(ShaderGenError):
    """Base class for configuration-related errors."""
    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration data is invalid or malformed."""

    def __init__(
        self,
        message: str,
        config_field: Optional[str] = None,
        invalid_value: Optional[Any] = None,
        **kwargs
    ):
        context = {}
        if config_field:
            context['field'] = config_field
        if invalid_value is not None:
            context['invalid_value'] = invalid_value

        suggestion = "Check configuration file format and parameter values"
        if config_field:
            suggestion += f" for field '{config_field}'"

        super().__init__(message, context=context, suggestion=suggestion, **kwargs)


class MissingConfigError(ConfigurationError):
    """Raised when a configuration file that was asked for does not exist."""

    def __init__(self, config_file: str, **kwargs):
        message = f"Configuration file not found: '{config_file}'"
        context = {'config_file': config_file}
        suggestion = "Check the path passed with --config"
        super().__init__(message, context=context, suggestion=suggestion, **kwargs)


# Grammar exceptions
class GrammarError(ShaderGenError):
    """Base class for grammar tokenising, parsing and generation errors."""
    pass


class TokenError(GrammarError):
    """
    A character run the tokeniser could not turn into a token.

    Token errors are yielded by the tokeniser rather than raised, so that a
    caller can decide whether to keep reading the stream.
    """
    pass


class UnexpectedChar(TokenError):
    """A character that starts neither a punctuation token nor an identifier."""

    def __init__(self, char: str, **kwargs):
        self.char = char
        super().__init__(
            f"Unexpected character {char!r}",
            context={'char': char},
            **kwargs
        )


class SourceTooLarge(TokenError):
    """Source position beyond the 65536 line / 255 column span ceiling."""

    def __init__(self, line: int, column: int, **kwargs):
        self.line = line
        self.column = column
        super().__init__(
            f"Source position line {line}, column {column} exceeds the span limits",
            context={'line': line, 'column': column},
            suggestion="Split long lines; grammar sources are limited to 65536 lines of 255 characters",
            **kwargs
        )


class ParseFail(GrammarError):
    """
    Base class for every reason a grammar source is rejected.

    Attributes:
        span: Location of the offending token, when one is known.
    """

    def __init__(self, message: str, span=None, **kwargs):
        super().__init__(message, **kwargs)
        self.span = span


class TokeniserErr(ParseFail):
    """The parser met a token error in the token stream."""

    def __init__(self, error: TokenError, span=None):
        self.error = error
        super().__init__(f"Tokeniser error: {error.message}", span=span, context=dict(error.context))


class UnterminatedRule(ParseFail):
    def __init__(self, span=None):
        super().__init__(
            "Input ended before the rule was terminated",
            span=span,
            suggestion="End every rule definition with ';'"
        )


class NoRulesFound(ParseFail):
    def __init__(self):
        super().__init__("No rules found in grammar source")


class ExpectedIdentifier(ParseFail):
    def __init__(self, found: Optional[str] = None, span=None):
        message = "Expected an identifier"
        if found is not None:
            message += f", found {found!r}"
        super().__init__(message, span=span)


class ExpectedBars(ParseFail):
    def __init__(self, rule: Optional[str] = None, span=None):
        context = {'rule': rule} if rule else {}
        super().__init__(
            "Expected '|' before a branch",
            span=span,
            context=context,
            suggestion="Prefix every branch with one '|' per unit of weight"
        )


class BadArglist(ParseFail):
    def __init__(self, span=None):
        super().__init__("Malformed function argument list", span=span)


class EmptyExpression(ParseFail):
    def __init__(self, span=None):
        super().__init__("Empty expression", span=span)


class UnsupportedNumberOfFunctionArgs(ParseFail):
    def __init__(self, count: int, span=None):
        self.count = count
        super().__init__(
            f"Functions take 1, 2 or 3 arguments, got {count}",
            span=span,
            context={'count': count}
        )


class WrongNumberOfFunctionArgs(ParseFail):
    def __init__(self, func: str, expected: int, got: int, span=None):
        self.func = func
        self.expected = expected
        self.got = got
        super().__init__(
            f"Function '{func}' expects {expected} argument(s), got {got}",
            span=span,
            context={'func': func, 'expected': expected, 'got': got}
        )


class FunctionNotWhitelisted(ParseFail):
    def __init__(self, name: str, span=None):
        self.name = name
        super().__init__(
            f"Function '{name}' is not whitelisted",
            span=span,
            context={'func': name}
        )


class NoTerminalReplacementInChannelRule(ParseFail):
    """The entry rule has no branch that reaches a purely terminal rule in one step."""

    def __init__(self, rule: str):
        self.rule = rule
        super().__init__(
            f"Entry rule '{rule}' has no branch referencing a purely terminal rule",
            context={'rule': rule},
            suggestion="Add a branch to the first rule that names a rule made only of terminals"
        )


class NoTerminalReplacementInRule(ParseFail):
    """A rule reachable from the entry rule cannot be expanded at the depth cap."""

    def __init__(self, rule: str):
        self.rule = rule
        super().__init__(
            f"Rule '{rule}' has no branch referencing a purely terminal rule",
            context={'rule': rule},
            suggestion="Add a branch naming a rule made only of terminals"
        )


class UndefinedRule(ParseFail):
    def __init__(self, name: str, referenced_by: Optional[str] = None):
        self.name = name
        context = {'rule': name}
        if referenced_by:
            context['referenced_by'] = referenced_by
        super().__init__(f"Reference to undefined rule '{name}'", context=context)


class WeightOutOfRange(ParseFail):
    def __init__(self, rule: str, weight: int, span=None):
        self.rule = rule
        self.weight = weight
        super().__init__(
            f"Branch weight {weight} in rule '{rule}' exceeds 255",
            span=span,
            context={'rule': rule, 'weight': weight}
        )


class WeightOverflow(ParseFail):
    def __init__(self, rule: str, total: int):
        self.rule = rule
        self.total = total
        super().__init__(
            f"Total branch weight {total} in rule '{rule}' exceeds 65535",
            context={'rule': rule, 'total': total}
        )


class GenerationError(GrammarError):
    """A placeholder that could not be given a replacement during generation."""

    def __init__(self, rule: str, depth: int, message: Optional[str] = None, **kwargs):
        self.rule = rule
        self.depth = depth
        context = {'rule': rule, 'depth': depth}
        context.update(kwargs.pop('context', None) or {})
        kwargs.setdefault(
            'suggestion',
            "Give the rule a branch naming a purely terminal rule, or parse with strict=True"
        )
        super().__init__(
            message or f"Rule '{rule}' reached the depth cap at depth {depth} with no terminal replacement",
            context=context,
            **kwargs
        )


class ReferenceCycleError(GenerationError):
    """Bare rule references that only ever lead to other bare rule references."""

    def __init__(self, rule: str, depth: int, **kwargs):
        super().__init__(
            rule,
            depth,
            message=f"Rule '{rule}' starts a cycle of bare rule references with no way out",
            suggestion="Give one of the rules in the cycle a branch that is not a bare rule reference",
            **kwargs
        )


class MaxDepthOutOfRange(GrammarError):
    """A generation depth cap outside the supported range."""

    def __init__(self, max_depth: int, limit: int, **kwargs):
        self.max_depth = max_depth
        self.limit = limit
        super().__init__(
            f"max_depth must be between 1 and {limit}, got {max_depth}",
            context={'max_depth': max_depth, 'limit': limit},
            **kwargs
        )


class SymbolicMathError(GrammarError):
    """Raised when an expression cannot be converted to SymPy."""

    def __init__(self, operation: str, details: str, **kwargs):
        message = f"Symbolic math operation failed: {operation}"
        context = {'operation': operation, 'details': details}
        suggestion = "Only fully generated expressions can be converted"
        super().__init__(message, context=context, suggestion=suggestion, **kwargs)


def format_exception_chain(exception: Exception) -> str:
    """
    Format an exception chain for better readability.

    Args:
        exception: The exception to format

    Returns:
        Formatted string showing the exception chain
    """
    lines: List[str] = []
    current = exception

    while current:
        if isinstance(current, ShaderGenError):
            lines.append(current.get_detailed_message())
        else:
            lines.append(f"{type(current).__name__}: {current}")

        current = getattr(current, 'cause', None) or getattr(current, '__cause__', None)
        if current:
            lines.append("  Caused by:")

    return "\n".join(lines)
