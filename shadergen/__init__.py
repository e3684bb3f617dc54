"""Weighted rewrite-rule grammars that generate random shader functions."""

from .core.expressions import Call, Expression, Term, Terminal, Unresolved, serialize, to_text
from .core.grammar import (
    FUNCTION_WHITELIST,
    Grammar,
    generate,
    generate_channels,
    parse,
    tokenize,
)
from .utils.exceptions import GenerationError, ParseFail, ShaderGenError, TokenError

__version__ = "0.1.0"

__all__ = [
    "Call",
    "Expression",
    "Term",
    "Terminal",
    "Unresolved",
    "serialize",
    "to_text",
    "FUNCTION_WHITELIST",
    "Grammar",
    "generate",
    "generate_channels",
    "parse",
    "tokenize",
    "GenerationError",
    "ParseFail",
    "ShaderGenError",
    "TokenError",
]
