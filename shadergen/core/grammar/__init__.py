# shadergen/core/grammar/__init__.py
from .tokens import Span, Token, TokenKind, TokenStream, tokenize
from .rules import Branch, Grammar, Rule
from .parser import FUNCTION_WHITELIST, GrammarParser, parse
from .rewrite import RewriteEngine, choose_branch, generate, generate_channels, weighted_pick

__all__ = [
    "Span",
    "Token",
    "TokenKind",
    "TokenStream",
    "tokenize",
    "Branch",
    "Grammar",
    "Rule",
    "FUNCTION_WHITELIST",
    "GrammarParser",
    "parse",
    "RewriteEngine",
    "choose_branch",
    "generate",
    "generate_channels",
    "weighted_pick",
]
