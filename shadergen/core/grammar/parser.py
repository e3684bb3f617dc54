"""
Grammar Parser
==============

Recursive-descent parser turning grammar source into a `Grammar` rule table.

A grammar is a sequence of rules, each a name, an optional ':', and one or
more branches, terminated by ';'. Each branch starts with a run of '|' bars
whose count is the branch weight, followed by one expression:

    # first rule is the entry rule
    channel: |expr ||term;
    expr:    |sin(expr) |add(expr, expr) |term;
    term:    |u |v |t |r |rand;

An expression is a terminal name (`u`, `v`, `t`, `r`, `rand`), a reference to
another rule, or a whitelisted function applied to one to three
comma-separated expressions.
"""

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .rules import (
    MAX_BRANCH_WEIGHT,
    MAX_RULE_WEIGHT,
    Branch,
    Grammar,
    Rule,
    is_purely_terminal,
    reference_candidates,
)
from .tokens import RULE_TERMINATOR, Span, Token, TokenKind, tokenize
from ..expressions.expression import Call, Expression, Term, Terminal, Unresolved
from ...utils.exceptions import (
    BadArglist,
    EmptyExpression,
    ExpectedBars,
    ExpectedIdentifier,
    FunctionNotWhitelisted,
    NoRulesFound,
    NoTerminalReplacementInChannelRule,
    NoTerminalReplacementInRule,
    TokenError,
    TokeniserErr,
    UndefinedRule,
    UnsupportedNumberOfFunctionArgs,
    UnterminatedRule,
    WeightOutOfRange,
    WeightOverflow,
    WrongNumberOfFunctionArgs,
)

logger = logging.getLogger(__name__)

# Function name -> number of arguments it takes.
FUNCTION_WHITELIST: Mapping[str, int] = MappingProxyType({
    'abs': 1,
    'exp': 1,
    'sqrt': 1,
    'sin': 1,
    'add': 2,
    'mult': 2,
    'sig': 3,
})

SUPPORTED_ARITIES = (1, 2, 3)

PositionedToken = Tuple[Token, Span]


class GrammarParser:
    """
    Builds a `Grammar` from source text.

    Args:
        whitelist: Allowed function names and their arities. Defaults to
            `FUNCTION_WHITELIST`.
        strict: Also require every rule reachable from the entry rule to have
            a depth-capped expansion, so generation can never fail.
    """

    def __init__(self, whitelist: Optional[Mapping[str, int]] = None, strict: bool = False):
        self.whitelist = FUNCTION_WHITELIST if whitelist is None else MappingProxyType(dict(whitelist))
        self.strict = strict

    def parse(self, text) -> Grammar:
        parsed: Dict[str, Tuple[Branch, ...]] = {}
        entry_rule: Optional[str] = None
        toks: List[PositionedToken] = []

        for result, span in tokenize(text):
            if isinstance(result, TokenError):
                raise TokeniserErr(result, span=span)
            if result.kind is not RULE_TERMINATOR:
                toks.append((result, span))
                continue

            name, branches = self.parse_rule(toks, span)
            if name in parsed:
                logger.warning(f"Rule '{name}' is defined more than once; the last definition wins")
            if entry_rule is None:
                entry_rule = name
            parsed[name] = branches
            toks = []

        if toks:
            raise UnterminatedRule(span=toks[0][1])
        if entry_rule is None:
            raise NoRulesFound()

        grammar = self._build(parsed, entry_rule)
        logger.info(f"Parsed grammar with {len(grammar)} rule(s), entry rule '{entry_rule}'")
        return grammar

    def _build(self, parsed: Dict[str, Tuple[Branch, ...]], entry_rule: str) -> Grammar:
        for name, branches in parsed.items():
            for branch in branches:
                for node in branch.expr.placeholders():
                    if node.rule not in parsed:
                        raise UndefinedRule(node.rule, referenced_by=name)

        purely_terminal = {name for name, branches in parsed.items() if is_purely_terminal(branches)}

        rules = {}
        for name, branches in parsed.items():
            terminal_branches = tuple(
                i for i in reference_candidates(branches)
                if branches[i].expr.rule in purely_terminal
            )
            rules[name] = Rule(
                branches=branches,
                terminal_branches=terminal_branches,
                purely_terminal=name in purely_terminal,
            )

        grammar = Grammar(rules=rules, entry_rule=entry_rule)
        if not grammar.entry.can_cap:
            raise NoTerminalReplacementInChannelRule(entry_rule)
        if self.strict:
            for name in grammar.reachable():
                if not grammar[name].can_cap:
                    raise NoTerminalReplacementInRule(name)
        return grammar

    def parse_rule(self, toks: List[PositionedToken], end: Span) -> Tuple[str, Tuple[Branch, ...]]:
        """Parse the tokens of one rule, terminator excluded."""
        if not toks:
            raise ExpectedIdentifier(found=RULE_TERMINATOR.value, span=end)
        first, first_span = toks[0]
        if first.kind is not TokenKind.IDENT:
            raise ExpectedIdentifier(found=first.as_str(), span=first_span)
        name = first.name

        i = 1
        if i < len(toks) and toks[i][0].kind is TokenKind.COLON:
            i += 1
        rest = toks[i:]
        if not rest:
            raise ExpectedBars(name, span=end)

        # A branch is a run of bars followed by everything up to the next bar.
        branches = []
        n = len(rest)
        start = j = 0
        while j < n:
            while j < n and rest[j][0].kind is TokenKind.BAR:
                j += 1
            while j < n and rest[j][0].kind is not TokenKind.BAR:
                j += 1
            branches.append(self.parse_branch(name, rest[start:j]))
            start = j

        total = sum(branch.weight for branch in branches)
        if total > MAX_RULE_WEIGHT:
            raise WeightOverflow(name, total)
        return name, tuple(branches)

    def parse_branch(self, rule: str, toks: List[PositionedToken]) -> Branch:
        weight = 0
        while weight < len(toks) and toks[weight][0].kind is TokenKind.BAR:
            weight += 1
        if weight == 0:
            raise ExpectedBars(rule, span=toks[0][1])
        if weight > MAX_BRANCH_WEIGHT:
            raise WeightOutOfRange(rule, weight, span=toks[0][1])
        return Branch(weight=weight, expr=self.parse_expr(toks[weight:], toks[weight - 1][1]))

    def parse_expr(self, toks: List[PositionedToken], anchor: Optional[Span] = None) -> Expression:
        """
        Parse one expression.

        Args:
            toks: Tokens of the expression and nothing else.
            anchor: Span reported if the expression turns out to be empty.
        """
        n = len(toks)
        if n == 0:
            raise EmptyExpression(span=anchor)
        first, first_span = toks[0]
        if first.kind is not TokenKind.IDENT:
            raise ExpectedIdentifier(found=first.as_str(), span=first_span)
        ident = first.name

        if n == 1:
            term = Term.from_name(ident)
            if term is not None:
                return Terminal(term)
            return Unresolved(ident)

        if toks[1][0].kind is not TokenKind.LPAR or toks[-1][0].kind is not TokenKind.RPAR:
            raise BadArglist(span=toks[1][1])

        args = tuple(
            self.parse_expr(arg_toks, arg_anchor)
            for arg_toks, arg_anchor in split_arglist(toks[2:-1], toks[1][1])
        )
        if len(args) not in SUPPORTED_ARITIES:
            raise UnsupportedNumberOfFunctionArgs(len(args), span=first_span)
        expected = self.whitelist.get(ident)
        if expected is None:
            raise FunctionNotWhitelisted(ident, span=first_span)
        if expected != len(args):
            raise WrongNumberOfFunctionArgs(ident, expected, len(args), span=first_span)
        return Call(ident, args)


def split_arglist(toks: List[PositionedToken], open_span: Span) -> List[Tuple[List[PositionedToken], Span]]:
    """
    Split argument tokens at top-level commas.

    Commas inside nested parentheses do not split. Each slice is paired with
    the span of the '(' or ',' in front of it.

    Raises:
        BadArglist: If the parentheses are unbalanced.
    """
    args = []
    level = 0
    start = 0
    anchor = open_span
    for k, (tok, span) in enumerate(toks):
        if tok.kind is TokenKind.LPAR:
            level += 1
        elif tok.kind is TokenKind.RPAR:
            level -= 1
            if level < 0:
                raise BadArglist(span=span)
        elif tok.kind is TokenKind.COMMA and level == 0:
            args.append((toks[start:k], anchor))
            start = k + 1
            anchor = span
    if level != 0:
        raise BadArglist(span=open_span)
    args.append((toks[start:], anchor))
    return args


def parse(text, whitelist: Optional[Mapping[str, int]] = None, strict: bool = False) -> Grammar:
    """
    Parse grammar source into a `Grammar`.

    Args:
        text: Grammar source (a string or any iterable of characters).
        whitelist: Allowed function names and their arities.
        strict: Reject grammars where a rule reachable from the entry rule
            cannot be expanded at the depth cap.

    Raises:
        ParseFail: On the first problem found; no partial grammar is returned.
    """
    return GrammarParser(whitelist=whitelist, strict=strict).parse(text)
