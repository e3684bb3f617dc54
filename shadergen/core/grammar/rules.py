"""Weighted rewrite rules and the rule table built by the parser."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, Tuple

from ..expressions.expression import Expression, Terminal, Unresolved

MAX_BRANCH_WEIGHT = 255
MAX_RULE_WEIGHT = 65535


@dataclass(frozen=True)
class Branch:
    """One weighted alternative of a rule; weight is the number of leading bars."""
    weight: int
    expr: Expression


@dataclass(frozen=True)
class Rule:
    """
    A named set of weighted branches.

    Attributes:
        branches: Alternatives in declaration order.
        terminal_branches: Indices of branches that are a bare reference to a
            purely terminal rule. These are the only branches used once the
            depth cap is reached.
        purely_terminal: Every branch is a `Terminal`.
    """
    branches: Tuple[Branch, ...]
    terminal_branches: Tuple[int, ...] = ()
    purely_terminal: bool = False

    @property
    def total_weight(self) -> int:
        return sum(branch.weight for branch in self.branches)

    @property
    def can_cap(self) -> bool:
        """Whether a placeholder for this rule can be resolved at the depth cap."""
        return self.purely_terminal or bool(self.terminal_branches)

    def references(self) -> Iterator[str]:
        """Names of all rules referenced anywhere in this rule's branches."""
        for branch in self.branches:
            for node in branch.expr.placeholders():
                yield node.rule


def is_purely_terminal(branches: Tuple[Branch, ...]) -> bool:
    return all(isinstance(branch.expr, Terminal) for branch in branches)


def reference_candidates(branches: Tuple[Branch, ...]) -> Tuple[int, ...]:
    """Indices of branches that are a bare rule reference."""
    return tuple(i for i, branch in enumerate(branches) if isinstance(branch.expr, Unresolved))


@dataclass(frozen=True, eq=False)
class Grammar:
    """
    Rule table produced by a successful parse. Read-only once built.

    Attributes:
        rules: Rule name to rule.
        entry_rule: Name of the first rule defined, where generation starts.
    """
    rules: Mapping[str, Rule]
    entry_rule: str

    def __post_init__(self):
        object.__setattr__(self, 'rules', MappingProxyType(dict(self.rules)))

    @property
    def entry(self) -> Rule:
        return self.rules[self.entry_rule]

    def __getitem__(self, name: str) -> Rule:
        return self.rules[name]

    def __contains__(self, name: str) -> bool:
        return name in self.rules

    def __len__(self) -> int:
        return len(self.rules)

    def reachable(self) -> Tuple[str, ...]:
        """Rules reachable from the entry rule, in discovery order."""
        seen = {self.entry_rule: None}
        stack = [self.entry_rule]
        while stack:
            for ref in self.rules[stack.pop()].references():
                if ref in self.rules and ref not in seen:
                    seen[ref] = None
                    stack.append(ref)
        return tuple(seen)
