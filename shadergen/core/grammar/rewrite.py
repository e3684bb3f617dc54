"""
Rewrite Engine
==============

Expands a `Grammar` into a random expression tree of bounded depth.

Generation starts from one weighted expansion of the entry rule and then
works in passes. Each pass walks the current tree and replaces every
`Unresolved` placeholder with an expansion of its rule, building a new tree.
Placeholders introduced by a pass are left for the next one. Generation stops
after the first pass that finds no placeholders.

A placeholder's depth is its nesting level in the tree (the root is depth 1,
its arguments depth 2, and so on). Below `max_depth` a placeholder is replaced
by a weighted random branch of its rule. At `max_depth` and beyond it is
replaced by a terminal:

* a purely terminal rule is expanded directly;
* otherwise one of the rule's `terminal_branches` is picked (weighted, like
  any other branch choice) and the purely terminal rule it names is expanded.

A branch that is itself a bare rule reference is followed within the same
pass at the same depth, since it takes the placeholder's place in the tree.
While following such a chain, a branch is left out of the choice when it
refers back to a rule already visited in the chain, or to a rule that can
only lead back into it. Only a rule whose bare references never reach any
other kind of branch fails, with `ReferenceCycleError`.

`max_depth` is limited to `MAX_DEPTH_LIMIT` so that trees stay well within
the interpreter's recursion limit.
"""

import logging
import random
from typing import Dict, Optional, Sequence, Set, Tuple

from .rules import Branch, Grammar
from ..expressions.expression import Call, Expression, Unresolved
from ...utils.exceptions import GenerationError, MaxDepthOutOfRange, ReferenceCycleError

logger = logging.getLogger(__name__)

DEFAULT_CHANNELS = ("r", "g", "b")

# Tree traversals recurse once per level.
MAX_DEPTH_LIMIT = 128


def weighted_pick(weights: Sequence[int], draw: int) -> int:
    """
    Index of the weight whose cumulative range `[lower, upper)` holds `draw`.

    With weights `[1, 1, 1]` the ranges are `[0, 1)`, `[1, 2)` and `[2, 3)`.
    """
    lower = 0
    for i, weight in enumerate(weights):
        upper = lower + weight
        if lower <= draw < upper:
            return i
        lower = upper
    raise ValueError(f"Draw {draw} is outside the total weight {lower}")


def choose_branch(branches: Sequence[Branch], rng: random.Random) -> Branch:
    """Pick a branch with probability proportional to its weight."""
    weights = [branch.weight for branch in branches]
    return branches[weighted_pick(weights, rng.randrange(sum(weights)))]


class RewriteEngine:
    """
    Generates expression trees from one grammar.

    Args:
        grammar: Parsed rule table; only read.
        max_depth: Depth at which expansion is forced towards terminals,
            from 1 to `MAX_DEPTH_LIMIT`.
        rng: Random source for every branch choice. A fresh, unseeded
            `random.Random` if None.

    Raises:
        MaxDepthOutOfRange: If `max_depth` is outside that range.
    """

    def __init__(self, grammar: Grammar, max_depth: int, rng: Optional[random.Random] = None):
        if not 1 <= max_depth <= MAX_DEPTH_LIMIT:
            raise MaxDepthOutOfRange(max_depth, MAX_DEPTH_LIMIT)
        self.grammar = grammar
        self.max_depth = max_depth
        self.rng = rng if rng is not None else random.Random()

    def seed(self) -> Expression:
        """One weighted expansion of the entry rule."""
        return choose_branch(self.grammar.entry.branches, self.rng).expr

    def expand(self, rule: str, depth: int) -> Expression:
        """
        Replacement for a placeholder of `rule` found at `depth`.

        Bare rule references are followed at the same depth until an
        expansion that is not a placeholder comes out.

        Raises:
            ReferenceCycleError: If `rule` only reaches bare references that
                cycle among themselves.
            GenerationError: If the chain reaches the depth cap on a rule
                with no terminal replacement.
        """
        visited: Set[str] = set()
        expr: Expression = Unresolved(rule)
        while isinstance(expr, Unresolved):
            rule = expr.rule
            visited.add(rule)
            if depth >= self.max_depth:
                return self.expand_capped(rule, depth)
            expr = self._choose_outside(rule, visited, depth)
        return expr

    def _choose_outside(self, rule: str, visited: Set[str], depth: int) -> Expression:
        """Weighted branch of `rule` that does not lead back into `visited`."""
        candidates = [
            branch for branch in self.grammar[rule].branches
            if not isinstance(branch.expr, Unresolved)
            or (branch.expr.rule not in visited and self._escapes(branch.expr.rule, visited))
        ]
        if not candidates:
            raise ReferenceCycleError(rule, depth)
        return choose_branch(candidates, self.rng).expr

    def _escapes(self, rule: str, visited: Set[str]) -> bool:
        """Whether `rule` reaches a branch that is not a bare reference without passing through `visited`."""
        seen = {rule}
        stack = [rule]
        while stack:
            for branch in self.grammar[stack.pop()].branches:
                if not isinstance(branch.expr, Unresolved):
                    return True
                target = branch.expr.rule
                if target not in visited and target not in seen:
                    seen.add(target)
                    stack.append(target)
        return False

    def expand_capped(self, rule: str, depth: int) -> Expression:
        """
        Terminal replacement for a placeholder at the depth cap.

        Raises:
            GenerationError: If the rule is neither purely terminal nor has a
                branch naming a purely terminal rule.
        """
        current = self.grammar[rule]
        if current.purely_terminal:
            return choose_branch(current.branches, self.rng).expr
        if not current.terminal_branches:
            raise GenerationError(rule, depth)
        candidates = [current.branches[i] for i in current.terminal_branches]
        target = choose_branch(candidates, self.rng).expr.rule
        return choose_branch(self.grammar[target].branches, self.rng).expr

    def rewrite_pass(self, expr: Expression, depth: int = 1) -> Tuple[Expression, int]:
        """
        Replace every placeholder currently in `expr`.

        Returns:
            The rewritten tree and the number of placeholders replaced.
            Subtrees without placeholders are reused as they are.
        """
        if isinstance(expr, Unresolved):
            return self.expand(expr.rule, depth), 1
        if isinstance(expr, Call):
            args = []
            replaced = 0
            for arg in expr.args:
                new_arg, count = self.rewrite_pass(arg, depth + 1)
                args.append(new_arg)
                replaced += count
            if replaced:
                return Call(expr.name, tuple(args)), replaced
        return expr, 0

    def generate(self) -> Expression:
        """Generate one fully expanded tree."""
        tree = self.seed()
        passes = 0
        while True:
            tree, replaced = self.rewrite_pass(tree)
            if not replaced:
                break
            passes += 1
            logger.debug(f"Pass {passes}: replaced {replaced} placeholder(s)")
        logger.debug(f"Generated tree of depth {tree.depth} in {passes} pass(es)")
        return tree


def generate(grammar: Grammar, max_depth: int, rng: Optional[random.Random] = None) -> Expression:
    """
    Generate a random expression from the grammar's entry rule.

    The result never contains `Unresolved` nodes.

    Raises:
        GenerationError: If a placeholder reaches the depth cap for a rule
            with no terminal replacement, or bare rule references only lead
            back to each other. Grammars parsed with `strict=True` never
            raise this.
        MaxDepthOutOfRange: If `max_depth` is below 1 or above
            `MAX_DEPTH_LIMIT`.
    """
    return RewriteEngine(grammar, max_depth, rng).generate()


def generate_channels(
    grammar: Grammar,
    max_depth: int,
    rng: Optional[random.Random] = None,
    channels: Sequence[str] = DEFAULT_CHANNELS,
) -> Dict[str, Expression]:
    """Generate one expression per colour channel, sharing one random source."""
    engine = RewriteEngine(grammar, max_depth, rng)
    return {channel: engine.generate() for channel in channels}
