"""
Tests for the rewrite engine: weighted selection, depth-capped expansion and
the pass loop that drives generation.
"""
import random
from collections import Counter

import pytest

from shadergen.core.expressions.expression import Call, Term, Terminal, Unresolved
from shadergen.core.expressions.serializer import to_text
from shadergen.core.grammar.parser import parse
from shadergen.core.grammar.rewrite import (
    DEFAULT_CHANNELS,
    MAX_DEPTH_LIMIT,
    RewriteEngine,
    choose_branch,
    generate,
    generate_channels,
    weighted_pick,
)
from shadergen.core.grammar.rules import Branch
from shadergen.grammars import load_default_grammar
from shadergen.utils.exceptions import GenerationError, MaxDepthOutOfRange, ReferenceCycleError

U = Terminal(Term.U)
V = Terminal(Term.V)


class TestWeightedSelection:

    @pytest.mark.parametrize("draw,expected", [(0, 0), (1, 1), (2, 1), (3, 2), (5, 2)])
    def test_cumulative_ranges(self, draw, expected):
        assert weighted_pick([1, 2, 3], draw) == expected

    def test_draw_outside_total(self):
        with pytest.raises(ValueError):
            weighted_pick([1, 2, 3], 6)

    def test_equal_weights_are_roughly_uniform(self):
        rng = random.Random(1234)
        branches = [Branch(1, Terminal(term)) for term in (Term.U, Term.V, Term.T)]
        counts = Counter(choose_branch(branches, rng).expr for _ in range(10000))
        for branch in branches:
            assert abs(counts[branch.expr] / 10000 - 1 / 3) < 0.02

    def test_heavier_branch_is_chosen_more_often(self):
        rng = random.Random(99)
        branches = [Branch(1, U), Branch(9, V)]
        counts = Counter(choose_branch(branches, rng).expr for _ in range(5000))
        assert counts[V] > 4 * counts[U]


class TestGenerate:

    @pytest.mark.parametrize("max_depth", [1, 2, 5])
    def test_single_terminal_rule(self, max_depth, rng):
        grammar = parse("A: |u;")
        assert generate(grammar, max_depth, rng) == U

    def test_reference_resolved_at_depth_one(self, rng):
        grammar = parse("A: |B; B: |u;")
        assert generate(grammar, 1, rng) == U

    @pytest.mark.parametrize("max_depth", range(1, 9))
    def test_flat_grammar_respects_depth(self, flat_grammar, max_depth):
        for seed in range(20):
            tree = generate(flat_grammar, max_depth, random.Random(seed))
            assert tree.is_resolved
            assert tree.depth <= max_depth

    def test_first_branches_recurse_until_the_cap(self, flat_grammar, first_branch_rng):
        tree = generate(flat_grammar, 3, first_branch_rng)
        assert tree == Call("sin", (Call("sin", (U,)),))

    def test_last_branches(self, flat_grammar, last_branch_rng):
        assert generate(flat_grammar, 3, last_branch_rng) == Terminal(Term.R)

    def test_literal_nesting_is_kept_whole(self, first_branch_rng):
        grammar = parse("A: |add(sin(B), B) ||B; B: |u |v;")
        tree = generate(grammar, 1, first_branch_rng)
        assert tree == Call("add", (Call("sin", (U,)), U))

    def test_self_reference_loop_terminates(self, first_branch_rng):
        grammar = parse("A: |A ||T; T: |u;")
        assert generate(grammar, 5, first_branch_rng) == U

    def test_reference_chain_expands_at_the_same_depth(self, first_branch_rng):
        grammar = parse("A: |X ||T; X: |Z; Z: |sin(T); T: |u;")
        assert generate(grammar, 2, first_branch_rng) == Call("sin", (U,))

    def test_reference_chain_skips_branches_leading_back(self, first_branch_rng):
        grammar = parse("A: |X ||T; X: |Y |sin(T); Y: |X; T: |u;")
        assert generate(grammar, 3, first_branch_rng) == Call("sin", (U,))

    def test_same_seed_same_tree(self, flat_grammar):
        first = generate(flat_grammar, 6, random.Random(7))
        second = generate(flat_grammar, 6, random.Random(7))
        assert first == second

    def test_default_grammar(self):
        grammar = parse(load_default_grammar(), strict=True)
        for seed in range(10):
            assert generate(grammar, 6, random.Random(seed)).is_resolved

    @pytest.mark.parametrize("max_depth", [0, -3, MAX_DEPTH_LIMIT + 1])
    def test_invalid_max_depth(self, flat_grammar, max_depth):
        with pytest.raises(MaxDepthOutOfRange) as exc_info:
            generate(flat_grammar, max_depth)
        assert exc_info.value.limit == MAX_DEPTH_LIMIT

    def test_deepest_allowed_tree(self, first_branch_rng):
        grammar = parse("A: |E ||T; E: |sin(E) |T; T: |u;")
        tree = generate(grammar, MAX_DEPTH_LIMIT, first_branch_rng)
        assert tree.depth == MAX_DEPTH_LIMIT
        assert to_text(tree) == "sin(" * (MAX_DEPTH_LIMIT - 1) + "u" + ")" * (MAX_DEPTH_LIMIT - 1)


class TestDepthCap:

    def test_capped_choice_is_weighted(self, first_branch_rng, last_branch_rng):
        grammar = parse("A: |P ||Q |sin(A); P: |u; Q: |v;")
        assert RewriteEngine(grammar, 2, first_branch_rng).expand_capped("A", 5) == U
        assert RewriteEngine(grammar, 2, last_branch_rng).expand_capped("A", 5) == V

    def test_purely_terminal_rule_at_cap(self, last_branch_rng):
        grammar = parse("A: |B; B: |u |v;")
        assert RewriteEngine(grammar, 1, last_branch_rng).expand_capped("B", 1) == V

    def test_rule_without_capped_expansion(self, rng):
        grammar = parse("A: |X ||T; X: |sin(X); T: |u;")
        with pytest.raises(GenerationError) as exc_info:
            RewriteEngine(grammar, 2, rng).expand_capped("X", 3)
        assert exc_info.value.rule == "X"
        assert exc_info.value.depth == 3

    @pytest.mark.parametrize("max_depth", [1, 2])
    def test_generation_fails_when_placeholder_cannot_cap(self, max_depth, first_branch_rng):
        grammar = parse("A: |X ||T; X: |sin(X); T: |u;")
        with pytest.raises(GenerationError):
            generate(grammar, max_depth, first_branch_rng)

    def test_reference_cycle_fails_instead_of_hanging(self, first_branch_rng):
        grammar = parse("A: |B ||T; B: |C; C: |B; T: |u;")
        with pytest.raises(ReferenceCycleError) as exc_info:
            generate(grammar, 4, first_branch_rng)
        assert exc_info.value.rule == "B"
        assert exc_info.value.depth == 1
        assert isinstance(exc_info.value, GenerationError)


class TestRewritePass:

    def test_replaces_placeholders_and_reuses_resolved_subtrees(self, flat_grammar, first_branch_rng):
        engine = RewriteEngine(flat_grammar, 5, first_branch_rng)
        resolved = Call("sin", (V,))
        tree = Call("add", (Unresolved("term"), resolved))
        new_tree, replaced = engine.rewrite_pass(tree)
        assert replaced == 1
        assert new_tree == Call("add", (U, resolved))
        assert new_tree.args[1] is resolved

    def test_resolved_tree_is_returned_unchanged(self, flat_grammar, rng):
        engine = RewriteEngine(flat_grammar, 5, rng)
        tree = Call("add", (U, V))
        new_tree, replaced = engine.rewrite_pass(tree)
        assert replaced == 0
        assert new_tree is tree

    def test_new_placeholders_wait_for_next_pass(self, flat_grammar, first_branch_rng):
        engine = RewriteEngine(flat_grammar, 5, first_branch_rng)
        new_tree, replaced = engine.rewrite_pass(Unresolved("expr"))
        assert replaced == 1
        assert new_tree == Call("sin", (Unresolved("expr"),))

    def test_seed_is_one_entry_branch(self, flat_grammar, last_branch_rng):
        engine = RewriteEngine(flat_grammar, 5, last_branch_rng)
        assert engine.seed() == Unresolved("term")


class TestChannels:

    def test_default_channels(self, flat_grammar, rng):
        result = generate_channels(flat_grammar, 4, rng)
        assert tuple(result) == DEFAULT_CHANNELS
        assert all(tree.is_resolved for tree in result.values())

    def test_custom_channels(self, flat_grammar, rng):
        result = generate_channels(flat_grammar, 4, rng, channels=["h", "s"])
        assert list(result) == ["h", "s"]

    def test_channels_share_the_random_source(self, flat_grammar):
        together = generate_channels(flat_grammar, 5, random.Random(3))
        rng = random.Random(3)
        one_by_one = [generate(flat_grammar, 5, rng) for _ in DEFAULT_CHANNELS]
        assert list(together.values()) == one_by_one
