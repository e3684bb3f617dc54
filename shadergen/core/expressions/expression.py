"""
Term and Expression Classes
===========================

Defines the building blocks of generated expressions: `Term` for the terminal
symbols a shader function may read, and the `Expression` node types that make
up a generated tree (`Terminal`, `Call` and the `Unresolved` placeholder left
behind for a rule that still has to be expanded).

Nodes are frozen dataclasses. A tree is never mutated once built; the rewrite
engine produces a new tree on every pass instead.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple


class Term(Enum):
    """Terminal symbols available to generated expressions."""

    RAND_CONST = "rand"
    U = "u"  # horizontal coordinate in [0, 1]
    V = "v"  # vertical coordinate in [0, 1]
    T = "t"  # time
    R = "r"  # radius from the screen centre, sqrt(u^2 + v^2)

    @classmethod
    def from_name(cls, ident: str) -> Optional["Term"]:
        """
        Resolve an identifier to a terminal by its exact spelling.

        Returns None for identifiers that name no terminal; the parser then
        treats them as rule references.
        """
        return _TERM_NAMES.get(ident)

    @property
    def symbol(self) -> str:
        """Fixed single-character spelling of a named input."""
        return self.value


_TERM_NAMES = {
    "rand": Term.RAND_CONST,
    "random": Term.RAND_CONST,
    "u": Term.U,
    "v": Term.V,
    "t": Term.T,
    "r": Term.R,
}


class Expression:
    """
    Base class of the expression sum type.

    Subclasses provide `children`; depth, complexity and resolution checks are
    computed from it.
    """

    __slots__ = ()

    @property
    def children(self) -> Tuple["Expression", ...]:
        return ()

    @property
    def depth(self) -> int:
        """Nesting depth of the tree; a lone leaf has depth 1."""
        return 1 + max((child.depth for child in self.children), default=0)

    @property
    def complexity(self) -> int:
        """Number of nodes in the tree."""
        return 1 + sum(child.complexity for child in self.children)

    @property
    def is_resolved(self) -> bool:
        """True when no `Unresolved` placeholder is left anywhere in the tree."""
        return not any(True for _ in self.placeholders())

    def placeholders(self) -> Iterator["Unresolved"]:
        """Yield every `Unresolved` node in the tree, left to right."""
        for child in self.children:
            yield from child.placeholders()

    def walk(self) -> Iterator["Expression"]:
        """Pre-order traversal of the tree."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class Terminal(Expression):
    term: Term


@dataclass(frozen=True)
class Call(Expression):
    """
    Application of a whitelisted function to one, two or three arguments.

    Attributes:
        name: Function name as written in the grammar (e.g. "add").
        args: Ordered argument subtrees.
    """

    name: str
    args: Tuple[Expression, ...]

    def __post_init__(self):
        if not 1 <= len(self.args) <= 3:
            raise ValueError(f"Call '{self.name}' must have 1 to 3 arguments, got {len(self.args)}")

    @property
    def arity(self) -> int:
        return len(self.args)

    @property
    def children(self) -> Tuple[Expression, ...]:
        return self.args


@dataclass(frozen=True)
class Unresolved(Expression):
    """Placeholder standing for "expand rule `rule` here"."""

    rule: str

    def placeholders(self) -> Iterator["Unresolved"]:
        yield self
