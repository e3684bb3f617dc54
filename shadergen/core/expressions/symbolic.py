"""
SymPy Conversion
================

Converts generated expression trees into SymPy expressions so they can be
simplified, pretty-printed or compared symbolically.
"""

import random
from typing import Callable, Dict, Optional

import sympy as sp

from .expression import Call, Expression, Term, Terminal, Unresolved
from ...utils.exceptions import SymbolicMathError

INPUT_SYMBOLS: Dict[Term, sp.Symbol] = {
    Term.U: sp.Symbol('u'),
    Term.V: sp.Symbol('v'),
    Term.T: sp.Symbol('t'),
    Term.R: sp.Symbol('r', nonnegative=True),
}

# sig(a, b, c) is a shader-side helper with no SymPy counterpart, kept opaque.
SYMPY_FUNCTIONS: Dict[str, Callable[..., sp.Expr]] = {
    'abs': sp.Abs,
    'exp': sp.exp,
    'sqrt': sp.sqrt,
    'sin': sp.sin,
    'add': sp.Add,
    'mult': sp.Mul,
    'sig': sp.Function('sig'),
}


def to_sympy(expr: Expression, rng: Optional[random.Random] = None) -> sp.Expr:
    """
    Convert a fully generated expression to SymPy.

    Random constants are sampled from `rng` and rounded to two decimals, the
    precision the serializer writes.

    Raises:
        SymbolicMathError: If the tree still holds placeholders or calls a
            function with no SymPy mapping.
    """
    if rng is None:
        rng = random.Random()

    if isinstance(expr, Terminal):
        if expr.term is Term.RAND_CONST:
            return sp.Float(round(rng.random(), 2), 2)
        return INPUT_SYMBOLS[expr.term]
    if isinstance(expr, Call):
        func = SYMPY_FUNCTIONS.get(expr.name)
        if func is None:
            raise SymbolicMathError('to_sympy', f"no SymPy mapping for function '{expr.name}'")
        return func(*(to_sympy(arg, rng) for arg in expr.args))
    if isinstance(expr, Unresolved):
        raise SymbolicMathError('to_sympy', f"placeholder for rule '{expr.rule}' is still unexpanded")
    raise SymbolicMathError('to_sympy', f"unsupported node type {type(expr).__name__}")


def simplify(expr: Expression, rng: Optional[random.Random] = None) -> sp.Expr:
    """Convert to SymPy and simplify."""
    return sp.simplify(to_sympy(expr, rng))
