"""Render expression trees to compact function-call text."""

import logging
import random
from typing import List, Optional

from .expression import Call, Expression, Term, Terminal, Unresolved

logger = logging.getLogger(__name__)

PLACEHOLDER_MARK = "_"


def to_text(expr: Expression, rng: Optional[random.Random] = None) -> str:
    """
    Serialize an expression tree as `name(arg1,arg2)` style text.

    Named terminals render as their single-character spelling. The random
    constant samples a fresh value from `rng` on every call and renders it
    with two decimals. Placeholders left in the tree render as "_".

    Args:
        expr: Tree to render.
        rng: Random source for constants; a fresh `random.Random()` if None.

    Returns:
        The rendered text, without any whitespace.
    """
    if rng is None:
        rng = random.Random()
    parts: List[str] = []
    _write(expr, rng, parts)
    return "".join(parts)


serialize = to_text


def _write(expr: Expression, rng: random.Random, out: List[str]) -> None:
    if isinstance(expr, Terminal):
        if expr.term is Term.RAND_CONST:
            out.append(f"{rng.random():.2f}")
        else:
            out.append(expr.term.symbol)
    elif isinstance(expr, Call):
        out.append(expr.name)
        out.append("(")
        for i, arg in enumerate(expr.args):
            if i:
                out.append(",")
            _write(arg, rng, out)
        out.append(")")
    elif isinstance(expr, Unresolved):
        logger.warning(f"Serializing unexpanded placeholder for rule '{expr.rule}'")
        out.append(PLACEHOLDER_MARK)
    else:
        raise TypeError(f"Cannot serialize {type(expr).__name__}")
