# shadergen/core/expressions/__init__.py
from .expression import Call, Expression, Term, Terminal, Unresolved
from .serializer import serialize, to_text

__all__ = [
    "Call",
    "Expression",
    "Term",
    "Terminal",
    "Unresolved",
    "serialize",
    "to_text",
]
