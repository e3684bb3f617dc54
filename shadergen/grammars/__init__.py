"""Grammar sources shipped with the package."""

from pathlib import Path

GRAMMAR_DIR = Path(__file__).parent
DEFAULT_GRAMMAR_PATH = GRAMMAR_DIR / "default.bnf"


def load_default_grammar() -> str:
    """Source text of the bundled default grammar."""
    return DEFAULT_GRAMMAR_PATH.read_text(encoding="utf-8")
