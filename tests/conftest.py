import logging
import random

import pytest

from shadergen.core.grammar import parse


# Grammar whose branches hold at most one level of function nesting, so the
# depth of a generated tree is bounded by max_depth.
FLAT_GRAMMAR = """
channel: |expr ||term;
expr:    |sin(expr) |add(expr, expr) |sig(expr, expr, expr) |term;
term:    |u |v |t |r;
"""


class FixedRandom(random.Random):
    """Random source whose `randrange(n)` always returns `pick(n)`."""

    def randrange(self, start, stop=None, step=1):
        n = start if stop is None else stop - start
        return self.pick(n)


def fixed_random(pick):
    rng = FixedRandom(0)
    rng.pick = pick
    return rng


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def first_branch_rng():
    """Always selects the first branch."""
    return fixed_random(lambda n: 0)


@pytest.fixture
def last_branch_rng():
    """Always selects the last branch."""
    return fixed_random(lambda n: n - 1)


@pytest.fixture
def flat_grammar():
    return parse(FLAT_GRAMMAR)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handler changes made by the CLI's logging setup."""
    yield
    logger = logging.getLogger('shadergen')
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
