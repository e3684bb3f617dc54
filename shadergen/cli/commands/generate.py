import logging
import random

import click

from ..common import load_grammar
from ...core.expressions.serializer import to_text
from ...core.expressions.symbolic import simplify
from ...core.grammar import RewriteEngine
from ...core.grammar.rewrite import MAX_DEPTH_LIMIT
from ...utils.exceptions import GenerationError, SymbolicMathError

logger = logging.getLogger(__name__)


@click.command()
@click.argument('grammar_file', required=False, type=click.Path(dir_okay=False))
@click.option('--max-depth', type=click.IntRange(min=1, max=MAX_DEPTH_LIMIT), default=None,
              help='Depth at which expansion is forced towards terminals.')
@click.option('--seed', type=int, default=None, help='Seed for the random source.')
@click.option('--channel', 'channels', multiple=True,
              help='Channel to generate; repeatable. Defaults to the configured channels.')
@click.option('--simplify', 'show_simplified', is_flag=True,
              help='Also print the SymPy-simplified form of each function.')
@click.pass_context
def generate(ctx, grammar_file, max_depth, seed, channels, show_simplified):
    """Generate one random function per colour channel."""
    config = ctx.obj['config'].generator
    grammar = load_grammar(ctx, grammar_file)

    max_depth = max_depth if max_depth is not None else config.max_depth
    seed = seed if seed is not None else config.seed
    channels = list(channels) or config.channels

    rng = random.Random(seed)
    engine = RewriteEngine(grammar, max_depth, rng)
    for channel in channels:
        try:
            expr = engine.generate()
        except GenerationError as e:
            click.secho(f"Generation failed for channel '{channel}': {e.message}", fg="red", err=True)
            ctx.exit(1)

        # Replay the random state so both renderings sample the same constants.
        state = rng.getstate()
        click.echo(f"{channel}: {to_text(expr, rng)}")
        if show_simplified:
            replay = random.Random()
            replay.setstate(state)
            try:
                click.echo(f"{' ' * len(channel)}= {simplify(expr, replay)}")
            except SymbolicMathError as e:
                logger.warning(str(e))
