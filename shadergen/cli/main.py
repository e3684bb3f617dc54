# shadergen/cli/main.py
"""Main CLI interface for ShaderGen."""

import logging

import click

from .commands import check, generate
from .. import __version__
from ..config.loader import load_config
from ..utils.exceptions import ConfigurationError
from ..utils.logging import setup_logging

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="shadergen")
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--quiet', is_flag=True, help='Minimize output')
@click.option('--config', 'config_path', default=None, type=click.Path(dir_okay=False),
              help='YAML configuration file')
@click.pass_context
def cli(ctx, debug, quiet, config_path):
    """
    ShaderGen: random shader functions from weighted rewrite grammars.

    Examples:

        # Check a grammar for errors
        shadergen check my_grammar.bnf

        # Generate r, g and b functions with a fixed seed
        shadergen generate my_grammar.bnf --max-depth 8 --seed 42
    """
    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    log_level = logging.WARNING if quiet else (logging.DEBUG if debug else config.logging.level)
    setup_logging(level=log_level, log_file=config.logging.log_file)

    # Store context for subcommands
    ctx.ensure_object(dict)
    ctx.obj['config'] = config


cli.add_command(check.check)
cli.add_command(generate.generate)
