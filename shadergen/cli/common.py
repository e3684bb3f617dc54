"""Grammar loading and error reporting shared by the CLI commands."""

import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from ..core.grammar import Grammar, parse
from ..grammars import DEFAULT_GRAMMAR_PATH
from ..utils.exceptions import ParseFail, format_exception_chain
from ..utils.source import highlight_span

logger = logging.getLogger(__name__)


def read_grammar_source(grammar_file: Optional[str], configured_path: Optional[str]) -> Tuple[Path, str]:
    """The grammar named on the command line, else in the config, else the bundled one."""
    path = Path(grammar_file or configured_path or DEFAULT_GRAMMAR_PATH)
    if not path.is_file():
        raise click.FileError(str(path), hint="grammar file does not exist")
    try:
        return path, path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise click.FileError(str(path), hint=f"grammar file is not valid UTF-8 ({e.reason})") from e


def load_grammar(ctx: click.Context, grammar_file: Optional[str], strict: Optional[bool] = None) -> Grammar:
    """
    Read and parse a grammar, exiting with status 1 on a parse failure.

    The failure is printed with the offending source line highlighted.
    """
    config = ctx.obj['config']
    path, source = read_grammar_source(grammar_file, config.grammar.path)
    if strict is None:
        strict = config.grammar.strict

    logger.debug(f"Parsing grammar from {path} (strict={strict})")
    try:
        return parse(source, strict=strict)
    except ParseFail as e:
        click.secho(f"{path}: {e.message}", fg="red", err=True)
        highlighted = highlight_span(source, e.span)
        if highlighted:
            location = f"line {e.span.line + 1}, column {e.span.start + 1}"
            click.echo(f"{location}:\n{highlighted}", err=True)
        logger.debug(format_exception_chain(e))
        ctx.exit(1)
