import click

from ..common import load_grammar


@click.command()
@click.argument('grammar_file', required=False, type=click.Path(dir_okay=False))
@click.option('--strict/--no-strict', default=None,
              help='Require every reachable rule to have a depth-capped expansion.')
@click.pass_context
def check(ctx, grammar_file, strict):
    """Parse a grammar and summarise its rules."""
    grammar = load_grammar(ctx, grammar_file, strict)

    click.echo(f"Entry rule: {grammar.entry_rule}")
    reachable = set(grammar.reachable())
    for name, rule in grammar.rules.items():
        flags = []
        if rule.purely_terminal:
            flags.append("terminal")
        if rule.terminal_branches:
            targets = ", ".join(rule.branches[i].expr.rule for i in rule.terminal_branches)
            flags.append(f"caps via {targets}")
        elif not rule.purely_terminal:
            flags.append("no capped expansion")
        if name not in reachable:
            flags.append("unreachable")
        click.echo(f"  {name}: {len(rule.branches)} branch(es), weight {rule.total_weight} [{'; '.join(flags)}]")
    click.secho("Grammar OK", fg="green")
