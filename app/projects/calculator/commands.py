import click
from flask.cli import with_appcontext
from app.projects.calculator.core.engine import CalculatorError, INITIAL_STATE, apply_key
from app.projects.calculator.core.keys import normalize_key, split_keys
import logging

logger = logging.getLogger(__name__)

@click.group(name='calculator')
def calculator_cli():
    """Calculator project commands."""
    pass

def _tokens_from_args(keys):
    """Expand CLI arguments into engine tokens. Returns (tokens, bad_key)."""
    tokens = []
    for arg in keys:
        token = normalize_key(arg)
        if token is not None:
            tokens.append(token)
            continue
        for ch in split_keys(arg):
            token = normalize_key(ch)
            if token is None:
                return None, ch
            tokens.append(token)
    return tokens, None

@calculator_cli.command('run')
@click.argument('keys', nargs=-1, required=True)
@click.option('--trace', is_flag=True, help='Print the display after every key')
@with_appcontext
def run_command(keys, trace):
    """Press KEYS in order and print the display (e.g. flask calculator run 2+3x4=)."""
    tokens, bad_key = _tokens_from_args(keys)
    if bad_key is not None:
        raise click.BadParameter(f"Unknown key: {bad_key!r}", param_hint='KEYS')

    state = INITIAL_STATE
    for token in tokens:
        try:
            state, pulse = apply_key(state, token)
        except CalculatorError as e:
            logger.info("Calculator error on key %r: %s", token, e)
            click.echo(str(e), err=True)
            click.get_current_context().exit(1)
        if trace:
            marker = " *" if pulse else ""
            click.echo(f"{token:>5}  {state.display}{marker}")

    click.echo(state.display)

def init_app(app):
    """Register CLI commands with the app."""
    app.cli.add_command(calculator_cli)
