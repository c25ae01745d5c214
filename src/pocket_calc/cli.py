import json
import logging
import re
from typing import List, Tuple

import click
from dotenv import load_dotenv

from .config import CalculatorConfig
from .engine import CalculatorEngine
from .keymap import press_key
from .logging_config import setup_logging
from .scheduler import ManualClock, Scheduler

# "[memory-add]" names an action directly; anything else is one key
_TOKEN_RE = re.compile(r"\[([a-z-]+)\]|(.)", re.DOTALL)


def tokenize(sequence: str) -> List[Tuple[str, str]]:
    """Split a key sequence into ("action", name) and ("key", char) tokens."""
    tokens: List[Tuple[str, str]] = []
    for match in _TOKEN_RE.finditer(sequence):
        action, key = match.groups()
        if action:
            tokens.append(("action", action))
        elif key.strip():
            tokens.append(("key", key))
    return tokens


def replay(engine: CalculatorEngine, sequence: str) -> None:
    for kind, token in tokenize(sequence):
        if kind == "action":
            engine.dispatch(token)
        else:
            press_key(engine, token)


@click.group()
@click.option("--log-level", default="WARNING", show_default=True, help="Logging level")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Also log to this file")
def main(log_level: str, log_file: str) -> None:
    """Keypad calculator: web server and key-sequence replay."""
    load_dotenv()
    setup_logging(getattr(logging, log_level.upper(), logging.WARNING), log_file)


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Host to bind to")
@click.option("--port", default=5002, show_default=True, help="Port to bind to")
@click.option("--debug", is_flag=True, default=False, help="Run Flask in debug mode")
def serve(host: str, port: int, debug: bool) -> None:
    """Run the calculator web server."""
    from .webapp import create_app

    app = create_app(CalculatorConfig.from_env())
    click.echo(f"Access at: http://{host}:{port}")
    app.run(host=host, port=port, debug=debug)


@main.command()
@click.argument("sequence")
@click.option("--wait-ms", default=0, show_default=True, help="Let this much time pass after the last key")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the full display as JSON")
def keys(sequence: str, wait_ms: int, as_json: bool) -> None:
    """
    Replay SEQUENCE through a fresh calculator and print the display.

    Each character is a key press ("12+3=", "c", "%"); bracketed names
    such as [square-root] or [memory-add] trigger an action directly.
    """
    clock = ManualClock()
    engine = CalculatorEngine(CalculatorConfig.from_env(), Scheduler(clock))
    try:
        replay(engine, sequence)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="SEQUENCE") from e

    if wait_ms:
        clock.advance(wait_ms)
        engine.tick()

    display = engine.display
    if as_json:
        click.echo(json.dumps(display.to_dict(), ensure_ascii=False))
    else:
        if display.trace:
            click.echo(display.trace)
        click.echo(display.primary)


if __name__ == "__main__":  # pragma: no cover
    main()
