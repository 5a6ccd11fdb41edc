"""CLI for the onionforge calculator.

Usage:
    python -m onionforge eval "3 + 4 * 2"        # Evaluate an expression
    python -m onionforge eval "(1 + 2) * 3" --rpn
    python -m onionforge eval -- "-1+2"          # "--" before a leading minus
    python -m onionforge keys 7 + 3 = - 4 =      # Replay keypad presses
    python -m onionforge repl                    # Interactive keypad session
    python -m onionforge bench -n 5000           # Engine micro-benchmark
    python -m onionforge diagnostics 7 + 3 =     # Session snapshot as JSON
"""

from __future__ import annotations

import json
from typing import Iterable, List, Optional

import typer
from rich.console import Console

from onionforge.benchmark import run_benchmark
from onionforge.config import CalculatorConfig, load_config
from onionforge.controller import CalculatorController
from onionforge.engine import ExpressionEngine
from onionforge.errors import CalculatorError
from onionforge.log import setup_logging
from onionforge.render import render_benchmark, render_display, render_history
from onionforge.state import CalculatorState, format_number

app = typer.Typer(
    name="onionforge",
    help="Local-only calculator: shunting-yard engine and keypad state machine",
    no_args_is_help=True,
)
console = Console(stderr=True)

_QUIT_WORDS = {"quit", "exit", "q"}


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging and load ONIONFORGE_* settings."""
    setup_logging(verbose, console=console)
    try:
        ctx.obj = load_config()
    except ValueError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(2)


def _config(ctx: typer.Context) -> CalculatorConfig:
    return ctx.obj if isinstance(ctx.obj, CalculatorConfig) else load_config()


def _new_controller(config: CalculatorConfig) -> CalculatorController:
    return CalculatorController(CalculatorState(ExpressionEngine(config), config))


def expand_keys(raw: Iterable[str], controller: CalculatorController) -> list[str]:
    """Split raw words into key names.

    Known key names ('Enter', 'clear', '7', ...) pass through; anything else
    is split into single characters, so '12' becomes '1', '2'.
    """
    known = set(controller.keys)
    keys: list[str] = []
    for word in raw:
        if word in known:
            keys.append(word)
        else:
            keys.extend(word)
    return keys


def _replay(controller: CalculatorController, keys: Iterable[str]) -> list[str]:
    """Send keys to the controller; return the ones it did not recognize."""
    return [key for key in expand_keys(keys, controller) if not controller.handle_key(key)]


@app.command("eval")
def cmd_eval(
    ctx: typer.Context,
    expression: str = typer.Argument(
        help="Expression, e.g. '3 + 4 * 2'. Put '--' first if it starts with '-'",
    ),
    rpn: bool = typer.Option(False, "--rpn", help="Print the postfix (RPN) form instead of the result"),
) -> None:
    """Evaluate an arithmetic expression."""
    config = _config(ctx)
    engine = ExpressionEngine(config)
    try:
        if rpn:
            typer.echo(engine.format_rpn(engine.to_rpn(expression)))
        else:
            typer.echo(format_number(engine.evaluate(expression), config))
    except CalculatorError as e:
        console.print(f"[red]Error ({e.kind.value}):[/red] {e.message}")
        raise typer.Exit(1)


@app.command("keys")
def cmd_keys(
    ctx: typer.Context,
    keys: List[str] = typer.Argument(help="Key presses, e.g. 7 + 3 = (Enter, Escape, Backspace also accepted)"),
    history: bool = typer.Option(True, "--history/--no-history", help="Show the history table"),
) -> None:
    """Replay key presses through a fresh calculator session."""
    controller = _new_controller(_config(ctx))
    unknown = _replay(controller, keys)
    if unknown:
        console.print(f"[yellow]Ignored unknown keys:[/yellow] {' '.join(unknown)}")

    render_display(controller, console)
    if history:
        render_history(controller.state.get_history(), console)
    if controller.state.is_error:
        raise typer.Exit(1)


@app.command("repl")
def cmd_repl(ctx: typer.Context) -> None:
    """Interactive keypad. Type keys separated by spaces; 'history' or 'quit'."""
    controller = _new_controller(_config(ctx))
    render_display(controller, console)

    while True:
        try:
            line = console.input("[bold]> [/bold]").strip()
        except (EOFError, KeyboardInterrupt):
            console.print()
            break
        if not line:
            continue
        if line.lower() in _QUIT_WORDS:
            break
        if line.lower() == "history":
            render_history(controller.state.get_history(), console)
            continue

        unknown = _replay(controller, line.split())
        if unknown:
            console.print(f"[yellow]Ignored unknown keys:[/yellow] {' '.join(unknown)}")
        render_display(controller, console)


@app.command("bench")
def cmd_bench(
    ctx: typer.Context,
    iterations: int = typer.Option(1000, "--iterations", "-n", help="Number of evaluations"),
) -> None:
    """Time the expression engine."""
    try:
        result = run_benchmark(iterations, ExpressionEngine(_config(ctx)))
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    render_benchmark(result, console)


@app.command("diagnostics")
def cmd_diagnostics(
    ctx: typer.Context,
    keys: Optional[List[str]] = typer.Argument(None, help="Optional key presses to replay first"),
) -> None:
    """Print a non-identifying session snapshot as JSON."""
    controller = _new_controller(_config(ctx))
    if keys:
        _replay(controller, keys)
    typer.echo(json.dumps(controller.diagnostics().to_dict(), indent=2))


if __name__ == "__main__":
    app()
