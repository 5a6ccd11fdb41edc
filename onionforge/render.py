"""Rich rendering for calculator sessions — display panel, history and benchmark tables."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from onionforge.controller import CalculatorController
from onionforge.models import BenchmarkResult, HistoryEntry


def _fmt_ms(ms: float) -> str:
    """Format milliseconds, switching to µs below 1ms."""
    if ms < 1:
        return f"{ms * 1000:.1f}µs"
    return f"{ms:.2f}ms"


def render_display(controller: CalculatorController, console: Console) -> None:
    """Render the display value with the last expression and status line."""
    state = controller.state
    value = controller.display()
    style = "bold red" if state.is_error else "bold green"

    subtitle = controller.history_line()
    if state.pending_operator:
        subtitle = f"{state.previous_input} {state.pending_operator}"

    console.print(
        Panel(
            f"[{style}]{value:>{state.config.max_display_length}}[/{style}]",
            title="onionforge",
            subtitle=subtitle or None,
            expand=False,
        )
    )
    status_style = "red" if controller.last_error else "dim"
    console.print(f"[{status_style}]{controller.status}[/{status_style}]")


def render_history(entries: list[HistoryEntry], console: Console) -> None:
    """Render calculation history, oldest first."""
    if not entries:
        console.print("[yellow]No calculations yet.[/yellow]")
        return

    table = Table(title="History", show_header=True, header_style="bold")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Expression", style="cyan", min_width=12)
    table.add_column("Result", style="green", justify="right")
    table.add_column("Time (UTC)", style="dim")

    for i, entry in enumerate(entries, start=1):
        table.add_row(str(i), entry.expression, str(entry.result), entry.timestamp)

    console.print()
    console.print(table)
    console.print()


def render_benchmark(result: BenchmarkResult, console: Console) -> None:
    """Render benchmark timings."""
    table = Table(title="Engine benchmark", show_header=True, header_style="bold")
    table.add_column("Metric", style="dim", min_width=12)
    table.add_column("Value", justify="right")
    table.add_row("Iterations", str(result.iterations))
    table.add_row("Total", _fmt_ms(result.total_ms))
    table.add_row("Average", _fmt_ms(result.average_ms))

    console.print()
    console.print(table)
    console.print()
